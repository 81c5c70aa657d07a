"""
Tests for the projection accumulator and CSV export.
"""

import pandas as pd
import pytest

from conftest import injury, make_team
from nba_projection.engine import GameAnalyzer, GameInput, TeamGameInput
from nba_projection.export import ProjectionAccumulator
from nba_projection.models import InjuryStatus


@pytest.fixture
def projection(knicks_roster, boston_roster):
    game = GameInput(
        away=TeamGameInput(profile=make_team('NYK', 'New York Knicks'), players=knicks_roster),
        home=TeamGameInput(profile=make_team('BOS', 'Boston Celtics'), players=boston_roster),
        injuries=[
            injury('BOS', 'Jayson Tatum', InjuryStatus.OUT),
            injury('NYK', 'Josh Hart', InjuryStatus.AVAILABLE),
        ],
        game_date='2025-01-15',
    )
    return GameAnalyzer().analyze_game(game)


class TestAccumulator:

    def test_empty(self):
        accumulator = ProjectionAccumulator()
        assert len(accumulator) == 0
        frames = accumulator.to_frames()
        assert all(frame.empty for frame in frames.values())

    def test_rows_per_game(self, projection):
        accumulator = ProjectionAccumulator()
        accumulator.add_game(projection)
        assert len(accumulator) == 1
        assert len(accumulator.player_rows) == len(projection.players)
        assert len(accumulator.strategy_rows) == 1

        game = accumulator.game_rows[0]
        assert game['matchup'] == 'NYK @ BOS'
        assert game['total'] == projection.total
        assert game['favorite'] == projection.favorite
        # Available players are not counted as injuries
        assert game['home_injuries'] == 1
        assert game['away_injuries'] == 0

    def test_player_rows_carry_spread(self, projection):
        accumulator = ProjectionAccumulator()
        accumulator.add_game(projection)
        row = accumulator.player_rows[0]
        assert row['points_std_dev'] is not None
        assert row['points_low_68'] <= row['points'] <= row['points_high_68']

    def test_strategy_without_battles(self, projection):
        accumulator = ProjectionAccumulator()
        accumulator.add_game(projection)
        row = accumulator.strategy_rows[0]
        assert row['battle_count'] == 0
        assert row['battle_1'] == ''
        assert row['analysis_confidence'] == 'Conservative'

    def test_summary_frame(self, projection):
        accumulator = ProjectionAccumulator()
        accumulator.add_game(projection)
        summary = accumulator.to_frames()['summary']
        expected = f"{projection.favorite} by {abs(projection.margin):.1f}"
        assert summary.loc[0, 'prediction'] == expected

    def test_clear(self, projection):
        accumulator = ProjectionAccumulator()
        accumulator.add_game(projection)
        accumulator.clear()
        assert len(accumulator) == 0
        assert accumulator.player_rows == []


class TestWriteCsv:

    def test_files_written(self, projection, tmp_path):
        accumulator = ProjectionAccumulator()
        accumulator.add_game(projection)
        paths = accumulator.write_csv(tmp_path / 'out', '2025-01-15')
        assert sorted(p.name for p in paths) == [
            '2025-01-15_games.csv',
            '2025-01-15_players.csv',
            '2025-01-15_strategy.csv',
            '2025-01-15_summary.csv',
        ]
        players = pd.read_csv(tmp_path / 'out' / '2025-01-15_players.csv')
        assert len(players) == len(projection.players)
        assert 'Jayson Tatum' not in set(players['player'])

    def test_nothing_written_when_empty(self, tmp_path):
        assert ProjectionAccumulator().write_csv(tmp_path, '2025-01-15') == []
