"""
Tests for the nba_api data provider (endpoints patched, no network).
"""

from collections import Counter
from unittest.mock import MagicMock, patch

import pandas as pd
import pytest

from conftest import make_team
from nba_projection.data_provider import NBADataProvider, _rate, _row
from nba_projection.models import ScheduleContext, TeamStatProfile

TEAMS = [
    {'id': 1610612738, 'abbreviation': 'BOS', 'full_name': 'Boston Celtics'},
    {'id': 1610612752, 'abbreviation': 'NYK', 'full_name': 'New York Knicks'},
]
BOS_ID = 1610612738


@pytest.fixture
def provider():
    with patch('nba_projection.data_provider.teams.get_teams', return_value=TEAMS):
        yield NBADataProvider(season='2024-25', recent_games=5)


def _schedule(*dates):
    parsed = pd.to_datetime(list(dates))
    return pd.DataFrame({'GAME_DATE': list(dates), 'GAME_DATE_PARSED': parsed})


class TestHelpers:

    def test_row(self):
        df = pd.DataFrame([{'TEAM_ID': 1, 'PTS': 110.0}, {'TEAM_ID': 2, 'PTS': 115.0}])
        assert _row(df, 'TEAM_ID', 2)['PTS'] == 115.0
        assert _row(df, 'TEAM_ID', 3) == {}
        assert _row(pd.DataFrame(), 'TEAM_ID', 1) == {}

    def test_rate(self):
        assert _rate(36.0, 90.0) == pytest.approx(0.4)
        assert _rate(None, 90.0) is None
        assert _rate(36.0, 0) is None


class TestTeamLookups:

    def test_find_team(self, provider):
        assert provider.find_team('bos')['id'] == BOS_ID
        assert provider.find_team('XXX') is None
        assert provider.get_team_by_id(BOS_ID)['abbreviation'] == 'BOS'

    def test_unknown_team_gets_defaults(self, provider):
        profile = provider.get_team_profile('XXX')
        assert profile == TeamStatProfile(abbreviation='XXX')
        assert provider.get_team_players('XXX') == []


class TestTeamProfile:

    def test_style_needs_recent_stats(self, provider):
        with patch.object(provider, 'get_team_stats', return_value=pd.DataFrame()):
            assert provider.build_style_payload(BOS_ID) is None

    def test_profile_from_frames(self, provider):
        base = pd.DataFrame([{
            'TEAM_ID': BOS_ID, 'TEAM_NAME': 'Boston Celtics', 'GP': 40, 'W': 30, 'L': 10,
            'PTS': 118.0, 'FG3M': 17.0, 'FG3A': 45.0, 'FGA': 90.0, 'FGM': 43.0, 'AST': 26.0,
            'TOV': 12.0, 'OREB': 11.0, 'DREB': 35.0, 'BLK': 5.0,
        }])
        advanced = pd.DataFrame([{'TEAM_ID': BOS_ID, 'OFF_RATING': 121.0, 'DEF_RATING': 110.0, 'PACE': 98.5}])

        def fake_stats(measure='Base', last_n=0, location=''):
            if measure == 'Advanced':
                return advanced
            if measure == 'Base' and not location:
                return base
            return pd.DataFrame()

        with patch.object(provider, 'get_team_stats', side_effect=fake_stats), \
                patch.object(provider, 'get_team_lineups', return_value=pd.DataFrame()):
            profile = provider.get_team_profile('BOS')

        assert profile.name == 'Boston Celtics'
        assert profile.general.wins == 30
        assert profile.general.games_played == 40
        assert profile.general.points == 118.0
        assert profile.advanced.offensive_rating == 121.0
        assert profile.advanced.pace == 98.5
        assert profile.home_record is None
        assert profile.lineups is None
        assert profile.style.three_point_rate == pytest.approx(0.5)
        assert profile.style.assist_rate == pytest.approx(26.0 / 43.0)
        # Opponent and misc frames missing: league defaults
        assert profile.general.opp_three_point_pct == 0.36
        assert profile.general.opp_paint_pts == 48.0


class TestPlayers:

    def test_team_players(self, provider):
        recent = pd.DataFrame([
            {'TEAM_ID': BOS_ID, 'PLAYER_ID': 2, 'PLAYER_NAME': 'Jaylen Brown', 'PTS': 23.0, 'REB': 5.0,
             'AST': 3.5, 'STL': 1.0, 'BLK': 0.4, 'FG3M': 2.0, 'FG3A': 6.0, 'FTA': 5.0, 'FG_PCT': 0.48,
             'MIN': 34.0, 'GP': 5},
            {'TEAM_ID': BOS_ID, 'PLAYER_ID': 1, 'PLAYER_NAME': 'Jayson Tatum', 'PTS': 27.0, 'REB': 8.0,
             'AST': 5.0, 'STL': 1.0, 'BLK': 0.5, 'FG3M': 3.0, 'FG3A': 8.0, 'FTA': 6.0, 'FG_PCT': 0.46,
             'MIN': 36.0, 'GP': 5},
            {'TEAM_ID': 1610612752, 'PLAYER_ID': 3, 'PLAYER_NAME': 'Jalen Brunson', 'PTS': 26.0,
             'MIN': 35.0, 'GP': 5},
        ])
        frames = {
            ('Base', 5): recent,
            ('Advanced', 5): pd.DataFrame([{'PLAYER_ID': 1, 'USG_PCT': 0.30}]),
            ('Base', 0): pd.DataFrame([{'PLAYER_ID': 1, 'GP': 40, 'MIN': 35.0}]),
            ('Advanced', 0): pd.DataFrame([{'PLAYER_ID': 1, 'USG_PCT': 0.29}]),
        }
        gamelog = pd.DataFrame({'PTS': [30, 25, 20], 'MIN': [36, 34, 38]})

        with patch.object(provider, 'get_player_stats', side_effect=lambda m='Base', last_n=0: frames[(m, last_n)]), \
                patch.object(provider, 'get_team_roster',
                             return_value=pd.DataFrame([{'PLAYER_ID': 1, 'POSITION': 'F'}])), \
                patch.object(provider, 'get_player_gamelog', return_value=gamelog):
            players = provider.get_team_players('BOS')

        assert [p.player_name for p in players] == ['Jayson Tatum', 'Jaylen Brown']
        tatum, brown = players
        assert tatum.team == 'BOS'
        assert tatum.position == 'F'
        assert tatum.usage_pct == pytest.approx(30.0)
        assert tatum.season_usage_pct == pytest.approx(29.0)
        assert tatum.season_minutes == 35.0
        assert tatum.games_played == 40
        assert tatum.recent_games == (30.0, 25.0, 20.0)
        assert tatum.minutes_volatility == pytest.approx((8 / 3) ** 0.5)
        assert brown.position == ''
        assert brown.usage_pct == 0.0
        assert brown.season_minutes is None
        assert brown.games_played == 5

    def test_no_player_stats(self, provider):
        with patch.object(provider, 'get_player_stats', return_value=pd.DataFrame()):
            assert provider.get_team_players('BOS') == []


class TestSchedule:

    def test_back_to_back(self, provider):
        with patch.object(provider, 'get_team_schedule', return_value=_schedule('2025-01-12', '2025-01-14')):
            context = provider.get_schedule_context('BOS', '2025-01-15')
        assert context.back_to_back
        assert context.rest_days == 0

    def test_rest_days(self, provider):
        with patch.object(provider, 'get_team_schedule', return_value=_schedule('2025-01-12')):
            context = provider.get_schedule_context('BOS', '2025-01-15')
        assert not context.back_to_back
        assert context.rest_days == 2

    def test_later_games_ignored(self, provider):
        with patch.object(provider, 'get_team_schedule', return_value=_schedule('2025-01-15', '2025-01-17')):
            assert provider.get_schedule_context('BOS', '2025-01-15') == ScheduleContext(rest_days=3)

    def test_no_schedule(self, provider):
        with patch.object(provider, 'get_team_schedule', return_value=pd.DataFrame()):
            assert provider.get_schedule_context('BOS', '2025-01-15') == ScheduleContext()


class TestGameInputs:

    def test_rest_advantage_is_relative(self, provider):
        rest = {
            'NYK': ScheduleContext(back_to_back=True, rest_days=0),
            'BOS': ScheduleContext(rest_days=2),
        }
        game = {'away_team': 'NYK', 'home_team': 'BOS', 'game_date': '2025-01-15'}

        with patch.object(provider, 'warm_league_frames'), \
                patch.object(provider, 'get_team_profile', side_effect=lambda abbrev: make_team(abbrev)), \
                patch.object(provider, 'get_team_players', return_value=[]), \
                patch.object(provider, 'get_schedule_context', side_effect=lambda abbrev, _: rest[abbrev]):
            inputs = provider.fetch_game_inputs(game, report_enhanced=True)

        assert inputs.away.abbreviation == 'NYK'
        assert inputs.home.abbreviation == 'BOS'
        assert inputs.home.schedule.rest_advantage == 2.0
        assert inputs.away.schedule.rest_advantage == -2.0
        assert inputs.away.schedule.back_to_back
        assert inputs.game_date == '2025-01-15'
        assert inputs.report_enhanced
        assert inputs.injuries == []

    def test_league_frames_fetched_once_per_game(self, provider):
        provider.rate_limiter.min_interval = 0
        endpoint = MagicMock()
        endpoint.return_value.get_data_frames.return_value = [pd.DataFrame()]
        player_endpoint = MagicMock()
        player_endpoint.return_value.get_data_frames.return_value = [pd.DataFrame()]
        game = {'away_team': 'NYK', 'home_team': 'BOS', 'game_date': '2025-01-15'}

        with patch('nba_projection.data_provider.leaguedashteamstats.LeagueDashTeamStats', endpoint), \
                patch('nba_projection.data_provider.leaguedashplayerstats.LeagueDashPlayerStats', player_endpoint), \
                patch.object(provider, 'get_team_lineups', return_value=pd.DataFrame()), \
                patch.object(provider, 'get_schedule_context', return_value=ScheduleContext()):
            provider.fetch_game_inputs(game)

        team_frames = Counter(
            (c.kwargs['measure_type_detailed_defense'], c.kwargs['last_n_games'], c.kwargs['location_nullable'])
            for c in endpoint.call_args_list
        )
        assert len(team_frames) == 10
        assert set(team_frames.values()) == {1}
        assert ('Opponent', 10, '') in team_frames
        assert ('Base', 0, 'Road') in team_frames

        player_frames = Counter(
            (c.kwargs['measure_type_detailed_defense'], c.kwargs['last_n_games'])
            for c in player_endpoint.call_args_list
        )
        assert player_frames == Counter({('Base', 5): 1, ('Advanced', 5): 1, ('Base', 0): 1, ('Advanced', 0): 1})

    def test_warm_league_frames_requests_every_league_frame(self, provider):
        with patch.object(provider, 'get_team_stats') as team_stats, \
                patch.object(provider, 'get_player_stats') as player_stats:
            provider.warm_league_frames()
        assert team_stats.call_count == 10
        player_stats.assert_any_call('Base', last_n=5)
        player_stats.assert_any_call('Advanced', last_n=0)
        assert player_stats.call_count == 4
