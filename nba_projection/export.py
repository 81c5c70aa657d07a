"""
Projection Export

ProjectionAccumulator collects one row set per analyzed game (games,
players, strategy) and turns them into pandas DataFrames. The caller owns
the accumulator and decides when to flush it to disk.

Files written by write_csv:
    {date}_games.csv     one row per game
    {date}_players.csv   one row per projected player
    {date}_strategy.csv  one row per game script
    {date}_summary.csv   quick overview per game
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Union

import pandas as pd

from .models import GameProjection, InjuryStatus

logger = logging.getLogger(__name__)


class ProjectionAccumulator:
    """Row collector for a slate of game projections."""

    def __init__(self):
        self.game_rows: List[Dict] = []
        self.player_rows: List[Dict] = []
        self.strategy_rows: List[Dict] = []

    def __len__(self) -> int:
        return len(self.game_rows)

    def add_game(self, projection: GameProjection) -> None:
        """Record every row for one analyzed game."""
        timestamp = datetime.now().isoformat(timespec='seconds')
        away, home = projection.away, projection.home
        injuries = [i for i in projection.injuries if i.status != InjuryStatus.AVAILABLE]

        self.game_rows.append({
            'date': projection.game_date,
            'matchup': projection.matchup,
            'away': away.abbreviation,
            'home': home.abbreviation,
            'away_score': away.score,
            'home_score': home.score,
            'total': projection.total,
            'margin': round(abs(projection.margin), 1),
            'favorite': projection.favorite,
            'away_win_pct': round(projection.away_win_probability * 100, 1),
            'home_win_pct': round(projection.home_win_probability * 100, 1),
            'away_range_68': f"{away.projection.ci68[0]:.0f}-{away.projection.ci68[1]:.0f}",
            'home_range_68': f"{home.projection.ci68[0]:.0f}-{home.projection.ci68[1]:.0f}",
            'pace': round(projection.pace.pace, 1),
            'pace_confidence': projection.pace.confidence,
            'confidence': projection.confidence.level,
            'confidence_stars': projection.confidence.stars,
            'home_advantage': round(projection.home_advantage, 2),
            'away_injuries': sum(1 for i in injuries if i.team == away.abbreviation),
            'home_injuries': sum(1 for i in injuries if i.team == home.abbreviation),
            'last_updated': timestamp,
        })

        for player in projection.players:
            spread = player.projection
            self.player_rows.append({
                'date': projection.game_date,
                'matchup': projection.matchup,
                'team': player.team,
                'player': player.player_name,
                'position': player.position,
                'tier': player.tier.value,
                'is_home': player.is_home,
                'base_points': round(player.base_points, 1),
                'base_rebounds': round(player.base_rebounds, 1),
                'base_assists': round(player.base_assists, 1),
                'base_three_pointers': round(player.base_three_pointers, 1),
                'minutes': round(player.minutes, 1),
                'points': round(player.points, 1),
                'rebounds': round(player.rebounds, 1),
                'assists': round(player.assists, 1),
                'three_pointers': round(player.three_pointers, 1),
                'points_low_68': spread.ci68[0] if spread else None,
                'points_high_68': spread.ci68[1] if spread else None,
                'points_std_dev': spread.std_dev if spread else None,
                'enhancement_pct': round(player.total_enhancement_pct, 1),
                'game_script_boost': player.game_script_boost,
                'defense_multiplier': round(player.defense_multiplier, 3),
                'injury_adjusted': player.injury_adjusted,
                'uncertainty': round(player.uncertainty, 3),
                'usage_pct': round(player.usage_pct, 1),
                'games_played': player.games_played,
                'reasons': '; '.join(player.reasons),
                'last_updated': timestamp,
            })

        script = projection.game_script
        battles = script.battles
        row = {
            'date': projection.game_date,
            'matchup': projection.matchup,
            'away': away.abbreviation,
            'home': home.abbreviation,
        }
        for number in (1, 2):
            battle = battles[number - 1] if len(battles) >= number else None
            row[f'battle_{number}'] = battle.type.value if battle else ''
            row[f'battle_{number}_winner'] = battle.advantage_team if battle else ''
            row[f'battle_{number}_confidence'] = battle.confidence if battle else ''
        row.update({
            'away_strategy': '; '.join(i for i in script.insights if away.abbreviation in i),
            'home_strategy': '; '.join(i for i in script.insights if home.abbreviation in i),
            'analysis_confidence': script.confidence,
            'battle_count': len(battles),
            'last_updated': timestamp,
        })
        self.strategy_rows.append(row)

    def to_frames(self) -> Dict[str, pd.DataFrame]:
        """DataFrames keyed by games/players/strategy/summary."""
        games = pd.DataFrame(self.game_rows)

        if games.empty:
            summary = pd.DataFrame()
        else:
            summary = pd.DataFrame({
                'date': games['date'],
                'matchup': games['matchup'],
                'prediction': games['favorite'] + ' by ' + games['margin'].map(lambda m: f"{m:.1f}"),
                'total': games['total'],
                'confidence': games['confidence'],
                'away_injuries': games['away_injuries'],
                'home_injuries': games['home_injuries'],
            })

        return {
            'games': games,
            'players': pd.DataFrame(self.player_rows),
            'strategy': pd.DataFrame(self.strategy_rows),
            'summary': summary,
        }

    def write_csv(self, directory: Union[str, Path], date: str) -> List[Path]:
        """
        Write every non-empty frame as {date}_{name}.csv.

        Returns:
            Paths written
        """
        output_dir = Path(directory)
        output_dir.mkdir(parents=True, exist_ok=True)

        written = []
        for name, frame in self.to_frames().items():
            if frame.empty:
                continue
            path = output_dir / f"{date}_{name}.csv"
            frame.to_csv(path, index=False)
            written.append(path)
            logger.info(f"Wrote {len(frame)} rows to {path}")

        return written

    def clear(self) -> None:
        self.game_rows.clear()
        self.player_rows.clear()
        self.strategy_rows.clear()
