"""
NBA Data Provider

Wraps nba_api with caching and builds the engine inputs for a game:
- Team general / advanced / opponent / misc stats (TeamStatProfile)
- Recent-form style profile and lineup rotation intelligence
- Player per-game stats, season baselines and recent game logs
- Schedule analysis (back-to-back, rest days)

League-wide frames are fetched once and sliced per team. Every nba_api
failure is logged and turned into an empty result; the engine then falls
back to league-average defaults.
"""

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from datetime import datetime
from typing import Any, Dict, List, Optional

import pandas as pd

from nba_api.stats.endpoints import (
    commonteamroster,
    leaguedashplayerstats,
    leaguedashteamstats,
    playergamelog,
    scoreboardv2,
    teamdashlineups,
    teamgamelog,
)
from nba_api.stats.static import teams

from .config import get_settings
from .engine import GameInput, TeamGameInput
from .lineups import analyze_rotation_patterns, units_from_frame
from .models import InjuryRecord, PlayerStatLine, ScheduleContext, TeamStatProfile

logger = logging.getLogger(__name__)

STYLE_LAST_N = 10
LINEUP_LAST_N = 10
ROTATION_SIZE = 12


class RateLimiter:
    """Rate limiter for nba_api calls. Safe to share between threads."""

    def __init__(self, min_interval: float = 0.6):
        self.min_interval = min_interval
        self.last_call = 0
        self._lock = threading.Lock()

    def wait(self):
        with self._lock:
            elapsed = time.time() - self.last_call
            if elapsed < self.min_interval:
                time.sleep(self.min_interval - elapsed)
            self.last_call = time.time()


def _row(df: pd.DataFrame, column: str, value: Any) -> Dict:
    """First row where column == value, as a dict ({} if none)."""
    if df is None or df.empty or column not in df.columns:
        return {}
    match = df[df[column] == value]
    if match.empty:
        return {}
    return match.iloc[0].to_dict()


def _rate(numerator: Optional[float], denominator: Optional[float]) -> Optional[float]:
    if numerator is None or not denominator:
        return None
    return numerator / denominator


class NBADataProvider:
    """
    Data provider for the projection engine.

    Provides:
    - Scheduled games for a date
    - Team profiles (stats, style, lineups, home/road records)
    - Player stat lines with recent form
    - Schedule context (back-to-back, rest)
    """

    # Cache TTLs (seconds)
    CACHE_TTL = {
        'player_gamelog': 3600,      # 1 hour
        'league_stats': 3600,        # 1 hour
        'team_stats': 21600,         # 6 hours
        'lineups': 21600,            # 6 hours
        'schedule': 3600,            # 1 hour
    }

    def __init__(self, season: Optional[str] = None, recent_games: Optional[int] = None):
        settings = get_settings()
        self.season = season or settings.season
        self.recent_games = recent_games or settings.recent_games
        self.rate_limiter = RateLimiter(min_interval=0.6)
        self._cache: Dict[str, Any] = {}
        self._cache_times: Dict[str, float] = {}

        self._teams_by_abbrev: Dict[str, Dict] = {}
        self._teams_by_id: Dict[int, Dict] = {}

        self._init_static_data()

    def _init_static_data(self):
        """Initialize static team lookups."""
        for team in teams.get_teams():
            self._teams_by_abbrev[team['abbreviation']] = team
            self._teams_by_id[team['id']] = team

        logger.info(f"Loaded {len(self._teams_by_abbrev)} teams")

    def _get_cached(self, key: str, ttl_type: str) -> Optional[Any]:
        """Get cached value if not expired."""
        if key in self._cache:
            age = time.time() - self._cache_times.get(key, 0)
            if age < self.CACHE_TTL.get(ttl_type, 3600):
                return self._cache[key]
        return None

    def _set_cached(self, key: str, value: Any):
        """Set cached value."""
        self._cache[key] = value
        self._cache_times[key] = time.time()

    # =========================================================================
    # TEAM LOOKUPS
    # =========================================================================

    def find_team(self, abbrev: str) -> Optional[Dict]:
        """Find team by abbreviation."""
        return self._teams_by_abbrev.get(abbrev.upper())

    def get_team_by_id(self, team_id: int) -> Optional[Dict]:
        """Get team by ID."""
        return self._teams_by_id.get(team_id)

    # =========================================================================
    # LEAGUE TEAM STATS
    # =========================================================================

    def get_team_stats(self, measure: str = 'Base', last_n: int = 0, location: str = '') -> pd.DataFrame:
        """
        League-wide per-game team stats.

        Args:
            measure: nba_api measure type (Base, Advanced, Opponent, Misc)
            last_n: Restrict to the last N games (0 = season)
            location: '', 'Home' or 'Road'

        Returns:
            DataFrame keyed by TEAM_ID (empty on failure)
        """
        cache_key = f"team_stats_{self.season}_{measure}_{last_n}_{location}"

        cached = self._get_cached(cache_key, 'team_stats')
        if cached is not None:
            return cached

        self.rate_limiter.wait()
        try:
            stats = leaguedashteamstats.LeagueDashTeamStats(
                season=self.season,
                per_mode_detailed='PerGame',
                measure_type_detailed_defense=measure,
                last_n_games=last_n,
                location_nullable=location,
            )
            df = stats.get_data_frames()[0]
            self._set_cached(cache_key, df)
            return df
        except Exception as e:
            logger.error(f"Error fetching {measure} team stats: {e}")
            return pd.DataFrame()

    def get_team_lineups(self, team_id: int) -> pd.DataFrame:
        """Five-man lineup combinations for a team over recent games."""
        cache_key = f"lineups_{team_id}_{self.season}"

        cached = self._get_cached(cache_key, 'lineups')
        if cached is not None:
            return cached

        self.rate_limiter.wait()
        try:
            dash = teamdashlineups.TeamDashLineups(
                team_id=team_id,
                season=self.season,
                group_quantity=5,
                last_n_games=LINEUP_LAST_N,
                per_mode_detailed='Totals',
            )
            frames = dash.get_data_frames()
            df = frames[1] if len(frames) > 1 else pd.DataFrame()
            self._set_cached(cache_key, df)
            return df
        except Exception as e:
            logger.error(f"Error fetching lineups for team {team_id}: {e}")
            return pd.DataFrame()

    def build_team_payload(self, team_id: int) -> Dict:
        """Team feed shape accepted by TeamStatProfile.from_dict."""
        base = _row(self.get_team_stats('Base'), 'TEAM_ID', team_id)
        advanced = _row(self.get_team_stats('Advanced'), 'TEAM_ID', team_id)
        opponent = _row(self.get_team_stats('Opponent'), 'TEAM_ID', team_id)
        misc = _row(self.get_team_stats('Misc'), 'TEAM_ID', team_id)
        home = _row(self.get_team_stats('Base', location='Home'), 'TEAM_ID', team_id)
        road = _row(self.get_team_stats('Base', location='Road'), 'TEAM_ID', team_id)

        if not base:
            logger.warning(f"No team stats for team {team_id}, using league defaults")

        payload = {
            'name': base.get('TEAM_NAME', ''),
            'general': {
                'gamesPlayed': base.get('GP'),
                'wins': base.get('W'),
                'losses': base.get('L'),
                'points': base.get('PTS'),
                'paintPts': misc.get('PTS_PAINT'),
                'oppPaintPts': misc.get('OPP_PTS_PAINT'),
                'threePointersMade': base.get('FG3M'),
                'fieldGoalsAttempted': base.get('FGA'),
                'fieldGoalsMade': base.get('FGM'),
                'oppThreePointPct': opponent.get('OPP_FG3_PCT'),
                'assists': base.get('AST'),
                'opponentTurnovers': opponent.get('OPP_TOV'),
                'opponentAssists': opponent.get('OPP_AST'),
                'turnovers': base.get('TOV'),
                'offensiveRebounds': base.get('OREB'),
                'defensiveRebounds': base.get('DREB'),
                'blocks': base.get('BLK'),
            },
            'advanced': {
                'offensiveRating': advanced.get('OFF_RATING'),
                'defensiveRating': advanced.get('DEF_RATING'),
                'pace': advanced.get('PACE'),
            },
        }
        if home:
            payload['homeRecord'] = {'wins': home.get('W'), 'losses': home.get('L')}
        if road:
            payload['awayRecord'] = {'wins': road.get('W'), 'losses': road.get('L')}

        style = self.build_style_payload(team_id)
        if style:
            payload['style'] = style

        return payload

    def build_style_payload(self, team_id: int) -> Optional[Dict]:
        """Recent-form style profile ({offensiveStyle, defensiveStyle})."""
        base = _row(self.get_team_stats('Base', last_n=STYLE_LAST_N), 'TEAM_ID', team_id)
        advanced = _row(self.get_team_stats('Advanced', last_n=STYLE_LAST_N), 'TEAM_ID', team_id)
        opponent = _row(self.get_team_stats('Opponent', last_n=STYLE_LAST_N), 'TEAM_ID', team_id)
        misc = _row(self.get_team_stats('Misc', last_n=STYLE_LAST_N), 'TEAM_ID', team_id)

        if not base or not advanced:
            return None

        return {
            'offensiveStyle': {
                'pace': advanced.get('PACE'),
                'shotSelection': {
                    'threePointRate': _rate(base.get('FG3A'), base.get('FGA')),
                },
                'ballMovement': {
                    'assistRate': _rate(base.get('AST'), base.get('FGM')),
                },
            },
            'defensiveStyle': {
                'opponentThreePointPct': opponent.get('OPP_FG3_PCT'),
                'pointsInPaintAgainst': misc.get('OPP_PTS_PAINT'),
            },
        }

    def get_team_profile(self, abbrev: str) -> TeamStatProfile:
        """Full TeamStatProfile for a team (league defaults on failure)."""
        team = self.find_team(abbrev)
        if not team:
            logger.warning(f"Team not found: {abbrev}")
            return TeamStatProfile(abbreviation=abbrev)

        payload = self.build_team_payload(team['id'])
        profile = TeamStatProfile.from_dict(payload, abbreviation=abbrev, name=team['full_name'])

        units = units_from_frame(self.get_team_lineups(team['id']))
        return replace(profile, lineups=analyze_rotation_patterns(units))

    # =========================================================================
    # PLAYERS
    # =========================================================================

    def get_player_stats(self, measure: str = 'Base', last_n: int = 0) -> pd.DataFrame:
        """League-wide per-game player stats."""
        cache_key = f"player_stats_{self.season}_{measure}_{last_n}"

        cached = self._get_cached(cache_key, 'league_stats')
        if cached is not None:
            return cached

        self.rate_limiter.wait()
        try:
            stats = leaguedashplayerstats.LeagueDashPlayerStats(
                season=self.season,
                per_mode_detailed='PerGame',
                measure_type_detailed_defense=measure,
                last_n_games=last_n,
            )
            df = stats.get_data_frames()[0]
            self._set_cached(cache_key, df)
            return df
        except Exception as e:
            logger.error(f"Error fetching {measure} player stats: {e}")
            return pd.DataFrame()

    def get_team_roster(self, team_id: int) -> pd.DataFrame:
        """Team roster (for listed positions)."""
        cache_key = f"roster_{team_id}_{self.season}"

        cached = self._get_cached(cache_key, 'team_stats')
        if cached is not None:
            return cached

        self.rate_limiter.wait()
        try:
            roster = commonteamroster.CommonTeamRoster(team_id=team_id, season=self.season)
            df = roster.get_data_frames()[0]
            self._set_cached(cache_key, df)
            return df
        except Exception as e:
            logger.error(f"Error fetching roster for team {team_id}: {e}")
            return pd.DataFrame()

    def get_player_gamelog(self, player_id: int, last_n: Optional[int] = None) -> pd.DataFrame:
        """
        Get player game log, most recent first.

        Args:
            player_id: NBA player ID
            last_n: Limit to last N games

        Returns:
            DataFrame with game-by-game stats
        """
        cache_key = f"gamelog_{player_id}_{self.season}"

        cached = self._get_cached(cache_key, 'player_gamelog')
        if cached is not None:
            df = cached
        else:
            self.rate_limiter.wait()
            try:
                gamelog = playergamelog.PlayerGameLog(
                    player_id=player_id,
                    season=self.season,
                    season_type_all_star='Regular Season'
                )
                df = gamelog.get_data_frames()[0]
                self._set_cached(cache_key, df)
            except Exception as e:
                logger.error(f"Error fetching gamelog for {player_id}: {e}")
                return pd.DataFrame()

        if last_n and len(df) > last_n:
            df = df.head(last_n)

        return df

    def _recent_form(self, player_id: int) -> Dict:
        """Recent points per game and minutes volatility."""
        df = self.get_player_gamelog(player_id, last_n=self.recent_games)
        if df.empty:
            return {}

        points = pd.to_numeric(df['PTS'], errors='coerce').dropna()
        minutes = pd.to_numeric(df['MIN'], errors='coerce').dropna()
        return {
            'recentGames': [{'points': float(p)} for p in points],
            'minutesVolatility': float(minutes.std(ddof=0)) if len(minutes) > 1 else 0.0,
        }

    def get_team_players(self, abbrev: str) -> List[PlayerStatLine]:
        """
        Stat lines for a team's rotation.

        Per-game averages cover the last `recent_games` games; season
        minutes and usage are attached as the role baseline.
        """
        team = self.find_team(abbrev)
        if not team:
            logger.warning(f"Team not found: {abbrev}")
            return []
        team_id = team['id']

        recent = self.get_player_stats('Base', last_n=self.recent_games)
        if recent.empty or 'TEAM_ID' not in recent.columns:
            logger.warning(f"No player stats available for {abbrev}")
            return []

        recent_adv = self.get_player_stats('Advanced', last_n=self.recent_games)
        season = self.get_player_stats('Base')
        season_adv = self.get_player_stats('Advanced')
        roster = self.get_team_roster(team_id)

        team_rows = recent[recent['TEAM_ID'] == team_id].sort_values('MIN', ascending=False)

        lines = []
        for rank, (_, row) in enumerate(team_rows.iterrows()):
            player_id = row['PLAYER_ID']
            usage = _row(recent_adv, 'PLAYER_ID', player_id).get('USG_PCT')
            season_row = _row(season, 'PLAYER_ID', player_id)
            season_usage = _row(season_adv, 'PLAYER_ID', player_id).get('USG_PCT')

            payload = {
                'playerName': row['PLAYER_NAME'],
                'teamAbbreviation': abbrev,
                'position': _row(roster, 'PLAYER_ID', player_id).get('POSITION', ''),
                'points': row.get('PTS'),
                'rebounds': row.get('REB'),
                'assists': row.get('AST'),
                'steals': row.get('STL'),
                'blocks': row.get('BLK'),
                'threePointersMade': row.get('FG3M'),
                'threePointersAttempted': row.get('FG3A'),
                'freeThrowsAttempted': row.get('FTA'),
                'fieldGoalPct': row.get('FG_PCT'),
                'minutes': row.get('MIN'),
                'gamesPlayed': season_row.get('GP', row.get('GP')),
                'usage': usage * 100 if usage is not None else None,
                'seasonAverages': {
                    'minutes': season_row.get('MIN'),
                    'usage': season_usage * 100 if season_usage is not None else None,
                },
            }
            # Game logs only for the rotation; the rest never reach projections
            if rank < ROTATION_SIZE:
                payload.update(self._recent_form(player_id))

            lines.append(PlayerStatLine.from_dict(payload))

        logger.info(f"Loaded {len(lines)} players for {abbrev}")
        return lines

    # =========================================================================
    # SCHEDULE ANALYSIS
    # =========================================================================

    def get_team_schedule(self, team_id: int) -> pd.DataFrame:
        """Get team's played games sorted by date."""
        cache_key = f"schedule_{team_id}_{self.season}"

        cached = self._get_cached(cache_key, 'schedule')
        if cached is not None:
            return cached

        self.rate_limiter.wait()
        try:
            team_log = teamgamelog.TeamGameLog(
                team_id=team_id,
                season=self.season
            )
            df = team_log.get_data_frames()[0]

            # Parse dates
            df['GAME_DATE_PARSED'] = pd.to_datetime(df['GAME_DATE'], format='%b %d, %Y')
            df = df.sort_values('GAME_DATE_PARSED')

            self._set_cached(cache_key, df)
            return df

        except Exception as e:
            logger.error(f"Error fetching schedule for team {team_id}: {e}")
            return pd.DataFrame()

    def get_schedule_context(self, abbrev: str, game_date: str) -> ScheduleContext:
        """
        Rest going into `game_date`.

        Rest days count full days off since the previous game (0 on a
        back-to-back). Without a previous game the team is treated as
        rested (3 days).
        """
        team = self.find_team(abbrev)
        if not team:
            return ScheduleContext()

        df = self.get_team_schedule(team['id'])
        if df.empty:
            return ScheduleContext()

        target = pd.to_datetime(game_date)
        previous = df[df['GAME_DATE_PARSED'] < target]
        if previous.empty:
            return ScheduleContext(rest_days=3)

        gap = (target - previous['GAME_DATE_PARSED'].iloc[-1]).days
        return ScheduleContext(back_to_back=gap <= 1, rest_days=max(0, gap - 1))

    # =========================================================================
    # GAMES
    # =========================================================================

    def get_todays_games(self, date: str = None) -> List[Dict]:
        """
        Get games for a specific date.

        Args:
            date: Date string (YYYY-MM-DD), defaults to today

        Returns:
            List of game dicts with home/away teams
        """
        if date is None:
            date = datetime.now().strftime('%Y-%m-%d')

        cache_key = f"games_{date}"
        cached = self._get_cached(cache_key, 'schedule')
        if cached is not None:
            return cached

        self.rate_limiter.wait()
        try:
            scoreboard = scoreboardv2.ScoreboardV2(game_date=date)
            df = scoreboard.get_data_frames()[0]

            games = []
            for _, row in df.iterrows():
                home_team = self.get_team_by_id(row['HOME_TEAM_ID'])
                away_team = self.get_team_by_id(row['VISITOR_TEAM_ID'])

                games.append({
                    'game_id': row['GAME_ID'],
                    'game_date': date,
                    'status': row['GAME_STATUS_TEXT'],
                    'home_team': home_team['abbreviation'] if home_team else 'UNK',
                    'away_team': away_team['abbreviation'] if away_team else 'UNK',
                    'home_team_id': row['HOME_TEAM_ID'],
                    'away_team_id': row['VISITOR_TEAM_ID'],
                })

            self._set_cached(cache_key, games)
            return games

        except Exception as e:
            logger.error(f"Error fetching games for {date}: {e}")
            return []

    def warm_league_frames(self):
        """
        Fetch every league-wide frame a game's team and player builds read.

        Called before the per-team work fans out so both sides slice the
        same cached frames instead of each requesting them.
        """
        for last_n in (0, STYLE_LAST_N):
            for measure in ('Base', 'Advanced', 'Opponent', 'Misc'):
                self.get_team_stats(measure, last_n=last_n)
        for location in ('Home', 'Road'):
            self.get_team_stats('Base', location=location)
        for last_n in (self.recent_games, 0):
            for measure in ('Base', 'Advanced'):
                self.get_player_stats(measure, last_n=last_n)

    def fetch_game_inputs(
        self,
        game: Dict,
        injuries: Optional[List[InjuryRecord]] = None,
        report_enhanced: bool = False,
    ) -> GameInput:
        """
        Fetch everything the analyzer needs for one game.

        Per-team fetches run concurrently and are joined before returning.
        """
        away, home = game['away_team'], game['home_team']
        game_date = game.get('game_date') or datetime.now().strftime('%Y-%m-%d')

        self.warm_league_frames()

        with ThreadPoolExecutor(max_workers=6) as pool:
            away_profile = pool.submit(self.get_team_profile, away)
            home_profile = pool.submit(self.get_team_profile, home)
            away_players = pool.submit(self.get_team_players, away)
            home_players = pool.submit(self.get_team_players, home)
            away_schedule = pool.submit(self.get_schedule_context, away, game_date)
            home_schedule = pool.submit(self.get_schedule_context, home, game_date)

            away_rest = away_schedule.result()
            home_rest = home_schedule.result()
            advantage = home_rest.rest_days - away_rest.rest_days

            return GameInput(
                away=TeamGameInput(
                    profile=away_profile.result(),
                    players=away_players.result(),
                    schedule=replace(away_rest, rest_advantage=float(-advantage)),
                ),
                home=TeamGameInput(
                    profile=home_profile.result(),
                    players=home_players.result(),
                    schedule=replace(home_rest, rest_advantage=float(advantage)),
                ),
                injuries=list(injuries or []),
                game_date=game_date,
                report_enhanced=report_enhanced,
            )


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

_provider: Optional[NBADataProvider] = None


def get_data_provider() -> NBADataProvider:
    """Get singleton data provider instance."""
    global _provider
    if _provider is None:
        _provider = NBADataProvider()
    return _provider
