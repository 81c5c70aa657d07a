"""
NBA Projection Engine Configuration

All magic numbers, thresholds and weights in one place, plus the handful of
runtime settings that are read from the environment (.env.local / .env).

Every weight here is a fixed, hand-chosen constant. Nothing is fitted.
"""

import os
import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, List, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

for _env_path in ['.env.local', '.env']:
    if os.path.exists(_env_path):
        load_dotenv(_env_path)
        break


# =============================================================================
# ENHANCEMENT COMPOSER
# =============================================================================

ENHANCEMENT_WEIGHTS = MappingProxyType({
    'MAX_MULTIPLIER': 1.20,             # Maximum 20% total boost per stat
    'PACE_ADVANTAGE_THRESHOLD': 3,
    'THREE_POINT_RATE_THRESHOLD': 0.40,
    'THREE_POINT_DEFENSE_THRESHOLD': 0.37,
    'BALL_MOVEMENT_THRESHOLD': 0.60,
    'PAINT_FREQUENCY_THRESHOLD': 0.35,
    'PAINT_DEFENSE_THRESHOLD': 42,
    'TRANSITION_FREQUENCY_THRESHOLD': 0.18,
    'TRANSITION_DEFENSE_THRESHOLD': 0.50,
    'DOMINANT_LINEUP_PLUS_MINUS': 15,
    'STABLE_ROTATION_CONFIDENCE': 0.90,
})


# =============================================================================
# IMPACT & TIERS
# =============================================================================

IMPACT_SCORE_WEIGHTS = MappingProxyType({
    'points': 1.0,
    'assists': 1.5,
    'rebounds': 1.2,
    'steals': 2.0,
    'blocks': 2.0,
})

IMPACT_SCORE_THRESHOLDS = MappingProxyType({
    'Superstar': 40,
    'Star': 25,
    'Key Role': 15,
})


# =============================================================================
# INJURIES
# =============================================================================

@dataclass(frozen=True)
class StatusImpactEntry:
    """Play probability and on-court effectiveness for an injury status."""
    play_probability: float
    effectiveness: float
    description: str


INJURY_STATUS_IMPACTS: Dict[str, StatusImpactEntry] = MappingProxyType({
    'out': StatusImpactEntry(0.0, 0.0, 'Will not play'),
    'doubtful': StatusImpactEntry(0.20, 0.60, '20% plays, limited if active'),
    'questionable': StatusImpactEntry(0.65, 0.75, '65% plays, may be limited'),
    'probable': StatusImpactEntry(0.90, 0.95, '90% plays, near full effectiveness'),
})

FULL_AVAILABILITY = StatusImpactEntry(1.0, 1.0, 'Full availability')

INJURY_BOOST_MULTIPLIERS = MappingProxyType({
    'SUPERSTAR_OUT': 0.20,
    'STAR_OUT': 0.15,
    'KEY_ROLE_OUT': 0.08,
    'SUPERSTAR_RETURN': -0.08,
    'STAR_RETURN': -0.05,
    'KEY_ROLE_RETURN': -0.03,
})

# Teammate scaling when the uncertain star ends up playing
STAR_PLAYS_BOOST = MappingProxyType({
    'points': 1.03,
    'assists': 1.03,
    'rebounds': 1.02,
})
STAR_SITS_REBOUND_SCALE = 0.8

# Games played before the role-elevation path is used
ADVANCED_INJURY_MIN_GAMES = 10


# =============================================================================
# GAME SCRIPT
# =============================================================================

GAME_SCRIPT_THRESHOLDS = MappingProxyType({
    'PAINT_DIFFERENTIAL_MEDIUM': 5.0,
    'PAINT_DIFFERENTIAL_HIGH': 8.0,
    'PACE_DIFFERENTIAL_MEDIUM': 4.0,
    'PACE_DIFFERENTIAL_HIGH': 6.0,
    'THREE_POINT_DIFFERENTIAL_MEDIUM': 0.04,
    'THREE_POINT_DIFFERENTIAL_HIGH': 0.06,
    'BALL_MOVEMENT_ASSIST_RATE': 0.65,
    'BALL_MOVEMENT_OPP_TURNOVERS': 13,
    'STYLE_THREE_RATE': 0.42,
    'STYLE_OPP_THREE_PCT': 0.37,
})

# Additive point boosts for individual players
GAME_SCRIPT_ADJUSTMENTS = MappingProxyType({
    'INTERIOR_HIGH': 3.0,
    'INTERIOR_MEDIUM': 1.5,
    'PERIMETER_HIGH': 2.5,
    'PERIMETER_MEDIUM': 1.2,
    'TEMPO_HIGH': 2.0,
    'TEMPO_MEDIUM': 1.0,
})

# Team efficiency bumps (fractions) and tempo possession bumps
GAME_SCRIPT_EFFICIENCY = MappingProxyType({
    'INTERIOR_HIGH': 0.03,
    'INTERIOR_MEDIUM': 0.015,
    'PERIMETER_HIGH': 0.025,
    'PERIMETER_MEDIUM': 0.012,
    'TEMPO_HIGH': 0.01,
    'TEMPO_MEDIUM': 0.005,
    'TEMPO_POSSESSIONS_HIGH': 2.0,
    'TEMPO_POSSESSIONS_MEDIUM': 1.0,
})


# =============================================================================
# PACE & POSSESSIONS
# =============================================================================

PACE_MODEL = MappingProxyType({
    'LEAGUE_AVERAGE': 100.0,
    'HOME_WEIGHT': 0.55,
    'AWAY_WEIGHT': 0.45,
    'HOME_CONTROL_FACTOR': 0.3,
    'HOME_CONTROL_CAP': 1.5,
    'STYLE_WEIGHT': 0.3,
    'LINEUP_CLASH_THRESHOLD': 3.0,
    'LINEUP_CLASH_FACTOR': 0.2,
    'AWAY_LINEUP_CONTROL': 0.5,
    'BACK_TO_BACK': -2.0,
    'OVERTIME_LIKELY': -1.5,
    'REST_PER_DAY': 0.5,
    'MAX_REST_DAYS': 4,
})

POSSESSION_MODEL = MappingProxyType({
    'TURNOVER_WEIGHT': 0.4,       # Each extra turnover = 0.4 possession swing
    'OREB_WEIGHT': 0.35,
    'OPP_DREB_SHARE': 0.25,
    'DEFENSIVE_EXPONENT': 0.7,    # Non-linear defense, fixed design constant
    'NBA_AVERAGE_PPP': 1.10,
    'RATING_BASELINE': 110.0,
    'MIN_PACE': 85.0,
    'MAX_PACE': 115.0,
})

SCHEDULE_ADJUSTMENTS = MappingProxyType({
    'BACK_TO_BACK_POSSESSIONS': -1.5,
    'BACK_TO_BACK_EFFICIENCY': 0.97,
    'REST_POSSESSIONS_PER_DAY': 0.3,
    'REST_EFFICIENCY_PER_DAY': 0.005,
    'MAX_REST_EFFICIENCY_BOOST': 0.02,
})

HOME_ADVANTAGE = MappingProxyType({
    'DEFAULT': 2.5,
    'MAX': 8.0,
    'EARLY_MAX': 6.0,
    'EARLY_BASELINE': 1.5,
    'BASELINE': 1.0,
    'MIN_GAMES_FOR_SPLIT': 2,
})

WIN_PROBABILITY_SCALE = 0.15


# =============================================================================
# OPPONENT DEFENSE
# =============================================================================

OPPONENT_DEFENSE = MappingProxyType({
    'ELITE_RIM_PROTECTOR_BPG': 5.0,
    'ZONE_DEFENSE_3P_THRESHOLD': 0.375,
    'ELITE_PERIMETER_3P_THRESHOLD': 0.345,
    'SWITCH_HEAVY_DEF_RATING': 108,
    'SWITCH_HEAVY_OPP_ASSISTS': 23,
    'WEAK_PAINT_DEFENSE': 50,

    'RIM_PROTECTOR_VS_DRIVER': 0.93,
    'RIM_PROTECTOR_FTA_BOOST': 1.15,
    'ZONE_VS_SHOOTER': 1.05,
    'ZONE_3PA_BOOST': 1.10,
    'SWITCH_VS_ISO': 0.96,
    'ELITE_PERIMETER_VS_SHOOTER': 0.94,
    'WEAK_PAINT_VS_BIG': 1.08,
    'REBOUND_SCALE': 0.8,
})


# =============================================================================
# VARIANCE
# =============================================================================

VARIANCE_MODELING = MappingProxyType({
    'STAR_BASE_VARIANCE': 0.25,
    'ROLE_BASE_VARIANCE': 0.35,
    'TEAM_BASE_VARIANCE': 0.08,
    'MIN_RECENT_GAMES': 3,

    'INJURY_UNCERTAINTY_THRESHOLD': 0.3,
    'PACE_VOLATILITY_THRESHOLD': 5.0,
    'MINUTES_VOLATILITY_THRESHOLD': 5.0,

    'INJURY_UNCERTAINTY_MULTIPLIER': 1.5,
    'PACE_VOLATILITY_MULTIPLIER': 1.2,
    'MINUTES_UNCERTAINTY_MULTIPLIER': 1.3,
    'MATCHUP_UNCERTAINTY_MULTIPLIER': 1.15,
    'TEAM_PACE_VOLATILITY_MULTIPLIER': 1.3,
    'MAJOR_INJURIES_MULTIPLIER': 1.4,
    'BACK_TO_BACK_MULTIPLIER': 1.2,
})


# =============================================================================
# LEAGUE-AVERAGE FALLBACKS
# =============================================================================

LEAGUE_DEFAULTS = MappingProxyType({
    'pace': 100.0,
    'offensive_rating': 110.0,
    'defensive_rating': 110.0,
    'opp_three_point_pct': 0.36,
    'opp_paint_pts': 48.0,
    'style_paint_against': 40.0,
    'turnovers': 14.0,
    'opponent_turnovers': 14.0,
    'offensive_rebounds': 10.0,
    'defensive_rebounds': 34.0,
    'blocks': 4.5,
    'opponent_assists': 24.0,
    'team_points': 110.0,
    'player_points': 10.0,
})


# =============================================================================
# INJURY REPORT
# =============================================================================

@dataclass(frozen=True)
class ReportSlot:
    """A scheduled official injury report publication time (ET)."""
    hour: int
    minute: int
    label: str


INJURY_REPORT_TIMES: List[ReportSlot] = [
    ReportSlot(hour, 0, f"{(hour % 12) or 12:02d}{'AM' if hour < 12 else 'PM'}")
    for hour in range(0, 20)
]


# =============================================================================
# RUNTIME SETTINGS (environment)
# =============================================================================

@dataclass
class Settings:
    """Runtime settings resolved from the environment."""
    season: str = '2024-25'
    injury_report_base_url: str = 'https://ak-static.cms.nba.com/referee/injury'
    request_timeout: float = 15.0
    output_dir: str = 'output'
    log_level: str = 'INFO'
    recent_games: int = 5

    @classmethod
    def from_env(cls) -> 'Settings':
        """Build settings from NBA_PROJECTION_* environment variables."""
        defaults = cls()
        timeout = os.getenv('NBA_PROJECTION_REQUEST_TIMEOUT')
        recent = os.getenv('NBA_PROJECTION_RECENT_GAMES')

        try:
            timeout_value = float(timeout) if timeout else defaults.request_timeout
        except ValueError:
            logger.warning(f"Invalid NBA_PROJECTION_REQUEST_TIMEOUT={timeout!r}, using default")
            timeout_value = defaults.request_timeout

        try:
            recent_value = int(recent) if recent else defaults.recent_games
        except ValueError:
            logger.warning(f"Invalid NBA_PROJECTION_RECENT_GAMES={recent!r}, using default")
            recent_value = defaults.recent_games

        return cls(
            season=os.getenv('NBA_PROJECTION_SEASON', defaults.season),
            injury_report_base_url=os.getenv(
                'NBA_PROJECTION_INJURY_REPORT_URL', defaults.injury_report_base_url
            ),
            request_timeout=timeout_value,
            output_dir=os.getenv('NBA_PROJECTION_OUTPUT_DIR', defaults.output_dir),
            log_level=os.getenv('NBA_PROJECTION_LOG_LEVEL', defaults.log_level),
            recent_games=recent_value,
        )


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get singleton settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings
