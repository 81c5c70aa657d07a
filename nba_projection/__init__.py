"""
NBA Projection Engine

Pre-game score and player stat projections for NBA games.
Builds possession-based team scores and rule-enhanced player lines,
adjusted for injuries, game script, pace, schedule and home court.

Core components:
- enhancements/: Player enhancement rules (style, lineup, context, defense)
- engine: GameAnalyzer runs every stage for one game
- injury_model: Status weighting, conditional scenarios, teammate boosts
- injury_report_parser / injury_report_client: Official NBA injury report
- data_provider: Team and player inputs via nba_api
- export: CSV export of a slate of projections
"""

from .models import (
    GameProjection,
    InjuryRecord,
    InjuryStatus,
    ImpactTier,
    PlayerProjection,
    PlayerStatLine,
    Projection,
    ScheduleContext,
    TeamProjection,
    TeamStatProfile,
)
from .enhancements import ALL_RULES, EnhancementContext
from .composer import EnhancementComposer
from .engine import GameAnalyzer, GameInput, TeamGameInput
from .export import ProjectionAccumulator
from .injury_report_parser import InjuryReportParser, ParseResult, parse_injury_report
from .injury_report_client import (
    InjuryReport,
    InjuryReportClient,
    get_injury_report_client,
)
from .data_provider import NBADataProvider, get_data_provider
from .config import Settings, get_settings

__all__ = [
    # Models
    'GameProjection',
    'InjuryRecord',
    'InjuryStatus',
    'ImpactTier',
    'PlayerProjection',
    'PlayerStatLine',
    'Projection',
    'ScheduleContext',
    'TeamProjection',
    'TeamStatProfile',
    # Engine
    'GameAnalyzer',
    'GameInput',
    'TeamGameInput',
    'EnhancementComposer',
    'EnhancementContext',
    'ProjectionAccumulator',
    # Injury report
    'InjuryReportParser',
    'ParseResult',
    'parse_injury_report',
    'InjuryReport',
    'InjuryReportClient',
    # Data
    'NBADataProvider',
    'Settings',
    # Singletons
    'get_data_provider',
    'get_injury_report_client',
    'get_settings',
    # Rule list
    'ALL_RULES',
]

__version__ = '0.1.0'
