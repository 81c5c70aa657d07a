"""Player Enhancement Rules"""

from .base import BaseRule, EnhancementContext, LineupRule, StyleRule
from .style_rules import (
    BallMovementRule,
    PaceRule,
    PaintRule,
    ThreePointRule,
    TransitionRule,
)
from .lineup_rules import DominantLineupRule, StableRotationRule
from .context_rules import HomeCourtRule, StarMultiplierRule
from .defense import (
    DefenseAdjustment,
    DefenseProfile,
    analyze_opponent_defense,
    apply_defensive_adjustment,
)

# Evaluation priority. StarMultiplierRule reads what fired before it.
ALL_RULES = [
    PaceRule,
    ThreePointRule,
    BallMovementRule,
    PaintRule,
    TransitionRule,
    DominantLineupRule,
    StableRotationRule,
    HomeCourtRule,
    StarMultiplierRule,
]

__all__ = [
    'BaseRule',
    'StyleRule',
    'LineupRule',
    'EnhancementContext',
    'PaceRule',
    'ThreePointRule',
    'BallMovementRule',
    'PaintRule',
    'TransitionRule',
    'DominantLineupRule',
    'StableRotationRule',
    'HomeCourtRule',
    'StarMultiplierRule',
    'DefenseProfile',
    'DefenseAdjustment',
    'analyze_opponent_defense',
    'apply_defensive_adjustment',
    'ALL_RULES',
]
