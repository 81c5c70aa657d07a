"""
Lineup Rules

Rotation-intelligence boosts. Both need the team's lineup profile.
"""

from typing import Optional, Sequence

from ..config import ENHANCEMENT_WEIGHTS
from ..models import EnhancementMultiplier
from .base import EnhancementContext, LineupRule


class DominantLineupRule(LineupRule):
    """Starting unit plus-minus above +15 boosts the top 5 by minutes."""

    name = "dominant_lineup"
    reason = "dominant lineup"

    PLUS_MINUS_THRESHOLD = ENHANCEMENT_WEIGHTS['DOMINANT_LINEUP_PLUS_MINUS']

    def evaluate(
        self, ctx: EnhancementContext, fired: Sequence[EnhancementMultiplier]
    ) -> Optional[EnhancementMultiplier]:
        starting = ctx.lineups.starting_lineup
        if starting is None:
            return None

        if starting.plus_minus > self.PLUS_MINUS_THRESHOLD and ctx.index < 5:
            return self._emit(points=1.03, assists=1.02, rebounds=1.03)
        return None


class StableRotationRule(LineupRule):
    """High-confidence rotation gives defined roles a consistency bump."""

    name = "stable_rotation"
    reason = "stable rotation"

    CONFIDENCE_THRESHOLD = ENHANCEMENT_WEIGHTS['STABLE_ROTATION_CONFIDENCE']

    def evaluate(
        self, ctx: EnhancementContext, fired: Sequence[EnhancementMultiplier]
    ) -> Optional[EnhancementMultiplier]:
        if ctx.lineups.confidence > self.CONFIDENCE_THRESHOLD and ctx.index < 7:
            return self._emit(points=1.02)
        return None
