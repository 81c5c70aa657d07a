"""
Matchup Context Rules

Always available. The star multiplier must stay last: it only fires when
some earlier rule already found an advantage.
"""

from typing import Optional, Sequence

from ..models import EnhancementMultiplier
from .base import BaseRule, EnhancementContext


class HomeCourtRule(BaseRule):
    """Role players (outside the top 3) get a small lift at home."""

    name = "home_court"
    reason = "home court"

    def evaluate(
        self, ctx: EnhancementContext, fired: Sequence[EnhancementMultiplier]
    ) -> Optional[EnhancementMultiplier]:
        if ctx.is_home and ctx.index > 2:
            return self._emit(points=1.02, rebounds=1.02)
        return None


class StarMultiplierRule(BaseRule):
    """Superstars and stars amplify any advantage already found."""

    name = "star_multiplier"
    reason = "star multiplier"

    def evaluate(
        self, ctx: EnhancementContext, fired: Sequence[EnhancementMultiplier]
    ) -> Optional[EnhancementMultiplier]:
        if ctx.tier.is_star and len(fired) > 0:
            return self._emit(points=1.04, assists=1.05)
        return None
