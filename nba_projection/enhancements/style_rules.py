"""
Team Style Rules

Matchup boosts driven by how this team plays against how the opponent
defends. All of them need both style profiles.

- pace: faster team boosts its top-3 rotation players
- three_point: high-volume shooting team vs leaky perimeter defense
- ball_movement: assist-heavy system boosts primary playmakers
- paint: paint-heavy offense vs soft interior defense boosts bigs
- transition: running team vs poor transition defense boosts wings/guards
"""

from typing import Optional, Sequence

from ..config import ENHANCEMENT_WEIGHTS
from ..models import EnhancementMultiplier
from .base import EnhancementContext, StyleRule


class PaceRule(StyleRule):
    """Team style pace exceeds opponent's by more than 3 possessions."""

    name = "pace"
    reason = "pace advantage"

    THRESHOLD = ENHANCEMENT_WEIGHTS['PACE_ADVANTAGE_THRESHOLD']
    MAX_INDEX = 2

    def evaluate(
        self, ctx: EnhancementContext, fired: Sequence[EnhancementMultiplier]
    ) -> Optional[EnhancementMultiplier]:
        mine = ctx.team_style.pace
        theirs = ctx.opponent_style.pace
        if not mine or not theirs:
            return None

        if mine - theirs > self.THRESHOLD and ctx.index <= self.MAX_INDEX:
            return self._emit(points=1.03, assists=1.05)
        return None


class ThreePointRule(StyleRule):
    """3PA rate > 40% against a defense allowing > 37% from three."""

    name = "three_point"
    reason = "3PT advantage"

    RATE_THRESHOLD = ENHANCEMENT_WEIGHTS['THREE_POINT_RATE_THRESHOLD']
    DEFENSE_THRESHOLD = ENHANCEMENT_WEIGHTS['THREE_POINT_DEFENSE_THRESHOLD']
    MIN_MAKES = 1.5

    def evaluate(
        self, ctx: EnhancementContext, fired: Sequence[EnhancementMultiplier]
    ) -> Optional[EnhancementMultiplier]:
        rate = ctx.team_style.three_point_rate
        if rate is None:
            return None

        opp_allowed = ctx.opponent_style.opponent_three_point_pct
        if (
            rate > self.RATE_THRESHOLD
            and opp_allowed > self.DEFENSE_THRESHOLD
            and ctx.player.three_pointers_made > self.MIN_MAKES
        ):
            return self._emit(points=1.06, three_pointers=1.08)
        return None


class BallMovementRule(StyleRule):
    """Assist rate > 60% boosts the top-2 playmakers with 3+ assists."""

    name = "ball_movement"
    reason = "ball movement system"

    THRESHOLD = ENHANCEMENT_WEIGHTS['BALL_MOVEMENT_THRESHOLD']

    def evaluate(
        self, ctx: EnhancementContext, fired: Sequence[EnhancementMultiplier]
    ) -> Optional[EnhancementMultiplier]:
        rate = ctx.team_style.assist_rate
        if rate is None:
            return None

        if rate > self.THRESHOLD and ctx.index <= 1 and ctx.player.assists > 3:
            return self._emit(assists=1.10, points=1.02)
        return None


class PaintRule(StyleRule):
    """Paint touches > 35% vs a defense allowing > 42 paint points."""

    name = "paint"
    reason = "paint mismatch"

    FREQUENCY_THRESHOLD = ENHANCEMENT_WEIGHTS['PAINT_FREQUENCY_THRESHOLD']
    DEFENSE_THRESHOLD = ENHANCEMENT_WEIGHTS['PAINT_DEFENSE_THRESHOLD']
    POSITIONS = ('C', 'PF')

    def evaluate(
        self, ctx: EnhancementContext, fired: Sequence[EnhancementMultiplier]
    ) -> Optional[EnhancementMultiplier]:
        touches = ctx.team_style.paint_touches or 0.0
        allowed = ctx.opponent_style.points_in_paint_against

        if (
            touches > self.FREQUENCY_THRESHOLD
            and allowed > self.DEFENSE_THRESHOLD
            and ctx.position in self.POSITIONS
        ):
            return self._emit(points=1.06, rebounds=1.04)
        return None


class TransitionRule(StyleRule):
    """Transition frequency > 18% vs transition defense rating > 0.50."""

    name = "transition"
    reason = "transition edge"

    FREQUENCY_THRESHOLD = ENHANCEMENT_WEIGHTS['TRANSITION_FREQUENCY_THRESHOLD']
    DEFENSE_THRESHOLD = ENHANCEMENT_WEIGHTS['TRANSITION_DEFENSE_THRESHOLD']
    POSITIONS = ('PG', 'SG', 'SF')

    def evaluate(
        self, ctx: EnhancementContext, fired: Sequence[EnhancementMultiplier]
    ) -> Optional[EnhancementMultiplier]:
        frequency = ctx.team_style.transition_frequency
        defense = ctx.opponent_style.transition_defense
        if not frequency or not defense:
            return None

        if (
            frequency > self.FREQUENCY_THRESHOLD
            and defense > self.DEFENSE_THRESHOLD
            and ctx.index <= 3
            and ctx.position in self.POSITIONS
        ):
            return self._emit(points=1.04, assists=1.03)
        return None
