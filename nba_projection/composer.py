"""
Enhancement Composer

Turns a player's injury-adjusted baseline into an enhanced projection:

1. Every rule in ALL_RULES is evaluated in priority order. Rules whose
   inputs are missing are skipped.
2. Fired multipliers are compounded per stat and the product is capped
   at 1.20 (points, assists, rebounds and threes independently).
3. Game script point boosts are added on top of the capped points.
4. The opponent defense pass multiplies points and assists. Rebounds move
   by 0.8x the defense adjustment, so a neutral defense leaves them
   unchanged. The pass is not subject to the cap.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from .config import ENHANCEMENT_WEIGHTS, OPPONENT_DEFENSE
from .enhancements import (
    ALL_RULES,
    BaseRule,
    DefenseProfile,
    EnhancementContext,
    apply_defensive_adjustment,
)
from .game_script import player_script_boost
from .models import EnhancementMultiplier, GameScript, PlayerProjection

logger = logging.getLogger(__name__)


@dataclass
class CappedMultipliers:
    """Compounded per-stat multipliers after the cap."""
    points: float = 1.0
    assists: float = 1.0
    rebounds: float = 1.0
    three_pointers: float = 1.0

    def to_dict(self) -> Dict:
        return {
            'points': round(self.points, 4),
            'assists': round(self.assists, 4),
            'rebounds': round(self.rebounds, 4),
            'three_pointers': round(self.three_pointers, 4),
        }


@dataclass
class EnhancementResult:
    """What the rule pass produced for one player."""
    fired: List[EnhancementMultiplier] = field(default_factory=list)
    capped: CappedMultipliers = field(default_factory=CappedMultipliers)

    @property
    def reasons(self) -> List[str]:
        return [m.reason for m in self.fired]

    @property
    def total_enhancement_pct(self) -> float:
        return (self.capped.points - 1.0) * 100


def cap_multipliers(
    multipliers: Sequence[EnhancementMultiplier],
    max_multiplier: float = ENHANCEMENT_WEIGHTS['MAX_MULTIPLIER'],
) -> CappedMultipliers:
    """
    Compound every multiplier per stat, then cap each product.

    Rules only ever boost, so the result stays within [1.0, max_multiplier].
    """
    result = CappedMultipliers()

    for m in multipliers:
        if m.points:
            result.points *= m.points
        if m.assists:
            result.assists *= m.assists
        if m.rebounds:
            result.rebounds *= m.rebounds
        if m.three_pointers:
            result.three_pointers *= m.three_pointers

    result.points = min(result.points, max_multiplier)
    result.assists = min(result.assists, max_multiplier)
    result.rebounds = min(result.rebounds, max_multiplier)
    result.three_pointers = min(result.three_pointers, max_multiplier)

    return result


class EnhancementComposer:
    """
    Applies the declared rule list to players.

    Rule order is the list order of ALL_RULES; pass `rules` to evaluate a
    different set (tests do).
    """

    def __init__(self, rules: Optional[Sequence[BaseRule]] = None):
        self.rules = list(rules) if rules is not None else [rule() for rule in ALL_RULES]
        self.rule_by_name = {r.name: r for r in self.rules}

    def evaluate(self, ctx: EnhancementContext) -> EnhancementResult:
        """Run every available rule for one player and cap the result."""
        fired: List[EnhancementMultiplier] = []

        for rule in self.rules:
            if not rule.available(ctx):
                continue
            multiplier = rule.evaluate(ctx, fired)
            if multiplier is not None:
                fired.append(multiplier)
                logger.debug(f"{ctx.player.player_name}: {rule.name} fired ({multiplier.reason})")

        return EnhancementResult(fired=fired, capped=cap_multipliers(fired))

    def enhance_player(
        self,
        ctx: EnhancementContext,
        game_script: Optional[GameScript] = None,
        opponent_defense: Optional[DefenseProfile] = None,
    ) -> PlayerProjection:
        """
        Build the enhanced projection for one player.

        Args:
            ctx: Player and matchup context
            game_script: Matchup battles (point boosts for winners)
            opponent_defense: Opponent defense profile for the defense pass

        Returns:
            PlayerProjection without variance (the engine attaches it)
        """
        player = ctx.player
        result = self.evaluate(ctx)
        capped = result.capped
        reasons = []
        if player.injury_adjusted:
            reasons.append(f"injury: {player.injury_adjusted}")
        reasons.extend(result.reasons)

        points = player.points * capped.points
        assists = player.assists * capped.assists
        rebounds = player.rebounds * capped.rebounds
        threes = player.three_pointers_made * capped.three_pointers

        script_boost = 0.0
        if game_script is not None:
            script_boost, script_reasons = player_script_boost(
                player, ctx.position, game_script, player.team
            )
            points += script_boost
            reasons.extend(script_reasons)

        defense_multiplier = 1.0
        free_throws = player.free_throws_attempted
        three_attempts = player.three_pointers_attempted
        if opponent_defense is not None:
            adjustment = apply_defensive_adjustment(player, ctx.position, ctx.index, opponent_defense)
            defense_multiplier = adjustment.multiplier
            points *= adjustment.multiplier
            assists *= adjustment.multiplier
            rebounds *= 1 + (adjustment.multiplier - 1) * OPPONENT_DEFENSE['REBOUND_SCALE']
            free_throws *= adjustment.free_throw_boost
            three_attempts *= adjustment.three_point_attempt_boost
            reasons.extend(adjustment.adjustments)

        return PlayerProjection(
            player_name=player.player_name,
            team=player.team,
            position=ctx.position,
            tier=player.tier,
            is_home=ctx.is_home,
            base_points=player.points,
            base_rebounds=player.rebounds,
            base_assists=player.assists,
            base_three_pointers=player.three_pointers_made,
            minutes=player.minutes,
            steals=player.steals,
            blocks=player.blocks,
            points=points,
            rebounds=rebounds,
            assists=assists,
            three_pointers=threes,
            free_throws_attempted=free_throws,
            three_pointers_attempted=three_attempts,
            points_multiplier=capped.points,
            game_script_boost=script_boost,
            defense_multiplier=defense_multiplier,
            projection=None,
            injury_adjusted=player.injury_adjusted,
            uncertainty=player.uncertainty,
            status_note=player.status_note,
            usage_pct=player.usage_pct,
            games_played=player.games_played,
            reasons=reasons,
        )
