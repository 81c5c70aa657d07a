"""
Opponent Defense Pass

Profiles the opponent's defense from its box score and applies
matchup-specific multipliers to each player. This pass runs after the
capped style/lineup multiplier and is deliberately outside the 1.20 cap.

Detection (league-average fallbacks in parentheses):
- Elite rim protection: opponent blocks >= 5.0 per game (4.5)
- Zone tendencies: opponent 3P% allowed > 37.5% (0.36), closeouts "poor"
- Switch-heavy: defensive rating < 108 and opponent assists < 23 (24)
- Elite closeouts: 3P% allowed < 34.5%
- Paint defense: opponent paint points allowed (48)
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List

from ..config import OPPONENT_DEFENSE
from ..models import PlayerStatLine, TeamStatProfile

logger = logging.getLogger(__name__)


@dataclass
class DefenseProfile:
    """Defensive strengths and weaknesses of one team."""
    has_elite_rim_protector: bool = False
    blocks_per_game: float = 4.5
    switch_heavy: bool = False
    zones_frequently: bool = False
    perimeter_3p_defense: float = 0.36
    paint_defense: float = 48.0
    closeout_speed: str = 'average'  # 'elite', 'average' or 'poor'

    def to_dict(self) -> Dict:
        return {
            'has_elite_rim_protector': self.has_elite_rim_protector,
            'blocks_per_game': self.blocks_per_game,
            'switch_heavy': self.switch_heavy,
            'zones_frequently': self.zones_frequently,
            'perimeter_3p_defense': self.perimeter_3p_defense,
            'paint_defense': self.paint_defense,
            'closeout_speed': self.closeout_speed,
        }


@dataclass
class DefenseAdjustment:
    """Result of the defense pass for one player."""
    multiplier: float = 1.0
    adjustments: List[str] = field(default_factory=list)
    free_throw_boost: float = 1.0
    three_point_attempt_boost: float = 1.0


def analyze_opponent_defense(opponent: TeamStatProfile) -> DefenseProfile:
    """Build a DefenseProfile from the opponent's general/advanced stats."""
    general = opponent.general
    profile = DefenseProfile(
        blocks_per_game=general.blocks,
        perimeter_3p_defense=general.opp_three_point_pct,
        paint_defense=general.opp_paint_pts,
    )

    if profile.blocks_per_game >= OPPONENT_DEFENSE['ELITE_RIM_PROTECTOR_BPG']:
        profile.has_elite_rim_protector = True

    if profile.perimeter_3p_defense > OPPONENT_DEFENSE['ZONE_DEFENSE_3P_THRESHOLD']:
        profile.zones_frequently = True
        profile.closeout_speed = 'poor'

    # Good defense that also suppresses assists forces isolation play
    if (
        opponent.advanced.defensive_rating < OPPONENT_DEFENSE['SWITCH_HEAVY_DEF_RATING']
        and general.opponent_assists < OPPONENT_DEFENSE['SWITCH_HEAVY_OPP_ASSISTS']
    ):
        profile.switch_heavy = True

    if profile.perimeter_3p_defense < OPPONENT_DEFENSE['ELITE_PERIMETER_3P_THRESHOLD']:
        profile.closeout_speed = 'elite'

    logger.debug(f"{opponent.abbreviation} defense profile: {profile.to_dict()}")
    return profile


def apply_defensive_adjustment(
    player: PlayerStatLine,
    position: str,
    index: int,
    defense: DefenseProfile,
) -> DefenseAdjustment:
    """
    Matchup multiplier for a player against a defense profile.

    Args:
        player: Player stat line
        position: Resolved position
        index: Rank in the minutes rotation
        defense: Opponent defense profile

    Returns:
        DefenseAdjustment; volume boosts are returned, never written back
    """
    result = DefenseAdjustment()

    is_driver = position in ('PG', 'SG') and player.points > 15
    is_shooter = player.three_pointers_made > 1.5
    is_post = position in ('C', 'PF') and player.points > 12
    is_iso = index <= 1 and player.usage_rate > 0.25

    if defense.has_elite_rim_protector and is_driver:
        result.multiplier *= OPPONENT_DEFENSE['RIM_PROTECTOR_VS_DRIVER']
        result.free_throw_boost = OPPONENT_DEFENSE['RIM_PROTECTOR_FTA_BOOST']
        result.adjustments.append('Elite rim protection (-7%)')

    if defense.zones_frequently and is_shooter:
        result.multiplier *= OPPONENT_DEFENSE['ZONE_VS_SHOOTER']
        result.three_point_attempt_boost = OPPONENT_DEFENSE['ZONE_3PA_BOOST']
        result.adjustments.append('Zone defense (+5% 3PT)')

    if defense.switch_heavy and is_iso:
        result.multiplier *= OPPONENT_DEFENSE['SWITCH_VS_ISO']
        result.adjustments.append('Switch-heavy D (-4%)')

    if defense.closeout_speed == 'elite' and is_shooter:
        result.multiplier *= OPPONENT_DEFENSE['ELITE_PERIMETER_VS_SHOOTER']
        result.adjustments.append('Elite closeouts (-6%)')

    if defense.paint_defense > OPPONENT_DEFENSE['WEAK_PAINT_DEFENSE'] and is_post:
        result.multiplier *= OPPONENT_DEFENSE['WEAK_PAINT_VS_BIG']
        result.adjustments.append('Weak paint D (+8%)')

    return result
