"""
Position Resolution

The stat feeds report G/F/C (or G-F style combos, or nothing). The
enhancement rules need PG/SG/SF/PF/C, so broad positions are refined from
the box score and the player's place in the minutes rotation.
"""

import logging

from .models import PlayerStatLine

logger = logging.getLogger(__name__)

SPECIFIC_POSITIONS = ('PG', 'SG', 'SF', 'PF', 'C')


def statistical_position(player: PlayerStatLine, index: int) -> str:
    """Guess a position purely from stats and rotation order."""
    ast = player.assists or 0
    reb = player.rebounds or 0
    blk = player.blocks or 0
    tpm = player.three_pointers_made or 0

    # Playmakers
    if index == 0 and ast > 4:
        return 'PG'
    if ast > 6:
        return 'PG'

    # Bigs
    if reb > 8 and blk > 0.8:
        return 'C'
    if reb > 9:
        return 'C'
    if 6 < reb <= 9:
        return 'PF'
    if reb > 5 and blk > 0.5:
        return 'PF'

    # Wings
    if index == 1 and ast > 2 and tpm > 1:
        return 'SG'
    if 3 < ast < 6 and tpm > 2:
        return 'SG'
    if index <= 2 and tpm > 1:
        return 'SF'

    # Roster order fallback
    if index == 0:
        return 'PG'
    if index == 1:
        return 'SG'
    if index <= 3:
        return 'SF'
    if index == 4:
        return 'PF'
    return 'C'


def resolve_position(player: PlayerStatLine, index: int) -> str:
    """
    Specific position for a player ranked `index` by minutes.

    Args:
        player: Stat line with the feed's raw position
        index: 0-based rank in the team's minutes rotation

    Returns:
        One of PG, SG, SF, PF, C
    """
    raw = (player.position or '').strip().upper()
    if not raw:
        return statistical_position(player, index)

    # Compound positions (G-F, F-C): primary position first
    primary = raw.split('-')[0].strip()

    if primary in SPECIFIC_POSITIONS:
        return primary
    if primary == 'C':
        return 'C'
    if primary == 'F':
        if (player.rebounds or 0) > 7 or (player.blocks or 0) > 0.8:
            return 'PF'
        return 'SF'
    if primary == 'G':
        if (player.assists or 0) > 5 or index == 0:
            return 'PG'
        return 'SG'

    logger.warning(f"Unknown position {player.position!r} for {player.player_name}, inferring from stats")
    return statistical_position(player, index)
