"""
Impact & Tier Classifier

Scores a player's box-score value and buckets it into a tier:

    impact = pts*1.0 + ast*1.5 + reb*1.2 + stl*2.0 + blk*2.0

    > 40  Superstar
    > 25  Star
    > 15  Key Role
    else  Bench
"""

from dataclasses import replace
from typing import List, Optional

from .config import IMPACT_SCORE_THRESHOLDS, IMPACT_SCORE_WEIGHTS
from .models import ImpactRating, ImpactTier, PlayerStatLine


def calculate_impact_score(player: Optional[PlayerStatLine]) -> float:
    """Weighted box-score impact. Missing player scores 0."""
    if player is None:
        return 0.0

    return (
        (player.points or 0.0) * IMPACT_SCORE_WEIGHTS['points']
        + (player.assists or 0.0) * IMPACT_SCORE_WEIGHTS['assists']
        + (player.rebounds or 0.0) * IMPACT_SCORE_WEIGHTS['rebounds']
        + (player.steals or 0.0) * IMPACT_SCORE_WEIGHTS['steals']
        + (player.blocks or 0.0) * IMPACT_SCORE_WEIGHTS['blocks']
    )


def classify_tier(score: float) -> ImpactTier:
    """Map an impact score to its tier (strictly greater than threshold)."""
    if score > IMPACT_SCORE_THRESHOLDS['Superstar']:
        return ImpactTier.SUPERSTAR
    elif score > IMPACT_SCORE_THRESHOLDS['Star']:
        return ImpactTier.STAR
    elif score > IMPACT_SCORE_THRESHOLDS['Key Role']:
        return ImpactTier.KEY_ROLE
    return ImpactTier.BENCH


def calculate_player_impact(player: Optional[PlayerStatLine]) -> ImpactRating:
    score = calculate_impact_score(player)
    return ImpactRating(score=score, tier=classify_tier(score))


def tag_impact(players: List[PlayerStatLine]) -> List[PlayerStatLine]:
    """Return new lines with `impact` filled in from current stats."""
    return [replace(p, impact=calculate_player_impact(p)) for p in players]
