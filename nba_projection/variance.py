"""
Variance Modeler

Standard deviations and confidence intervals for player and team
projections. Context multipliers stack: each condition that holds widens
the spread independently.
"""

import logging
import math
from typing import List, Optional, Sequence

from .config import LEAGUE_DEFAULTS, VARIANCE_MODELING
from .models import ImpactTier, Projection
from .scoring import round_half_up

logger = logging.getLogger(__name__)


def recent_std_dev(values: Sequence[float]) -> Optional[float]:
    """Population std dev of recent values, or None with too few games."""
    if len(values) < VARIANCE_MODELING['MIN_RECENT_GAMES']:
        return None
    mean = sum(values) / len(values)
    return math.sqrt(sum((v - mean) ** 2 for v in values) / len(values))


def calculate_player_variance(
    mean: float,
    tier: ImpactTier = ImpactTier.BENCH,
    recent_games: Sequence[float] = (),
    minutes_volatility: float = 0.0,
    injury_uncertainty: float = 0.0,
    pace_volatility: float = 0.0,
    matchup_uncertainty: bool = False,
    reasons: Optional[List[str]] = None,
) -> Projection:
    """
    Spread for a player's points projection.

    Args:
        mean: Projected points
        tier: Impact tier (stars are more consistent)
        recent_games: Points in recent games; 3+ gives an observed std dev
        minutes_volatility: Std dev of recent minutes
        injury_uncertainty: 0-1 uncertainty from the injury stages
        pace_volatility: Pace gap between the two teams
        matchup_uncertainty: Missing style data on either side
        reasons: Adjustment layers that produced `mean`

    Returns:
        Projection with CI68/CI95 (lower bounds floored at 0)
    """
    base = recent_std_dev(recent_games)
    if base is None:
        points = mean or LEAGUE_DEFAULTS['player_points']
        factor = 'STAR_BASE_VARIANCE' if tier.is_star else 'ROLE_BASE_VARIANCE'
        base = points * VARIANCE_MODELING[factor]

    multiplier = 1.0
    factors = []

    if injury_uncertainty > VARIANCE_MODELING['INJURY_UNCERTAINTY_THRESHOLD']:
        multiplier *= VARIANCE_MODELING['INJURY_UNCERTAINTY_MULTIPLIER']
        factors.append('Injury uncertainty')

    if pace_volatility > VARIANCE_MODELING['PACE_VOLATILITY_THRESHOLD']:
        multiplier *= VARIANCE_MODELING['PACE_VOLATILITY_MULTIPLIER']
        factors.append('Pace volatility')

    if minutes_volatility > VARIANCE_MODELING['MINUTES_VOLATILITY_THRESHOLD']:
        multiplier *= VARIANCE_MODELING['MINUTES_UNCERTAINTY_MULTIPLIER']
        factors.append('Minutes uncertainty')

    if matchup_uncertainty:
        multiplier *= VARIANCE_MODELING['MATCHUP_UNCERTAINTY_MULTIPLIER']
        factors.append('Matchup uncertainty')

    std_dev = base * multiplier

    return Projection(
        mean=round_half_up(mean, 1),
        std_dev=round_half_up(std_dev, 1),
        ci68=(
            max(0.0, round_half_up(mean - std_dev, 1)),
            round_half_up(mean + std_dev, 1),
        ),
        ci95=(
            max(0.0, round_half_up(mean - 2 * std_dev, 1)),
            round_half_up(mean + 2 * std_dev, 1),
        ),
        reasons=list(reasons or []),
        variance_factors=factors,
    )


def calculate_team_variance(
    score: float,
    average_points: Optional[float] = None,
    pace_volatility: float = 0.0,
    major_injuries: int = 0,
    back_to_back: bool = False,
) -> Projection:
    """
    Spread for a team score.

    Sigma is 8% of the team's season scoring average (110 when unknown);
    the intervals are centered on the projected score and rounded to
    whole points.
    """
    average = average_points or LEAGUE_DEFAULTS['team_points']
    std_dev = average * VARIANCE_MODELING['TEAM_BASE_VARIANCE']
    factors = []

    if pace_volatility > VARIANCE_MODELING['PACE_VOLATILITY_THRESHOLD']:
        std_dev *= VARIANCE_MODELING['TEAM_PACE_VOLATILITY_MULTIPLIER']
        factors.append('Pace volatility')

    if major_injuries > 1:
        std_dev *= VARIANCE_MODELING['MAJOR_INJURIES_MULTIPLIER']
        factors.append(f"{major_injuries} major injuries")

    if back_to_back:
        std_dev *= VARIANCE_MODELING['BACK_TO_BACK_MULTIPLIER']
        factors.append('Back-to-back')

    return Projection(
        mean=float(score),
        std_dev=round_half_up(std_dev, 1),
        ci68=(
            max(0.0, round_half_up(score - std_dev)),
            round_half_up(score + std_dev),
        ),
        ci95=(
            max(0.0, round_half_up(score - 2 * std_dev)),
            round_half_up(score + 2 * std_dev),
        ),
        variance_factors=factors,
    )
