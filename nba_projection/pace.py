"""
Game Pace Estimation

Layered estimate of possessions per 48 minutes:

1. Team stats pace, home weighted 55/45, plus a home pace-control bonus
   of (home - away) * 0.3 clamped to +/-1.5
2. Style profile pace blended in at 30%
3. Starting-lineup pace clash (> 3 possessions apart)
4. Schedule context: back-to-back -2.0, overtime likely -1.5,
   rest advantage +0.5 per day (at most 4 days)

Confidence follows the number of data layers (1-3) that contributed.
With no team data at all the league average of 100 is used.
"""

import logging

from .config import PACE_MODEL, POSSESSION_MODEL
from .models import PaceEstimate, TeamStatProfile

logger = logging.getLogger(__name__)


def pace_confidence(data_layers: int) -> str:
    """Confidence label for a layer count. Monotone in the count."""
    if data_layers >= 3:
        return 'Very High'
    elif data_layers >= 2:
        return 'High'
    elif data_layers >= 1:
        return 'Medium'
    return 'Low'


def clamp_pace(value: float) -> float:
    return max(POSSESSION_MODEL['MIN_PACE'], min(POSSESSION_MODEL['MAX_PACE'], value))


def estimate_pace(
    away: TeamStatProfile,
    home: TeamStatProfile,
    back_to_back: bool = False,
    overtime_likely: bool = False,
    rest_advantage: float = 0.0,
) -> PaceEstimate:
    """
    Estimate game pace from every available data layer.

    Args:
        away: Away team profile
        home: Home team profile
        back_to_back: Either side is on the second night of a back-to-back
        overtime_likely: Close matchup expected to need extra time
        rest_advantage: Rest days edge (home minus away)

    Returns:
        PaceEstimate clamped to [85, 115]
    """
    pace = PACE_MODEL['LEAGUE_AVERAGE']
    layers = 0
    breakdown = []

    # Layer 1: team stats
    away_pace = away.advanced.pace
    home_pace = home.advanced.pace
    if away_pace and home_pace:
        pace = away_pace * PACE_MODEL['AWAY_WEIGHT'] + home_pace * PACE_MODEL['HOME_WEIGHT']
        breakdown.append(f"Team stats: {away_pace:.1f} vs {home_pace:.1f}")
        layers += 1

        cap = PACE_MODEL['HOME_CONTROL_CAP']
        control = max(-cap, min(cap, (home_pace - away_pace) * PACE_MODEL['HOME_CONTROL_FACTOR']))
        pace += control
        if abs(control) > 0.5:
            breakdown.append(f"Home control: {control:+.1f}")

    # Layer 2: style pace (more recent tendencies)
    if away.style is not None and home.style is not None:
        away_style = away.style.pace
        home_style = home.style.pace
        if away_style and home_style:
            style_avg = away_style * PACE_MODEL['AWAY_WEIGHT'] + home_style * PACE_MODEL['HOME_WEIGHT']
            weight = PACE_MODEL['STYLE_WEIGHT']
            pace = pace * (1 - weight) + style_avg * weight
            breakdown.append(f"Style pace: {away_style:.1f} vs {home_style:.1f}")
            layers += 1

    # Layer 3: starting lineup clash
    if away.lineups is not None and home.lineups is not None:
        away_unit = away.lineups.starting_lineup
        home_unit = home.lineups.starting_lineup
        if away_unit and home_unit and away_unit.pace and home_unit.pace:
            gap = abs(away_unit.pace - home_unit.pace)
            if gap > PACE_MODEL['LINEUP_CLASH_THRESHOLD']:
                adjustment = gap * PACE_MODEL['LINEUP_CLASH_FACTOR']
                if home_unit.pace > away_unit.pace:
                    pace += adjustment
                else:
                    # Away team has less control
                    pace -= adjustment * PACE_MODEL['AWAY_LINEUP_CONTROL']
                breakdown.append(f"Lineup clash: {adjustment:.1f} adjustment")
            layers += 1

    # Layer 4: schedule context
    if back_to_back:
        pace += PACE_MODEL['BACK_TO_BACK']
        breakdown.append(f"Back-to-back: {PACE_MODEL['BACK_TO_BACK']:.1f}")

    if overtime_likely:
        pace += PACE_MODEL['OVERTIME_LIKELY']
        breakdown.append(f"Overtime expected: {PACE_MODEL['OVERTIME_LIKELY']:.1f}")

    if rest_advantage:
        max_days = PACE_MODEL['MAX_REST_DAYS']
        days = max(-max_days, min(max_days, rest_advantage))
        bonus = days * PACE_MODEL['REST_PER_DAY']
        pace += bonus
        breakdown.append(f"Rest advantage: {bonus:+.1f}")

    if layers == 0:
        pace = PACE_MODEL['LEAGUE_AVERAGE']
        breakdown.append('Using NBA average (no team data)')

    unclamped = pace
    if not POSSESSION_MODEL['MIN_PACE'] <= unclamped <= POSSESSION_MODEL['MAX_PACE']:
        logger.warning(
            f"Pace {unclamped:.1f} for {away.abbreviation} @ {home.abbreviation} "
            f"outside [{POSSESSION_MODEL['MIN_PACE']:.0f}, {POSSESSION_MODEL['MAX_PACE']:.0f}], clamping"
        )

    return PaceEstimate(
        pace=clamp_pace(unclamped),
        confidence=pace_confidence(layers),
        data_layers=layers,
        breakdown=breakdown,
        unclamped=unclamped,
    )
