"""
Lineup Rotation Intelligence

Derives a team's starting, bench and closing units from its five-man
lineup combinations (nba_api TeamDashLineups rows).
"""

import logging
from typing import List, Optional, Sequence

import pandas as pd

from .models import LineupProfile, LineupUnit

logger = logging.getLogger(__name__)

BENCH_MIN_MINUTES = 20
BENCH_STARTER_SHARE = 0.7
MAX_BENCH_UNITS = 3
CLOSING_MIN_MINUTES = 30
CONFIDENCE_MINUTES = 300
MIN_CONFIDENCE = 0.3
MAX_CONFIDENCE = 0.95


def estimate_lineup_pace(minutes: float, fga: float, fta: float, tov: float, oreb: float) -> Optional[float]:
    """Possessions per 48 minutes for a unit; None without minutes."""
    if not minutes:
        return None
    possessions = fga + fta * 0.44 + tov - oreb
    return possessions / minutes * 48


def parse_group_name(group_name: str) -> List[str]:
    """'A - B - C - D - E' -> ['A', 'B', 'C', 'D', 'E']"""
    if not group_name:
        return []
    return [name.strip() for name in group_name.split(' - ') if name.strip()]


def units_from_frame(df: pd.DataFrame) -> List[LineupUnit]:
    """
    Convert a lineups DataFrame into LineupUnits, most minutes first.

    Expects the nba_api column names (GROUP_NAME, MIN, PLUS_MINUS, FGA,
    FTA, TOV, OREB and optionally NET_RATING).
    """
    if df is None or df.empty:
        return []

    units = []
    for _, row in df.iterrows():
        minutes = float(row.get('MIN', 0) or 0)
        units.append(LineupUnit(
            players=tuple(parse_group_name(row.get('GROUP_NAME', ''))),
            minutes_together=minutes,
            plus_minus=float(row.get('PLUS_MINUS', 0) or 0),
            net_rating=float(row.get('NET_RATING', 0) or 0),
            pace=estimate_lineup_pace(
                minutes,
                float(row.get('FGA', 0) or 0),
                float(row.get('FTA', 0) or 0),
                float(row.get('TOV', 0) or 0),
                float(row.get('OREB', 0) or 0),
            ),
        ))

    units.sort(key=lambda u: u.minutes_together, reverse=True)
    return units


def analyze_rotation_patterns(units: Sequence[LineupUnit]) -> Optional[LineupProfile]:
    """
    Identify rotation roles from lineup usage.

    - Starting lineup: the unit with the most minutes
    - Bench units: more than 20 minutes but under 70% of the starters',
      top 3 by minutes
    - Closing lineup: best plus-minus among units with more than 30 minutes
    - Confidence: total minutes / 300, clamped to [0.3, 0.95]

    Returns:
        LineupProfile, or None when there are no lineups
    """
    if not units:
        return None

    ordered = sorted(units, key=lambda u: u.minutes_together, reverse=True)
    starting = ordered[0]

    bench = [
        u for u in ordered
        if BENCH_MIN_MINUTES < u.minutes_together < starting.minutes_together * BENCH_STARTER_SHARE
    ][:MAX_BENCH_UNITS]

    closers = [u for u in ordered if u.minutes_together > CLOSING_MIN_MINUTES]
    closing = max(closers, key=lambda u: u.plus_minus) if closers else None

    total_minutes = sum(u.minutes_together for u in units)
    confidence = min(MAX_CONFIDENCE, max(MIN_CONFIDENCE, total_minutes / CONFIDENCE_MINUTES))

    logger.debug(
        f"Rotation: {len(units)} lineups, {total_minutes:.0f} min, confidence {confidence:.2f}"
    )

    return LineupProfile(
        starting_lineup=starting,
        bench_units=tuple(bench),
        closing_lineup=closing,
        confidence=confidence,
        rotation_depth=len(units),
        total_minutes=total_minutes,
    )
