"""
Possession-Based Scorer

Team score = possessions x points per possession.

Possessions start from the game pace and move with the turnover battle
and offensive rebounding:

    pace + (oppTOV - TOV) * 0.4 + max(0, OREB - 0.25 * oppDREB) * 0.35

Points per possession combine offense and opponent defense non-linearly
(the 0.7 exponent is a fixed design constant, not fitted):

    (offRtg / 110) * (110 / oppDefRtg) ** 0.7 * 1.10

then scale with schedule fatigue, home court, team strength and any
game script battles the team wins.

Also here: dynamic home-court advantage, team strength differential,
win probability and the overall confidence rating.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .config import HOME_ADVANTAGE, POSSESSION_MODEL, SCHEDULE_ADJUSTMENTS, WIN_PROBABILITY_SCALE
from .game_script import team_script_effects
from .models import ConfidenceAssessment, GameScript, ScheduleContext, TeamStatProfile
from .pace import clamp_pace

logger = logging.getLogger(__name__)


def round_half_up(value: float, digits: int = 0) -> float:
    """Round halves away from zero for positive values (no banker's rounding)."""
    scale = 10 ** digits
    return math.floor(value * scale + 0.5) / scale


@dataclass
class ScoreResult:
    """Projected score with its components."""
    score: int
    possessions: float
    efficiency: float
    breakdown: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> Dict:
        return {
            'score': self.score,
            'possessions': self.possessions,
            'efficiency': self.efficiency,
            'breakdown': dict(self.breakdown),
        }


def calculate_possessions(team: TeamStatProfile, opponent: TeamStatProfile, pace: float) -> Dict[str, float]:
    """Expected possessions before schedule and game script adjustments."""
    tov_adjustment = (
        (opponent.general.turnovers - team.general.turnovers) * POSSESSION_MODEL['TURNOVER_WEIGHT']
    )
    extra_boards = max(
        0.0,
        team.general.offensive_rebounds - opponent.general.defensive_rebounds * POSSESSION_MODEL['OPP_DREB_SHARE'],
    )
    oreb_adjustment = extra_boards * POSSESSION_MODEL['OREB_WEIGHT']

    return {
        'base_pace': pace,
        'tov_adjustment': tov_adjustment,
        'oreb_adjustment': oreb_adjustment,
        'possessions': clamp_pace(pace + tov_adjustment + oreb_adjustment),
    }


def calculate_base_efficiency(team: TeamStatProfile, opponent: TeamStatProfile) -> float:
    """Points per possession from ratings alone."""
    baseline = POSSESSION_MODEL['RATING_BASELINE']
    offense = team.advanced.offensive_rating / baseline
    defense = (baseline / opponent.advanced.defensive_rating) ** POSSESSION_MODEL['DEFENSIVE_EXPONENT']
    return offense * defense * POSSESSION_MODEL['NBA_AVERAGE_PPP']


def calculate_possession_score(
    team: TeamStatProfile,
    opponent: TeamStatProfile,
    pace: float,
    is_home: bool,
    home_advantage: Optional[float] = None,
    strength_differential: float = 0.0,
    game_script: Optional[GameScript] = None,
    schedule: Optional[ScheduleContext] = None,
) -> ScoreResult:
    """
    Project one team's score.

    Args:
        team: Team being scored
        opponent: Opposing team
        pace: Game pace estimate
        is_home: Whether `team` is at home
        home_advantage: Home court edge in points (default 2.5)
        strength_differential: Home-minus-away strength in points
        game_script: Matchup battles
        schedule: Fatigue/rest context for `team`

    Returns:
        ScoreResult; possessions always within [85, 115]
    """
    possession_parts = calculate_possessions(team, opponent, pace)
    possessions = possession_parts['possessions']

    if schedule is not None:
        if schedule.back_to_back:
            possessions += SCHEDULE_ADJUSTMENTS['BACK_TO_BACK_POSSESSIONS']
        possessions += schedule.rest_advantage * SCHEDULE_ADJUSTMENTS['REST_POSSESSIONS_PER_DAY']

    base_efficiency = calculate_base_efficiency(team, opponent)
    ppp = base_efficiency

    if schedule is not None:
        if schedule.back_to_back:
            ppp *= SCHEDULE_ADJUSTMENTS['BACK_TO_BACK_EFFICIENCY']
        if schedule.rest_advantage > 0:
            rest_boost = min(
                schedule.rest_advantage * SCHEDULE_ADJUSTMENTS['REST_EFFICIENCY_PER_DAY'],
                SCHEDULE_ADJUSTMENTS['MAX_REST_EFFICIENCY_BOOST'],
            )
            ppp *= 1 + rest_boost

    if is_home:
        advantage = HOME_ADVANTAGE['DEFAULT'] if home_advantage is None else home_advantage
        ppp *= 1 + advantage / 100

    strength = strength_differential if is_home else -strength_differential
    ppp *= 1 + strength / 100

    script_efficiency = 0.0
    if game_script is not None:
        script_efficiency, extra_possessions = team_script_effects(game_script, team.abbreviation)
        possessions += extra_possessions
        ppp *= 1 + script_efficiency

    possessions = clamp_pace(possessions)
    score = int(round_half_up(possessions * ppp))

    logger.debug(
        f"{team.abbreviation}: {possessions:.1f} poss x {ppp:.3f} PPP = {score}"
    )

    return ScoreResult(
        score=score,
        possessions=round_half_up(possessions, 1),
        efficiency=round_half_up(ppp, 2),
        breakdown={
            'base_pace': possession_parts['base_pace'],
            'tov_adjustment': round_half_up(possession_parts['tov_adjustment'], 1),
            'oreb_adjustment': round_half_up(possession_parts['oreb_adjustment'], 1),
            'offensive_rating': team.advanced.offensive_rating,
            'opp_defensive_rating': opponent.advanced.defensive_rating,
            'base_efficiency': round_half_up(base_efficiency, 2),
            'game_script_efficiency': script_efficiency,
        },
    )


# =============================================================================
# MATCHUP-LEVEL HELPERS
# =============================================================================

def calculate_home_advantage(home: TeamStatProfile, away: TeamStatProfile) -> float:
    """
    Home court edge in points from home/away splits.

    Without splits: 2.5. With fewer than 2 games in either split: overall
    record gap * 10 on a 1.5 baseline, clamped to [0, 6]. Otherwise home
    split vs away split * 8 on a 1.0 baseline, clamped to [0, 8].
    """
    if home.home_record is None or away.away_record is None:
        return HOME_ADVANTAGE['DEFAULT']

    min_games = HOME_ADVANTAGE['MIN_GAMES_FOR_SPLIT']
    if home.home_record.games < min_games or away.away_record.games < min_games:
        gap = (home.general.record.win_pct - away.general.record.win_pct) * 10
        return max(0.0, min(HOME_ADVANTAGE['EARLY_MAX'], HOME_ADVANTAGE['EARLY_BASELINE'] + gap))

    gap = (home.home_record.win_pct - away.away_record.win_pct) * 8
    return max(0.0, min(HOME_ADVANTAGE['MAX'], gap + HOME_ADVANTAGE['BASELINE']))


def calculate_strength_differential(home: TeamStatProfile, away: TeamStatProfile) -> float:
    """
    Home-minus-away strength in points.

    Blends a record component (12-point swing between 1.000 and .000) with
    a net rating component (x0.3). Record weighs 70% before 10 games, 50%
    after.
    """
    record_diff = (home.general.record.win_pct - away.general.record.win_pct) * 12
    performance_diff = (home.advanced.net_rating - away.advanced.net_rating) * 0.3

    record_weight = 0.7 if home.general.record.games < 10 else 0.5
    return record_diff * record_weight + performance_diff * (1 - record_weight)


def calculate_win_probability(margin: float) -> float:
    """Logistic win probability for a projected margin (positive favors the side)."""
    return 1 / (1 + math.exp(-margin * WIN_PROBABILITY_SCALE))


def calculate_confidence(
    away: TeamStatProfile,
    home: TeamStatProfile,
    margin: float,
    injury_count: int,
    report_enhanced: bool = False,
) -> ConfidenceAssessment:
    """
    Overall confidence stars (1-5) for a game prediction.

    Sample size (0-2), injuries (0-1), margin (0-2) and official report
    data (+0.5) are summed and rounded.
    """
    score = 0.0
    factors: List[str] = []

    def games(team: TeamStatProfile) -> int:
        if team.general.games_played is not None:
            return team.general.games_played
        return team.general.record.games

    avg_games = (games(away) + games(home)) / 2
    if avg_games >= 10:
        score += 2
        factors.append(f"Good sample size ({avg_games:.0f} games avg)")
    elif avg_games >= 5:
        score += 1
        factors.append("Moderate sample size (5-9 games)")
    else:
        factors.append("Limited sample size (< 5 games) - high uncertainty")

    if injury_count == 0:
        score += 1
        factors.append("No significant injuries")
    elif injury_count <= 2:
        score += 0.5
        factors.append(f"{injury_count} injured player(s) - moderate uncertainty")
    else:
        factors.append(f"{injury_count} injured players - high uncertainty")

    abs_margin = abs(margin)
    if abs_margin >= 12:
        score += 2
        factors.append("Large predicted margin (high certainty)")
    elif abs_margin >= 6:
        score += 1
        factors.append("Moderate predicted margin")
    else:
        factors.append("Close matchup predicted (higher variance)")

    if report_enhanced:
        score += 0.5
        factors.append("Enhanced with official injury report data")

    stars = int(min(5, max(1, round_half_up(score))))
    if stars >= 4:
        level = 'High'
    elif stars >= 3:
        level = 'Medium'
    else:
        level = 'Low'

    return ConfidenceAssessment(stars=stars, level=level, score=score, factors=factors)
