"""
Game Script Analyzer

Detects statistical mismatches between the away offense and the home
defense and turns them into confidence-graded "battles":

- Interior Battle: away paint points vs home paint points allowed
- Tempo Control: pace gap between the two teams
- Perimeter Shooting: away 3PM per FGA vs home 3P% allowed
- Ball Movement vs Pressure: away assist rate vs home turnovers forced

The analyzer never claims aggregate confidence. The top-level
`confidence` is always "Conservative"; only individual battles carry
Medium/High.

Battles feed two consumers: additive point boosts for individual players
(player_script_boost) and team efficiency/possession bumps
(team_script_effects).
"""

import logging
from typing import List, Tuple

from .config import (
    GAME_SCRIPT_ADJUSTMENTS,
    GAME_SCRIPT_EFFICIENCY,
    GAME_SCRIPT_THRESHOLDS,
    LEAGUE_DEFAULTS,
)
from .models import BattleType, GameScript, GameScriptBattle, PlayerStatLine, TeamStatProfile

logger = logging.getLogger(__name__)


def _confidence(magnitude: float, high_threshold: float) -> str:
    return 'High' if magnitude > high_threshold else 'Medium'


def _paint_battle(away: TeamStatProfile, home: TeamStatProfile, script: GameScript) -> None:
    differential = away.general.paint_pts - home.general.opp_paint_pts
    magnitude = abs(differential)
    if magnitude <= GAME_SCRIPT_THRESHOLDS['PAINT_DIFFERENTIAL_MEDIUM']:
        return

    winner, loser = (away, home) if differential > 0 else (home, away)
    script.battles.append(GameScriptBattle(
        type=BattleType.INTERIOR,
        advantage_team=winner.abbreviation,
        differential=magnitude,
        confidence=_confidence(magnitude, GAME_SCRIPT_THRESHOLDS['PAINT_DIFFERENTIAL_HIGH']),
    ))

    if differential > 0:
        script.insights.append(
            f"{winner.abbreviation} should attack the paint aggressively - "
            f"statistical advantage of {differential:.1f} points per game"
        )
        script.predicted_approaches.append(
            f"{winner.abbreviation} likely to establish interior presence early"
        )
    else:
        script.insights.append(
            f"{loser.abbreviation} should avoid paint congestion - "
            f"statistical disadvantage suggests perimeter focus"
        )


def _tempo_battle(away: TeamStatProfile, home: TeamStatProfile, script: GameScript) -> None:
    away_pace = away.advanced.pace or LEAGUE_DEFAULTS['pace']
    home_pace = home.advanced.pace or LEAGUE_DEFAULTS['pace']
    magnitude = abs(away_pace - home_pace)
    if magnitude <= GAME_SCRIPT_THRESHOLDS['PACE_DIFFERENTIAL_MEDIUM']:
        return

    faster, slower = (away, home) if away_pace > home_pace else (home, away)
    script.battles.append(GameScriptBattle(
        type=BattleType.TEMPO,
        advantage_team=faster.abbreviation,
        differential=magnitude,
        confidence=_confidence(magnitude, GAME_SCRIPT_THRESHOLDS['PACE_DIFFERENTIAL_HIGH']),
    ))
    script.insights.append(
        f"{faster.abbreviation} should push pace in transition - "
        f"{magnitude:.1f} possession advantage per game"
    )
    script.predicted_approaches.append(
        f"Pace battle will be decisive: {faster.abbreviation} pushes vs {slower.abbreviation} controls"
    )


def _perimeter_battle(away: TeamStatProfile, home: TeamStatProfile, script: GameScript) -> None:
    advantage = away.general.three_point_rate - home.general.opp_three_point_pct
    magnitude = abs(advantage)
    if magnitude <= GAME_SCRIPT_THRESHOLDS['THREE_POINT_DIFFERENTIAL_MEDIUM']:
        return

    winner = away if advantage > 0 else home
    script.battles.append(GameScriptBattle(
        type=BattleType.PERIMETER,
        advantage_team=winner.abbreviation,
        differential=magnitude,
        confidence=_confidence(magnitude, GAME_SCRIPT_THRESHOLDS['THREE_POINT_DIFFERENTIAL_HIGH']),
    ))

    if advantage > 0:
        script.insights.append(
            f"{winner.abbreviation} should emphasize three-point attempts - "
            f"shooting advantage of {advantage * 100:.1f}%"
        )


def _ball_movement_battle(away: TeamStatProfile, home: TeamStatProfile, script: GameScript) -> None:
    if (
        away.general.assist_rate > GAME_SCRIPT_THRESHOLDS['BALL_MOVEMENT_ASSIST_RATE']
        and home.general.opponent_turnovers < GAME_SCRIPT_THRESHOLDS['BALL_MOVEMENT_OPP_TURNOVERS']
    ):
        script.battles.append(GameScriptBattle(
            type=BattleType.BALL_MOVEMENT,
            advantage_team=away.abbreviation,
            differential=away.general.assist_rate,
            confidence='Medium',
        ))
        script.insights.append(
            f"{away.abbreviation} should exploit ball movement - "
            f"high assist rate vs limited defensive pressure"
        )


def _style_insight(away: TeamStatProfile, home: TeamStatProfile, script: GameScript) -> None:
    if away.style is None or home.style is None:
        return
    volume = away.style.three_point_rate
    if volume is None:
        return
    if (
        volume > GAME_SCRIPT_THRESHOLDS['STYLE_THREE_RATE']
        and home.style.opponent_three_point_pct > GAME_SCRIPT_THRESHOLDS['STYLE_OPP_THREE_PCT']
    ):
        script.insights.append(
            f"{away.abbreviation} three-point volume ({volume * 100:.1f}%) vs "
            f"{home.abbreviation} perimeter weakness creates high-volume shooting opportunity"
        )


def analyze_game_script(away: TeamStatProfile, home: TeamStatProfile) -> GameScript:
    """
    Generate the strategic read of a matchup.

    Args:
        away: Away team profile (offense side of every axis)
        home: Home team profile (defense side of every axis)

    Returns:
        GameScript with battles, insights and predicted approaches
    """
    script = GameScript()

    _paint_battle(away, home, script)
    _tempo_battle(away, home, script)
    _perimeter_battle(away, home, script)
    _ball_movement_battle(away, home, script)
    _style_insight(away, home, script)

    dominant = next((b for b in script.battles if b.is_high), None)
    if dominant is not None:
        script.predicted_approaches.append(
            f"Primary strategic focus: {dominant.type.value} - "
            f"{dominant.advantage_team} holds decisive advantage"
        )

    logger.info(
        f"Game script {away.abbreviation} @ {home.abbreviation}: "
        f"{len(script.battles)} battles ({', '.join(b.type.value for b in script.battles) or 'none'})"
    )
    return script


def player_script_boost(
    player: PlayerStatLine,
    position: str,
    script: GameScript,
    team: str,
) -> Tuple[float, List[str]]:
    """
    Additive point boost for a player from battles their team wins.

    Interior helps C/PF, tempo helps PG/SG/SF, perimeter helps anyone
    making more than one three per game.
    """
    boost = 0.0
    reasons = []

    interior = script.battle_for(BattleType.INTERIOR, team)
    if interior and position in ('C', 'PF'):
        value = GAME_SCRIPT_ADJUSTMENTS['INTERIOR_HIGH' if interior.is_high else 'INTERIOR_MEDIUM']
        boost += value
        reasons.append(f"paint advantage (+{value:.1f})")

    tempo = script.battle_for(BattleType.TEMPO, team)
    if tempo and position in ('PG', 'SG', 'SF'):
        value = GAME_SCRIPT_ADJUSTMENTS['TEMPO_HIGH' if tempo.is_high else 'TEMPO_MEDIUM']
        boost += value
        reasons.append(f"pace advantage (+{value:.1f})")

    perimeter = script.battle_for(BattleType.PERIMETER, team)
    if perimeter and player.three_pointers_made > 1.0:
        value = GAME_SCRIPT_ADJUSTMENTS['PERIMETER_HIGH' if perimeter.is_high else 'PERIMETER_MEDIUM']
        boost += value
        reasons.append(f"perimeter advantage (+{value:.1f})")

    return boost, reasons


def team_script_effects(script: GameScript, team: str) -> Tuple[float, float]:
    """
    Team-level efficiency boost (fraction) and extra possessions from
    every battle `team` wins.
    """
    efficiency = 0.0
    possessions = 0.0

    for battle in script.battles:
        if battle.advantage_team != team:
            continue
        level = 'HIGH' if battle.is_high else 'MEDIUM'
        if battle.type == BattleType.INTERIOR:
            efficiency += GAME_SCRIPT_EFFICIENCY[f'INTERIOR_{level}']
        elif battle.type == BattleType.PERIMETER:
            efficiency += GAME_SCRIPT_EFFICIENCY[f'PERIMETER_{level}']
        elif battle.type == BattleType.TEMPO:
            efficiency += GAME_SCRIPT_EFFICIENCY[f'TEMPO_{level}']
            possessions += GAME_SCRIPT_EFFICIENCY[f'TEMPO_POSSESSIONS_{level}']

    return efficiency, possessions
