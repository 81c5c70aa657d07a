"""
NBA Game Analyzer

Builds a full GameProjection for one game by running the engine stages in
order:

    injuries -> impact tiers -> game script -> pace -> team scores
    -> per-player enhancements -> variance -> win probability/confidence

The analyzer performs no I/O. Inputs come in as GameInput (see
data_provider.py for how they are fetched); outputs can be handed to a
ProjectionAccumulator for export.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from .composer import EnhancementComposer
from .config import LEAGUE_DEFAULTS
from .enhancements import EnhancementContext, analyze_opponent_defense
from .game_script import analyze_game_script
from .injury_model import apply_injury_impact, find_player, is_ruled_out
from .models import (
    GameProjection,
    GameScript,
    ImpactTier,
    InjuryRecord,
    InjuryStatus,
    PlayerProjection,
    PlayerStatLine,
    ScheduleContext,
    TeamProjection,
    TeamStatProfile,
)
from .pace import estimate_pace
from .positions import resolve_position
from .scoring import (
    calculate_confidence,
    calculate_home_advantage,
    calculate_possession_score,
    calculate_strength_differential,
    calculate_win_probability,
)
from .variance import calculate_player_variance, calculate_team_variance

logger = logging.getLogger(__name__)

MAX_PROJECTED_PLAYERS = 9
MIN_PROJECTED_MINUTES = 5.0


@dataclass
class TeamGameInput:
    """One side of a game: team profile, roster lines and schedule."""
    profile: TeamStatProfile
    players: List[PlayerStatLine] = field(default_factory=list)
    schedule: ScheduleContext = field(default_factory=ScheduleContext)

    @property
    def abbreviation(self) -> str:
        return self.profile.abbreviation

    @property
    def games_played(self) -> int:
        general = self.profile.general
        if general.games_played is not None:
            return general.games_played
        return general.record.games


@dataclass
class GameInput:
    """Everything the analyzer needs for one game."""
    away: TeamGameInput
    home: TeamGameInput
    injuries: List[InjuryRecord] = field(default_factory=list)
    game_date: str = ''
    report_enhanced: bool = False


def team_injuries(injuries: Sequence[InjuryRecord], abbreviation: str) -> List[InjuryRecord]:
    """Injury records for one team, in report order."""
    return [i for i in injuries if i.team == abbreviation]


def select_rotation(
    players: Sequence[PlayerStatLine],
    injuries: Sequence[InjuryRecord],
    limit: int = MAX_PROJECTED_PLAYERS,
    min_minutes: float = MIN_PROJECTED_MINUTES,
) -> Tuple[List[PlayerStatLine], List[str]]:
    """
    Players to project: not ruled out, more than `min_minutes`, top `limit`
    by minutes.

    Returns:
        (rotation, names of players excluded as out)
    """
    available = []
    excluded = []
    for player in players:
        injury = is_ruled_out(player, injuries)
        if injury is not None:
            logger.info(f"{player.player_name} excluded from projections (out: {injury.description})")
            excluded.append(player.player_name)
            continue
        available.append(player)

    rotation = sorted(
        (p for p in available if p.minutes > min_minutes),
        key=lambda p: p.minutes,
        reverse=True,
    )
    return rotation[:limit], excluded


def count_major_injuries(roster: Sequence[PlayerStatLine], injuries: Sequence[InjuryRecord]) -> int:
    """Out or doubtful players above bench tier."""
    count = 0
    for injury in injuries:
        if injury.status not in (InjuryStatus.OUT, InjuryStatus.DOUBTFUL):
            continue
        player = find_player(injury.player_name, roster)
        if player is not None and player.tier != ImpactTier.BENCH:
            count += 1
    return count


class GameAnalyzer:
    """
    Runs the projection engine for single games.

    Holds no per-game state; one analyzer can be reused across a slate.
    """

    def __init__(self, composer: Optional[EnhancementComposer] = None):
        self.composer = composer or EnhancementComposer()

    def analyze_game(self, game: GameInput, accumulator=None) -> GameProjection:
        """
        Project scores and player lines for one game.

        Args:
            game: Teams, rosters, schedule and injury records
            accumulator: Optional ProjectionAccumulator to record the result

        Returns:
            GameProjection
        """
        away, home = game.away, game.home
        logger.info(f"Analyzing {away.abbreviation} @ {home.abbreviation}")

        away_injuries = team_injuries(game.injuries, away.abbreviation)
        home_injuries = team_injuries(game.injuries, home.abbreviation)

        away_roster = apply_injury_impact(away.players, away_injuries, away.games_played)
        home_roster = apply_injury_impact(home.players, home_injuries, home.games_played)

        game_script = analyze_game_script(away.profile, home.profile)

        pace = estimate_pace(
            away.profile,
            home.profile,
            back_to_back=away.schedule.back_to_back or home.schedule.back_to_back,
            overtime_likely=away.schedule.overtime_likely or home.schedule.overtime_likely,
            rest_advantage=home.schedule.rest_advantage,
        )
        pace_volatility = abs(
            (away.profile.advanced.pace or LEAGUE_DEFAULTS['pace'])
            - (home.profile.advanced.pace or LEAGUE_DEFAULTS['pace'])
        )

        home_advantage = calculate_home_advantage(home.profile, away.profile)
        strength = calculate_strength_differential(home.profile, away.profile)

        away_team = self._project_team(
            away, home, False, pace.pace, pace_volatility, home_advantage, strength,
            game_script, away_roster, away_injuries,
        )
        home_team = self._project_team(
            home, away, True, pace.pace, pace_volatility, home_advantage, strength,
            game_script, home_roster, home_injuries,
        )

        players = []
        excluded = []
        for side, opponent, is_home, roster, injuries in (
            (away, home, False, away_roster, away_injuries),
            (home, away, True, home_roster, home_injuries),
        ):
            projected, out = self._project_players(
                side, opponent, is_home, roster, injuries, game_script, pace_volatility
            )
            players.extend(projected)
            excluded.extend(out)

        margin = home_team.score - away_team.score
        if margin > 0:
            favorite = home.abbreviation
        elif margin < 0:
            favorite = away.abbreviation
        else:
            favorite = 'EVEN'

        home_win = calculate_win_probability(margin)
        injury_count = sum(
            1 for i in away_injuries + home_injuries if i.status != InjuryStatus.AVAILABLE
        )
        confidence = calculate_confidence(
            away.profile, home.profile, margin, injury_count, game.report_enhanced
        )

        projection = GameProjection(
            away=away_team,
            home=home_team,
            players=players,
            game_script=game_script,
            pace=pace,
            margin=float(margin),
            favorite=favorite,
            away_win_probability=1 - home_win,
            home_win_probability=home_win,
            confidence=confidence,
            home_advantage=home_advantage,
            strength_differential=strength,
            injuries=away_injuries + home_injuries,
            excluded_players=excluded,
            game_date=game.game_date,
        )

        logger.info(
            f"{projection.matchup}: {away_team.score}-{home_team.score} "
            f"(pace {pace.pace:.1f}, {confidence.stars} stars, {len(players)} players)"
        )

        if accumulator is not None:
            accumulator.add_game(projection)

        return projection

    def _project_team(
        self,
        side: TeamGameInput,
        opponent: TeamGameInput,
        is_home: bool,
        pace: float,
        pace_volatility: float,
        home_advantage: float,
        strength: float,
        game_script: GameScript,
        roster: List[PlayerStatLine],
        injuries: List[InjuryRecord],
    ) -> TeamProjection:
        result = calculate_possession_score(
            side.profile,
            opponent.profile,
            pace,
            is_home,
            home_advantage=home_advantage,
            strength_differential=strength,
            game_script=game_script,
            schedule=side.schedule,
        )
        variance = calculate_team_variance(
            result.score,
            side.profile.general.points,
            pace_volatility=pace_volatility,
            major_injuries=count_major_injuries(roster, injuries),
            back_to_back=side.schedule.back_to_back,
        )
        return TeamProjection(
            abbreviation=side.abbreviation,
            name=side.profile.name,
            is_home=is_home,
            score=result.score,
            possessions=result.possessions,
            efficiency=result.efficiency,
            projection=variance,
            breakdown=result.breakdown,
        )

    def _project_players(
        self,
        side: TeamGameInput,
        opponent: TeamGameInput,
        is_home: bool,
        roster: List[PlayerStatLine],
        injuries: List[InjuryRecord],
        game_script: GameScript,
        pace_volatility: float,
    ) -> Tuple[List[PlayerProjection], List[str]]:
        rotation, excluded = select_rotation(roster, injuries)
        if not rotation:
            logger.warning(f"No player data available for {side.abbreviation}")
            return [], excluded

        defense = analyze_opponent_defense(opponent.profile)
        matchup_uncertainty = side.profile.style is None or opponent.profile.style is None

        projections = []
        for index, player in enumerate(rotation):
            ctx = EnhancementContext(
                player=player,
                index=index,
                position=resolve_position(player, index),
                team_style=side.profile.style,
                opponent_style=opponent.profile.style,
                lineups=side.profile.lineups,
                is_home=is_home,
            )
            projection = self.composer.enhance_player(ctx, game_script, defense)
            projection.projection = calculate_player_variance(
                projection.points,
                tier=projection.tier,
                recent_games=player.recent_games,
                minutes_volatility=player.minutes_volatility,
                injury_uncertainty=player.uncertainty,
                pace_volatility=pace_volatility,
                matchup_uncertainty=matchup_uncertainty,
                reasons=projection.reasons,
            )
            projections.append(projection)

        return projections, excluded
