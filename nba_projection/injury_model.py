"""
Injury Status & Conditional Teammate Model

Two layers turn an injury report into adjusted player baselines:

1. Status model: each status maps to (play probability, effectiveness).
   Expected stat = base * probability * effectiveness.

2. Conditional teammate model: when a teammate is questionable/doubtful,
   everyone else gets the probability-weighted average of a "star plays"
   and a "star sits" scenario.

Known limitation: only the single highest-impact uncertain player on a
team drives the scenario tree. Two uncertain stars on the same roster are
not modelled jointly.

On top of that, players ruled out hand tier-based opportunity boosts to
their teammates, and returning players take a little back. Early in the
season (< 10 team games) returns use a flat reduction; later, only
teammates whose recent role is elevated above their season norm give
minutes back.
"""

import logging
from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Sequence, Tuple, Union

from .config import (
    ADVANCED_INJURY_MIN_GAMES,
    FULL_AVAILABILITY,
    INJURY_BOOST_MULTIPLIERS,
    INJURY_STATUS_IMPACTS,
    STAR_PLAYS_BOOST,
    STAR_SITS_REBOUND_SCALE,
    StatusImpactEntry,
)
from .impact import calculate_player_impact, tag_impact
from .models import (
    ConditionalScenario,
    ImpactTier,
    InjuryRecord,
    InjuryStatus,
    PlayerStatLine,
)

logger = logging.getLogger(__name__)

DEFAULT_GAMES_PLAYED = 4
DEFAULT_USAGE_PCT = 20.0

_OUT_BOOSTS = {
    ImpactTier.SUPERSTAR: INJURY_BOOST_MULTIPLIERS['SUPERSTAR_OUT'],
    ImpactTier.STAR: INJURY_BOOST_MULTIPLIERS['STAR_OUT'],
    ImpactTier.KEY_ROLE: INJURY_BOOST_MULTIPLIERS['KEY_ROLE_OUT'],
}

_RETURN_REDUCTIONS = {
    ImpactTier.SUPERSTAR: INJURY_BOOST_MULTIPLIERS['SUPERSTAR_RETURN'],
    ImpactTier.STAR: INJURY_BOOST_MULTIPLIERS['STAR_RETURN'],
    ImpactTier.KEY_ROLE: INJURY_BOOST_MULTIPLIERS['KEY_ROLE_RETURN'],
}


# =============================================================================
# NAME MATCHING
# =============================================================================

def normalize_player_name(name: Optional[str]) -> str:
    """Lowercase, trim and turn "Last, First" into "first last"."""
    if not name:
        return ''

    cleaned = ' '.join(name.strip().lower().split())

    if ',' in cleaned:
        parts = [part.strip() for part in cleaned.split(',')]
        if len(parts) >= 2:
            return f"{parts[1]} {parts[0]}"

    return cleaned


def players_match(player_name: Optional[str], injury_name: Optional[str]) -> bool:
    """
    Check if two player names refer to the same person.

    Handles "Last, First" ordering, middle names and suffixes via
    containment, and otherwise needs 2+ shared words longer than 2 chars.
    """
    if not player_name or not injury_name:
        return False

    a = normalize_player_name(player_name)
    b = normalize_player_name(injury_name)

    if not a or not b:
        return False
    if a == b:
        return True
    if a in b or b in a:
        return True

    a_words = [w for w in a.split(' ') if len(w) > 2]
    b_words = [w for w in b.split(' ') if len(w) > 2]

    matching = [
        w for w in a_words
        if any(w == other or w in other or other in w for other in b_words)
    ]
    return len(matching) >= 2


def find_injury(player: PlayerStatLine, injuries: Sequence[InjuryRecord]) -> Optional[InjuryRecord]:
    """First injury record naming this player."""
    for injury in injuries:
        if players_match(player.player_name, injury.player_name):
            return injury
    return None


def find_player(name: str, players: Sequence[PlayerStatLine]) -> Optional[PlayerStatLine]:
    """First roster player matching a report name."""
    for player in players:
        if players_match(player.player_name, name):
            return player
    return None


# =============================================================================
# STATUS MODEL
# =============================================================================

@dataclass
class StatusImpact:
    """Probability-weighted expectations for a player with a given status."""
    expected_points: float
    expected_minutes: float
    expected_rebounds: float
    expected_assists: float
    uncertainty: float
    play_probability: float
    effectiveness: float
    display_note: str
    description: str
    is_fallback: bool = False

    # What teammates stand to absorb
    points_reduction: float = 0.0
    minutes_reduction: float = 0.0

    def to_dict(self) -> Dict:
        return {
            'expected_points': round(self.expected_points, 2),
            'expected_minutes': round(self.expected_minutes, 2),
            'expected_rebounds': round(self.expected_rebounds, 2),
            'expected_assists': round(self.expected_assists, 2),
            'uncertainty': round(self.uncertainty, 4),
            'play_probability': self.play_probability,
            'effectiveness': self.effectiveness,
            'display_note': self.display_note,
            'description': self.description,
            'is_fallback': self.is_fallback,
        }


def resolve_status_entry(status: Union[InjuryStatus, str, None]) -> Tuple[StatusImpactEntry, bool]:
    """
    Look up (play probability, effectiveness) for a status.

    Returns:
        (entry, is_fallback). AVAILABLE is full availability by definition;
        anything unrecognised also gets full availability but is flagged
        as a fallback and logged.
    """
    if not isinstance(status, InjuryStatus):
        raw = status
        status = InjuryStatus.from_report_status(str(status or ''))
        if status == InjuryStatus.UNKNOWN:
            logger.warning(f"Unknown injury status {raw!r}, assuming full availability")
            return FULL_AVAILABILITY, True

    if status == InjuryStatus.AVAILABLE:
        return FULL_AVAILABILITY, False

    entry = INJURY_STATUS_IMPACTS.get(status.value)
    if entry is None:
        logger.warning(f"Unknown injury status {status.value!r}, assuming full availability")
        return FULL_AVAILABILITY, True

    return entry, False


def calculate_status_impact(player: PlayerStatLine, status: Union[InjuryStatus, str, None]) -> StatusImpact:
    """
    Probability-weighted expected stats for a player given a status.

    Never raises; absent stats count as zero.
    """
    entry, is_fallback = resolve_status_entry(status)
    factor = entry.play_probability * entry.effectiveness

    base_points = player.points or 0.0
    base_minutes = player.minutes or 0.0

    note = ''
    if entry.play_probability < 1.0:
        note = f"({entry.play_probability * 100:.0f}% plays)"

    return StatusImpact(
        expected_points=base_points * factor,
        expected_minutes=base_minutes * factor,
        expected_rebounds=(player.rebounds or 0.0) * factor,
        expected_assists=(player.assists or 0.0) * factor,
        uncertainty=max(0.0, 1.0 - entry.play_probability),
        play_probability=entry.play_probability,
        effectiveness=entry.effectiveness,
        display_note=note,
        description=entry.description,
        is_fallback=is_fallback,
        points_reduction=base_points - base_points * factor,
        minutes_reduction=base_minutes - base_minutes * factor,
    )


def apply_status_impact(player: PlayerStatLine, injury: InjuryRecord) -> PlayerStatLine:
    """New line with the player's own stats weighted by their status."""
    impact = calculate_status_impact(player, injury.status)
    return replace(
        player,
        points=impact.expected_points,
        minutes=impact.expected_minutes,
        rebounds=impact.expected_rebounds,
        assists=impact.expected_assists,
        injury_adjusted=f"{injury.status.value}: {impact.description}",
        status_note=impact.display_note,
        uncertainty=impact.uncertainty,
    )


# =============================================================================
# CONDITIONAL TEAMMATE MODEL
# =============================================================================

@dataclass
class ConditionalProjection:
    """Expected teammate stats across the star-plays / star-sits tree."""
    expected_points: float
    expected_assists: float
    expected_rebounds: float
    uncertainty: float = 0.0
    scenarios: Tuple[ConditionalScenario, ...] = ()
    based_on: str = ''

    @property
    def applied(self) -> bool:
        return bool(self.scenarios)


def select_uncertain_driver(
    injuries: Sequence[InjuryRecord],
    roster: Sequence[PlayerStatLine],
) -> Optional[Tuple[InjuryRecord, PlayerStatLine]]:
    """
    Highest-impact questionable/doubtful player that can be matched to
    the roster. Ties keep report order.
    """
    candidates = []
    for injury in injuries:
        if not injury.status.is_uncertain:
            continue
        player = find_player(injury.player_name, roster)
        if player is None:
            continue
        impact = player.impact or calculate_player_impact(player)
        candidates.append((impact.score, injury, replace(player, impact=impact)))

    if not candidates:
        return None

    candidates.sort(key=lambda c: -c[0])
    _, injury, player = candidates[0]
    return injury, player


def calculate_conditional_projection(
    player: PlayerStatLine,
    injuries: Sequence[InjuryRecord],
    roster: Sequence[PlayerStatLine],
) -> ConditionalProjection:
    """
    Expected value of a teammate's line given uncertain star availability.

    No uncertain teammate means a no-op with zero uncertainty.
    """
    no_op = ConditionalProjection(
        expected_points=player.points,
        expected_assists=player.assists,
        expected_rebounds=player.rebounds,
    )

    driver = select_uncertain_driver(injuries, roster)
    if driver is None:
        return no_op

    injury, star = driver
    entry, _ = resolve_status_entry(injury.status)
    p = entry.play_probability

    plays = ConditionalScenario(
        probability=p,
        points=player.points * STAR_PLAYS_BOOST['points'],
        assists=player.assists * STAR_PLAYS_BOOST['assists'],
        rebounds=player.rebounds * STAR_PLAYS_BOOST['rebounds'],
        description=f"{star.player_name} plays ({p * 100:.0f}%)",
    )

    boost = 1.0 + _OUT_BOOSTS.get(star.tier, 0.0)
    sits = ConditionalScenario(
        probability=1.0 - p,
        points=player.points * boost,
        assists=player.assists * boost,
        rebounds=player.rebounds * boost * STAR_SITS_REBOUND_SCALE,
        description=f"{star.player_name} sits ({(1.0 - p) * 100:.0f}%)",
    )

    scenarios = (plays, sits)
    expected_points = sum(s.points * s.probability for s in scenarios)
    expected_assists = sum(s.assists * s.probability for s in scenarios)
    expected_rebounds = sum(s.rebounds * s.probability for s in scenarios)

    uncertainty = 0.0
    if player.points:
        uncertainty = abs(sits.points - plays.points) / player.points

    return ConditionalProjection(
        expected_points=expected_points,
        expected_assists=expected_assists,
        expected_rebounds=expected_rebounds,
        uncertainty=uncertainty,
        scenarios=scenarios,
        based_on=f"{star.player_name} {injury.status.value}",
    )


# =============================================================================
# ROLE ELEVATION
# =============================================================================

@dataclass
class RoleElevation:
    """Recent role vs season norm."""
    minutes_change: float = 0.0
    usage_change: float = 0.0
    is_elevated: bool = False
    magnitude: float = 0.0


def analyze_role_elevation(player: PlayerStatLine) -> RoleElevation:
    """
    Compare recent minutes/usage against season averages.

    Elevated means recent minutes > max(1.2x season, 15) and recent usage
    > 1.15x season. Without explicit season averages the season is
    estimated as 90% of current minutes and 95% of current usage.
    """
    recent_minutes = player.minutes or 0.0
    recent_usage = player.usage_pct or DEFAULT_USAGE_PCT

    season_minutes = player.season_minutes
    if season_minutes is None:
        season_minutes = recent_minutes * 0.9
    season_usage = player.season_usage_pct
    if season_usage is None:
        season_usage = recent_usage * 0.95

    is_elevated = (
        recent_minutes > max(season_minutes * 1.2, 15)
        and recent_usage > season_usage * 1.15
    )
    magnitude = (recent_minutes - season_minutes) / season_minutes if season_minutes > 0 else 0.0

    return RoleElevation(
        minutes_change=recent_minutes - season_minutes,
        usage_change=recent_usage - season_usage,
        is_elevated=is_elevated,
        magnitude=magnitude,
    )


def calculate_return_impact(
    returning: PlayerStatLine,
    teammate: PlayerStatLine,
    elevation: RoleElevation,
) -> float:
    """
    Negative adjustment for an elevated teammate when a player returns.

    Tier reduction scaled by elevation magnitude (clamped 0.1-2.0) and by
    position overlap (same position x1.3, guard returning to guard x1.2).
    """
    if not elevation.is_elevated:
        return 0.0

    base = _RETURN_REDUCTIONS.get(returning.tier, INJURY_BOOST_MULTIPLIERS['KEY_ROLE_RETURN'])
    elevation_factor = min(max(elevation.magnitude, 0.1), 2.0)

    position_factor = 1.0
    if teammate.position and returning.position:
        if teammate.position == returning.position:
            position_factor = 1.3
        elif 'G' in returning.position and 'G' in teammate.position:
            position_factor = 1.2

    return base * elevation_factor * position_factor


def player_missed_recent_games(player: PlayerStatLine) -> bool:
    """Heuristic: a rotation player under 15 minutes is likely coming back."""
    if not player.minutes:
        return False
    return player.minutes < 15


# =============================================================================
# TEAM APPLICATION
# =============================================================================

def _out_boost(player: PlayerStatLine, injured: PlayerStatLine) -> float:
    boost = _OUT_BOOSTS.get(injured.tier, 0.0)
    # Top performers absorb more of the vacated load
    if (player.points or 0) >= 15 and (player.usage_pct or 0) >= 18:
        boost *= 1.2
    return boost


def _apply_adjustment(player: PlayerStatLine, adjustment: float, notes: List[str]) -> PlayerStatLine:
    if adjustment == 0:
        return player
    return replace(
        player,
        points=(player.points or 0.0) * (1 + adjustment),
        assists=(player.assists or 0.0) * (1 + adjustment),
        rebounds=(player.rebounds or 0.0) * (1 + adjustment * 0.5),
        usage_pct=(player.usage_pct or 0.0) * (1 + adjustment * 0.8),
        injury_adjusted=', '.join(notes),
    )


def _uncertainty_adjusted(
    player: PlayerStatLine,
    injuries: Sequence[InjuryRecord],
    roster: Sequence[PlayerStatLine],
) -> Optional[PlayerStatLine]:
    """Status weighting for the player, else conditional teammate boost."""
    own = find_injury(player, injuries)
    if own is not None and own.status in (
        InjuryStatus.QUESTIONABLE, InjuryStatus.DOUBTFUL, InjuryStatus.PROBABLE
    ):
        return apply_status_impact(player, own)

    conditional = calculate_conditional_projection(player, injuries, roster)
    if conditional.applied:
        return replace(
            player,
            points=conditional.expected_points,
            assists=conditional.expected_assists,
            rebounds=conditional.expected_rebounds,
            uncertainty=conditional.uncertainty,
            injury_adjusted=f"Conditional: {conditional.based_on}",
            conditional_scenarios=conditional.scenarios,
        )

    return None


def _classify_injured(
    roster: Sequence[PlayerStatLine],
    injuries: Sequence[InjuryRecord],
    returning_statuses: Tuple[InjuryStatus, ...],
    require_missed_games: bool,
) -> Tuple[List[PlayerStatLine], List[PlayerStatLine]]:
    injured, returning = [], []
    for injury in injuries:
        player = find_player(injury.player_name, roster)
        if player is None:
            continue
        if injury.status in (InjuryStatus.OUT, InjuryStatus.DOUBTFUL):
            injured.append(player)
        elif injury.status in returning_statuses and player.tier != ImpactTier.BENCH:
            if require_missed_games and not player_missed_recent_games(player):
                continue
            returning.append(player)
    return injured, returning


def apply_early_season_injury_impact(
    roster: List[PlayerStatLine],
    injuries: Sequence[InjuryRecord],
) -> List[PlayerStatLine]:
    """Injury adjustments for teams with fewer than 10 games played."""
    injured, returning = _classify_injured(
        roster, injuries, (InjuryStatus.PROBABLE,), require_missed_games=True
    )

    adjusted = []
    for player in roster:
        uncertain = _uncertainty_adjusted(player, injuries, roster)
        if uncertain is not None:
            adjusted.append(uncertain)
            continue

        adjustment = 0.0
        notes = []

        for out in injured:
            if out.tier == ImpactTier.BENCH or out.player_name == player.player_name:
                continue
            boost = _out_boost(player, out)
            adjustment += boost
            notes.append(f"{boost * 100:+.0f}% ({out.player_name} out)")

        for back in returning:
            if back.player_name == player.player_name:
                continue
            reduction = _RETURN_REDUCTIONS.get(back.tier, 0.0)
            adjustment += reduction
            notes.append(f"{reduction * 100:.0f}% ({back.player_name} returns)")

        adjusted.append(_apply_adjustment(player, adjustment, notes))

    return adjusted


def apply_advanced_injury_impact(
    roster: List[PlayerStatLine],
    injuries: Sequence[InjuryRecord],
) -> List[PlayerStatLine]:
    """Injury adjustments using role elevation (10+ games played)."""
    injured, returning = _classify_injured(
        roster, injuries, (InjuryStatus.PROBABLE, InjuryStatus.QUESTIONABLE),
        require_missed_games=False,
    )

    adjusted = []
    for player in roster:
        uncertain = _uncertainty_adjusted(player, injuries, roster)
        if uncertain is not None:
            adjusted.append(uncertain)
            continue

        adjustment = 0.0
        notes = []

        for out in injured:
            if out.tier == ImpactTier.BENCH or out.player_name == player.player_name:
                continue
            boost = _out_boost(player, out)
            adjustment += boost
            notes.append(f"{boost * 100:+.0f}% ({out.player_name} out)")

        elevation = analyze_role_elevation(player)
        if elevation.is_elevated:
            for back in returning:
                if back.player_name == player.player_name:
                    continue
                reduction = calculate_return_impact(back, player, elevation)
                if reduction < 0:
                    adjustment += reduction
                    notes.append(f"{reduction * 100:.0f}% ({back.player_name} returns)")

        adjusted.append(_apply_adjustment(player, adjustment, notes))

    return adjusted


def apply_injury_impact(
    players: Optional[List[PlayerStatLine]],
    injuries: Optional[Sequence[InjuryRecord]],
    games_played: Optional[int] = None,
) -> List[PlayerStatLine]:
    """
    Tag impact on every player and apply the team's injury adjustments.

    Impact tiers are computed from the unadjusted baseline and carried
    through, so a questionable star keeps star variance.

    Args:
        players: Team roster stat lines
        injuries: Injury records for this team only
        games_played: Team games played (defaults to early season)

    Returns:
        New list of adjusted stat lines, in roster order
    """
    if not players:
        return []

    tagged = tag_impact(list(players))
    if not injuries:
        return tagged

    games = games_played if games_played else DEFAULT_GAMES_PLAYED
    if games >= ADVANCED_INJURY_MIN_GAMES:
        logger.debug(f"Advanced injury analysis ({games} games, {len(injuries)} injuries)")
        return apply_advanced_injury_impact(tagged, injuries)

    logger.debug(f"Early-season injury analysis ({games} games, {len(injuries)} injuries)")
    return apply_early_season_injury_impact(tagged, injuries)


def is_ruled_out(player: PlayerStatLine, injuries: Sequence[InjuryRecord]) -> Optional[InjuryRecord]:
    """The OUT record for this player, if there is one."""
    for injury in injuries:
        if injury.status == InjuryStatus.OUT and players_match(player.player_name, injury.player_name):
            return injury
    return None
