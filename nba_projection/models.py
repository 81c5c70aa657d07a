"""
Projection Engine Data Model

Typed inputs and outputs for a single game analysis. Defaults for every
optional stat are resolved here, at the boundary, so the engine modules
never have to guess what a missing field means.

Input shapes accepted by the from_dict constructors are the camelCase
payloads produced by the stat feeds (see data_provider.py).
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .config import LEAGUE_DEFAULTS


def _num(data: Dict, key: str, default: Optional[float] = 0.0) -> Optional[float]:
    """Read a numeric field, treating None/NaN/garbage as missing."""
    value = data.get(key) if data else None
    if value is None:
        return default
    try:
        value = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(value):
        return default
    return value


def _positive(data: Dict, key: str, default: Optional[float]) -> Optional[float]:
    """Like _num, but zero counts as missing (feeds report 0 for no data)."""
    value = _num(data, key, None)
    if not value:
        return default
    return value


# =============================================================================
# ENUMS
# =============================================================================

class InjuryStatus(Enum):
    """Player availability status as published on the injury report."""
    OUT = "out"
    DOUBTFUL = "doubtful"
    QUESTIONABLE = "questionable"
    PROBABLE = "probable"
    AVAILABLE = "available"
    UNKNOWN = "unknown"

    @classmethod
    def from_report_status(cls, status: str) -> 'InjuryStatus':
        """Convert a report status string to InjuryStatus enum."""
        status_lower = status.lower().strip() if status else ""

        mapping = {
            'out': cls.OUT,
            'doubtful': cls.DOUBTFUL,
            'questionable': cls.QUESTIONABLE,
            'probable': cls.PROBABLE,
            'available': cls.AVAILABLE,
        }

        return mapping.get(status_lower, cls.UNKNOWN)

    @property
    def is_uncertain(self) -> bool:
        """Questionable or doubtful: the player may or may not suit up."""
        return self in (InjuryStatus.QUESTIONABLE, InjuryStatus.DOUBTFUL)


class ImpactTier(Enum):
    """Player value bucket derived from the weighted box-score impact score."""
    SUPERSTAR = "Superstar"
    STAR = "Star"
    KEY_ROLE = "Key Role"
    BENCH = "Bench"

    @property
    def is_star(self) -> bool:
        return self in (ImpactTier.SUPERSTAR, ImpactTier.STAR)


class BattleType(Enum):
    """Axes along which the game script analyzer looks for mismatches."""
    INTERIOR = "Interior Battle"
    TEMPO = "Tempo Control"
    PERIMETER = "Perimeter Shooting"
    BALL_MOVEMENT = "Ball Movement vs Pressure"


# =============================================================================
# PLAYER INPUTS
# =============================================================================

@dataclass(frozen=True)
class ImpactRating:
    """Weighted impact score and its tier."""
    score: float
    tier: ImpactTier

    def to_dict(self) -> Dict:
        return {'score': round(self.score, 2), 'tier': self.tier.value}


@dataclass(frozen=True)
class ConditionalScenario:
    """One branch of the star-plays / star-sits scenario tree."""
    probability: float
    points: float
    assists: float
    rebounds: float
    description: str

    def to_dict(self) -> Dict:
        return {
            'probability': round(self.probability, 4),
            'points': round(self.points, 2),
            'assists': round(self.assists, 2),
            'rebounds': round(self.rebounds, 2),
            'description': self.description,
        }


@dataclass(frozen=True)
class PlayerStatLine:
    """
    Per-game averages for one player.

    Stages never mutate a line; they return a new one built with
    dataclasses.replace so the order of adjustments stays auditable.

    Attributes:
        usage_pct: Usage rate in percentage points (e.g. 28.5)
        recent_games: Points scored in each of the most recent games
        minutes_volatility: Std dev of recent minutes, if known
        injury_adjusted: Human-readable note of any injury adjustment
        uncertainty: 0.0-1.0 availability/scenario uncertainty
    """
    player_name: str
    team: str = ''
    position: str = ''
    points: float = 0.0
    rebounds: float = 0.0
    assists: float = 0.0
    steals: float = 0.0
    blocks: float = 0.0
    three_pointers_made: float = 0.0
    field_goal_pct: float = 0.0
    minutes: float = 0.0
    usage_pct: float = 0.0
    games_played: int = 0
    free_throws_attempted: float = 0.0
    three_pointers_attempted: float = 0.0
    recent_games: Tuple[float, ...] = ()
    minutes_volatility: float = 0.0
    season_minutes: Optional[float] = None
    season_usage_pct: Optional[float] = None
    impact: Optional[ImpactRating] = None

    # Adjustment notes carried forward by the injury stages
    injury_adjusted: str = ''
    uncertainty: float = 0.0
    status_note: str = ''
    conditional_scenarios: Tuple[ConditionalScenario, ...] = ()

    @property
    def usage_rate(self) -> float:
        """Usage as a fraction (0.285 for 28.5%)."""
        return self.usage_pct / 100.0

    @property
    def tier(self) -> ImpactTier:
        return self.impact.tier if self.impact else ImpactTier.BENCH

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PlayerStatLine':
        """
        Build a stat line from the player feed shape.

        Usage may arrive as `usage` (percentage points) or as
        `advanced.usageRate` (fraction).
        """
        usage = _num(data, 'usage', None)
        if usage is None:
            usage_rate = _num(data.get('advanced') or {}, 'usageRate', None)
            usage = usage_rate * 100.0 if usage_rate is not None else 0.0

        recent = []
        for game in data.get('recentGames') or []:
            if isinstance(game, dict):
                value = _num(game, 'points', None)
            else:
                try:
                    value = float(game)
                except (TypeError, ValueError):
                    value = None
            if value is not None:
                recent.append(value)

        season = data.get('seasonAverages') or {}

        return cls(
            player_name=str(data.get('playerName') or data.get('name') or '').strip(),
            team=str(data.get('teamAbbreviation') or data.get('team') or ''),
            position=str(data.get('position') or ''),
            points=_num(data, 'points'),
            rebounds=_num(data, 'rebounds'),
            assists=_num(data, 'assists'),
            steals=_num(data, 'steals'),
            blocks=_num(data, 'blocks'),
            three_pointers_made=_num(data, 'threePointersMade'),
            field_goal_pct=_num(data, 'fieldGoalPct'),
            minutes=_num(data, 'minutes'),
            usage_pct=usage,
            games_played=int(_num(data, 'gamesPlayed')),
            free_throws_attempted=_num(data, 'freeThrowsAttempted'),
            three_pointers_attempted=_num(data, 'threePointersAttempted'),
            recent_games=tuple(recent),
            minutes_volatility=_num(data, 'minutesVolatility'),
            season_minutes=_num(season, 'minutes', None),
            season_usage_pct=_num(season, 'usage', None),
        )

    def to_dict(self) -> Dict:
        return {
            'player_name': self.player_name,
            'team': self.team,
            'position': self.position,
            'points': round(self.points, 2),
            'rebounds': round(self.rebounds, 2),
            'assists': round(self.assists, 2),
            'steals': round(self.steals, 2),
            'blocks': round(self.blocks, 2),
            'three_pointers_made': round(self.three_pointers_made, 2),
            'minutes': round(self.minutes, 2),
            'usage_pct': round(self.usage_pct, 2),
            'impact': self.impact.to_dict() if self.impact else None,
            'injury_adjusted': self.injury_adjusted,
            'uncertainty': round(self.uncertainty, 4),
            'status_note': self.status_note,
            'conditional_scenarios': [s.to_dict() for s in self.conditional_scenarios],
        }


# =============================================================================
# TEAM INPUTS
# =============================================================================

@dataclass(frozen=True)
class Record:
    """Win/loss record (overall, home or away)."""
    wins: int = 0
    losses: int = 0

    @property
    def games(self) -> int:
        return self.wins + self.losses

    @property
    def win_pct(self) -> float:
        return self.wins / self.games if self.games else 0.0

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> Optional['Record']:
        if not data:
            return None
        return cls(wins=int(_num(data, 'wins')), losses=int(_num(data, 'losses')))


@dataclass(frozen=True)
class GeneralStats:
    """Per-game team box-score averages with league-average fallbacks."""
    wins: int = 0
    losses: int = 0
    points: float = LEAGUE_DEFAULTS['team_points']
    paint_pts: float = 0.0
    opp_paint_pts: float = LEAGUE_DEFAULTS['opp_paint_pts']
    three_pointers_made: float = 0.0
    field_goals_attempted: float = 0.0
    field_goals_made: float = 0.0
    opp_three_point_pct: float = LEAGUE_DEFAULTS['opp_three_point_pct']
    assists: float = 0.0
    opponent_turnovers: float = LEAGUE_DEFAULTS['opponent_turnovers']
    turnovers: float = LEAGUE_DEFAULTS['turnovers']
    offensive_rebounds: float = LEAGUE_DEFAULTS['offensive_rebounds']
    defensive_rebounds: float = LEAGUE_DEFAULTS['defensive_rebounds']
    blocks: float = LEAGUE_DEFAULTS['blocks']
    opponent_assists: float = LEAGUE_DEFAULTS['opponent_assists']
    games_played: Optional[int] = None

    @property
    def record(self) -> Record:
        return Record(self.wins, self.losses)

    @property
    def three_point_rate(self) -> float:
        """Made threes per field goal attempt."""
        if not self.field_goals_attempted:
            return 0.0
        return self.three_pointers_made / self.field_goals_attempted

    @property
    def assist_rate(self) -> float:
        """Assists per made field goal."""
        if not self.field_goals_made:
            return 0.0
        return self.assists / self.field_goals_made

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> 'GeneralStats':
        data = data or {}
        games = _num(data, 'gamesPlayed', None)
        # Feeds use either oppThreePointPct or opponent3PPercent
        opp_three = _positive(data, 'oppThreePointPct', None)
        if opp_three is None:
            opp_three = _positive(data, 'opponent3PPercent', LEAGUE_DEFAULTS['opp_three_point_pct'])

        return cls(
            wins=int(_num(data, 'wins')),
            losses=int(_num(data, 'losses')),
            points=_positive(data, 'points', LEAGUE_DEFAULTS['team_points']),
            paint_pts=_num(data, 'paintPts'),
            opp_paint_pts=_positive(data, 'oppPaintPts', LEAGUE_DEFAULTS['opp_paint_pts']),
            three_pointers_made=_num(data, 'threePointersMade'),
            field_goals_attempted=_num(data, 'fieldGoalsAttempted'),
            field_goals_made=_num(data, 'fieldGoalsMade'),
            opp_three_point_pct=opp_three,
            assists=_num(data, 'assists'),
            opponent_turnovers=_positive(data, 'opponentTurnovers', LEAGUE_DEFAULTS['opponent_turnovers']),
            turnovers=_positive(data, 'turnovers', LEAGUE_DEFAULTS['turnovers']),
            offensive_rebounds=_positive(data, 'offensiveRebounds', LEAGUE_DEFAULTS['offensive_rebounds']),
            defensive_rebounds=_positive(data, 'defensiveRebounds', LEAGUE_DEFAULTS['defensive_rebounds']),
            blocks=_positive(data, 'blocks', LEAGUE_DEFAULTS['blocks']),
            opponent_assists=_positive(data, 'opponentAssists', LEAGUE_DEFAULTS['opponent_assists']),
            games_played=int(games) if games is not None else None,
        )


@dataclass(frozen=True)
class AdvancedStats:
    """Ratings per 100 possessions and pace. Pace stays None when unknown."""
    offensive_rating: float = LEAGUE_DEFAULTS['offensive_rating']
    defensive_rating: float = LEAGUE_DEFAULTS['defensive_rating']
    pace: Optional[float] = None

    @property
    def net_rating(self) -> float:
        return self.offensive_rating - self.defensive_rating

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> 'AdvancedStats':
        data = data or {}
        return cls(
            offensive_rating=_positive(data, 'offensiveRating', LEAGUE_DEFAULTS['offensive_rating']),
            defensive_rating=_positive(data, 'defensiveRating', LEAGUE_DEFAULTS['defensive_rating']),
            pace=_positive(data, 'pace', None),
        )


@dataclass(frozen=True)
class StyleProfile:
    """
    Offensive and defensive tendencies.

    Fields that gate an enhancement rule stay None when the feed does not
    provide them; the rule is then skipped.
    """
    pace: Optional[float] = None
    three_point_rate: Optional[float] = None
    paint_touches: float = 0.0
    assist_rate: Optional[float] = None
    transition_frequency: Optional[float] = None
    opponent_three_point_pct: float = LEAGUE_DEFAULTS['opp_three_point_pct']
    points_in_paint_against: float = LEAGUE_DEFAULTS['style_paint_against']
    transition_defense: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> Optional['StyleProfile']:
        if not data:
            return None
        offense = data.get('offensiveStyle') or {}
        defense = data.get('defensiveStyle') or {}
        shots = offense.get('shotSelection') or {}
        ball = offense.get('ballMovement') or {}

        return cls(
            pace=_positive(offense, 'pace', None),
            three_point_rate=_num(shots, 'threePointRate', None),
            paint_touches=_num(shots, 'paintTouches'),
            assist_rate=_num(ball, 'assistRate', None),
            transition_frequency=_positive(offense, 'transitionFrequency', None),
            opponent_three_point_pct=_positive(
                defense, 'opponentThreePointPct', LEAGUE_DEFAULTS['opp_three_point_pct']
            ),
            points_in_paint_against=_positive(
                defense, 'pointsInPaintAgainst', LEAGUE_DEFAULTS['style_paint_against']
            ),
            transition_defense=_positive(defense, 'transitionDefense', None),
        )


@dataclass(frozen=True)
class LineupUnit:
    """A five-man combination and how it has performed together."""
    players: Tuple[str, ...] = ()
    minutes_together: float = 0.0
    plus_minus: float = 0.0
    net_rating: float = 0.0
    pace: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> Optional['LineupUnit']:
        if not data:
            return None
        players = data.get('players') or ()
        if isinstance(players, str):
            players = tuple(p.strip() for p in players.split(' - ') if p.strip())
        return cls(
            players=tuple(players),
            minutes_together=_num(data, 'minutesTogether'),
            plus_minus=_num(data, 'plusMinus'),
            net_rating=_num(data, 'netRating'),
            pace=_positive(data, 'pace', None),
        )


@dataclass(frozen=True)
class LineupProfile:
    """Rotation intelligence derived from lineup combinations."""
    starting_lineup: Optional[LineupUnit] = None
    bench_units: Tuple[LineupUnit, ...] = ()
    closing_lineup: Optional[LineupUnit] = None
    confidence: float = 0.0
    rotation_depth: int = 0
    total_minutes: float = 0.0

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> Optional['LineupProfile']:
        if not data:
            return None
        rotation = data.get('rotationIntelligence', data)
        if not rotation:
            return None
        bench = tuple(
            unit for unit in (LineupUnit.from_dict(b) for b in rotation.get('benchUnits') or [])
            if unit is not None
        )
        return cls(
            starting_lineup=LineupUnit.from_dict(rotation.get('startingLineup')),
            bench_units=bench,
            closing_lineup=LineupUnit.from_dict(rotation.get('closingLineup')),
            confidence=_num(rotation, 'confidence'),
            rotation_depth=int(_num(rotation, 'rotationDepth')),
            total_minutes=_num(rotation, 'totalMinutesAnalyzed'),
        )


@dataclass(frozen=True)
class TeamStatProfile:
    """Everything the engine knows about one team. Read-only."""
    abbreviation: str
    name: str = ''
    general: GeneralStats = field(default_factory=GeneralStats)
    advanced: AdvancedStats = field(default_factory=AdvancedStats)
    style: Optional[StyleProfile] = None
    lineups: Optional[LineupProfile] = None
    home_record: Optional[Record] = None
    away_record: Optional[Record] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any], abbreviation: str = '', name: str = '') -> 'TeamStatProfile':
        """
        Build a profile from the team feed shape:
        {general, advanced, style?, lineups?, homeRecord?, awayRecord?}
        """
        data = data or {}
        general = data.get('general') or {}
        return cls(
            abbreviation=abbreviation or str(data.get('abbreviation') or ''),
            name=name or str(data.get('name') or ''),
            general=GeneralStats.from_dict(general),
            advanced=AdvancedStats.from_dict(data.get('advanced')),
            style=StyleProfile.from_dict(data.get('style')),
            lineups=LineupProfile.from_dict(data.get('lineups')),
            home_record=Record.from_dict(data.get('homeRecord') or general.get('homeRecord')),
            away_record=Record.from_dict(data.get('awayRecord') or general.get('awayRecord')),
        )


# =============================================================================
# INJURIES & SCHEDULE
# =============================================================================

@dataclass(frozen=True)
class InjuryRecord:
    """One line of an injury report."""
    team: str
    player_name: str
    status: InjuryStatus
    description: str = ''
    source: str = ''

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'InjuryRecord':
        status = data.get('status')
        if not isinstance(status, InjuryStatus):
            status = InjuryStatus.from_report_status(str(status or ''))
        return cls(
            team=str(data.get('team') or ''),
            player_name=str(data.get('playerName') or data.get('player_name') or ''),
            status=status,
            description=str(data.get('description') or ''),
            source=str(data.get('source') or ''),
        )

    def to_dict(self) -> Dict:
        return {
            'team': self.team,
            'player_name': self.player_name,
            'status': self.status.value,
            'description': self.description,
            'source': self.source,
        }


@dataclass(frozen=True)
class ScheduleContext:
    """
    Fatigue and rest for one team going into a game.

    rest_advantage is in days relative to the opponent; positive favors
    this team.
    """
    back_to_back: bool = False
    rest_days: int = 1
    rest_advantage: float = 0.0
    overtime_likely: bool = False

    def to_dict(self) -> Dict:
        return {
            'back_to_back': self.back_to_back,
            'rest_days': self.rest_days,
            'rest_advantage': self.rest_advantage,
            'overtime_likely': self.overtime_likely,
        }


# =============================================================================
# INTERMEDIATE RESULTS
# =============================================================================

@dataclass(frozen=True)
class EnhancementMultiplier:
    """A named multiplicative boost. None means the stat is untouched."""
    name: str
    points: Optional[float] = None
    assists: Optional[float] = None
    rebounds: Optional[float] = None
    three_pointers: Optional[float] = None
    reason: str = ''

    def to_dict(self) -> Dict:
        return {
            'name': self.name,
            'points': self.points,
            'assists': self.assists,
            'rebounds': self.rebounds,
            'three_pointers': self.three_pointers,
            'reason': self.reason,
        }


@dataclass(frozen=True)
class GameScriptBattle:
    """A detected statistical mismatch between the two teams."""
    type: BattleType
    advantage_team: str
    differential: float
    confidence: str  # "Medium" | "High"

    @property
    def is_high(self) -> bool:
        return self.confidence == 'High'

    def to_dict(self) -> Dict:
        return {
            'type': self.type.value,
            'advantage_team': self.advantage_team,
            'differential': round(self.differential, 3),
            'confidence': self.confidence,
        }


@dataclass
class GameScript:
    """Strategic read of the matchup."""
    battles: List[GameScriptBattle] = field(default_factory=list)
    insights: List[str] = field(default_factory=list)
    predicted_approaches: List[str] = field(default_factory=list)
    confidence: str = 'Conservative'

    def battle_for(self, battle_type: BattleType, team: str) -> Optional[GameScriptBattle]:
        """First battle of a given type won by `team`, if any."""
        for battle in self.battles:
            if battle.type == battle_type and battle.advantage_team == team:
                return battle
        return None

    def to_dict(self) -> Dict:
        return {
            'battles': [b.to_dict() for b in self.battles],
            'insights': list(self.insights),
            'predicted_approaches': list(self.predicted_approaches),
            'confidence': self.confidence,
        }


@dataclass
class PaceEstimate:
    """Game pace with the layers that produced it."""
    pace: float
    confidence: str
    data_layers: int
    breakdown: List[str] = field(default_factory=list)
    unclamped: float = 0.0

    def to_dict(self) -> Dict:
        return {
            'pace': round(self.pace, 2),
            'confidence': self.confidence,
            'data_layers': self.data_layers,
            'breakdown': list(self.breakdown),
        }


# =============================================================================
# OUTPUTS
# =============================================================================

@dataclass
class Projection:
    """
    Point estimate with spread.

    Attributes:
        mean: Point estimate
        std_dev: Adjusted standard deviation
        ci68: (low, high) one std dev band, low floored at 0
        ci95: (low, high) two std dev band, low floored at 0
        reasons: Ordered adjustment layers that produced `mean`
        variance_factors: Context multipliers applied to `std_dev`
    """
    mean: float
    std_dev: float
    ci68: Tuple[float, float]
    ci95: Tuple[float, float]
    reasons: List[str] = field(default_factory=list)
    variance_factors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            'mean': self.mean,
            'std_dev': self.std_dev,
            'ci68': list(self.ci68),
            'ci95': list(self.ci95),
            'reasons': list(self.reasons),
            'variance_factors': list(self.variance_factors),
        }


@dataclass
class PlayerProjection:
    """Final projected line for one player."""
    player_name: str
    team: str
    position: str
    tier: ImpactTier
    is_home: bool

    # Baseline (after injury adjustments, before enhancements)
    base_points: float
    base_rebounds: float
    base_assists: float
    base_three_pointers: float
    minutes: float
    steals: float
    blocks: float

    # Enhanced
    points: float
    rebounds: float
    assists: float
    three_pointers: float
    free_throws_attempted: float
    three_pointers_attempted: float

    points_multiplier: float = 1.0
    game_script_boost: float = 0.0
    defense_multiplier: float = 1.0
    projection: Optional[Projection] = None

    injury_adjusted: str = ''
    uncertainty: float = 0.0
    status_note: str = ''
    usage_pct: float = 0.0
    games_played: int = 0
    reasons: List[str] = field(default_factory=list)

    @property
    def total_enhancement_pct(self) -> float:
        return (self.points_multiplier - 1.0) * 100

    def to_dict(self) -> Dict:
        return {
            'player_name': self.player_name,
            'team': self.team,
            'position': self.position,
            'tier': self.tier.value,
            'is_home': self.is_home,
            'base_points': round(self.base_points, 2),
            'base_rebounds': round(self.base_rebounds, 2),
            'base_assists': round(self.base_assists, 2),
            'base_three_pointers': round(self.base_three_pointers, 2),
            'minutes': round(self.minutes, 2),
            'points': round(self.points, 2),
            'rebounds': round(self.rebounds, 2),
            'assists': round(self.assists, 2),
            'three_pointers': round(self.three_pointers, 2),
            'free_throws_attempted': round(self.free_throws_attempted, 2),
            'three_pointers_attempted': round(self.three_pointers_attempted, 2),
            'points_multiplier': round(self.points_multiplier, 4),
            'game_script_boost': self.game_script_boost,
            'defense_multiplier': round(self.defense_multiplier, 4),
            'projection': self.projection.to_dict() if self.projection else None,
            'injury_adjusted': self.injury_adjusted,
            'uncertainty': round(self.uncertainty, 4),
            'status_note': self.status_note,
            'reasons': list(self.reasons),
        }


@dataclass
class TeamProjection:
    """Final projected score for one team."""
    abbreviation: str
    name: str
    is_home: bool
    score: int
    possessions: float
    efficiency: float
    projection: Projection
    breakdown: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> Dict:
        return {
            'abbreviation': self.abbreviation,
            'name': self.name,
            'is_home': self.is_home,
            'score': self.score,
            'possessions': self.possessions,
            'efficiency': self.efficiency,
            'projection': self.projection.to_dict(),
            'breakdown': dict(self.breakdown),
        }


@dataclass
class ConfidenceAssessment:
    """Overall star rating for a game prediction."""
    stars: int
    level: str
    score: float
    factors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            'stars': self.stars,
            'level': self.level,
            'score': self.score,
            'factors': list(self.factors),
        }


@dataclass
class GameProjection:
    """Everything produced for one game."""
    away: TeamProjection
    home: TeamProjection
    players: List[PlayerProjection]
    game_script: GameScript
    pace: PaceEstimate
    margin: float
    favorite: str
    away_win_probability: float
    home_win_probability: float
    confidence: ConfidenceAssessment
    home_advantage: float
    strength_differential: float
    injuries: List[InjuryRecord] = field(default_factory=list)
    excluded_players: List[str] = field(default_factory=list)
    game_date: str = ''

    @property
    def matchup(self) -> str:
        return f"{self.away.abbreviation} @ {self.home.abbreviation}"

    @property
    def total(self) -> int:
        return self.away.score + self.home.score

    def players_for(self, team: str) -> List[PlayerProjection]:
        return [p for p in self.players if p.team == team]

    def to_dict(self) -> Dict:
        return {
            'game_date': self.game_date,
            'matchup': self.matchup,
            'away': self.away.to_dict(),
            'home': self.home.to_dict(),
            'total': self.total,
            'margin': round(self.margin, 1),
            'favorite': self.favorite,
            'away_win_probability': round(self.away_win_probability, 4),
            'home_win_probability': round(self.home_win_probability, 4),
            'pace': self.pace.to_dict(),
            'confidence': self.confidence.to_dict(),
            'home_advantage': round(self.home_advantage, 2),
            'strength_differential': round(self.strength_differential, 2),
            'game_script': self.game_script.to_dict(),
            'players': [p.to_dict() for p in self.players],
            'injuries': [i.to_dict() for i in self.injuries],
            'excluded_players': list(self.excluded_players),
        }
