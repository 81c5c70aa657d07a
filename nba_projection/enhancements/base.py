"""
Base Enhancement Rule Framework

Defines the abstract base class and the context shared by every
enhancement rule. Each rule looks at one player in one matchup and either
emits a named EnhancementMultiplier or stays silent.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Optional, Sequence

from ..models import (
    EnhancementMultiplier,
    ImpactTier,
    LineupProfile,
    PlayerStatLine,
    StyleProfile,
)


@dataclass
class EnhancementContext:
    """
    Full context for enhancing one player's projection.

    Attributes:
        player: Injury-adjusted stat line (impact tagged)
        index: 0-based rank in the team's minutes rotation
        position: Resolved specific position (PG/SG/SF/PF/C)
        team_style: This team's style profile, if known
        opponent_style: Opponent style profile, if known
        lineups: This team's rotation intelligence, if known
        is_home: Whether this team is at home
    """
    player: PlayerStatLine
    index: int
    position: str
    team_style: Optional[StyleProfile] = None
    opponent_style: Optional[StyleProfile] = None
    lineups: Optional[LineupProfile] = None
    is_home: bool = False

    @property
    def has_styles(self) -> bool:
        return self.team_style is not None and self.opponent_style is not None

    @property
    def tier(self) -> ImpactTier:
        return self.player.tier

    def to_dict(self) -> Dict:
        return {
            'player': self.player.player_name,
            'index': self.index,
            'position': self.position,
            'has_styles': self.has_styles,
            'has_lineups': self.lineups is not None,
            'is_home': self.is_home,
        }


class BaseRule(ABC):
    """
    Abstract base class for all enhancement rules.

    Each rule implements:
    - evaluate(): Returns an EnhancementMultiplier when its condition holds
    - available(): Whether the inputs the rule needs are present
    """

    # Rule name (also the multiplier name)
    name: str = "base"

    # Human-readable reason recorded on the projection
    reason: str = ""

    def available(self, ctx: EnhancementContext) -> bool:
        """Whether this rule has the data it needs. Missing data skips the rule."""
        return True

    @abstractmethod
    def evaluate(
        self,
        ctx: EnhancementContext,
        fired: Sequence[EnhancementMultiplier],
    ) -> Optional[EnhancementMultiplier]:
        """
        Evaluate the rule for a player.

        Args:
            ctx: Player and matchup context
            fired: Multipliers already emitted by higher-priority rules

        Returns:
            EnhancementMultiplier if the rule fires, else None
        """
        pass

    def _emit(self, **factors: float) -> EnhancementMultiplier:
        """Build this rule's multiplier."""
        return EnhancementMultiplier(name=self.name, reason=self.reason, **factors)


class StyleRule(BaseRule):
    """A rule that needs both teams' style profiles."""

    def available(self, ctx: EnhancementContext) -> bool:
        return ctx.has_styles


class LineupRule(BaseRule):
    """A rule that needs this team's rotation intelligence."""

    def available(self, ctx: EnhancementContext) -> bool:
        return ctx.lineups is not None
