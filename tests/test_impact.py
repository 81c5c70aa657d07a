"""
Tests for impact scoring, tiers and position resolution.
"""

import pytest

from conftest import make_player
from nba_projection.impact import calculate_impact_score, calculate_player_impact, classify_tier, tag_impact
from nba_projection.models import ImpactTier
from nba_projection.positions import resolve_position, statistical_position


class TestImpactScore:

    def test_weighted_sum(self):
        player = make_player('A', points=20, assists=5, rebounds=6, steals=1, blocks=1)
        # 20 + 7.5 + 7.2 + 2 + 2
        assert calculate_impact_score(player) == pytest.approx(38.7)

    def test_missing_player_scores_zero(self):
        assert calculate_impact_score(None) == 0.0
        assert calculate_player_impact(None).tier == ImpactTier.BENCH

    def test_thresholds_are_strict(self):
        assert classify_tier(40.0) == ImpactTier.STAR
        assert classify_tier(40.01) == ImpactTier.SUPERSTAR
        assert classify_tier(25.0) == ImpactTier.KEY_ROLE
        assert classify_tier(15.0) == ImpactTier.BENCH
        assert classify_tier(15.5) == ImpactTier.KEY_ROLE

    def test_tag_impact_does_not_mutate(self):
        original = make_player('A', points=30, assists=8, rebounds=8)
        tagged = tag_impact([original])[0]
        assert original.impact is None
        assert tagged.tier == ImpactTier.SUPERSTAR
        assert tagged.points == original.points


class TestPositions:

    def test_specific_position_kept(self):
        assert resolve_position(make_player('A', position='PG'), 3) == 'PG'

    def test_compound_uses_primary(self):
        assert resolve_position(make_player('A', position='C-F'), 4) == 'C'

    def test_forward_split_by_rebounds(self):
        assert resolve_position(make_player('A', position='F', rebounds=8.5), 0) == 'PF'
        assert resolve_position(make_player('A', position='F', rebounds=4.0, blocks=0.2), 0) == 'SF'

    def test_guard_split_by_assists_and_index(self):
        assert resolve_position(make_player('A', position='G', assists=2.0), 0) == 'PG'
        assert resolve_position(make_player('A', position='G', assists=6.5), 3) == 'PG'
        assert resolve_position(make_player('A', position='G', assists=2.0), 2) == 'SG'

    def test_missing_position_uses_stats(self):
        big = make_player('A', rebounds=10.0, blocks=1.5, assists=1.0)
        assert resolve_position(big, 4) == 'C'

    def test_roster_order_fallback(self):
        quiet = make_player('A', assists=1.0, rebounds=2.0, blocks=0.0, three_pointers_made=0.0)
        assert statistical_position(quiet, 0) == 'PG'
        assert statistical_position(quiet, 1) == 'SG'
        assert statistical_position(quiet, 3) == 'SF'
        assert statistical_position(quiet, 4) == 'PF'
        assert statistical_position(quiet, 6) == 'C'

    def test_unknown_position_inferred(self):
        player = make_player('A', position='XX', assists=7.0)
        assert resolve_position(player, 5) == 'PG'
