"""
Tests for the enhancement rules, the 1.20 cap and the opponent defense pass.
"""

import pytest

from conftest import make_player, make_team
from nba_projection.composer import EnhancementComposer, cap_multipliers
from nba_projection.enhancements import (
    ALL_RULES,
    BallMovementRule,
    DominantLineupRule,
    DefenseProfile,
    EnhancementContext,
    HomeCourtRule,
    PaceRule,
    StableRotationRule,
    StarMultiplierRule,
    ThreePointRule,
    TransitionRule,
    analyze_opponent_defense,
    apply_defensive_adjustment,
)
from nba_projection.impact import tag_impact
from nba_projection.models import EnhancementMultiplier, ImpactRating, ImpactTier


def _ctx(player, index=0, position='SG', **kwargs):
    return EnhancementContext(player=player, index=index, position=position, **kwargs)


class TestRuleOrder:

    def test_star_multiplier_is_last(self):
        assert ALL_RULES[-1] is StarMultiplierRule
        assert ALL_RULES[0] is PaceRule


class TestStyleRules:

    def test_rules_unavailable_without_styles(self, fast_style):
        ctx = _ctx(make_player('A'), team_style=fast_style)
        assert not PaceRule().available(ctx)
        assert HomeCourtRule().available(ctx)

    def test_pace_rule_top_three_only(self, fast_style, slow_style):
        rule = PaceRule()
        fired = rule.evaluate(_ctx(make_player('A'), index=2, team_style=fast_style, opponent_style=slow_style), [])
        assert fired.points == 1.03
        assert fired.assists == 1.05
        assert rule.evaluate(_ctx(make_player('A'), index=3, team_style=fast_style, opponent_style=slow_style), []) is None

    def test_three_point_rule_needs_shooter(self, fast_style, slow_style):
        rule = ThreePointRule()
        shooter = make_player('A', three_pointers_made=2.5)
        non_shooter = make_player('B', three_pointers_made=1.0)
        assert rule.evaluate(_ctx(shooter, team_style=fast_style, opponent_style=slow_style), []).three_pointers == 1.08
        assert rule.evaluate(_ctx(non_shooter, team_style=fast_style, opponent_style=slow_style), []) is None

    def test_ball_movement_top_two_playmakers(self, fast_style, slow_style):
        rule = BallMovementRule()
        playmaker = make_player('A', assists=6.0)
        fired = rule.evaluate(_ctx(playmaker, index=1, team_style=fast_style, opponent_style=slow_style), [])
        assert fired.assists == 1.10
        assert rule.evaluate(_ctx(playmaker, index=2, team_style=fast_style, opponent_style=slow_style), []) is None

    def test_transition_skipped_without_data(self, slow_style, fast_style):
        # slow_style has no transition frequency
        ctx = _ctx(make_player('A'), team_style=slow_style, opponent_style=fast_style)
        assert TransitionRule().evaluate(ctx, []) is None

    def test_transition_fires_for_wings(self, fast_style):
        ctx = _ctx(make_player('A'), index=2, position='SF', team_style=fast_style, opponent_style=fast_style)
        assert TransitionRule().evaluate(ctx, []).points == 1.04


class TestLineupAndContextRules:

    def test_dominant_lineup_top_five(self, dominant_lineups):
        rule = DominantLineupRule()
        assert rule.evaluate(_ctx(make_player('A'), index=4, lineups=dominant_lineups), []).rebounds == 1.03
        assert rule.evaluate(_ctx(make_player('A'), index=5, lineups=dominant_lineups), []) is None

    def test_stable_rotation(self, dominant_lineups):
        fired = StableRotationRule().evaluate(_ctx(make_player('A'), index=6, lineups=dominant_lineups), [])
        assert fired.points == 1.02

    def test_home_court_role_players(self):
        rule = HomeCourtRule()
        assert rule.evaluate(_ctx(make_player('A'), index=3, is_home=True), []) is not None
        assert rule.evaluate(_ctx(make_player('A'), index=2, is_home=True), []) is None
        assert rule.evaluate(_ctx(make_player('A'), index=5, is_home=False), []) is None

    def test_star_multiplier_needs_prior_advantage(self):
        star = tag_impact([make_player('A', points=28, assists=6, rebounds=7)])[0]
        rule = StarMultiplierRule()
        prior = [EnhancementMultiplier(name='pace', points=1.03)]
        assert rule.evaluate(_ctx(star), []) is None
        fired = rule.evaluate(_ctx(star), prior)
        assert fired.points == 1.04
        assert fired.assists == 1.05

    def test_star_multiplier_ignores_role_players(self):
        role = tag_impact([make_player('A', points=8, assists=1, rebounds=2)])[0]
        prior = [EnhancementMultiplier(name='pace', points=1.03)]
        assert StarMultiplierRule().evaluate(_ctx(role), prior) is None

    @pytest.mark.parametrize('tier', [ImpactTier.SUPERSTAR, ImpactTier.STAR])
    def test_star_multiplier_flat_across_star_tiers(self, tier):
        star = make_player('A', impact=ImpactRating(score=30.0, tier=tier))
        prior = [EnhancementMultiplier(name='pace', points=1.03)]
        fired = StarMultiplierRule().evaluate(_ctx(star), prior)
        assert fired.points == 1.04
        assert fired.assists == 1.05


class TestCap:

    def test_product_capped_at_120(self):
        fired = [
            EnhancementMultiplier(name='a', points=1.10),
            EnhancementMultiplier(name='b', points=1.10),
            EnhancementMultiplier(name='c', points=1.05, assists=1.05),
        ]
        capped = cap_multipliers(fired)
        assert capped.points == pytest.approx(1.20)
        assert capped.assists == pytest.approx(1.05)
        assert capped.rebounds == 1.0

    def test_composer_full_stack_respects_cap(self, fast_style, slow_style, dominant_lineups):
        star = tag_impact([make_player('Star', points=28, assists=6, rebounds=7, three_pointers_made=3.0)])[0]
        ctx = _ctx(
            star, index=0, position='PG',
            team_style=fast_style, opponent_style=slow_style,
            lineups=dominant_lineups, is_home=True,
        )
        result = EnhancementComposer().evaluate(ctx)
        names = [m.name for m in result.fired]
        assert names[-1] == 'star_multiplier'
        assert 'home_court' not in names
        assert result.capped.points == pytest.approx(1.20)
        assert result.capped.points <= 1.20

    def test_enhance_player_without_script_or_defense(self):
        player = tag_impact([make_player('A', points=10.0, assists=2.0, rebounds=4.0)])[0]
        projection = EnhancementComposer().enhance_player(_ctx(player, index=4, is_home=True))
        assert projection.points == pytest.approx(10.2)
        assert projection.rebounds == pytest.approx(4.08)
        assert projection.defense_multiplier == 1.0
        assert projection.reasons == ['home court']


class TestOpponentDefense:

    def test_profile_detection(self):
        opponent = make_team('MIA', g_blocks=5.5, g_opp_three_point_pct=0.38, g_opponent_assists=22.0,
                             a_defensive_rating=106.0)
        profile = analyze_opponent_defense(opponent)
        assert profile.has_elite_rim_protector
        assert profile.zones_frequently
        assert profile.closeout_speed == 'poor'
        assert profile.switch_heavy

    def test_league_average_profile_is_neutral(self):
        profile = analyze_opponent_defense(make_team('MIA'))
        assert not profile.has_elite_rim_protector
        assert not profile.zones_frequently
        assert not profile.switch_heavy
        assert profile.closeout_speed == 'average'

    def test_rim_protector_vs_driver(self):
        profile = analyze_opponent_defense(make_team('MIA', g_blocks=6.0))
        driver = make_player('A', points=22.0, three_pointers_made=1.0, usage_pct=20.0)
        adjustment = apply_defensive_adjustment(driver, 'PG', 2, profile)
        assert adjustment.multiplier == pytest.approx(0.93)
        assert adjustment.free_throw_boost == pytest.approx(1.15)

    def test_elite_closeouts_vs_shooter(self):
        profile = analyze_opponent_defense(make_team('MIA', g_opp_three_point_pct=0.33))
        shooter = make_player('A', points=10.0, three_pointers_made=2.5)
        adjustment = apply_defensive_adjustment(shooter, 'SF', 4, profile)
        assert adjustment.multiplier == pytest.approx(0.94)
        assert adjustment.adjustments == ['Elite closeouts (-6%)']

    def test_weak_paint_vs_post(self):
        profile = analyze_opponent_defense(make_team('MIA', g_opp_paint_pts=54.0))
        big = make_player('A', points=16.0, three_pointers_made=0.2)
        assert apply_defensive_adjustment(big, 'C', 3, profile).multiplier == pytest.approx(1.08)

    def test_defense_pass_outside_cap(self, fast_style, slow_style, dominant_lineups):
        star = tag_impact([make_player('Star', points=28, assists=6, rebounds=7, three_pointers_made=0.5)])[0]
        ctx = _ctx(star, index=0, position='C', team_style=fast_style, opponent_style=slow_style,
                   lineups=dominant_lineups)
        defense = analyze_opponent_defense(make_team('MIA', g_opp_paint_pts=54.0))
        projection = EnhancementComposer().enhance_player(ctx, opponent_defense=defense)
        assert projection.points_multiplier <= 1.20
        assert projection.points == pytest.approx(28 * projection.points_multiplier * 1.08)

    def test_neutral_defense_leaves_rebounds_unchanged(self):
        role = make_player('A', points=10.0, rebounds=10.0, three_pointers_made=0.5)
        ctx = _ctx(role, index=4, position='SF')
        projection = EnhancementComposer(rules=[]).enhance_player(ctx, None, DefenseProfile())
        assert projection.defense_multiplier == 1.0
        assert projection.rebounds == pytest.approx(10.0)
        assert projection.points == pytest.approx(10.0)

    def test_defense_shifts_rebounds_by_damped_deviation(self):
        big = make_player('A', points=16.0, rebounds=10.0, three_pointers_made=0.2)
        ctx = _ctx(big, index=3, position='C')
        defense = analyze_opponent_defense(make_team('MIA', g_opp_paint_pts=54.0))
        projection = EnhancementComposer(rules=[]).enhance_player(ctx, None, defense)
        assert projection.defense_multiplier == pytest.approx(1.08)
        assert projection.rebounds == pytest.approx(10.0 * 1.064)
        assert projection.points == pytest.approx(16.0 * 1.08)
