"""
Tests for the layered pace estimate.
"""

import logging

import pytest

from conftest import make_team
from nba_projection.models import LineupProfile, LineupUnit, StyleProfile
from nba_projection.pace import clamp_pace, estimate_pace, pace_confidence


def _lineups(pace):
    return LineupProfile(starting_lineup=LineupUnit(players=('A',), minutes_together=100.0, pace=pace))


class TestEstimatePace:

    def test_team_layer_with_home_control(self):
        away = make_team('NYK', a_pace=98.0)
        home = make_team('BOS', a_pace=100.0)
        estimate = estimate_pace(away, home)
        # 98*0.45 + 100*0.55 = 99.1, control +0.6
        assert estimate.pace == pytest.approx(99.7)
        assert estimate.data_layers == 1
        assert estimate.confidence == 'Medium'

    def test_slower_home_team_drags_pace(self):
        away = make_team('NYK', a_pace=104.0)
        home = make_team('BOS', a_pace=98.0)
        estimate = estimate_pace(away, home)
        # 104*0.45 + 98*0.55 = 100.7, control capped at -1.5
        assert estimate.pace == pytest.approx(99.2)
        assert 'Home control: -1.5' in estimate.breakdown

    def test_home_control_capped(self):
        away = make_team('NYK', a_pace=90.0)
        home = make_team('BOS', a_pace=110.0)
        estimate = estimate_pace(away, home)
        assert estimate.pace == pytest.approx(90 * 0.45 + 110 * 0.55 + 1.5)

    def test_style_layer_blended(self):
        away = make_team('NYK', a_pace=98.0, style=StyleProfile(pace=100.0))
        home = make_team('BOS', a_pace=100.0, style=StyleProfile(pace=102.0))
        estimate = estimate_pace(away, home)
        style_avg = 100.0 * 0.45 + 102.0 * 0.55
        assert estimate.pace == pytest.approx(99.7 * 0.7 + style_avg * 0.3)
        assert estimate.data_layers == 2
        assert estimate.confidence == 'High'

    def test_lineup_clash_home_control(self):
        away = make_team('NYK', a_pace=98.0, lineups=_lineups(96.0))
        home = make_team('BOS', a_pace=100.0, lineups=_lineups(104.0))
        estimate = estimate_pace(away, home)
        assert estimate.pace == pytest.approx(99.7 + 8.0 * 0.2)
        assert estimate.data_layers == 2

    def test_lineup_clash_away_faster(self):
        away = make_team('NYK', a_pace=98.0, lineups=_lineups(104.0))
        home = make_team('BOS', a_pace=100.0, lineups=_lineups(96.0))
        estimate = estimate_pace(away, home)
        assert estimate.pace == pytest.approx(99.7 - 8.0 * 0.2 * 0.5)

    def test_schedule_context(self):
        away = make_team('NYK', a_pace=98.0)
        home = make_team('BOS', a_pace=100.0)
        estimate = estimate_pace(away, home, back_to_back=True, overtime_likely=True, rest_advantage=6)
        # Rest capped at 4 days
        assert estimate.pace == pytest.approx(99.7 - 2.0 - 1.5 + 2.0)

    def test_no_team_data_uses_league_average(self):
        away = make_team('NYK', a_pace=None)
        home = make_team('BOS', a_pace=None)
        estimate = estimate_pace(away, home, back_to_back=True)
        assert estimate.pace == 100.0
        assert estimate.data_layers == 0
        assert estimate.confidence == 'Low'

    def test_clamped(self):
        away = make_team('NYK', a_pace=80.0)
        home = make_team('BOS', a_pace=80.0)
        estimate = estimate_pace(away, home, back_to_back=True)
        assert estimate.pace == 85.0
        assert estimate.unclamped == pytest.approx(78.0)

    def test_clamp_logs_warning(self, caplog):
        away = make_team('NYK', a_pace=80.0)
        home = make_team('BOS', a_pace=80.0)
        with caplog.at_level(logging.WARNING, logger='nba_projection.pace'):
            estimate_pace(away, home, back_to_back=True)
        warnings = [r for r in caplog.records
                    if r.name == 'nba_projection.pace' and r.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert 'NYK @ BOS' in warnings[0].getMessage()

    def test_in_range_does_not_warn(self, caplog):
        with caplog.at_level(logging.WARNING, logger='nba_projection.pace'):
            estimate_pace(make_team('NYK', a_pace=99.0), make_team('BOS', a_pace=99.0))
        assert not [r for r in caplog.records if r.name == 'nba_projection.pace']


class TestHelpers:

    def test_confidence_monotone(self):
        labels = [pace_confidence(n) for n in range(4)]
        assert labels == ['Low', 'Medium', 'High', 'Very High']

    def test_clamp_bounds(self):
        assert clamp_pace(130.0) == 115.0
        assert clamp_pace(70.0) == 85.0
        assert clamp_pace(99.2) == 99.2
