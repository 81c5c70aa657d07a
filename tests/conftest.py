"""
Pytest fixtures for NBA Projection Engine tests.
"""
from dataclasses import replace

import pytest

from nba_projection.models import (
    AdvancedStats,
    GeneralStats,
    InjuryRecord,
    InjuryStatus,
    LineupProfile,
    LineupUnit,
    PlayerStatLine,
    StyleProfile,
    TeamStatProfile,
)


def make_player(name: str, team: str = 'BOS', **stats) -> PlayerStatLine:
    """PlayerStatLine with sensible rotation-player defaults."""
    defaults = {
        'position': '',
        'points': 12.0,
        'rebounds': 4.0,
        'assists': 2.0,
        'steals': 0.8,
        'blocks': 0.4,
        'three_pointers_made': 1.2,
        'minutes': 26.0,
        'usage_pct': 18.0,
        'games_played': 20,
    }
    defaults.update(stats)
    return PlayerStatLine(player_name=name, team=team, **defaults)


def make_team(abbreviation: str, name: str = '', **overrides) -> TeamStatProfile:
    """
    TeamStatProfile with league-average stats.

    Keyword overrides go to general (g_*), advanced (a_*) or the profile
    itself (style, lineups, home_record, away_record).
    """
    general = {k[2:]: v for k, v in overrides.items() if k.startswith('g_')}
    advanced = {k[2:]: v for k, v in overrides.items() if k.startswith('a_')}
    profile = {k: v for k, v in overrides.items() if not k.startswith(('g_', 'a_'))}

    general.setdefault('wins', 10)
    general.setdefault('losses', 10)
    general.setdefault('paint_pts', 48.0)
    general.setdefault('field_goals_attempted', 88.0)
    general.setdefault('field_goals_made', 41.0)
    # 3PM per FGA equal to the 0.36 allowed: no perimeter battle by default
    general.setdefault('three_pointers_made', 31.68)
    general.setdefault('assists', 25.0)
    advanced.setdefault('pace', 100.0)

    return TeamStatProfile(
        abbreviation=abbreviation,
        name=name or abbreviation,
        general=GeneralStats(**general),
        advanced=AdvancedStats(**advanced),
        **profile,
    )


def injury(team: str, name: str, status: InjuryStatus, description: str = 'Injury/Illness') -> InjuryRecord:
    return InjuryRecord(team=team, player_name=name, status=status, description=description)


@pytest.fixture
def neutral_away():
    return make_team('NYK', 'New York Knicks')


@pytest.fixture
def neutral_home():
    return make_team('BOS', 'Boston Celtics')


@pytest.fixture
def fast_style():
    return StyleProfile(
        pace=104.0,
        three_point_rate=0.45,
        paint_touches=0.40,
        assist_rate=0.66,
        transition_frequency=0.20,
        opponent_three_point_pct=0.38,
        points_in_paint_against=46.0,
        transition_defense=0.55,
    )


@pytest.fixture
def slow_style():
    return StyleProfile(
        pace=97.0,
        three_point_rate=0.35,
        assist_rate=0.55,
        opponent_three_point_pct=0.38,
        points_in_paint_against=46.0,
        transition_defense=0.55,
    )


@pytest.fixture
def dominant_lineups():
    starters = LineupUnit(
        players=('A', 'B', 'C', 'D', 'E'),
        minutes_together=180.0,
        plus_minus=22.0,
        net_rating=14.0,
        pace=101.0,
    )
    return LineupProfile(
        starting_lineup=starters,
        closing_lineup=starters,
        confidence=0.95,
        rotation_depth=8,
        total_minutes=400.0,
    )


@pytest.fixture
def boston_roster():
    return [
        make_player('Jayson Tatum', points=27.0, rebounds=8.5, assists=4.8, steals=1.1,
                    blocks=0.6, three_pointers_made=3.1, minutes=36.0, usage_pct=30.0, position='F'),
        make_player('Jaylen Brown', points=23.0, rebounds=5.5, assists=3.6, steals=1.2,
                    blocks=0.4, three_pointers_made=2.1, minutes=34.0, usage_pct=27.0, position='G-F'),
        make_player('Derrick White', points=15.0, rebounds=4.2, assists=4.9, steals=1.0,
                    blocks=1.0, three_pointers_made=2.6, minutes=32.0, usage_pct=18.5, position='G'),
        make_player('Jrue Holiday', points=11.0, rebounds=5.0, assists=4.5, steals=0.9,
                    blocks=0.5, three_pointers_made=1.6, minutes=31.0, usage_pct=15.0, position='G'),
        make_player('Kristaps Porzingis', points=19.0, rebounds=7.0, assists=1.8, steals=0.6,
                    blocks=1.8, three_pointers_made=2.0, minutes=29.0, usage_pct=24.0, position='C'),
        make_player('Al Horford', points=8.0, rebounds=6.0, assists=2.3, steals=0.6,
                    blocks=1.0, three_pointers_made=1.5, minutes=25.0, usage_pct=12.0, position='C-F'),
        make_player('Payton Pritchard', points=9.0, rebounds=3.0, assists=3.0, steals=0.5,
                    blocks=0.1, three_pointers_made=1.8, minutes=22.0, usage_pct=17.0, position='G'),
    ]


@pytest.fixture
def knicks_roster(boston_roster):
    renamed = [
        'Jalen Brunson', 'Karl-Anthony Towns', 'Mikal Bridges', 'OG Anunoby',
        'Josh Hart', 'Mitchell Robinson', 'Miles McBride',
    ]
    return [replace(p, player_name=n, team='NYK') for p, n in zip(boston_roster, renamed)]


@pytest.fixture
def sample_report_text():
    return "\n".join([
        "Injury Report: 01/15/25 05:30 PM",
        "Game Date Game Time Matchup Team Player Name Current Status Reason",
        "01/15/2025 07:30 (ET) NYK@BOS Boston Celtics Tatum, Jayson Questionable Injury/Illness - Right Knee; Bursitis",
        "Porzingis, Kristaps Out Injury/Illness - Left Ankle; Sprain",
        "New York Knicks Brunson, Jalen Probable Injury/Illness - Left Ankle; Soreness",
        "Page 1 of 3",
        "NewYorkKnicksRobinson,MitchellOutInjury/Illness-LeftAnkle;Surgery",
        "Los Angeles Lakers NOT YET SUBMITTED",
    ])
