#!/usr/bin/env python3
"""
NBA Projection Engine - Daily Run Script

Projects every game on a date:

1. Fetch the slate from nba_api
2. Fetch the official injury report (latest published slot)
3. For each game: fetch team/player inputs, run the analyzer
4. Write games/players/strategy/summary CSVs

Usage:
    python scripts/run_projections.py
    python scripts/run_projections.py --date=2025-01-15
    python scripts/run_projections.py --date=2025-01-15 --games=BOS,LAL
    python scripts/run_projections.py --skip-injury-report --output-dir=out
"""

import os
import sys
import argparse
import logging
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from dotenv import load_dotenv
for env_path in ['.env.local', '.env']:
    if os.path.exists(env_path):
        load_dotenv(env_path)
        break

from nba_projection.config import get_settings

# Configure logging
logging.basicConfig(
    level=getattr(logging, get_settings().log_level.upper(), logging.INFO),
    format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger('run_projections')

ET = ZoneInfo('America/New_York')


def filter_games(games, wanted):
    """Keep games involving any of the wanted team abbreviations."""
    if not wanted:
        return games
    wanted = {w.strip().upper() for w in wanted if w.strip()}
    return [g for g in games if g['away_team'] in wanted or g['home_team'] in wanted]


def print_summary(projection):
    away, home = projection.away, projection.home
    print(f"\n{projection.matchup}")
    print(
        f"  {away.abbreviation} {away.score} "
        f"({away.projection.ci68[0]:.0f}-{away.projection.ci68[1]:.0f})  "
        f"{home.abbreviation} {home.score} "
        f"({home.projection.ci68[0]:.0f}-{home.projection.ci68[1]:.0f})"
    )
    print(
        f"  Pace {projection.pace.pace:.1f} ({projection.pace.confidence}) | "
        f"{projection.favorite} by {abs(projection.margin):.0f} | "
        f"Win {away.abbreviation} {projection.away_win_probability:.0%} / "
        f"{home.abbreviation} {projection.home_win_probability:.0%} | "
        f"Confidence {projection.confidence.stars}/5 ({projection.confidence.level})"
    )
    for battle in projection.game_script.battles:
        print(f"  {battle.type.value}: {battle.advantage_team} ({battle.confidence})")
    for player in sorted(projection.players, key=lambda p: p.points, reverse=True)[:6]:
        note = f"  [{player.injury_adjusted}]" if player.injury_adjusted else ''
        print(
            f"    {player.team} {player.player_name:<24} {player.position:<2} "
            f"{player.points:5.1f} pts {player.rebounds:4.1f} reb {player.assists:4.1f} ast{note}"
        )


def run(target_date, wanted_teams=None, output_dir=None, use_injury_report=True):
    """
    Project every game on a date and write the CSVs.

    Returns:
        Number of games analyzed
    """
    from nba_projection.data_provider import get_data_provider
    from nba_projection.engine import GameAnalyzer
    from nba_projection.export import ProjectionAccumulator
    from nba_projection.injury_report_client import get_injury_report_client

    date_str = target_date.isoformat()
    logger.info(f"=== PROJECTING GAMES FOR {date_str} ===")

    provider = get_data_provider()
    games = filter_games(provider.get_todays_games(date_str), wanted_teams)
    if not games:
        logger.warning(f"No games found for {date_str}")
        return 0

    injuries = []
    report_enhanced = False
    if use_injury_report:
        report = get_injury_report_client().fetch(target_date)
        injuries = report.records
        report_enhanced = report.report_enhanced

    analyzer = GameAnalyzer()
    accumulator = ProjectionAccumulator()

    for game in games:
        try:
            inputs = provider.fetch_game_inputs(game, injuries, report_enhanced)
            projection = analyzer.analyze_game(inputs, accumulator)
            print_summary(projection)
        except Exception as e:
            logger.error(f"Error analyzing {game['away_team']} @ {game['home_team']}: {e}")

    written = accumulator.write_csv(output_dir or get_settings().output_dir, date_str)
    logger.info(f"Analyzed {len(accumulator)} games, wrote {len(written)} files")
    return len(accumulator)


def main():
    parser = argparse.ArgumentParser(description='NBA Projection Engine Daily Run')
    parser.add_argument(
        '--date',
        type=str,
        help='Target date (YYYY-MM-DD). Defaults to today (ET).'
    )
    parser.add_argument(
        '--games',
        type=str,
        help='Comma-separated team abbreviations to project (default: all games)'
    )
    parser.add_argument(
        '--output-dir',
        type=str,
        help='CSV output directory (default: NBA_PROJECTION_OUTPUT_DIR or ./output)'
    )
    parser.add_argument(
        '--skip-injury-report',
        action='store_true',
        help='Do not fetch the official injury report'
    )

    args = parser.parse_args()

    target_date = datetime.now(ET).date()
    if args.date:
        target_date = datetime.strptime(args.date, '%Y-%m-%d').date()

    wanted = args.games.split(',') if args.games else None
    analyzed = run(target_date, wanted, args.output_dir, not args.skip_injury_report)
    sys.exit(0 if analyzed else 1)


if __name__ == '__main__':
    main()
