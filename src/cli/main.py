"""
Main CLI Module for Trend Segmentation

Commands:
- segment: Segment a price CSV into alternating trend segments
- compare: Rank two close-series CSVs by relative-strength trend
- tournament: Eliminate instruments from a weekly-bar database pairwise
- plot: Render a segments JSON file as a scatter image
"""

import argparse
import logging
import random
import sys
from pathlib import Path
from typing import List, Optional

from ..data.ohlc_loader import load_close_series, load_price_series
from ..data.sqlite_source import WeeklyBarStore
from ..relative_strength.ratio_builder import RatioSeriesBuilder
from ..relative_strength.tournament import filter_candidates, tournament_elimination
from ..segment_log.io import read_segments, write_log, write_segments
from ..segment_log.schema import TrendLog, TrendLogMeta
from ..trend_analysis.errors import TrendAnalysisError
from ..trend_analysis.pipeline import segment_prices
from ..trend_analysis.trend_config import TrendConfig
from ..visualization.segment_plot import save_segment_plot

logger = logging.getLogger(__name__)


def configure_logging(verbose: int) -> None:
    """Map -v count to a log level: WARNING, INFO, DEBUG."""
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose >= 2:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def _read_codes(path: Path) -> List[str]:
    """One instrument code per line; blank lines ignored."""
    with open(path, "r", encoding="utf-8") as f:
        return [line.strip() for line in f if line.strip()]


def run_segment_command(args) -> bool:
    """Segment a price series and write the segments as JSON."""
    try:
        config = TrendConfig.default().with_overrides(threshold=args.threshold)
        records = load_price_series(args.data)
        segments = segment_prices(records, config=config)
    except (FileNotFoundError, ValueError, TrendAnalysisError) as e:
        print(f"Error segmenting {args.data}: {e}")
        return False

    if args.with_meta:
        log = TrendLog(
            meta=TrendLogMeta(
                instrument=args.instrument or Path(args.data).stem,
                grid_kind="price",
                threshold=config.threshold,
                date_range_start=records[0].date if records else None,
                date_range_end=records[-1].date if records else None,
            ),
            segments=segments,
        )
        write_log(log, args.output)
    else:
        write_segments(segments, args.output)
    print(f"Wrote {len(segments)} segments to {args.output}")

    if args.plot:
        save_segment_plot(segments, args.plot, title=args.instrument or Path(args.data).stem)
        print(f"Saved plot to {args.plot}")

    return True


def run_compare_command(args) -> bool:
    """Compare two close series and print the favoured instrument."""
    code_a = args.code_a or Path(args.a).stem
    code_b = args.code_b or Path(args.b).stem
    try:
        series_a = load_close_series(args.a)
        series_b = load_close_series(args.b)
        result = RatioSeriesBuilder().compare(code_a, series_a, code_b, series_b)
    except (FileNotFoundError, ValueError, TrendAnalysisError) as e:
        print(f"Error comparing {code_a} and {code_b}: {e}")
        return False

    if result.verdict is None:
        print(f"{result.winner} (no overlapping dates, longer history)")
    else:
        print(f"{result.winner} (final ratio trend {result.verdict.value}, "
              f"{result.ratio_count} ratios, {len(result.segments)} segments)")

    if args.output:
        write_segments(result.segments, args.output)
    return True


def run_tournament_command(args) -> bool:
    """Run tournament elimination over instruments in a weekly-bar database."""
    try:
        store = WeeklyBarStore(Path(args.db))
        include_only = _read_codes(Path(args.include)) if args.include else None
        candidates = filter_candidates(store.fetch_distinct_codes(), include_only=include_only)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error loading candidates: {e}")
        return False

    logger.info(f"{len(candidates)} candidates, exit condition {args.exit_condition}")
    builder = RatioSeriesBuilder()

    def compare(code_a: str, code_b: str) -> str:
        return builder.match_winner(
            code_a, store.fetch_close_series(code_a, args.end_date),
            code_b, store.fetch_close_series(code_b, args.end_date),
        )

    rng = random.Random(args.seed) if args.seed is not None else None
    try:
        survivors = tournament_elimination(
            candidates,
            compare,
            exit_condition=args.exit_condition,
            rng=rng,
            max_workers=args.workers,
        )
    except (ValueError, TrendAnalysisError) as e:
        print(f"Tournament failed: {e}")
        return False

    for code in survivors:
        print(code)
    return True


def run_plot_command(args) -> bool:
    """Render a segments JSON file as a scatter image."""
    try:
        segments = read_segments(args.segments)
        save_segment_plot(segments, args.output, title=Path(args.segments).stem)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error plotting {args.segments}: {e}")
        return False
    print(f"Saved plot to {args.output}")
    return True


def create_parser():
    """Create argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        description="Grid-aligned trend segmentation CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument(
        '--verbose', '-v',
        action='count',
        default=0,
        help='Increase logging verbosity (-v info, -vv debug)'
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    segment_parser = subparsers.add_parser(
        'segment',
        help='Segment a high/low/close CSV into trend segments'
    )
    segment_parser.add_argument('--data', required=True, help='Input CSV (trade_date/date, high, low, close)')
    segment_parser.add_argument('--output', required=True, help='Output segments JSON')
    segment_parser.add_argument('--plot', help='Optional PNG path for a scatter plot')
    segment_parser.add_argument('--instrument', help='Instrument code recorded in metadata')
    segment_parser.add_argument(
        '--threshold',
        type=int,
        default=TrendConfig.default().threshold,
        help='Hysteresis margin in grid steps (default: 3)'
    )
    segment_parser.add_argument(
        '--with-meta',
        action='store_true',
        help='Write a log with metadata instead of a bare segment array'
    )

    compare_parser = subparsers.add_parser(
        'compare',
        help='Rank two close-series CSVs by relative-strength trend'
    )
    compare_parser.add_argument('--a', required=True, help='Close CSV for instrument A')
    compare_parser.add_argument('--b', required=True, help='Close CSV for instrument B')
    compare_parser.add_argument('--code-a', help='Identifier for A (default: file stem)')
    compare_parser.add_argument('--code-b', help='Identifier for B (default: file stem)')
    compare_parser.add_argument('--output', help='Optional JSON path for the ratio segments')

    tournament_parser = subparsers.add_parser(
        'tournament',
        help='Eliminate instruments pairwise from a weekly-bar database'
    )
    tournament_parser.add_argument('--db', required=True, help='SQLite database with a weekly table')
    tournament_parser.add_argument(
        '--exit-condition',
        type=int,
        default=10,
        help='Stop when at most this many candidates remain (default: 10)'
    )
    tournament_parser.add_argument('--end-date', help='Inclusive last trade date (YYYYMMDD)')
    tournament_parser.add_argument('--include', help='File with one code per line to restrict candidates')
    tournament_parser.add_argument('--seed', type=int, help='Random seed for reproducible shuffles')
    tournament_parser.add_argument('--workers', type=int, help='Thread pool size for a round\'s matches')

    plot_parser = subparsers.add_parser(
        'plot',
        help='Render a segments JSON file as a scatter image'
    )
    plot_parser.add_argument('--segments', required=True, help='Segments JSON array')
    plot_parser.add_argument('--output', required=True, help='Output image path (PNG)')

    return parser


COMMANDS = {
    'segment': run_segment_command,
    'compare': run_compare_command,
    'tournament': run_tournament_command,
    'plot': run_plot_command,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    configure_logging(args.verbose)
    success = COMMANDS[args.command](args)
    return 0 if success else 1


if __name__ == "__main__":
    sys.exit(main())
