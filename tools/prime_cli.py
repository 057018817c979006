#!/usr/bin/env python3
"""
CLI for the Prime Distance Framework.

Usage:
    python tools/prime_cli.py compute --max 50000      # incremental run with progress
    python tools/prime_cli.py stats --max 1000          # count / max / average distance
    python tools/prime_cli.py top --max 1000 --limit 5  # distance distribution table
    python tools/prime_cli.py render --max 20000        # PNG + index.html report
    python tools/prime_cli.py serve --port 8008         # serve the report directory
"""

import argparse
import asyncio
import os
import sys

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, ROOT)

from prime_distance_framework import (
    CHUNK_SIZE, DEFAULT_BOUND, MIN_UI_BOUND, MAX_UI_BOUND,
    ConsoleNotifier, PrimeExplorer, compute_primes_sync, compute_stats,
)


def parse_bound(text):
    """argparse type for the upper bound: a positive integer."""
    try:
        value = int(text.replace("_", "").replace(",", ""))
    except ValueError:
        raise argparse.ArgumentTypeError(f"bound must be a positive integer, got {text!r}")
    if value <= 0:
        raise argparse.ArgumentTypeError(f"bound must be a positive integer, got {value}")
    return value


def positive_int(text):
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {text!r}")
    if value <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value}")
    return value


def cmd_compute(args):
    """Incremental run with a live progress line and console notifications."""
    label = f"Scanning [2, {args.max:,}]"

    def show_progress(progress):
        end = "\n" if progress >= 100 else ""
        print(f"\r  {label}... {progress:3d}%", end=end, flush=True)

    explorer = PrimeExplorer(args.max, notifier=ConsoleNotifier(),
                             chunk_size=args.chunk_size, on_progress=show_progress)
    try:
        asyncio.run(explorer.calculate())
    except Exception:
        return 1
    print(f"  Found {len(explorer.records)} prime numbers")
    return 0


def cmd_stats(args):
    """Print the summary statistics for one bound."""
    stats = compute_stats(compute_primes_sync(args.max))
    print(f"\n  Bound:            {args.max:,}")
    print(f"  Total primes:     {stats.count}")
    print(f"  Max distance:     {stats.max_distance}")
    print(f"  Average distance: {stats.avg_distance:.2f}")
    return 0


def cmd_top(args):
    """Print the most frequent distances with counts and percentages."""
    explorer = PrimeExplorer(args.max)
    explorer.records = compute_primes_sync(args.max)
    rows = explorer.top_distances(args.limit)
    n_distinct = len(explorer.distribution)

    print(f"\n  {'Distance':>8s}  {'Count':>8s}  {'Percentage':>10s}")
    print("  " + "-" * 30)
    for distance, count, pct in rows:
        print(f"  {distance:>8d}  {count:>8,d}  {pct:>9.1f}%")
    print(f"\n  Showing top {len(rows)} of {n_distinct} different distances")
    return 0


def cmd_render(args):
    """Compute, then write the figure and HTML report."""
    from tools.plotter import Stopwatch, render_report

    watch = Stopwatch()
    print(f"  Scanning [2, {args.max:,}] and rendering...", flush=True)
    with watch.lap("scan"):
        records = compute_primes_sync(args.max)
    with watch.lap("render"):
        index = render_report(records, args.out, limit=args.limit, bound=args.max)
    print(f"\nReport saved: {index} ({watch.summary()}, total {watch.total:.2f}s)")
    return 0


def cmd_serve(args):
    from tools.serve_report import serve
    try:
        serve(port=args.port, directory=args.dir)
    except FileNotFoundError as e:
        print(f"[FAIL] {e}")
        return 1
    return 0


def build_parser():
    from tools.plotter import REPORT_DIR, TOP_LIMIT
    from tools.serve_report import PORT

    parser = argparse.ArgumentParser(
        description="Prime Distance Framework CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    sub = parser.add_subparsers(dest='command')
    bound_help = (f"Inclusive upper bound (default: {DEFAULT_BOUND}; "
                  f"interactive range {MIN_UI_BOUND:,}-{MAX_UI_BOUND:,})")

    p_compute = sub.add_parser('compute', help='Incremental computation with progress')
    p_compute.add_argument('--max', type=parse_bound, default=DEFAULT_BOUND, help=bound_help)
    p_compute.add_argument('--chunk-size', type=positive_int, default=CHUNK_SIZE,
                           help=f'Integers scanned per step (default: {CHUNK_SIZE})')

    p_stats = sub.add_parser('stats', help='Summary statistics')
    p_stats.add_argument('--max', type=parse_bound, default=DEFAULT_BOUND, help=bound_help)

    p_top = sub.add_parser('top', help='Most frequent distances')
    p_top.add_argument('--max', type=parse_bound, default=DEFAULT_BOUND, help=bound_help)
    p_top.add_argument('--limit', type=positive_int, default=TOP_LIMIT,
                       help=f'Rows to show (default: {TOP_LIMIT})')

    p_render = sub.add_parser('render', help='Write PNG + HTML report')
    p_render.add_argument('--max', type=parse_bound, default=DEFAULT_BOUND, help=bound_help)
    p_render.add_argument('--out', default=str(REPORT_DIR),
                          help=f'Output directory (default: {REPORT_DIR})')
    p_render.add_argument('--limit', type=positive_int, default=TOP_LIMIT,
                          help=f'Top distances shown (default: {TOP_LIMIT})')

    p_serve = sub.add_parser('serve', help='Serve the report directory')
    p_serve.add_argument('--port', type=positive_int, default=PORT)
    p_serve.add_argument('--dir', default=str(REPORT_DIR))
    return parser


COMMANDS = {
    'compute': cmd_compute,
    'stats': cmd_stats,
    'top': cmd_top,
    'render': cmd_render,
    'serve': cmd_serve,
}


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    handler = COMMANDS.get(args.command)
    if handler is None:
        parser.print_help()
        return 0
    return handler(args) or 0


if __name__ == '__main__':
    sys.exit(main())
