#!/usr/bin/env python3
"""
Command line interface for rendering waterfall PNGs from snapshot files.
"""

import argparse
import logging
import os
import random
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from tabulate import tabulate

from .core import RenderError, RenderStats, Waterfall, WaterfallConfig, color_scale
from .core.config import DEFAULT_MAX_VALUE, DEFAULT_NUM_SLICES, DEFAULT_PRECISION, DEFAULT_SLICE_DURATION


def generate_demo(waterfall: Waterfall, seed: Optional[int] = None, per_slice: int = 2000):
    """Fill the waterfall with synthetic log-normal latencies around 50us"""
    rng = random.Random(seed)
    config = waterfall.config
    for index in range(config.num_slices):
        # Slow drift plus an occasional latency spike
        center = 50_000 * (1.0 + 0.5 * (index % 120) / 120)
        spike = rng.random() < 0.02
        for _ in range(per_slice):
            value = int(rng.lognormvariate(0, 0.6) * center)
            if spike and rng.random() < 0.1:
                value *= 100
            offset = index * config.slice_duration
            waterfall.heatmap.increment(offset, min(value, config.max_value))


def print_summary(stats: RenderStats, output: Path, format: str = 'grid'):
    rows = [
        ['Output', str(output)],
        ['Width (buckets)', stats.width],
        ['Height (slices)', stats.height],
        ['Max count', f"{stats.max_count:,}"],
        ['Observations', f"{stats.total:,}"],
        ['Time labels', stats.time_labels],
        ['Latency labels', stats.latency_labels],
        ['Render time', f"{stats.elapsed:.3f}s"],
    ]
    print(tabulate(rows, headers=['Item', 'Value'], tablefmt=format))


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    parser = argparse.ArgumentParser(description='Render a latency waterfall PNG')

    try:
        default_slices = int(os.environ.get('WATERFALL_SLICES', DEFAULT_NUM_SLICES))
    except ValueError:
        print(f"Error: WATERFALL_SLICES must be an integer, got {os.environ['WATERFALL_SLICES']!r}",
              file=sys.stderr)
        return 1

    # Input
    parser.add_argument('snapshots', nargs='*', type=str,
                       help='Snapshot files (CSV or Parquet with slice,value,count columns) to merge')
    parser.add_argument('--demo', action='store_true',
                       help='Render synthetic data instead of snapshot files')
    parser.add_argument('--seed', type=int, default=None,
                       help='Random seed for --demo data')
    parser.add_argument('--save-snapshot', type=str,
                       help='Also write the merged store to this CSV/Parquet file')

    # Output
    parser.add_argument('-o', '--output', type=str, default='waterfall.png',
                       help='Output PNG file (default: waterfall.png)')

    # Geometry
    parser.add_argument('--slices', type=int, default=default_slices,
                       help=f'Number of time slices / image rows (default: $WATERFALL_SLICES or {DEFAULT_NUM_SLICES})')
    parser.add_argument('--precision', type=int, default=DEFAULT_PRECISION,
                       help=f'Significant digits per latency bucket (default: {DEFAULT_PRECISION})')
    parser.add_argument('--slice-duration', type=int, default=DEFAULT_SLICE_DURATION,
                       help=f'Seconds per slice (default: {DEFAULT_SLICE_DURATION})')
    parser.add_argument('--max-value', type=int, default=DEFAULT_MAX_VALUE,
                       help='Highest trackable latency in nanoseconds (default: 60s)')

    # Reporting
    parser.add_argument('--summary', action='store_true',
                       help='Print a render summary table')
    parser.add_argument('--format', type=str, default='grid',
                       help='Summary table format (grid, simple, plain, etc.)')
    parser.add_argument('--legend', action='store_true',
                       help='Print the color scale to the terminal')

    # Logging
    parser.add_argument('--debug', action='store_true',
                       help='Enable debug logging')
    parser.add_argument('--debuglog', type=str,
                       help='Debug log file')

    args = parser.parse_args(argv)

    log_level = logging.DEBUG if args.debug else logging.INFO
    log_format = '%(asctime)s - %(levelname)s - %(message)s'

    if args.debuglog:
        logging.basicConfig(
            level=log_level,
            format=log_format,
            filename=args.debuglog,
            filemode='w'
        )
    else:
        logging.basicConfig(
            level=log_level,
            format=log_format
        )
    logger = logging.getLogger('waterfall')

    if not args.snapshots and not args.demo:
        print("Error: No input specified.", file=sys.stderr)
        print("Please either:", file=sys.stderr)
        print("  1. Pass one or more snapshot files", file=sys.stderr)
        print("  2. Use --demo to render synthetic data", file=sys.stderr)
        return 1

    try:
        config = WaterfallConfig(
            num_slices=args.slices,
            precision=args.precision,
            slice_duration=args.slice_duration,
            max_value=args.max_value,
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    waterfall = Waterfall(config)
    logger.debug(f"Store geometry: {waterfall.heatmap.num_slices} slices x "
                 f"{waterfall.heatmap.histogram_buckets} buckets")

    try:
        if args.demo:
            generate_demo(waterfall, seed=args.seed)
        for snapshot in args.snapshots:
            waterfall.load_file(snapshot)

        if args.save_snapshot:
            waterfall.save_file(args.save_snapshot)

        output = Path(args.output)
        stats = waterfall.render_png(output)
    except (RenderError, ValueError) as e:
        logger.debug("Render failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.summary:
        print_summary(stats, output, format=args.format)
    if args.legend:
        Console().print(color_scale())

    return 0


if __name__ == '__main__':
    sys.exit(main())
