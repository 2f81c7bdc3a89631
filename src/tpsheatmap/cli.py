"""Command line entry point: read samples, render the heatmap, write a PNG.

Usage:
    tpsheatmap -f db.sqlite3 -o tps.png
    tpsheatmap -f db.sqlite3 --write-snapshot tps.npz
    tpsheatmap --from snapshot --snapshot tps.npz --mode average
"""

from __future__ import annotations

import argparse
import dataclasses
from pathlib import Path
from typing import Optional, Sequence

from tpsheatmap.errors import HeatmapError
from tpsheatmap.heatmap_config import HeatmapConfig
from tpsheatmap.options import HeatmapOptions
from tpsheatmap.render import load_font, render_heatmap
from tpsheatmap.sources import read_snapshot, read_sqlite, write_snapshot
from tpsheatmap.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tpsheatmap",
        description="Render a ticks-per-second time series as a calendar heatmap",
    )
    parser.add_argument("--from", dest="source", choices=["sqlite", "snapshot"], default="sqlite",
                        help="where to read samples from (default: sqlite)")
    parser.add_argument("-f", "--db", default="db.sqlite3", help="path to the SQLite database")
    parser.add_argument("--snapshot", default="tps.npz", help="snapshot path to read from")
    parser.add_argument("--write-snapshot", metavar="PATH", default=None,
                        help="also save the samples read from SQLite to this snapshot")
    parser.add_argument("--mode", choices=["percentile", "average"], default=None,
                        help="slice reduction (default: from config, else percentile)")
    parser.add_argument("-o", "--output", default="tps.png", help="output image path")
    parser.add_argument("--config", type=Path, default=None,
                        help="options JSON file (default: per-user config dir)")
    parser.add_argument("--save-config", action="store_true",
                        help="store the effective layout options in the config file for later runs")
    parser.add_argument("--font", default=None, help="TrueType font file for labels")
    parser.add_argument("--font-size", type=int, default=12)
    parser.add_argument("--day-width", type=int, default=None, help="slices (pixel columns) per day")
    parser.add_argument("--day-height", type=int, default=None, help="day cell height in pixels")
    parser.add_argument("--no-month-breaks", action="store_true", help="do not start a new row per month")
    parser.add_argument("--week-starts-sunday", action="store_true")
    parser.add_argument("--debug", action="store_true", help="draw week/month numbers and cell outlines")
    parser.add_argument("--comment", default=None, help="text drawn under the legend strip")
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ...")
    return parser


def options_from_args(args: argparse.Namespace, base: HeatmapOptions) -> HeatmapOptions:
    """Apply command line overrides on top of the configured options."""
    changes: dict = {}
    if args.mode is not None:
        changes["reduction"] = args.mode
    if args.day_width is not None:
        changes["day_width_columns"] = args.day_width
    if args.day_height is not None:
        changes["day_height"] = args.day_height
    if args.no_month_breaks:
        changes["break_on_month_change"] = False
    if args.week_starts_sunday:
        changes["week_starts_monday"] = False
    if args.debug:
        changes["debug"] = True
    if args.comment is not None:
        changes["comment"] = args.comment
    return dataclasses.replace(base, **changes)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    config = HeatmapConfig.load(config_path=args.config)
    options = options_from_args(args, config.get_options())

    try:
        if args.save_config:
            config.set_options(options)
            config.save()

        if args.source == "sqlite":
            timestamps, values = read_sqlite(args.db)
            if args.write_snapshot:
                write_snapshot(args.write_snapshot, timestamps, values)
        else:
            timestamps, values = read_snapshot(args.snapshot)

        if not options.comment:
            options = dataclasses.replace(options, comment=f"{len(timestamps)} samples")

        image = render_heatmap(timestamps, values, options, font=load_font(args.font, args.font_size))
    except (HeatmapError, FileNotFoundError) as e:
        logger.error(str(e))
        return 1

    logger.info(f"Writing image {args.output}...")
    image.save(args.output)
    logger.info("Done!")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
