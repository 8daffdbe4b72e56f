"""Command line entry point.

Usage:
    # Default preset, random seed, written to map.png
    python -m battlemapper

    # Reproducible village with more roads
    python -m battlemapper -p village -r 120 -s 7 -o village.png

    # Wide roads, stopping after 40 placements
    python -m battlemapper -w 32 -H 32 -R 3 --max-steps 40

    # Print the PNG as base64 text instead of writing a file
    python -m battlemapper -p outpost --base64

When the environment variable BATTLEMAPPER_WEB is "1" the arguments are
ignored and the request is read from QUERY_STRING instead, answering as a
CGI script.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys

from battlemapper import config
from battlemapper.environment.generators.result import Outcome
from battlemapper.environment.generators.session import GenerationSession
from battlemapper.environment.generators.themes import THEMES
from battlemapper.errors import BattleMapperError
from battlemapper.render.png import encode_base64, render_image, save_png
from battlemapper.web import parse_seed, serve_cgi

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="battlemapper",
        description="Generate a tabletop battle map with roads and buildings",
    )
    parser.add_argument(
        "-p",
        "--preset",
        default=config.DEFAULT_THEME,
        help=f"Map preset ({', '.join(THEMES.names())})",
    )
    parser.add_argument("-w", "-W", "--width", type=int, help="Map width in cells")
    # -h stays with --help; height is -H on the command line.
    parser.add_argument("-H", "--height", type=int, help="Map height in cells")
    parser.add_argument(
        "-r", "--roads", "--road-count", type=int, help="Number of road cells"
    )
    parser.add_argument("-R", "--road-width", type=int, help="Road width in cells")
    parser.add_argument(
        "-b",
        "--buildings",
        "--building-count",
        type=int,
        help="Number of buildings",
    )
    parser.add_argument(
        "-B", "--building-size", type=int, help="Largest building side in cells"
    )
    parser.add_argument(
        "-s", "--seed", type=parse_seed, help="Seed for a reproducible map"
    )
    parser.add_argument(
        "--max-steps",
        type=int,
        help="Stop after this many placements and keep the partial map",
    )
    parser.add_argument(
        "-o",
        "--output",
        default=config.DEFAULT_OUTPUT_PATH,
        help="PNG file to write",
    )
    parser.add_argument(
        "--base64",
        action="store_true",
        help="Print the PNG as base64 text to stdout instead of writing a file",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    return parser


def run(args: argparse.Namespace) -> int:
    """Generate and write one map from parsed arguments.

    Returns:
        The process exit code.
    """
    try:
        request = THEMES.build_request(
            args.preset,
            seed=args.seed,
            width=args.width,
            height=args.height,
            road_count=args.roads,
            road_width=args.road_width,
            building_count=args.buildings,
            building_max_size=args.building_size,
            max_steps=args.max_steps,
        )
        result = GenerationSession(request).run().raise_for_outcome()
    except BattleMapperError as e:
        logger.error(str(e))
        return EXIT_USAGE

    if result.outcome is Outcome.PARTIAL:
        logger.warning(f"Generated a partial map: {result.summary()}")

    if args.base64:
        sys.stdout.write(encode_base64(render_image(result)))
        sys.stdout.write("\n")
    else:
        save_png(result, args.output)
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    if os.environ.get(config.WEB_MODE_VAR) == "1":
        logging.basicConfig(level=logging.WARNING, stream=sys.stderr)
        return serve_cgi(os.environ.get(config.WEB_QUERY_VAR, ""), sys.stdout)

    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    return run(args)


if __name__ == "__main__":
    sys.exit(main())
