"""CLI entrypoint for building a meta store from a rainconfig."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
import sys

from .builder import RainConfigStoreBuilder
from .config import DEFAULT_CONFIG_NAME, load_rainconfig
from .errors import ErrorPolicy, RainConfigError
from .logging_utils import configure_logging


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="rainconfig meta store builder")
    subparsers = parser.add_subparsers(dest="command")

    build_parser = subparsers.add_parser("build", help="Build the meta store and print a summary")
    build_parser.add_argument(
        "--config",
        default=DEFAULT_CONFIG_NAME,
        help="Path to rainconfig (default: ./rainconfig.json)",
    )
    build_parser.add_argument(
        "--force",
        action="store_true",
        help="Skip erroneous paths/items instead of failing the build",
    )
    build_parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
    build_parser.add_argument("--log-path", default=None, help="Optional log file path")

    args = parser.parse_args(argv)
    if args.command is None:
        parser.error("a command is required")
    return args


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    configure_logging(level=getattr(logging, str(args.log_level).upper(), logging.WARNING), log_path=args.log_path)
    policy = ErrorPolicy.LENIENT if args.force else ErrorPolicy.STRICT
    try:
        config = load_rainconfig(Path(args.config))
        _, report = RainConfigStoreBuilder(config).build_with_report(policy)
    except RainConfigError as exc:
        print(str(exc), file=sys.stderr)
        raise SystemExit(1)
    print(json.dumps(report.as_dict(), sort_keys=True))
    raise SystemExit(0)


if __name__ == "__main__":
    main()
