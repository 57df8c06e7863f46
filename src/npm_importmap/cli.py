"""CLI entrypoint: generate an import map from a pnpm lockfile."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .config import load_options
from .core import generate_import_map
from .emitter import render
from .errors import ImportMapError


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "lockfile",
        nargs="?",
        type=Path,
        default=Path("pnpm-lock.yaml"),
        help="Path to pnpm-lock.yaml",
    )
    parser.add_argument("--config", type=Path, default=None, help="Path to a JSON options file")
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Write the import map here instead of stdout",
    )
    parser.add_argument(
        "--no-dependencies",
        dest="include_dependencies",
        action="store_false",
        default=None,
        help="Do not map root dependencies",
    )
    parser.add_argument(
        "--no-dev-dependencies",
        dest="include_dev_dependencies",
        action="store_false",
        default=None,
        help="Do not map root devDependencies",
    )
    parser.add_argument(
        "--optional-dependencies",
        dest="include_optional_dependencies",
        action="store_true",
        default=None,
        help="Also map root optionalDependencies",
    )
    parser.add_argument("--cdn", dest="cdn_base", default=None, help="CDN base URL")
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("--verbose", "-v", action="store_true")
    verbosity.add_argument("--quiet", "-q", action="store_true")
    return parser.parse_args(argv)


def _configure_logging(args: argparse.Namespace) -> None:
    level = logging.INFO
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(message)s", stream=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    _configure_logging(args)

    try:
        options = load_options(args.config).with_overrides(
            include_dependencies=args.include_dependencies,
            include_dev_dependencies=args.include_dev_dependencies,
            include_optional_dependencies=args.include_optional_dependencies,
            cdn_base=args.cdn_base.rstrip("/") if args.cdn_base else None,
        )
        output = render(generate_import_map(args.lockfile, options))
    except ImportMapError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    if args.output is not None:
        args.output.write_text(output, encoding="utf-8")
    else:
        sys.stdout.write(output)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
