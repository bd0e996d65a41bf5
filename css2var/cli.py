"""CLI entrypoints for css2var commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError, RunOptions, load_config, resolve_options
from .logging import configure_logging
from .orchestrator import ExtractionResult, Extractor

BUILD_PROPERTIES = ("color", "background-color", "background-image", "background")
BUILD_PREFIX = ""


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="css2var",
        description="Extract CSS/SCSS property values into global CSS custom properties.",
        epilog=(
            "Files are rewritten in place; back up the target directory before running.\n"
            "examples:\n"
            "  css2var build -d ./src\n"
            "  css2var extract -d ./src -p color,background-color\n"
            "  css2var extract -d ./src -p color,background-image --prefix theme --assets-output"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        help="Also write detailed logs to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    build_parser = subparsers.add_parser(
        "build",
        help="Extract color and background values using the preset property list.",
    )
    _add_verbose_option(build_parser, suppress_default=True)
    build_parser.add_argument(
        "-d",
        "--directory",
        default="./src",
        help="Directory to scan (defaults to ./src).",
    )

    extract_parser = subparsers.add_parser(
        "extract",
        help="Extract values using custom properties, prefix and output settings.",
    )
    _add_verbose_option(extract_parser, suppress_default=True)
    extract_parser.add_argument(
        "-d",
        "--directory",
        required=True,
        help="Directory to scan.",
    )
    extract_parser.add_argument(
        "-p",
        "--properties",
        help="Comma-separated list of CSS properties to extract.",
    )
    extract_parser.add_argument(
        "--prefix",
        help='Variable name prefix (default: "var").',
    )
    extract_parser.add_argument(
        "--output",
        help='Variable stylesheet filename (default: "variables.css").',
    )
    extract_parser.add_argument(
        "--pattern",
        help='Glob pattern for candidate files (default: "**/*.{css,scss}").',
    )
    extract_parser.add_argument(
        "--assets-output",
        action="store_true",
        default=None,
        help="Inline referenced images as base64 variables and write them to assets.css.",
    )
    extract_parser.add_argument(
        "--split-by-folder",
        action="store_true",
        default=None,
        help="Group variables into one commented section per source folder.",
    )
    extract_parser.add_argument(
        "--export-map",
        action="store_true",
        default=None,
        help="Write a JSON usage map next to the variable stylesheet.",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for css2var commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    directory = Path(args.directory).expanduser().resolve()
    if not directory.is_dir():
        parser.exit(1, f"Target directory not found: {args.directory}\n")

    try:
        options = _build_options(args, directory)
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    try:
        result = Extractor(options).extract()
    except FileNotFoundError as exc:
        parser.exit(1, f"{exc}\n")
    except RuntimeError as exc:
        parser.exit(1, f"css2var {args.command} failed: {exc}\nRun with --verbose for more details.\n")
    except Exception as exc:  # pragma: no cover
        parser.exit(1, f"css2var {args.command} failed: {exc}\nRun with --verbose for more details.\n")

    _print_summary(result)


def _build_options(args: argparse.Namespace, directory: Path) -> RunOptions:
    config = load_config(directory)
    if args.command == "build":
        return resolve_options(
            directory,
            config,
            properties=list(BUILD_PROPERTIES),
            prefix=BUILD_PREFIX,
        )

    properties = args.properties.split(",") if args.properties else None
    return resolve_options(
        directory,
        config,
        properties=properties,
        prefix=args.prefix,
        output_file=args.output,
        pattern=args.pattern,
        export_map=args.export_map,
        inline_assets=args.assets_output,
        export_assets=args.assets_output,
        split_by_folder=args.split_by_folder,
    )


def _print_summary(result: ExtractionResult) -> None:
    if result.output_path is not None:
        print(f"Variables written to {_relativize(result.output_path)}")
    else:
        print("No variables extracted")
    if result.map_path is not None:
        print(f"Usage map written to {_relativize(result.map_path)}")
    if result.assets_path is not None:
        print(f"Asset variables written to {_relativize(result.assets_path)}")
    print(f"Processed {result.files_processed} files, extracted {result.variable_count} variables")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
