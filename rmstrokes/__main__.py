"""
reMarkable Strokes CLI

Convert reMarkable v6 .rm files to SVG or render-ready JSON.

Usage:
    python -m rmstrokes <input.rm> [-o output.svg]
    python -m rmstrokes samples/*.rm -o output/
    python -m rmstrokes page.rm --json -o page.json
"""

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path

from .config import DEFAULT_CONFIG_NAME, ConfigError, load_config
from .parser import parse_file, analyze_file
from .reader import RmParseError
from .renderer import render_to_file
from .rendering import prepare_strokes


def write_json(strokes, path: Path) -> None:
    """Write render-ready strokes as JSON."""
    data = [asdict(s) for s in prepare_strokes(strokes)]
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f)
        f.write("\n")


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Convert reMarkable v6 .rm files to SVG",
        prog="rmstrokes"
    )
    parser.add_argument(
        "input",
        nargs="+",
        type=Path,
        help="Input .rm file(s)"
    )
    parser.add_argument(
        "-o", "--output",
        type=Path,
        help="Output file or directory (default: same name as input with .svg extension)"
    )
    parser.add_argument(
        "--analyze",
        action="store_true",
        help="Analyze file(s) without converting"
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Write render-ready strokes as JSON instead of SVG"
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=Path(DEFAULT_CONFIG_NAME),
        help=f"Path to config file (default: {DEFAULT_CONFIG_NAME})"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log parser details"
    )
    return parser


def main(argv=None):
    args = build_arg_parser().parse_args(argv)

    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.log_level,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Expand glob patterns
    input_files = []
    for pattern in args.input:
        if pattern.exists():
            input_files.append(pattern)
        else:
            # Might be a glob pattern
            if pattern.is_absolute():
                root, relative = Path(pattern.anchor), str(pattern.relative_to(pattern.anchor))
            else:
                root, relative = Path("."), str(pattern)
            matches = sorted(root.glob(relative))
            if matches:
                input_files.extend(matches)
            else:
                print(f"Warning: No files matching '{pattern}'", file=sys.stderr)

    if not input_files:
        print("Error: No input files found", file=sys.stderr)
        sys.exit(1)

    # Analyze mode
    if args.analyze:
        for input_file in input_files:
            try:
                analyze_file(input_file)
            except RmParseError as e:
                print(f"FAILED: {e}", file=sys.stderr)
            print()
        return

    # Convert mode
    suffix = ".json" if args.json else ".svg"
    multiple_inputs = len(input_files) > 1

    if multiple_inputs:
        # Multiple inputs - output must be a directory
        if args.output:
            output_dir = args.output
            output_dir.mkdir(parents=True, exist_ok=True)
        else:
            output_dir = Path(".")
    else:
        output_dir = None

    for input_file in input_files:
        if output_dir:
            output_file = output_dir / input_file.with_suffix(suffix).name
        elif args.output:
            output_file = args.output
        else:
            output_file = input_file.with_suffix(suffix)

        print(f"Converting {input_file.name}...", end=" ", flush=True)

        try:
            strokes = parse_file(input_file)
            if args.json:
                write_json(strokes, output_file)
            else:
                render_to_file(strokes, output_file, config=config.render)
            print(f"OK ({len(strokes)} strokes)")
        except (RmParseError, OSError) as e:
            print(f"FAILED: {e}", file=sys.stderr)
            if not multiple_inputs:
                sys.exit(1)

    print(f"\nDone! Output in: {output_dir or output_file}")


if __name__ == "__main__":
    main()
