#!/usr/bin/env python
"""Batch reader for decadal tree-ring files.

This script reads one .rwl file or every .rwl file in a folder, corrects
formatting errors and writes, for each input, the year-by-core table and the
anomaly log as CSV files.

Usage:
    # Read every file in the configured input folder
    python scripts/read_rwl.py

    # Read one file, rounding values and treating zeros as missing
    python scripts/read_rwl.py --input data/input/site.rwl --round --zero

    # Use custom configuration file
    python scripts/read_rwl.py --config path/to/config.yaml

    # Show which files would be read
    python scripts/read_rwl.py --dry-run
"""

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import List

from tqdm import tqdm

# Add package to path (allows running without installation)
SCRIPT_DIR = Path(__file__).parent
PROJECT_ROOT = SCRIPT_DIR.parent
sys.path.insert(0, str(PROJECT_ROOT))


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        description="Read and correct decadal tree-ring (.rwl) files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                              # Read the configured input folder
  %(prog)s --input site.rwl --round     # One file, rounded values
  %(prog)s --output results/            # Custom output folder
  %(prog)s --verbose                    # Verbose output
        """,
    )

    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to configuration file (default: config/config.yaml or packaged default)",
    )
    parser.add_argument(
        "--input",
        "-i",
        type=str,
        help="Input .rwl file or folder (default: paths.input_dir)",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=str,
        help="Output folder (default: paths.output_dir)",
    )
    parser.add_argument("--round", action="store_true", help="Round values to integers")
    parser.add_argument("--zero", action="store_true", help="Treat zero values as missing")
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging (DEBUG level)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="List the files that would be read without reading them",
    )

    return parser.parse_args()


def collect_inputs(path: Path) -> List[Path]:
    """Return the .rwl files at `path` (a file or a folder), sorted by name."""
    if path.is_file():
        return [path]
    return sorted(p for p in path.iterdir() if p.suffix.lower() == ".rwl")


def run(args: argparse.Namespace) -> int:
    """Read every requested file.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 if any file could not be read)
    """
    from rwl_reader.config import get_settings
    from rwl_reader.orchestration import RwlReader
    from rwl_reader.utils import save_frame, setup_logging

    try:
        settings = get_settings(args.config, force_reload=True)
    except FileNotFoundError as e:
        logging.getLogger("read_rwl").error(f"Configuration error: {e}")
        return 1

    logger = setup_logging(settings.logging, verbose=args.verbose)
    logger.info(f"Project: {settings.project['name']} v{settings.project['version']}")

    input_path = Path(args.input) if args.input else settings.paths.input_dir
    output_dir = Path(args.output) if args.output else settings.paths.output_dir

    if not input_path.exists():
        logger.error(f"Input not found: {input_path}")
        return 1

    files = collect_inputs(input_path)
    if not files:
        logger.warning(f"No .rwl files found in {input_path}")
        return 0

    if args.dry_run:
        logger.info("DRY RUN MODE - No files will be read")
        for f in files:
            logger.info(f"Would read: {f}")
        return 0

    options = replace(
        settings.reader,
        round=settings.reader.round or args.round,
        zero_as_missing=settings.reader.zero_as_missing or args.zero,
    )
    reader = RwlReader(options, fmt=settings.format)
    output_dir.mkdir(parents=True, exist_ok=True)

    failed = []
    pbar = tqdm(files, desc="Reading", unit="file", bar_format="{l_bar}{bar}| {n_fmt}/{total_fmt}")
    for path in pbar:
        pbar.set_postfix_str(path.name)
        try:
            result = reader.read(str(path))
        except OSError as e:
            logger.error(f"{path.name}: {e}")
            failed.append(path.name)
            continue

        save_frame(
            result.to_frame(),
            str(output_dir / f"{path.stem}{settings.output.matrix_suffix}"),
            index=True,
            float_format=settings.output.float_format,
        )
        save_frame(result.log_frame(), str(output_dir / f"{path.stem}{settings.output.log_suffix}"))
    pbar.close()

    logger.info(f"Read {len(files) - len(failed)} of {len(files)} files into {output_dir}")
    return 1 if failed else 0


def main() -> int:
    """Main entry point.

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    args = parse_args()
    try:
        return run(args)
    except KeyboardInterrupt:
        logging.getLogger("read_rwl").warning("\nInterrupted by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
