#!/usr/bin/env python3
"""
diffprep - Large diff preparation for commit message generation.

Reads a unified diff, reduces it to a bounded payload (direct, chunked or
summarized) and prints the processing record and the payload.

Usage:
    diffprep changes.diff                     # Process a diff file
    git diff | diffprep                       # Read from stdin
    diffprep changes.diff --prompt            # Print the full generation prompt
    diffprep changes.diff --info-only         # Print only the processing record
    diffprep --help                           # Show help
"""

import argparse
import json
import sys
from typing import Optional

from loguru import logger

from .modules.config import ConfigError, load_config
from .modules.diff_processing import DiffProcessingEngine, DiffProcessingError
from .modules.prompts import build_user_prompt, system_prompt
from .modules.validation import DEFAULT_MAX_SIZE, ensure_valid_git_diff


# stdout carries the payload, so all log output goes to stderr
CONSOLE_FORMAT = "<level>{level: <8}</level> | <cyan>{name}</cyan> - <level>{message}</level>"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}"


def setup_logging(verbose: bool = False, log_file: Optional[str] = None) -> None:
    """Route engine logs to stderr and, optionally, a rotating file."""
    logger.remove()

    logger.add(
        sys.stderr,
        format=CONSOLE_FORMAT,
        level="DEBUG" if verbose else "WARNING",
        colorize=sys.stderr.isatty(),
    )

    if log_file:
        logger.add(
            log_file,
            format=FILE_FORMAT,
            level="DEBUG" if verbose else "INFO",
            rotation="5 MB",
            retention=3,
            encoding="utf-8",
        )


def read_diff(path: Optional[str]) -> str:
    """Read diff text from ``path`` or stdin when ``path`` is None or '-'."""
    if not path or path == "-":
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        return f.read()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="diffprep",
        description="Reduce a unified diff to a bounded payload for commit message generation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  diffprep changes.diff                       # Process a diff file
  git diff HEAD~1 | diffprep                  # Read from stdin
  diffprep big.diff --max-total-size 102400   # Override the byte budget
  diffprep big.diff --no-summarization        # Never use the summarized view

Environment Variables:
  DIFFPREP_MAX_DIRECT_SIZE, DIFFPREP_MAX_CHUNK_SIZE, DIFFPREP_MAX_TOTAL_SIZE,
  DIFFPREP_MAX_FILES, DIFFPREP_ENABLE_SUMMARIZATION
""",
    )

    parser.add_argument("diff", nargs="?", default=None, help="Diff file to read (default: stdin)")

    parser.add_argument(
        "--config", "-c", type=str, default=None, help="Path to YAML configuration file (optional)"
    )
    parser.add_argument("--max-direct-size", type=int, help="Largest diff forwarded unmodified (bytes)")
    parser.add_argument("--max-chunk-size", type=int, help="Largest single-file section (bytes)")
    parser.add_argument("--max-total-size", type=int, help="Total byte budget for chunked output")
    parser.add_argument("--max-files", type=int, help="Maximum number of file sections kept")
    parser.add_argument(
        "--no-summarization", action="store_true", help="Disable the summarized strategy"
    )
    parser.add_argument(
        "--skip-validation", action="store_true", help="Skip the upstream diff validator"
    )

    output = parser.add_mutually_exclusive_group()
    output.add_argument("--info-only", action="store_true", help="Print only the processing record")
    output.add_argument("--prompt", action="store_true", help="Print the system and user prompts")

    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose/debug output")
    parser.add_argument("--log-file", type=str, help="Path to log file (optional)")
    parser.add_argument("--version", action="version", version="diffprep 0.1.0")

    return parser


def main(argv=None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    # Setup logging
    setup_logging(args.verbose, args.log_file)

    try:
        config = load_config(
            args.config,
            max_direct_size=args.max_direct_size,
            max_chunk_size=args.max_chunk_size,
            max_total_size=args.max_total_size,
            max_files=args.max_files,
            enable_summarization=False if args.no_summarization else None,
        )
        raw = read_diff(args.diff)

        if not args.skip_validation:
            ensure_valid_git_diff(raw, max_size=DEFAULT_MAX_SIZE, allow_binary_files=True)

        result = DiffProcessingEngine(config).process(raw)

    except ConfigError as e:
        logger.error(f"Invalid configuration: {e}")
        return 2
    except OSError as e:
        logger.error(f"Cannot read diff: {e}")
        return 2
    except DiffProcessingError as e:
        logger.error(str(e))
        return 1

    info = result.processing_info().to_wire()

    if args.info_only:
        print(json.dumps(info, indent=2))
    elif args.prompt:
        print(system_prompt(result.strategy))
        print()
        print(build_user_prompt(result))
    else:
        print(json.dumps(info, indent=2))
        print()
        print(result.payload)

    return 0


if __name__ == "__main__":
    sys.exit(main())
