#!/usr/bin/env python3
"""
bustkit CLI Entry Point

Walks a root directory, writes content-hashed copies (or renames) of the
matching assets and records them in a JSON manifest.

Exit codes:
    0  success
    3  configuration failure (options, paths, existing manifest)
    4  hash walker failure (nothing is written)
"""
import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from ..adapters.config_file import ConfigFileError, load_config_file
from ..core.errors import BustError
from ..service.models import BuildConfig
from ..service.runner import BuildConfigError, run_build

EXIT_SUCCESS = 0
EXIT_CONFIG_FAILURE = 3
EXIT_HASHWALKER_FAILURE = 4

logger = logging.getLogger("bustkit")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bustkit",
        description="Create content-hashed asset files and an asset manifest.",
    )
    parser.add_argument(
        "-r", "--root-directory",
        default=os.environ.get("BUSTKIT_ROOT"),
        help="The root directory to look for files (required, or BUSTKIT_ROOT)",
    )
    parser.add_argument(
        "-o", "--out-file",
        default=os.environ.get("BUSTKIT_OUT_FILE"),
        help="Name of the output file, including its extension (default: asset-manifest.json in the root)",
    )
    parser.add_argument(
        "-e", "--extensions",
        action="extend",
        nargs="+",
        default=None,
        help="File extension(s) to process, without leading dot (default: css js)",
    )
    parser.add_argument(
        "-m", "--mode",
        default=os.environ.get("BUSTKIT_MODE"),
        help="Files can be copied or renamed. Accepted values: copy|rename (default: copy)",
    )
    parser.add_argument(
        "--hash-length",
        default=os.environ.get("BUSTKIT_HASH_LENGTH"),
        help="The length of the hash string to be inserted (default: 10)",
    )
    parser.add_argument(
        "-i", "--incremental",
        action="store_true",
        default=None,
        help="Merge into the existing manifest instead of replacing it",
    )
    parser.add_argument(
        "--max-open-files",
        default=None,
        help="Cap the number of files processed at once (default: no cap)",
    )
    parser.add_argument("--config", type=Path, default=None, help="YAML file with default options")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every file")
    return parser


def collect_options(args: argparse.Namespace) -> Dict[str, Any]:
    """Config file values first, command line values override."""
    options: Dict[str, Any] = {}
    if args.config is not None:
        options.update(load_config_file(args.config))

    cli_values = {
        "root_directory": args.root_directory,
        "out_file": args.out_file,
        "extensions": args.extensions,
        "mode": args.mode,
        "hash_length": args.hash_length,
        "incremental": args.incremental,
        "max_open_files": args.max_open_files,
    }
    for key, value in cli_values.items():
        if value is not None:
            options[key] = value
    return options


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        stream=sys.stderr,
        format="[%(levelname)s] %(message)s",
    )

    try:
        options = collect_options(args)
    except ConfigFileError as e:
        logger.error(str(e))
        return EXIT_CONFIG_FAILURE

    if not options.get("root_directory"):
        logger.error("Missing root directory. Set --root-directory or BUSTKIT_ROOT.")
        return EXIT_CONFIG_FAILURE

    try:
        config = BuildConfig(**options)
    except ValidationError as e:
        for err in e.errors():
            field = ".".join(str(part) for part in err["loc"])
            logger.error(f"Invalid option '{field}': {err['msg']}")
        if any(err["loc"][:1] == ("mode",) for err in e.errors()):
            logger.error('Make sure to use either "copy" or "rename"')
        return EXIT_CONFIG_FAILURE

    try:
        run_build(config)
    except BuildConfigError as e:
        logger.error(str(e))
        return EXIT_CONFIG_FAILURE
    except BustError as e:
        logger.error("hash walker returned with an error:")
        logger.error(f"{type(e).__name__}: {e}")
        return EXIT_HASHWALKER_FAILURE

    return EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())
