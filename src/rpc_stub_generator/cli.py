"""Command-line interface for generating a TypeScript client for rpc-router handlers.

Notes:
    - Bindings are generated with typeshare, which has to be on the PATH unless `--no-typeshare` is given.
"""

from __future__ import annotations

import argparse
import logging
import os.path
from collections.abc import Sequence

from rpc_stub_generator.directories import BINDINGS_FILE_NAME, EXCLUDED_DIRECTORY, HANDLER_SUFFIX, RPC_MARKER
from rpc_stub_generator.run import OUTPUT_FILE_NAME, run

logger = logging.getLogger(__name__)


def _add_file_classification_arguments(parser: argparse.ArgumentParser):
    """Add the arguments that decide which files are scanned.

    Args:
        parser (argparse.ArgumentParser): The parser to add the arguments to.
    """
    parser.add_argument(
        "--rpc-marker",
        type=str,
        default=RPC_MARKER,
        help="path segment that every handler file path contains.",
    )

    parser.add_argument(
        "--handler-suffix",
        type=str,
        default=HANDLER_SUFFIX,
        help="file name suffix of handler files; stripped to get the client name.",
    )

    parser.add_argument(
        "--bindings-file",
        type=str,
        default=BINDINGS_FILE_NAME,
        help="file name of the typeshare bindings.",
    )

    parser.add_argument(
        "--exclude-dir",
        type=str,
        default=EXCLUDED_DIRECTORY,
        help="build artifact directory that is never scanned.",
    )


def setup_parser() -> argparse.ArgumentParser:
    """Setup for the parser.

    Returns:
        argparse.ArgumentParser: The parser after setup.
    """
    parser = argparse.ArgumentParser(description="Generate a TypeScript client for rpc-router handlers.")

    parser.add_argument(
        "-r",
        "--root",
        type=str,
        default="",
        help="root of the Rust workspace to scan; defaults to the working directory.",
    )

    parser.add_argument(
        "-t",
        "--types-dir",
        type=str,
        required=True,
        help="directory the typeshare bindings are written to.",
    )

    parser.add_argument(
        "--types-import",
        type=str,
        default=None,
        help="module path used to import the bindings; defaults to the types directory.",
    )

    parser.add_argument(
        "-o",
        "--client-dir",
        type=str,
        required=True,
        help="directory to write the generated client to.",
    )

    parser.add_argument(
        "--output-name",
        type=str,
        default=OUTPUT_FILE_NAME,
        help="file name of the generated client.",
    )

    parser.add_argument(
        "--no-typeshare",
        dest="skip_typeshare",
        default=False,
        action="store_true",
        help="skip running typeshare and use the existing bindings.",
    )

    parser.add_argument(
        "--strict-bindings",
        dest="strict_bindings",
        default=False,
        action="store_true",
        help="skip handlers whose parameter or return type is not declared in the bindings.",
    )

    parser.add_argument(
        "--nested-generics",
        dest="nested_generics",
        default=False,
        action="store_true",
        help="keep commas inside generic arguments when splitting parameter lists.",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        default=False,
        action="store_true",
        help="log debug output.",
    )

    _add_file_classification_arguments(parser)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point of the client generator.

    Args:
        argv (Sequence[str] | None, optional): Run arguments. Defaults to None.

    Returns:
        int: Error code.
    """
    parser = setup_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    root_directory = os.getcwd()
    logging.info("Working from root directory: %s", root_directory)

    run(args, root_directory)

    return 0
