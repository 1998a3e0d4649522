from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line interface schema and translates the parsed
argparse namespace into configuration overrides. With no arguments the
tool scans the current directory into 'codebase.md'.
"""

import argparse
from typing import Any, Dict

from codebase_md.domain.constants import OUTPUT_FILE
from codebase_md.domain.content_models import BinaryPolicy

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the codebase-md CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="codebase-md",
        description=(
            "Convert a directory tree into a single document: its structure "
            "followed by the escaped contents of every text file. Run without "
            f"arguments it scans the current directory into ./{OUTPUT_FILE}; every "
            "option below is an optional override of that default."
        ),
    )

    # --- Path Management ---
    p.add_argument(
        "root_path",
        nargs="?",
        default=None,
        help="Directory to scan (default: current directory).",
    )
    p.add_argument(
        "-o", "--output",
        dest="output_path",
        default=None,
        help=f"Artifact path (default: {OUTPUT_FILE} inside the scanned directory).",
    )

    # --- Content Selection ---
    p.add_argument(
        "--strict-binary",
        action="store_true",
        help="Skip files whose prefix is not valid UTF-8 even if it looks like text.",
    )
    p.add_argument(
        "--no-ignore",
        action="store_true",
        help="Do not apply .gitignore, .ignore or git exclude rules.",
    )

    # --- Metrics and Diagnostics ---
    p.add_argument(
        "--no-tokens",
        action="store_true",
        help="Skip the token estimate of the generated document.",
    )
    p.add_argument(
        "--log-file",
        dest="log_file",
        default=None,
        help="Also write diagnostics to this rotating log file.",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )
    p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print the run result as JSON.",
    )

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into configuration overrides.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Configuration overrides subset.
    """
    overrides: Dict[str, Any] = {
        "root_path": args.root_path,
        "output_path": args.output_path,
    }

    if args.strict_binary:
        overrides["binary_policy"] = BinaryPolicy.STRICT.value
    if args.no_ignore:
        overrides["respect_ignore_files"] = False
    if args.no_tokens:
        overrides["count_tokens"] = False

    return overrides
