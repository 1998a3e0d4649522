from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, configuration
resolution from defaults and flags, conversion, and result rendering.
Maps the outcome onto the process exit status.
"""

import json
import os
import sys
from dataclasses import asdict
from typing import List, Optional

from codebase_md.core.pipeline.engine import run_conversion
from codebase_md.domain.config import build_config
from codebase_md.domain.pipeline_models import ConversionResult
from codebase_md.infra.logging import LoggingConfig, configure_logging, get_logger
from codebase_md.interface.cli import args as cli_args

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_BAD_INPUT = 2
EXIT_INTERRUPTED = 130

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the CLI workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: 0 on success (even if individual files were skipped), 1 when
             the artifact could not be produced, 2 for a missing root,
             130 on interrupt.
    """
    if sys.platform == "win32":
        if hasattr(sys.stdout, "reconfigure"):
            sys.stdout.reconfigure(encoding="utf-8")
        if hasattr(sys.stderr, "reconfigure"):
            sys.stderr.reconfigure(encoding="utf-8")

    # 1. Argument parsing phase
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 2. Logging bootstrap (console on stderr, optional rotating file)
    log_level = "DEBUG" if args.debug else "INFO"
    configure_logging(LoggingConfig(level=log_level, console=True, log_file=args.log_file))

    # 3. Configuration resolution
    config, warnings = build_config(cli_args.args_to_overrides(args))
    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    # 4. Pre-flight input verification
    if not os.path.isdir(config.root_path):
        msg = f"Input path does not exist or is not a directory: {config.root_path}"
        logger.error(msg)
        print(f"ERROR: {msg}", file=sys.stderr)
        return EXIT_BAD_INPUT

    # 5. Conversion phase
    try:
        result = run_conversion(config)
    except KeyboardInterrupt:
        logger.warning("Conversion interrupted by user.")
        print("Interrupted.", file=sys.stderr)
        return EXIT_INTERRUPTED
    except OSError as e:
        msg = f"Failed while writing {config.output_path}: {e}"
        logger.critical(msg, exc_info=True)
        print(f"ERROR: {msg}", file=sys.stderr)
        return EXIT_FAILURE

    # 6. Output rendering phase
    if args.json_output:
        print(json.dumps(asdict(result), ensure_ascii=False, indent=2))
    else:
        _print_human_summary(result)

    return EXIT_OK if result.ok else EXIT_FAILURE

# -----------------------------------------------------------------------------
# VIEW RENDERING (HUMAN READABLE)
# -----------------------------------------------------------------------------

def _print_human_summary(result: ConversionResult) -> None:
    """
    Print the conversion result to standard output.

    Args:
        result: The conversion result to render.
    """
    if not result.ok:
        print(f"ERROR: {result.error}", file=sys.stderr)
        return

    print(f"Output saved to {result.output_path}")
    print(f"{result.directories} directories, {result.files} files")

    stats_keys = {
        "included": "Files included",
        "skipped_binary": "Files skipped (binary)",
        "unreadable": "Files skipped (unreadable)",
        "decode_errors": "Files with read errors",
    }
    for key, label in stats_keys.items():
        print(f"{label}: {getattr(result, key)}")

    print(f"File size: {result.size_bytes} bytes")
    if result.token_count > 0:
        print(f"Estimated Token Density: {result.token_count:,}")

# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
