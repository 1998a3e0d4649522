from __future__ import annotations

"""
Core conversion pipeline.

This module coordinates one run end to end:
1. Validates the scan root.
2. Walks the tree once into a sorted, filtered path list.
3. Replaces any previous artifact.
4. Builds the structure section from the path list.
5. Streams the content section over the same list.
6. Reports size and token metrics.
"""

import logging
import os
from datetime import datetime
from typing import Optional

from codebase_md.core.analysis.tree_generator import build_tree
from codebase_md.core.pipeline.components.filters import PathFilter
from codebase_md.core.pipeline.components.walker import walk_directory
from codebase_md.core.pipeline.components.writer import serialize_document
from codebase_md.core.processing.tokenizer import count_tokens
from codebase_md.domain.config import ConversionConfig, build_config
from codebase_md.domain.pipeline_models import (
    ConversionResult,
    create_error_result,
    create_success_result,
)
from codebase_md.infra.fs import get_file_size, remove_existing_artifact

logger = logging.getLogger(__name__)

_TIME_FMT = "%Y-%m-%d %H:%M:%S"


def run_conversion(config: Optional[ConversionConfig] = None) -> ConversionResult:
    """
    Convert the configured directory into a single document.

    Setup failures (invalid root, artifact cannot be replaced or created)
    are returned as a failed result. Failures while writing the artifact
    are not recoverable and propagate as OSError; the output stream is
    closed either way.

    Args:
        config: Validated run configuration. Defaults scan the current
                working directory into 'codebase.md'.

    Returns:
        ConversionResult: Status, counts and metrics of the run.
    """
    if config is None:
        config, _ = build_config()

    root_path = config.root_path
    output_path = config.output_path
    logger.info(f"Starting conversion at {datetime.now().strftime(_TIME_FMT)}")

    # -------------------------------------------------------------------------
    # 1) Root validation
    # -------------------------------------------------------------------------
    if not os.path.isdir(root_path):
        msg = f"Invalid input directory: {root_path}"
        logger.error(msg)
        return create_error_result(msg, root_path, output_path)

    # -------------------------------------------------------------------------
    # 2) Traversal
    # -------------------------------------------------------------------------
    path_filter = PathFilter(root_path, output_path, config.respect_ignore_files)
    paths = walk_directory(root_path, path_filter)
    logger.debug(f"Collected {len(paths)} paths.")

    # -------------------------------------------------------------------------
    # 3) Artifact preparation
    # -------------------------------------------------------------------------
    try:
        if remove_existing_artifact(output_path):
            logger.info(f"Removed existing {os.path.basename(output_path)}")
        stream = open(output_path, "w", encoding="utf-8", newline="")
    except OSError as e:
        msg = f"Failed to create output file {output_path}: {e}"
        logger.critical(msg)
        return create_error_result(msg, root_path, output_path)

    # -------------------------------------------------------------------------
    # 4) Structure and content sections
    # -------------------------------------------------------------------------
    with stream:
        tree = build_tree(paths, root_path)
        stats = serialize_document(
            tree,
            paths,
            root_path,
            stream,
            policy=config.binary_policy,
            peek_bytes=config.peek_bytes,
        )

    logger.info(f"File processing completed at {datetime.now().strftime(_TIME_FMT)}")
    logger.info(f"Codebase conversion complete. Output saved to {output_path}")

    # -------------------------------------------------------------------------
    # 5) Metrics
    # -------------------------------------------------------------------------
    size_bytes = get_file_size(output_path) or 0
    logger.info(f"File size: {size_bytes} bytes")

    token_count = 0
    if config.count_tokens:
        token_count = _estimate_artifact_tokens(output_path, config.token_model)

    summary = {
        "paths_collected": len(paths),
        "binary_policy": config.binary_policy.value,
        "respect_ignore_files": config.respect_ignore_files,
        "token_model": config.token_model if config.count_tokens else None,
    }

    logger.info(f"Conversion finished at {datetime.now().strftime(_TIME_FMT)}")
    return create_success_result(
        root_path, output_path, tree.counts, stats, size_bytes, token_count, summary
    )

# -----------------------------------------------------------------------------
# INTERNAL HELPERS
# -----------------------------------------------------------------------------

def _estimate_artifact_tokens(output_path: str, model: str) -> int:
    """Read the finished artifact back and estimate its token count."""
    try:
        with open(output_path, "r", encoding="utf-8") as f:
            text = f.read()
    except OSError as e:
        logger.warning(f"Failed to count tokens: {e}")
        return 0

    tokens = count_tokens(text, model=model)
    logger.info(f"Estimated token count ({model}): {tokens}")
    return tokens
