from __future__ import annotations

"""
Pipeline Domain Data Models.

Defines the result object and factory functions used to communicate the
outcome of a conversion run between the engine and the CLI layer.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from codebase_md.domain.content_models import SerializationStats
from codebase_md.domain.tree_models import DocumentCounts

# -----------------------------------------------------------------------------
# CORE DATA MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class ConversionResult:
    """
    Unified result object of a complete conversion run.

    Attributes:
        ok: Flag indicating success or failure.
        error: Descriptive message in case of failure.
        root_path: Absolute directory that was scanned.
        output_path: Absolute path of the artifact.
        directories: Directory count reported in the structure section.
        files: File count reported in the structure section.
        included: Files emitted as content blocks.
        skipped_binary: Files skipped as binary.
        unreadable: Files skipped because they could not be read.
        decode_errors: Files emitted with an inline read-error comment.
        size_bytes: Final artifact size.
        token_count: Estimated token count of the artifact.
        summary: Extra execution metadata.
    """
    ok: bool
    error: str

    root_path: str
    output_path: str

    directories: int = 0
    files: int = 0

    included: int = 0
    skipped_binary: int = 0
    unreadable: int = 0
    decode_errors: int = 0

    size_bytes: int = 0
    token_count: int = 0

    summary: Dict[str, Any] = field(default_factory=dict)

# -----------------------------------------------------------------------------
# FACTORY FUNCTIONS
# -----------------------------------------------------------------------------

def create_error_result(
        error: str,
        root_path: str,
        output_path: str,
        summary_extra: Optional[Dict[str, Any]] = None,
) -> ConversionResult:
    """
    Create a failed conversion result.

    Args:
        error: Detailed error description.
        root_path: The scan root.
        output_path: The artifact that could not be produced.
        summary_extra: Additional metadata for the summary payload.

    Returns:
        ConversionResult: An immutable error result object.
    """
    return ConversionResult(
        ok=False,
        error=error,
        root_path=root_path,
        output_path=output_path,
        summary=summary_extra or {},
    )


def create_success_result(
        root_path: str,
        output_path: str,
        counts: DocumentCounts,
        stats: SerializationStats,
        size_bytes: int = 0,
        token_count: int = 0,
        summary_extra: Optional[Dict[str, Any]] = None,
) -> ConversionResult:
    """
    Create a successful conversion result.

    Args:
        root_path: The scan root.
        output_path: The written artifact.
        counts: Directory and file totals of the structure section.
        stats: Counters of the content section.
        size_bytes: Artifact size on disk.
        token_count: Token estimate of the artifact.
        summary_extra: Final execution metrics.

    Returns:
        ConversionResult: An immutable success result object.
    """
    return ConversionResult(
        ok=True,
        error="",
        root_path=root_path,
        output_path=output_path,
        directories=counts.directories,
        files=counts.files,
        included=stats.included,
        skipped_binary=stats.skipped_binary,
        unreadable=stats.unreadable,
        decode_errors=stats.decode_errors,
        size_bytes=size_bytes,
        token_count=token_count,
        summary=summary_extra or {},
    )
