from __future__ import annotations

"""
Content Classification Data Models.

Defines the inspector verdicts, the per-file classification handed to the
serializer, and the counters the serializer keeps while emitting blocks.
"""

from dataclasses import dataclass
from enum import Enum

# -----------------------------------------------------------------------------
# CLASSIFICATION MODELS
# -----------------------------------------------------------------------------

class ContentType(Enum):
    """Verdict of the byte-prefix inspector."""
    TEXT = "text"
    BINARY_TEXTLIKE = "binary_textlike"
    BINARY = "binary"


class Classification(Enum):
    """Decision taken for one file before its content is emitted."""
    TEXT = "text"
    BINARY = "binary"
    UNREADABLE = "unreadable"


class BinaryPolicy(Enum):
    """
    How ambiguous prefixes are treated.

    PERMISSIVE keeps BINARY_TEXTLIKE content, STRICT drops it.
    """
    PERMISSIVE = "permissive"
    STRICT = "strict"


@dataclass(frozen=True)
class ClassifiedFile:
    """
    Pairing of a relative path with its classification.

    Attributes:
        rel_path: Path relative to the scan root.
        classification: Text, binary or unreadable.
        reason: Failure description, only set for UNREADABLE.
    """
    rel_path: str
    classification: Classification
    reason: str = ""

# -----------------------------------------------------------------------------
# SERIALIZATION COUNTERS
# -----------------------------------------------------------------------------

@dataclass
class SerializationStats:
    """Outcome counters of the content section."""
    included: int = 0
    skipped_binary: int = 0
    unreadable: int = 0
    decode_errors: int = 0
