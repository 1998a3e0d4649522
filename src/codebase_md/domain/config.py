from __future__ import annotations

"""
Run Configuration Domain.

Provides the default settings of a conversion run and the validation step
that turns untrusted overrides (CLI flags, test fixtures) into an immutable
ConversionConfig. Invalid values never abort: they fall back to defaults and
are reported as warnings.
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

from codebase_md.domain.constants import DEFAULT_TOKEN_MODEL, OUTPUT_FILE, PEEK_BYTES
from codebase_md.domain.content_models import BinaryPolicy
from codebase_md.infra.fs import normalize_path, resolve_output_path

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# CONFIGURATION MODEL
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class ConversionConfig:
    """
    Immutable settings of one conversion run.

    Attributes:
        root_path: Absolute directory to scan.
        output_path: Absolute path of the artifact.
        binary_policy: Treatment of binary-but-plausibly-text prefixes.
        respect_ignore_files: Apply .gitignore/.ignore/exclude rules.
        peek_bytes: Prefix size handed to the content inspector.
        count_tokens: Estimate the artifact's token count after writing.
        token_model: Model name used to pick the tiktoken encoding.
    """
    root_path: str
    output_path: str
    binary_policy: BinaryPolicy = BinaryPolicy.PERMISSIVE
    respect_ignore_files: bool = True
    peek_bytes: int = PEEK_BYTES
    count_tokens: bool = True
    token_model: str = DEFAULT_TOKEN_MODEL


def get_default_config() -> Dict[str, Any]:
    """
    Generate the default runtime configuration.

    The artifact path is left empty so that it follows the scan root.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        "root_path": os.getcwd(),
        "output_path": "",
        "binary_policy": BinaryPolicy.PERMISSIVE.value,
        "respect_ignore_files": True,
        "peek_bytes": PEEK_BYTES,
        "count_tokens": True,
        "token_model": DEFAULT_TOKEN_MODEL,
    }

# -----------------------------------------------------------------------------
# VALIDATION
# -----------------------------------------------------------------------------

def build_config(raw: Any = None) -> Tuple[ConversionConfig, List[str]]:
    """
    Merge overrides into the defaults and validate the result.

    Args:
        raw: Override dictionary; None values are ignored.

    Returns:
        Tuple[ConversionConfig, List[str]]: The validated configuration
                                            and the warnings produced.
    """
    warnings: List[str] = []
    defaults = get_default_config()
    merged: Dict[str, Any] = dict(defaults)

    if raw is None:
        pass
    elif isinstance(raw, dict):
        merged.update({k: v for k, v in raw.items() if v is not None})
    else:
        msg = f"Invalid config type: expected dict, received {type(raw).__name__}."
        warnings.append(f"{msg} Using defaults.")
        logger.warning(msg)

    root_raw = _as_str(merged["root_path"], defaults["root_path"], "root_path", warnings)
    root_path = normalize_path(root_raw, defaults["root_path"])
    output_raw = _as_str(merged["output_path"], "", "output_path", warnings)
    output_path = resolve_output_path(root_path, output_raw or OUTPUT_FILE, relative_to_root=not output_raw)

    cfg = ConversionConfig(
        root_path=root_path,
        output_path=output_path,
        binary_policy=_as_policy(merged["binary_policy"], warnings),
        respect_ignore_files=_as_bool(merged["respect_ignore_files"], True, "respect_ignore_files", warnings),
        peek_bytes=_as_positive_int(merged["peek_bytes"], PEEK_BYTES, "peek_bytes", warnings),
        count_tokens=_as_bool(merged["count_tokens"], True, "count_tokens", warnings),
        token_model=_as_str(merged["token_model"], DEFAULT_TOKEN_MODEL, "token_model", warnings),
    )
    return cfg, warnings

# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _as_str(value: Any, fallback: str, field: str, warnings: List[str]) -> str:
    """Validate and sanitize string inputs."""
    if value is None:
        return fallback
    if isinstance(value, str):
        v = value.strip()
        return v if v else fallback

    warnings.append(f"Invalid field '{field}': expected str, received {type(value).__name__}. Using fallback.")
    return fallback


def _as_bool(value: Any, fallback: bool, field: str, warnings: List[str]) -> bool:
    """Coerce various input types into native booleans."""
    if isinstance(value, bool):
        return value
    if value is None:
        return fallback

    if isinstance(value, (int, float)) and value in (0, 1):
        warnings.append(f"Field '{field}' converted from number {value} to bool.")
        return bool(value)
    if isinstance(value, str):
        s = value.strip().lower()
        if s in ("true", "1", "yes", "y"):
            warnings.append(f"Field '{field}' converted from '{value}' to True.")
            return True
        if s in ("false", "0", "no", "n"):
            warnings.append(f"Field '{field}' converted from '{value}' to False.")
            return False

    warnings.append(f"Invalid field '{field}': expected bool, received {type(value).__name__}. Using fallback.")
    return fallback


def _as_positive_int(value: Any, fallback: int, field: str, warnings: List[str]) -> int:
    """Accept strictly positive integers only."""
    if isinstance(value, int) and not isinstance(value, bool) and value > 0:
        return value
    warnings.append(f"Invalid field '{field}': expected positive int, received {value!r}. Using {fallback}.")
    return fallback


def _as_policy(value: Any, warnings: List[str]) -> BinaryPolicy:
    """Map a policy name (or enum member) onto BinaryPolicy."""
    if isinstance(value, BinaryPolicy):
        return value
    if isinstance(value, str):
        try:
            return BinaryPolicy(value.strip().lower())
        except ValueError:
            pass
    warnings.append(
        f"Unknown binary policy {value!r}. Using '{BinaryPolicy.PERMISSIVE.value}'."
    )
    return BinaryPolicy.PERMISSIVE
