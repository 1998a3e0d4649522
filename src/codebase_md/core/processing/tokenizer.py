from __future__ import annotations

"""
Token Estimation.

Reports how much of a language model's context window the artifact will
occupy. Uses tiktoken encodings, preferring the model-specific one, then
'o200k_base', then 'cl100k_base'. When no encoding can be loaded (for
example, the encoding files cannot be fetched), falls back to a character
density heuristic.
"""

import logging
import math
from typing import Any

import tiktoken

from codebase_md.domain.constants import DEFAULT_TOKEN_MODEL

logger = logging.getLogger(__name__)

# Roughly 4 chars/token for English code and prose
CHARS_PER_TOKEN = 4

MODERN_ENCODING = "o200k_base"
LEGACY_ENCODING = "cl100k_base"

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def count_tokens(text: str, model: str = DEFAULT_TOKEN_MODEL) -> int:
    """
    Estimate the number of tokens in a text string.

    Args:
        text: The content string to analyze.
        model: The target model name (e.g., "gpt-4o").

    Returns:
        int: Token count. Returns 0 for empty input.
    """
    if not text:
        return 0

    try:
        encoding = _get_encoding(model)
        return len(encoding.encode(text, disallowed_special=()))
    except Exception as e:
        logger.debug(f"Tiktoken calculation failed: {e}. Falling back to heuristic.")

    return _count_heuristic(text)

# -----------------------------------------------------------------------------
# INTERNAL HELPERS
# -----------------------------------------------------------------------------

def _get_encoding(model_name: str) -> Any:
    """Retrieve the best available tiktoken encoding for a model."""
    try:
        return tiktoken.encoding_for_model(model_name)
    except KeyError:
        pass

    try:
        return tiktoken.get_encoding(MODERN_ENCODING)
    except ValueError:
        return tiktoken.get_encoding(LEGACY_ENCODING)


def _count_heuristic(text: str) -> int:
    """Approximate tokens as ceil(len(text) / 4)."""
    return math.ceil(len(text) / CHARS_PER_TOKEN)
