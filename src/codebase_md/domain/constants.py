from __future__ import annotations

"""
Domain Constants.

Centralizes the fixed names, limits and document markup shared by the
traversal, classification and serialization stages.
"""

from typing import Tuple

# -----------------------------------------------------------------------------
# ARTIFACT AND TRAVERSAL
# -----------------------------------------------------------------------------

OUTPUT_FILE = "codebase.md"
VCS_DIR_NAME = ".git"

# Per-directory ignore sources, lowest priority first
IGNORE_FILE_NAMES: Tuple[str, ...] = (".gitignore", ".ignore")
REPO_EXCLUDE_FILE = ("info", "exclude")

# -----------------------------------------------------------------------------
# CLASSIFICATION
# -----------------------------------------------------------------------------

PEEK_BYTES = 1024
NON_TEXT_RATIO_LIMIT = 0.30

# -----------------------------------------------------------------------------
# DOCUMENT MARKUP
# -----------------------------------------------------------------------------

ROOT_LABEL = "."

TAG_CODEBASE = "codebase"
TAG_STRUCTURE = "project_structure"
TAG_FILE = "file"
ATTR_SOURCE = "src"

DEFAULT_TOKEN_MODEL = "gpt-4o"
