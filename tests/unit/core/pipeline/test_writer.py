from __future__ import annotations

"""
Unit tests for document serialization.

Verifies the exact markup of the structure section and of each file
block, and the counters kept while the content section is produced.
"""

import io
from pathlib import Path
from unittest.mock import patch

from codebase_md.core.analysis.tree_generator import build_tree
from codebase_md.core.pipeline.components.writer import (
    serialize_document,
    write_file_entry,
    write_structure_section,
)
from codebase_md.domain.content_models import (
    BinaryPolicy,
    Classification,
    ClassifiedFile,
    SerializationStats,
)

# -----------------------------------------------------------------------------
# STRUCTURE SECTION
# -----------------------------------------------------------------------------

def test_structure_section_layout(tmp_path: Path, make_files):
    """TC-01: Verify tree lines, summary line and closing blank line."""
    make_files(tmp_path, {"src/app.py": b"", "README": b""})
    tree = build_tree(["README", "src", "src/app.py"], str(tmp_path))

    out = io.StringIO()
    write_structure_section(tree, out)

    assert out.getvalue() == (
        "<project_structure>\n"
        ".\n"
        "├── README\n"
        "└── src\n"
        "    └── app.py\n"
        "1 directories, 2 files\n"
        "</project_structure>\n"
        "\n"
    )

# -----------------------------------------------------------------------------
# FILE BLOCKS
# -----------------------------------------------------------------------------

def test_text_entry_is_escaped(tmp_path: Path):
    """TC-02: Verify content and the src attribute are escaped exactly once."""
    (tmp_path / "a&b.html").write_bytes(b"<p>Tom &amp; Jerry</p>")
    out, stats = io.StringIO(), SerializationStats()

    write_file_entry("a&b.html", str(tmp_path), out, stats)

    assert out.getvalue() == (
        '<file src="a&amp;b.html">\n'
        "&lt;p&gt;Tom &amp;amp; Jerry&lt;/p&gt;\n"
        "</file>\n"
        "\n"
    )
    assert stats.included == 1


def test_empty_file_yields_single_newline(tmp_path: Path):
    """TC-03: Verify a zero-byte file produces an empty body line."""
    (tmp_path / "empty.txt").write_bytes(b"")
    out, stats = io.StringIO(), SerializationStats()

    write_file_entry("empty.txt", str(tmp_path), out, stats)

    assert out.getvalue() == '<file src="empty.txt">\n\n</file>\n\n'


def test_binary_entry_is_skipped(tmp_path: Path):
    """TC-04: Verify binary files produce no output and are counted."""
    (tmp_path / "blob.bin").write_bytes(b"\x00\xff\x00")
    out, stats = io.StringIO(), SerializationStats()

    write_file_entry("blob.bin", str(tmp_path), out, stats)

    assert out.getvalue() == ""
    assert stats.skipped_binary == 1
    assert stats.included == 0


def test_decode_failure_emits_comment(tmp_path: Path):
    """TC-05: Verify a file that passes the peek but fails decoding keeps its tags."""
    (tmp_path / "legacy.txt").write_bytes("año\n".encode("latin-1"))
    out, stats = io.StringIO(), SerializationStats()

    write_file_entry("legacy.txt", str(tmp_path), out, stats, BinaryPolicy.PERMISSIVE)

    lines = out.getvalue().split("\n")
    assert lines[0] == '<file src="legacy.txt">'
    assert lines[1].startswith("<!-- Error reading file: ")
    assert lines[1].endswith(" -->")
    assert "utf-8" in lines[1]
    assert lines[2:] == ["</file>", "", ""]
    assert stats.decode_errors == 1
    assert stats.included == 0


def test_unreadable_entry_is_skipped(tmp_path: Path):
    """TC-06: Verify files that cannot be classified leave no trace in the output."""
    out, stats = io.StringIO(), SerializationStats()
    unreadable = ClassifiedFile("locked.txt", Classification.UNREADABLE, reason="denied")

    with patch("codebase_md.core.pipeline.components.writer.classify_file", return_value=unreadable):
        write_file_entry("locked.txt", str(tmp_path), out, stats)

    assert out.getvalue() == ""
    assert stats.unreadable == 1

# -----------------------------------------------------------------------------
# FULL DOCUMENT
# -----------------------------------------------------------------------------

def test_serialize_document_full_layout(tmp_path: Path, make_files):
    """TC-07: Verify the complete document for a small tree."""
    make_files(tmp_path, {"a.txt": b"x<y", "d/b.txt": b"ok\n"})
    paths = ["a.txt", "d", "d/b.txt"]
    tree = build_tree(paths, str(tmp_path))

    out = io.StringIO()
    stats = serialize_document(tree, paths, str(tmp_path), out)

    assert out.getvalue() == (
        "<codebase>\n"
        "<project_structure>\n"
        ".\n"
        "├── a.txt\n"
        "└── d\n"
        "    └── b.txt\n"
        "1 directories, 2 files\n"
        "</project_structure>\n"
        "\n"
        '<file src="a.txt">\n'
        "x&lt;y\n"
        "</file>\n"
        "\n"
        '<file src="d/b.txt">\n'
        "ok\n"
        "\n"
        "</file>\n"
        "\n"
        "</codebase>\n"
    )
    assert stats.included == 2


def test_serialize_document_empty_tree(tmp_path: Path):
    """TC-08: Verify an empty path list still yields a well-formed document."""
    tree = build_tree([], str(tmp_path))
    out = io.StringIO()

    stats = serialize_document(tree, [], str(tmp_path), out)

    assert out.getvalue() == (
        "<codebase>\n"
        "<project_structure>\n"
        ".\n"
        "0 directories, 0 files\n"
        "</project_structure>\n"
        "\n"
        "</codebase>\n"
    )
    assert stats == SerializationStats()


def test_error_comment_never_contains_double_hyphen(tmp_path: Path):
    """TC-09: Verify an error message with '--' still yields a well-formed comment."""
    (tmp_path / "odd.txt").write_text("fine", encoding="utf-8")
    out, stats = io.StringIO(), SerializationStats()

    with patch(
        "codebase_md.core.pipeline.components.writer.read_text_file",
        side_effect=OSError("bad --flag name <x> ---"),
    ):
        write_file_entry("odd.txt", str(tmp_path), out, stats)

    comment = out.getvalue().split("\n")[1]
    assert comment.startswith("<!-- Error reading file: ")
    assert comment.endswith(" -->")
    body = comment[len("<!--"):-len("-->")]
    assert "--" not in body
    assert "&lt;x&gt;" in body
    assert stats.decode_errors == 1
