"""
Unit tests for hashmaker.reporting.tree_builder.

Tests cover:
- Folder title, summary and file placement
- Engine emission order (sub-folders before their parent's marker)
- Repeated folder paths that are not the innermost open folder
- Folders whose summary never arrives
- Pre-order flattening reproducing the input
"""

from typing import List

import pytest

from hashmaker.models import FlatHashRecord, TreeNode
from hashmaker.reporting import build_tree, iter_tree, iter_tree_with_depth


def flatten(roots) -> List[FlatHashRecord]:
    return [FlatHashRecord(node.path, node.hash) for node in iter_tree(roots)]


@pytest.mark.unit
class TestBuildTree:
    """Tests for build_tree."""

    def test_empty_input(self):
        assert build_tree([]) == ()

    def test_single_file(self):
        roots = build_tree([FlatHashRecord("\\a.txt", "AA")])
        assert roots == (TreeNode(path="\\a.txt", hash="AA", is_summary=False),)

    def test_folder_with_file_and_summary(self):
        roots = build_tree(
            [
                FlatHashRecord("\\docs\\", ""),
                FlatHashRecord("\\docs\\a.txt", "H2"),
                FlatHashRecord("\\docs\\", "H1"),
            ]
        )
        assert len(roots) == 2
        title, summary = roots
        assert title.is_folder_title()
        assert [child.path for child in title.children] == ["\\docs\\a.txt"]
        assert summary.is_summary
        assert summary.hash == "H1"
        assert summary.children == ()

    def test_repeated_folder_path_before_children(self):
        roots = build_tree(
            [
                FlatHashRecord("docs\\", "h1"),
                FlatHashRecord("docs\\", "H1"),
                FlatHashRecord("docs\\a.txt", "h2"),
            ]
        )
        assert [(n.path, n.is_summary, len(n.children)) for n in roots] == [
            ("docs\\", False, 0),
            ("docs\\", True, 0),
            ("docs\\a.txt", False, 0),
        ]

    def test_engine_emission_order(self, sample_records: List[FlatHashRecord]):
        roots = build_tree(sample_records)
        assert [(n.path, n.is_summary) for n in roots] == [
            ("\\project\\empty\\", False),
            ("\\project\\empty\\", True),
            ("\\project\\notes\\", False),
            ("\\project\\notes\\", True),
            ("\\project\\", False),
            ("\\project\\", True),
        ]
        assert roots[0].children == ()
        assert [c.path for c in roots[2].children] == ["\\project\\notes\\todo.txt"]
        assert [c.path for c in roots[4].children] == ["\\project\\readme.md"]

    def test_nested_folders(self):
        records = [
            FlatHashRecord("\\a\\", ""),
            FlatHashRecord("\\a\\b\\", ""),
            FlatHashRecord("\\a\\b\\f.txt", "F"),
            FlatHashRecord("\\a\\b\\", "B"),
            FlatHashRecord("\\a\\", "A"),
        ]
        roots = build_tree(records)
        assert [n.path for n in roots] == ["\\a\\", "\\a\\"]
        inner = roots[0].children
        assert [(n.path, n.is_summary) for n in inner] == [("\\a\\b\\", False), ("\\a\\b\\", True)]
        assert inner[0].children[0].path == "\\a\\b\\f.txt"

    def test_unclosed_folder_collects_rest(self):
        records = [
            FlatHashRecord("\\a\\", ""),
            FlatHashRecord("\\a\\x.txt", "X"),
            FlatHashRecord("\\b.txt", "B"),
        ]
        roots = build_tree(records)
        assert len(roots) == 1
        assert [c.path for c in roots[0].children] == ["\\a\\x.txt", "\\b.txt"]

    def test_non_innermost_repeat_opens_new_folder(self):
        records = [
            FlatHashRecord("\\a\\", ""),
            FlatHashRecord("\\a\\b\\", ""),
            FlatHashRecord("\\a\\", "?"),
        ]
        roots = build_tree(records)
        assert len(roots) == 1
        b = roots[0].children[0]
        assert b.path == "\\a\\b\\"
        assert b.children[0].path == "\\a\\"
        assert not b.children[0].is_summary

    def test_custom_separator(self):
        roots = build_tree(
            [FlatHashRecord("docs/", ""), FlatHashRecord("docs/a", "A"), FlatHashRecord("docs/", "S")],
            separator="/",
        )
        assert len(roots) == 2
        assert roots[1].is_summary

    def test_flatten_reproduces_input(self, sample_records: List[FlatHashRecord]):
        assert flatten(build_tree(sample_records)) == sample_records

    def test_flatten_reproduces_unclosed_input(self):
        records = [
            FlatHashRecord("\\a\\", ""),
            FlatHashRecord("\\a\\b\\", ""),
            FlatHashRecord("\\a\\", "?"),
            FlatHashRecord("\\c", "C"),
        ]
        assert flatten(build_tree(records)) == records

    def test_deep_nesting(self):
        depth = 3000
        records = [FlatHashRecord("\\d" * (i + 1) + "\\", "") for i in range(depth)]
        roots = build_tree(records)
        assert len(roots) == 1
        assert sum(1 for _ in iter_tree(roots)) == depth


@pytest.mark.unit
class TestIterTree:
    """Tests for the pre-order walkers."""

    def test_depths(self, sample_records: List[FlatHashRecord]):
        pairs = [(depth, node.path) for depth, node in iter_tree_with_depth(build_tree(sample_records))]
        assert pairs[2] == (0, "\\project\\notes\\")
        assert pairs[3] == (1, "\\project\\notes\\todo.txt")
        assert pairs[4] == (0, "\\project\\notes\\")
