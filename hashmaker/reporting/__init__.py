"""Reporting package for HashMaker.

This package turns a completed HashReport into its exported artefacts:

- build_tree: Rebuilds the folder/file tree from the flat hash records.
- render_hash_list / render_hash_confirmation: Deterministic HTML documents.
- export_archive: Zip bundle of the JSON data and both documents.

Example:
    >>> from hashmaker.reporting import build_tree, export_archive
    >>> roots = build_tree(report.file_hashes)
    >>> archive = export_archive(report, settings, Path("."))
"""

from .archive_exporter import build_archive_entries, export_archive, load_report
from .document_renderer import (
    format_test_date,
    render_hash_confirmation,
    render_hash_list,
)
from .tree_builder import build_tree, iter_tree, iter_tree_with_depth

__all__ = [
    "build_tree",
    "iter_tree",
    "iter_tree_with_depth",
    "format_test_date",
    "render_hash_list",
    "render_hash_confirmation",
    "build_archive_entries",
    "export_archive",
    "load_report",
]
