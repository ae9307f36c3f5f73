"""HashMaker - Folder hash generation and comparison tool.

A Python application that drives an external hashing engine over a folder,
rebuilds the engine's flat per-entry hashes into a folder/file tree, renders
the hash code list and confirmation documents, and compares two results.
"""

__version__ = "3.0.0"

from .models import (
    ComparisonResult,
    FlatHashRecord,
    HashAlgorithm,
    HashReport,
    ProgressSnapshot,
    ReportSettings,
    SessionSummary,
    TreeNode,
    WorkflowState,
)

__all__ = [
    "__version__",
    "HashAlgorithm",
    "FlatHashRecord",
    "TreeNode",
    "HashReport",
    "ReportSettings",
    "ProgressSnapshot",
    "SessionSummary",
    "WorkflowState",
    "ComparisonResult",
]


def main() -> None:
    """Entry point for the HashMaker CLI application.

    This function is called when the `hashmaker` command is invoked after
    package installation via pip. It imports and runs the Typer app
    from the hashmaker.cli module.
    """
    from hashmaker.cli import app
    app()
