"""
Models package for HashMaker.

This package provides convenient imports for all data models:
- HashAlgorithm: Enum of engine digest algorithms
- FlatHashRecord, TreeNode, HashReport: Engine output and the rebuilt tree
- ReportSettings: Fields printed into rendered documents
- ProgressSnapshot: Derived progress view
- SessionSummary: Interactive session statistics
- WorkflowState, ReportTarget, ComparisonResult and the screen values
"""

from .hash_algorithm import HashAlgorithm
from .data_models import (
    FOLDER_SEPARATOR,
    FlatHashRecord,
    HashReport,
    ProgressSnapshot,
    ReportSettings,
    SessionSummary,
    TreeNode,
)
from .workflow_state import (
    About,
    CompareResult,
    ComparisonAttached,
    ComparisonResult,
    DualSelect,
    Failed,
    Landing,
    PrimaryReady,
    Processing,
    ReportTarget,
    Screen,
    WorkflowState,
)

__all__ = [
    "FOLDER_SEPARATOR",
    "HashAlgorithm",
    "FlatHashRecord",
    "TreeNode",
    "HashReport",
    "ReportSettings",
    "ProgressSnapshot",
    "SessionSummary",
    "WorkflowState",
    "ReportTarget",
    "ComparisonResult",
    "Screen",
    "Landing",
    "Processing",
    "PrimaryReady",
    "DualSelect",
    "ComparisonAttached",
    "CompareResult",
    "About",
    "Failed",
]
