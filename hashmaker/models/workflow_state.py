"""
Workflow states and the screen values that carry their data.

Each screen value holds only the reports that are valid on that screen, so a
comparison result without both reports, or an attached comparison without a
primary report, cannot be represented.
"""

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Optional, Union

from .data_models import HashReport


class WorkflowState(Enum):
    """Tag of the single active screen."""
    LANDING = "landing"
    PROCESSING = "processing"
    PRIMARY_READY = "primary-ready"
    DUAL_SELECT = "dual-select"
    COMPARISON_ATTACHED = "comparison-attached"
    COMPARE_RESULT = "compare-result"
    ABOUT = "about"
    ERROR = "error"


class ReportTarget(Enum):
    """Which held report a hashing call will produce."""
    PRIMARY = "primary"
    COMPARISON = "comparison"


class ComparisonResult(Enum):
    IDENTICAL = "identical"
    MISMATCH = "mismatch"


@dataclass(frozen=True)
class Landing:
    kind: ClassVar[WorkflowState] = WorkflowState.LANDING


@dataclass(frozen=True)
class Processing:
    """A hashing call is in flight.

    ``primary`` is the report a comparison result will be attached to; it is
    None when the call produces the primary report.
    """
    kind: ClassVar[WorkflowState] = WorkflowState.PROCESSING
    target: ReportTarget
    path: str
    primary: Optional[HashReport] = None


@dataclass(frozen=True)
class PrimaryReady:
    kind: ClassVar[WorkflowState] = WorkflowState.PRIMARY_READY
    primary: HashReport


@dataclass(frozen=True)
class DualSelect:
    kind: ClassVar[WorkflowState] = WorkflowState.DUAL_SELECT
    primary: HashReport


@dataclass(frozen=True)
class ComparisonAttached:
    kind: ClassVar[WorkflowState] = WorkflowState.COMPARISON_ATTACHED
    primary: HashReport
    comparison: HashReport


@dataclass(frozen=True)
class CompareResult:
    kind: ClassVar[WorkflowState] = WorkflowState.COMPARE_RESULT
    primary: HashReport
    comparison: HashReport
    result: ComparisonResult


@dataclass(frozen=True)
class About:
    kind: ClassVar[WorkflowState] = WorkflowState.ABOUT


@dataclass(frozen=True)
class Failed:
    kind: ClassVar[WorkflowState] = WorkflowState.ERROR


Screen = Union[
    Landing,
    Processing,
    PrimaryReady,
    DualSelect,
    ComparisonAttached,
    CompareResult,
    About,
    Failed,
]
