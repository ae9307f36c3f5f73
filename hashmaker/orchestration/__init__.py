"""Workflow orchestration package for HashMaker.

This package contains orchestration components for hashing sessions:
- WorkflowController: State machine over the workflow screens.
- SessionLogger: Structured logging of a session to a log file.
- HashSession: Interactive loop wiring controller, drop targets, progress and TUI.
"""

from hashmaker.orchestration.session_logger import SessionLogger
from hashmaker.orchestration.workflow_controller import (
    InvalidTransitionError,
    WorkflowController,
    compare_reports,
)
from hashmaker.orchestration.hash_session import HashSession

__all__ = [
    "SessionLogger",
    "WorkflowController",
    "InvalidTransitionError",
    "compare_reports",
    "HashSession",
]
