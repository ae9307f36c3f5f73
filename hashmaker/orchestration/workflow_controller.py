"""WorkflowController sequencing the select, compute, report and compare screens.

The controller holds exactly one screen value (see hashmaker.models.workflow_state)
and is the only place the primary and comparison reports change. Reports are
replaced whole, never mutated.

Transitions:
    landing             --select_path-->             processing
    processing          --engine resolves-->         primary-ready | comparison-attached
    processing          --engine fails-->            error
    primary-ready       --clear_primary-->           landing
    primary-ready       --navigate(DUAL_SELECT)-->   dual-select
    dual-select         --select_path-->             processing (primary)
    dual-select         --select_comparison_path-->  processing (comparison)
    comparison-attached --clear_primary-->           landing
    comparison-attached --clear_comparison-->        dual-select
    comparison-attached --compare-->                 compare-result
    compare-result      --navigate(DUAL_SELECT)-->   dual-select
    any                 --navigate(ABOUT)-->         about
    about               --navigate(LANDING)-->       landing
    error               --select_path-->             processing

Example:
    controller = WorkflowController(engine, progress=consumer)
    await controller.select_path("/data/release-1.2")
    if controller.kind is WorkflowState.PRIMARY_READY:
        print(controller.primary_report.hash)
"""

from dataclasses import replace
from typing import Callable, List, Optional

from hashmaker.engine import HashingEngine
from hashmaker.ingestion import ProgressStreamConsumer
from hashmaker.models import (
    About,
    CompareResult,
    ComparisonAttached,
    ComparisonResult,
    DualSelect,
    Failed,
    HashAlgorithm,
    HashReport,
    Landing,
    PrimaryReady,
    Processing,
    ProgressSnapshot,
    ReportTarget,
    Screen,
    WorkflowState,
)
from hashmaker.orchestration.session_logger import SessionLogger


class InvalidTransitionError(ValueError):
    """Raised when an event is not allowed on the current screen."""


def compare_reports(primary: HashReport, comparison: HashReport) -> ComparisonResult:
    """Identical iff both final hashes are equal strings."""
    if primary.hash == comparison.hash:
        return ComparisonResult.IDENTICAL
    return ComparisonResult.MISMATCH


_PRIMARY_SELECTABLE = {
    WorkflowState.LANDING,
    WorkflowState.ERROR,
    WorkflowState.DUAL_SELECT,
}

_LANDING_REACHABLE_FROM = {
    WorkflowState.ABOUT,
    WorkflowState.PRIMARY_READY,
    WorkflowState.DUAL_SELECT,
    WorkflowState.COMPARE_RESULT,
    WorkflowState.ERROR,
}


class WorkflowController:
    """Top-level state machine of the hashing workflow.

    Args:
        engine: External hashing engine.
        progress: Progress consumer whose snapshot is reset on every call.
            A detached consumer is created when None.
        algorithm: Algorithm passed to the engine.
        logger_instance: Optional SessionLogger receiving run entries.
        on_state_change: Called with every new screen value.
    """

    def __init__(
        self,
        engine: HashingEngine,
        progress: Optional[ProgressStreamConsumer] = None,
        algorithm: HashAlgorithm = HashAlgorithm.SHA256,
        logger_instance: Optional[SessionLogger] = None,
        on_state_change: Optional[Callable[[Screen], None]] = None,
    ) -> None:
        self._engine = engine
        self._progress = progress or ProgressStreamConsumer()
        self.algorithm = algorithm
        self._logger = logger_instance
        self._on_state_change = on_state_change
        self._state: Screen = Landing()
        self._busy = False
        self._errors: List[str] = []
        self.reports_generated = 0
        self.comparisons_run = 0
        self.failures = 0

    @property
    def state(self) -> Screen:
        return self._state

    @property
    def kind(self) -> WorkflowState:
        return self._state.kind

    @property
    def is_busy(self) -> bool:
        return self._busy

    @property
    def progress(self) -> ProgressSnapshot:
        return self._progress.snapshot

    @property
    def primary_report(self) -> Optional[HashReport]:
        return getattr(self._state, "primary", None)

    @property
    def comparison_report(self) -> Optional[HashReport]:
        return getattr(self._state, "comparison", None)

    @property
    def comparison_result(self) -> Optional[ComparisonResult]:
        if isinstance(self._state, CompareResult):
            return self._state.result
        return None

    def get_errors(self) -> List[str]:
        return self._errors.copy()

    def set_logger(self, logger_instance: Optional[SessionLogger]) -> None:
        """Replace the session logger; None stops logging."""
        self._logger = logger_instance

    async def select_path(self, path: str) -> Screen:
        """Hash a path as the primary report.

        Allowed on landing, error and dual-select.

        Raises:
            InvalidTransitionError: On any other screen, or while a hashing
                call is already in flight.
        """
        self._ensure_idle()
        if self.kind not in _PRIMARY_SELECTABLE:
            raise InvalidTransitionError(f"Cannot select a path on the {self.kind.value} screen")
        return await self._run_engine(Processing(target=ReportTarget.PRIMARY, path=path))

    async def select_comparison_path(self, path: str) -> Screen:
        """Hash a path as the comparison report (dual-select only)."""
        self._ensure_idle()
        if not isinstance(self._state, DualSelect):
            raise InvalidTransitionError(
                f"Cannot select a comparison path on the {self.kind.value} screen"
            )
        processing = Processing(
            target=ReportTarget.COMPARISON,
            path=path,
            primary=self._state.primary,
        )
        return await self._run_engine(processing)

    def clear_primary(self) -> Screen:
        if not isinstance(self._state, (PrimaryReady, ComparisonAttached)):
            raise InvalidTransitionError(f"No primary report to clear on the {self.kind.value} screen")
        return self._set_state(Landing())

    def clear_comparison(self) -> Screen:
        if not isinstance(self._state, ComparisonAttached):
            raise InvalidTransitionError(
                f"No comparison report to clear on the {self.kind.value} screen"
            )
        return self._set_state(DualSelect(primary=self._state.primary))

    def compare(self) -> Optional[ComparisonResult]:
        """Compare the two held reports.

        Returns:
            The result, or None when both reports are not held (no-op).
        """
        state = self._state
        if not isinstance(state, ComparisonAttached):
            return None

        result = compare_reports(state.primary, state.comparison)
        self.comparisons_run += 1
        self._set_state(
            CompareResult(primary=state.primary, comparison=state.comparison, result=result)
        )
        self._progress.reset(replace(self._progress.snapshot, status="Ready"))
        if self._logger is not None:
            self._logger.log_comparison(state.primary, state.comparison, result)
        return result

    def navigate(self, target: WorkflowState) -> Screen:
        """Move to the about, landing or dual-select screen.

        Raises:
            InvalidTransitionError: If the target is not reachable from the
                current screen.
        """
        current = self._state
        if target is WorkflowState.ABOUT:
            return self._set_state(About())

        if target is WorkflowState.LANDING and current.kind in _LANDING_REACHABLE_FROM:
            return self._set_state(Landing())

        if target is WorkflowState.DUAL_SELECT and isinstance(current, (PrimaryReady, CompareResult)):
            return self._set_state(DualSelect(primary=current.primary))

        raise InvalidTransitionError(
            f"Cannot navigate from {current.kind.value} to {target.value}"
        )

    def _ensure_idle(self) -> None:
        if self._busy:
            raise InvalidTransitionError("A hashing call is already in progress")

    async def _run_engine(self, processing: Processing) -> Screen:
        self._busy = True
        self._progress.reset(ProgressSnapshot.listing())
        self._set_state(processing)
        if self._logger is not None:
            self._logger.log_hash_started(processing.path, processing.target)

        try:
            report = await self._engine.compute_hash(processing.path, self.algorithm)
        except Exception as e:
            error_msg = f"Hashing failed for {processing.path}: {e}"
            self._errors.append(error_msg)
            self.failures += 1
            if self._logger is not None:
                self._logger.log_hash_failed(processing.path, str(e))
            self._progress.reset(ProgressSnapshot.failed())
            return self._set_state(Failed())
        finally:
            self._busy = False

        self.reports_generated += 1
        if self._logger is not None:
            self._logger.log_hash_completed(report, processing.target)

        if processing.target is ReportTarget.COMPARISON and processing.primary is not None:
            return self._set_state(
                ComparisonAttached(primary=processing.primary, comparison=report)
            )
        return self._set_state(PrimaryReady(primary=report))

    def _set_state(self, state: Screen) -> Screen:
        self._state = state
        if self._on_state_change is not None:
            self._on_state_change(state)
        return state
