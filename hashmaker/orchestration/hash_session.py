"""HashSession coordinating an interactive hashing session.

This module provides the HashSession class that wires the WorkflowController,
the ProgressStreamConsumer, the primary and comparison DropTargetControllers,
HashTUI and SessionLogger into one interactive loop.

A path prompt stands for a drop gesture on the target it belongs to: the
prompt enters the target's region, and the answer arrives as an OS-level
``file-drop`` event on the window channel (or ``file-drop-cancelled`` when
empty). The drop target turns that into at most one selected path.

Example:
    from hashmaker.orchestration import HashSession

    window = EventBus("main")
    engine = SubprocessHashingEngine(["hash-engine"], progress_channel=window)
    session = HashSession(engine=engine, settings=settings, window_channel=window)
    summary = session.run()
"""

import asyncio
import sys
import time
from pathlib import Path
from typing import List, Optional, Tuple

from hashmaker.engine import HashingEngine
from hashmaker.events import (
    FILE_DROP,
    FILE_DROP_CANCELLED,
    CancellationToken,
    EventBus,
)
from hashmaker.ingestion import DropTargetController, ProgressStreamConsumer
from hashmaker.models import (
    PrimaryReady,
    ReportSettings,
    ReportTarget,
    SessionSummary,
    WorkflowState,
)
from hashmaker.orchestration.session_logger import SessionLogger
from hashmaker.orchestration.workflow_controller import (
    InvalidTransitionError,
    WorkflowController,
)
from hashmaker.reporting import export_archive
from hashmaker.ui import HashTUI


class HashSession:
    """Runs the interactive select, compute, report and compare loop.

    Args:
        engine: External hashing engine.
        settings: Report settings (algorithm and document fields).
        window_channel: Window-scoped channel carrying progress and drop
            events. A private channel is created when None.
        global_channel: Process-wide channel, used for progress only when no
            window channel exists.
        tui: Optional HashTUI; a default one is created when None.
        logger_instance: Optional SessionLogger, entered for the session.
        output_dir: Directory receiving exported archives.
        verbose: Whether to display additional details.
    """

    def __init__(
        self,
        engine: HashingEngine,
        settings: ReportSettings,
        window_channel: Optional[EventBus] = None,
        global_channel: Optional[EventBus] = None,
        tui: Optional[HashTUI] = None,
        logger_instance: Optional[SessionLogger] = None,
        output_dir: Optional[Path] = None,
        verbose: bool = False,
        version: str = "",
    ) -> None:
        self.settings = settings
        self.output_dir = Path(output_dir) if output_dir is not None else Path.cwd()
        self.verbose = verbose
        self.version = version
        self.window_channel = window_channel if window_channel is not None else EventBus("main")
        self._tui = tui or HashTUI()
        self._logger = logger_instance

        self.progress = ProgressStreamConsumer(
            global_channel=global_channel,
            window_channel=self.window_channel,
        )
        self.controller = WorkflowController(
            engine=engine,
            progress=self.progress,
            algorithm=settings.algorithm,
            logger_instance=logger_instance,
        )

        self._selected: List[Tuple[ReportTarget, str]] = []
        self.primary_target = DropTargetController(
            on_path_selected=lambda path: self._selected.append((ReportTarget.PRIMARY, path)),
            name="primary",
        )
        self.comparison_target = DropTargetController(
            on_path_selected=lambda path: self._selected.append((ReportTarget.COMPARISON, path)),
            name="comparison",
        )

        self._tokens: List[CancellationToken] = []
        self._mounted = False
        self._archives_exported = 0
        self._errors: List[str] = []

    def run(self) -> SessionSummary:
        """Run the session until the user quits.

        Returns:
            SessionSummary with the session statistics.
        """
        return asyncio.run(self.run_async())

    async def run_async(self) -> SessionSummary:
        start_time = time.time()
        interrupted = False

        if self._logger is not None:
            try:
                self._logger.open()
            except OSError as e:
                self._tui.console.print(
                    f"[yellow]Warning:[/yellow] Failed to open log file: {e}. "
                    "Continuing without logging."
                )
                self._logger = None
                self.controller.set_logger(None)
            else:
                self._logger.log_header()

        await self.mount()
        try:
            self._tui.display_header(self.version)
            while True:
                self._tui.display_screen(self.controller.state, self.controller.progress, self.version)
                action = self._tui.prompt_action(self.controller.kind)
                if action == "q":
                    break
                await self.handle_action(action)
        except (KeyboardInterrupt, EOFError):
            self._tui.console.print("\n[yellow]Session interrupted by user.[/yellow]")
            interrupted = True
        finally:
            self.unmount()

        summary = self._build_summary(time.time() - start_time, interrupted)
        self._tui.display_session_summary(summary)

        if self._logger is not None:
            self._logger.log_summary(summary)
            if self.verbose:
                self._tui.console.print(f"[dim]Log file: {self._logger.get_log_path()}[/dim]")
            self._logger.close()

        return summary

    async def mount(self) -> None:
        """Subscribe the progress consumer and both drop targets."""
        progress_token = CancellationToken()
        primary_token = CancellationToken()
        comparison_token = CancellationToken()
        self._tokens = [progress_token, primary_token, comparison_token]
        self._mounted = True

        await self.progress.mount(progress_token)
        await self.primary_target.mount(self.window_channel, primary_token)
        await self.comparison_target.mount(self.window_channel, comparison_token)

        for component in (self.progress, self.primary_target, self.comparison_target):
            self._errors.extend(component.get_errors())

    def unmount(self) -> None:
        """Tear down every subscription; later calls do nothing."""
        if not self._mounted:
            return
        self._mounted = False
        for token in self._tokens:
            token.cancel()
        self.progress.unmount()
        self.primary_target.unmount()
        self.comparison_target.unmount()

    async def handle_action(self, action: str) -> None:
        """Apply one screen action chosen by the user."""
        kind = self.controller.kind
        try:
            if action in ("s", "p"):
                await self.drop_path(ReportTarget.PRIMARY, "Folder to hash")
            elif action == "c" and kind is WorkflowState.DUAL_SELECT:
                await self.drop_path(ReportTarget.COMPARISON, "Folder to compare")
            elif action == "c":
                self.controller.navigate(WorkflowState.DUAL_SELECT)
            elif action == "g":
                self.controller.navigate(WorkflowState.LANDING)
            elif action == "a":
                self.controller.navigate(WorkflowState.ABOUT)
            elif action == "x":
                self.controller.clear_primary()
            elif action == "y":
                self.controller.clear_comparison()
            elif action == "r":
                self.controller.compare()
            elif action == "d":
                self.export_current()
            elif action == "t":
                report = self.controller.primary_report
                if report is not None:
                    self._tui.display_tree(report)
        except InvalidTransitionError as e:
            self._tui.console.print(f"[yellow]{e}[/yellow]")

    async def drop_path(self, target: ReportTarget, label: str) -> None:
        """Prompt for a path as a drop gesture on one target and hash it."""
        drop_target = (
            self.primary_target if target is ReportTarget.PRIMARY else self.comparison_target
        )
        drop_target.drag_enter()
        answer = self._tui.prompt_path(label)
        if answer:
            self.window_channel.emit(FILE_DROP, [answer])
        else:
            self.window_channel.emit(FILE_DROP_CANCELLED)

        await self.process_selected()

    async def process_selected(self) -> None:
        """Hash every path the drop targets selected, one call at a time."""
        while self._selected:
            target, path = self._selected.pop(0)
            progress, callback = self._tui.create_progress_tracker()
            self.progress.set_update_callback(callback)
            try:
                with progress:
                    if target is ReportTarget.PRIMARY:
                        await self.controller.select_path(path)
                    else:
                        await self.controller.select_comparison_path(path)
            finally:
                self.progress.set_update_callback(None)

            if self.verbose:
                self._tui.display_status(self.controller.progress)

    def export_current(self) -> Optional[Path]:
        """Export the primary report of the primary-ready screen as an archive."""
        state = self.controller.state
        if not isinstance(state, PrimaryReady):
            return None

        try:
            archive_path = export_archive(state.primary, self.settings, self.output_dir)
        except OSError as e:
            error_msg = f"Could not export archive: {e}"
            self._errors.append(error_msg)
            print(f"Warning: {error_msg}", file=sys.stderr)
            return None

        self._archives_exported += 1
        self._tui.console.print(f"[green]Archive written to:[/green] {archive_path}")
        if self._logger is not None:
            self._logger.log_export(archive_path)
        return archive_path

    def _build_summary(self, duration: float, interrupted: bool) -> SessionSummary:
        errors = self._errors.copy()
        errors.extend(self.controller.get_errors())
        return SessionSummary(
            reports_generated=self.controller.reports_generated,
            comparisons_run=self.controller.comparisons_run,
            failures=self.controller.failures,
            archives_exported=self._archives_exported,
            errors=errors,
            duration_seconds=duration,
            interrupted=interrupted,
        )
