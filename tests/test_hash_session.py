"""Tests for HashSession driving a scripted interactive session."""

import asyncio
import io
import zipfile
from pathlib import Path
from typing import Iterable, List

from rich.console import Console

from hashmaker.engine import HashEngineError
from hashmaker.events import FILE_DROP, FILE_DROP_CANCELLED, HASH_PROGRESS, EventBus
from hashmaker.models import (
    CompareResult,
    ComparisonResult,
    HashReport,
    PrimaryReady,
    ReportSettings,
    SessionSummary,
    WorkflowState,
)
from hashmaker.orchestration import HashSession, SessionLogger
from hashmaker.ui import HashTUI


class ScriptedTUI(HashTUI):
    """HashTUI answering prompts from fixed scripts."""

    def __init__(self, actions: Iterable, paths: Iterable[str] = ()) -> None:
        self.output = io.StringIO()
        super().__init__(console=Console(file=self.output, force_terminal=False, width=120))
        self._actions = iter(actions)
        self._paths = iter(paths)
        self.prompted_kinds: List[WorkflowState] = []

    def prompt_action(self, kind: WorkflowState) -> str:
        self.prompted_kinds.append(kind)
        answer = next(self._actions)
        if isinstance(answer, BaseException):
            raise answer
        return answer

    def prompt_path(self, label: str) -> str:
        return next(self._paths)


def make_session(
    fake_engine_factory,
    results: List,
    actions: Iterable,
    paths: Iterable[str] = (),
    **kwargs,
) -> HashSession:
    window = EventBus("main")
    engine = fake_engine_factory(results=results, channel=window)
    return HashSession(
        engine=engine,
        settings=kwargs.pop("settings", ReportSettings(test_report_no="TR-1", test_date="2026-10-19")),
        window_channel=window,
        tui=ScriptedTUI(actions, paths),
        **kwargs,
    )


class TestHashSessionFlow:
    """Test complete scripted sessions."""

    def test_quit_immediately(self, fake_engine_factory):
        session = make_session(fake_engine_factory, [], ["q"])
        summary = session.run()

        assert isinstance(summary, SessionSummary)
        assert summary.reports_generated == 0
        assert not summary.interrupted
        assert session._tui.prompted_kinds == [WorkflowState.LANDING]

    def test_generate_and_export(self, fake_engine_factory, temp_dir: Path, sample_report: HashReport):
        session = make_session(
            fake_engine_factory,
            [sample_report],
            ["s", "d", "q"],
            ["/data/project"],
            output_dir=temp_dir,
        )
        summary = session.run()

        assert summary.reports_generated == 1
        assert summary.archives_exported == 1
        assert isinstance(session.controller.state, PrimaryReady)
        archives = list(temp_dir.glob("hash-results-*.zip"))
        assert len(archives) == 1
        with zipfile.ZipFile(archives[0]) as archive:
            assert "TR-1_HashList.html" in archive.namelist()

    def test_full_comparison(self, fake_engine_factory, sample_report: HashReport, other_report: HashReport):
        session = make_session(
            fake_engine_factory,
            [sample_report, other_report],
            ["s", "c", "c", "r", "q"],
            ["/data/project", "/data/project-copy"],
        )
        summary = session.run()

        assert summary.reports_generated == 2
        assert summary.comparisons_run == 1
        state = session.controller.state
        assert isinstance(state, CompareResult)
        assert state.result is ComparisonResult.MISMATCH
        assert session._tui.prompted_kinds == [
            WorkflowState.LANDING,
            WorkflowState.PRIMARY_READY,
            WorkflowState.DUAL_SELECT,
            WorkflowState.COMPARISON_ATTACHED,
            WorkflowState.COMPARE_RESULT,
        ]
        assert "The hashes do not match." in session._tui.output.getvalue()

    def test_empty_path_cancels_drop(self, fake_engine_factory, sample_report: HashReport):
        session = make_session(fake_engine_factory, [sample_report], ["s", "q"], [""])
        summary = session.run()

        assert summary.reports_generated == 0
        assert session.controller.kind is WorkflowState.LANDING
        assert not session.primary_target.is_dragging

    def test_engine_failure(self, fake_engine_factory):
        session = make_session(
            fake_engine_factory, [HashEngineError("no such folder")], ["s", "q"], ["/missing"]
        )
        summary = session.run()

        assert summary.failures == 1
        assert any("no such folder" in e for e in summary.errors)
        assert session._tui.prompted_kinds[-1] is WorkflowState.ERROR

    def test_export_outside_primary_ready_is_noop(self, fake_engine_factory, temp_dir: Path):
        session = make_session(fake_engine_factory, [], ["q"], output_dir=temp_dir)
        assert session.export_current() is None
        assert list(temp_dir.iterdir()) == []

    def test_export_failure_recorded(self, fake_engine_factory, temp_dir: Path, sample_report: HashReport, capsys):
        session = make_session(
            fake_engine_factory,
            [sample_report],
            ["s", "d", "q"],
            ["/data/project"],
            output_dir=temp_dir / "missing",
        )
        summary = session.run()

        assert summary.archives_exported == 0
        assert any("Could not export archive" in e for e in summary.errors)
        assert "Warning: Could not export archive" in capsys.readouterr().err

    def test_about_screen_shows_session_version(self, fake_engine_factory):
        session = make_session(fake_engine_factory, [], ["a", "q"], version="3.0.0")
        session.run()

        assert session.controller.kind is WorkflowState.ABOUT
        assert "About HashMaker v3.0.0" in session._tui.output.getvalue()

    def test_interrupt(self, fake_engine_factory):
        session = make_session(fake_engine_factory, [], [KeyboardInterrupt()])
        summary = session.run()
        assert summary.interrupted

    def test_listeners_released_after_run(self, fake_engine_factory):
        session = make_session(fake_engine_factory, [], ["q"])
        session.run()

        channel = session.window_channel
        assert channel.listener_count(FILE_DROP) == 0
        assert channel.listener_count(FILE_DROP_CANCELLED) == 0
        assert channel.listener_count(HASH_PROGRESS) == 0

    def test_unmount_is_idempotent(self, fake_engine_factory):
        session = make_session(fake_engine_factory, [], [])
        asyncio.run(session.mount())
        assert session.window_channel.listener_count(FILE_DROP) == 2
        session.unmount()
        session.unmount()
        assert session.window_channel.listener_count(FILE_DROP) == 0


class TestHashSessionLogging:
    """Test session log output."""

    def test_log_written(self, fake_engine_factory, temp_dir: Path, sample_report: HashReport):
        log_path = temp_dir / "session.log"
        logger = SessionLogger(log_file_path=log_path)
        session = make_session(
            fake_engine_factory,
            [sample_report],
            ["s", "q"],
            ["/data/project"],
            logger_instance=logger,
        )
        session.run()

        content = log_path.read_text()
        assert "HashMaker - Session Log" in content
        assert "Run 1 (primary): hashing /data/project" in content
        assert "Reports generated: 1" in content

    def test_log_open_failure_continues_without_logging(
        self, fake_engine_factory, temp_dir: Path, sample_report: HashReport, capsys
    ):
        log_path = temp_dir / "session.log"
        logger = SessionLogger(log_file_path=log_path)
        # A directory in place of the log file makes open() fail.
        log_path.mkdir()
        session = make_session(
            fake_engine_factory,
            [sample_report],
            ["s", "q"],
            ["/data/project"],
            logger_instance=logger,
        )
        summary = session.run()

        assert summary.reports_generated == 1
        assert "Warning: Failed to open log file" in session._tui.output.getvalue()
        assert "closed log file" not in capsys.readouterr().err
