"""Pytest fixtures for HashMaker tests."""

import asyncio
import io
import json
import tempfile
from pathlib import Path
from typing import Any, Dict, Generator, List, Optional, Sequence, Union

import pytest
from rich.console import Console

from hashmaker.engine import HashEngineError, HashingEngine
from hashmaker.events import HASH_PROGRESS, EventBus
from hashmaker.models import (
    FlatHashRecord,
    HashAlgorithm,
    HashReport,
    ReportSettings,
)
from hashmaker.ui import HashTUI


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests of a single component")
    config.addinivalue_line("markers", "integration: tests wiring several components together")


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for isolated test environments.

    Yields:
        Path to the temporary directory.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_records() -> List[FlatHashRecord]:
    """Flat records as the engine emits them for a small folder.

    Hashed folder:
        project/
        ├── notes/
        │   └── todo.txt
        ├── empty/
        └── readme.md

    Sub-folders are emitted before the opening marker of their parent, and
    an empty folder's summary carries no hash.

    Returns:
        List of FlatHashRecord in emission order.
    """
    return [
        FlatHashRecord("\\project\\empty\\", ""),
        FlatHashRecord("\\project\\empty\\", ""),
        FlatHashRecord("\\project\\notes\\", ""),
        FlatHashRecord("\\project\\notes\\todo.txt", "A1B2C3"),
        FlatHashRecord("\\project\\notes\\", "D4E5F6"),
        FlatHashRecord("\\project\\", ""),
        FlatHashRecord("\\project\\readme.md", "0A0B0C"),
        FlatHashRecord("\\project\\", "FFEE11"),
    ]


@pytest.fixture
def sample_report(sample_records: List[FlatHashRecord]) -> HashReport:
    """Create a HashReport for the sample folder."""
    return HashReport(
        hash="9F86D081884C7D65",
        time_taken="00:00:02",
        folder_count=3,
        file_count=2,
        path="/data/project",
        file_hashes=tuple(sample_records),
    )


@pytest.fixture
def other_report() -> HashReport:
    """A second report whose final hash differs from sample_report's."""
    return HashReport(
        hash="2C26B46B68FFC68F",
        time_taken="00:00:01",
        folder_count=1,
        file_count=1,
        path="/data/project-copy",
        file_hashes=(
            FlatHashRecord("\\project-copy\\", ""),
            FlatHashRecord("\\project-copy\\readme.md", "0A0B0D"),
            FlatHashRecord("\\project-copy\\", "ABCDEF"),
        ),
    )


@pytest.fixture
def report_settings() -> ReportSettings:
    """ReportSettings with every document field filled in."""
    return ReportSettings(
        algorithm=HashAlgorithm.SHA256,
        test_report_no="TR-2026-001",
        product_name="Acme Gateway 2.1",
        applicant_co="Acme Corp.",
        copyright_co="Acme Holdings",
        test_date="2026-10-19",
        lab_name="Integrity Lab",
        tester_name="J. Park",
        doc_form_id="F-12",
    )


@pytest.fixture
def report_json(temp_dir: Path, sample_report: HashReport) -> Path:
    """Write sample_report to a JSON file in the engine's wire form."""
    path = temp_dir / "report.json"
    path.write_text(json.dumps(sample_report.to_dict()), encoding="utf-8")
    return path


class FakeEngine(HashingEngine):
    """In-process HashingEngine returning queued results.

    Each queued result is either a HashReport (returned) or an Exception
    (raised). Optional progress payloads are emitted on the channel before
    the result is produced.
    """

    def __init__(
        self,
        results: Sequence[Union[HashReport, Exception]] = (),
        channel: Optional[EventBus] = None,
        progress_events: Sequence[Dict[str, Any]] = (),
    ) -> None:
        self.results = list(results)
        self.channel = channel
        self.progress_events = list(progress_events)
        self.calls: List[tuple] = []

    async def compute_hash(self, path: str, algorithm: HashAlgorithm) -> HashReport:
        self.calls.append((path, algorithm))
        for payload in self.progress_events:
            if self.channel is not None:
                self.channel.emit(HASH_PROGRESS, payload)
            await asyncio.sleep(0)
        if not self.results:
            raise HashEngineError(f"No result queued for {path}")
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def fake_engine_factory():
    """Return the FakeEngine class for building engines inside tests."""
    return FakeEngine


@pytest.fixture
def tui_with_output() -> tuple[HashTUI, io.StringIO]:
    """Create a HashTUI instance with Console output captured to StringIO.

    Returns:
        Tuple of (HashTUI instance, StringIO for reading output).
    """
    output = io.StringIO()
    console = Console(file=output, force_terminal=False, width=120)
    return HashTUI(console=console), output
