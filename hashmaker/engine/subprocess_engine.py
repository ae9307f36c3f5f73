"""Hashing engine adapter for an external engine executable.

The executable is invoked as ``<command> --algorithm <alg> <path>`` and writes
JSON lines to stdout:

    {"event": "hash-progress", "payload": {"status": "...", "processed": 3, "total": 10}}
    {"event": "report", "payload": {"hash": "...", "timeTaken": "00:00:01", ...}}

Progress lines are re-emitted on the progress channel as they arrive. Any
other output is ignored. The last report line is the result.
"""

import asyncio
import json
from typing import List, Optional, Sequence

from hashmaker.events import HASH_PROGRESS, EventBus
from hashmaker.models import HashAlgorithm, HashReport

from .base import HashEngineError, HashingEngine

PROGRESS_EVENT = HASH_PROGRESS
REPORT_EVENT = "report"

# Report lines carry every per-entry hash and can be far longer than the
# default 64 KiB stream line limit.
STREAM_LIMIT = 64 * 1024 * 1024


class SubprocessHashingEngine(HashingEngine):
    """Runs an engine executable and collects its report.

    Args:
        command: Executable and leading arguments, e.g. ``["hash-engine"]``.
        progress_channel: Channel that receives ``hash-progress`` payloads.
    """

    def __init__(self, command: Sequence[str], progress_channel: Optional[EventBus] = None) -> None:
        if not command:
            raise ValueError("Engine command must not be empty")
        self.command: List[str] = list(command)
        self._progress_channel = progress_channel

    async def compute_hash(self, path: str, algorithm: HashAlgorithm) -> HashReport:
        args = [*self.command, "--algorithm", algorithm.value, path]
        try:
            process = await asyncio.create_subprocess_exec(
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                limit=STREAM_LIMIT,
            )
        except OSError as e:
            raise HashEngineError(f"Cannot start hashing engine {self.command[0]!r}: {e}") from e

        stderr_task = asyncio.ensure_future(process.stderr.read())
        try:
            try:
                report_payload = await self._read_messages(process.stdout)
            except (ValueError, asyncio.LimitOverrunError) as e:
                raise HashEngineError(f"Hashing engine output could not be read for {path}: {e}") from e
            return_code = await process.wait()
            stderr_text = (await stderr_task).decode("utf-8", errors="replace").strip()
        finally:
            if process.returncode is None:
                process.kill()
                await process.wait()
            if not stderr_task.done():
                stderr_task.cancel()

        if return_code != 0:
            detail = stderr_text or f"exit code {return_code}"
            raise HashEngineError(f"Hashing engine failed for {path}: {detail}")

        if report_payload is None:
            raise HashEngineError(f"Hashing engine returned no report for {path}")

        try:
            return HashReport.from_dict(report_payload)
        except ValueError as e:
            raise HashEngineError(f"Hashing engine returned a malformed report: {e}") from e

    async def _read_messages(self, stdout: asyncio.StreamReader) -> Optional[dict]:
        """Relay progress lines until EOF and return the last report payload."""
        report_payload = None
        while True:
            raw_line = await stdout.readline()
            if not raw_line:
                return report_payload
            message = self._parse_line(raw_line)
            if message is None:
                continue
            event = message.get("event")
            if event == PROGRESS_EVENT:
                if self._progress_channel is not None:
                    self._progress_channel.emit(HASH_PROGRESS, message.get("payload"))
            elif event == REPORT_EVENT:
                report_payload = message.get("payload")

    def _parse_line(self, raw_line: bytes) -> Optional[dict]:
        text = raw_line.decode("utf-8", errors="replace").strip()
        if not text.startswith("{"):
            return None
        try:
            message = json.loads(text)
        except json.JSONDecodeError:
            return None
        return message if isinstance(message, dict) else None
