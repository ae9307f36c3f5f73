"""Progress stream consumer.

Turns the engine's raw ``{status, processed, total}`` events into a
ProgressSnapshot with a percentage. Only the latest snapshot is kept.
"""

import math
import sys
from typing import Any, Callable, List, Mapping, Optional

from hashmaker.events import HASH_PROGRESS, CancellationToken, EventBus
from hashmaker.models import ProgressSnapshot


def compute_percent(processed: int, total: int) -> int:
    """Percentage of processed entries, rounded half up and clamped to [0, 100]."""
    if total <= 0:
        return 0
    percent = int(math.floor(processed * 100 / total + 0.5))
    return max(0, min(100, percent))


def _as_count(value: Any) -> int:
    try:
        return max(0, int(value))
    except (TypeError, ValueError):
        return 0


class ProgressStreamConsumer:
    """Subscribes to ``hash-progress`` and keeps the latest snapshot.

    The window channel takes precedence: when one is given the global channel
    is never subscribed.

    Args:
        global_channel: Process-wide channel.
        window_channel: Optional channel scoped to the current window.
        on_update: Called with every new snapshot, including resets.
    """

    def __init__(
        self,
        global_channel: Optional[EventBus] = None,
        window_channel: Optional[EventBus] = None,
        on_update: Optional[Callable[[ProgressSnapshot], None]] = None,
    ) -> None:
        self._global_channel = global_channel
        self._window_channel = window_channel
        self._on_update = on_update
        self._snapshot = ProgressSnapshot.ready()
        self._unlisten: Optional[Callable[[], None]] = None
        self._token: Optional[CancellationToken] = None
        self._errors: List[str] = []

    @property
    def snapshot(self) -> ProgressSnapshot:
        return self._snapshot

    @property
    def is_subscribed(self) -> bool:
        return self._unlisten is not None

    def set_update_callback(self, on_update: Optional[Callable[[ProgressSnapshot], None]]) -> None:
        self._on_update = on_update

    def reset(self, snapshot: ProgressSnapshot) -> None:
        """Replace the current snapshot, e.g. before a new hashing call."""
        self._publish(snapshot)

    def handle_payload(self, payload: Mapping[str, Any]) -> ProgressSnapshot:
        """Derive and store a snapshot from one raw progress payload."""
        payload = payload or {}
        processed = _as_count(payload.get("processed", 0))
        total = _as_count(payload.get("total", 0))
        snapshot = ProgressSnapshot(
            status=str(payload.get("status", "")),
            processed=processed,
            total=total,
            percent=compute_percent(processed, total),
        )
        self._publish(snapshot)
        return snapshot

    async def mount(self, token: CancellationToken) -> bool:
        """Subscribe to the progress channel.

        Args:
            token: Cancelled by teardown; a subscription that completes after
                cancellation is released immediately.

        Returns:
            True if the subscription is live.
        """
        self._token = token
        channel = self._window_channel or self._global_channel
        if channel is None:
            self._record_error("No progress channel available; progress events unavailable")
            return False

        try:
            unlisten = await channel.listen(HASH_PROGRESS, self.handle_payload)
        except Exception as e:
            self._record_error(f"Failed to register progress listener: {e}")
            return False

        if token.cancelled:
            unlisten()
            return False

        self._unlisten = unlisten
        return True

    def unmount(self) -> None:
        """Cancel the mount token and unsubscribe, once."""
        if self._token is not None:
            self._token.cancel()
        unlisten, self._unlisten = self._unlisten, None
        if unlisten is not None:
            unlisten()

    def get_errors(self) -> List[str]:
        return self._errors.copy()

    def _publish(self, snapshot: ProgressSnapshot) -> None:
        self._snapshot = snapshot
        if self._on_update is not None:
            self._on_update(snapshot)

    def _record_error(self, message: str) -> None:
        self._errors.append(message)
        print(f"Warning: {message}", file=sys.stderr)
