"""Named in-process event channels.

An EventBus stands in for a native event channel: the hashing engine adapter
emits ``hash-progress`` on it and drop gestures arrive on it as ``file-drop``
and ``file-drop-cancelled``. Registration is asynchronous, so a subscriber may
be torn down while its subscription is still in flight.

Example:
    >>> bus = EventBus("main")
    >>> unlisten = await bus.listen(HASH_PROGRESS, handler)
    >>> bus.emit(HASH_PROGRESS, {"status": "Computing hash...", "processed": 1, "total": 4})
    >>> unlisten()
"""

import asyncio
from typing import Any, Callable, Dict, List

HASH_PROGRESS = "hash-progress"
FILE_DROP_HOVER = "file-drop-hover"
FILE_DROP = "file-drop"
FILE_DROP_CANCELLED = "file-drop-cancelled"

Handler = Callable[[Any], None]
Unlisten = Callable[[], None]


class EventBus:
    """A named channel delivering payloads to registered handlers.

    Attributes:
        name: Channel name, e.g. "main" for a window channel or "global".
    """

    def __init__(self, name: str = "global") -> None:
        self.name = name
        self._handlers: Dict[str, List[Handler]] = {}

    async def listen(self, event: str, handler: Handler) -> Unlisten:
        """Register a handler for an event.

        Yields to the event loop once before registering, like a native
        channel does, and returns a callable that removes the handler.
        Calling it more than once has no further effect.
        """
        await asyncio.sleep(0)
        self._handlers.setdefault(event, []).append(handler)

        removed = False

        def unlisten() -> None:
            nonlocal removed
            if removed:
                return
            removed = True
            handlers = self._handlers.get(event, [])
            if handler in handlers:
                handlers.remove(handler)

        return unlisten

    def emit(self, event: str, payload: Any = None) -> int:
        """Deliver a payload to every handler registered for an event.

        Returns:
            Number of handlers the payload was delivered to.
        """
        handlers = list(self._handlers.get(event, []))
        for handler in handlers:
            handler(payload)
        return len(handlers)

    def listener_count(self, event: str) -> int:
        return len(self._handlers.get(event, []))
