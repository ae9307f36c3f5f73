"""Event channel package for HashMaker.

- EventBus: Named in-process channel with asynchronous registration.
- CancellationToken: Explicit teardown marker for subscription routines.
"""

from .cancellation import CancellationToken
from .event_bus import (
    FILE_DROP,
    FILE_DROP_CANCELLED,
    FILE_DROP_HOVER,
    HASH_PROGRESS,
    EventBus,
)

__all__ = [
    "CancellationToken",
    "EventBus",
    "HASH_PROGRESS",
    "FILE_DROP_HOVER",
    "FILE_DROP",
    "FILE_DROP_CANCELLED",
]
