"""Drop target state machine.

Two event sources report the same physical drop gesture:

- pointer-level events on one visual region (enter, leave, over, drop), which
  may or may not expose a filesystem path for the dropped item, and
- OS-level whole-window events (``file-drop``, ``file-drop-cancelled``) that
  carry the paths but do not know which region the user aimed at.

``transition`` folds both into one state so that each gesture produces at most
one selected path. ``DropTargetController`` owns one state per region and
wires it to an event channel.

Example:
    >>> target = DropTargetController(on_path_selected=print)
    >>> target.drag_enter()
    >>> target.dispatch(OsFileDrop(paths=("/data/photos",)))
    /data/photos
"""

import sys
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple, Union

from hashmaker.events import (
    FILE_DROP,
    FILE_DROP_CANCELLED,
    CancellationToken,
    EventBus,
)


class DropPhase(Enum):
    IDLE = "idle"
    HOVERING = "hovering"             # Pointer is over the region (isOver, isDragging)
    ARMED = "armed"                   # Pointer drop seen without a path; awaiting the OS event


@dataclass(frozen=True)
class DropState:
    phase: DropPhase = DropPhase.IDLE
    depth: int = 0                    # Nested enter/leave counter


@dataclass(frozen=True)
class DragEnter:
    pass


@dataclass(frozen=True)
class DragLeave:
    pass


@dataclass(frozen=True)
class DragOver:
    pass


@dataclass(frozen=True)
class DomDrop:
    path: Optional[str] = None        # Resolvable filesystem path of the first item, if any


@dataclass(frozen=True)
class OsFileDropHover:
    paths: Tuple[str, ...] = ()


@dataclass(frozen=True)
class OsFileDrop:
    paths: Tuple[str, ...] = ()


@dataclass(frozen=True)
class OsFileDropCancelled:
    pass


DropEvent = Union[
    DragEnter,
    DragLeave,
    DragOver,
    DomDrop,
    OsFileDropHover,
    OsFileDrop,
    OsFileDropCancelled,
]

IDLE_STATE = DropState()


def _accepts_os_event(state: DropState) -> bool:
    return state.phase is not DropPhase.IDLE


def transition(state: DropState, event: DropEvent) -> Tuple[DropState, Optional[str]]:
    """Apply one drop event.

    Args:
        state: Current state of one drop target.
        event: Pointer-level or OS-level event.

    Returns:
        Tuple of (new state, selected path or None).
    """
    if isinstance(event, DragEnter):
        return DropState(phase=DropPhase.HOVERING, depth=state.depth + 1), None

    if isinstance(event, DragLeave):
        depth = max(0, state.depth - 1)
        if depth == 0:
            return IDLE_STATE, None
        return replace(state, depth=depth), None

    if isinstance(event, OsFileDropCancelled):
        if not _accepts_os_event(state):
            return state, None
        return IDLE_STATE, None

    if isinstance(event, OsFileDrop):
        if not _accepts_os_event(state):
            return state, None
        if not event.paths or not event.paths[0]:
            return IDLE_STATE, None
        return IDLE_STATE, event.paths[0]

    if isinstance(event, DomDrop):
        if event.path:
            return IDLE_STATE, event.path
        return DropState(phase=DropPhase.ARMED, depth=0), None

    # DragOver and hover carry nothing to act on.
    return state, None


class DropTargetController:
    """One drop region (primary or comparison).

    Args:
        on_path_selected: Called with the selected path, at most once per
            drop gesture.
        name: Label used in warnings.
    """

    def __init__(self, on_path_selected: Callable[[str], None], name: str = "drop-target") -> None:
        self.name = name
        self._on_path_selected = on_path_selected
        self._state = IDLE_STATE
        self._unlisteners: List[Callable[[], None]] = []
        self._token: Optional[CancellationToken] = None
        self._errors: List[str] = []

    @property
    def state(self) -> DropState:
        return self._state

    @property
    def is_dragging(self) -> bool:
        return self._state.phase is DropPhase.HOVERING

    def dispatch(self, event: DropEvent) -> Optional[str]:
        """Feed one event through the state machine and notify on selection."""
        self._state, path = transition(self._state, event)
        if path is not None:
            self._on_path_selected(path)
        return path

    def drag_enter(self) -> None:
        self.dispatch(DragEnter())

    def drag_leave(self) -> None:
        self.dispatch(DragLeave())

    def drag_over(self) -> None:
        self.dispatch(DragOver())

    def dom_drop(self, path: Optional[str] = None) -> Optional[str]:
        return self.dispatch(DomDrop(path=path))

    def reset(self) -> None:
        self._state = IDLE_STATE

    async def mount(self, channel: EventBus, token: CancellationToken) -> bool:
        """Subscribe to the OS-level drop events of a window channel.

        Returns:
            True if both subscriptions are live, False if the token was
            cancelled while subscribing or a subscription failed.
        """
        self._token = token
        try:
            unlisten_drop = await channel.listen(FILE_DROP, self._on_file_drop)
            self._unlisteners.append(unlisten_drop)
            unlisten_cancel = await channel.listen(FILE_DROP_CANCELLED, self._on_file_drop_cancelled)
            self._unlisteners.append(unlisten_cancel)
        except Exception as e:
            error_msg = f"Failed to register drop listener for {self.name}: {e}"
            self._errors.append(error_msg)
            print(f"Warning: {error_msg}", file=sys.stderr)
            self._release()
            return False

        if token.cancelled:
            self._release()
            return False
        return True

    def unmount(self) -> None:
        """Tear down the subscriptions and forget any gesture in progress."""
        if self._token is not None:
            self._token.cancel()
        self._release()
        self.reset()

    def get_errors(self) -> List[str]:
        return self._errors.copy()

    def _release(self) -> None:
        unlisteners, self._unlisteners = self._unlisteners, []
        for unlisten in unlisteners:
            unlisten()

    def _on_file_drop(self, payload: Optional[Sequence[str]]) -> None:
        paths = tuple(payload) if payload else ()
        self.dispatch(OsFileDrop(paths=paths))

    def _on_file_drop_cancelled(self, payload: object = None) -> None:
        self.dispatch(OsFileDropCancelled())
