"""Input ingestion package for HashMaker.

- DropTargetController: Unifies pointer-level and OS-level drop events into
  one selected path per gesture.
- ProgressStreamConsumer: Derives progress snapshots from engine events.
"""

from .drop_target import (
    DomDrop,
    DragEnter,
    DragLeave,
    DragOver,
    DropPhase,
    DropState,
    DropTargetController,
    OsFileDrop,
    OsFileDropCancelled,
    OsFileDropHover,
    transition,
)
from .progress_stream import ProgressStreamConsumer, compute_percent

__all__ = [
    "DropTargetController",
    "DropPhase",
    "DropState",
    "DragEnter",
    "DragLeave",
    "DragOver",
    "DomDrop",
    "OsFileDropHover",
    "OsFileDrop",
    "OsFileDropCancelled",
    "transition",
    "ProgressStreamConsumer",
    "compute_percent",
]
