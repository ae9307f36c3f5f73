"""Terminal UI package for HashMaker."""

from .hash_tui import SCREEN_ACTIONS, HashTUI

__all__ = ["HashTUI", "SCREEN_ACTIONS"]
