"""Hashing engine package for HashMaker.

The hashing itself is done by an external engine. This package defines its
contract and an adapter for engine executables.

- HashingEngine: Abstract engine contract.
- HashEngineError: Raised when the engine rejects a request.
- SubprocessHashingEngine: Runs an engine executable speaking JSON lines.
"""

from .base import HashEngineError, HashingEngine
from .subprocess_engine import SubprocessHashingEngine

__all__ = ["HashingEngine", "HashEngineError", "SubprocessHashingEngine"]
