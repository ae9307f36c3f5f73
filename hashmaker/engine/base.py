"""Contract of the external hashing engine."""

from abc import ABC, abstractmethod

from hashmaker.models import HashAlgorithm, HashReport


class HashEngineError(Exception):
    """The engine rejected a hashing request."""


class HashingEngine(ABC):
    """Computes a HashReport for a folder or file.

    Progress is reported out of band on a ``hash-progress`` channel; the
    report itself is only returned once complete.
    """

    @abstractmethod
    async def compute_hash(self, path: str, algorithm: HashAlgorithm) -> HashReport:
        """Hash the entry at path.

        Raises:
            HashEngineError: If the engine cannot produce a report.
        """
