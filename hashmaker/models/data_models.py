"""
Core data models for HashMaker.

This module contains the following dataclasses:
- FlatHashRecord: One (path, hash) pair as emitted by the hashing engine
- TreeNode: A node of the folder/file tree rebuilt from flat records
- HashReport: The complete result of one hashing call
- ReportSettings: User-supplied fields printed into the rendered documents
- ProgressSnapshot: Derived view of an in-flight computation
- SessionSummary: Statistics for one interactive session
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Mapping, Tuple

from .hash_algorithm import HashAlgorithm

# The engine emits Windows-style relative paths on every platform.
FOLDER_SEPARATOR = "\\"


@dataclass(frozen=True)
class FlatHashRecord:
    """One filesystem entry in engine emission (pre-order) order."""
    path: str                         # Trailing separator marks a folder boundary
    hash: str                         # Upper-case hex digest, empty for open markers

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FlatHashRecord":
        try:
            return cls(path=str(data["path"]), hash=str(data["hash"]))
        except (KeyError, TypeError) as e:
            raise ValueError(f"Malformed file hash record: {data!r}") from e

    def to_dict(self) -> Dict[str, str]:
        return {"path": self.path, "hash": self.hash}


@dataclass(frozen=True)
class TreeNode:
    """A folder title, folder summary, or file leaf in the rebuilt tree."""
    path: str
    hash: str
    is_summary: bool
    children: Tuple["TreeNode", ...] = ()

    def is_folder_title(self, separator: str = FOLDER_SEPARATOR) -> bool:
        """True for the opening line of a folder (owns the subtree below it)."""
        return self.path.endswith(separator) and not self.is_summary


@dataclass(frozen=True)
class HashReport:
    """Result of one successful hashing call, as returned by the engine."""
    hash: str                         # Final aggregate hash
    time_taken: str                   # HH:MM:SS
    folder_count: int
    file_count: int
    path: str                         # Hashed root path
    file_hashes: Tuple[FlatHashRecord, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "HashReport":
        """Build a report from the engine's camelCase wire form.

        Raises:
            ValueError: If a required key is missing or has the wrong type.
        """
        if not isinstance(data, Mapping):
            raise ValueError(f"Hash report must be an object, got {type(data).__name__}")
        try:
            records = data.get("fileHashes", [])
            return cls(
                hash=str(data["hash"]),
                time_taken=str(data["timeTaken"]),
                folder_count=int(data["folderCount"]),
                file_count=int(data["fileCount"]),
                path=str(data["path"]),
                file_hashes=tuple(FlatHashRecord.from_dict(r) for r in records),
            )
        except KeyError as e:
            raise ValueError(f"Hash report is missing field {e.args[0]!r}") from e
        except TypeError as e:
            raise ValueError(f"Malformed hash report: {e}") from e

    def to_summary_dict(self) -> Dict[str, Any]:
        return {
            "hash": self.hash,
            "timeTaken": self.time_taken,
            "folderCount": self.folder_count,
            "fileCount": self.file_count,
            "path": self.path,
        }

    def to_file_hashes_dict(self) -> Dict[str, List[Dict[str, str]]]:
        return {"fileHashes": [record.to_dict() for record in self.file_hashes]}

    def to_dict(self) -> Dict[str, Any]:
        data = self.to_summary_dict()
        data.update(self.to_file_hashes_dict())
        return data


def _today() -> str:
    return date.today().isoformat()


@dataclass(frozen=True)
class ReportSettings:
    """Settings printed verbatim into the hash list and confirmation documents."""
    algorithm: HashAlgorithm = HashAlgorithm.SHA256
    test_report_no: str = ""
    product_name: str = ""
    applicant_co: str = ""
    copyright_co: str = ""
    test_date: str = field(default_factory=_today)  # YYYY-MM-DD
    lab_name: str = ""
    tester_name: str = ""
    doc_form_id: str = ""


@dataclass(frozen=True)
class ProgressSnapshot:
    """Latest derived progress of an in-flight hashing call."""
    status: str
    processed: int = 0
    total: int = 0
    percent: int = 0                  # Always within [0, 100]

    @classmethod
    def ready(cls) -> "ProgressSnapshot":
        return cls(status="Ready")

    @classmethod
    def listing(cls) -> "ProgressSnapshot":
        return cls(status="Listing files and folders...")

    @classmethod
    def failed(cls) -> "ProgressSnapshot":
        return cls(status="Error")


@dataclass
class SessionSummary:
    """Summary of an interactive session returned by HashSession."""
    reports_generated: int = 0        # Successful hashing calls
    comparisons_run: int = 0          # Comparisons computed
    failures: int = 0                 # Rejected hashing calls
    archives_exported: int = 0        # Archives written
    errors: List[str] = field(default_factory=list)  # All error messages
    duration_seconds: float = 0.0
    interrupted: bool = False         # Whether the user interrupted the session
