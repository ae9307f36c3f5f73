"""Export a completed report as a zip bundle.

The bundle holds the machine-readable summary, the flat per-entry hashes, and
the two rendered documents:

    hash-report-<ts>.json            {hash, timeTaken, folderCount, fileCount, path}
    hash-list-<ts>.json              {fileHashes: [...]}
    <testReportNo>_HashList.html     Hash Code List
    <testReportNo>_HashReport.html   Confirmation of Hash Code

Document names use the report number exactly as entered.

Example:
    >>> archive = export_archive(report, settings, Path("out"))
    >>> archive.name
    'hash-results-1760000000000.zip'
"""

import json
import time
import zipfile
from pathlib import Path
from typing import List, Optional, Tuple

from hashmaker.models import HashReport, ReportSettings

from .document_renderer import render_hash_confirmation, render_hash_list

# Fixed member timestamp so equal inputs produce equal archives.
ZIP_MEMBER_DATE = (1980, 1, 1, 0, 0, 0)


def current_timestamp() -> int:
    """Epoch milliseconds, the suffix used in exported file names."""
    return int(time.time() * 1000)


def _json_bytes(data: object) -> bytes:
    return json.dumps(data, indent=2, ensure_ascii=False).encode("utf-8")


def build_archive_entries(
    report: HashReport, settings: ReportSettings, timestamp: int
) -> List[Tuple[str, bytes]]:
    """Build the ordered (member name, content) pairs of an archive."""
    return [
        (f"hash-report-{timestamp}.json", _json_bytes(report.to_summary_dict())),
        (f"hash-list-{timestamp}.json", _json_bytes(report.to_file_hashes_dict())),
        (
            f"{settings.test_report_no}_HashList.html",
            render_hash_list(report, settings).encode("utf-8"),
        ),
        (
            f"{settings.test_report_no}_HashReport.html",
            render_hash_confirmation(report, settings).encode("utf-8"),
        ),
    ]


def export_archive(
    report: HashReport,
    settings: ReportSettings,
    output_dir: Path,
    timestamp: Optional[int] = None,
) -> Path:
    """Write ``hash-results-<ts>.zip`` into output_dir.

    Args:
        report: Completed hash report.
        settings: Fields printed into the documents.
        output_dir: Existing directory to write into.
        timestamp: Epoch milliseconds for file names; defaults to now.

    Returns:
        Path of the written archive.

    Raises:
        OSError: If output_dir is missing or not writable.
    """
    output_dir = Path(output_dir)
    if not output_dir.is_dir():
        raise OSError(f"Output directory does not exist: {output_dir}")

    if timestamp is None:
        timestamp = current_timestamp()

    archive_path = output_dir / f"hash-results-{timestamp}.zip"
    with zipfile.ZipFile(archive_path, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for name, content in build_archive_entries(report, settings, timestamp):
            member = zipfile.ZipInfo(name, date_time=ZIP_MEMBER_DATE)
            member.compress_type = zipfile.ZIP_DEFLATED
            archive.writestr(member, content)

    return archive_path


def load_report(report_path: Path) -> HashReport:
    """Read an engine report JSON file.

    Raises:
        ValueError: If the file is not valid JSON or not a hash report.
        OSError: If the file cannot be read.
    """
    text = Path(report_path).read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid report JSON in {report_path}: {e}") from e
    return HashReport.from_dict(data)
