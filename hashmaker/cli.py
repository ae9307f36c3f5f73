"""
HashMaker - CLI Interface.

A command-line interface for generating, exporting and comparing folder
hashes. Hashing itself is done by an external engine executable; this tool
drives it, rebuilds its per-entry output into a tree, and renders the hash
code list and confirmation documents.

Usage Examples:
    # Interactive session driving an engine executable
    hashmaker run --engine-command hash-engine --report-no TR-2026-001

    # Export the archive of an existing engine report
    hashmaker render report.json --report-no TR-2026-001 --output-dir out/

    # Compare two engine reports
    hashmaker compare release.json candidate.json

    # Show the rebuilt entry tree of a report
    hashmaker tree report.json
"""

import shlex
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from hashmaker.engine import SubprocessHashingEngine
from hashmaker.events import EventBus
from hashmaker.models import ComparisonResult, HashAlgorithm, ReportSettings, SessionSummary
from hashmaker.orchestration import HashSession, SessionLogger, compare_reports
from hashmaker.reporting import export_archive, format_test_date, load_report
from hashmaker.ui import HashTUI

__version__ = "3.0.0"

# Initialize Typer app
app = typer.Typer(
    name="hashmaker",
    help="HashMaker - Generate, export and compare folder hashes.",
    add_completion=False,
    no_args_is_help=True,
)

# Rich console for consistent output formatting
console = Console()


def version_callback(value: bool) -> None:
    """Display version information and exit."""
    if value:
        console.print(f"HashMaker v{__version__}")
        raise typer.Exit()


def validate_algorithm(value: str) -> str:
    """
    Validate the hash algorithm identifier.

    Raises:
        typer.BadParameter: If the algorithm is not supported.
    """
    try:
        return HashAlgorithm.from_value(value).value
    except ValueError as e:
        raise typer.BadParameter(str(e))


def validate_test_date(value: Optional[str]) -> Optional[str]:
    """
    Validate that the test date is an ISO date (YYYY-MM-DD).

    Raises:
        typer.BadParameter: If the date does not parse.
    """
    if value is not None and format_test_date(value) == "Invalid Date":
        raise typer.BadParameter("Test date must be in YYYY-MM-DD format")
    return value


def validate_output_dir(output_dir: Path) -> None:
    """
    Validate that the output directory exists.

    Raises:
        typer.Exit: If validation fails with descriptive error message.
    """
    if not output_dir.exists():
        console.print(f"[red]Error:[/red] Output directory does not exist: {output_dir}")
        raise typer.Exit(1)
    if not output_dir.is_dir():
        console.print(f"[red]Error:[/red] Output path is not a directory: {output_dir}")
        raise typer.Exit(1)


def build_settings(
    algorithm: str,
    report_no: str,
    product: str,
    applicant: str,
    copyright_holder: str,
    test_date: Optional[str],
    lab: str,
    tester: str,
    doc_form_id: str,
) -> ReportSettings:
    """Assemble ReportSettings from command-line options."""
    fields = dict(
        algorithm=HashAlgorithm.from_value(algorithm),
        test_report_no=report_no,
        product_name=product,
        applicant_co=applicant,
        copyright_co=copyright_holder,
        lab_name=lab,
        tester_name=tester,
        doc_form_id=doc_form_id,
    )
    if test_date is not None:
        fields["test_date"] = test_date
    return ReportSettings(**fields)


def load_report_or_exit(report_path: Path):
    """Load a report JSON file, exiting with an error message on failure."""
    try:
        return load_report(report_path)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except OSError as e:
        console.print(f"[red]Error:[/red] Cannot read report {report_path}: {e}")
        raise typer.Exit(1)


ALGORITHM_OPTION = typer.Option(
    "sha256",
    "--algorithm",
    "-a",
    help="Hash algorithm: md5, sha1, sha256, sha384 or sha512.",
    callback=validate_algorithm,
)
REPORT_NO_OPTION = typer.Option("", "--report-no", help="Test report number (also names the documents).")
PRODUCT_OPTION = typer.Option("", "--product", help="Product name.")
APPLICANT_OPTION = typer.Option("", "--applicant", help="Applicant company.")
COPYRIGHT_OPTION = typer.Option("", "--copyright", help="Copyright holder.")
TEST_DATE_OPTION = typer.Option(
    None,
    "--test-date",
    help="Test date (YYYY-MM-DD). Defaults to today.",
    callback=validate_test_date,
)
LAB_OPTION = typer.Option("", "--lab", help="Testing laboratory.")
TESTER_OPTION = typer.Option("", "--tester", help="Tester name.")
DOC_FORM_OPTION = typer.Option("", "--doc-form-id", help="Document form identifier.")
OUTPUT_DIR_OPTION = typer.Option(
    Path("."),
    "--output-dir",
    "-o",
    help="Directory receiving exported archives.",
)


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """HashMaker - Generate, export and compare folder hashes."""
    pass


@app.command()
def run(
    engine_command: Optional[str] = typer.Option(
        None,
        "--engine-command",
        "-e",
        envvar="HASHMAKER_ENGINE",
        help="Hashing engine executable (and leading arguments).",
    ),
    algorithm: str = ALGORITHM_OPTION,
    report_no: str = REPORT_NO_OPTION,
    product: str = PRODUCT_OPTION,
    applicant: str = APPLICANT_OPTION,
    copyright_holder: str = COPYRIGHT_OPTION,
    test_date: Optional[str] = TEST_DATE_OPTION,
    lab: str = LAB_OPTION,
    tester: str = TESTER_OPTION,
    doc_form_id: str = DOC_FORM_OPTION,
    output_dir: Path = OUTPUT_DIR_OPTION,
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        "-l",
        help="Path for log file output.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-V",
        help="Enable verbose output.",
    ),
) -> None:
    """
    Interactive hashing session.

    Select (or drop) a folder to hash, download the report archive, attach a
    second folder and compare the two hashes.
    """
    if not engine_command:
        console.print(
            "[red]Error:[/red] No hashing engine configured. "
            "Pass --engine-command or set HASHMAKER_ENGINE."
        )
        raise typer.Exit(1)

    validate_output_dir(output_dir)

    command: List[str] = shlex.split(engine_command)
    if not command:
        console.print("[red]Error:[/red] Engine command is empty.")
        raise typer.Exit(1)

    settings = build_settings(
        algorithm, report_no, product, applicant, copyright_holder,
        test_date, lab, tester, doc_form_id,
    )

    logger_instance: Optional[SessionLogger] = None
    if log_file:
        try:
            logger_instance = SessionLogger(log_file, algorithm=settings.algorithm)
        except OSError as e:
            console.print(
                f"[yellow]Warning:[/yellow] Failed to create log file: {e}. "
                "Continuing without logging."
            )
            logger_instance = None

    window = EventBus("main")
    engine = SubprocessHashingEngine(command, progress_channel=window)

    try:
        session = HashSession(
            engine=engine,
            settings=settings,
            window_channel=window,
            tui=HashTUI(console=console),
            logger_instance=logger_instance,
            output_dir=output_dir,
            verbose=verbose,
            version=__version__,
        )
        summary = session.run()

        if not isinstance(summary, SessionSummary):
            console.print(
                "[red]Error:[/red] Session returned unexpected result type. "
                "Expected SessionSummary, got " + type(summary).__name__
            )
            raise typer.Exit(1)

        if log_file and logger_instance:
            console.print(f"\n[dim]Log written to: {log_file}[/dim]")

        if summary.interrupted:
            raise typer.Exit(130)

    except KeyboardInterrupt:
        console.print("\n[yellow]Session interrupted by user.[/yellow]")
        raise typer.Exit(130)

    finally:
        if logger_instance:
            logger_instance.close()


@app.command()
def render(
    report_path: Path = typer.Argument(..., help="Engine report JSON file."),
    algorithm: str = ALGORITHM_OPTION,
    report_no: str = REPORT_NO_OPTION,
    product: str = PRODUCT_OPTION,
    applicant: str = APPLICANT_OPTION,
    copyright_holder: str = COPYRIGHT_OPTION,
    test_date: Optional[str] = TEST_DATE_OPTION,
    lab: str = LAB_OPTION,
    tester: str = TESTER_OPTION,
    doc_form_id: str = DOC_FORM_OPTION,
    output_dir: Path = OUTPUT_DIR_OPTION,
) -> None:
    """
    Export the archive of an existing engine report.

    Writes hash-results-<timestamp>.zip holding the summary JSON, the
    per-entry hash JSON, and the hash list and confirmation documents.
    """
    validate_output_dir(output_dir)
    report = load_report_or_exit(report_path)
    settings = build_settings(
        algorithm, report_no, product, applicant, copyright_holder,
        test_date, lab, tester, doc_form_id,
    )

    try:
        archive_path = export_archive(report, settings, output_dir)
    except OSError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    console.print(f"[green]Archive written to:[/green] {archive_path}")


@app.command()
def compare(
    primary_path: Path = typer.Argument(..., help="Primary engine report JSON file."),
    comparison_path: Path = typer.Argument(..., help="Comparison engine report JSON file."),
) -> None:
    """
    Compare the final hashes of two engine reports.

    Exits with code 0 when identical and 1 on mismatch.
    """
    primary = load_report_or_exit(primary_path)
    comparison = load_report_or_exit(comparison_path)

    tui = HashTUI(console=console)
    tui.display_attached(primary, comparison)
    result = compare_reports(primary, comparison)
    tui.display_comparison_result(result)

    if result is ComparisonResult.MISMATCH:
        raise typer.Exit(1)


@app.command()
def tree(
    report_path: Path = typer.Argument(..., help="Engine report JSON file."),
    limit: Optional[int] = typer.Option(
        None,
        "--limit",
        "-n",
        min=1,
        help="Show at most this many entries.",
    ),
) -> None:
    """Show the folder/file tree rebuilt from an engine report."""
    report = load_report_or_exit(report_path)
    tui = HashTUI(console=console)
    tui.display_report(report, title="Hash report")
    tui.display_tree(report, max_nodes=limit)


if __name__ == "__main__":
    app()
