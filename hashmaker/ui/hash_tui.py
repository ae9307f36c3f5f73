"""Terminal User Interface for HashMaker.

This module provides the HashTUI class, a Rich-based interactive TUI that
renders each workflow screen, follows hashing progress, and shows the
rebuilt entry tree of a report.

Example:
    from hashmaker.ui import HashTUI

    tui = HashTUI()
    tui.display_screen(controller.state, controller.progress)
    action = tui.prompt_action(controller.kind)
"""

from typing import Callable, Dict, List, Optional, Tuple

from rich.console import Console
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    TaskProgressColumn,
    TextColumn,
)
from rich.prompt import Prompt
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from hashmaker.models import (
    CompareResult,
    ComparisonAttached,
    ComparisonResult,
    DualSelect,
    HashReport,
    PrimaryReady,
    ProgressSnapshot,
    Screen,
    SessionSummary,
    TreeNode,
    WorkflowState,
)
from hashmaker.reporting import build_tree

# Actions offered per screen, in prompt order: key -> description.
SCREEN_ACTIONS: Dict[WorkflowState, List[Tuple[str, str]]] = {
    WorkflowState.LANDING: [
        ("s", "select folder"),
        ("a", "about"),
        ("q", "quit"),
    ],
    WorkflowState.PRIMARY_READY: [
        ("d", "download"),
        ("t", "tree"),
        ("c", "compare hashes"),
        ("x", "clear"),
        ("g", "generate hash"),
        ("a", "about"),
        ("q", "quit"),
    ],
    WorkflowState.DUAL_SELECT: [
        ("p", "select primary folder"),
        ("c", "select comparison folder"),
        ("g", "generate hash"),
        ("a", "about"),
        ("q", "quit"),
    ],
    WorkflowState.COMPARISON_ATTACHED: [
        ("r", "compare"),
        ("x", "clear primary"),
        ("y", "clear comparison"),
        ("a", "about"),
        ("q", "quit"),
    ],
    WorkflowState.COMPARE_RESULT: [
        ("c", "compare again"),
        ("g", "generate hash"),
        ("a", "about"),
        ("q", "quit"),
    ],
    WorkflowState.ABOUT: [
        ("g", "generate hash"),
        ("q", "quit"),
    ],
    WorkflowState.ERROR: [
        ("s", "select folder"),
        ("a", "about"),
        ("q", "quit"),
    ],
}


class HashTUI:
    """Rich-based Terminal User Interface for the hashing workflow.

    Args:
        console: Optional Rich Console instance for output. Pass a custom
            Console for testing (e.g., with StringIO file for output capture).

    Attributes:
        console: The Rich Console instance used for all output.
    """

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()

    def display_header(self, version: str) -> None:
        self.console.print(
            Panel(
                "Generate and compare file hashes securely",
                title=f"Hash Generator v{version}",
                border_style="blue",
            )
        )

    def display_screen(self, state: Screen, progress: ProgressSnapshot, version: str = "") -> None:
        """Render the screen for the current workflow state."""
        kind = state.kind
        if kind is WorkflowState.LANDING:
            self.console.print(
                Panel(
                    "Drop a folder path here or select one to generate its hash.",
                    title="Generate Hash",
                    border_style="blue",
                )
            )
        elif isinstance(state, PrimaryReady):
            self.display_report(state.primary, title="Hash generated completely")
        elif isinstance(state, DualSelect):
            self.display_report(state.primary, title="Primary hash")
            self.console.print(
                Panel(
                    "Drop or select the folder to compare against the primary hash.",
                    title="Compare Hashes",
                    border_style="blue",
                )
            )
        elif isinstance(state, ComparisonAttached):
            self.display_attached(state.primary, state.comparison)
        elif isinstance(state, CompareResult):
            self.display_comparison_result(state.result)
        elif kind is WorkflowState.ABOUT:
            self.display_about(version)
        elif kind is WorkflowState.ERROR:
            self.display_error(progress)

    def display_report(self, report: HashReport, title: str) -> None:
        """Display the final hash and statistics of one report."""
        table = Table(show_header=False, box=None)
        table.add_column("Field", style="cyan")
        table.add_column("Value", style="white")
        table.add_row("Path", report.path)
        table.add_row("Total hash", f"[bold]{report.hash}[/bold]")
        table.add_row("Time taken", report.time_taken)
        table.add_row("Contents", f"{report.folder_count:,} Folders / {report.file_count:,} Files")
        self.console.print(Panel(table, title=title, border_style="green"))

    def display_attached(self, primary: HashReport, comparison: HashReport) -> None:
        table = Table(show_header=True, header_style="bold")
        table.add_column("Report", style="cyan")
        table.add_column("Path", style="white")
        table.add_column("Hash", style="white", overflow="fold")
        table.add_row("Primary", primary.path, primary.hash)
        table.add_row("Comparison", comparison.path, comparison.hash)
        self.console.print(Panel(table, title="Hashes Attached", border_style="blue"))

    def display_comparison_result(self, result: ComparisonResult) -> None:
        if result is ComparisonResult.IDENTICAL:
            self.console.print(
                Panel("[green]The hashes are identical.[/green]", title="Comparison", border_style="green")
            )
        else:
            self.console.print(
                Panel("[red]The hashes do not match.[/red]", title="Comparison", border_style="red")
            )

    def display_about(self, version: str = "") -> None:
        title = f"About HashMaker v{version}" if version else "About HashMaker"
        text = (
            "HashMaker generates a hash for a folder or file, exports a hash code\n"
            "list and a confirmation report, and compares two hash results.\n\n"
            "Supported algorithms: MD5, SHA-1, SHA-256, SHA-384, SHA-512"
        )
        self.console.print(Panel(text, title=title, border_style="blue"))

    def display_error(self, progress: ProgressSnapshot) -> None:
        self.console.print(
            Panel(
                f"[red]Status: {progress.status}[/red]\n"
                "The hash could not be generated. Select a folder to try again.",
                title="Error",
                border_style="red",
            )
        )

    def display_status(self, progress: ProgressSnapshot) -> None:
        self.console.print(
            f"[dim]Status:[/dim] [cyan]{progress.status}[/cyan] "
            f"[dim]{progress.processed}/{progress.total}[/dim]"
        )

    def display_tree(self, report: HashReport, max_nodes: Optional[int] = None) -> int:
        """Display the rebuilt entry tree of a report.

        Args:
            report: Report whose flat records are rebuilt.
            max_nodes: Stop after this many nodes (None shows all).

        Returns:
            Number of nodes displayed.
        """
        root = Tree(Text.assemble((report.path, "bold"), " ", (report.hash, "dim")))
        shown = 0
        stack: List[Tuple[Tree, TreeNode]] = [
            (root, node) for node in reversed(build_tree(report.file_hashes))
        ]
        while stack:
            if max_nodes is not None and shown >= max_nodes:
                root.add(f"[dim]... {len(stack)} more[/dim]")
                break
            branch, node = stack.pop()
            shown += 1
            if node.is_folder_title():
                child = branch.add(Text(node.path, style="bold blue"))
                stack.extend((child, c) for c in reversed(node.children))
            elif node.is_summary:
                branch.add(Text.assemble((node.path, "magenta"), " ", (node.hash or "-", "dim")))
            else:
                branch.add(Text.assemble(node.path, " ", (node.hash, "dim")))
        self.console.print(root)
        return shown

    def display_session_summary(self, summary: SessionSummary) -> None:
        table = Table(show_header=True, header_style="bold")
        table.add_column("Metric", style="cyan")
        table.add_column("Value", justify="right")
        table.add_row("Reports generated", f"{summary.reports_generated:,}")
        table.add_row("Comparisons run", f"{summary.comparisons_run:,}")
        table.add_row("Failed hashing calls", f"{summary.failures:,}")
        table.add_row("Archives exported", f"{summary.archives_exported:,}")
        table.add_row("Duration", self._format_duration(summary.duration_seconds))
        self.console.print(Panel(table, title="Session Summary", border_style="green"))

        if summary.errors:
            self._display_errors(summary.errors)

    def prompt_action(self, kind: WorkflowState) -> str:
        """Prompt for one of the actions the current screen allows."""
        actions = SCREEN_ACTIONS.get(kind, [("q", "quit")])
        label = ", ".join(f"({key}) {description}" for key, description in actions)
        return Prompt.ask(
            label,
            choices=[key for key, _ in actions],
            console=self.console,
        )

    def prompt_path(self, label: str) -> str:
        """Ask for a folder or file path; drop it onto the terminal to paste it."""
        answer = Prompt.ask(
            f"{label} [dim](drop or type a path, empty to cancel)[/dim]",
            default="",
            show_default=False,
            console=self.console,
        )
        return _strip_dropped_path(answer)

    def create_progress_tracker(
        self,
    ) -> Tuple[Progress, Callable[[ProgressSnapshot], None]]:
        """Create a progress bar and a callback that feeds it snapshots.

        The caller MUST use the Progress instance as a context manager.

        Example:
            progress, callback = tui.create_progress_tracker()
            consumer.set_update_callback(callback)
            with progress:
                await controller.select_path(path)
        """
        progress = Progress(
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            MofNCompleteColumn(),
            console=self.console,
        )
        task_id = progress.add_task("Listing files and folders...", total=None)

        def callback(snapshot: ProgressSnapshot) -> None:
            progress.update(
                task_id,
                description=snapshot.status,
                completed=snapshot.processed,
                total=snapshot.total or None,
            )

        return progress, callback

    def _display_errors(self, errors: List[str]) -> None:
        max_display = 10
        displayed_errors = errors[:max_display]
        remaining = len(errors) - max_display

        error_text = "\n".join(f"- {e}" for e in displayed_errors)
        if remaining > 0:
            error_text += f"\n\n... and {remaining} more errors"

        self.console.print(
            Panel(error_text, title=f"Errors ({len(errors)})", border_style="red")
        )

    def _format_duration(self, seconds: float) -> str:
        if seconds < 0:
            seconds = 0
        minutes = int(seconds // 60)
        secs = int(seconds % 60)
        return f"{minutes}m {secs}s"


def _strip_dropped_path(answer: str) -> str:
    """Remove the quotes terminals add around dropped paths."""
    text = answer.strip()
    if len(text) >= 2 and text[0] == text[-1] and text[0] in ("'", '"'):
        text = text[1:-1]
    return text
