"""Rich terminal display for dropmodules."""

from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm
from rich.table import Table

from dropmodules.models import DeletionOutcome, DirectoryEntry, DiscoveryResult, RunReport

console = Console(soft_wrap=True)
err_console = Console(stderr=True, soft_wrap=True)

SIZE_UNITS = "KMGTPE"


def format_size(size_bytes: int) -> str:
    """Format bytes to human-readable string (binary units, 1 KB = 1024 B)."""
    if size_bytes < 0:
        raise ValueError(f"size cannot be negative: {size_bytes}")
    if size_bytes < 1024:
        return f"{size_bytes} B"

    div, exp = 1024, 0
    n = size_bytes // 1024
    while n >= 1024 and exp < len(SIZE_UNITS) - 1:
        div *= 1024
        exp += 1
        n //= 1024
    return f"{size_bytes / div:.1f} {SIZE_UNITS[exp]}B"


def format_elapsed(seconds: float) -> str:
    """Format an elapsed time as a human-readable string."""
    if seconds < 1:
        return f"{seconds * 1000:.0f} ms"
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes = int(seconds) // 60
    secs = seconds - minutes * 60
    return f"{minutes}m {secs:.0f}s"


def format_option(entry: DirectoryEntry) -> str:
    """Label shown for an entry in the selection list."""
    return f"{entry.path} ({format_size(entry.size_bytes)})"


def parse_selection(text: str, count: int) -> list[int]:
    """
    Parse a selection like ``1,3,5-7`` into zero-based indices.

    ``all`` (or ``*``) selects everything, an empty string selects nothing.

    Args:
        text: What the user typed (1-based numbers)
        count: Number of options offered

    Returns:
        Sorted unique zero-based indices

    Raises:
        ValueError: If a part is not a number or range within 1..count
    """
    stripped = text.strip().lower()
    if not stripped:
        return []
    if stripped in ("all", "*"):
        return list(range(count))

    selected: set[int] = set()
    for part in stripped.split(","):
        part = part.strip()
        if not part:
            continue
        if "-" in part:
            start_str, _, end_str = part.partition("-")
            start, end = int(start_str), int(end_str)
            if start > end:
                raise ValueError(f"invalid range: {part}")
        else:
            start = end = int(part)
        if start < 1 or end > count:
            raise ValueError(f"{part} is outside 1-{count}")
        selected.update(range(start - 1, end))

    return sorted(selected)


def select_directories(message: str, options: list[str], page_size: int = 50) -> list[int]:
    """
    Ask the user to pick options from a numbered list.

    Options are shown ``page_size`` rows at a time; Enter shows the next page.
    Invalid input is asked again.

    Returns:
        Sorted zero-based indices of the chosen options (possibly empty)
    """
    console.print(f"[bold]{escape(message)}[/bold]")

    for start in range(0, len(options), page_size):
        table = Table(show_header=True, header_style="bold")
        table.add_column("#", style="dim", justify="right")
        table.add_column("Directory")
        for i, option in enumerate(options[start : start + page_size], start + 1):
            table.add_row(str(i), escape(option))
        console.print(table)

        if start + page_size < len(options):
            console.input(
                f"[dim]Showing {start + page_size} of {len(options)}. "
                "Press Enter for more...[/dim]"
            )

    console.print("[dim]Enter numbers or ranges (e.g. 1,3,5-7), 'all', or nothing to skip[/dim]")
    while True:
        user_input = console.input("[bold cyan]Select:[/bold cyan] ")
        try:
            return parse_selection(user_input, len(options))
        except ValueError as e:
            console.print(f"[yellow]{escape(str(e))}. Please try again.[/yellow]")


def confirm_action(message: str) -> bool:
    """Ask for confirmation."""
    return Confirm.ask(f"[yellow]{escape(message)}[/yellow]", console=console, default=False)


def show_scan_start(root: str, target_name: str) -> None:
    console.print(f"Scanning for {escape(target_name)} in {escape(root)} (this may take a moment)...")


def show_discovery(result: DiscoveryResult) -> None:
    """Display a short summary of what the scan found."""
    if result.entries:
        console.print(
            f"Found [bold]{result.count}[/bold] {escape(result.target_name)} directories "
            f"([bold]{format_size(result.total_bytes)}[/bold] total)"
        )
    if result.skipped:
        console.print(
            f"[dim]Skipped {len(result.skipped)} unreadable paths "
            "(run with --verbose for details)[/dim]"
        )


def show_nothing_found(root: str, target_name: str) -> None:
    console.print(f"No {escape(target_name)} directories found in {escape(root)}")


def show_nothing_selected() -> None:
    console.print("No directories selected for deletion.")


def show_cancelled() -> None:
    console.print("[yellow]Operation cancelled.[/yellow]")


def show_deletion_start(count: int, total_bytes: int, dry_run: bool = False) -> None:
    if dry_run:
        console.print("\n[yellow]DRY RUN - No files will be deleted[/yellow]")
    console.print(f"\nDeleting {count} directories (total size: {format_size(total_bytes)}) ⏳")


def show_outcome(outcome: DeletionOutcome) -> None:
    """Display the result of a single deletion."""
    entry = outcome.entry
    if outcome.success:
        verb = "Would delete" if outcome.dry_run else "Deleted"
        console.print(
            f"{verb} {escape(entry.path)} ({format_size(entry.size_bytes)}) "
            f"in {format_elapsed(outcome.elapsed_seconds)} ✅"
        )
    else:
        err_console.print(f"[red]ERROR: {escape(outcome.error or 'unknown error')}[/red]")


def show_summary(report: RunReport) -> None:
    """Display the completion message for a finished run."""
    freed = "Would free" if report.dry_run else "Freed"
    console.print()
    if report.failure_count:
        console.print(
            f"[bold yellow]Operation completed with {report.failure_count} "
            f"error(s).[/bold yellow] {freed} {format_size(report.bytes_freed)} "
            f"from {report.success_count} directories."
        )
    else:
        console.print(
            f"[bold green]Operation completed! 🎉[/bold green] {freed} "
            f"{format_size(report.bytes_freed)} from {report.success_count} directories."
        )


def show_error(message: str) -> None:
    err_console.print(f"[red]Error: {escape(message)}[/red]")
