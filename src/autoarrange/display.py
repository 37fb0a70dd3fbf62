"""Rich terminal display for autoarrange."""

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

from autoarrange.models import ClassificationPolicy, ClassificationResult, FileRecord, ScanStats

console = Console()


def format_size(size_bytes: int) -> str:
    """Format bytes to a human-readable string (binary units)."""
    units = ["B", "KB", "MB", "GB"]
    size = float(size_bytes)
    unit = 0
    while size >= 1024 and unit < len(units) - 1:
        size /= 1024
        unit += 1
    return f"{size:.2f} {units[unit]}"


def format_time(value) -> str:
    return value.strftime("%Y-%m-%d %H:%M")


def show_summary(result: ClassificationResult) -> None:
    """Display per-category counts and sizes."""
    if not result.summary:
        console.print("[yellow]No recent files found.[/yellow]")
        return

    table = Table(title="Category Summary", show_header=True, header_style="bold")
    table.add_column("Category")
    table.add_column("Files", justify="right")
    table.add_column("Size", justify="right")
    table.add_column("Average", justify="right")
    table.add_column("Share", justify="right")
    table.add_column("Description", style="dim")

    for tag, summary in result.summary.items():
        table.add_row(
            f"[{summary.color}]{tag.value}[/{summary.color}]",
            str(summary.count),
            format_size(summary.total_size),
            format_size(summary.average_size),
            f"{summary.percentage:.2f}%",
            escape(summary.description),
        )

    console.print(table)
    console.print(
        f"[dim]Total: {result.total_files} files, {format_size(result.total_size)} "
        f"({result.classifier} classifier)[/dim]"
    )
    console.print()


def show_file_table(records: list[FileRecord], title: str) -> None:
    """Display a list of files with size and dates."""
    if not records:
        return

    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("Name")
    table.add_column("Category")
    table.add_column("Size", justify="right")
    table.add_column("Created", justify="right")
    table.add_column("Path", style="dim", overflow="fold")

    for record in records:
        table.add_row(
            escape(record.name),
            record.category.value if record.category else "",
            format_size(record.size),
            format_time(record.created_time),
            escape(record.path),
        )

    console.print(table)
    console.print()


def show_statistics(result: ClassificationResult) -> None:
    """Display size, age and extension breakdowns plus top files."""
    stats = result.statistics

    if stats.size_distribution:
        table = Table(title="Size Distribution", show_header=True, header_style="bold")
        table.add_column("Bucket")
        table.add_column("Files", justify="right")
        table.add_column("Size", justify="right")
        for name, bucket in stats.size_distribution.items():
            table.add_row(escape(name), str(bucket.count), format_size(bucket.total_size))
        console.print(table)
        console.print()

    if stats.time_distribution:
        table = Table(title="Age Distribution", show_header=True, header_style="bold")
        table.add_column("Created")
        table.add_column("Files", justify="right")
        for label, count in stats.time_distribution.items():
            table.add_row(label, str(count))
        console.print(table)
        console.print()

    if stats.extension_stats:
        table = Table(title="Top Extensions", show_header=True, header_style="bold")
        table.add_column("Extension")
        table.add_column("Files", justify="right")
        table.add_column("Size", justify="right")
        table.add_column("Category")
        for ext in stats.extension_stats:
            table.add_row(
                escape(ext.extension),
                str(ext.count),
                format_size(ext.total_size),
                ext.category.value if ext.category else "",
            )
        console.print(table)
        console.print()

    show_file_table(stats.largest_files, "Largest Files")
    show_file_table(stats.newest_files, "Newest Files")
    show_file_table(stats.oldest_files, "Oldest Files")

    if stats.duplicate_files:
        console.print("[bold yellow]! Possible Duplicates[/bold yellow]")
        console.print("[dim]Same size and modification time; contents were not compared.[/dim]")
        for group in stats.duplicate_files:
            console.print(f"  [bold]{format_size(group[0].size)}[/bold]")
            for record in group:
                console.print(f"    • {escape(record.path)}")
        console.print()


def show_scan_stats(stats: ScanStats) -> None:
    """Display recoverable problems met during the scan."""
    if not stats.skipped_count and not stats.excluded_dirs:
        return

    lines = []
    if stats.skipped_roots:
        lines.append(f"Missing roots: {len(stats.skipped_roots)}")
        lines.extend(f"  • {escape(root)}" for root in stats.skipped_roots)
    if stats.unreadable_dirs:
        lines.append(f"Unreadable directories: {stats.unreadable_dirs}")
    if stats.failed_entries:
        lines.append(f"Unreadable entries: {stats.failed_entries}")
    if stats.excluded_dirs:
        lines.append(f"Excluded directories: {stats.excluded_dirs}")

    console.print(Panel("\n".join(lines), title="Skipped", border_style="yellow"))


def show_result(result: ClassificationResult) -> None:
    """Display a full scan result."""
    show_summary(result)
    show_statistics(result)
    show_scan_stats(result.scan_stats)


def show_categories(policy: ClassificationPolicy) -> None:
    """Display the category table of a policy in rule order."""
    table = Table(title="Categories", show_header=True, header_style="bold")
    table.add_column("#", justify="right")
    table.add_column("Category")
    table.add_column("Extensions", overflow="fold")
    table.add_column("Description", style="dim")

    for index, (tag, rule) in enumerate(policy.file_categories.items(), start=1):
        table.add_row(
            str(index),
            f"[{rule.color}]{tag.value}[/{rule.color}]",
            escape(" ".join(rule.extensions)) or "-",
            escape(rule.description),
        )

    console.print(table)


def show_scanning_progress() -> Progress:
    """Create a spinner for the scan."""
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    )
