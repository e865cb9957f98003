"""Console output for lane runs"""

from typing import List

from rich.console import Console  # type: ignore[import]
from rich.markup import escape  # type: ignore[import]
from rich.panel import Panel  # type: ignore[import]
from rich.table import Table  # type: ignore[import]

console = Console()


# Status icons
class Icons:
    SUCCESS = "[green]✓[/green]"
    WARNING = "[yellow]⚠[/yellow]"
    ERROR = "[red]✗[/red]"
    INFO = "[blue]ℹ[/blue]"
    PROGRESS = "[cyan]➤[/cyan]"


class Reporter:
    """Prints lane progress according to the verbosity flags"""

    def __init__(self, verbose: bool = False, quiet: bool = False, debug: bool = False):
        self.verbose = verbose
        self.quiet = quiet
        self.debug = debug

    def rule(self, title: str) -> None:
        if self.quiet:
            return
        console.print()
        console.rule(f"[bold blue]{title}[/bold blue]")

    def success(self, message: str) -> None:
        if not self.quiet:
            console.print(f"{Icons.SUCCESS} {message}")

    def info(self, message: str) -> None:
        if not self.quiet:
            console.print(f"{Icons.INFO} {message}")

    def progress(self, message: str) -> None:
        if not self.quiet:
            console.print(f"{Icons.PROGRESS} {message}")

    def warning(self, message: str) -> None:
        if not self.quiet:
            console.print(f"{Icons.WARNING} {message}")

    def error(self, message: str) -> None:
        # Errors are shown even in quiet mode
        console.print(f"{Icons.ERROR} {message}")

    def command(self, cmd: List[str]) -> None:
        if self.verbose and not self.quiet:
            console.print(f"[dim]Running: {escape(' '.join(cmd))}[/dim]")

    def failure(self, cmd: List[str]) -> None:
        if not self.quiet:
            console.print(f"{Icons.ERROR} Command failed: {escape(' '.join(cmd))}")

    def output(
        self, label: str, text: str, style: str = "yellow", always: bool = False
    ) -> None:
        if text and (always or self.verbose or self.debug):
            console.print(f"[{style}]{label}:[/{style}] {escape(text)}")

    def banner(self, title: str, subtitle: str) -> None:
        if self.quiet:
            return
        console.print(
            Panel.fit(
                f"[bold cyan]{title}[/bold cyan]\n{subtitle}",
                border_style="cyan",
            )
        )

    def table(self, table: Table) -> None:
        if self.quiet:
            return
        console.print()
        console.print(table)
        console.print()
