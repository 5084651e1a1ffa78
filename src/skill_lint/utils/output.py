"""Rich console output utilities."""

from rich.console import Console

from skill_lint.config.schema import Severity


console = Console()
# Diagnostics that must stay out of machine-readable stdout
err_console = Console(stderr=True)

SEVERITY_STYLES = {
    Severity.ERROR: "red",
    Severity.WARNING: "yellow",
    Severity.INFO: "blue",
}


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]✓[/green] {message}")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]✗[/red] {message}", style="red")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]⚠[/yellow] {message}", style="yellow")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]ℹ[/blue] {message}")


def severity_label(severity: Severity) -> str:
    """Rich markup label for an issue severity."""
    style = SEVERITY_STYLES[severity]
    return f"[{style}]{severity.value}[/{style}]"
