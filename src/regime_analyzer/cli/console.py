"""Rich console configuration for CLI output."""

from rich.console import Console
from rich.markup import escape
from rich.theme import Theme

# Custom theme for Regime Analyzer
THEME = Theme(
    {
        "info": "cyan",
        "warning": "yellow",
        "error": "red bold",
        "success": "green",
        "highlight": "magenta",
        "muted": "dim",
        "header": "bold blue",
        "value": "bold",
        "currency": "green",
        "currency_negative": "red",
        "nivel_baixo": "dim",
        "nivel_medio": "yellow",
        "nivel_alto": "green bold",
        "inelegivel": "red",
    }
)

# Global console instance
console = Console(theme=THEME)

# Log output goes to stderr so --json output stays parseable
log_console = Console(theme=THEME, stderr=True)


def print_error(message: str) -> None:
    """Print error message."""
    console.print(f"[error]Erro:[/error] {escape(message)}")


def print_warning(message: str) -> None:
    """Print warning message."""
    console.print(f"[warning]Aviso:[/warning] {escape(message)}")


def print_success(message: str) -> None:
    """Print success message."""
    console.print(f"[success]{message}[/success]")
