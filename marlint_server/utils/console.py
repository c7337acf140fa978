"""Global console singleton with consistent color scheme for Rich output.

The console writes to stderr: in stdio mode stdout carries the LSP stream and
must never receive anything else.
"""

from typing import Optional

from rich.console import Console
from rich.theme import Theme


class MarlintConsole:
    """Singleton console class with consistent color scheme and styling."""

    _instance: Optional["MarlintConsole"] = None
    _console: Optional[Console] = None

    COLOR_SCHEME = {
        # Status colors
        "error": "bold red",
        "info": "bold blue",
        "process": "bold cyan",
    }

    def __new__(cls) -> "MarlintConsole":
        """Singleton pattern implementation."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        """Initialize the console only once."""
        if self._console is None:
            theme = Theme(self.COLOR_SCHEME)
            self._console = Console(theme=theme, stderr=True)

    @property
    def console(self) -> Console:
        """Get the rich console instance."""
        return self._console

    def print(self, *args, **kwargs):
        """Print with the global console."""
        return self._console.print(*args, **kwargs)

    def error(self, message: str):
        """Print error message."""
        self._console.print(f"❌ {message}", style="error")

    def info(self, message: str):
        """Print info message."""
        self._console.print(f"ℹ️  {message}", style="info")

    def process(self, message: str):
        """Print process/loading message."""
        self._console.print(f"🔄 {message}", style="process")


# Global singleton instance
console = MarlintConsole()

# Expose the rich console for advanced usage
rich_console = console.console
