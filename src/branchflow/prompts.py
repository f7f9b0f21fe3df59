"""Interactive prompts."""

from typing import Optional, Sequence

from rich.console import Console
from rich.prompt import Confirm, Prompt


class Prompter:
    """Ask the user questions on the terminal."""

    def __init__(self, console: Optional[Console] = None) -> None:
        """Initialize prompter."""
        self.console = console or Console()

    def confirm(self, message: str, default: bool = False) -> bool:
        """Ask a yes/no question."""
        return Confirm.ask(message, default=default, console=self.console)

    def select(self, message: str, choices: Sequence[str], default: Optional[str] = None) -> str:
        """Ask the user to pick one of ``choices``; no other answer is accepted."""
        return Prompt.ask(message, choices=list(choices), default=default, console=self.console)

    def text(self, message: str, default: str = "") -> str:
        """Ask for free text."""
        return Prompt.ask(message, default=default, show_default=bool(default), console=self.console)
