"""Terminal implementation of the Prompter protocol."""

from __future__ import annotations

import typer


class TyperPrompter:
    """Asks questions on the terminal and prints alerts to stderr."""

    def prompt(self, message: str, default: str = "") -> str | None:
        """Prompt via ``typer.prompt``; Ctrl+C or end of input counts as cancel."""
        try:
            answer = typer.prompt(message, default=default, show_default=bool(default))
        except typer.Abort:
            return None
        return str(answer)

    def alert(self, message: str) -> None:
        typer.secho(message, fg=typer.colors.RED, err=True)
