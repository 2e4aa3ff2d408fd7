"""Line-based prompting with defaults and a y/n validation loop."""

from __future__ import annotations

from typing import Callable

import typer

Reader = Callable[[str], str]
Writer = Callable[..., None]

_YES = {"y", "yes"}
_NO = {"n", "no"}


def _typer_reader(prompt: str) -> str:
    return typer.prompt(prompt, default="", show_default=False, prompt_suffix=" ")


class Prompter:
    """Asks questions on the terminal; reader and writer are injectable."""

    def __init__(self, *, reader: Reader = _typer_reader, echo: Writer = typer.echo) -> None:
        self._read = reader
        self._echo = echo

    def ask(self, question: str, default: str | None = None) -> str:
        """Return a non-empty answer, or ``default`` when the input is blank."""
        while True:
            label = f"{question} [{default}]:" if default is not None else f"{question}:"
            self._echo(typer.style(label, fg=typer.colors.CYAN))
            answer = (self._read(">") or "").strip()
            if answer:
                return answer
            if default is not None:
                self._echo(typer.style(default, fg=typer.colors.GREEN))
                return default
            self._echo(typer.style("Input is required.", fg=typer.colors.RED), err=True)
            self._echo("")

    def confirm(self, question: str, default: bool = True) -> bool:
        hint = "Y/n" if default else "y/N"
        while True:
            answer = (self._read(typer.style(f"{question} [{hint}]", fg=typer.colors.CYAN)) or "").strip().lower()
            if not answer:
                self._echo(typer.style("yes" if default else "no", fg=typer.colors.GREEN))
                return default
            if answer in _YES:
                return True
            if answer in _NO:
                return False
            self._echo(
                typer.style("Please answer yes, y, no, or n.", fg=typer.colors.RED),
                err=True,
            )


__all__ = ["Prompter"]
