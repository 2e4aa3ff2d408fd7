"""Buffered terminal rendering for patch reports."""

from __future__ import annotations

from typing import Callable, List, Literal

import typer

SEPARATOR = "─" * 60

Status = Literal["info", "success", "warning", "error"]

_ICONS = {
    "success": ("✓", typer.colors.GREEN),
    "warning": ("⚠", typer.colors.YELLOW),
    "error": ("✗", typer.colors.RED),
    "info": ("ℹ", typer.colors.CYAN),
}


class ReportWriter:
    """Collects styled lines and writes them in a single flush.

    ``color=False`` keeps the text plain, which is what tests and piped
    output want.
    """

    def __init__(
        self,
        *,
        color: bool = True,
        echo: Callable[..., None] = typer.echo,
        err: bool = False,
    ) -> None:
        self.color = color
        self._echo = echo
        self._err = err
        self.lines: List[str] = []

    def _style(self, text: str, fg: str | None = None, *, bold: bool = False) -> str:
        if not self.color or (fg is None and not bold):
            return text
        return typer.style(text, fg=fg, bold=bold)

    def header(self, title: str, status: Status = "info") -> "ReportWriter":
        icon, color = _ICONS.get(status, _ICONS["info"])
        self.lines.extend(["", SEPARATOR, f" {self._style(icon, color)} {title}", SEPARATOR])
        return self

    def stats(self, total: int, succeeded: int, failed: int) -> "ReportWriter":
        success_text = self._style(f"Success: {succeeded}", typer.colors.GREEN)
        failed_text = self._style(f"Failed: {failed}", typer.colors.RED)
        self.lines.append(f" Total: {total} patches | {success_text} | {failed_text}")
        self.lines.append(SEPARATOR)
        return self

    def separator(self) -> "ReportWriter":
        self.lines.append(SEPARATOR)
        return self

    def blank(self) -> "ReportWriter":
        self.lines.append("")
        return self

    def info(self, message: str) -> "ReportWriter":
        self.lines.append(" " + self._style(message, typer.colors.BRIGHT_BLACK))
        return self

    def success(self, message: str) -> "ReportWriter":
        self.lines.append(self._style(f"✓ {message}", typer.colors.GREEN))
        return self

    def error(self, message: str) -> "ReportWriter":
        self.lines.append(self._style(f"✗ {message}", typer.colors.RED))
        return self

    def section_title(self, title: str, status: Status | None = None) -> "ReportWriter":
        color = {"success": typer.colors.GREEN, "error": typer.colors.RED}.get(status or "")
        self.lines.append("")
        self.lines.append(self._style(title, color, bold=color is not None))
        return self

    def group_header(self, name: str) -> "ReportWriter":
        self.lines.append(" " + self._style(name, typer.colors.CYAN, bold=True))
        return self

    def list_item(self, item: str, status: Status | None = None) -> "ReportWriter":
        if status == "success":
            prefix = "  " + self._style("✓", typer.colors.GREEN)
        elif status == "error":
            prefix = "  " + self._style("✗", typer.colors.RED)
        else:
            prefix = "  •"
        self.lines.append(f"{prefix} {item}")
        return self

    def error_detail(self, detail: str) -> "ReportWriter":
        self.lines.append("    " + self._style(detail, typer.colors.YELLOW))
        return self

    def render(self) -> str:
        """Flush the buffered lines at once and return the rendered text."""
        text = "\n".join(self.lines)
        self._echo(text, err=self._err)
        self.lines = []
        return text


__all__ = ["ReportWriter", "SEPARATOR", "Status"]
