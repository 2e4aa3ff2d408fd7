"""Blocking subprocess helpers used for every external tool invocation."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Sequence


class CommandTimeout(RuntimeError):
    """Raised when an external command exceeds its time budget."""

    def __init__(self, command: Sequence[str], timeout: float) -> None:
        super().__init__(f"{' '.join(command)} timed out after {timeout:g}s")
        self.command = tuple(command)
        self.timeout = timeout


def _decode(payload: bytes | None) -> str:
    return payload.decode("utf-8", errors="replace") if payload else ""


def run_command(
    args: Sequence[str],
    *,
    cwd: Path,
    timeout: float | None = None,
) -> subprocess.CompletedProcess[str]:
    """Run ``args`` in ``cwd`` and return decoded stdout/stderr.

    Raises :class:`CommandTimeout` when ``timeout`` elapses and lets
    ``OSError`` propagate when the executable cannot be started.
    """

    command = list(args)
    try:
        process = subprocess.run(
            command,
            cwd=cwd,
            capture_output=True,
            text=False,
            check=False,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as error:
        raise CommandTimeout(command, float(timeout or 0)) from error
    return subprocess.CompletedProcess(
        process.args,
        process.returncode,
        _decode(process.stdout),
        _decode(process.stderr),
    )


def run_command_bytes(
    args: Sequence[str],
    *,
    cwd: Path,
    timeout: float | None = None,
) -> subprocess.CompletedProcess[bytes]:
    """Variant of :func:`run_command` that keeps stdout as raw bytes."""

    command = list(args)
    try:
        return subprocess.run(
            command,
            cwd=cwd,
            capture_output=True,
            text=False,
            check=False,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as error:
        raise CommandTimeout(command, float(timeout or 0)) from error


def combined_output(result: subprocess.CompletedProcess[str]) -> str:
    """Join stderr and stdout the way a shell ``2>&1`` redirect would."""

    return "\n".join(part for part in (result.stderr, result.stdout) if part)


__all__ = ["CommandTimeout", "combined_output", "run_command", "run_command_bytes"]
