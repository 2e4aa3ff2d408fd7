"""External tool integrations (subprocess and git)."""

from .process import CommandTimeout, combined_output, run_command, run_command_bytes
from .vcs import GitError, GitRepository

__all__ = [
    "CommandTimeout",
    "GitError",
    "GitRepository",
    "combined_output",
    "run_command",
    "run_command_bytes",
]
