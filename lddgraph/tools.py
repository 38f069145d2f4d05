"""External tool invocation shared by the inspectors, locator and renderer."""

from __future__ import annotations

import os
import shutil
import subprocess
from typing import Callable, Iterable, Sequence

from .logging import get_logger

Runner = Callable[[Sequence[str]], str]

_LOGGER = get_logger("tools")


class LddGraphError(RuntimeError):
    """Base class for fatal lddgraph failures."""


class InputNotFoundError(LddGraphError):
    """Raised when the ELF file to analyse does not exist."""


class ToolNotFoundError(LddGraphError):
    """Raised when a required external utility is not on PATH."""


class ToolError(RuntimeError):
    """Raised by runners when an external command cannot run or exits non-zero."""

    def __init__(self, args: Sequence[str], returncode: int | None, stderr: str = "") -> None:
        self.command = list(args)
        self.returncode = returncode
        self.stderr = stderr
        detail = stderr.strip() or f"exit status {returncode}"
        super().__init__(f"{' '.join(self.command)} failed: {detail}")


def run_tool(args: Iterable[str]) -> str:
    """Run a command and return its stdout, raising ToolError on failure."""
    command = list(args)
    _LOGGER.debug("Running %s", " ".join(command))
    try:
        completed = subprocess.run(
            command,
            check=False,
            text=True,
            capture_output=True,
            errors="replace",
            env={**os.environ, "LC_ALL": "C"},
        )
    except OSError as exc:
        raise ToolError(command, None, str(exc)) from exc
    if completed.returncode != 0:
        raise ToolError(command, completed.returncode, completed.stderr)
    return completed.stdout


def tool_available(name: str, finder: Callable[[str], str | None] | None = None) -> bool:
    """Return True when ``name`` resolves to an executable on PATH."""
    lookup = finder or shutil.which
    return lookup(name) is not None


def require_tool(
    name: str,
    purpose: str,
    finder: Callable[[str], str | None] | None = None,
) -> None:
    if not tool_available(name, finder):
        raise ToolNotFoundError(f"{name} utility not found. {purpose} is not possible.")


__all__ = [
    "InputNotFoundError",
    "LddGraphError",
    "Runner",
    "ToolError",
    "ToolNotFoundError",
    "require_tool",
    "run_tool",
    "tool_available",
]
