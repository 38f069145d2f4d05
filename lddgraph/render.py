"""Optional PNG rendering through Graphviz ``dot``."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

from .logging import get_logger
from .tools import Runner, ToolError, run_tool, tool_available

_LOGGER = get_logger("render")


class Renderer:
    def __init__(
        self,
        runner: Runner | None = None,
        finder: Callable[[str], str | None] | None = None,
    ) -> None:
        self._runner = runner or run_tool
        self._finder = finder

    def render(self, dot_file: Path, image_file: Path) -> bool:
        """Rasterize ``dot_file`` into ``image_file``; failures are logged, not raised."""
        if not tool_available("dot", self._finder):
            _LOGGER.error("dot command not found. Install Graphviz to generate the image.")
            return False
        try:
            self._runner(["dot", "-Tpng", str(dot_file), "-o", str(image_file)])
        except ToolError as exc:
            _LOGGER.error("Error creating image %s: %s", image_file, exc)
            return False
        _LOGGER.info("Image %s successfully created.", image_file)
        return True


__all__ = ["Renderer"]
