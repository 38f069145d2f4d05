"""Pipeline orchestration for a single lddgraph run."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Mapping, Optional, Sequence

from .emitter import DotEmitter
from .locator import LibraryLocator
from .logging import get_logger
from .models import PALETTE, GroupTable
from .render import Renderer
from .symbols import SymbolInspector
from .tools import InputNotFoundError, Runner, require_tool, run_tool
from .walker import DEFAULT_MAX_DEPTH, DependencyWalker, WalkResult

DEFAULT_DOT_FILE = Path("deps.dot")


@dataclass
class RunSettings:
    """Effective options for one run, after merging configuration and CLI flags."""

    elf_file: Path
    depth: int = DEFAULT_MAX_DEPTH
    groups: List[str] = field(default_factory=list)
    output: Path = DEFAULT_DOT_FILE
    image: Optional[Path] = None
    palette: Sequence[str] = PALETTE
    search_dirs: Optional[Sequence[str]] = None


@dataclass
class RunOutcome:
    dot_file: Path
    walk: WalkResult
    image_file: Optional[Path] = None
    image_created: bool = False


class Orchestrator:
    """Resolves the input, walks its dependencies and writes the graph."""

    def __init__(
        self,
        runner: Runner | None = None,
        *,
        finder: Callable[[str], str | None] | None = None,
        environ: Mapping[str, str] | None = None,
        renderer: Renderer | None = None,
    ) -> None:
        self._runner = runner or run_tool
        self._finder = finder
        self._environ = environ
        self._renderer = renderer or Renderer(self._runner, finder)
        self._logger = get_logger("orchestrator")

    def run(self, settings: RunSettings) -> RunOutcome:
        root = self._resolve_input(settings.elf_file)
        require_tool("nm", "Function counting", self._finder)

        groups = GroupTable.from_substrings(settings.groups, settings.palette)
        locator = LibraryLocator(
            root.parent,
            runner=self._runner,
            environ=self._environ,
            standard_dirs=settings.search_dirs,
        )
        inspector = SymbolInspector(self._runner)

        dot_file = Path(settings.output)
        with dot_file.open("w", encoding="utf-8") as stream:
            emitter = DotEmitter(stream)
            emitter.open()
            walker = DependencyWalker(inspector, locator, emitter, groups)
            result = walker.walk(root, settings.depth)
            emitter.close()

        self._logger.info("File %s successfully created.", dot_file)
        self._logger.debug(
            "%d nodes, %d edges, %d unresolved",
            len(result.nodes),
            len(result.edges),
            len(result.unresolved),
        )

        outcome = RunOutcome(dot_file=dot_file, walk=result, image_file=settings.image)
        if settings.image is not None:
            outcome.image_created = self._renderer.render(dot_file, settings.image)
        else:
            self._logger.info("To visualize, use: dot -Tpng %s -o output.png", dot_file)
        return outcome

    @staticmethod
    def _resolve_input(elf_file: Path) -> Path:
        candidate = Path(elf_file).expanduser()
        try:
            resolved = candidate.resolve(strict=True)
        except (OSError, RuntimeError):
            resolved = None
        if resolved is None or not resolved.is_file():
            raise InputNotFoundError(
                f"Could not resolve absolute path for {elf_file} or file does not exist"
            )
        return resolved


__all__ = ["DEFAULT_DOT_FILE", "Orchestrator", "RunOutcome", "RunSettings"]
