"""Shared-library path resolution."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, Dict, Mapping, Optional, Sequence

from .logging import get_logger
from .tools import Runner, ToolError, run_tool

Resolver = Callable[[str], Optional[Path]]

STANDARD_LIBRARY_DIRS: Sequence[str] = (
    "/lib",
    "/lib64",
    "/usr/lib",
    "/usr/lib64",
    "/usr/lib32",
    "/mnt",
)

SEARCH_PATH_VARIABLE = "LD_LIBRARY_PATH"

_LOGGER = get_logger("locator")


def parse_ldconfig_cache(output: str) -> Dict[str, str]:
    """Map sonames to paths from ``ldconfig -p`` output, keeping the first entry."""
    entries: Dict[str, str] = {}
    for line in output.splitlines():
        if "=>" not in line:
            continue
        left, right = line.split("=>", 1)
        fields = left.split()
        path = right.strip()
        if not fields or not path:
            continue
        entries.setdefault(fields[0], path)
    return entries


class LibraryLocator:
    """Resolves a soname by trying each resolver in turn.

    The default chain is: linker cache, ``LD_LIBRARY_PATH``, the standard
    library directories, then the directory of the analysed binary.
    """

    def __init__(
        self,
        binary_dir: Path | str,
        *,
        runner: Runner | None = None,
        environ: Mapping[str, str] | None = None,
        standard_dirs: Sequence[str] | None = None,
    ) -> None:
        self._binary_dir = Path(binary_dir)
        self._runner = runner or run_tool
        self._environ = os.environ if environ is None else environ
        self._standard_dirs = tuple(STANDARD_LIBRARY_DIRS if standard_dirs is None else standard_dirs)
        self._cache: Dict[str, str] | None = None
        self._resolvers: Sequence[Resolver] = (
            self._from_linker_cache,
            self._from_search_path,
            self._from_standard_dirs,
            self._from_binary_dir,
        )

    def find(self, soname: str) -> Optional[Path]:
        """Return the first existing file for ``soname`` or None when unresolved."""
        for resolver in self._resolvers:
            found = resolver(soname)
            if found is not None:
                _LOGGER.debug("Resolved %s via %s: %s", soname, resolver.__name__, found)
                return found
        return None

    # ------------------------------------------------------------------
    # Resolvers

    def _from_linker_cache(self, soname: str) -> Optional[Path]:
        path = self._linker_cache().get(soname)
        if path is None:
            return None
        return _existing_file(Path(path))

    def _from_search_path(self, soname: str) -> Optional[Path]:
        value = self._environ.get(SEARCH_PATH_VARIABLE, "")
        directories = [entry for entry in value.split(":") if entry]
        return _first_in(directories, soname)

    def _from_standard_dirs(self, soname: str) -> Optional[Path]:
        return _first_in(self._standard_dirs, soname)

    def _from_binary_dir(self, soname: str) -> Optional[Path]:
        return _existing_file(self._binary_dir / soname)

    # ------------------------------------------------------------------
    # Helpers

    def _linker_cache(self) -> Dict[str, str]:
        if self._cache is None:
            try:
                output = self._runner(["ldconfig", "-p"])
            except ToolError as exc:
                _LOGGER.debug("Linker cache unavailable: %s", exc)
                output = ""
            self._cache = parse_ldconfig_cache(output)
        return self._cache


def _first_in(directories: Sequence[str], soname: str) -> Optional[Path]:
    for directory in directories:
        found = _existing_file(Path(directory) / soname)
        if found is not None:
            return found
    return None


def _existing_file(path: Path) -> Optional[Path]:
    return path if path.is_file() else None


__all__ = ["LibraryLocator", "STANDARD_LIBRARY_DIRS", "parse_ldconfig_cache"]
