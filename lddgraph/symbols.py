"""Symbol-table and dynamic-section inspection via binutils."""

from __future__ import annotations

import re
from pathlib import Path
from typing import List, Optional

from .logging import get_logger
from .tools import Runner, ToolError, run_tool

_LOGGER = get_logger("symbols")

_NEEDED_PATTERN = re.compile(r"\(NEEDED\)\s+Shared library:\s*\[(?P<soname>[^\]]+)\]")


def strip_symbol_version(name: str) -> str:
    """Drop the ``@VERSION``/``@@VERSION`` suffix newer ``nm`` releases print."""
    return name.split("@", 1)[0]


def _text_symbols(output: str) -> List[str]:
    names: List[str] = []
    for line in output.splitlines():
        fields = line.split()
        if len(fields) >= 3 and fields[-2] == "T":
            names.append(fields[-1])
    return names


def _last_fields(output: str) -> List[str]:
    return [line.split()[-1] for line in output.splitlines() if line.strip()]


class SymbolInspector:
    """Reads exported and imported function names from ELF files with ``nm -D``."""

    def __init__(self, runner: Runner | None = None) -> None:
        self._runner = runner or run_tool
        self._readelf_failed = False

    def count_exported_functions(self, path: Path | str) -> Optional[int]:
        """Return the number of exported text symbols, or None when ``nm`` fails."""
        try:
            output = self._runner(["nm", "-D", str(path)])
        except ToolError as exc:
            _LOGGER.debug("Symbol table unavailable for %s: %s", path, exc)
            return None
        return len(_text_symbols(output))

    def undefined_symbols(self, path: Path | str) -> List[str]:
        output = self._read(["nm", "-D", "--undefined-only", str(path)])
        return _last_fields(output)

    def defined_text_symbols(self, path: Path | str) -> List[str]:
        output = self._read(["nm", "-D", "--defined-only", str(path)])
        return _text_symbols(output)

    def count_called_functions(self, caller: Path | str, callee: Path | str) -> int:
        """Count names ``caller`` imports that ``callee`` exports as text symbols.

        This is a name-intersection estimate, not a call graph.
        """
        imports = {strip_symbol_version(name) for name in self.undefined_symbols(caller)}
        if not imports:
            return 0
        exports = {strip_symbol_version(name) for name in self.defined_text_symbols(callee)}
        return len(imports & exports)

    def needed_libraries(self, path: Path | str) -> List[str]:
        """Return the sonames listed in the NEEDED entries, in file order."""
        try:
            output = self._runner(["readelf", "-d", str(path)])
        except ToolError as exc:
            if self._readelf_failed:
                _LOGGER.debug("%s", exc)
            else:
                self._readelf_failed = True
                _LOGGER.warning("Could not read the dynamic section of %s: %s", path, exc)
            return []
        return [match.group("soname") for match in _NEEDED_PATTERN.finditer(output)]

    def _read(self, args: List[str]) -> str:
        try:
            return self._runner(args)
        except ToolError as exc:
            _LOGGER.debug("%s", exc)
            return ""


__all__ = ["SymbolInspector", "strip_symbol_version"]
