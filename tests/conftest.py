from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import pytest

from tests._fixtures.toolchain import FakeToolchain


@pytest.fixture
def toolchain(tmp_path: Path) -> FakeToolchain:
    """Provide fake binutils rooted at the pytest tmp_path."""
    return FakeToolchain(tmp_path)


@pytest.fixture(autouse=True)
def _reset_lddgraph_logger() -> Iterator[None]:
    """Undo configure_logging so caplog sees records from every test."""
    yield
    logger = logging.getLogger("lddgraph")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
