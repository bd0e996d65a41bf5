from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import pytest

from tests._fixtures.style_tree import StyleTreeBuilder


@pytest.fixture
def style_tree(tmp_path: Path) -> StyleTreeBuilder:
    """Provide a reusable stylesheet tree rooted at the pytest tmp_path."""
    return StyleTreeBuilder(tmp_path)


@pytest.fixture(autouse=True)
def _reset_css2var_logger() -> Iterator[None]:
    """Undo CLI logging configuration so caplog keeps seeing css2var records."""
    yield
    logger = logging.getLogger("css2var")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
