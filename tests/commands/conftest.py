"""Fixtures for CLI command tests."""

from __future__ import annotations

import logging
from collections.abc import Generator

import pytest


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Undo the handler swap ``AppContext`` performs on every invocation."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    stowr_level = logging.getLogger("stowr").level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    logging.getLogger("stowr").setLevel(stowr_level)
