import logging
from collections.abc import Generator

import pytest


@pytest.fixture(autouse=True)
def restore_root_logging() -> Generator[None]:
    """`configure_logging` replaces root handlers; undo it after each test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level

    yield

    root.handlers[:] = handlers
    root.setLevel(level)
