"""Shared pytest fixtures for headerlines tests."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator

import pytest


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep ambient ``HEADERLINES_*`` variables out of settings tests."""
    for name in list(os.environ):
        if name.startswith("HEADERLINES_"):
            monkeypatch.delenv(name)


@pytest.fixture(autouse=True)
def _restore_logging() -> Iterator[None]:
    """Restore the ``headerlines`` logger after each test."""
    pkg = logging.getLogger("headerlines")
    handlers = pkg.handlers[:]
    level = pkg.level
    propagate = pkg.propagate
    yield
    pkg.handlers = handlers
    pkg.setLevel(level)
    pkg.propagate = propagate
