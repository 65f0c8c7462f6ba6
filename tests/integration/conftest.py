"""Integration-test fixtures isolating CLI runs from the host environment."""

from __future__ import annotations

import os

import pytest


@pytest.fixture(autouse=True)
def _clear_novelshelf_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove `NOVELSHELF_*` variables so commands use default configuration."""

    for key in list(os.environ):
        if key.startswith("NOVELSHELF_"):
            monkeypatch.delenv(key)
