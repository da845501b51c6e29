from __future__ import annotations

import io

import pytest
from rich.console import Console


@pytest.fixture
def stderr() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def console(stderr: io.StringIO) -> Console:
    return Console(file=stderr, force_terminal=False, no_color=True, width=200)
