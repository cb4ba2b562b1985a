from __future__ import annotations

import sys
from pathlib import Path
from typing import Iterator

import pytest

from tests._fixtures.library_builder import LibraryBuilder


@pytest.fixture
def library_builder(tmp_path: Path) -> Iterator[LibraryBuilder]:
    """Provide a library builder and unload every module it registered."""
    before = set(sys.modules)
    yield LibraryBuilder(tmp_path)
    for name in set(sys.modules) - before:
        sys.modules.pop(name, None)
