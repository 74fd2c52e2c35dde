"""Shared fixtures: build small directory trees under tmp_path."""

from pathlib import Path
from typing import Dict, Union

import pytest

Content = Union[str, bytes]


def write_tree(root: Path, files: Dict[str, Content]) -> Path:
    """Create ``files`` (relative path -> content) below ``root``."""
    for name, content in files.items():
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, str):
            content = content.encode()
        path.write_bytes(content)
    return root


@pytest.fixture
def tree(tmp_path):
    """Factory fixture returning a function that populates tmp_path."""

    def _make(files: Dict[str, Content]) -> Path:
        return write_tree(tmp_path, files)

    return _make


@pytest.fixture
def sample_tree(tmp_path):
    """Three distinct samples plus one 6 byte copy of sample1.txt."""
    return write_tree(
        tmp_path,
        {
            "sample1.txt": "hello\n",
            "sample2.txt": "second sample\n",
            "sample3.txt": "world\n",
            "duplicate1.txt": "hello\n",
        },
    )


@pytest.fixture
def errors():
    """Collects (path, exception) pairs passed to on_error callbacks."""
    collected = []

    def _on_error(path, exc):
        collected.append((path, exc))

    _on_error.collected = collected
    return _on_error
