"""
conftest.py
-----------
Shared pytest fixtures for Counterpart tests.

Provides fixtures for:
- A fake repository checkout following the default layout
- Resolved repository paths and a validator bound to them
"""
import pytest
from pathlib import Path

from counterpart.core.config import RepoLayout
from counterpart.validators.repo import RepoValidator


# ----- Repository Fixtures -----

@pytest.fixture
def layout():
    """Default repository layout."""
    return RepoLayout()


@pytest.fixture
def repo_root(tmp_path, layout):
    """Repository checkout with every layout directory present and empty."""
    root = tmp_path / "repo"
    for rel in (layout.tables, layout.policies, layout.functions, layout.schemas, layout.lib):
        (root / rel).mkdir(parents=True)
    return root


@pytest.fixture
def repo_paths(repo_root, layout):
    """Resolved directories of the fake repository."""
    return layout.resolve(repo_root)


@pytest.fixture
def validator(repo_paths):
    """RepoValidator over the fake repository, without logging."""
    return RepoValidator(repo_paths)


@pytest.fixture
def write_file():
    """Write a file (creating parents) and return its path."""

    def _write(path: Path, content: str = "-- content\n") -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write
