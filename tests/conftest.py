"""Shared fixtures and helpers for tests."""

import subprocess
from collections.abc import Callable
from pathlib import Path

import pytest

from scat.core.config import RenderConfig

_TESTS_ROOT = Path(__file__).parent


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" or "integration" based on directory
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_TESTS_ROOT)
        parts = rel.parts
        if parts and parts[0] == "integration":
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# Git helpers for integration tests
# ---------------------------------------------------------------------------


def _run_git(args: list[str], cwd: Path) -> str:
    result = subprocess.run(
        ["git", *args],
        cwd=cwd,
        check=True,
        capture_output=True,
        text=True,
    )
    return result.stdout.strip()


def _commit_all(repo: Path, message: str = "commit") -> None:
    _run_git(["add", "-A"], repo)
    _run_git(
        ["-c", "user.name=Test Author", "-c", "user.email=author@example.com", "commit", "-q", "-m", message],
        repo,
    )


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """Return an empty git repository in a temporary directory."""
    _run_git(["init", "-q"], tmp_path)
    _run_git(["config", "user.name", "Test Author"], tmp_path)
    _run_git(["config", "user.email", "author@example.com"], tmp_path)
    return tmp_path


@pytest.fixture
def commit_all() -> Callable[..., None]:
    """Return a helper that stages and commits everything in a repository."""
    return _commit_all


# ---------------------------------------------------------------------------
# Shared unit-test fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def make_config() -> Callable[..., RenderConfig]:
    """Build a RenderConfig with color on unless overridden."""

    def _make(**overrides: object) -> RenderConfig:
        values: dict[str, object] = {"color": True}
        values.update(overrides)
        return RenderConfig(**values)  # type: ignore[arg-type]

    return _make
