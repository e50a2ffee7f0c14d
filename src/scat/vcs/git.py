import logging
import os
import subprocess
from collections.abc import Sequence
from pathlib import Path

from scat.core.changes import classify_changes
from scat.models import ChangeTag, LineChanges

logger = logging.getLogger(__name__)


def _run_git(args: list[str]) -> subprocess.CompletedProcess[bytes] | None:
    try:
        return subprocess.run(["git", *args], check=False, capture_output=True)
    except (OSError, subprocess.SubprocessError) as exc:
        logger.debug("Unable to run git %s: %s", args[:3], exc)
        return None


def get_git_repo_root(start_dir: Path) -> Path | None:
    result = _run_git(["-C", str(start_dir), "rev-parse", "--show-toplevel"])
    if result is None or result.returncode != 0:
        return None
    # git prints the path as raw bytes, which need not be valid UTF-8.
    root = os.fsdecode(result.stdout).rstrip("\n")
    if not root:
        return None
    return Path(root)


def read_committed_blob(file_path: Path) -> bytes | None:
    """Return the content of *file_path* at HEAD, or None when there is none.

    Outside a repository, untracked files, repositories without commits and
    any git failure all read as "no committed version".
    """
    try:
        resolved = file_path.resolve()
    except OSError:
        return None
    repo_root = get_git_repo_root(resolved.parent)
    if repo_root is None:
        return None
    try:
        rel_path = resolved.relative_to(repo_root.resolve())
    except ValueError:
        return None
    result = _run_git(["-C", str(repo_root), "show", f"HEAD:{rel_path.as_posix()}"])
    if result is None or result.returncode != 0:
        logger.debug("No committed version of %s", rel_path)
        return None
    return result.stdout


def split_blob_lines(blob: bytes) -> list[bytes]:
    if not blob:
        return []
    lines = blob.split(b"\n")
    if blob.endswith(b"\n"):
        lines.pop()
    return lines


def line_changes_for(file_path: Path, current_lines: Sequence[bytes]) -> LineChanges:
    blob = read_committed_blob(file_path)
    committed = split_blob_lines(blob) if blob is not None else None
    changes = classify_changes(committed, current_lines)
    if committed is not None:
        logger.info(
            "%s: %d changed line(s), %d deletion marker(s)",
            file_path,
            sum(1 for tag in changes.tags if tag is not ChangeTag.UNCHANGED),
            len(changes.deletions),
        )
    return changes
