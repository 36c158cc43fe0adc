from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence
from pathlib import Path

from ide_bridge.core.ports.editor import Change, ChangeType

logger = logging.getLogger(__name__)


class GitCommandError(RuntimeError):
    pass


def _run_git(args: list[str], cwd: Path) -> subprocess.CompletedProcess[str]:
    return subprocess.run(
        ["git", "-C", str(cwd), *args],
        check=False,
        capture_output=True,
        text=True,
    )


def get_git_repo_root(start_dir: Path) -> Path | None:
    try:
        result = _run_git(["rev-parse", "--show-toplevel"], start_dir)
    except FileNotFoundError:
        logger.warning("git executable not found; no repository for %s", start_dir)
        return None
    if result.returncode != 0:
        return None
    root = result.stdout.strip()
    if not root:
        return None
    return Path(root)


def _change_type(code: str) -> ChangeType:
    if "R" in code:
        return ChangeType.MOVED
    if "A" in code or "C" in code:
        return ChangeType.NEW
    if "D" in code:
        return ChangeType.DELETED
    return ChangeType.MODIFICATION


def parse_porcelain(output: str, root: Path) -> tuple[list[Change], list[str]]:
    """Parse ``git status --porcelain=v1 -z`` output into tracked changes and untracked paths."""
    changes: list[Change] = []
    untracked: list[str] = []
    entries = output.split("\0")
    i = 0
    while i < len(entries):
        entry = entries[i]
        i += 1
        if len(entry) < 4:
            continue
        code, path = entry[:2], str(root / entry[3:])
        if code == "??":
            untracked.append(path)
        elif code == "!!":
            continue
        elif "R" in code or "C" in code:
            original = str(root / entries[i]) if i < len(entries) else None
            i += 1
            change_type = _change_type(code)
            before = original if change_type is ChangeType.MOVED else None
            changes.append(Change(change_type=change_type, before_path=before, after_path=path))
        else:
            change_type = _change_type(code)
            if change_type is ChangeType.DELETED:
                changes.append(Change(change_type=change_type, before_path=path))
            else:
                changes.append(Change(change_type=change_type, before_path=path, after_path=path))
    return changes, untracked


class GitCliRepository:
    """``Repository`` backed by the ``git`` executable.

    ``changes()`` runs one ``git status`` and keeps its untracked list for the
    next ``untracked_paths()`` call, so a status read sees a single instant.
    """

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root)
        self._pending_untracked: list[str] | None = None

    @property
    def root(self) -> str:
        return str(self._root)

    def current_branch(self) -> str | None:
        result = _run_git(["branch", "--show-current"], self._root)
        branch = result.stdout.strip() if result.returncode == 0 else ""
        return branch or None

    def _status(self) -> tuple[list[Change], list[str]]:
        result = _run_git(["status", "--porcelain=v1", "-z", "--untracked-files=all"], self._root)
        if result.returncode != 0:
            raise GitCommandError(f"git status failed in {self._root}: {result.stderr.strip()}")
        return parse_porcelain(result.stdout, self._root)

    def changes(self) -> Sequence[Change]:
        changes, self._pending_untracked = self._status()
        return changes

    def untracked_paths(self) -> Sequence[str]:
        untracked, self._pending_untracked = self._pending_untracked, None
        if untracked is None:
            untracked = self._status()[1]
        return untracked


def discover_repository(start_dir: str | Path) -> GitCliRepository | None:
    root = get_git_repo_root(Path(start_dir))
    if root is None:
        return None
    return GitCliRepository(root)
