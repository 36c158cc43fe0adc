import logging
from collections.abc import Iterable
from pathlib import Path

from ide_bridge.workspace.git import discover_repository
from ide_bridge.workspace.memory import InMemoryWorkspace

logger = logging.getLogger(__name__)


def _read_text(file_path: Path) -> str:
    try:
        return file_path.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        return file_path.read_bytes().decode("utf-8", errors="replace")


def open_directory(
    directory: str | Path,
    files: Iterable[str | Path] = (),
    name: str | None = None,
) -> InMemoryWorkspace:
    """Open *directory* as the single project of a new workspace.

    Each of *files* is opened in a tab (relative paths resolve against the
    directory); the last one ends up focused. The enclosing git repository,
    if any, is attached.
    """
    root = Path(directory).resolve()
    if not root.is_dir():
        raise NotADirectoryError(f"Not a directory: {directory}")

    workspace = InMemoryWorkspace()
    project = workspace.open_project(name or root.name, str(root))

    for entry in files:
        file_path = Path(entry)
        if not file_path.is_absolute():
            file_path = root / file_path
        file_path = file_path.resolve()
        if not file_path.is_file():
            raise FileNotFoundError(f"File not found: {entry}")
        project.open_file(file_path.as_posix(), _read_text(file_path))
        logger.debug("Opened %s", file_path)

    repository = discover_repository(root)
    if repository is not None:
        project.add_repository(repository)
        logger.info("Attached git repository at %s", repository.root)

    return workspace
