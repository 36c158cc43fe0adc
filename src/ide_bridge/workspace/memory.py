from __future__ import annotations

import bisect
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import PurePath

from ide_bridge.core.ports.editor import Change, Highlight, Repository


@dataclass(frozen=True)
class InMemoryFile:
    path: str

    @property
    def name(self) -> str:
        return PurePath(self.path).name

    @property
    def extension(self) -> str:
        return PurePath(self.path).suffix.lstrip(".")


class InMemoryDocument:
    """Text buffer with ``\\n`` line separators and the analyzer markup attached to it."""

    def __init__(self, text: str = "", language: str | None = None) -> None:
        self.language = language
        self.markup: list[Highlight] = []
        self._text = ""
        self._line_starts: list[int] = [0]
        self.text = text

    @property
    def text(self) -> str:
        return self._text

    @text.setter
    def text(self, value: str) -> None:
        self._text = value
        self._line_starts = [0] + [i + 1 for i, ch in enumerate(value) if ch == "\n"]

    @property
    def line_count(self) -> int:
        return len(self._line_starts)

    def line_number(self, offset: int) -> int:
        offset = max(0, min(offset, len(self._text)))
        return bisect.bisect_right(self._line_starts, offset) - 1

    def line_start_offset(self, line: int) -> int:
        return self._line_starts[line]

    def offset_of(self, line: int, column: int) -> int:
        """Character offset of a 1-indexed (line, column)."""
        return self._line_starts[line - 1] + column - 1


@dataclass
class InMemoryEditor:
    document: InMemoryDocument
    caret_offset: int = 0
    selection_start: int = 0
    selection_end: int = 0
    modified: bool = False

    def has_selection(self) -> bool:
        return self.selection_end > self.selection_start

    def selected_text(self) -> str:
        if not self.has_selection():
            return ""
        return self.document.text[self.selection_start : self.selection_end]

    def move_caret(self, offset: int) -> None:
        self.caret_offset = offset
        self.selection_start = self.selection_end = offset

    def select(self, start: int, end: int) -> None:
        self.selection_start, self.selection_end = min(start, end), max(start, end)
        self.caret_offset = end


@dataclass
class InMemoryRepository:
    root: str
    branch: str | None = None
    pending: list[Change] = field(default_factory=list)
    untracked: list[str] = field(default_factory=list)

    def current_branch(self) -> str | None:
        return self.branch

    def changes(self) -> Sequence[Change]:
        return list(self.pending)

    def untracked_paths(self) -> Sequence[str]:
        return list(self.untracked)


class InMemoryProject:
    """Open tabs, focus, history and repositories of one project.

    Tabs keep insertion order; history is most-recent-first and survives
    closing a tab.
    """

    def __init__(self, name: str, base_path: str = "") -> None:
        self.name = name
        self.base_path = base_path
        self._editors: dict[InMemoryFile, InMemoryEditor] = {}
        self._selected: InMemoryFile | None = None
        self._history: list[InMemoryFile] = []
        self._repositories: list[Repository] = []

    def open_file(
        self,
        file: InMemoryFile | str,
        text: str = "",
        *,
        language: str | None = None,
        focus: bool = True,
    ) -> InMemoryEditor:
        vf = InMemoryFile(file) if isinstance(file, str) else file
        editor = self._editors.get(vf)
        if editor is None:
            editor = InMemoryEditor(InMemoryDocument(text, language=language))
            self._editors[vf] = editor
        if focus:
            self.focus(vf)
        return editor

    def close_file(self, file: InMemoryFile | str) -> None:
        vf = InMemoryFile(file) if isinstance(file, str) else file
        self._editors.pop(vf, None)
        if self._selected == vf:
            self._selected = next(iter(self._editors), None)

    def focus(self, file: InMemoryFile | str | None) -> None:
        if file is None:
            self._selected = None
            return
        vf = InMemoryFile(file) if isinstance(file, str) else file
        if vf not in self._editors:
            raise KeyError(f"File is not open: {vf.path}")
        self._selected = vf
        if vf in self._history:
            self._history.remove(vf)
        self._history.insert(0, vf)

    def editor_for(self, file: InMemoryFile | str) -> InMemoryEditor:
        vf = InMemoryFile(file) if isinstance(file, str) else file
        return self._editors[vf]

    def add_repository(self, repository: Repository) -> None:
        self._repositories.append(repository)

    # --- Project protocol ---

    def selected_editor(self) -> InMemoryEditor | None:
        return self._editors.get(self._selected) if self._selected is not None else None

    def selected_file(self) -> InMemoryFile | None:
        return self._selected

    def open_files(self) -> Sequence[InMemoryFile]:
        return list(self._editors)

    def is_modified(self, file: InMemoryFile) -> bool:
        editor = self._editors.get(file)
        return editor is not None and editor.modified

    def file_history(self) -> Sequence[InMemoryFile]:
        return list(self._history)

    def repositories(self) -> Sequence[Repository]:
        return list(self._repositories)

    def highlights(self, document: InMemoryDocument) -> Sequence[Highlight]:
        return list(document.markup)


class InMemoryWorkspace:
    """``EditorHost`` backed by plain Python objects; projects keep opening order."""

    def __init__(self) -> None:
        self.projects: list[InMemoryProject] = []

    def open_project(self, name: str, base_path: str = "") -> InMemoryProject:
        project = InMemoryProject(name, base_path)
        self.projects.append(project)
        return project

    def close_project(self, project: InMemoryProject) -> None:
        self.projects.remove(project)

    def open_projects(self) -> Sequence[InMemoryProject]:
        return list(self.projects)
