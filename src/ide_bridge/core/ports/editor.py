"""Structural view of a host application's live editor state.

A host (an editor embedding the bridge, or the in-memory workspace) implements
these protocols. Everything here is read from the model-access thread only.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, Protocol, TypeVar

T = TypeVar("T")


class HighlightSeverity(IntEnum):
    INFORMATION = 10
    WEAK_WARNING = 200
    WARNING = 300
    ERROR = 400


class ChangeType(Enum):
    NEW = "new"
    DELETED = "deleted"
    MOVED = "moved"
    MODIFICATION = "modification"


@dataclass(frozen=True)
class Highlight:
    """One analyzer result attached to a document; ``tooltip`` may carry HTML."""

    start_offset: int
    severity: int
    description: str | None = None
    tooltip: str | None = None


@dataclass(frozen=True)
class Change:
    change_type: ChangeType
    before_path: str | None = None
    after_path: str | None = None


class VirtualFile(Protocol):
    @property
    def path(self) -> str: ...

    @property
    def name(self) -> str: ...

    @property
    def extension(self) -> str: ...


class Document(Protocol):
    text: str
    language: str | None

    def line_number(self, offset: int) -> int: ...

    def line_start_offset(self, line: int) -> int: ...


class Editor(Protocol):
    document: Document
    caret_offset: int
    selection_start: int
    selection_end: int

    def has_selection(self) -> bool: ...

    def selected_text(self) -> str: ...


class Repository(Protocol):
    @property
    def root(self) -> str: ...

    def current_branch(self) -> str | None: ...

    def changes(self) -> Sequence[Change]: ...

    def untracked_paths(self) -> Sequence[str]: ...


class Project(Protocol):
    name: str

    def selected_editor(self) -> Editor | None: ...

    def selected_file(self) -> VirtualFile | None: ...

    def open_files(self) -> Sequence[VirtualFile]: ...

    def is_modified(self, file: VirtualFile) -> bool: ...

    def file_history(self) -> Sequence[VirtualFile]: ...

    def repositories(self) -> Sequence[Repository]: ...

    def highlights(self, document: Document) -> Sequence[Highlight]: ...


class EditorHost(Protocol):
    def open_projects(self) -> Sequence[Project]: ...


class ModelAccess(Protocol):
    def invoke_and_wait(self, fn: Callable[..., T], /, *args: Any) -> T: ...

    def shutdown(self) -> None: ...
