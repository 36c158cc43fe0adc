"""Turn live host state into immutable snapshot DTOs.

Every public read returns the DTO's empty form when the current project,
editor or repository is missing, and also when reading host state raises.
Reads must run on the model-access thread (see ``ide_bridge.core.owner``).
"""

from __future__ import annotations

import functools
import logging
import re
from collections.abc import Callable, Iterable
from typing import ParamSpec, TypeVar

from ide_bridge.config import DEFAULT_RECENT_FILES_LIMIT
from ide_bridge.core.languages import detect_language_from_path, display_name_for_path
from ide_bridge.core.ports.editor import ChangeType, Document, EditorHost, HighlightSeverity, Project
from ide_bridge.core.symbols import resolve_symbol
from ide_bridge.models import (
    ChangeStatus,
    Diagnostic,
    DiagnosticSet,
    GitChange,
    GitStatus,
    OpenFile,
    OpenFiles,
    RecentFile,
    RecentFiles,
    Selection,
    Severity,
    Symbol,
)

logger = logging.getLogger(__name__)

P = ParamSpec("P")
DtoT = TypeVar("DtoT")

DETACHED_BRANCH = "HEAD"

_MARKUP_RE = re.compile(r"<[^>]*>")

_CHANGE_STATUS = {
    ChangeType.NEW: ChangeStatus.ADDED,
    ChangeType.DELETED: ChangeStatus.DELETED,
    ChangeType.MOVED: ChangeStatus.MOVED,
}


def _or_empty(empty: Callable[[], DtoT]) -> Callable[[Callable[P, DtoT | None]], Callable[P, DtoT]]:
    """Map ``None`` (no context) and any raised fault to the empty form; faults are logged."""

    def decorator(read: Callable[P, DtoT | None]) -> Callable[P, DtoT]:
        @functools.wraps(read)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> DtoT:
            try:
                result = read(*args, **kwargs)
            except Exception:
                logger.exception("Reading %s failed; returning empty snapshot", read.__name__)
                return empty()
            return empty() if result is None else result

        return wrapper

    return decorator


def severity_for_level(level: int) -> Severity | None:
    if level >= HighlightSeverity.ERROR:
        return Severity.ERROR
    if level >= HighlightSeverity.WARNING:
        return Severity.WARNING
    if level >= HighlightSeverity.INFORMATION:
        return Severity.INFO
    return None


def strip_markup(text: str | None) -> str | None:
    return _MARKUP_RE.sub("", text) if text is not None else None


def order_diagnostics(problems: Iterable[Diagnostic]) -> list[Diagnostic]:
    """Drop repeats of (line, column, message), then sort by severity rank and line; ties keep input order."""
    seen: set[tuple[int, int, str]] = set()
    unique: list[Diagnostic] = []
    for problem in problems:
        key = (problem.line, problem.column, problem.message)
        if key in seen:
            continue
        seen.add(key)
        unique.append(problem)
    return sorted(unique, key=lambda p: (p.severity.rank, p.line))


def position_of(document: Document, offset: int) -> tuple[int, int]:
    """1-indexed (line, column) of a character offset."""
    line = document.line_number(offset)
    return line + 1, offset - document.line_start_offset(line) + 1


class StateExtractor:
    """Read-only snapshots of the first open project and its focused editor."""

    def __init__(self, host: EditorHost, recent_files_limit: int = DEFAULT_RECENT_FILES_LIMIT) -> None:
        self._host = host
        self._recent_files_limit = recent_files_limit

    def _project(self) -> Project | None:
        projects = self._host.open_projects()
        return projects[0] if projects else None

    @_or_empty(Selection.empty)
    def selection(self) -> Selection | None:
        project = self._project()
        if project is None:
            return None
        editor = project.selected_editor()
        if editor is None:
            return None

        document = editor.document
        if editor.has_selection():
            start_offset, end_offset = editor.selection_start, editor.selection_end
            text = editor.selected_text()
        else:
            start_offset = end_offset = editor.caret_offset
            text = ""

        start_line, start_column = position_of(document, start_offset)
        end_line, end_column = position_of(document, end_offset)

        selected = project.selected_file()
        file_path = selected.path if selected is not None else ""

        return Selection(
            text=text,
            file_path=file_path,
            start_line=start_line,
            end_line=end_line,
            start_column=start_column,
            end_column=end_column,
            language=document.language or display_name_for_path(file_path),
            project_name=project.name,
        )

    @_or_empty(DiagnosticSet.empty)
    def diagnostics(self) -> DiagnosticSet | None:
        project = self._project()
        if project is None:
            return None
        editor = project.selected_editor()
        if editor is None:
            return None

        document = editor.document
        selected = project.selected_file()

        problems: list[Diagnostic] = []
        for info in project.highlights(document):
            severity = severity_for_level(info.severity)
            if severity is None:
                continue
            tooltip = strip_markup(info.tooltip)
            message = info.description or tooltip
            if not message:
                continue
            line, column = position_of(document, info.start_offset)
            problems.append(
                Diagnostic(
                    message=message,
                    severity=severity,
                    line=line,
                    column=column,
                    description=tooltip or "",
                )
            )

        return DiagnosticSet(
            file_path=selected.path if selected is not None else "",
            problems=order_diagnostics(problems),
        )

    @_or_empty(OpenFiles.empty)
    def open_files(self) -> OpenFiles | None:
        project = self._project()
        if project is None:
            return None

        selected = project.selected_file()
        selected_path = selected.path if selected is not None else None
        files = [
            OpenFile(
                file_path=vf.path,
                file_name=vf.name,
                is_active=vf.path == selected_path,
                is_modified=project.is_modified(vf),
            )
            for vf in project.open_files()
        ]
        return OpenFiles(project_name=project.name, files=files)

    @_or_empty(GitStatus.empty)
    def git_status(self) -> GitStatus | None:
        project = self._project()
        if project is None:
            return None
        repositories = project.repositories()
        if not repositories:
            return None
        repo = repositories[0]

        changes: list[GitChange] = []
        for change in repo.changes():
            file_path = change.after_path or change.before_path
            if not file_path:
                continue
            status = _CHANGE_STATUS.get(change.change_type, ChangeStatus.MODIFIED)
            changes.append(GitChange(file_path=file_path, status=status))
        changes.extend(GitChange(file_path=path, status=ChangeStatus.UNTRACKED) for path in repo.untracked_paths())

        return GitStatus(
            branch=repo.current_branch() or DETACHED_BRANCH,
            repo_root=repo.root,
            changes=changes,
        )

    @_or_empty(RecentFiles.empty)
    def recent_files(self, limit: int | None = None) -> RecentFiles | None:
        project = self._project()
        if project is None:
            return None

        limit = self._recent_files_limit if limit is None else limit
        history = list(project.file_history())[: max(limit, 0)]
        files = [RecentFile(file_path=vf.path, file_name=vf.name) for vf in history]
        return RecentFiles(project_name=project.name, files=files)

    @_or_empty(Symbol.empty)
    def symbol_at_cursor(self) -> Symbol | None:
        project = self._project()
        if project is None:
            return None
        editor = project.selected_editor()
        if editor is None:
            return None
        selected = project.selected_file()
        if selected is None:
            return None

        language = detect_language_from_path(selected.path)
        if language is None:
            return None
        resolved = resolve_symbol(editor.document.text, editor.caret_offset, language)
        if resolved is None:
            return None

        return Symbol(
            name=resolved.name,
            kind=resolved.kind.value,
            file_path=selected.path,
            line=resolved.line,
            text=resolved.text,
        )
