"""Unit tests for the snapshot extractor."""

from collections.abc import Sequence

import pytest

from ide_bridge.core.extract import (
    StateExtractor,
    order_diagnostics,
    severity_for_level,
    strip_markup,
)
from ide_bridge.core.ports.editor import Change, ChangeType, Highlight, HighlightSeverity
from ide_bridge.models import (
    ChangeStatus,
    Diagnostic,
    DiagnosticSet,
    GitStatus,
    OpenFiles,
    RecentFiles,
    Selection,
    Severity,
    Symbol,
)
from ide_bridge.workspace.memory import InMemoryProject, InMemoryRepository, InMemoryWorkspace


class _BrokenHost:
    def open_projects(self) -> Sequence[InMemoryProject]:
        raise RuntimeError("model is being rebuilt")


class _BrokenRepository(InMemoryRepository):
    def changes(self) -> Sequence[Change]:
        raise RuntimeError("index locked")


@pytest.fixture
def broken() -> StateExtractor:
    return StateExtractor(_BrokenHost())  # type: ignore[arg-type]


class TestSelection:
    def test_multi_line_selection(self, project: InMemoryProject, extractor: StateExtractor, js_source: str) -> None:
        editor = project.open_file("/work/demo/src/app.js", js_source)
        doc = editor.document
        editor.select(doc.offset_of(10, 5), doc.offset_of(12, 2))

        selection = extractor.selection()

        assert selection.text == "return greet(who);\n  }\n}"
        assert (selection.start_line, selection.start_column) == (10, 5)
        assert (selection.end_line, selection.end_column) == (12, 2)
        assert selection.language == "JavaScript"
        assert selection.file_path == "/work/demo/src/app.js"
        assert selection.project_name == "demo"

    def test_caret_without_selection(self, project: InMemoryProject, extractor: StateExtractor, js_source: str) -> None:
        editor = project.open_file("/work/demo/src/app.js", js_source)
        editor.move_caret(editor.document.offset_of(5, 3))

        selection = extractor.selection()

        assert selection.text == ""
        assert (selection.start_line, selection.start_column) == (5, 3)
        assert (selection.end_line, selection.end_column) == (5, 3)

    def test_document_language_wins_over_extension(
        self, project: InMemoryProject, extractor: StateExtractor
    ) -> None:
        project.open_file("/work/demo/Jenkinsfile", "node {}", language="Groovy")
        assert extractor.selection().language == "Groovy"

    def test_unknown_extension_falls_back_to_upper_case(
        self, project: InMemoryProject, extractor: StateExtractor
    ) -> None:
        project.open_file("/work/demo/notes.xyz", "hello")
        assert extractor.selection().language == "XYZ"

    def test_no_project(self, extractor: StateExtractor) -> None:
        assert extractor.selection() == Selection.empty()

    def test_no_editor(self, project: InMemoryProject, extractor: StateExtractor) -> None:
        assert extractor.selection() == Selection.empty()

    def test_host_fault_yields_empty(self, broken: StateExtractor) -> None:
        assert broken.selection() == Selection.empty()

    def test_first_project_is_current(self, workspace: InMemoryWorkspace, extractor: StateExtractor) -> None:
        first = workspace.open_project("first")
        second = workspace.open_project("second")
        first.open_file("/a.py", "a = 1")
        second.open_file("/b.py", "b = 2")
        assert extractor.selection().project_name == "first"


class TestDiagnostics:
    def _open(self, project: InMemoryProject, *markup: Highlight) -> None:
        editor = project.open_file("/work/demo/main.py", "x = 1\n" * 10)
        editor.document.markup.extend(markup)

    def _at(self, project: InMemoryProject, line: int) -> int:
        return project.editor_for("/work/demo/main.py").document.offset_of(line, 1)

    def test_ordering_and_deduplication(self, project: InMemoryProject, extractor: StateExtractor) -> None:
        self._open(project)
        markup = project.editor_for("/work/demo/main.py").document.markup
        markup.extend(
            [
                Highlight(self._at(project, 7), HighlightSeverity.ERROR, "error seven"),
                Highlight(self._at(project, 3), HighlightSeverity.ERROR, "error three"),
                Highlight(self._at(project, 7), HighlightSeverity.WARNING, "warning seven"),
                Highlight(self._at(project, 3), HighlightSeverity.ERROR, "error three"),
            ]
        )

        problems = extractor.diagnostics().problems

        assert [(p.severity, p.line, p.message) for p in problems] == [
            (Severity.ERROR, 3, "error three"),
            (Severity.ERROR, 7, "error seven"),
            (Severity.WARNING, 7, "warning seven"),
        ]

    def test_tooltip_markup_is_stripped(self, project: InMemoryProject, extractor: StateExtractor) -> None:
        self._open(project, Highlight(2, HighlightSeverity.ERROR, tooltip="<html><b>Unresolved</b> name</html>"))

        (problem,) = extractor.diagnostics().problems

        assert problem.message == "Unresolved name"
        assert problem.description == "Unresolved name"
        assert (problem.line, problem.column) == (1, 3)

    def test_description_preferred_over_tooltip(self, project: InMemoryProject, extractor: StateExtractor) -> None:
        self._open(project, Highlight(0, HighlightSeverity.WARNING, "short", "<p>long form</p>"))

        (problem,) = extractor.diagnostics().problems

        assert problem.message == "short"
        assert problem.description == "long form"

    def test_entries_without_message_are_dropped(self, project: InMemoryProject, extractor: StateExtractor) -> None:
        self._open(project, Highlight(0, HighlightSeverity.ERROR))
        assert extractor.diagnostics().problems == []

    def test_levels_below_information_are_dropped(
        self, project: InMemoryProject, extractor: StateExtractor
    ) -> None:
        self._open(project, Highlight(0, 5, "syntax colouring"))
        assert extractor.diagnostics().problems == []

    def test_file_path_of_focused_editor(self, project: InMemoryProject, extractor: StateExtractor) -> None:
        self._open(project)
        assert extractor.diagnostics() == DiagnosticSet(file_path="/work/demo/main.py", problems=[])

    def test_no_editor(self, project: InMemoryProject, extractor: StateExtractor) -> None:
        assert extractor.diagnostics() == DiagnosticSet.empty()

    def test_host_fault_yields_empty(self, broken: StateExtractor) -> None:
        assert broken.diagnostics() == DiagnosticSet.empty()


class TestSeverityMapping:
    @pytest.mark.parametrize(
        ("level", "expected"),
        [
            (HighlightSeverity.ERROR, Severity.ERROR),
            (500, Severity.ERROR),
            (HighlightSeverity.WARNING, Severity.WARNING),
            (HighlightSeverity.WEAK_WARNING, Severity.INFO),
            (HighlightSeverity.INFORMATION, Severity.INFO),
            (9, None),
        ],
    )
    def test_levels(self, level: int, expected: Severity | None) -> None:
        assert severity_for_level(level) is expected

    def test_strip_markup(self) -> None:
        assert strip_markup("<a href='x'>link</a> text") == "link text"
        assert strip_markup(None) is None

    def test_order_is_stable_for_equal_keys(self) -> None:
        a = Diagnostic(message="a", severity=Severity.INFO, line=2, column=5)
        b = Diagnostic(message="b", severity=Severity.INFO, line=2, column=1)
        assert order_diagnostics([a, b]) == [a, b]


class TestOpenFiles:
    def test_marks_active_and_modified(self, project: InMemoryProject, extractor: StateExtractor) -> None:
        project.open_file("/work/demo/a.py", focus=False)
        project.open_file("/work/demo/b.py").modified = True
        project.open_file("/work/demo/c.py", focus=False)

        snapshot = extractor.open_files()

        assert snapshot.project_name == "demo"
        assert [(f.file_name, f.is_active, f.is_modified) for f in snapshot.files] == [
            ("a.py", False, False),
            ("b.py", True, True),
            ("c.py", False, False),
        ]

    def test_project_without_tabs(self, project: InMemoryProject, extractor: StateExtractor) -> None:
        assert extractor.open_files() == OpenFiles(project_name="demo", files=[])

    def test_no_project(self, extractor: StateExtractor) -> None:
        assert extractor.open_files() == OpenFiles.empty()

    def test_host_fault_yields_empty(self, broken: StateExtractor) -> None:
        assert broken.open_files() == OpenFiles.empty()


class TestGitStatus:
    def test_changes_and_untracked(self, project: InMemoryProject, extractor: StateExtractor) -> None:
        project.add_repository(
            InMemoryRepository(
                root="/work/demo",
                branch="feature/x",
                pending=[
                    Change(ChangeType.MODIFICATION, "/work/demo/a.py", "/work/demo/a.py"),
                    Change(ChangeType.NEW, after_path="/work/demo/b.py"),
                    Change(ChangeType.DELETED, before_path="/work/demo/c.py"),
                    Change(ChangeType.MOVED, "/work/demo/old.py", "/work/demo/new.py"),
                ],
                untracked=["/work/demo/scratch.txt"],
            )
        )

        status = extractor.git_status()

        assert status.branch == "feature/x"
        assert status.repo_root == "/work/demo"
        assert [(c.file_path, c.status) for c in status.changes] == [
            ("/work/demo/a.py", ChangeStatus.MODIFIED),
            ("/work/demo/b.py", ChangeStatus.ADDED),
            ("/work/demo/c.py", ChangeStatus.DELETED),
            ("/work/demo/new.py", ChangeStatus.MOVED),
            ("/work/demo/scratch.txt", ChangeStatus.UNTRACKED),
        ]

    def test_detached_head(self, project: InMemoryProject, extractor: StateExtractor) -> None:
        project.add_repository(InMemoryRepository(root="/work/demo"))
        assert extractor.git_status() == GitStatus(branch="HEAD", repo_root="/work/demo", changes=[])

    def test_changes_without_paths_are_skipped(self, project: InMemoryProject, extractor: StateExtractor) -> None:
        project.add_repository(InMemoryRepository(root="/r", branch="main", pending=[Change(ChangeType.NEW)]))
        assert extractor.git_status().changes == []

    def test_first_repository_is_used(self, project: InMemoryProject, extractor: StateExtractor) -> None:
        project.add_repository(InMemoryRepository(root="/first", branch="main"))
        project.add_repository(InMemoryRepository(root="/second", branch="dev"))
        assert extractor.git_status().repo_root == "/first"

    def test_no_repository(self, project: InMemoryProject, extractor: StateExtractor) -> None:
        assert extractor.git_status() == GitStatus.empty()

    def test_repository_fault_yields_empty(self, project: InMemoryProject, extractor: StateExtractor) -> None:
        project.add_repository(_BrokenRepository(root="/r", branch="main"))
        assert extractor.git_status() == GitStatus.empty()


class TestRecentFiles:
    def test_most_recent_first(self, project: InMemoryProject, extractor: StateExtractor) -> None:
        for name in ("a.py", "b.py", "c.py"):
            project.open_file(f"/work/demo/{name}")
        project.focus("/work/demo/a.py")

        names = [f.file_name for f in extractor.recent_files().files]

        assert names == ["a.py", "c.py", "b.py"]

    def test_capped_at_default_limit(self, project: InMemoryProject, extractor: StateExtractor) -> None:
        for i in range(20):
            project.open_file(f"/work/demo/f{i}.py")

        files = extractor.recent_files().files

        assert len(files) == 15
        assert files[0].file_name == "f19.py"

    def test_configured_limit(self, workspace: InMemoryWorkspace, project: InMemoryProject) -> None:
        for i in range(5):
            project.open_file(f"/work/demo/f{i}.py")
        assert len(StateExtractor(workspace, recent_files_limit=2).recent_files().files) == 2

    def test_explicit_limit(self, project: InMemoryProject, extractor: StateExtractor) -> None:
        for i in range(5):
            project.open_file(f"/work/demo/f{i}.py")
        assert len(extractor.recent_files(limit=3).files) == 3

    def test_closed_files_stay_in_history(self, project: InMemoryProject, extractor: StateExtractor) -> None:
        project.open_file("/work/demo/a.py")
        project.close_file("/work/demo/a.py")
        assert [f.file_path for f in extractor.recent_files().files] == ["/work/demo/a.py"]

    def test_no_project(self, extractor: StateExtractor) -> None:
        assert extractor.recent_files() == RecentFiles.empty()

    def test_host_fault_yields_empty(self, broken: StateExtractor) -> None:
        assert broken.recent_files() == RecentFiles.empty()


class TestSymbolAtCursor:
    def test_function_under_caret(self, project: InMemoryProject, extractor: StateExtractor, py_source: str) -> None:
        editor = project.open_file("/work/demo/config.py", py_source)
        editor.move_caret(editor.document.offset_of(7, 10))

        symbol = extractor.symbol_at_cursor()

        assert symbol.name == "load"
        assert symbol.kind == "function"
        assert symbol.file_path == "/work/demo/config.py"
        assert symbol.line == 5
        assert symbol.text.startswith("def load(self, path):")

    def test_unsupported_language(self, project: InMemoryProject, extractor: StateExtractor) -> None:
        project.open_file("/work/demo/notes.xyz", "hello")
        assert extractor.symbol_at_cursor() == Symbol.empty()

    def test_no_symbol_at_caret(self, project: InMemoryProject, extractor: StateExtractor, js_source: str) -> None:
        editor = project.open_file("/work/demo/app.js", js_source)
        editor.move_caret(editor.document.offset_of(7, 1))
        assert extractor.symbol_at_cursor() == Symbol.empty()

    def test_no_editor(self, project: InMemoryProject, extractor: StateExtractor) -> None:
        assert extractor.symbol_at_cursor() == Symbol.empty()

    def test_host_fault_yields_empty(self, broken: StateExtractor) -> None:
        assert broken.symbol_at_cursor() == Symbol.empty()
