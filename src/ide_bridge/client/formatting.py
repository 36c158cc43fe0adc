"""Render bridge snapshots as Markdown-flavoured text for people and LLM tools.

All functions are pure. Degenerate snapshots get explicit wording rather
than blank output.
"""

from __future__ import annotations

from ide_bridge.client.query import FailureKind, QueryFailure
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

_STATUS_ICONS = {
    ChangeStatus.MODIFIED: "📝",
    ChangeStatus.ADDED: "✨",
    ChangeStatus.DELETED: "🗑️",
    ChangeStatus.MOVED: "📦",
    ChangeStatus.UNTRACKED: "❓",
}

_SEVERITY_HEADINGS = (
    (Severity.ERROR, "❌ Errors"),
    (Severity.WARNING, "⚠️ Warnings"),
    (Severity.INFO, "ℹ️ Info"),
)

_FAILURE_HINTS = (
    "Make sure:",
    "1. The IDE (or host application) is running",
    "2. The IDE bridge is installed, enabled and listening",
    "3. The bridge URL and port match this client's settings",
)


def _line_span(start: int, end: int) -> str:
    return f"line {start}" if start == end else f"lines {start}-{end}"


def format_selection(selection: Selection) -> str:
    if not selection.text.strip():
        return "\n".join(
            [
                "No text selected.",
                "",
                f"**Current file:** `{selection.file_path}`",
                f"**Cursor at:** line {selection.start_line}, column {selection.start_column}",
            ]
        )
    return "\n".join(
        [
            f"**File:** `{selection.file_path}` ({_line_span(selection.start_line, selection.end_line)})",
            f"**Language:** {selection.language}",
            f"**Project:** {selection.project_name}",
            "",
            f"```{selection.language.lower()}",
            selection.text,
            "```",
        ]
    )


def format_context(selection: Selection) -> str:
    """Cursor position and file context, with or without a selection."""
    selected = f"{len(selection.text)} characters" if selection.text else "none"
    return "\n".join(
        [
            f"**File:** `{selection.file_path}`",
            f"**Project:** {selection.project_name}",
            f"**Language:** {selection.language}",
            f"**Position:** line {selection.start_line}, column {selection.start_column}",
            f"**Selected:** {selected}",
        ]
    )


def _format_problem(problem: Diagnostic) -> str:
    return f"- Line {problem.line}: {problem.message}"


def format_diagnostics(diagnostics: DiagnosticSet) -> str:
    header = f"**File:** `{diagnostics.file_path}`"
    if not diagnostics.problems:
        return f"{header}\n\n✅ No errors or warnings"

    sections = [header]
    for severity, heading in _SEVERITY_HEADINGS:
        group = [p for p in diagnostics.problems if p.severity is severity]
        if group:
            entries = "\n".join(_format_problem(p) for p in group)
            sections.append(f"\n**{heading} ({len(group)}):**\n{entries}")
    return "\n".join(sections)


def format_open_files(open_files: OpenFiles) -> str:
    header = f"**Project:** {open_files.project_name}"
    if not open_files.files:
        return f"{header}\n\nNo files open"

    rows = []
    for f in open_files.files:
        markers = [label for flag, label in ((f.is_active, "→ active"), (f.is_modified, "● modified")) if flag]
        rows.append(f"| {', '.join(markers) or '—'} | `{f.file_name}` |")
    return "\n".join(
        [
            header,
            f"**Open files:** {len(open_files.files)}",
            "",
            "| Status | File |",
            "|--------|------|",
            *rows,
        ]
    )


def format_git_status(status: GitStatus) -> str:
    if not status.branch:
        return "No Git repository found in current project"

    lines = [f"**Branch:** `{status.branch}`", f"**Repo:** `{status.repo_root}`"]
    if not status.changes:
        lines.append("\n✅ Working tree clean")
        return "\n".join(lines)

    lines.append(f"\n**Changes ({len(status.changes)}):**")
    for change in status.changes:
        icon = _STATUS_ICONS.get(change.status, "•")
        lines.append(f"{icon} {change.status.value.lower()}: `{change.file_path}`")
    return "\n".join(lines)


def format_recent_files(recent: RecentFiles) -> str:
    header = f"**Project:** {recent.project_name}"
    if not recent.files:
        return f"{header}\n\nNo recent files"
    return "\n".join(
        [
            header,
            f"**Recent files ({len(recent.files)}):**",
            "",
            *(f"{i}. `{f.file_name}`" for i, f in enumerate(recent.files, start=1)),
        ]
    )


def format_symbol(symbol: Symbol) -> str:
    if not symbol.name:
        return "No symbol found at cursor position"
    return "\n".join(
        [
            f"**Symbol:** `{symbol.name}`",
            f"**Kind:** {symbol.kind}",
            f"**File:** `{symbol.file_path}` (line {symbol.line})",
            "",
            "```",
            symbol.text,
            "```",
        ]
    )


def format_failure(action: str, failure: QueryFailure) -> str:
    message = f"Unable to get {action}: {failure.cause}"
    if failure.kind is FailureKind.CONNECTION:
        return "\n".join([message, "", *_FAILURE_HINTS])
    return message
