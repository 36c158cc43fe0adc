from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BridgeModel(BaseModel):
    """Frozen snapshot DTO; snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict[str, object]:
        return self.model_dump(mode="json", by_alias=True)


class Severity(StrEnum):
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {Severity.ERROR: 0, Severity.WARNING: 1, Severity.INFO: 2}


class ChangeStatus(StrEnum):
    MODIFIED = "MODIFIED"
    ADDED = "ADDED"
    DELETED = "DELETED"
    MOVED = "MOVED"
    UNTRACKED = "UNTRACKED"


class SymbolKind(StrEnum):
    FUNCTION = "function"
    CLASS = "class"
    INTERFACE = "interface"
    VARIABLE = "variable"
    PROPERTY = "property"
    PARAMETER = "parameter"
    TYPE = "type"
    ENUM = "enum"
    MODULE = "module"
    IMPORT = "import"


# --- Selection ---


class Selection(BridgeModel):
    text: str
    file_path: str
    start_line: int
    end_line: int
    start_column: int
    end_column: int
    language: str
    project_name: str

    @classmethod
    def empty(cls) -> Selection:
        return cls(
            text="",
            file_path="",
            start_line=0,
            end_line=0,
            start_column=0,
            end_column=0,
            language="",
            project_name="",
        )


# --- Diagnostics ---


class Diagnostic(BridgeModel):
    message: str
    severity: Severity
    line: int
    column: int
    description: str = ""


class DiagnosticSet(BridgeModel):
    file_path: str
    problems: list[Diagnostic]

    @classmethod
    def empty(cls) -> DiagnosticSet:
        return cls(file_path="", problems=[])


# --- Open files ---


class OpenFile(BridgeModel):
    file_path: str
    file_name: str
    is_active: bool
    is_modified: bool


class OpenFiles(BridgeModel):
    project_name: str
    files: list[OpenFile]

    @classmethod
    def empty(cls) -> OpenFiles:
        return cls(project_name="", files=[])


# --- Git status ---


class GitChange(BridgeModel):
    file_path: str
    status: ChangeStatus


class GitStatus(BridgeModel):
    branch: str
    repo_root: str
    changes: list[GitChange]

    @classmethod
    def empty(cls) -> GitStatus:
        return cls(branch="", repo_root="", changes=[])


# --- Recent files ---


class RecentFile(BridgeModel):
    file_path: str
    file_name: str


class RecentFiles(BridgeModel):
    project_name: str
    files: list[RecentFile]

    @classmethod
    def empty(cls) -> RecentFiles:
        return cls(project_name="", files=[])


# --- Symbol at cursor ---


class Symbol(BridgeModel):
    name: str
    kind: str
    file_path: str
    line: int
    text: str

    @classmethod
    def empty(cls) -> Symbol:
        return cls(name="", kind="", file_path="", line=0, text="")


class Health(BridgeModel):
    status: str = "ok"
    plugin: str
    version: str
