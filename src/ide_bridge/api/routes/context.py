from fastapi import APIRouter, Depends

from ide_bridge.api.dependencies import SnapshotReader, get_snapshots
from ide_bridge.core.extract import StateExtractor
from ide_bridge.models import DiagnosticSet, GitStatus, OpenFiles, RecentFiles, Selection, Symbol

router = APIRouter(tags=["context"])


@router.get("/selection", response_model=Selection)
def selection(snapshots: SnapshotReader = Depends(get_snapshots)) -> Selection:
    """Selected text, or the caret as a zero-length range."""
    return snapshots.read(StateExtractor.selection)


@router.get("/errors", response_model=DiagnosticSet)
def errors(snapshots: SnapshotReader = Depends(get_snapshots)) -> DiagnosticSet:
    return snapshots.read(StateExtractor.diagnostics)


@router.get("/open-files", response_model=OpenFiles)
def open_files(snapshots: SnapshotReader = Depends(get_snapshots)) -> OpenFiles:
    return snapshots.read(StateExtractor.open_files)


@router.get("/git-status", response_model=GitStatus)
def git_status(snapshots: SnapshotReader = Depends(get_snapshots)) -> GitStatus:
    return snapshots.read(StateExtractor.git_status)


@router.get("/recent-files", response_model=RecentFiles)
def recent_files(snapshots: SnapshotReader = Depends(get_snapshots)) -> RecentFiles:
    return snapshots.read(StateExtractor.recent_files)


@router.get("/symbol", response_model=Symbol)
def symbol(snapshots: SnapshotReader = Depends(get_snapshots)) -> Symbol:
    """Innermost named declaration enclosing the caret."""
    return snapshots.read(StateExtractor.symbol_at_cursor)
