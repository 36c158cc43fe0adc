from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar

from fastapi import Request

from ide_bridge.core.extract import StateExtractor
from ide_bridge.core.ports.editor import ModelAccess

T = TypeVar("T")


@dataclass(frozen=True)
class SnapshotReader:
    """Runs one extractor read on the model-access thread and waits for it."""

    extractor: StateExtractor
    owner: ModelAccess

    def read(self, operation: Callable[[StateExtractor], T]) -> T:
        return self.owner.invoke_and_wait(operation, self.extractor)


def get_snapshots(request: Request) -> SnapshotReader:
    snapshots: SnapshotReader = request.app.state.snapshots
    return snapshots
