"""Out-of-process queries against the IDE bridge.

Each call issues exactly one GET, with no retry and no cache. Anything other
than a 2xx response with a body of the expected shape comes back as a
``QueryFailure`` value; nothing is raised to the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from ide_bridge.config import BridgeSettings, load_settings
from ide_bridge.models import DiagnosticSet, GitStatus, Health, OpenFiles, RecentFiles, Selection, Symbol

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class FailureKind(StrEnum):
    CONNECTION = "connection"
    HTTP = "http"
    SHAPE = "shape"


@dataclass(frozen=True)
class QueryFailure:
    kind: FailureKind
    cause: str


class BridgeClient:
    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: BridgeSettings | None = None) -> BridgeClient:
        settings = settings or load_settings()
        return cls(settings.base_url, timeout=settings.timeout)

    async def _fetch(self, route: str, model: type[ModelT]) -> ModelT | QueryFailure:
        url = f"{self.base_url}{route}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(url, headers={"Accept": "application/json"})
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            reason = str(exc) or type(exc).__name__
            logger.debug("GET %s failed: %s", url, reason)
            return QueryFailure(
                FailureKind.CONNECTION,
                f"Failed to connect to the IDE bridge at {self.base_url}: {reason}",
            )

        if not response.is_success:
            logger.debug("GET %s returned HTTP %d", url, response.status_code)
            return QueryFailure(FailureKind.HTTP, f"HTTP {response.status_code}: {response.reason_phrase}")

        try:
            return model.model_validate_json(response.content)
        except ValidationError as exc:
            first = exc.errors()[0]["msg"] if exc.error_count() else str(exc)
            logger.debug("GET %s returned an unexpected body: %s", url, exc)
            return QueryFailure(FailureKind.SHAPE, f"Unexpected response from {route}: {first}")

    async def selection(self) -> Selection | QueryFailure:
        return await self._fetch("/api/selection", Selection)

    async def errors(self) -> DiagnosticSet | QueryFailure:
        return await self._fetch("/api/errors", DiagnosticSet)

    async def open_files(self) -> OpenFiles | QueryFailure:
        return await self._fetch("/api/open-files", OpenFiles)

    async def git_status(self) -> GitStatus | QueryFailure:
        return await self._fetch("/api/git-status", GitStatus)

    async def recent_files(self) -> RecentFiles | QueryFailure:
        return await self._fetch("/api/recent-files", RecentFiles)

    async def symbol(self) -> Symbol | QueryFailure:
        return await self._fetch("/api/symbol", Symbol)

    async def health(self) -> Health | QueryFailure:
        return await self._fetch("/api/health", Health)
