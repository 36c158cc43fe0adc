from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ModelAccessThread:
    """Single thread that owns all reads of live editor state.

    Implements the ``ModelAccess`` protocol. Callers block until their read
    finishes; reads never overlap. There is no timeout on the hop.
    """

    def __init__(self, name: str = "ide-bridge-model") -> None:
        self._name = name
        self._executor: ThreadPoolExecutor | None = None
        self._owner_ident: int | None = None
        self._lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        return self._executor is not None

    def invoke_and_wait(self, fn: Callable[..., T], /, *args: Any) -> T:
        if threading.get_ident() == self._owner_ident:
            return fn(*args)
        future = self._ensure_executor().submit(self._run, fn, *args)
        return future.result()

    def shutdown(self) -> None:
        with self._lock:
            executor, self._executor = self._executor, None
        if executor is None:
            return
        executor.shutdown(wait=True)
        self._owner_ident = None
        logger.debug("Model access thread %s stopped", self._name)

    def _ensure_executor(self) -> ThreadPoolExecutor:
        with self._lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=self._name)
            return self._executor

    def _run(self, fn: Callable[..., T], *args: Any) -> T:
        self._owner_ident = threading.get_ident()
        return fn(*args)
