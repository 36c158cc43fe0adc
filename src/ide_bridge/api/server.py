from __future__ import annotations

import logging
import socket
import threading
import time
from types import TracebackType

import uvicorn

from ide_bridge.api.app import create_app
from ide_bridge.config import BridgeSettings, load_settings
from ide_bridge.core.extract import StateExtractor
from ide_bridge.core.owner import ModelAccessThread
from ide_bridge.core.ports.editor import EditorHost, ModelAccess

logger = logging.getLogger(__name__)

_STARTUP_TIMEOUT = 10.0
_SHUTDOWN_TIMEOUT = 5.0


def _bind_socket(host: str, port: int) -> socket.socket:
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    sock = socket.socket(family, socket.SOCK_STREAM)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((host, port))
    except OSError:
        sock.close()
        raise
    return sock


class BridgeServer:
    """Owned handle for the loopback bridge: one uvicorn thread plus the model-access thread.

    ``start`` is a no-op while running and logs (does not raise) when the port
    cannot be bound. ``stop`` is safe at any time and frees the port at once.
    """

    def __init__(
        self,
        host_state: EditorHost,
        settings: BridgeSettings | None = None,
        owner: ModelAccess | None = None,
    ) -> None:
        self._settings = settings or load_settings()
        self._owner: ModelAccess = owner or ModelAccessThread()
        self._owns_owner = owner is None
        self._extractor = StateExtractor(host_state, recent_files_limit=self._settings.recent_files_limit)
        self._lock = threading.Lock()
        self._server: uvicorn.Server | None = None
        self._thread: threading.Thread | None = None
        self._socket: socket.socket | None = None
        self._port: int | None = None

    @property
    def is_running(self) -> bool:
        return self._server is not None

    @property
    def port(self) -> int | None:
        """Port actually bound, or ``None`` while stopped."""
        return self._port

    @property
    def url(self) -> str | None:
        if self._port is None:
            return None
        return f"http://{self._settings.host}:{self._port}"

    def start(self) -> None:
        with self._lock:
            if self._server is not None:
                return
            host, port = self._settings.host, self._settings.port
            try:
                sock = _bind_socket(host, port)
            except OSError:
                logger.exception("Failed to start bridge server on %s:%d", host, port)
                return
            bound_port = sock.getsockname()[1]

            app = create_app(self._extractor, self._owner)
            config = uvicorn.Config(
                app,
                log_level=self._settings.log_level.lower(),
                log_config=None,
                lifespan="off",
                timeout_graceful_shutdown=1,
            )
            server = uvicorn.Server(config)
            thread = threading.Thread(
                target=server.run,
                kwargs={"sockets": [sock]},
                name="ide-bridge-server",
                daemon=True,
            )
            thread.start()

            deadline = time.monotonic() + _STARTUP_TIMEOUT
            while not server.started and thread.is_alive() and time.monotonic() < deadline:
                time.sleep(0.01)
            if not server.started:
                logger.error("Bridge server did not start on %s:%d", host, port)
                server.should_exit = True
                thread.join(_SHUTDOWN_TIMEOUT)
                sock.close()
                return

            self._server, self._thread, self._socket = server, thread, sock
            self._port = bound_port
            logger.info("Bridge server started on http://%s:%d", host, self._port)

    def stop(self) -> None:
        with self._lock:
            server, thread, sock = self._server, self._thread, self._socket
            self._server = self._thread = self._socket = None
            self._port = None
            if server is not None and thread is not None:
                server.should_exit = True
                thread.join(_SHUTDOWN_TIMEOUT)
                if thread.is_alive():
                    server.force_exit = True
                    thread.join(_SHUTDOWN_TIMEOUT)
            if sock is not None:
                sock.close()
            if self._owns_owner:
                self._owner.shutdown()
            if server is not None:
                logger.info("Bridge server stopped")

    def __enter__(self) -> BridgeServer:
        self.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.stop()
