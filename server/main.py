"""Embedded HTTP server lifecycle for the transaction service."""

from __future__ import annotations

import logging
import threading
import time

import uvicorn
from fastapi import FastAPI

from server import api as _api
from shared import config as _config


logger = logging.getLogger(__name__)


class TransactionServer:
    """Runs the FastAPI app under uvicorn on a background thread.

    A server can be started once; starting it again while it runs raises.
    """

    def __init__(self, app: FastAPI, *, host: str, port: int, log_level: str = "info") -> None:
        self._app = app
        self._host = host
        self._port = port
        self._log_level = log_level
        self._lock = threading.Lock()
        self._server: uvicorn.Server | None = None
        self._thread: threading.Thread | None = None

    @property
    def url(self) -> str:
        return f"http://{self._host}:{self._port}/"

    @property
    def is_started(self) -> bool:
        return self._server is not None

    def start(self, startup_timeout: float = 10.0) -> None:
        """Start serving in the background and wait until uvicorn is listening.

        Raises:
            RuntimeError: if the server is already started, or uvicorn exits
                (e.g. the port is taken) or does not finish startup in time.
        """
        with self._lock:
            if self._server is not None:
                logger.warning("http_server_already_started url=%s", self.url)
                raise RuntimeError("Server already started")

            logger.info("http_server_starting url=%s", self.url)
            server = uvicorn.Server(
                uvicorn.Config(
                    self._app,
                    host=self._host,
                    port=self._port,
                    log_level=self._log_level.lower(),
                )
            )
            thread = threading.Thread(target=server.run, name="transaction-http-server", daemon=True)
            thread.start()

            deadline = time.monotonic() + startup_timeout
            while not server.started:
                if not thread.is_alive():
                    logger.error("http_server_start_failed url=%s", self.url)
                    raise RuntimeError(f"Server failed to start on {self.url}")
                if time.monotonic() >= deadline:
                    server.should_exit = True
                    thread.join(timeout=1.0)
                    logger.error("http_server_start_timeout url=%s timeout=%s", self.url, startup_timeout)
                    raise RuntimeError(f"Server did not start on {self.url} within {startup_timeout}s")
                thread.join(timeout=0.01)

            self._server = server
            self._thread = thread
        logger.info("http_server_started url=%s", self.url)

    def stop(self, timeout: float = 5.0) -> None:
        with self._lock:
            server, thread = self._server, self._thread
            if server is None:
                logger.warning("http_server_stop_ignored reason=not_started")
                return
            self._server = None
            self._thread = None

        server.should_exit = True
        if thread is not None:
            thread.join(timeout=timeout)
        logger.info("http_server_stopped url=%s", self.url)

    def wait(self) -> None:
        """Block until the serving thread exits."""
        thread = self._thread
        if thread is not None:
            thread.join()


def build_server(app: FastAPI | None = None) -> TransactionServer:
    """Build a server from environment configuration.

    Serves ``server.api.app`` unless another application is given, so the
    process keeps a single transaction store.
    """

    return TransactionServer(
        app if app is not None else _api.app,
        host=_config.service_host(),
        port=_config.service_port(),
        log_level=_config.log_level(),
    )


def main() -> None:
    logging.basicConfig(
        level=_config.log_level(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    server = build_server()
    server.start()
    try:
        server.wait()
    except KeyboardInterrupt:
        logger.info("http_server_interrupted")
    finally:
        server.stop()


if __name__ == "__main__":
    main()
