from __future__ import annotations

import socket
import threading
import time
from typing import Callable, Iterator, List, Tuple

import pytest
import uvicorn
from fastapi import FastAPI
from fastapi.responses import JSONResponse


def _start(app: FastAPI) -> Tuple[uvicorn.Server, threading.Thread, socket.socket, str]:
    """Run `app` on an ephemeral localhost port in a background thread."""

    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    sock.bind(("127.0.0.1", 0))
    host, port = sock.getsockname()

    server = uvicorn.Server(uvicorn.Config(app, log_level="warning", lifespan="off"))
    thread = threading.Thread(target=server.run, kwargs={"sockets": [sock]}, daemon=True)
    thread.start()

    deadline = time.monotonic() + 10
    while not server.started:
        if not thread.is_alive() or time.monotonic() > deadline:
            raise RuntimeError("test server failed to start")
        time.sleep(0.01)
    return server, thread, sock, f"http://{host}:{port}"


@pytest.fixture
def serve_app() -> Iterator[Callable[[FastAPI], str]]:
    """Factory fixture: serve a FastAPI app and return its base URL."""

    running: List[Tuple[uvicorn.Server, threading.Thread, socket.socket]] = []

    def _serve(app: FastAPI) -> str:
        server, thread, sock, url = _start(app)
        running.append((server, thread, sock))
        return url

    yield _serve

    for server, thread, sock in running:
        server.should_exit = True
        thread.join(timeout=10)
        sock.close()


@pytest.fixture
def failing_url(serve_app) -> str:
    """A server that answers every request with 403 and a JSON error body."""

    app = FastAPI()

    @app.api_route("/{path:path}", methods=["GET", "POST"])
    def _forbidden(path: str):
        return JSONResponse({"error": "things went bad"}, status_code=403)

    return serve_app(app)


@pytest.fixture
def closed_port_url() -> str:
    """A localhost URL nothing is listening on."""

    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return f"http://127.0.0.1:{port}"
