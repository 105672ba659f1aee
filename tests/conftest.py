from __future__ import annotations

import socket
import sys
from pathlib import Path

import pytest


def pytest_configure() -> None:
    project_root = Path(__file__).resolve().parents[1]
    sys.path.insert(0, str(project_root))


def recv_all(sock: socket.socket) -> bytes:
    chunks = []
    while True:
        data = sock.recv(65536)
        if not data:
            return b"".join(chunks)
        chunks.append(data)


def split_response(raw: bytes) -> tuple[str, dict[str, str], bytes]:
    head, _, body = raw.partition(b"\r\n\r\n")
    lines = head.decode("iso-8859-1").split("\r\n")
    headers = {}
    for line in lines[1:]:
        name, _, value = line.partition(":")
        headers[name.strip().lower()] = value.strip()
    return lines[0], headers, body


@pytest.fixture
def docroot(tmp_path: Path) -> Path:
    (tmp_path / "home.html").write_bytes(b"<p>hi</p>\n")
    (tmp_path / "cgi-bin").mkdir()
    return tmp_path


@pytest.fixture
def exchange():
    """Feed raw request bytes to an engine over a socketpair, return the reply."""

    def run(engine, raw: bytes) -> bytes:
        client, server = socket.socketpair()
        with client:
            client.sendall(raw)
            client.shutdown(socket.SHUT_WR)
            engine.handle_connection(server)
            return recv_all(client)

    return run
