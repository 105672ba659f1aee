from __future__ import annotations

import socket

from conftest import recv_all, split_response
from tinyhttpd.errors import client_error, error_body


def test_error_body_mentions_code_and_messages() -> None:
    body = error_body("./missing.html", 404, "Not found", "Tiny couldn't find this file").decode()
    assert "404: Not found" in body
    assert "Tiny couldn't find this file: ./missing.html" in body


def test_cause_is_escaped() -> None:
    body = error_body("<script>", 501, "Not implemented", "nope").decode()
    assert "<script>" not in body
    assert "&lt;script&gt;" in body


def test_client_error_length_matches_body() -> None:
    client, server = socket.socketpair()
    with client, server:
        client_error(server, "café", 403, "Forbidden", "Tiny couldn't read the file")
        server.shutdown(socket.SHUT_WR)
        raw = recv_all(client)

    status, headers, body = split_response(raw)
    assert status == "HTTP/1.0 403 Forbidden"
    assert headers["content-type"] == "text/html"
    assert headers["connection"] == "close"
    assert int(headers["content-length"]) == len(body)
