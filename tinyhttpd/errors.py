import html
import logging
import socket

from .models import ResponseHead

logger = logging.getLogger(__name__)


class HTTPError(Exception):
    pass


class BadRequest(HTTPError, ValueError):
    """Request line or header block could not be read."""


class TransferError(HTTPError):
    """A response head went out but its body could not follow."""


def error_body(cause: str, code: int, short_msg: str, long_msg: str) -> bytes:
    parts = [
        "<html><title>Tiny Error</title>",
        '<body bgcolor="ffffff">\r\n',
        f"{code}: {short_msg}\r\n",
        f"<p>{long_msg}: {html.escape(cause)}\r\n",
        "<hr><em>The Tiny Web server</em>\r\n",
    ]
    return "".join(parts).encode("utf-8")


def client_error(
    conn: socket.socket,
    cause: str,
    code: int,
    short_msg: str,
    long_msg: str,
    server_name: str = "Tiny Web Server",
) -> None:
    body = error_body(cause, code, short_msg, long_msg)
    head = (
        ResponseHead(code, short_msg)
        .add("Server", server_name)
        .add("Connection", "close")
        .add("Content-type", "text/html")
        .add("Content-length", len(body))
    )
    logger.info("%d %s: %s", code, short_msg, cause)
    conn.sendall(head.encode() + body)
