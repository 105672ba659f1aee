import logging
import os
import socket
from typing import BinaryIO, Optional

from .config import Config
from .errors import BadRequest, TransferError, client_error
from .handler import CGIHandler, StaticHandler
from .models import FileMetadata, Method, Request
from .resolver import resolve

logger = logging.getLogger(__name__)


def parse_request_line(line: Optional[bytes]) -> Request:
    if not line:
        raise BadRequest("empty request")
    if not line.endswith(b"\n"):
        raise BadRequest("request line too long or unterminated")

    parts = line.decode("iso-8859-1").split()
    if len(parts) != 3:
        raise BadRequest("bad request line")

    method, uri, version = parts
    return Request(method=Method.from_token(method), raw_method=method, uri=uri, version=version)


def read_headers(rfile: BinaryIO, max_line_bytes: int, max_lines: int) -> int:
    """Discard header lines up to and including the blank line.

    Returns the number of header lines read.
    """
    count = 0
    while True:
        line = rfile.readline(max_line_bytes + 1)
        if not line:
            raise BadRequest("connection closed inside headers")
        if len(line) > max_line_bytes:
            raise BadRequest("header line too long")
        if line in (b"\r\n", b"\n"):
            return count
        count += 1
        if count > max_lines:
            raise BadRequest("too many headers")
        logger.debug("%s", line.decode("iso-8859-1").rstrip("\r\n"))


class Engine:
    def handle_connection(self, conn: socket.socket) -> None:
        try:
            self.process(conn)
        finally:
            try:
                conn.close()
            except OSError:
                pass

    def process(self, conn: socket.socket) -> None:
        raise NotImplementedError


class HTTPEngine(Engine):
    def __init__(self, config: Config, static_handler=None, cgi_handler=None) -> None:
        self.config = config
        self.static_handler = static_handler or StaticHandler(config)
        self.cgi_handler = cgi_handler or CGIHandler(config)

    def process(self, conn: socket.socket) -> None:
        rfile = conn.makefile("rb")
        try:
            self._dispatch(conn, rfile)
        except (socket.timeout, TimeoutError):
            logger.warning("client timed out")
        except TransferError as e:
            logger.error("response aborted: %s", e)
        except BadRequest as e:
            logger.info("bad request: %s", e)
            self._error(conn, str(e), 400, "Bad request", "Tiny could not parse the request")
        finally:
            rfile.close()

    def _dispatch(self, conn: socket.socket, rfile: BinaryIO) -> None:
        req = parse_request_line(rfile.readline(self.config.max_line_bytes + 1))
        logger.info("%s %s %s", req.raw_method, req.uri, req.version)

        if req.method is Method.UNSUPPORTED:
            return self._error(conn, req.raw_method, 501, "Not implemented", "Tiny does not implement this method")

        read_headers(rfile, self.config.max_line_bytes, self.config.max_header_lines)

        target = resolve(req.uri, self.config.cgi_marker, self.config.default_document)
        fs_path = os.path.join(self.config.root, target.path)
        meta = FileMetadata.from_path(fs_path)

        if not meta.exists:
            return self._error(conn, target.path, 404, "Not found", "Tiny couldn't find this file")

        if target.is_static:
            if not meta.is_regular or not meta.readable:
                return self._error(conn, target.path, 403, "Forbidden", "Tiny couldn't read the file")
            self.static_handler.serve(conn, fs_path, meta.size, req.method, name=target.path)
        else:
            if not meta.is_regular or not meta.executable:
                return self._error(conn, target.path, 403, "Forbidden", "Tiny couldn't run the CGI program")
            self.cgi_handler.serve(conn, fs_path, target.query, req)

    def _error(self, conn: socket.socket, cause: str, code: int, short_msg: str, long_msg: str) -> None:
        client_error(conn, cause, code, short_msg, long_msg, self.config.server_name)
