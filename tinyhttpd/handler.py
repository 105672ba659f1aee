import logging
import os
import socket
import subprocess
import threading
from typing import BinaryIO, Dict, Optional

from .config import Config
from .errors import TransferError
from .mime import type_of
from .models import Method, Request, ResponseHead

logger = logging.getLogger(__name__)


class StaticHandler:
    def __init__(self, config: Config) -> None:
        self.config = config

    def serve(self, conn: socket.socket, path: str, size: int, method: Method, name: Optional[str] = None) -> None:
        """Send ``size`` bytes of ``path``; ``name`` (default ``path``) picks the content type."""
        head = (
            ResponseHead(200, "OK")
            .add("Server", self.config.server_name)
            .add("Connection", "close")
            .add("Content-length", size)
            .add("Content-type", type_of(name or path))
        )
        conn.sendall(head.encode())

        if method is not Method.GET:
            return

        try:
            self._send_file(conn, path, size)
        except OSError as e:
            logger.error("transfer of %s failed: %s", path, e)
            raise TransferError(path) from e

    def _send_file(self, conn: socket.socket, path: str, size: int) -> None:
        remaining = size
        with open(path, "rb") as f:
            while remaining > 0:
                data = f.read(min(self.config.chunk_size, remaining))
                if not data:
                    raise TransferError(f"{path} shrank by {remaining} bytes")
                conn.sendall(data)
                remaining -= len(data)


class CGIHandler:
    """Runs a program and relays its standard output as the response.

    Only the status line and ``Server`` header are written here; the
    program is expected to print the rest of the head and the body.
    """

    def __init__(self, config: Config) -> None:
        self.config = config

    def serve(self, conn: socket.socket, path: str, query: str, request: Request) -> None:
        head = ResponseHead(200, "OK").add("Server", self.config.server_name)
        conn.sendall(head.encode(terminate=False))

        program = os.path.abspath(path)
        try:
            proc = subprocess.Popen(
                [program],
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                env=self._environ(query, request),
                cwd=self.config.root,
            )
        except OSError as e:
            logger.error("could not run %s: %s", path, e)
            return

        watchdog = threading.Timer(self.config.cgi_timeout, self._kill, args=(proc, path))
        watchdog.start()
        try:
            with proc.stdout:
                self._relay(conn, proc.stdout)
        except OSError:
            proc.kill()
            raise
        finally:
            watchdog.cancel()
            proc.wait()

        if proc.returncode != 0:
            logger.warning("%s exited with status %d", path, proc.returncode)

    def _relay(self, conn: socket.socket, stdout: BinaryIO) -> None:
        while True:
            data = stdout.read1(self.config.chunk_size)
            if not data:
                return
            conn.sendall(data)

    def _kill(self, proc: subprocess.Popen, path: str) -> None:
        if proc.poll() is None:
            logger.error("%s timed out after %ss, killed", path, self.config.cgi_timeout)
            proc.kill()

    def _environ(self, query: str, request: Request) -> Dict[str, str]:
        env = dict(os.environ)
        env.update(
            QUERY_STRING=query,
            GATEWAY_INTERFACE="CGI/1.1",
            SERVER_SOFTWARE=self.config.server_name,
            SERVER_PROTOCOL=request.version,
            REQUEST_METHOD=request.method.value,
            SCRIPT_NAME=request.uri.partition("?")[0],
        )
        return env
