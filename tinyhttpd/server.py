import logging
import socket
import threading
from typing import Optional, Tuple

from .config import Config
from .engine import Engine, HTTPEngine

logger = logging.getLogger(__name__)


class TinyHTTPServer:
    """Iterative server: each connection is fully handled before the next accept."""

    def __init__(self, config: Config, engine: Optional[Engine] = None) -> None:
        self.config = config
        self.engine = engine or HTTPEngine(config)

        # Created on run()
        self._listen_sock: Optional[socket.socket] = None

        self._stop_event = threading.Event()
        self.ready = threading.Event()

    @property
    def server_address(self) -> Tuple[str, int]:
        if self._listen_sock is None:
            raise RuntimeError("server is not listening")
        return self._listen_sock.getsockname()[:2]

    def run(self) -> None:
        self._stop_event.clear()
        self._listen_sock = self._create_listen_socket()
        logger.info("Listening on %s:%d, serving '%s'", *self.server_address, self.config.root)
        self.ready.set()
        try:
            self._accept_loop()
        finally:
            self._cleanup()

    def stop(self) -> None:
        self._stop_event.set()

        # unblock accept() immediately
        if self._listen_sock is not None:
            try:
                self._listen_sock.close()
            except OSError:
                pass

    def _cleanup(self) -> None:
        if self._listen_sock is not None:
            try:
                self._listen_sock.close()
            except OSError:
                pass
        self._listen_sock = None
        self.ready.clear()

    def _create_listen_socket(self) -> socket.socket:
        """
        Create/bind/listen.
        Uses SO_REUSEADDR to make restarts easier during development.
        """
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)

        sock.bind((self.config.host, self.config.port))
        sock.listen(self.config.backlog)

        sock.settimeout(self.config.accept_timeout)

        return sock

    def _accept_loop(self) -> None:
        assert self._listen_sock is not None

        while not self._stop_event.is_set():
            try:
                conn, addr = self._listen_sock.accept()
            except socket.timeout:
                continue
            except OSError:
                # socket was likely closed during stop()
                break

            logger.info("Accepted connection from (%s, %s)", addr[0], addr[1])
            try:
                conn.settimeout(self.config.recv_timeout)
            except OSError:
                conn.close()
                continue

            # The engine closes conn.
            try:
                self.engine.handle_connection(conn)
            except Exception:
                logger.exception("Unhandled error serving %s", addr)
