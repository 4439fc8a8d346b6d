import logging
import socket
import threading
from typing import Optional, Tuple

from .config import Config
from .engine import Engine, WebEngine


logger = logging.getLogger(__name__)


class ThreadedHTTPServer:
    def __init__(self, config: Config, engine: Optional[Engine] = None) -> None:
        self.config = config
        self.engine = engine or WebEngine(config)

        # Created on run()
        self._listen_sock: Optional[socket.socket] = None
        self.server_address: Optional[Tuple[str, int]] = None

        self._stop_event = threading.Event()
        self.ready = threading.Event()

    def run(self) -> None:
        self._stop_event.clear()
        self._listen_sock = self._create_listen_socket()
        self.server_address = self._listen_sock.getsockname()[:2]
        logger.info("Serving '%s' on %s:%d", self.config.root, *self.server_address)
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
        """
        Accept connections, each one handled on its own thread.
        Exits when stop_event is set or listen socket is closed.
        """
        assert self._listen_sock is not None

        while not self._stop_event.is_set():
            try:
                conn, addr = self._listen_sock.accept()
            except socket.timeout:
                continue
            except OSError:
                # socket was likely closed during stop()
                break

            logger.debug("Accepted connection from %s:%d", *addr[:2])
            try:
                t = threading.Thread(
                    target=self._handle_connection,
                    args=(conn,),
                    name=f"worker-{addr[0]}:{addr[1]}",
                    daemon=True,
                )
                t.start()
            except RuntimeError as e:
                logger.error("Could not start worker thread: %s", e)
                try:
                    conn.close()
                except OSError:
                    pass

    def _handle_connection(self, conn: socket.socket) -> None:
        try:
            self.engine.handle_connection(conn)
        except Exception:
            logger.exception("Unhandled exception in worker thread")
