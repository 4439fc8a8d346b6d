import logging
import socket
from typing import Optional

from .config import Config
from .handler import RequestHandler


logger = logging.getLogger(__name__)


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


class WebEngine(Engine):
    def __init__(self, config: Config, request_handler: Optional[RequestHandler] = None) -> None:
        self.config = config
        if request_handler is None:
            request_handler = RequestHandler(config)
        self.request_handler = request_handler

    def process(self, conn: socket.socket) -> None:
        logger.debug("Handling connection...")
        try:
            conn.settimeout(self.config.recv_timeout)
            with conn.makefile("rb") as rfile, conn.makefile("wb") as wfile:
                self.request_handler.handle(rfile, wfile)
        except OSError as e:
            logger.error("Output error: %s", e)
        logger.debug("Done handling connection.")
