import logging
import os
from datetime import datetime, timezone
from typing import BinaryIO

from .config import Config
from .models import SENTINEL_PATH, Request, Resource, Status


logger = logging.getLogger(__name__)

DATE_TAG = b"<cs371date>"
SERVER_TAG = b"<cs371server>"
NOT_FOUND_BODY = b"<h3>Error: 404 not found</h3>"


class RequestHandler:
    """
    Answers exactly one HTTP request read from ``rfile`` by writing the
    response to ``wfile``: parse the GET line, look the file up once,
    write the header block, then the (tag-substituted) body.
    """

    def __init__(self, config: Config) -> None:
        self.config = config
        self.root_real = os.path.realpath(config.root)

    def handle(self, rfile: BinaryIO, wfile: BinaryIO) -> Resource:
        req = self.read_request(rfile)
        resource = self.lookup(req)

        self.write_header(wfile, resource.status, self.config.content_type)
        self.write_content(wfile, resource)
        wfile.flush()

        logger.info("GET %r -> %d %s", req.path, resource.status.code, resource.status.reason)
        return resource

    def read_request(self, rfile: BinaryIO) -> Request:
        """
        Scan request lines up to the blank line, keeping the path of the
        last ``GET`` line seen. Malformed lines and read errors end the
        scan early; whatever was captured so far (or the sentinel) is
        returned.
        """
        path = SENTINEL_PATH
        while True:
            try:
                raw = rfile.readline()
            except OSError as e:
                logger.warning("Request read error: %s", e)
                break
            if not raw:
                logger.debug("Connection closed before end of request")
                break

            line = raw.decode("utf-8", errors="surrogateescape").rstrip("\r\n")
            logger.debug("Request line: (%r)", line)
            if not line:
                break
            if len(line) < 3:
                logger.warning("Malformed request line: %r", line)
                break

            if line[:3] == "GET":
                target = line[4:]
                if not target:
                    logger.warning("Malformed request line: %r", line)
                    break
                path = target
                end = target.find(" ")
                if end < 0:
                    logger.warning("Request line has no protocol version: %r", line)
                    break
                path = target[:end]
                logger.debug("Request file is: %r", path)

        return Request(path=path)

    def lookup(self, req: Request) -> Resource:
        rel = req.path[1:]
        if not rel:
            return Resource(req.path, Status.NOT_FOUND)

        try:
            candidate = os.path.realpath(os.path.join(self.root_real, os.path.normpath(rel)))
            if not candidate.startswith(self.root_real.rstrip(os.sep) + os.sep):
                logger.warning("Path escapes document root: %r", req.path)
                return Resource(req.path, Status.NOT_FOUND)

            if not os.path.isfile(candidate):
                return Resource(req.path, Status.NOT_FOUND)
        except ValueError as e:
            # embedded NUL byte
            logger.warning("Unusable request path %r: %s", req.path, e)
            return Resource(req.path, Status.NOT_FOUND)
        return Resource(req.path, Status.OK, fs_path=candidate)

    def write_header(self, wfile: BinaryIO, status: Status, content_type: str) -> None:
        lines = [
            status.status_line,
            f"Date: {self._http_date()}",
            f"Server: {self.config.server_name}",
            "Connection: close",
            f"Content-Type: {content_type}",
        ]
        header_block = "".join(f"{line}\r\n" for line in lines) + "\r\n"
        wfile.write(header_block.encode("iso-8859-1"))

    def write_content(self, wfile: BinaryIO, resource: Resource) -> None:
        if not resource.found:
            wfile.write(NOT_FOUND_BODY)
            return

        with open(resource.fs_path, "rb") as f:
            for raw in f:
                wfile.write(self._substitute(raw))
                if self.config.first_line_only:
                    break

    def _substitute(self, raw: bytes) -> bytes:
        content = raw.rstrip(b"\r\n")
        ending = raw[len(content):]

        if content == DATE_TAG:
            return self._page_date().encode("ascii") + ending
        if content == SERVER_TAG:
            return self.config.server_tag.encode("utf-8") + ending
        return raw

    @staticmethod
    def _page_date() -> str:
        return datetime.now().strftime("%d/%m/%y")

    @staticmethod
    def _http_date() -> str:
        dt = datetime.now(timezone.utc)
        return dt.strftime("%a, %d %b %Y %H:%M:%S GMT")
