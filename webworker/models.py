import enum
from dataclasses import dataclass
from typing import Optional


SENTINEL_PATH = " "


class Status(enum.Enum):
    OK = (200, "OK")
    NOT_FOUND = (404, "Not Found")

    def __init__(self, code: int, reason: str) -> None:
        self.code = code
        self.reason = reason

    @property
    def status_line(self) -> str:
        return f"HTTP/1.1 {self.code} {self.reason}"


@dataclass(frozen=True)
class Request:
    path: str = SENTINEL_PATH


@dataclass(frozen=True)
class Resource:
    path: str
    status: Status
    fs_path: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.status is Status.OK
