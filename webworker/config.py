from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Config:
    host: str = "0.0.0.0"
    port: int = 8080
    root: str = "."
    backlog: int = 128
    accept_timeout: float = 1.0
    # None keeps the legacy unbounded wait on a silent client
    recv_timeout: Optional[float] = None
    content_type: str = "text/html"
    server_name: str = "David's very own server"
    server_tag: str = "David's Server."
    first_line_only: bool = False
    debug: bool = False
