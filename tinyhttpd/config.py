from dataclasses import dataclass

@dataclass(frozen=True)
class Config:
    host: str = "0.0.0.0"
    port: int = 8080
    root: str = "."
    backlog: int = 128
    accept_timeout: float = 1.0
    recv_timeout: float = 5.0
    max_line_bytes: int = 8192
    max_header_lines: int = 100
    chunk_size: int = 64 * 1024
    cgi_marker: str = "cgi-bin"
    default_document: str = "home.html"
    cgi_timeout: float = 30.0
    server_name: str = "Tiny Web Server"
