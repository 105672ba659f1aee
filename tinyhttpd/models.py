import os
import stat
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple


PROTOCOL = "HTTP/1.0"


class Method(str, Enum):
    GET = "GET"
    HEAD = "HEAD"
    UNSUPPORTED = "UNSUPPORTED"

    @classmethod
    def from_token(cls, token: str) -> "Method":
        token = token.upper()
        if token in (cls.GET.value, cls.HEAD.value):
            return cls(token)
        return cls.UNSUPPORTED


class ContentKind(str, Enum):
    STATIC = "static"
    DYNAMIC = "dynamic"


@dataclass(frozen=True)
class Request:
    method: Method
    raw_method: str
    uri: str
    version: str


@dataclass(frozen=True)
class Target:
    path: str
    query: str
    kind: ContentKind

    @property
    def is_static(self) -> bool:
        return self.kind is ContentKind.STATIC


@dataclass(frozen=True)
class FileMetadata:
    exists: bool
    is_regular: bool = False
    readable: bool = False
    executable: bool = False
    size: int = 0

    @classmethod
    def from_path(cls, path: str) -> "FileMetadata":
        """Snapshot of ``path``; permissions follow the owner bits."""
        try:
            st = os.stat(path)
        except PermissionError:
            # present but unreachable; every check below fails
            return cls(exists=True)
        except (OSError, ValueError):
            # missing, name too long, embedded NUL, ...
            return cls(exists=False)
        return cls(
            exists=True,
            is_regular=stat.S_ISREG(st.st_mode),
            readable=bool(st.st_mode & stat.S_IRUSR),
            executable=bool(st.st_mode & stat.S_IXUSR),
            size=st.st_size,
        )


@dataclass
class ResponseHead:
    status: int
    reason: str
    headers: List[Tuple[str, str]] = field(default_factory=list)
    protocol: str = PROTOCOL

    def add(self, name: str, value) -> "ResponseHead":
        self.headers.append((name, str(value)))
        return self

    def status_line(self) -> str:
        return f"{self.protocol} {self.status} {self.reason}\r\n"

    def encode(self, terminate: bool = True) -> bytes:
        lines = [self.status_line()]
        lines.extend(f"{k}: {v}\r\n" for k, v in self.headers)
        if terminate:
            lines.append("\r\n")
        return "".join(lines).encode("iso-8859-1")
