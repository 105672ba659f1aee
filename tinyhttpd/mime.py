from typing import Final, Tuple

DEFAULT_TYPE: Final[str] = "text/plain"

# Checked in order; the first marker found anywhere in the path wins.
MIME_TABLE: Final[Tuple[Tuple[str, str], ...]] = (
    (".html", "text/html"),
    (".gif", "image/gif"),
    (".png", "image/png"),
    (".jpg", "image/jpeg"),
    (".mp4", "video/mp4"),
)


def type_of(path: str) -> str:
    for suffix, ctype in MIME_TABLE:
        if suffix in path:
            return ctype
    return DEFAULT_TYPE
