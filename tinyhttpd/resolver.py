from .models import ContentKind, Target

DOCUMENT_ROOT = "."


def resolve(uri: str, marker: str = "cgi-bin", default_document: str = "home.html") -> Target:
    """Map a request URI onto a path below the document root.

    URIs containing ``marker`` name a CGI program; anything after the first
    ``?`` becomes its query string. Every other URI is a static file, with
    ``default_document`` standing in for a trailing ``/``.

    ``..`` segments are passed through untouched, so a URI can name files
    outside the document root.
    """
    if marker in uri:
        script, _, query = uri.partition("?")
        return Target(path=DOCUMENT_ROOT + script, query=query, kind=ContentKind.DYNAMIC)

    path = DOCUMENT_ROOT + uri
    if uri.endswith("/"):
        path += default_document
    return Target(path=path, query="", kind=ContentKind.STATIC)
