"""Conversion between filesystem paths and canonical file URIs."""

import os
from pathlib import Path
from typing import Union
from urllib.parse import unquote, urlparse

from .models import DocumentUri


def uri_to_path(uri: str) -> Path:
    """Return the filesystem path of a ``file://`` URI (plain paths pass through)."""
    parsed = urlparse(uri)
    if parsed.scheme != "file":
        return Path(uri)

    path = unquote(parsed.path)
    # file:///C:/x -> /C:/x on Windows
    if os.name == "nt" and len(path) > 2 and path[0] == "/" and path[2] == ":":
        path = path[1:]
    return Path(path)


def _is_non_file_uri(value: str) -> bool:
    scheme = urlparse(value).scheme
    # A one-letter scheme is a Windows drive: C:\x
    return len(scheme) > 1 and scheme != "file"


def normalize_uri(value: Union[str, Path]) -> DocumentUri:
    """
    Canonicalize a path or URI into the key used for a file everywhere.

    Both ``/a/b.graphql`` and ``file:///a/b.graphql`` (and relative or
    percent-encoded spellings of the same file) map to the same string. URIs
    of any other scheme, such as an editor's ``untitled:`` buffers, are
    returned unchanged.
    """
    if isinstance(value, str) and _is_non_file_uri(value):
        return value
    path = uri_to_path(value) if isinstance(value, str) else value
    return path.expanduser().resolve().as_uri()
