from __future__ import annotations

import os
from typing import Iterable, List, Union

from .errors import ExtensionMismatch

DEFAULT_EXTENSIONS = ("css", "js")


def normalize_extensions(values: Union[str, Iterable[str], None]) -> List[str]:
    """
    Accepts a list of extensions or a comma separated string.
    Leading dots and whitespace are stripped, order is kept, duplicates dropped.
    """
    if values is None:
        return []
    if isinstance(values, str):
        values = values.split(",")

    cleaned: List[str] = []
    for raw in values:
        for part in str(raw).split(","):
            ext = part.strip().lstrip(".")
            if not ext or ext in cleaned:
                continue
            cleaned.append(ext)
    return cleaned


def file_extension(path: str) -> str:
    """Extension without its leading dot, '' if there is none."""
    return os.path.splitext(path)[1][1:]


def filter_by_extension(path: str, extensions: Iterable[str]) -> str:
    # Case-sensitive on purpose: "CSS" is not "css"
    if file_extension(path) in extensions:
        return path
    raise ExtensionMismatch("Extension does not match!")
