import os
from pathlib import Path
from typing import Union


def common_path_length(directory: Union[str, Path]) -> int:
    """
    Length of the absolute root prefix, trailing separator included.

    Slicing any absolute path below ``directory`` at this offset yields the
    path relative to ``directory``. Computed once per walk.
    """
    root = os.path.abspath(str(directory))
    return len(root.rstrip(os.sep)) + len(os.sep)


def strip_common_prefix(path: str, length: int) -> str:
    return path[length:]


def resolve_out_file(root: Union[str, Path], out_file: str) -> Path:
    """
    Resolve where the manifest goes.

    Rules:
    - A bare file name ("asset-manifest.json") lives inside root
    - Anything with a directory part is resolved against the cwd
    - No null bytes
    """
    if not isinstance(out_file, str) or not out_file.strip():
        raise ValueError("out_file must be a non-empty string")
    if "\0" in out_file:
        raise ValueError("Null bytes are forbidden")

    if out_file == os.path.basename(out_file):
        return Path(os.path.normpath(os.path.abspath(os.path.join(str(root), out_file))))
    return Path(os.path.normpath(os.path.abspath(out_file)))


def is_read_writable(path: Union[str, Path]) -> bool:
    return os.access(str(path), os.R_OK | os.W_OK)
