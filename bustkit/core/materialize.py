from __future__ import annotations

import asyncio
import logging
import os
import shutil
from enum import Enum
from typing import Union

from .errors import FileSystemError, InvalidModeError

logger = logging.getLogger(__name__)


class MaterializeMode(str, Enum):
    COPY = "copy"
    RENAME = "rename"


def coerce_mode(value: Union[str, MaterializeMode]) -> MaterializeMode:
    """Exact match only: "Copy" or " copy" are rejected."""
    if isinstance(value, MaterializeMode):
        return value
    for mode in MaterializeMode:
        if value == mode.value:
            return mode
    raise InvalidModeError("Unknown mode")


async def copy_file(source: str, destination: str) -> str:
    try:
        await asyncio.to_thread(shutil.copyfile, source, destination)
    except OSError as e:
        raise FileSystemError("Could not copy file!") from e
    return destination


async def rename_file(source: str, destination: str) -> str:
    try:
        await asyncio.to_thread(os.replace, source, destination)
    except OSError as e:
        raise FileSystemError("Could not rename file!") from e
    return destination


async def materialize(source: str, destination: str, mode: Union[str, MaterializeMode]) -> str:
    """
    Create ``destination`` from ``source`` by copying or renaming.
    The mode is checked before the filesystem is touched.
    """
    mode = coerce_mode(mode)
    if mode is MaterializeMode.COPY:
        func = copy_file
    else:
        func = rename_file

    logger.debug(f"{mode.value}: {source} -> {destination}")
    return await func(source, destination)
