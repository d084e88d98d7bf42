from __future__ import annotations
# -*- coding: utf-8 -*-

"""
walker.py – Recursive hash walker.

Every directory fans out one task per entry (no cap unless max_open_files is
set) and resolves once all of them have settled. The first fatal error rejects
the directory immediately; siblings already dispatched keep running and their
results are dropped. Nothing is rolled back.
"""

import asyncio
import logging
import os
import stat
from dataclasses import dataclass, field
from typing import Iterable, Optional, Set, Tuple, Union

from .errors import FileSystemError
from .materialize import MaterializeMode, coerce_mode
from .path_security import common_path_length as _common_path_length
from .pipeline import Manifest, PipelineResult, process_file

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WalkContext:
    extensions: Tuple[str, ...]
    hash_length: int
    mode: MaterializeMode
    common_path_length: int
    limiter: Optional[asyncio.Semaphore] = field(default=None, compare=False)


class TaskTracker:
    """Every task dispatched below the root, so the caller can wait for stragglers."""

    def __init__(self) -> None:
        self._tasks: Set["asyncio.Task[None]"] = set()

    def __len__(self) -> int:
        return len(self._tasks)

    def spawn(self, coro) -> "asyncio.Task[None]":
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def settle(self) -> None:
        # tasks may spawn more tasks while we wait
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)


class _Countdown:
    """Fan-in for one directory: resolves when ``pending`` hits zero."""

    def __init__(self, pending: int):
        self.pending = pending
        self.manifest: Manifest = {}
        self.done: "asyncio.Future[Manifest]" = asyncio.get_running_loop().create_future()

    def settle(self, entries: Optional[Manifest] = None) -> None:
        if entries:
            self.manifest.update(entries)
        self.pending -= 1
        if self.pending == 0 and not self.done.done():
            self.done.set_result(self.manifest)

    def fail(self, err: BaseException) -> None:
        # Late failures after the first one are dropped
        if not self.done.done():
            self.done.set_exception(err)


def make_context(
    directory: Union[str, os.PathLike],
    extensions: Iterable[str],
    hash_length: int,
    mode: Union[str, MaterializeMode],
    common_path_length: Optional[int] = None,
    max_open_files: Optional[int] = None,
) -> WalkContext:
    if common_path_length is None:
        common_path_length = _common_path_length(directory)

    limiter = None
    if max_open_files is not None:
        limiter = asyncio.Semaphore(max_open_files)

    return WalkContext(
        extensions=tuple(extensions),
        hash_length=hash_length,
        mode=coerce_mode(mode),
        common_path_length=common_path_length,
        limiter=limiter,
    )


async def _run_pipeline(path: str, context: WalkContext) -> PipelineResult:
    if context.limiter is None:
        return await process_file(path, context)
    async with context.limiter:
        return await process_file(path, context)


async def _walk_entry(path: str, context: WalkContext, tracker: TaskTracker, countdown: _Countdown) -> None:
    try:
        try:
            st = await asyncio.to_thread(os.stat, path)
        except OSError as e:
            raise FileSystemError("Error while accessing file stat") from e

        if stat.S_ISDIR(st.st_mode):
            countdown.settle(await _walk(path, context, tracker))
            return

        result = await _run_pipeline(path, context)
    except Exception as err:
        logger.debug(f"abort at {path}: {err}")
        countdown.fail(err)
        return

    if result.matched:
        countdown.settle({result.original: result.hashed})
    else:
        countdown.settle()


async def _walk(directory: str, context: WalkContext, tracker: TaskTracker) -> Manifest:
    try:
        names = await asyncio.to_thread(os.listdir, directory)
    except OSError as e:
        raise FileSystemError("Error while reading directory") from e

    if not names:
        return {}

    countdown = _Countdown(len(names))
    for name in names:
        tracker.spawn(_walk_entry(os.path.join(directory, name), context, tracker, countdown))

    return await countdown.done


async def walk(
    directory: Union[str, os.PathLike],
    extensions: Iterable[str],
    hash_length: int,
    mode: Union[str, MaterializeMode],
    common_path_length: Optional[int] = None,
    *,
    max_open_files: Optional[int] = None,
    tracker: Optional[TaskTracker] = None,
) -> Manifest:
    """
    Hash every allowlisted file below ``directory`` and return the manifest.

    ``common_path_length`` is computed from ``directory`` when omitted; pass it
    explicitly to make the manifest relative to an outer root. Pass a
    ``tracker`` to wait for dispatched siblings after a failure.
    Raises FileSystemError, HashError or InvalidModeError.
    """
    context = make_context(directory, extensions, hash_length, mode, common_path_length, max_open_files)
    if tracker is None:
        tracker = TaskTracker()
    return await _walk(os.path.abspath(str(directory)), context, tracker)


async def walk_and_settle(
    directory: Union[str, os.PathLike],
    extensions: Iterable[str],
    hash_length: int,
    mode: Union[str, MaterializeMode],
    *,
    max_open_files: Optional[int] = None,
) -> Manifest:
    """
    Like ``walk``, but returns (or re-raises) only after all dispatched
    siblings have run to completion, so shutting down the loop afterwards
    cancels nothing.
    """
    tracker = TaskTracker()
    try:
        return await walk(directory, extensions, hash_length, mode, max_open_files=max_open_files, tracker=tracker)
    finally:
        await tracker.settle()


def build_manifest(
    directory: Union[str, os.PathLike],
    extensions: Iterable[str],
    hash_length: int,
    mode: Union[str, MaterializeMode],
    *,
    max_open_files: Optional[int] = None,
) -> Manifest:
    return asyncio.run(
        walk_and_settle(directory, extensions, hash_length, mode, max_open_files=max_open_files)
    )
