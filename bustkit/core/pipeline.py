from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Optional

from .errors import BustError
from .extensions import filter_by_extension
from .hashing import hash_file_content
from .materialize import materialize
from .naming import compose_hashed_name
from .path_security import strip_common_prefix

if TYPE_CHECKING:
    from .walker import WalkContext

# original relative path -> hashed relative path
Manifest = Dict[str, str]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineResult:
    original: str
    hashed: Optional[str] = None

    @property
    def matched(self) -> bool:
        return self.hashed is not None

    @classmethod
    def no_match(cls, original: str) -> "PipelineResult":
        return cls(original=original)


async def process_file(path: str, context: "WalkContext") -> PipelineResult:
    """
    filter -> hash -> compose -> materialize, strictly in that order.

    ``path`` is absolute. The returned paths are relative to the walk root.
    A tolerated error becomes a no-match result, every other error propagates.
    """
    rel_path = strip_common_prefix(path, context.common_path_length)
    try:
        filter_by_extension(path, context.extensions)
        digest = await hash_file_content(path)
        destination = compose_hashed_name(path, digest, context.hash_length)
        destination = await materialize(path, destination, context.mode)
    except BustError as err:
        if err.fatal:
            raise
        logger.debug(f"skip {rel_path}: {err}")
        return PipelineResult.no_match(rel_path)

    hashed = strip_common_prefix(destination, context.common_path_length)
    logger.debug(f"{rel_path} -> {hashed}")
    return PipelineResult(original=rel_path, hashed=hashed)
