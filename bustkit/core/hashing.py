from __future__ import annotations

import asyncio
import hashlib

from .errors import HashError

CHUNK_SIZE = 65536


def _new_md5():
    # MD5 is a cache-busting checksum here, not a security boundary
    return hashlib.md5(usedforsecurity=False)


async def hash_file_content(path: str) -> str:
    """
    Stream a file through MD5 and return the lowercase hex digest.

    Every chunk read is awaited, so sibling files hash interleaved on the loop.
    """
    h = _new_md5()
    try:
        f = await asyncio.to_thread(open, path, "rb")
    except OSError as e:
        raise HashError("Error during hash calculation") from e

    try:
        while True:
            chunk = await asyncio.to_thread(f.read, CHUNK_SIZE)
            if not chunk:
                break
            h.update(chunk)
    except OSError as e:
        raise HashError("Error during hash calculation") from e
    finally:
        f.close()

    return h.hexdigest()
