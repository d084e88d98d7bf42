# -*- coding: utf-8 -*-

"""
manifest_store.py – Read and write the persisted asset manifest.

Format: a single JSON object, original path -> hashed path, both relative to
the walk root and using platform separators.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict

from ..core.errors import ManifestFormatError
from ..core.pipeline import Manifest

logger = logging.getLogger(__name__)


def _validate(data: Any, path: Path) -> Dict[str, str]:
    if not isinstance(data, dict):
        raise ManifestFormatError(f"Manifest {path} is not a JSON object")
    for key, value in data.items():
        if not isinstance(value, str):
            raise ManifestFormatError(f"Manifest {path} has a non-string value for '{key}'")
    return data


def read_manifest(path: Path) -> Manifest:
    """
    Load a previously written manifest.
    A missing file is an empty manifest.
    """
    if not path.exists():
        logger.warning(f"No existing manifest at {path}, starting from an empty one")
        return {}

    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestFormatError(f"Could not read manifest {path}: {e}") from e

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ManifestFormatError(f"Manifest {path} is not valid JSON: {e}") from e

    return _validate(data, path)


def write_manifest(path: Path, manifest: Manifest) -> Path:
    # Write to a sibling first, then swap into place
    tmp_file = path.with_name(path.name + ".tmp")
    try:
        tmp_file.write_text(json.dumps(manifest, indent=2, sort_keys=True) + "\n", encoding="utf-8")
        tmp_file.replace(path)
    except OSError:
        tmp_file.unlink(missing_ok=True)
        raise
    logger.debug(f"Wrote {len(manifest)} entries to {path}")
    return path
