import logging
from pathlib import Path
from typing import Tuple

from .models import BuildConfig
from ..adapters.manifest_store import read_manifest, write_manifest
from ..core.errors import FileSystemError, ManifestFormatError
from ..core.merge import merge_incremental
from ..core.path_security import is_read_writable, resolve_out_file
from ..core.pipeline import Manifest
from ..core.walker import build_manifest

logger = logging.getLogger(__name__)


class BuildConfigError(Exception):
    """Raised before any file is touched: bad paths or a broken existing manifest."""


def prepare_paths(config: BuildConfig) -> Tuple[Path, Path]:
    root = Path(config.root_directory).expanduser()
    resolved_root = root.resolve()
    if not resolved_root.is_dir():
        raise BuildConfigError(f"Root directory does not exist or is not a directory: {resolved_root}")
    if not is_read_writable(resolved_root):
        raise BuildConfigError(f"The root directory could not be read/written to: {resolved_root}")

    try:
        out_file = resolve_out_file(root, config.out_file)
    except ValueError as e:
        raise BuildConfigError(f"Invalid out file: {e}") from e

    if not is_read_writable(out_file.parent):
        raise BuildConfigError(f"The out file could not be read/written to: {out_file}")

    return root, out_file


def run_build(config: BuildConfig) -> Manifest:
    """
    Walk, optionally merge with the previous manifest, then persist.

    Nothing is written unless the whole walk succeeded. Walker errors
    (FileSystemError, HashError, InvalidModeError) propagate to the caller.
    """
    root, out_file = prepare_paths(config)
    logger.info(f"Root: {root}")
    logger.info(f"Output: {out_file}")

    existing = None
    if config.incremental:
        # Load first, so a broken manifest fails before any file is copied or moved
        try:
            existing = read_manifest(out_file)
        except ManifestFormatError as e:
            raise BuildConfigError(str(e)) from e
        logger.info(f"Incremental mode: {len(existing)} existing entries")

    logger.info(
        f"Hashing {', '.join(config.extensions)} files "
        f"(mode={config.mode}, hash_length={config.hash_length})"
    )
    manifest = build_manifest(
        root,
        config.extensions,
        config.hash_length,
        config.mode,
        max_open_files=config.max_open_files,
    )
    logger.info(f"Hashed {len(manifest)} files")

    if existing is not None:
        manifest = merge_incremental(existing, manifest)

    try:
        write_manifest(out_file, manifest)
    except OSError as e:
        raise FileSystemError(f"Could not write manifest {out_file}") from e

    logger.info(f"Wrote {len(manifest)} entries to {out_file}")
    return manifest
