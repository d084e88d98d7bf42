"""
errors.py – Error taxonomy for the hash walker.

Every error carries a ``kind``. The walker pipeline only ever checks the kind
to decide between "skip this file" and "abort the walk".
"""
from enum import Enum


class ErrorKind(Enum):
    TOLERATED = "tolerated"
    FILESYSTEM = "filesystem"
    HASH = "hash"
    CONFIGURATION = "configuration"


class BustError(Exception):
    kind: ErrorKind = ErrorKind.FILESYSTEM

    @property
    def fatal(self) -> bool:
        return self.kind is not ErrorKind.TOLERATED


class ExtensionMismatch(BustError):
    kind = ErrorKind.TOLERATED


class FileSystemError(BustError):
    kind = ErrorKind.FILESYSTEM


class HashError(BustError):
    kind = ErrorKind.HASH


class InvalidModeError(BustError):
    kind = ErrorKind.CONFIGURATION


class ManifestFormatError(BustError):
    # Existing manifest on disk is not a JSON object of strings
    kind = ErrorKind.CONFIGURATION
