from __future__ import annotations
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from ..core.extensions import DEFAULT_EXTENSIONS, normalize_extensions

DEFAULT_OUT_FILE = "asset-manifest.json"
DEFAULT_HASH_LENGTH = 10
# md5 hex digest length
MAX_HASH_LENGTH = 32


class BuildConfig(BaseModel):
    root_directory: str
    out_file: str = DEFAULT_OUT_FILE
    extensions: List[str] = Field(default_factory=lambda: list(DEFAULT_EXTENSIONS))
    mode: Literal["copy", "rename"] = "copy"
    hash_length: int = Field(default=DEFAULT_HASH_LENGTH, ge=1, le=MAX_HASH_LENGTH)
    incremental: bool = False
    # None = no cap, every entry of a directory is dispatched at once
    max_open_files: Optional[int] = Field(default=None, ge=1)

    @field_validator("root_directory", "out_file")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        if "\0" in value:
            raise ValueError("must not contain null bytes")
        return value

    @field_validator("extensions", mode="before")
    @classmethod
    def _normalize_extensions(cls, value: Any) -> List[str]:
        extensions = normalize_extensions(value)
        if not extensions:
            raise ValueError("at least one extension is required")
        return extensions
