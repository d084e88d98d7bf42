import logging
from pathlib import Path
from typing import Any, Dict

# YAML is mandatory for config files
import yaml

logger = logging.getLogger(__name__)

KNOWN_KEYS = {
    "root_directory",
    "out_file",
    "extensions",
    "mode",
    "hash_length",
    "incremental",
    "max_open_files",
}


class ConfigFileError(ValueError):
    pass


def load_config_file(path: Path) -> Dict[str, Any]:
    """
    Load build options from a YAML mapping.

    Keys may use dashes or underscores (``hash-length`` == ``hash_length``).
    Unknown keys are reported and ignored.
    """
    try:
        # binary, so PyYAML detects the encoding and reports bad bytes as ReaderError
        with path.open("rb") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigFileError(f"Could not read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigFileError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigFileError(f"Config file {path} must contain a mapping")

    options: Dict[str, Any] = {}
    for raw_key, value in data.items():
        key = str(raw_key).strip().replace("-", "_")
        if key not in KNOWN_KEYS:
            logger.warning(f"Ignoring unknown config key '{raw_key}' in {path}")
            continue
        options[key] = value
    return options
