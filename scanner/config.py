"""Settings for a processor run, loaded from defaults, a config file and flags."""

import json
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Set

import yaml

from .discovery import ConfigurationError, DEFAULT_BOOTSTRAP, DEFAULT_EXCLUDE_DIRS, DEFAULT_SUFFIX


# Looked up in the app root when no config file is given
DEFAULT_CONFIG_NAMES = ("screquire.yaml", "screquire.yml", "screquire.json")

_STRING_KEYS = {"suffix", "bootstrap", "project", "copyright"}
_LIST_KEYS = {"globals", "exclude_dirs"}


@dataclass
class ProcessorConfig:
    """Everything the two passes need to know besides the root."""

    namespace: str
    suffix: str = DEFAULT_SUFFIX
    bootstrap: str = DEFAULT_BOOTSTRAP
    project: Optional[str] = None
    copyright: str = ""
    globals: List[str] = field(default_factory=list)
    exclude_dirs: Set[str] = field(default_factory=lambda: set(DEFAULT_EXCLUDE_DIRS))

    @property
    def project_name(self) -> str:
        return self.project or self.namespace

    @property
    def global_names(self) -> List[str]:
        return self.globals or [self.namespace]


def parse_config_file(file_path: Path) -> Dict[str, Any]:
    """
    Parse a YAML or JSON config file.

    Args:
        file_path: Path to the file to parse.

    Returns:
        The mapping stored in the file (empty for an empty file).

    Raises:
        ConfigurationError: If the file cannot be read or parsed.
    """
    suffix = file_path.suffix.lower()

    try:
        content = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(f"Cannot read config file {file_path}: {e}") from e

    try:
        if suffix == ".json":
            data = json.loads(content)
        else:
            data = yaml.safe_load(content)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Cannot parse config file {file_path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {file_path} must contain a mapping")
    return data


def find_config_file(root: Path) -> Optional[Path]:
    """Return the first default config file present in root, if any."""
    for name in DEFAULT_CONFIG_NAMES:
        candidate = root / name
        if candidate.is_file():
            return candidate
    return None


def load_config(
    namespace: str,
    root: Optional[Path] = None,
    config_path: Optional[Path] = None,
    **overrides: Any,
) -> ProcessorConfig:
    """
    Build the run settings.

    Order of precedence: keyword overrides > config file > defaults.
    Overrides set to None are ignored.

    Args:
        namespace: Application namespace (e.g. 'App').
        root: App root, searched for a default config file when
              config_path is not given.
        config_path: Explicit config file.
        **overrides: Field values coming from the command line.

    Raises:
        ConfigurationError: On unknown keys, wrong value types or an
            unreadable config file.
    """
    config = ProcessorConfig(namespace=namespace)

    if config_path is None and root is not None:
        config_path = find_config_file(root)

    values: Dict[str, Any] = {}
    if config_path is not None:
        values.update(parse_config_file(config_path))
    values.update({k: v for k, v in overrides.items() if v is not None})
    # A blank YAML value or an unset flag keeps the default
    values = {k: v for k, v in values.items() if v is not None}

    return replace(config, **_validate(values, config))


def _validate(values: Dict[str, Any], config: ProcessorConfig) -> Dict[str, Any]:
    """Check keys and types, and normalize list values."""
    cleaned: Dict[str, Any] = {}

    for key, value in values.items():
        if key in _STRING_KEYS:
            if not isinstance(value, str):
                raise ConfigurationError(f"Config key '{key}' must be a string")
            cleaned[key] = value
        elif key in _LIST_KEYS:
            if isinstance(value, str):
                value = [value]
            if not isinstance(value, (list, tuple, set)) or not all(isinstance(v, str) for v in value):
                raise ConfigurationError(f"Config key '{key}' must be a list of strings")
            if key == "exclude_dirs":
                cleaned[key] = set(value) | config.exclude_dirs
            else:
                cleaned[key] = list(value)
        else:
            raise ConfigurationError(f"Unknown config key '{key}'")

    suffix = cleaned.get("suffix")
    if suffix is not None and not suffix.startswith("."):
        cleaned["suffix"] = "." + suffix

    return cleaned
