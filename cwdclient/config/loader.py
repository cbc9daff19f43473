"""Configuration file handling and the cached accessor."""

import json
import threading
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from cwdclient.config.schema import Config
from cwdclient.naming import to_external_name, to_wire_name

_lock = threading.RLock()
_cache: dict[str, Config] = {}


def get_config_path() -> Path:
    """Default location: ~/.cwdclient/config.json."""
    return Path.home() / ".cwdclient" / "config.json"


def load_config(config_path: Path | None = None) -> Config:
    """
    Build the configuration from a JSON file plus ``CWDCLIENT_*`` variables.

    Args:
        config_path: Config file; the default location when omitted. A missing
            file yields defaults.

    Returns:
        The configuration. File values win over environment variables.

    Raises:
        ValueError: The file is not valid JSON, not an object, or fails validation.
    """
    path = config_path or get_config_path()
    if not path.exists():
        return Config()
    try:
        return Config(**convert_keys(_read_object(path)))
    except (ValidationError, ValueError) as e:
        raise ValueError(
            f"Failed to load config from {path}: {e}. "
            "Fix the file or delete it to fall back to defaults."
        ) from e


def save_config(config: Config, config_path: Path | None = None) -> None:
    """Write ``config`` with camelCase keys and drop its cache entry."""
    path = config_path or get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(convert_to_camel(config.model_dump()), indent=2), encoding="utf-8")
    clear_config_cache(config_path=path)


def get_config(*, config_path: Path | None = None, force_reload: bool = False) -> Config:
    """Return the configuration for ``config_path``, loading it once per process."""
    key = _cache_key(config_path)
    with _lock:
        config = _cache.get(key)
        if config is None or force_reload:
            config = _cache[key] = load_config(Path(key))
        return config


def clear_config_cache(*, config_path: Path | None = None) -> None:
    """Forget one cached configuration, or all of them."""
    with _lock:
        if config_path is not None:
            _cache.pop(_cache_key(config_path), None)
        else:
            _cache.clear()


def _cache_key(config_path: Path | None) -> str:
    return str(Path(config_path or get_config_path()).expanduser().resolve())


def _read_object(path: Path) -> dict[str, Any]:
    # json.JSONDecodeError is a ValueError
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError("config root must be a JSON object")
    return data


def convert_keys(data: Any) -> Any:
    """Recursively convert camelCase keys to snake_case."""
    if isinstance(data, dict):
        return {to_wire_name(k): convert_keys(v) for k, v in data.items()}
    if isinstance(data, list):
        return [convert_keys(v) for v in data]
    return data


def convert_to_camel(data: Any) -> Any:
    """Recursively convert snake_case keys to camelCase."""
    if isinstance(data, dict):
        return {to_external_name(k): convert_to_camel(v) for k, v in data.items()}
    if isinstance(data, list):
        return [convert_to_camel(v) for v in data]
    return data
