"""Configuration file loading."""

import json
import logging
from pathlib import Path
from typing import Any, Mapping, Union

from .encoding import from_hex
from .keys import SEED_LENGTH
from .types import ApiKey, Config, ConfigError, InvalidEncoding

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "seedauth.json"
CONFIG_ENV_VAR = "SEEDAUTH_CONFIG"


def _require_str(data: Mapping[str, Any], key: str, field: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value:
        raise ConfigError(f"{field} must be a non-empty string", field=field)
    return value


def config_from_dict(data: Any) -> Config:
    """Validate parsed configuration.

    Expected shape::

        {"api_url": "https://...", "api_key": {"id": "...", "seed": "<hex>"}}

    Raises:
        ConfigError: If a field is missing or invalid
    """
    if not isinstance(data, Mapping):
        raise ConfigError("configuration must be a JSON object")

    api_url = _require_str(data, "api_url", "api_url").rstrip("/")

    api_key = data.get("api_key")
    if not isinstance(api_key, Mapping):
        raise ConfigError("api_key must be an object", field="api_key")
    key_id = _require_str(api_key, "id", "api_key.id")
    seed = _require_str(api_key, "seed", "api_key.seed")

    try:
        seed_bytes = from_hex(seed, field="api_key.seed")
    except InvalidEncoding as exc:
        raise ConfigError(exc.message, field="api_key.seed")
    if len(seed_bytes) != SEED_LENGTH:
        raise ConfigError(
            f"api_key.seed must be {SEED_LENGTH} bytes, got {len(seed_bytes)}",
            field="api_key.seed",
        )

    return Config(api_url=api_url, api_key=ApiKey(id=key_id, seed=seed.lower()))


def load_config(path: Union[str, Path]) -> Config:
    """Load configuration from a JSON file.

    Raises:
        ConfigError: If the file cannot be read, parsed or validated
    """
    path = Path(path)
    logger.debug("Loading configuration from %s", path)
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as exc:
        raise ConfigError(f"cannot read {path}: {exc.strerror or exc}")
    except json.JSONDecodeError as exc:
        raise ConfigError(f"{path} is not valid JSON: {exc.msg} (line {exc.lineno})")
    except UnicodeDecodeError:
        raise ConfigError(f"{path} is not valid UTF-8")
    return config_from_dict(data)
