"""Configuration file loading and validation.

Loads a YAML configuration file, expands ``${ENV_VAR}`` placeholders,
and validates against the Pydantic models defined in :mod:`schema`.
"""

import logging
import os
import re
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from pipechain.config.schema import PipechainConfig
from pipechain.errors import ConfigurationError

logger = logging.getLogger(__name__)

# Recognised config file extensions.
_YAML_EXTS = frozenset({".yaml", ".yml"})

_ENV_VAR_RE = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")


def expand_env_vars(value: Any) -> Any:
    """Recursively expand ``${VAR}`` references in string values.

    - If the env var is not set, the placeholder is left unchanged.
    - Non-string leaves are returned as-is.
    - Dicts and lists are walked recursively.
    """
    if isinstance(value, str):
        return _ENV_VAR_RE.sub(
            lambda m: os.environ.get(m.group(1), m.group(0)),
            value,
        )
    if isinstance(value, dict):
        return {k: expand_env_vars(v) for k, v in value.items()}
    if isinstance(value, list):
        return [expand_env_vars(item) for item in value]
    return value


def _read_config_file(cfg_fpath: str) -> Dict[str, Any]:
    """Read and parse a YAML config file from *cfg_fpath*.

    Raises :class:`ConfigurationError` on I/O or parse errors.
    """
    ext = os.path.splitext(cfg_fpath)[1].lower()
    if ext not in _YAML_EXTS:
        raise ConfigurationError(
            f"Unsupported config file extension '{ext}'. "
            "Only YAML files (.yaml, .yml) are supported."
        )

    try:
        with open(cfg_fpath, "r", encoding="utf-8") as f:
            raw_data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"Error reading configuration file: {cfg_fpath}\n  {exc}") from exc

    # An empty file means "all defaults".
    if raw_data is None:
        return {}
    if not isinstance(raw_data, dict):
        raise ConfigurationError(
            "Top-level configuration content must be a YAML mapping (dictionary)."
        )
    return raw_data


def load_config(cfg_fpath: Optional[str] = None) -> PipechainConfig:
    """Load and validate the configuration at *cfg_fpath*.

    With no path, the built-in defaults are returned.
    """
    if cfg_fpath is None:
        logger.info("No configuration file given; using defaults.")
        return PipechainConfig()

    raw_data = expand_env_vars(_read_config_file(cfg_fpath))
    try:
        config = PipechainConfig.model_validate(raw_data)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration in {cfg_fpath}:\n{exc}") from exc

    logger.info(
        "Configuration loaded from %s (path=%s, media_type=%s)",
        cfg_fpath,
        config.pipeline.path,
        config.pipeline.media_type,
    )
    return config
