"""Configuration loading and schema."""

from pipechain.config.loader import expand_env_vars, load_config
from pipechain.config.schema import PipechainConfig, PipelineSettings, ServerSettings

__all__ = [
    "PipechainConfig",
    "PipelineSettings",
    "ServerSettings",
    "expand_env_vars",
    "load_config",
]
