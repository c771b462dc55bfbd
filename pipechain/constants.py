"""Shared constants for pipechain."""

SERVER_NAME = "pipechain"
SERVER_VERSION = "0.1.0"

# Network defaults
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8080

# Pipeline defaults
DEFAULT_PIPELINE_PATH = "/city"
HEALTH_PATH = "/health"
DEFAULT_MEDIA_TYPE = "application/json"
DEFAULT_TIME_COOKIE = "server-time-utc"

# Logging defaults
DEFAULT_LOG_LEVEL = "INFO"

# Config discovery
CONFIG_ENV_VAR = "PIPECHAIN_CONFIG"
CONFIG_SEARCH_ORDER = ("config.yaml", "config.yml")
