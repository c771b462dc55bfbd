"""Project-specific exception classes."""


class PipechainError(Exception):
    """Base class for all pipechain exceptions."""


class ConfigurationError(PipechainError):
    """Raised when loading or validating the configuration file fails."""
