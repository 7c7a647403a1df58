"""
Custom exceptions for file URL resolution.
"""


class FileSecretaryError(Exception):
    """Base exception for file secretary errors."""
    pass


class ConfigurationError(FileSecretaryError):
    """Configuration-related errors (missing or invalid config)."""
    pass


class UnknownContextError(ConfigurationError):
    """A referenced context is not configured."""

    def __init__(self, context_name: str, available=None):
        message = f"Unknown file context: {context_name}"
        if available is not None:
            message += f". Available: {sorted(available)}"
        super().__init__(message)
        self.context_name = context_name
