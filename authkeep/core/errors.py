"""
authkeep exception hierarchy.

Every error raised by authkeep inherits from AuthKeepError.
Each layer has its own error class for targeted catching.

Usage:
    try:
        await handle.save_creds()
    except StorageError as e:
        # Backend rejected the write
    except AuthKeepError as e:
        # Any authkeep error
"""


class AuthKeepError(Exception):
    """Base exception for all authkeep errors."""

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ConfigError(AuthKeepError):
    """Configuration is invalid, missing, or malformed."""

    pass


class StorageError(AuthKeepError):
    """Document store failure — database errors, connection loss, etc."""

    def __init__(
        self,
        message: str,
        doc_id: str = "",
        details: dict | None = None,
    ):
        self.doc_id = doc_id
        super().__init__(message, details)


class SerializationError(AuthKeepError):
    """Stored payload does not match the expected encoding."""

    pass
