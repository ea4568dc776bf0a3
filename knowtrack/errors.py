from __future__ import annotations


class KnowtrackError(Exception):
    pass


class ConfigError(KnowtrackError):
    pass


class StoreError(KnowtrackError):
    """A remote store request failed. The message is the store's own text."""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.message = message
        self.status = status


class ValidationError(KnowtrackError):
    pass


class NotFoundError(KnowtrackError):
    pass
