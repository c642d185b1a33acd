from .base import LoggingError, LoggingInitError, LoggingNotInitializedError

__all__ = ["LoggingError", "LoggingInitError", "LoggingNotInitializedError"]
