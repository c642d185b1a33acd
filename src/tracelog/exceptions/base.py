"""
Exceptions raised by the logging facility.

Only initialization can fail observably. Once a logger exists, log calls never
raise on bad input; they drop what they cannot encode.
"""


class LoggingError(Exception):
    """
    Base exception for logging setup errors.

    - message: human-friendly message
    - error_code: canonical short code (e.g., 'init_failed', 'not_initialized')
    """

    def __init__(self, message: str, *, error_code: str | None = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code

    def __str__(self) -> str:
        if self.error_code:
            return f"{self.message} (code: {self.error_code})"
        return self.message


class LoggingInitError(LoggingError):
    """The sink could not be built from the given configuration."""

    def __init__(self, message: str):
        super().__init__(message, error_code="init_failed")


class LoggingNotInitializedError(LoggingError):
    """A logger was requested before `initialize()` completed."""

    def __init__(self, message: str = "logging has not been initialized; call initialize() first"):
        super().__init__(message, error_code="not_initialized")
