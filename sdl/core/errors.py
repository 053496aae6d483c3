"""
Error Contract
--------------
Only construction can fail. Each failure is typed and carries a stable
`code` string so callers can branch on it without parsing messages.

Once a Logger or RequestLogger exists, logging calls never raise: sink
failures are handled by the logging engine and never reach the caller.
"""

from enum import Enum


class ErrorCode(str, Enum):
    # Logger construction
    INVALID_LOG_LEVEL = "invalid_log_level"

    # RequestLogger construction
    NIL_REQUEST = "nil_request"


class LoggingError(Exception):
    """Base exception for all errors raised by this package."""

    def __init__(self, code: ErrorCode, detail: str = ""):
        self.code = code
        self.detail = detail or code.value.replace("_", " ").capitalize()
        super().__init__(self.detail)


class ConfigError(LoggingError):
    """The logging level string does not name a known level."""

    def __init__(self, detail: str = ""):
        super().__init__(ErrorCode.INVALID_LOG_LEVEL, detail)


class ValidationError(LoggingError):
    """A request logger was asked for without a request to describe."""

    def __init__(self, detail: str = ""):
        super().__init__(ErrorCode.NIL_REQUEST, detail)
