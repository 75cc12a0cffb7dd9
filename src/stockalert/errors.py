"""Stock alert error types."""

from __future__ import annotations

from enum import Enum


class StockAlertErrorCode(Enum):
    """Error classification codes."""

    CONFIG_INVALID = "config_invalid"
    AUTH_FAILED = "auth_failed"
    RATE_LIMITED = "rate_limited"
    NOT_FOUND = "not_found"
    NO_DATA = "no_data"
    TIMEOUT = "timeout"
    PROVIDER_ERROR = "provider_error"
    NOTIFY_FAILED = "notify_failed"


class StockAlertError(Exception):
    """Stock alert exception with error code and retryable flag.

    Attributes:
        message: Human-readable error description.
        code: Structured error code for programmatic handling.
        retryable: Whether the failure is transient (next cycle may succeed).
    """

    def __init__(
        self,
        message: str,
        code: StockAlertErrorCode = StockAlertErrorCode.PROVIDER_ERROR,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.retryable = retryable


class ConfigError(StockAlertError):
    """Invalid or incomplete configuration, fatal at startup."""

    def __init__(
        self,
        message: str,
        code: StockAlertErrorCode = StockAlertErrorCode.CONFIG_INVALID,
    ) -> None:
        super().__init__(message, code=code, retryable=False)
