from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    DATE_FORMAT_ERROR = "DATE_FORMAT_ERROR"
    INVALID_INTERVAL_BOUNDS = "INVALID_INTERVAL_BOUNDS"
    INTERVAL_OVERLAP = "INTERVAL_OVERLAP"
    INTERVAL_DUPLICATE = "INTERVAL_DUPLICATE"
    INTERVAL_OUT_OF_RANGE = "INTERVAL_OUT_OF_RANGE"
    MISSING_PERIODS = "MISSING_PERIODS"
    UNEXPECTED_PERIODS = "UNEXPECTED_PERIODS"
    INVALID_MODE = "INVALID_MODE"
    TAX_YEAR_ORDER = "TAX_YEAR_ORDER"
    WINDOW_TOO_SHORT = "WINDOW_TOO_SHORT"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.DATE_FORMAT_ERROR: "Invalid date format.",
    ErrorCode.INVALID_INTERVAL_BOUNDS: "Interval start date must be on or before end date.",
    ErrorCode.INTERVAL_OVERLAP: "Intervals must not overlap.",
    ErrorCode.INTERVAL_DUPLICATE: "Duplicate intervals detected.",
    ErrorCode.INTERVAL_OUT_OF_RANGE: "Intervals must stay within the allowed date bounds.",
    ErrorCode.MISSING_PERIODS: "Required periods are missing for the selected mode.",
    ErrorCode.UNEXPECTED_PERIODS: "Unexpected periods were provided for the selected mode.",
    ErrorCode.INVALID_MODE: "Mode must be set to either US or Foreign periods.",
    ErrorCode.TAX_YEAR_ORDER: "Tax year start must be on or before tax year end.",
    ErrorCode.WINDOW_TOO_SHORT: "Tax year window must be at least one day.",
    ErrorCode.UNKNOWN_ERROR: "An unknown error occurred.",
}


class CalculatorError(Exception):
    """Raised by the domain layer when input fails validation."""

    def __init__(
        self,
        code: ErrorCode,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.code = ErrorCode(code)
        self.message = message or ERROR_MESSAGES[self.code]
        self.details = details
        super().__init__(f"{self.code.value}: {self.message}")

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"code": self.code.value, "message": self.message}
        if self.details is not None:
            payload["details"] = self.details
        return payload
