# raw-style-advisor/utils/errors.py

from typing import Optional


class AnalysisError(Exception):
    """Base class for every failure that ends an analysis run."""

    def user_message(self) -> str:
        return str(self)


class ValidationError(AnalysisError):
    """Input is missing or unusable. Raised before any external call is made."""


class ConversionError(AnalysisError):
    """The external RAW converter failed or could not be started."""

    def __init__(self, message: str, diagnostic: str = "", tool_missing: bool = False):
        super().__init__(message)
        self.diagnostic = diagnostic
        self.tool_missing = tool_missing

    def user_message(self) -> str:
        if self.diagnostic and self.diagnostic not in str(self):
            return f"{self} Details: {self.diagnostic}"
        return str(self)


class RemoteAPIError(AnalysisError):
    """Transport, auth, rate-limit, timeout or empty-content failures from the vision API."""

    def __init__(self, message: str, status_code: Optional[int] = None, timed_out: bool = False):
        super().__init__(message)
        self.status_code = status_code
        self.timed_out = timed_out
