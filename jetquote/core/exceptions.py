"""
Exceptions raised by the quoting core.

The API layer maps each of them to an HTTP status; nothing here knows
about HTTP.
"""
from typing import Optional


class JetQuoteError(Exception):
    """Base exception for all quoting errors."""
    pass


class RequestValidationFailed(JetQuoteError):
    """Raised when a quote request is malformed. Carries every problem found."""
    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


class ResolutionFailure(JetQuoteError):
    """Raised when a location cannot be mapped to an airport code."""
    def __init__(self, missing: dict, message: str = ""):
        self.missing = missing
        self.message = message or "Unknown airport code"
        super().__init__(self.message)


class DataUnavailable(JetQuoteError):
    """Raised when the airport directory or the fleet store cannot be queried."""
    def __init__(self, store: str, operation: str, cause: Optional[BaseException] = None):
        self.store = store
        self.operation = operation
        self.cause = cause
        self.message = f"{store} unavailable during {operation}"
        if cause is not None:
            self.message += f": {cause}"
        super().__init__(self.message)
