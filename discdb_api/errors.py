from typing import Any, Dict, Optional


class DiscDBError(Exception):
    """Base for every failure reported to the caller as a JSON error body."""

    status_code = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message, **self.details}


class ValidationError(DiscDBError):
    """Missing or malformed client input."""
    status_code = 400


class ConfigError(DiscDBError):
    """Server is missing configuration the operation needs (the write token)."""


class FetchError(DiscDBError):
    """Upstream read failed: network error or non-success status."""


class ParseError(DiscDBError):
    """A dataset line is not a JSON object."""


class ConflictError(DiscDBError):
    """Conditional write rejected because the blob changed after it was read."""
    status_code = 409

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, {"retry": True, **(details or {})})


class WriteError(DiscDBError):
    """Upstream refused the commit for a reason other than a version conflict."""
