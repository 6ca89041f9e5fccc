"""
Error types for the Podbean library.
"""

import json
from typing import Optional, Tuple


class PodbeanError(Exception):
    """Base exception for Podbean-related errors."""
    
    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause
    
    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message


class AuthError(PodbeanError):
    """Missing, rejected or unrefreshable OAuth credentials."""
    pass


class RateLimitError(PodbeanError):
    """Rate limit exceeded, either locally or reported by the API (HTTP 429)."""
    
    def __init__(self, retry_after: Optional[int] = None, cause: Optional[Exception] = None) -> None:
        if retry_after is not None:
            message = f"Rate limit exceeded. Retry after {retry_after} seconds"
        else:
            message = "Rate limit exceeded"
        super().__init__(message, cause)
        self.retry_after = retry_after


class ApiError(PodbeanError):
    """Error reported by the Podbean API."""
    
    def __init__(self, code: int, message: str, error: Optional[str] = None) -> None:
        super().__init__(message)
        self.code = code
        self.error = error
    
    def __str__(self) -> str:
        return f"API error {self.code}: {self.message}"


class TransportError(PodbeanError):
    """Network, TLS, DNS or timeout failure while talking to the API."""
    pass


class DecodeError(PodbeanError):
    """Response body was not JSON or did not have the expected shape."""
    pass


def parse_error_body(text: str) -> Tuple[str, Optional[str]]:
    """Extract (message, error identifier) from a Podbean error response body.
    
    Podbean reports errors as {"error": "...", "error_description": "..."};
    anything else falls back to the raw body text.
    """
    try:
        data = json.loads(text)
    except ValueError:
        return text, None
    
    if not isinstance(data, dict):
        return text, None
    
    error = data.get("error")
    description = data.get("error_description") or data.get("msg")
    if isinstance(error, str) and isinstance(description, str):
        return f"{error}: {description}", error
    if isinstance(description, str):
        return description, None
    if isinstance(error, str):
        return error, error
    return text, None
