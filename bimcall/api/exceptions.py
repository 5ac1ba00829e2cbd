"""REST API client exceptions."""

from typing import Optional


class APIError(Exception):
    """Base exception for BIMCall API errors."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class APIAuthError(APIError):
    """Exception raised when the API rejects the credentials (401/403)."""



class APINotFoundError(APIError):
    """Exception raised when the requested entity does not exist (404)."""



class APIResponseError(APIError):
    """Exception raised for other error statuses or unreadable response bodies."""



class APINetworkError(APIError):
    """Exception raised when the API cannot be reached after all retries."""
