"""ICS-specific exceptions for error handling."""

from typing import Optional


class ICSError(Exception):
    """Base exception for ICS-related errors."""

    def __init__(self, message: str, filename: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.filename = filename


class ICSParseError(ICSError):
    """Exception raised when ICS content cannot be read or parsed as a whole."""



class ICSContentError(ICSError):
    """Exception raised when an uploaded calendar file is not an ICS file."""



class ICSContentTooLargeError(ICSContentError):
    """Exception raised when ICS content exceeds the upload size limit."""



class ICSExportError(ICSError):
    """Exception raised when a meeting cannot be rendered as ICS."""
