"""
Skysweep Exceptions and Error Utilities

File Purpose: Centralized exception types and simple error handling helpers
Primary Classes/Functions: SkysweepError, ConfigError, AuthenticationError, APIError, ListError, DeleteError, handle_error
Inputs and Outputs (I/O): Accepts exceptions and console; prints user-friendly messages

ConfigError, AuthenticationError and ListError abort the run. DeleteError is
reported per record and the sweep continues.
"""

from typing import Optional

from rich.console import Console
from rich.markup import escape


class SkysweepError(Exception):
    """Base exception for all Skysweep-specific errors."""

    def __init__(
        self,
        message: str,
        details: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        self.message = message
        self.details = details
        self.original_error = original_error
        super().__init__(message)


class ConfigError(SkysweepError):
    """Raised when config.json is missing, unreadable or invalid."""

    pass


class AuthenticationError(SkysweepError):
    """Raised when session creation fails."""

    def __init__(
        self,
        message: str,
        details: Optional[str] = None,
        original_error: Optional[Exception] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message, details, original_error)
        self.status_code = status_code


class APIError(SkysweepError):
    """Raised when AT Protocol repository calls fail."""

    def __init__(
        self,
        message: str,
        details: Optional[str] = None,
        original_error: Optional[Exception] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message, details, original_error)
        self.status_code = status_code


class ListError(APIError):
    """Raised when a listRecords page cannot be fetched or decoded."""

    pass


class DeleteError(APIError):
    """Raised when a single deleteRecord call fails."""

    def __str__(self) -> str:
        extras = []
        if self.status_code is not None:
            extras.append(f"status: {self.status_code}")
        if self.details:
            extras.append(f"response: {self.details}")
        if not extras:
            return self.message
        return f"{self.message} ({', '.join(extras)})"


def handle_error(
    console: Console,
    error: Exception,
    operation: str,
    show_details: bool = False,
    reraise: bool = False,
) -> None:
    """Print "<operation> failed: <message>" in red, plus the raw server body when show_details is set."""
    if isinstance(error, SkysweepError):
        console.print(f"[red]{operation} failed: {escape(error.message)}[/]")
        if show_details and error.details:
            console.print(f"[dim]   Details: {escape(error.details)}[/]")
        if show_details and error.original_error:
            console.print(f"[dim]   Original error: {escape(str(error.original_error))}[/]")
    else:
        console.print(f"[red]{operation} failed: {escape(str(error))}[/]")
        if show_details:
            console.print(f"[dim]   Error type: {type(error).__name__}[/]")

    if reraise:
        raise error
