"""Service exceptions."""

from typing import Any, Dict, Optional


class ServiceException(Exception):
    """Base service exception."""

    def __init__(
        self,
        message: str,
        service_name: str,
        error_code: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Initialize service exception.

        Args:
            message: Error message
            service_name: Service name
            error_code: Error code
            details: Additional error details
        """
        super().__init__(message)
        self.service_name = service_name
        self.error_code = error_code
        self.details = details or {}


class FetchError(ServiceException):
    """No mirror produced a valid response."""

    def __init__(
        self, message: str, service_name: str, details: Optional[Dict[str, Any]] = None
    ) -> None:
        super().__init__(message, service_name, "fetch_failed", details)


class RefreshInProgressError(ServiceException):
    """A refresh cycle is already running."""

    def __init__(self, service_name: str) -> None:
        super().__init__(
            f"{service_name} is already refreshing", service_name, "refresh_in_progress"
        )


class SynonymFileError(ServiceException):
    """The synonym dictionary could not be loaded."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, "synonyms", "synonym_file", details)


__all__ = [
    "ServiceException",
    "FetchError",
    "RefreshInProgressError",
    "SynonymFileError",
]
