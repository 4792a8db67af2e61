"""Klaviyo client exceptions module."""


class KlaviyoError(Exception):
    """Base exception for all Klaviyo client exceptions."""


class KlaviyoInvalidBackendError(KlaviyoError):
    """Exception raised when the backend is invalid."""
