"""Custom exception types for the pull request review notifier."""


class PrPingerError(Exception):
    """Base exception for all recoverable notifier errors."""


class ConfigurationError(PrPingerError):
    """Raised when runtime configuration values are missing or invalid."""


class AuthenticationError(PrPingerError):
    """Raised when a GitHub session cannot be obtained or is rejected."""


class ApiError(PrPingerError):
    """Raised when a GitHub GraphQL request fails or returns an unexpected response."""


class DataValidationError(PrPingerError):
    """Raised when GraphQL payloads do not have the expected pull request shape."""
