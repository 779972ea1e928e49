"""Custom exception types for the RERC SLA toolkit."""


class RercSlaError(Exception):
    """Base exception for all recoverable SLA toolkit errors."""


class ConfigurationError(RercSlaError):
    """Raised when runtime configuration values are missing or invalid."""


class AuthenticationError(RercSlaError):
    """Raised when the RERC API user identity is unavailable or rejected."""


class ApiError(RercSlaError):
    """Raised when a RERC API request fails or returns an unexpected response."""


class NotFoundError(RercSlaError):
    """Raised when a requested submission, academic year, or term does not exist."""


class DataValidationError(RercSlaError):
    """Raised when a record does not satisfy the preconditions of an SLA evaluation."""


class ReportInputError(RercSlaError):
    """Raised when report parameters such as the term selector are malformed."""
