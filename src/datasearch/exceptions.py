"""Custom exceptions for the datasearch library.

This module defines all custom exceptions used throughout the library for
consistent error handling and clear error messaging.
"""

from typing import Any, Dict


# Base exception
class DataSearchError(Exception):
    """Base exception for all datasearch errors.

    Attributes:
        message: Error message
        details: Additional error context as key-value pairs
    """

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        """Initialize exception with message and additional details.

        Args:
            message: Human-readable error message
            **kwargs: Additional context (e.g., field, operator, model)
        """
        self.message = message
        self.details: Dict[str, Any] = kwargs
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the complete error message with details."""
        if not self.details:
            return self.message

        details_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
        if self.message:
            return f"{self.message} ({details_str})"
        return details_str

    def __repr__(self) -> str:
        """Return detailed representation of the exception."""
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# Validation exceptions
class ValidationError(DataSearchError):
    """Raised when a criterion cannot be compiled against the target schema.

    Example:
        >>> raise ValidationError("Invalid criterion", key="price", op="GT")
    """


class InvalidFieldError(ValidationError):
    """Raised when a field path is blank or does not exist on the model.

    Example:
        >>> raise InvalidFieldError("Unknown attribute", field="colour", model="Order")
    """


class UnsupportedOperatorError(ValidationError):
    """Raised when an operator falls outside the closed operator set.

    This signals a defect in whatever produced the criterion; it is never
    raised for the UNKNOWN sentinel, which compiles to no predicate.

    Example:
        >>> raise UnsupportedOperatorError("Unsupported operator", op="LIKE")
    """


# Configuration exceptions
class ConfigurationError(DataSearchError):
    """Raised when configuration is invalid or missing.

    Example:
        >>> raise ConfigurationError("Invalid configuration", setting="SEARCH_BACKEND")
    """


class InvalidConfigError(ConfigurationError):
    """Raised when configuration values are invalid.

    Example:
        >>> raise InvalidConfigError("Unknown backend", config_key="SEARCH_BACKEND", value="redis")
    """
