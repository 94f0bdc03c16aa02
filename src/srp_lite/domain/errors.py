"""Domain error classes.

Protocol-agnostic errors that represent failures around the filter engine.
The engine itself absorbs malformed input; these errors are raised by the
collaborators around it (fetchers, webhooks, configuration) and translated
to HTTP responses by the entrypoint adapters.
"""

from typing import Any


class DomainError(Exception):
    """Base class for all domain errors.

    Contains error information that can be translated to HTTP or any other
    transport format.
    """

    error_code: str = "DOMAIN_ERROR"

    def __init__(self, message: str, **context: Any) -> None:
        """Create a domain error.

        Args:
            message: Human-readable error message
            **context: Additional context for the error (e.g., tag, hostname)
        """
        self.message = message
        self.context = context
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert to structured format for protocol translation."""
        return {
            "message": self.message,
            "code": self.error_code,
            **self.context,
        }


class ValidationError(DomainError):
    """Request validation error.

    Examples:
        - Revalidation body with a non-string tag
        - Negative page number on an explicit request

    Protocol mappings:
        - REST: 422 Unprocessable Entity
    """

    error_code: str = "VALIDATION_ERROR"

    def __init__(
        self,
        message: str | None = None,
        errors: list[dict[str, str]] | None = None,
        **context: Any,
    ) -> None:
        """Create a validation error.

        Args:
            message: Overall validation error message (optional if errors provided)
            errors: List of field-specific errors, each with 'field' and 'message'
            **context: Additional context
        """
        self.errors: list[dict[str, str]] | None
        if errors:
            self.errors = errors
            msg = message or "Validation failed"
        else:
            self.errors = None
            msg = message or "Validation error"

        super().__init__(msg, **context)

    def to_dict(self) -> dict[str, Any]:
        """Convert to structured format."""
        if self.errors:
            return {
                "message": self.message,
                "code": self.error_code,
                "errors": self.errors,
                **self.context,
            }
        return super().to_dict()


class NotFoundError(DomainError):
    """No results page matches the requested path.

    Examples:
        - /bogus/ (no leading condition segment)
        - /used-vehicles/toyota/camry/extra/ (segments left over)

    Protocol mappings:
        - REST: 404 Not Found
    """

    error_code: str = "NOT_FOUND"

    def __init__(self, resource: str, identifier: str | None = None, **context: Any) -> None:
        if identifier:
            message = f"{resource} '{identifier}' not found"
        else:
            message = f"{resource} not found"

        super().__init__(message, resource=resource, identifier=identifier, **context)


class UnauthorizedError(DomainError):
    """Authentication required or failed (e.g., wrong revalidation secret).

    Protocol mappings:
        - REST: 401 Unauthorized
    """

    error_code: str = "UNAUTHORIZED"


class UpstreamError(DomainError):
    """The inventory collaborator failed to answer.

    Raised by fetcher adapters; the response cache is left untouched.

    Protocol mappings:
        - REST: 502 Bad Gateway
    """

    error_code: str = "UPSTREAM_ERROR"


class ConfigurationError(DomainError):
    """Required server configuration is missing.

    Protocol mappings:
        - REST: 500 Internal Server Error
    """

    error_code: str = "CONFIGURATION_ERROR"
