class DomainError(Exception):
    """Base exception for business rule violations.

    ``status_code`` is the HTTP status the API boundary answers with.
    """

    status_code = 400


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    status_code = 400


class AuthenticationError(DomainError):
    """Raised when credentials or the session token are missing or invalid."""

    status_code = 401


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    status_code = 403


class NotFoundError(DomainError):
    """Raised when the requested record does not exist."""

    status_code = 404


class ConflictError(DomainError):
    """Raised when a unique key would be duplicated."""

    status_code = 409


class UpstreamError(DomainError):
    """Raised when an external collaborator (AI summarizer) fails."""

    status_code = 502


class InternalError(DomainError):
    """Raised on unexpected store failures."""

    status_code = 500
