"""
Error taxonomy for alias creation and resolution.

Every error carries the HTTP status it maps to, so the API layer can render
them with a single exception handler.
"""


class AliasError(Exception):
    """Base class for all alias errors"""

    status_code: int = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationError(AliasError):
    """Malformed URL or slug. Never retried."""
    status_code = 422


class InvalidCharacterError(ValidationError, ValueError):
    """A symbol outside the Base62 alphabet"""


class ConflictError(AliasError):
    """Alias already held by another owner or URL"""
    status_code = 409


class NotFoundError(AliasError):
    """Alias has no resolvable target"""
    status_code = 404


class UnauthorizedError(AliasError):
    """Operation not allowed for this owner"""
    status_code = 401


class UnavailableError(AliasError):
    """The persistence store could not be reached"""
    status_code = 503
