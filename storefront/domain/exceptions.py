# storefront/domain/exceptions.py
"""Bledy domenowe. Handlery w storefront.api.errors mapuja je na statusy HTTP."""


class StorefrontError(Exception):
    status_code = 500

    def __init__(self, message: str, **extra):
        super().__init__(message)
        self.message = message
        self.extra = extra


class ValidationFailed(StorefrontError, ValueError):
    status_code = 400


class AuthError(StorefrontError):
    status_code = 401


class AccessDenied(StorefrontError, PermissionError):
    status_code = 403


class NotFoundError(StorefrontError, LookupError):
    status_code = 404


class ConflictError(StorefrontError):
    status_code = 409


class RateLimited(StorefrontError):
    status_code = 429


class ExternalServiceError(StorefrontError):
    """Blad bramki platnosci / SMS / hostingu obrazkow."""

    status_code = 502

    def __init__(self, message: str, upstream_status: int | None = None, **extra):
        super().__init__(message, **extra)
        self.upstream_status = upstream_status
