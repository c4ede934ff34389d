"""
Application error taxonomy.

Auth and mutation errors are reported to the caller with the outcome of the
action that raised them. Role lookup and fetch errors are recovered locally
and only logged.
"""

from typing import Optional

from sqlalchemy.exc import IntegrityError


UNIQUE_VIOLATION = "23505"


class AppError(Exception):
    status_code = 400
    detail = "Request failed"

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or self.detail
        super().__init__(self.detail)


class AuthError(AppError):
    status_code = 401
    detail = "Invalid email or password"


class SessionMissingError(AuthError):
    detail = "Auth session missing"


class ForbiddenError(AppError):
    status_code = 403
    detail = "Not authorized for this tenant"


class NotFoundError(AppError):
    status_code = 404
    detail = "Not found"


class RoleLookupError(AppError):
    status_code = 503
    detail = "Role lookup failed"


class FetchError(AppError):
    status_code = 503
    detail = "Failed to load data"


class MutationError(AppError):
    detail = "Failed to save changes"


class ConflictError(MutationError):
    status_code = 409
    detail = "Record already exists"


class InvalidTransitionError(AppError):
    status_code = 409

    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot change status from '{current}' to '{requested}'")


def is_unique_violation(exc: IntegrityError) -> bool:
    orig = exc.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code == UNIQUE_VIOLATION:
        return True
    message = str(orig).lower()
    return "unique constraint" in message or "duplicate key" in message


def classify_integrity_error(exc: IntegrityError, conflict_detail: str, generic_detail: str) -> MutationError:
    """Map a driver integrity error onto ConflictError or a generic MutationError."""
    if is_unique_violation(exc):
        return ConflictError(conflict_detail)
    return MutationError(generic_detail)
