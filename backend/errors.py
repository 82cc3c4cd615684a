"""
Classification of backend exceptions into the product error taxonomy.
"""

from __future__ import annotations

from google.api_core import exceptions

from shared.types import ErrorKind, SyncError

_KIND_BY_EXCEPTION: tuple[tuple[tuple[type[BaseException], ...], ErrorKind], ...] = (
    ((exceptions.NotFound,), ErrorKind.NOT_FOUND),
    ((exceptions.PermissionDenied, exceptions.Unauthenticated), ErrorKind.PERMISSION_DENIED),
    (
        (
            exceptions.ServiceUnavailable,
            exceptions.DeadlineExceeded,
            exceptions.RetryError,
            ConnectionError,
            TimeoutError,
        ),
        ErrorKind.CONNECTIVITY,
    ),
    ((exceptions.InvalidArgument, exceptions.FailedPrecondition), ErrorKind.INVALID_WRITE),
)


def classify_exception(exc: BaseException) -> ErrorKind:
    for exception_types, kind in _KIND_BY_EXCEPTION:
        if isinstance(exc, exception_types):
            return kind
    return ErrorKind.UNKNOWN


def to_sync_error(exc: BaseException) -> SyncError:
    return SyncError(kind=classify_exception(exc), message=str(exc))
