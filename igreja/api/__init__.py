"""
HTTP routers
"""

from fastapi import HTTPException, status
from typing import Optional

from igreja.context import AppContext
from igreja.core.errors import (
    AuthError,
    AuthErrorKind,
    BackendError,
    NotAuthenticated,
    NotFoundError,
    PermissionDenied,
    ValidationFailed,
)
from igreja.core.results import Result


def _detail(ctx: Optional[AppContext], fallback: str) -> str:
    if ctx is not None and ctx.notifier.last is not None:
        return ctx.notifier.last.description
    return fallback


def unwrap(result: Result, ctx: Optional[AppContext] = None):
    """Data of a successful result, or the matching HTTPException"""
    if result.ok and not result.not_found:
        return result.data
    error = result.error

    if error is None or isinstance(error, NotFoundError):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_detail(ctx, "Não encontrado"))
    if isinstance(error, ValidationFailed):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=[{"path": e.path, "message": e.message} for e in error.errors],
        )
    if isinstance(error, NotAuthenticated):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=error.message)
    if isinstance(error, PermissionDenied):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=error.message)
    if isinstance(error, AuthError):
        code = status.HTTP_401_UNAUTHORIZED if error.kind in (
            AuthErrorKind.INVALID_CREDENTIALS, AuthErrorKind.EMAIL_UNCONFIRMED
        ) else status.HTTP_400_BAD_REQUEST
        raise HTTPException(status_code=code, detail=_detail(ctx, error.message))
    if isinstance(error, BackendError) and error.code == "409":
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=_detail(ctx, error.message))
    if isinstance(error, BackendError) and error.code == "leader_linked":
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=_detail(ctx, error.message))
    if isinstance(error, BackendError) and error.code == "42501":
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=_detail(ctx, error.message))
    raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=_detail(ctx, "Erro no servidor"))
