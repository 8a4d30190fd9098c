"""
FastAPI dependencies: application context, route guard and admin check
"""

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from typing import AsyncGenerator, Optional
import structlog

from igreja.backend.service import HostedBackend
from igreja.context import AppContext
from igreja.core import messages

logger = structlog.get_logger(__name__)
security = HTTPBearer(auto_error=False)

SIGN_IN_PATH = "/auth"


def get_backend(request: Request) -> HostedBackend:
    return request.app.state.backend


async def get_context(
    backend: HostedBackend = Depends(get_backend),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> AsyncGenerator[AppContext, None]:
    """One application context per request, restored from the bearer token"""
    token = credentials.credentials if credentials else None
    ctx = await AppContext.create(backend, access_token=token)
    try:
        yield ctx
    finally:
        await ctx.close()


async def require_session(ctx: AppContext = Depends(get_context)) -> AppContext:
    """Route guard: unauthenticated requests are sent to the sign-in view"""
    if ctx.session.profile is None:
        logger.debug("Unauthenticated request redirected")
        raise HTTPException(
            status_code=status.HTTP_303_SEE_OTHER,
            detail=messages.NOT_AUTHENTICATED,
            headers={"Location": SIGN_IN_PATH},
        )
    return ctx


async def require_admin(ctx: AppContext = Depends(require_session)) -> AppContext:
    if not ctx.session.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=messages.ACCESS_DENIED)
    return ctx
