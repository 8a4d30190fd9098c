"""
Authentication API endpoints
"""

from fastapi import APIRouter, Depends, HTTPException, status
import structlog

from igreja.api import unwrap
from igreja.context import AppContext
from igreja.core.dependencies import get_context
from igreja.schemas.auth import SignInRequest, SignUpRequest, TokenResponse

logger = structlog.get_logger(__name__)
router = APIRouter()


def _token(ctx: AppContext) -> TokenResponse:
    session = ctx.client.auth.session
    return TokenResponse(
        access_token=session.access_token,
        user_id=str(session.user.id),
        role=ctx.session.role.value if ctx.session.role else None,
    )


@router.get("")
async def sign_in_view():
    """Where unauthenticated requests are redirected"""
    return {"message": "Faça login para continuar", "sign_in": "/auth/sign-in", "sign_up": "/auth/sign-up"}


@router.post("/sign-up", status_code=status.HTTP_201_CREATED)
async def sign_up(payload: SignUpRequest, ctx: AppContext = Depends(get_context)):
    """Create an account; without an organization name a default church is created"""
    unwrap(
        await ctx.session.sign_up(payload.email, payload.password, payload.name, payload.organization_name),
        ctx,
    )
    if ctx.client.auth.session is None:
        return {"message": "Verifique seu email para confirmar o cadastro.", "access_token": None}
    return _token(ctx)


@router.post("/sign-in", response_model=TokenResponse)
async def sign_in(payload: SignInRequest, ctx: AppContext = Depends(get_context)):
    unwrap(await ctx.session.sign_in(payload.email, payload.password), ctx)
    return _token(ctx)


@router.post("/sign-out", status_code=status.HTTP_204_NO_CONTENT)
async def sign_out(ctx: AppContext = Depends(get_context)):
    if not ctx.session.is_authenticated:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Usuário não autenticado")
    await ctx.session.sign_out()
