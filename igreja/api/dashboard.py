"""
Dashboard API endpoint
"""

from fastapi import APIRouter, Depends

from igreja.api import unwrap
from igreja.context import AppContext
from igreja.core.dependencies import require_session
from igreja.core.permissions import get_capabilities_for_role

router = APIRouter()


@router.get("/")
async def dashboard(ctx: AppContext = Depends(require_session)):
    """Church statistics plus who is signed in"""
    stats = unwrap(await ctx.dashboard.stats(), ctx)
    profile = ctx.session.profile
    return {
        "church": ctx.tenant,
        "profile": {"id": profile.id, "name": profile.name, "email": profile.email, "role": profile.role},
        "is_admin": ctx.session.is_admin,
        "capabilities": sorted(get_capabilities_for_role(profile.role)) if not ctx.session.is_admin else ["*"],
        "stats": stats,
    }
