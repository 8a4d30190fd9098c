"""
Role-based capability checks (advisory, UX gating only)
"""

from enum import Enum
from typing import Optional, Set


class UserRole(str, Enum):
    """Application roles, cumulative: admin includes leader includes member"""
    ADMIN = "admin"
    LEADER = "leader"
    MEMBER = "member"


class Capability(str, Enum):
    """Capability names checked by views"""
    # Leader capabilities
    VIEW_MEMBERS = "view_members"
    CREATE_APPOINTMENTS = "create_appointments"
    MANAGE_EVENTS = "manage_events"
    VIEW_REPORTS = "view_reports"
    EDIT_MEMBER_BASIC_INFO = "edit_member_basic_info"

    # Member capabilities
    VIEW_OWN_APPOINTMENTS = "view_own_appointments"
    REGISTER_FOR_EVENTS = "register_for_events"
    VIEW_PUBLIC_EVENTS = "view_public_events"


# Fixed capability sets; admin is not listed because it is granted everything
ROLE_CAPABILITIES = {
    UserRole.LEADER: frozenset({
        Capability.VIEW_MEMBERS,
        Capability.CREATE_APPOINTMENTS,
        Capability.MANAGE_EVENTS,
        Capability.VIEW_REPORTS,
        Capability.EDIT_MEMBER_BASIC_INFO,
    }),
    UserRole.MEMBER: frozenset({
        Capability.VIEW_OWN_APPOINTMENTS,
        Capability.REGISTER_FOR_EVENTS,
        Capability.VIEW_PUBLIC_EVENTS,
    }),
}

# Per-leader permission strings that can be stored on a leader record
LEADER_PERMISSIONS = (
    "manage_events",
    "manage_members",
    "manage_appointments",
    "view_reports",
    "manage_finances",
)


def _coerce_role(role) -> Optional[UserRole]:
    if role is None:
        return None
    try:
        return UserRole(role)
    except ValueError:
        return None


def get_capabilities_for_role(role) -> Set[str]:
    """Capability strings granted to a non-admin role"""
    return {c.value for c in ROLE_CAPABILITIES.get(_coerce_role(role), frozenset())}


def is_admin(role) -> bool:
    return _coerce_role(role) == UserRole.ADMIN


def is_leader(role) -> bool:
    return _coerce_role(role) in (UserRole.LEADER, UserRole.ADMIN)


def is_member(role) -> bool:
    return _coerce_role(role) in (UserRole.MEMBER, UserRole.LEADER, UserRole.ADMIN)


def has_permission(role, capability) -> bool:
    """Check a capability for a role; no role means no permissions"""
    resolved = _coerce_role(role)
    if resolved is None:
        return False
    if resolved == UserRole.ADMIN:
        return True
    name = capability.value if isinstance(capability, Capability) else str(capability)
    return name in get_capabilities_for_role(resolved)
