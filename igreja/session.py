"""
Session store: the authenticated identity and its profile

Profile loading follows the auth-state-change stream. sign_in only talks
to the auth interface; the SIGNED_IN notification is what loads the
profile and, through ProfileChanged, the tenant.
"""

from typing import Optional
import uuid
import structlog

from pydantic import ValidationError

from igreja.backend.auth import AuthChangeEvent, AuthSession, AuthUser
from igreja.backend.service import BackendClient
from igreja.core import messages
from igreja.core.errors import AuthError, AuthErrorKind, BackendError, NotAuthenticated, ValidationFailed
from igreja.core.events import EventBus, ProfileChanged, SignedOut
from igreja.core.notifications import Notifier
from igreja.core.permissions import UserRole, has_permission, is_admin, is_leader, is_member
from igreja.core.results import Result
from igreja.models.profile import Profile
from igreja.schemas.auth import SignUpRequest

logger = structlog.get_logger(__name__)

PROFILE_LOAD_FAILED = "Não foi possível carregar o perfil do usuário."


class SessionStore:
    """Current identity, profile and the role checks derived from it"""

    def __init__(self, client: BackendClient, bus: EventBus, notifier: Notifier):
        self.client = client
        self.bus = bus
        self.notifier = notifier
        self.user: Optional[AuthUser] = None
        self.profile: Optional[Profile] = None
        self._subscription = None

    def start(self):
        if self._subscription is None:
            self._subscription = self.client.auth.on_auth_state_change(self._on_auth_change)

    def close(self):
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    async def _on_auth_change(self, event: AuthChangeEvent, session: Optional[AuthSession]):
        if event == AuthChangeEvent.SIGNED_OUT or session is None:
            await self._clear()
            return
        self.user = session.user
        await self.refresh_profile()

    # Lifecycle

    async def restore_session(self, access_token: Optional[str] = None) -> Optional[AuthUser]:
        """Resume an existing session; failures leave the store signed out"""
        try:
            if access_token:
                await self.client.auth.set_session(access_token)
            else:
                session = await self.client.auth.get_session()
                if session is not None and self.user is None:
                    self.user = session.user
                    await self.refresh_profile()
        except Exception as e:
            logger.warning("Session restore failed", error=str(e))
            self.user = None
            self.profile = None
        return self.user

    async def sign_in(self, email: str, password: str) -> Result[AuthSession]:
        try:
            session = await self.client.auth.sign_in_with_password(email, password)
        except AuthError as e:
            logger.info("Sign-in rejected", kind=e.kind.value)
            self.notifier.error(messages.auth_message(e.kind), title="Erro no login")
            return Result.failure(e)
        except BackendError as e:
            logger.error("Sign-in failed", error=e.message, code=e.code)
            self.notifier.error(messages.auth_message(AuthErrorKind.UNKNOWN), title="Erro no login")
            return Result.failure(e)
        return Result.success(session)

    async def sign_up(
        self,
        email: str,
        password: str,
        name: str,
        organization_name: Optional[str] = None,
    ) -> Result[AuthUser]:
        """Register a new identity; without an organization a default church is created"""
        try:
            request = SignUpRequest(email=email, password=password, name=name, organization_name=organization_name)
        except ValidationError as e:
            error = ValidationFailed.from_pydantic(e)
            self.notifier.error(messages.invalid_data(str(error)), title="Erro no cadastro")
            return Result.failure(error)

        metadata = {"name": request.name}
        if request.organization_name:
            metadata["church_name"] = request.organization_name

        try:
            user = await self.client.auth.sign_up(
                request.email,
                request.password,
                data=metadata,
                email_redirect_to=f"{self.client.settings.SITE_URL}/",
            )
        except AuthError as e:
            logger.info("Sign-up rejected", kind=e.kind.value)
            self.notifier.error(messages.auth_message(e.kind), title="Erro no cadastro")
            return Result.failure(e)
        except BackendError as e:
            logger.error("Sign-up failed", error=e.message, code=e.code)
            self.notifier.error(messages.auth_message(AuthErrorKind.UNKNOWN), title="Erro no cadastro")
            return Result.failure(e)

        self.notifier.success("Conta criada com sucesso!")
        return Result.success(user)

    async def sign_out(self):
        """Clear identity, profile and (through SignedOut) the cached tenant"""
        try:
            await self.client.auth.sign_out()
        except BackendError as e:
            logger.error("Sign-out failed", error=e.message)
        if self.user is not None or self.profile is not None:
            await self._clear()

    async def _clear(self):
        had_profile = self.profile is not None
        self.user = None
        self.profile = None
        if had_profile:
            await self.bus.publish(ProfileChanged(profile_id=None, tenant_id=None))
        await self.bus.publish(SignedOut())

    async def refresh_profile(self) -> Result[Profile]:
        """Reload the profile row; a failed reload keeps the previous profile"""
        if self.user is None:
            return Result.failure(NotAuthenticated())

        try:
            profile = await self.client.table("profiles").select().eq("id", self.user.id).maybe_single()
        except BackendError as e:
            logger.error("Profile fetch failed", user_id=str(self.user.id), error=e.message, code=e.code)
            self.notifier.error(PROFILE_LOAD_FAILED)
            return Result.failure(e)

        if profile is None or profile.tenant_id is None or profile.role is None:
            logger.warning("Profile missing or incomplete", user_id=str(self.user.id))
            self.notifier.error(PROFILE_LOAD_FAILED)
            return Result.missing()

        self.profile = profile
        await self.bus.publish(ProfileChanged(profile_id=profile.id, tenant_id=profile.tenant_id))
        return Result.success(profile)

    # Derived state

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def role(self) -> Optional[UserRole]:
        return self.profile.role if self.profile else None

    @property
    def tenant_id(self) -> Optional[uuid.UUID]:
        return self.profile.tenant_id if self.profile else None

    @property
    def is_admin(self) -> bool:
        return is_admin(self.role)

    @property
    def is_leader(self) -> bool:
        return is_leader(self.role)

    @property
    def is_member(self) -> bool:
        return is_member(self.role)

    def has_permission(self, capability) -> bool:
        return has_permission(self.role, capability)
