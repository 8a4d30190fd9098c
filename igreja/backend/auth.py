"""
Auth interface: identities, sessions and the auth-state-change stream

Sign-up also runs the service's new-user hook, which creates the profile
row and, for a brand new organization, its tenant.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Dict, List, Optional
import re
import unicodedata
import uuid
import structlog

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from igreja.core.auth import create_access_token, hash_password, verify_password, verify_token
from igreja.core.errors import AuthError, AuthErrorKind, BackendError
from igreja.core.permissions import UserRole
from igreja.models.auth_identity import AuthIdentity
from igreja.models.leader import Leader
from igreja.models.profile import Profile
from igreja.models.tenant import Tenant

if TYPE_CHECKING:
    from igreja.backend.service import HostedBackend

logger = structlog.get_logger(__name__)

MIN_PASSWORD_LENGTH = 6


class AuthChangeEvent(str, Enum):
    INITIAL_SESSION = "INITIAL_SESSION"
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    USER_UPDATED = "USER_UPDATED"


@dataclass
class AuthUser:
    id: uuid.UUID
    email: str
    user_metadata: Dict[str, Any] = field(default_factory=dict)
    email_confirmed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_identity(cls, identity: AuthIdentity) -> "AuthUser":
        return cls(
            id=identity.id,
            email=identity.email,
            user_metadata=dict(identity.user_metadata or {}),
            email_confirmed_at=identity.email_confirmed_at,
            created_at=identity.created_at,
        )


@dataclass
class AuthSession:
    access_token: str
    user: AuthUser
    token_type: str = "bearer"


AuthListener = Callable[[AuthChangeEvent, Optional[AuthSession]], Awaitable[None]]


class AuthSubscription:
    def __init__(self, client: "AuthClient", listener: AuthListener):
        self._client = client
        self.listener = listener

    def unsubscribe(self):
        self._client._remove_listener(self.listener)


def slugify(name: str) -> str:
    """URL-safe slug: lowercase ascii words joined by hyphens"""
    ascii_name = unicodedata.normalize("NFKD", name).encode("ascii", "ignore").decode("ascii")
    slug = re.sub(r"[^a-z0-9]+", "-", ascii_name.lower()).strip("-")
    slug = slug[:50].strip("-")
    if len(slug) < 3:
        slug = f"igreja-{slug}" if slug else "igreja"
    return slug


def _unique_slug(session: Session, name: str) -> str:
    base = slugify(name)
    slug, counter = base, 2
    while session.exec(select(Tenant).where(Tenant.slug == slug)).first():
        suffix = f"-{counter}"
        slug = f"{base[:50 - len(suffix)]}{suffix}"
        counter += 1
    return slug


class AuthClient:
    """Auth calls made on behalf of one client; holds that client's session"""

    def __init__(self, backend: "HostedBackend"):
        self.backend = backend
        self._session: Optional[AuthSession] = None
        self._listeners: List[AuthListener] = []

    # Listeners

    def on_auth_state_change(self, listener: AuthListener) -> AuthSubscription:
        self._listeners.append(listener)
        return AuthSubscription(self, listener)

    def _remove_listener(self, listener: AuthListener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    async def _emit(self, event: AuthChangeEvent):
        logger.info("Auth state changed", auth_event=event.value)
        for listener in list(self._listeners):
            try:
                await listener(event, self._session)
            except Exception as e:
                logger.error("Auth listener failed", auth_event=event.value, error=str(e), exc_info=True)

    # Sessions

    @property
    def session(self) -> Optional[AuthSession]:
        return self._session

    async def get_session(self) -> Optional[AuthSession]:
        return self._session

    async def set_session(self, access_token: str) -> AuthSession:
        """Restore a session from a previously issued access token"""
        user_id = verify_token(access_token)
        if user_id is None:
            raise AuthError(AuthErrorKind.UNKNOWN, "Invalid or expired access token")
        identity = self._get_identity(user_id)
        if identity is None:
            raise AuthError(AuthErrorKind.UNKNOWN, "User from sub claim in JWT does not exist")
        self._session = AuthSession(access_token=access_token, user=AuthUser.from_identity(identity))
        await self._emit(AuthChangeEvent.INITIAL_SESSION)
        return self._session

    async def sign_up(
        self,
        email: str,
        password: str,
        data: Optional[Dict[str, Any]] = None,
        email_redirect_to: Optional[str] = None,
    ) -> AuthUser:
        """Register an identity and sign in when no confirmation is required"""
        identity = self._create_identity(email, password, data or {})
        logger.info("Identity signed up", user_id=str(identity.id), redirect_to=email_redirect_to)

        if identity.email_confirmed_at is not None:
            self._session = self._new_session(identity)
            await self._emit(AuthChangeEvent.SIGNED_IN)
        return AuthUser.from_identity(identity)

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        identity = self._find_identity(email)
        if identity is None or not verify_password(password, identity.password_hash):
            raise AuthError(AuthErrorKind.INVALID_CREDENTIALS, "Invalid login credentials")
        if self.backend.settings.AUTH_REQUIRE_EMAIL_CONFIRMATION and identity.email_confirmed_at is None:
            raise AuthError(AuthErrorKind.EMAIL_UNCONFIRMED, "Email not confirmed")

        with self.backend.session() as session:
            stored = session.get(AuthIdentity, identity.id)
            stored.last_sign_in_at = datetime.utcnow()
            session.add(stored)
            session.commit()
            session.refresh(stored)
            identity = stored

        self._session = self._new_session(identity)
        await self._emit(AuthChangeEvent.SIGNED_IN)
        return self._session

    async def sign_out(self):
        self._session = None
        await self._emit(AuthChangeEvent.SIGNED_OUT)

    async def update_user(self, password: Optional[str] = None, data: Optional[Dict[str, Any]] = None) -> AuthUser:
        """Change the signed-in identity's password and/or metadata"""
        if self._session is None:
            raise AuthError(AuthErrorKind.UNKNOWN, "Auth session missing!")
        if password is not None:
            self._check_password(password)

        with self.backend.session() as session:
            identity = session.get(AuthIdentity, self._session.user.id)
            if identity is None:
                raise AuthError(AuthErrorKind.UNKNOWN, "User not found")
            if password is not None:
                identity.password_hash = hash_password(password)
            if data:
                identity.user_metadata = {**(identity.user_metadata or {}), **data}
            identity.updated_at = datetime.utcnow()
            session.add(identity)
            session.commit()
            session.refresh(identity)

        self._session.user = AuthUser.from_identity(identity)
        await self._emit(AuthChangeEvent.USER_UPDATED)
        return self._session.user

    # Admin operations (do not touch the caller's session)

    async def admin_create_user(self, email: str, password: str, user_metadata: Optional[Dict[str, Any]] = None) -> AuthUser:
        identity = self._create_identity(email, password, user_metadata or {})
        logger.info("Identity provisioned", user_id=str(identity.id))
        return AuthUser.from_identity(identity)

    async def admin_delete_user(self, user_id: uuid.UUID):
        """Remove an identity together with its profile and leader links"""
        try:
            with self.backend.session() as session:
                identity = session.get(AuthIdentity, user_id)
                if identity is None:
                    raise AuthError(AuthErrorKind.UNKNOWN, "User not found")
                for leader in session.exec(select(Leader).where(Leader.user_id == user_id)).all():
                    leader.user_id = None
                    session.add(leader)
                profile = session.get(Profile, user_id)
                if profile is not None:
                    session.delete(profile)
                session.flush()
                session.delete(identity)
                session.commit()
        except SQLAlchemyError as e:
            raise BackendError(str(e), code="XX000") from e
        logger.info("Identity deleted", user_id=str(user_id))

    async def admin_confirm_email(self, user_id: uuid.UUID):
        with self.backend.session() as session:
            identity = session.get(AuthIdentity, user_id)
            if identity is None:
                raise AuthError(AuthErrorKind.UNKNOWN, "User not found")
            identity.email_confirmed_at = datetime.utcnow()
            session.add(identity)
            session.commit()

    # Internals

    def _check_password(self, password: str):
        if len(password) < MIN_PASSWORD_LENGTH:
            raise AuthError(
                AuthErrorKind.WEAK_PASSWORD,
                f"Password should be at least {MIN_PASSWORD_LENGTH} characters",
            )

    def _new_session(self, identity: AuthIdentity) -> AuthSession:
        token = create_access_token(identity.id, identity.email)
        return AuthSession(access_token=token, user=AuthUser.from_identity(identity))

    def _get_identity(self, user_id: uuid.UUID) -> Optional[AuthIdentity]:
        with self.backend.session() as session:
            return session.get(AuthIdentity, user_id)

    def _find_identity(self, email: str) -> Optional[AuthIdentity]:
        with self.backend.session() as session:
            return session.exec(
                select(AuthIdentity).where(AuthIdentity.email == email.strip().lower())
            ).first()

    def _create_identity(self, email: str, password: str, metadata: Dict[str, Any]) -> AuthIdentity:
        email = email.strip().lower()
        self._check_password(password)
        if self._find_identity(email) is not None:
            raise AuthError(AuthErrorKind.ALREADY_REGISTERED, "User already registered")

        now = datetime.utcnow()
        confirmed = None if self.backend.settings.AUTH_REQUIRE_EMAIL_CONFIRMATION else now
        identity = AuthIdentity(
            email=email,
            password_hash=hash_password(password),
            user_metadata=metadata,
            email_confirmed_at=confirmed,
        )

        try:
            with self.backend.session() as session:
                session.add(identity)
                session.flush()
                self._handle_new_user(session, identity)
                session.commit()
                session.refresh(identity)
        except IntegrityError as e:
            logger.warning("Sign-up rejected", error=str(e.orig))
            raise AuthError(AuthErrorKind.ALREADY_REGISTERED, "User already registered") from e
        except SQLAlchemyError as e:
            logger.error("Sign-up failed", error=str(e))
            raise AuthError(AuthErrorKind.UNKNOWN, "Database error saving new user") from e
        return identity

    def _handle_new_user(self, session: Session, identity: AuthIdentity):
        """Create the profile (and a tenant for a new organization) of a new identity"""
        metadata = identity.user_metadata or {}
        name = metadata.get("name") or identity.email.split("@")[0]

        tenant_id = metadata.get("tenant_id")
        if tenant_id:
            tenant_id = uuid.UUID(str(tenant_id))
            try:
                role = UserRole(metadata.get("role") or UserRole.MEMBER)
            except ValueError:
                role = UserRole.MEMBER
        else:
            church_name = metadata.get("church_name") or f"Igreja de {name}"
            tenant = Tenant(name=church_name, slug=_unique_slug(session, church_name), email=identity.email)
            session.add(tenant)
            session.flush()
            tenant_id = tenant.id
            role = UserRole.ADMIN
            logger.info("Tenant created for new organization", tenant_id=str(tenant_id), slug=tenant.slug)

        session.add(Profile(
            id=identity.id,
            tenant_id=tenant_id,
            name=name,
            email=identity.email,
            phone=metadata.get("phone"),
            role=role,
        ))
