"""
Hosted backend service and the per-session client used by the application
"""

from typing import Optional
import structlog

from sqlalchemy.engine import Engine
from sqlmodel import Session

from igreja.backend.auth import AuthClient
from igreja.backend.realtime import Channel, RealtimeHub
from minio import Minio

from igreja.backend.storage import StorageClient, create_object_store
from igreja.backend.tables import Table
from igreja.core.config import Settings, get_settings
from igreja.core.database import init_db
from igreja.core.errors import BackendError
from igreja.models import TABLES

logger = structlog.get_logger(__name__)


class HostedBackend:
    """Service side: database engine, object store and realtime fan-out"""

    def __init__(self, engine: Engine, settings: Optional[Settings] = None, object_store: Optional[Minio] = None):
        self.engine = engine
        self.settings = settings or get_settings()
        self.object_store = object_store if object_store is not None else create_object_store(self.settings)
        self.realtime = RealtimeHub()

    def session(self) -> Session:
        return Session(self.engine, expire_on_commit=False)

    def create_schema(self):
        init_db(self.engine)

    def client(self) -> "BackendClient":
        return BackendClient(self)

    def dispose(self):
        self.engine.dispose()
        logger.info("Backend engine disposed")


class BackendClient:
    """Client handle: tables, auth, storage and realtime channels"""

    def __init__(self, backend: HostedBackend):
        self.backend = backend
        self.auth = AuthClient(backend)
        self.storage = StorageClient(backend)

    @property
    def settings(self) -> Settings:
        return self.backend.settings

    def table(self, name: str) -> Table:
        model = TABLES.get(name)
        if model is None:
            raise BackendError(f'relation "public.{name}" does not exist', code="42P01")
        return Table(self.backend, name, model)

    def channel(self, table: str, **filters) -> Channel:
        return self.backend.realtime.channel(table, **filters)

    def subscribe_to_tenant_table(self, table: str, tenant_id, handler):
        """Row changes of one tenant's rows in a table"""
        return self.channel(table, tenant_id=tenant_id).subscribe(handler)

    def subscribe_to_user_changes(self, user_id, handler):
        """Changes to one user's profile row"""
        return self.channel("profiles", id=user_id).subscribe(handler)
