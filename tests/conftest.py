"""
Test configuration for pytest
"""

import pytest
import pytest_asyncio
import os
from typing import AsyncGenerator, Generator

# Test environment variables (before anything reads the settings)
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["JWT_SECRET_KEY"] = "test-jwt-secret"
os.environ["STORAGE_PUBLIC_URL"] = "http://testserver/storage"
os.environ["SITE_URL"] = "http://igreja.test"
os.environ["DEBUG"] = "false"

from igreja.backend.service import HostedBackend  # noqa: E402
from igreja.context import AppContext  # noqa: E402
from igreja.core.database import create_db_engine  # noqa: E402
from factories import ADMIN_EMAIL, sign_up  # noqa: E402
from object_store import InMemoryObjectStore  # noqa: E402


@pytest.fixture(scope="function")
def backend() -> Generator[HostedBackend, None, None]:
    """Fresh in-memory database and object store for each test"""
    engine = create_db_engine("sqlite:///:memory:", echo=False)
    store = InMemoryObjectStore(buckets=("event-banners", "church-logos"))
    backend = HostedBackend(engine, object_store=store)
    backend.create_schema()

    yield backend

    backend.dispose()


@pytest_asyncio.fixture
async def ctx(backend) -> AsyncGenerator[AppContext, None]:
    """Application context with nobody signed in"""
    context = await AppContext.create(backend)
    yield context
    await context.close()


@pytest_asyncio.fixture
async def admin_ctx(backend) -> AsyncGenerator[AppContext, None]:
    """Signed-in admin of a freshly created church"""
    context = await sign_up(backend, ADMIN_EMAIL, "Ana", "Igreja X")
    yield context
    await context.close()


@pytest_asyncio.fixture
async def other_ctx(backend) -> AsyncGenerator[AppContext, None]:
    """Signed-in admin of a second, unrelated church"""
    context = await sign_up(backend, "bruno@outra.com", "Bruno", "Igreja Y")
    yield context
    await context.close()
