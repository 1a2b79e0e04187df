import os
import tempfile
from urllib.parse import parse_qs, urlparse

import pytest
import pytest_asyncio

# Point settings at a throwaway directory before the app is imported.
_TEST_DIR = tempfile.mkdtemp(prefix="gallery-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_TEST_DIR, 'db.sqlite3')}"
os.environ["STORAGE_DIR"] = os.path.join(_TEST_DIR, "storage")
os.environ["PUBLIC_BASE_URL"] = "http://test"


@pytest.fixture(autouse=True, scope="session")
def setup_test_db():
    import asyncio

    # Disable API key auth for tests
    from gallery.config import settings
    settings.api_key = ""
    settings.admin_emails = []

    from gallery.database import create_tables, async_session
    from gallery.seed import seed_data

    async def _setup():
        await create_tables()
        async with async_session() as session:
            await seed_data(session)

    asyncio.run(_setup())


@pytest_asyncio.fixture
async def sqlite_engine(tmp_path):
    """A private file-backed database configured like the app's SQLite engine."""
    from sqlalchemy.ext.asyncio import create_async_engine
    from sqlalchemy.pool import NullPool

    from gallery.database import Base, configure_sqlite
    from gallery.models import AdminSession, Like, Photo, Tag  # noqa: F401

    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'service.sqlite3'}",
        poolclass=NullPool,
        connect_args={"timeout": 30},
    )
    configure_sqlite(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(sqlite_engine):
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    return async_sessionmaker(sqlite_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def read_session_factory(sqlite_engine):
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    from gallery.database import READ_ONLY_OPTION

    return async_sessionmaker(
        sqlite_engine.execution_options(**{READ_ONLY_OPTION: True}),
        class_=AsyncSession,
        expire_on_commit=False,
    )


class InMemoryBlobStore:
    """Blob store double with the same no-overwrite contract as LocalBlobStore."""

    def __init__(self, bucket: str = "photos", fail_with: Exception | None = None):
        self.bucket = bucket
        self.blobs: dict[str, tuple[bytes, str]] = {}
        self.fail_with = fail_with
        self.calls = 0

    async def upload(self, key, data, content_type):
        from gallery.services.storage import StorageConflict

        self.calls += 1
        if self.fail_with is not None:
            raise self.fail_with
        if key in self.blobs:
            raise StorageConflict(f"The resource already exists: {key}")
        self.blobs[key] = (data, content_type)

    async def exists(self, key):
        return key in self.blobs

    async def list_keys(self, prefix=""):
        return sorted(k for k in self.blobs if k.startswith(prefix))

    def public_url(self, key):
        return f"http://test/storage/v1/object/public/{self.bucket}/{key}"


@pytest.fixture
def memory_store():
    return InMemoryBlobStore()


@pytest.fixture
def captured_links():
    from gallery.services.auth_service import set_link_sender

    links: list[tuple[str, str]] = []
    previous = set_link_sender(lambda email, link: links.append((email, link)))
    yield links
    set_link_sender(previous)


def token_from_link(link: str) -> str:
    return parse_qs(urlparse(link).query)["token"][0]


@pytest_asyncio.fixture
async def admin_headers(captured_links):
    """Sign in through the magic-link flow and return bearer headers."""
    from httpx import ASGITransport, AsyncClient
    from gallery.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        await client.post("/api/v1/auth/magic-link", json={"email": "admin@handleme.app"})
        token = token_from_link(captured_links[-1][1])
        response = await client.get("/api/v1/auth/callback", params={"token": token})
    access_token = response.json()["data"]["access_token"]
    return {"Authorization": f"Bearer {access_token}"}
