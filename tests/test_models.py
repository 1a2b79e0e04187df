import pytest
import pytest_asyncio
from sqlalchemy import event
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from gallery.database import Base
from gallery.models.photo import Photo, PhotoStatus
from gallery.models.like import Like
from gallery.models.tag import Tag
from gallery.models.admin_session import AdminSession


@pytest_asyncio.fixture
async def db_session():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")

    @event.listens_for(engine.sync_engine, "connect")
    def set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_maker() as session:
        yield session
    await engine.dispose()


def _photo(photo_id="p-001", **overrides):
    fields = dict(
        id=photo_id, title="Rings & Light", location="Austin, TX",
        image_path=f"submissions/{photo_id}.jpg",
        created_at="2026-02-21T10:00:00+00:00",
    )
    fields.update(overrides)
    return Photo(**fields)


@pytest.mark.asyncio
async def test_create_photo_defaults(db_session):
    db_session.add(_photo())
    await db_session.commit()

    result = await db_session.get(Photo, "p-001")
    assert result is not None
    assert result.status == PhotoStatus.PENDING.value
    assert result.like_count == 0
    assert result.tags == []


@pytest.mark.asyncio
async def test_photo_tags_round_trip_as_list(db_session):
    db_session.add(_photo(tags=["rings", "manicured"]))
    await db_session.commit()

    result = await db_session.get(Photo, "p-001")
    assert result.tags == ["rings", "manicured"]


@pytest.mark.asyncio
async def test_photo_rejects_unknown_status(db_session):
    db_session.add(_photo(status="published"))
    with pytest.raises(IntegrityError):
        await db_session.commit()


@pytest.mark.asyncio
async def test_like_pair_is_unique(db_session):
    db_session.add(_photo())
    await db_session.commit()

    db_session.add(Like(photo_id="p-001", anon_fingerprint="fp-A", created_at="2026-02-21T10:01:00+00:00"))
    await db_session.commit()

    db_session.add(Like(photo_id="p-001", anon_fingerprint="fp-A", created_at="2026-02-21T10:02:00+00:00"))
    with pytest.raises(IntegrityError):
        await db_session.commit()


@pytest.mark.asyncio
async def test_like_requires_existing_photo(db_session):
    db_session.add(Like(photo_id="missing", anon_fingerprint="fp-A", created_at="2026-02-21T10:01:00+00:00"))
    with pytest.raises(IntegrityError):
        await db_session.commit()


@pytest.mark.asyncio
async def test_tag_name_unique(db_session):
    db_session.add(Tag(id="t-1", name="rings"))
    await db_session.commit()

    db_session.add(Tag(id="t-2", name="rings"))
    with pytest.raises(IntegrityError):
        await db_session.commit()


@pytest.mark.asyncio
async def test_admin_session_link_single_use(db_session):
    db_session.add(AdminSession(id="s-1", email="a@handleme.app", link_jti="j-1", created_at="2026-02-21T10:00:00+00:00"))
    await db_session.commit()

    result = await db_session.get(AdminSession, "s-1")
    assert result.revoked_at is None

    db_session.add(AdminSession(id="s-2", email="a@handleme.app", link_jti="j-1", created_at="2026-02-21T10:05:00+00:00"))
    with pytest.raises(IntegrityError):
        await db_session.commit()
