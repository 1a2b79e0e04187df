import os

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool

from gallery.config import settings


READ_ONLY_OPTION = "gallery_read_only"


def _get_database_url() -> str:
    url = settings.database_url
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql+asyncpg://", 1)
    elif url.startswith("postgresql://"):
        url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return url


def _is_sqlite() -> bool:
    return settings.database_url.startswith("sqlite")


def _ensure_sqlite_dir(url: str) -> None:
    path = url.split(":///", 1)[-1]
    if path and path != ":memory:":
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)


def configure_sqlite(engine) -> None:
    """Enable foreign keys and take the write lock when a transaction begins.

    pysqlite defers BEGIN until the first DML statement, which lets two
    concurrent like transactions deadlock on lock promotion. Emitting our own
    BEGIN IMMEDIATE makes writers queue on the busy timeout instead.
    Connections carrying the read-only execution option start a plain
    deferred BEGIN, so gallery reads never wait behind writers.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def set_sqlite_pragma(dbapi_conn, connection_record):
        dbapi_conn.isolation_level = None
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def do_begin(conn):
        if conn.get_execution_options().get(READ_ONLY_OPTION):
            conn.exec_driver_sql("BEGIN")
        else:
            conn.exec_driver_sql("BEGIN IMMEDIATE")


_database_url = _get_database_url()

_engine_kwargs: dict = {"echo": False}
if _is_sqlite():
    _ensure_sqlite_dir(_database_url)
    # One connection per session; aiosqlite connections run on their own threads.
    _engine_kwargs.update(
        poolclass=NullPool,
        connect_args={"timeout": settings.sqlite_busy_timeout},
    )
else:
    _engine_kwargs.update(pool_size=5, max_overflow=10, pool_pre_ping=True)

engine = create_async_engine(_database_url, **_engine_kwargs)
async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

if _is_sqlite():
    configure_sqlite(engine)

# Same pool and listeners; only the BEGIN statement differs on SQLite.
read_session = async_sessionmaker(
    engine.execution_options(**{READ_ONLY_OPTION: True}),
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    pass


async def create_tables():
    async with engine.begin() as conn:
        from gallery.models import photo, like, tag, admin_session  # noqa: F401
        await conn.run_sync(Base.metadata.create_all)


async def get_db():
    async with async_session() as session:
        yield session


async def get_read_db():
    async with read_session() as session:
        yield session
