"""
Connexion a la base de donnees / Database connection.
Supporte SQLite (dev) et PostgreSQL (prod) via SQLAlchemy 2.0 async.
"""

from contextlib import asynccontextmanager

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from treatment_dispatch.config import settings

_is_sqlite = settings.DATABASE_URL.startswith("sqlite")

# Configuration moteur / Engine configuration
_engine_kwargs: dict = {
    "echo": False,
}

# PostgreSQL : pool de connexions / PostgreSQL: connection pooling
if not _is_sqlite:
    _engine_kwargs.update({
        "pool_size": 10,
        "max_overflow": 20,
        "pool_timeout": 30,
        "pool_recycle": 1800,
        "pool_pre_ping": True,
    })


def configure_sqlite(engine: AsyncEngine) -> None:
    """Cles etrangeres + SAVEPOINT fiables sous SQLite / Foreign keys and working SAVEPOINTs on SQLite.

    Le driver emet son propre BEGIN ; on le desactive pour que begin_nested() fonctionne.
    The driver emits its own BEGIN; it is disabled so begin_nested() behaves.
    BEGIN IMMEDIATE : les ecrivains concurrents attendent le verrou au lieu d'echouer.
    BEGIN IMMEDIATE: concurrent writers wait for the lock instead of failing mid-transaction.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


engine = create_async_engine(settings.DATABASE_URL, **_engine_kwargs)
if _is_sqlite:
    configure_sqlite(engine)

async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


class Base(DeclarativeBase):
    pass


async def get_db() -> AsyncSession:
    """Dependance FastAPI pour obtenir une session DB / FastAPI dependency for DB session."""
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


@asynccontextmanager
async def atomic(session: AsyncSession):
    """Unite de travail atomique / All-or-nothing unit of work.

    Commit si le bloc se termine, rollback complet sinon.
    Commits when the block exits cleanly, rolls everything back otherwise.
    """
    try:
        yield session
        await session.commit()
    except Exception:
        await session.rollback()
        raise


async def init_db():
    """Creer les tables au demarrage / Create tables on startup."""
    import treatment_dispatch.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
