"""SQLAlchemy engine, session factory and request-scoped session dependency."""
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from app.config import settings


def get_engine_kwargs(database_url: str) -> dict:
    """Engine options for the configured backend."""
    if database_url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True}


def configure_sqlite(engine: Engine) -> None:
    """Turn on foreign keys and let SQLAlchemy drive transactions on SQLite.

    pysqlite issues its own BEGIN lazily, which breaks SAVEPOINT; disabling
    that and emitting BEGIN from the ``begin`` event restores it.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_conn, connection_record):
        dbapi_conn.isolation_level = None
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


engine = create_engine(settings.DATABASE_URL, **get_engine_kwargs(settings.DATABASE_URL))
if settings.DATABASE_URL.startswith("sqlite"):
    configure_sqlite(engine)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """Yield a session for one request; closing it rolls back anything uncommitted."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
