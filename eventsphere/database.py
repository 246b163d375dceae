from datetime import datetime, timezone

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool


Base = declarative_base()


def utcnow() -> datetime:
    """Naive UTC timestamp; SQLite stores datetimes without an offset."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def is_in_memory_sqlite(database_url: str) -> bool:
    if not database_url.startswith('sqlite'):
        return False
    return database_url in {'sqlite://', 'sqlite:///:memory:'} or 'mode=memory' in database_url


def create_store_engine(database_url: str) -> Engine:
    if is_in_memory_sqlite(database_url):
        # One shared connection, otherwise every pooled connection would see
        # its own empty database.
        return create_engine(
            database_url,
            connect_args={'check_same_thread': False},
            poolclass=StaticPool,
        )
    if database_url.startswith('sqlite'):
        return create_engine(database_url, connect_args={'check_same_thread': False})
    return create_engine(database_url)


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        bind=engine,
    )
