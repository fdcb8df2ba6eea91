# In: database.py

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from config import Config

MEMORY_URLS = ("sqlite://", "sqlite:///:memory:")


def make_engine(url: str):
    """
    Build an engine for the given SQLite URL.

    Store calls run synchronously on the event loop thread (see main.get_db),
    so only in-process SQLite is accepted. In-memory SQLite needs a single
    shared connection, otherwise every pooled connection would see its own
    empty database.
    """
    if not url.startswith("sqlite"):
        raise ValueError(f"DATABASE_URL must be a SQLite URL, got {url!r}")
    kwargs = {"connect_args": {"check_same_thread": False}}
    if url in MEMORY_URLS:
        kwargs["poolclass"] = StaticPool
    return create_engine(url, **kwargs)


def make_session_factory(bind):
    return sessionmaker(autocommit=False, autoflush=False, bind=bind, expire_on_commit=False)


engine = make_engine(Config.DATABASE_URL)
SessionLocal = make_session_factory(engine)

Base = declarative_base()
