"""Engine and session access for the dashboard database.

One engine per process, bound to ``DATABASE_URL`` (or an explicit URL) on
first use. SQLite connections get ``PRAGMA foreign_keys = ON`` so local
databases reject the same dangling references Postgres does.

    from db.client import session_scope

    with session_scope() as session:
        session.execute(...)
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

_ENGINE: Engine | None = None
_SESSION_MAKER: sessionmaker[Session] | None = None
_BOUND_URL: str | None = None


def _resolve_url(explicit: str | None) -> str:
    url = explicit or os.getenv("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL is not set and no database URL was given")
    return url


def _enforce_sqlite_foreign_keys(engine: Engine) -> None:
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_conn, _record):  # pragma: no cover - driver hook
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys = ON")
        cursor.close()


def get_engine(*, database_url: str | None = None) -> Engine:
    """Return the process engine, creating it on first use.

    Passing a URL that differs from the bound one raises ``RuntimeError``;
    call :func:`dispose_engine` first to rebind.
    """

    global _ENGINE, _SESSION_MAKER, _BOUND_URL
    if _ENGINE is not None:
        if database_url is not None and database_url != _BOUND_URL:
            raise RuntimeError(
                "database engine is bound to a different URL; call dispose_engine() first"
            )
        return _ENGINE

    url = _resolve_url(database_url)
    engine = create_engine(url, pool_pre_ping=True)
    if engine.dialect.name == "sqlite":
        _enforce_sqlite_foreign_keys(engine)
    _ENGINE = engine
    _SESSION_MAKER = sessionmaker(bind=engine, expire_on_commit=False)
    _BOUND_URL = url
    return engine


def get_session(*, database_url: str | None = None) -> Session:
    get_engine(database_url=database_url)
    assert _SESSION_MAKER is not None
    return _SESSION_MAKER()


@contextmanager
def session_scope(*, database_url: str | None = None) -> Iterator[Session]:
    """Yield a session; commit when the block exits cleanly, roll back otherwise."""

    session = get_session(database_url=database_url)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def dispose_engine() -> None:
    """Close pooled connections and forget the bound URL."""

    global _ENGINE, _SESSION_MAKER, _BOUND_URL
    if _ENGINE is not None:
        _ENGINE.dispose()
    _ENGINE = _SESSION_MAKER = _BOUND_URL = None


__all__ = ["get_engine", "get_session", "session_scope", "dispose_engine"]
