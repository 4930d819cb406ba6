# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Database engine and session helpers."""

from __future__ import annotations

from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import DeclarativeBase, scoped_session, sessionmaker

from useraccounts.shared.config import load_config
from useraccounts.shared.config.settings import DatabaseConfig
from useraccounts.shared.logging import logger

_config = load_config()


class Base(DeclarativeBase):
    pass


def build_engine(database: DatabaseConfig) -> Engine:
    url = make_url(database.url)
    is_sqlite = url.get_backend_name() == "sqlite"
    options: dict[str, Any] = {}
    connect_args: dict[str, object] = {}
    if is_sqlite:
        connect_args["check_same_thread"] = False

    # In-memory SQLite runs on SingletonThreadPool, which takes no queue pool options
    if not (is_sqlite and url.database in (None, "", ":memory:")):
        options.update(
            pool_size=database.pool_size,
            max_overflow=database.max_overflow,
            pool_timeout=database.pool_timeout,
        )
        if is_sqlite:
            connect_args["timeout"] = int(database.pool_timeout)

    engine = create_engine(
        url,
        echo=False,
        future=True,
        pool_pre_ping=True,
        connect_args=connect_args,
        **options,
    )

    if is_sqlite:
        event.listen(engine, "connect", _set_sqlite_pragmas)
    return engine


def _set_sqlite_pragmas(dbapi_conn, _) -> None:
    cur = dbapi_conn.cursor()
    try:
        cur.execute("PRAGMA journal_mode=WAL;")
        cur.execute("PRAGMA foreign_keys=ON;")
        cur.execute("PRAGMA busy_timeout=30000;")
    finally:
        cur.close()


ENGINE: Engine = build_engine(_config.database)

SessionLocal = scoped_session(
    sessionmaker(bind=ENGINE, autoflush=False, autocommit=False, expire_on_commit=False)
)


def init_db(engine: Engine | None = None) -> None:
    Base.metadata.create_all(bind=engine or ENGINE)
    logger.info("Database schema ensured")
