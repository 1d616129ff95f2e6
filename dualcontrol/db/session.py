"""Engine and session construction for DualControl.

The workflow engine owns transaction boundaries, so callers get a
sessionmaker rather than a global session.
"""

import logging
from typing import Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from dualcontrol.core.config import Settings, get_settings
from dualcontrol.db.base import Base

logger = logging.getLogger(__name__)


def create_db_engine(settings: Optional[Settings] = None) -> Engine:
    """Create a SQLAlchemy engine from settings.

    SQLite connections get foreign key enforcement and a busy timeout so
    that concurrent writers wait for the database lock instead of failing.
    """
    settings = settings or get_settings()

    connect_args = {}
    if settings.is_sqlite:
        connect_args = {
            "check_same_thread": False,
            "timeout": settings.sqlite_busy_timeout,
        }

    engine = create_engine(
        settings.database_url,
        echo=settings.database_echo,
        connect_args=connect_args,
    )

    if settings.is_sqlite:
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)

    return engine


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_session_factory(engine: Engine) -> sessionmaker:
    """Session factory bound to the engine.

    expire_on_commit is off so records returned from a committed unit of
    work stay readable.
    """
    return sessionmaker(bind=engine, class_=Session, expire_on_commit=False)


def init_db(engine: Engine) -> None:
    """Create all tables known to the declarative base."""
    # Import models so they register with Base.metadata
    from dualcontrol.db import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("Database schema initialized")
