"""Process start-up wiring.

Builds the database engine, session factory, handler registry and
workflow engine from settings.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from dualcontrol.core.config import Settings, get_settings
from dualcontrol.core.workflow import WorkflowEngine
from dualcontrol.db.seed import seed_default_users
from dualcontrol.db.session import create_db_engine, create_session_factory, init_db
from dualcontrol.handlers import HandlerRegistry, create_default_registry


LOG_FORMAT = "%(asctime)s [%(levelname)s] [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"


def configure_logging(settings: Settings) -> logging.Logger:
    """Attach console and optional rotating file handlers to the package logger.

    Module loggers are named after their modules, so everything under
    ``dualcontrol`` propagates here. Calling this again is a no-op once
    handlers are attached.

    Raises:
        ValueError: If settings.log_level is not a logging level name
    """
    level = getattr(logging, settings.log_level.upper(), None)
    if not isinstance(level, int):
        raise ValueError(f"Invalid log level: {settings.log_level}")

    root = logging.getLogger("dualcontrol")
    root.setLevel(level)
    if root.handlers:
        return root

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    if settings.file_logging:
        log_path = Path(settings.log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path / "dualcontrol.log",
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
        )
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    return root


def build_workflow_engine(
    settings: Optional[Settings] = None,
    *,
    registry: Optional[HandlerRegistry] = None,
    create_schema: bool = False,
) -> WorkflowEngine:
    """Build a WorkflowEngine wired to the configured database.

    Args:
        settings: Settings to use (defaults to get_settings())
        registry: Handler registry (defaults to the built-in handlers)
        create_schema: Create missing tables and seed default users

    Returns:
        Ready-to-use WorkflowEngine
    """
    settings = settings or get_settings()
    configure_logging(settings)

    engine = create_db_engine(settings)
    session_factory = create_session_factory(engine)

    if create_schema:
        init_db(engine)
        if settings.seed_default_users:
            with session_factory.begin() as db:
                seed_default_users(db)

    return WorkflowEngine(
        session_factory,
        registry or create_default_registry(),
        default_page_size=settings.default_page_size,
        max_page_size=settings.max_page_size,
    )
