# File: hierfs/core/database/connection.py

import logging

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlalchemy_utils import database_exists, create_database

from hierfs.core.config.settings import settings

logger = logging.getLogger(__name__)


def create_catalog_engine(url: str, echo: bool = None) -> Engine:
    """
    Builds an engine for a catalog database and creates the database
    itself when it is missing.
    """
    parsed = make_url(url)
    is_sqlite = parsed.get_backend_name() == "sqlite"

    kwargs = {}
    if is_sqlite:
        # check_same_thread=False lets one engine serve sessions from many threads
        kwargs["connect_args"] = {"check_same_thread": False}
        if parsed.database in (None, "", ":memory:"):
            # In-memory SQLite lives inside a single connection
            kwargs["poolclass"] = StaticPool

    engine = create_engine(
        parsed,
        echo=settings.ECHO_SQL if echo is None else echo,
        pool_pre_ping=True,
        **kwargs
    )

    if not database_exists(engine.url):
        logger.info(f"Creating catalog database: {engine.url.render_as_string(hide_password=True)}")
        create_database(engine.url)

    return engine


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)
