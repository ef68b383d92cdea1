"""Database engine factory for the aiomysql driver."""

from typing import Any

from sqlalchemy.engine import URL
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from mysqlkit.config import Settings
from mysqlkit.log import get_logger

logger = get_logger(__name__)

DRIVER_NAME = "mysql+aiomysql"


def setup_database_url(settings: Settings) -> URL:
    """Construct the database URL from settings.

    Args:
        settings: Connection settings

    Returns:
        SQLAlchemy URL for the aiomysql driver
    """
    return URL.create(
        DRIVER_NAME,
        username=settings.user or None,
        password=settings.password,
        host=settings.host,
        port=settings.port,
        database=settings.database,
    )


def build_connect_args(settings: Settings) -> dict[str, Any]:
    """Driver keyword arguments: connect timeout and TLS context."""
    connect_args: dict[str, Any] = {"connect_timeout": settings.connect_timeout}

    ssl_context = settings.ssl_context()
    if ssl_context is not None:
        connect_args["ssl"] = ssl_context
    else:
        logger.warning(f"TLS disabled for connections to {settings.host}")

    return connect_args


def create_database_engine(settings: Settings) -> AsyncEngine:
    """Create the pooled engine described by settings.

    No connection is opened until the first checkout.

    Args:
        settings: Connection and pool settings

    Returns:
        Configured async engine
    """
    database_url = setup_database_url(settings)
    logger.info(
        f"Creating database engine for: {database_url.render_as_string(hide_password=True)}"
    )

    return create_async_engine(
        database_url,
        echo=settings.echo,
        connect_args=build_connect_args(settings),
        pool_size=settings.pool_size,
        max_overflow=settings.max_overflow,
        pool_timeout=settings.pool_timeout,
        pool_recycle=settings.pool_recycle,
        pool_pre_ping=True,
    )
