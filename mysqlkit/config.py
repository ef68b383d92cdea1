"""Configuration management for mysqlkit."""

import os
import ssl

from dotenv import load_dotenv
from pydantic import BaseModel, Field

DEFAULT_TABLE_OPTIONS = "ENGINE=InnoDB PACK_KEYS=1 ROW_FORMAT=COMPRESSED"

_TRUE_VALUES = ["true", "1", "yes", "on"]


class Settings(BaseModel):
    """Connection and pool settings."""

    # Connection
    host: str = Field(default="127.0.0.1", description="Database server host")
    port: int = Field(default=3306, ge=1, le=65535, description="Database port")
    user: str = Field(default="", description="Database user")
    password: str | None = Field(default=None, description="Database password")
    database: str | None = Field(default=None, description="Default schema")
    connect_timeout: float = Field(
        default=30.0, gt=0, description="Connect timeout in seconds"
    )

    # TLS
    ssl_enabled: bool = Field(default=True, description="Whether to connect over TLS")
    ssl_verify: bool = Field(
        default=True,
        description="Whether server certificates must be valid",
    )
    ssl_ca: str | None = Field(default=None, description="Path to a CA bundle")

    # Pool
    pool_size: int = Field(default=10, ge=1, description="Pooled connections kept")
    max_overflow: int = Field(
        default=0, ge=0, description="Connections allowed beyond pool_size"
    )
    pool_timeout: float = Field(
        default=30.0, gt=0, description="Seconds to wait for a free connection"
    )
    pool_recycle: int = Field(
        default=3600, description="Seconds before a pooled connection is replaced"
    )

    # Statements
    table_options: str = Field(
        default=DEFAULT_TABLE_OPTIONS,
        description="Table options appended to CREATE TABLE statements",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    echo: bool = Field(default=False, description="Echo SQL through SQLAlchemy")

    def ssl_context(self) -> ssl.SSLContext | None:
        """Build the TLS context used by the driver, or None when TLS is off."""
        if not self.ssl_enabled:
            return None

        context = ssl.create_default_context(cafile=self.ssl_ca)
        if not self.ssl_verify:
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE
        return context


def load_settings() -> Settings:
    """Load settings from MYSQL_* environment variables."""

    # Load .env file if it exists
    load_dotenv()

    return Settings(
        host=os.getenv("MYSQL_HOST", "127.0.0.1"),
        port=int(os.getenv("MYSQL_PORT", "3306")),
        user=os.getenv("MYSQL_USER", ""),
        password=os.getenv("MYSQL_PASSWORD") or None,
        database=os.getenv("MYSQL_DATABASE") or None,
        connect_timeout=float(os.getenv("MYSQL_CONNECT_TIMEOUT", "30")),
        ssl_enabled=os.getenv("MYSQL_SSL", "true").lower() in _TRUE_VALUES,
        ssl_verify=os.getenv("MYSQL_SSL_VERIFY", "true").lower() in _TRUE_VALUES,
        ssl_ca=os.getenv("MYSQL_SSL_CA") or None,
        pool_size=int(os.getenv("MYSQL_POOL_SIZE", "10")),
        max_overflow=int(os.getenv("MYSQL_MAX_OVERFLOW", "0")),
        pool_timeout=float(os.getenv("MYSQL_POOL_TIMEOUT", "30")),
        table_options=os.getenv("MYSQL_TABLE_OPTIONS", DEFAULT_TABLE_OPTIONS),
        log_level=os.getenv("MYSQL_LOG_LEVEL", "INFO").upper(),
        echo=os.getenv("MYSQL_ECHO", "false").lower() in _TRUE_VALUES,
    )
