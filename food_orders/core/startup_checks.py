from __future__ import annotations

import logging
from pathlib import Path

from alembic.config import Config
from alembic.script import ScriptDirectory
from sqlalchemy import inspect
from sqlalchemy.engine import Engine

from food_orders.core.config import (
    DATABASE_URL,
    ENV_NORMALIZED,
    HUBTEL_CLIENT_ID,
    HUBTEL_CLIENT_SECRET,
    HUBTEL_SENDER_ID,
    IS_PROD,
    JWT_SECRET_KEY,
    PAYSTACK_SECRET_KEY,
)

logger = logging.getLogger(__name__)
MIGRATIONS_PREFIX = "[MIGRATIONS]"
STARTUP_PREFIX = "[STARTUP]"


def validate_database_environment() -> None:
    if not DATABASE_URL:
        logger.critical("%s DATABASE_URL is not configured", STARTUP_PREFIX)
        raise RuntimeError("DATABASE_URL is required")
    if IS_PROD and DATABASE_URL.startswith("sqlite"):
        logger.critical("%s SQLite is forbidden in production", MIGRATIONS_PREFIX)
        raise RuntimeError("SQLite is forbidden in production environment")


def warn_missing_integrations() -> None:
    if not (HUBTEL_CLIENT_ID and HUBTEL_CLIENT_SECRET):
        logger.warning("%s Hubtel credentials missing; SMS runs in log-only mode", STARTUP_PREFIX)
    elif not HUBTEL_SENDER_ID:
        logger.warning("%s HUBTEL_SENDER_ID missing; Hubtel will reject sends without a sender", STARTUP_PREFIX)
    if not PAYSTACK_SECRET_KEY:
        logger.warning("%s PAYSTACK_SECRET_KEY missing; payment verification will fail", STARTUP_PREFIX)
    if not JWT_SECRET_KEY:
        logger.warning("%s JWT_SECRET_KEY missing; admin endpoints will reject every token", STARTUP_PREFIX)


def ensure_migrations_applied(*, engine: Engine, alembic_config_path: Path) -> None:
    if ENV_NORMALIZED == "test" or DATABASE_URL.startswith("sqlite"):
        logger.info("%s skipped migration check env=%s", MIGRATIONS_PREFIX, ENV_NORMALIZED)
        return

    if not alembic_config_path.exists():
        logger.critical("%s alembic config not found path=%s", MIGRATIONS_PREFIX, alembic_config_path)
        raise RuntimeError("alembic config not found")

    alembic_cfg = Config(str(alembic_config_path))
    script_directory = ScriptDirectory.from_config(alembic_cfg)
    expected_heads = set(script_directory.get_heads())

    with engine.connect() as connection:
        inspector = inspect(connection)
        if "alembic_version" not in inspector.get_table_names():
            logger.critical("%s alembic_version table missing", MIGRATIONS_PREFIX)
            raise RuntimeError("Database has no migration state")

        current_rows = connection.exec_driver_sql("SELECT version_num FROM alembic_version").fetchall()

    current_heads = {row[0] for row in current_rows if row and row[0]}
    if current_heads != expected_heads:
        logger.critical(
            "%s pending migration detected current=%s expected=%s",
            MIGRATIONS_PREFIX,
            sorted(current_heads),
            sorted(expected_heads),
        )
        raise RuntimeError("Pending migrations detected")

    logger.info("%s migration state verified", MIGRATIONS_PREFIX)
