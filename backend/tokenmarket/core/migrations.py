"""
Alembic helpers for scripts and deploy hooks.

upgrade_to_head() runs Alembic's own event loop through env.py, so call it
from synchronous code only.
"""

import logging
import os
from typing import Optional

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory

from tokenmarket.core.database import engine

logger = logging.getLogger(__name__)

BACKEND_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def alembic_config() -> Config:
    cfg = Config(os.path.join(BACKEND_DIR, "alembic.ini"))
    cfg.set_main_option("script_location", os.path.join(BACKEND_DIR, "alembic"))
    # Keep the caller's logging setup
    cfg.attributes["configure_logger"] = False
    return cfg


def head_revision() -> Optional[str]:
    return ScriptDirectory.from_config(alembic_config()).get_current_head()


def upgrade_to_head() -> None:
    logger.info("Upgrading schema to %s", head_revision())
    command.upgrade(alembic_config(), "head")
    logger.info("Schema upgrade complete")


async def current_revision() -> Optional[str]:
    """Revision stamped in the database, or None for an unmigrated schema."""
    async with engine.connect() as conn:
        return await conn.run_sync(
            lambda sync_conn: MigrationContext.configure(sync_conn).get_current_revision()
        )
