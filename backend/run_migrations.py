"""
Apply Alembic migrations up to head.

Usage:
    python run_migrations.py           # upgrade
    python run_migrations.py --check   # report current vs head, exit 1 if behind
"""

import argparse
import asyncio
import logging
import sys

from tokenmarket.core.config import settings
from tokenmarket.core.database import engine
from tokenmarket.core.migrations import current_revision, head_revision, upgrade_to_head

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
)
logger = logging.getLogger("run_migrations")


async def _current() -> str:
    try:
        return await current_revision()
    finally:
        await engine.dispose()


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--check", action="store_true", help="Only compare revisions")
    args = parser.parse_args()

    if args.check:
        current = asyncio.run(_current())
        head = head_revision()
        logger.info("Database at %s, head is %s", current, head)
        return 0 if current == head else 1

    upgrade_to_head()
    return 0


if __name__ == "__main__":
    sys.exit(main())
