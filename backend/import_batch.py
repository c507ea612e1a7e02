"""
Write one batch file into the store.

The file is JSON with start_version, end_version, volume_events and
listings (see tokenmarket.schemas.records.BatchFile). Hashes must already be
computed by the producer.

Usage:
    python import_batch.py batch_1000_1999.json [more.json ...]
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from tokenmarket.core.config import settings
from tokenmarket.core.database import async_session, engine
from tokenmarket.schemas.records import BatchFile
from tokenmarket.services.cache import CacheService
from tokenmarket.services.store import (
    InvalidRecordError,
    StoreError,
    parse_batch,
    write_batch,
)

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
)
logger = logging.getLogger("import_batch")


def load_batch_file(path: Path) -> BatchFile:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise InvalidRecordError(f"{path}: cannot be read ({e})") from e

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise InvalidRecordError(f"{path}: not valid JSON ({e})") from e

    try:
        return parse_batch(data, BatchFile)
    except InvalidRecordError as e:
        raise InvalidRecordError(f"{path}: {e}") from e


async def import_files(paths: list[Path]) -> int:
    failures = 0
    try:
        for path in paths:
            try:
                batch_file = load_batch_file(path)
                async with async_session() as session:
                    await write_batch(
                        session,
                        batch_file,
                        batch_file.start_version,
                        batch_file.end_version,
                    )
            except StoreError as e:
                failures += 1
                logger.error("Import of %s failed: %s", path, e)
    finally:
        await CacheService.close()
        await engine.dispose()
    return failures


def main() -> int:
    parser = argparse.ArgumentParser(description="Write batch files into the store")
    parser.add_argument("files", nargs="+", type=Path)
    args = parser.parse_args()

    failures = asyncio.run(import_files(args.files))
    if failures:
        logger.error("%d of %d files failed", failures, len(args.files))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
