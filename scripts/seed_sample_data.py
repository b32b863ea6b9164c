#!/usr/bin/env python3
"""
Seed script to populate a development database with demo data.

Inserts the sample client previews, visitor sessions for existing users
and content view metrics. Tables that already hold rows are left alone.

Run: python scripts/seed_sample_data.py [--create-tables] [--seed 42]
"""

import argparse
import asyncio
import logging
import random
import sys
from pathlib import Path
from typing import Optional

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from elevion.config.settings import get_settings
from elevion.infrastructure.db.database import close_db, get_db_manager
from elevion.infrastructure.db.storage import DatabaseStorage
from elevion.infrastructure.services.sample_data_service import SampleDataBootstrapper


logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("seed_sample_data")


async def main(create_tables: bool, seed: Optional[int]) -> int:
    settings = get_settings()
    if settings.is_production:
        logger.error("Refusing to seed sample data in production")
        return 1

    try:
        if create_tables:
            await get_db_manager().create_tables()
            logger.info("Tables created")

        storage = DatabaseStorage(settings=settings)
        rng = random.Random(seed) if seed is not None else None
        summary = await SampleDataBootstrapper(storage, rng=rng).run()
    finally:
        await close_db()

    print("\n=== Sample data ===")
    for step, inserted in summary.items():
        print(f"  {step}: {inserted} rows")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed Elevion sample data")
    parser.add_argument("--create-tables", action="store_true", help="Create tables from the models first")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible data")
    args = parser.parse_args()
    sys.exit(asyncio.run(main(args.create_tables, args.seed)))
