#!/usr/bin/env python3
"""
Initialize Database
Create the users table in the configured PostgreSQL database
"""

import sys
import argparse
from pathlib import Path
from loguru import logger

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import load_database_config
from services.database import PostgresManager
from services.database.schema import create_tables


def main():
    parser = argparse.ArgumentParser(description="Create the users table")
    parser.add_argument("--database", type=str, default=None,
                        help="Database name (defaults to DB_NAME)")
    args = parser.parse_args()

    config = load_database_config()
    db = PostgresManager(config)

    try:
        db.initialize(args.database)
        create_tables(db)
    finally:
        db.close()

    logger.info(f"Users table ready in {db.config.host}:{db.config.port}/{args.database or config.database}")


if __name__ == "__main__":
    main()
