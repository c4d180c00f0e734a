"""
Database initialization script.
This script creates all database tables in the correct order.
Run this as: python init_db.py [--drop]
"""

import argparse
import logging
import sys

# Configure logging
logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
logger = logging.getLogger("db-init")

from geopost.core.config import settings
from geopost.db.init_db import create_all_tables, drop_all_tables

def main():
    parser = argparse.ArgumentParser(description="Create the GeoPost tables")
    parser.add_argument("--drop", action="store_true", help="Drop every table first")
    args = parser.parse_args()

    logger.info(f"Initializing database at: {settings.DATABASE_URL}")
    if args.drop:
        drop_all_tables()

    if create_all_tables():
        logger.info("Database initialization completed successfully")
    else:
        logger.error("Database initialization failed")
        sys.exit(1)

if __name__ == "__main__":
    main()
