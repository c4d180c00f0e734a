import logging
from sqlalchemy import inspect

from geopost.db.base import Base
from geopost.db.session import engine

logger = logging.getLogger(__name__)


def create_all_tables() -> bool:
    """Create any missing tables and report which ones were new"""
    try:
        inspector = inspect(engine)
        existing_tables = inspector.get_table_names()

        Base.metadata.create_all(bind=engine)

        new_tables = set(inspect(engine).get_table_names()) - set(existing_tables)
        if new_tables:
            logger.info(f"Created new tables: {new_tables}")

        return True
    except Exception as e:
        logger.error(f"Error creating database tables: {e}")
        return False


def drop_all_tables() -> None:
    Base.metadata.drop_all(bind=engine)
    logger.info("Dropped all tables")
