"""Database initialization utilities."""
import logging

from sqlalchemy import inspect
from sqlalchemy.engine import Engine

from app.db.base import Base, import_models
from app.db.session import engine as default_engine

logger = logging.getLogger(__name__)


def init_db(engine: Engine = None) -> None:
    """
    Create any missing tables.

    Suitable for development and tests; production schemas are expected
    to be managed by migrations.
    """
    engine = engine or default_engine
    try:
        import_models()
        existing_tables = set(inspect(engine).get_table_names())
        Base.metadata.create_all(bind=engine)
        created = set(Base.metadata.tables) - existing_tables
        if created:
            logger.info(f"Created {len(created)} database tables")
        else:
            logger.info(f"Database already initialized with {len(existing_tables)} tables")
    except Exception as e:
        logger.error(f"Error initializing database: {e}")
        raise


def drop_db(engine: Engine = None) -> None:
    """
    Drop all database tables.

    WARNING: This will delete all data!
    """
    engine = engine or default_engine
    try:
        Base.metadata.drop_all(bind=engine)
        logger.warning("All database tables dropped")
    except Exception as e:
        logger.error(f"Error dropping database: {e}")
        raise


def reset_db(engine: Engine = None) -> None:
    """Drop and recreate all tables."""
    logger.warning("Resetting database...")
    drop_db(engine)
    init_db(engine)
    logger.info("Database reset complete")
