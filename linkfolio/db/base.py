import logging
import time

from sqlalchemy import text
from sqlalchemy.orm import declarative_base

# Create declarative base
Base = declarative_base()

# Models are imported in linkfolio/models/__init__.py to avoid circular imports

logger = logging.getLogger(__name__)


def init_db(max_retries: int = 30, retry_delay: int = 2):
    """Initialize database tables, waiting for the database to come up."""
    from linkfolio.db.session import engine

    # Register every model with Base.metadata before create_all()
    import linkfolio.models  # noqa: F401

    for attempt in range(max_retries):
        try:
            with engine.begin() as conn:
                conn.execute(text("SELECT 1"))
            Base.metadata.create_all(bind=engine)
            logger.info("Database tables created/updated successfully")
            return
        except Exception as e:
            if attempt < max_retries - 1:
                logger.warning(f"Database not ready, retrying in {retry_delay}s... (attempt {attempt + 1}/{max_retries})")
                time.sleep(retry_delay)
            else:
                logger.error(f"Failed to connect to database after {max_retries} attempts: {e}")
                raise
