from expiry_notifier.models.database import Base, engine
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

def init_database(bind=None):
    """Create the SQL record store tables"""
    bind = bind or engine
    try:
        logger.info("Creating database tables...")
        Base.metadata.create_all(bind=bind)
        logger.info("Database tables created successfully!")

    except Exception as e:
        logger.error(f"Error initializing database: {e}")
        raise

if __name__ == "__main__":
    init_database()
