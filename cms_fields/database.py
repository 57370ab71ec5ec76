from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from cms_fields.config import settings
import logging

logger = logging.getLogger(__name__)

DATABASE_URL = settings.database_url

connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

# Environment-based configurations
if settings.environment == "production":
    engine = create_engine(
        DATABASE_URL,
        connect_args=connect_args,
        pool_pre_ping=True,
        pool_recycle=1800,
    )
else:
    engine = create_engine(
        DATABASE_URL,
        connect_args=connect_args,
        echo=settings.debug,  # Enable query logging in debug mode
    )

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    expire_on_commit=False,
)

Base = declarative_base()


def get_db():
    logger.debug("Opening database session...")
    db = SessionLocal()
    try:
        yield db
    except Exception as e:
        logger.error(f"Database session error: {e}")
        db.rollback()
        raise
    finally:
        try:
            db.close()
            logger.debug("Database session closed.")
        except Exception as close_error:
            logger.warning(f"Error closing database session: {close_error}")
