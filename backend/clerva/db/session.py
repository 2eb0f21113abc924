import logging
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from clerva.core.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

# SQLite needs check_same_thread off for the threadpool FastAPI runs sync routes in
is_sqlite = settings.database_url.startswith("sqlite")
connect_args = {"check_same_thread": False} if is_sqlite else {}
logger.debug(f"Database connection: {'SQLite' if is_sqlite else 'PostgreSQL'}")
engine = create_engine(
    settings.database_url,
    connect_args=connect_args,
    pool_pre_ping=not is_sqlite,
)

SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
