"""Startup script for production deployment.

On a fresh database (no tables), creates all tables from models and stamps
Alembic to head. On an existing database, runs Alembic migrations normally.
Either way the subject and achievement catalog is seeded afterwards.
"""

import logging
import subprocess
import sys

from sqlalchemy import inspect

from clerva.core.config import get_settings
from clerva.core.observability import setup_logging
from clerva.db.base import Base
from clerva.db.seed import seed_catalog
from clerva.db.session import SessionLocal, engine
from clerva.models import (  # noqa: F401
    Achievement, CalendarEvent, Feedback, Goal, SessionParticipant, StudyGroup,
    StudyGroupMember, StudySession, Subject, User, UserAchievement, UserSubject,
)

logger = logging.getLogger("clerva.start")


def main():
    setup_logging(get_settings().log_level)
    inspector = inspect(engine)
    tables = inspector.get_table_names()

    if "users" not in tables:
        logger.info("Fresh database detected, creating all tables")
        Base.metadata.create_all(bind=engine)
        logger.info("Tables created. Stamping Alembic to head")
        subprocess.check_call([sys.executable, "-m", "alembic", "stamp", "head"])
    else:
        logger.info("Existing database, running migrations")
        subprocess.check_call([sys.executable, "-m", "alembic", "upgrade", "head"])
        logger.info("Migrations complete")

    with SessionLocal() as db:
        seed_catalog(db)
    logger.info("Subject and achievement catalog seeded")


if __name__ == "__main__":
    main()
