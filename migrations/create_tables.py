"""
Create the waitlist and admin tables if they don't exist yet
"""
import logging
from sqlalchemy import inspect
from models.admin import db, AdminPrincipal
from models.waitlist import WaitlistEntry

logger = logging.getLogger(__name__)

TABLES = (WaitlistEntry, AdminPrincipal)


def ensure_tables():
    """Create any missing table. Returns the names of the tables created."""
    inspector = inspect(db.engine)
    created = []
    for model in TABLES:
        if not inspector.has_table(model.__tablename__):
            model.__table__.create(db.engine)
            created.append(model.__tablename__)
            logger.info(f"Created table {model.__tablename__}")
    return created
