"""ORM model for the platform's users table.

The notifier only reads this table; create_schema() exists so a local SQLite
database can stand in for the hosted one during development and tests.
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Index, String, Text, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base

from .models import DirectoryUser

logger = logging.getLogger(__name__)

Base = declarative_base()


class UserModel(Base):
    """ORM model for the users table."""

    __tablename__ = "users"

    id = Column(String(64), primary_key=True, nullable=False)
    full_name = Column(Text, nullable=False)
    email = Column(String(320), nullable=True)
    phone_number = Column(String(32), nullable=True)
    role = Column(String(16), nullable=True)
    gender = Column(String(32), nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        Index("idx_users_email", "email"),
    )

    def to_domain(self) -> DirectoryUser:
        """Convert ORM model to a DirectoryUser."""
        return DirectoryUser(
            id=self.id,
            full_name=self.full_name,
            email=self.email,
            phone_number=self.phone_number,
            role=self.role,
            gender=self.gender,
            created_at=self.created_at,
        )


def create_schema(engine: Engine) -> None:
    """Create the users table if it doesn't exist (idempotent).

    Args:
        engine: SQLAlchemy engine instance
    """
    try:
        Base.metadata.create_all(engine, checkfirst=True)
        tables = inspect(engine).get_table_names()
        logger.info(f"Database schema ready. Tables: {', '.join(tables)}")
    except Exception as e:
        logger.error(f"Failed to create database schema: {e}", exc_info=True)
        raise
