"""Read-only access to platform users for recipient lookup."""

from typing import List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from notifier.logging import get_logger
from notifier.mail.recipients import validate_and_format_emails

from .exceptions import DirectoryError
from .models import DirectoryUser
from .schema import UserModel

logger = get_logger(__name__, component="directory")


class UserRepository:
    """Repository for looking up users and their email addresses."""

    def __init__(self, session: Session):
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def get_users(self, user_ids: Optional[Sequence[str]] = None) -> List[DirectoryUser]:
        """Fetch the given users, or every user when user_ids is empty.

        Args:
            user_ids: Optional list of user identifiers

        Returns:
            Users ordered by registration time

        Raises:
            DirectoryError: If the database query fails
        """
        try:
            stmt = select(UserModel).order_by(UserModel.created_at, UserModel.id)
            if user_ids:
                stmt = stmt.where(UserModel.id.in_(list(user_ids)))
            models = self.session.execute(stmt).scalars().all()
            return [model.to_domain() for model in models]

        except SQLAlchemyError as e:
            logger.error(
                f"Error fetching users: {e}",
                exc_info=True,
                extra={"event": "directory.query.failed"},
            )
            raise DirectoryError(f"Failed to fetch users: {e}") from e

    def get_emails(self, user_ids: Optional[Sequence[str]] = None) -> List[str]:
        """Email addresses of the selected users (or everyone).

        Users without an address are skipped, as are addresses that fail
        validation. Duplicates are dropped.

        Args:
            user_ids: Optional list of user identifiers

        Returns:
            Normalized addresses ordered by registration time

        Raises:
            DirectoryError: If the database query fails
        """
        try:
            stmt = (
                select(UserModel.email)
                .where(UserModel.email.is_not(None))
                .order_by(UserModel.created_at, UserModel.id)
            )
            if user_ids:
                stmt = stmt.where(UserModel.id.in_(list(user_ids)))
            addresses = [email for email in self.session.execute(stmt).scalars() if email and email.strip()]

        except SQLAlchemyError as e:
            logger.error(
                f"Error fetching user emails: {e}",
                exc_info=True,
                extra={"event": "directory.query.failed"},
            )
            raise DirectoryError(f"Failed to fetch user emails: {e}") from e

        validation = validate_and_format_emails(addresses)
        if validation.invalid:
            logger.warning(
                f"Skipping {len(validation.invalid)} invalid email address(es) from the user directory",
                extra={"event": "directory.invalid_emails", "invalid_count": len(validation.invalid)},
            )

        return validation.valid
