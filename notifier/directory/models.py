"""Directory records returned by the user repository."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class DirectoryUser:
    """A platform user as seen by the notifier.

    Attributes:
        id: User identifier (auth subject)
        full_name: Display name
        email: Email address, if the user gave one
        phone_number: Phone number in international format, if any
        role: "admin" or "user"
        gender: Free-form gender value, if any
        created_at: Registration time
    """

    id: str
    full_name: str
    email: Optional[str] = None
    phone_number: Optional[str] = None
    role: Optional[str] = None
    gender: Optional[str] = None
    created_at: Optional[datetime] = None
