"""Recipient parsing and normalization."""

from dataclasses import dataclass, field
from typing import Iterable, List, Tuple

from email_validator import EmailNotValidError, validate_email


@dataclass
class RecipientValidation:
    """Outcome of validating a batch of addresses.

    Attributes:
        valid: Normalized addresses, in input order
        invalid: (original input, reason) pairs
    """

    valid: List[str] = field(default_factory=list)
    invalid: List[Tuple[str, str]] = field(default_factory=list)


def normalize_address(address: str) -> str:
    """Validate one address and return its normalized form.

    Raises:
        ValueError: If the address is not a syntactically valid email
    """
    try:
        return validate_email(address.strip(), check_deliverability=False).normalized.lower()
    except EmailNotValidError as e:
        raise ValueError(str(e)) from e


def validate_and_format_emails(emails: Iterable[str]) -> RecipientValidation:
    """Split user-supplied addresses into normalized valid ones and rejects.

    Blank entries are reported as "Empty email address". Duplicates keep
    their first position.
    """
    result = RecipientValidation()
    seen = set()

    for email in emails:
        if email is None or not str(email).strip():
            result.invalid.append((email, "Empty email address"))
            continue

        try:
            normalized = normalize_address(str(email))
        except ValueError as e:
            result.invalid.append((email, f"Invalid email format: {e}"))
            continue

        if normalized not in seen:
            seen.add(normalized)
            result.valid.append(normalized)

    return result


def parse_recipients(recipient_string: str) -> List[str]:
    """Parse and validate comma-separated email addresses.

    Args:
        recipient_string: Comma-separated email addresses

    Returns:
        List of validated email addresses

    Raises:
        ValueError: If any email address is invalid or none are given
    """
    raw = [part for part in recipient_string.split(",") if part.strip()]
    validation = validate_and_format_emails(raw)

    if validation.invalid:
        address, reason = validation.invalid[0]
        raise ValueError(f"Invalid email address '{address.strip()}': {reason}")

    if not validation.valid:
        raise ValueError("No valid email addresses found")

    return validation.valid
