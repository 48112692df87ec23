"""Field validation for users and posts.

Each validator returns a mapping of field name to error messages; an empty
mapping means the input is acceptable. Validators never touch the database,
so they run before any persistence call.
"""

from collections.abc import Mapping
from typing import Any

from email_validator import EmailNotValidError, validate_email

PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_LENGTH = 128
EMAIL_MAX_LENGTH = 255
TITLE_MAX_LENGTH = 255

BLANK = "can't be blank"
INVALID = "is invalid"
TAKEN = "has already been taken"

Errors = dict[str, list[str]]


class ValidationError(Exception):
    """One or more fields failed validation."""

    def __init__(self, errors: Errors):
        self.errors = errors
        super().__init__(", ".join(self.full_messages()))

    def full_messages(self) -> list[str]:
        """Messages prefixed with the humanized field name, e.g. "Email is invalid"."""
        return [
            f"{field.replace('_', ' ').capitalize()} {message}"
            for field, messages in self.errors.items()
            for message in messages
        ]


def too_short(minimum: int) -> str:
    return f"is too short (minimum is {minimum} characters)"


def too_long(maximum: int) -> str:
    return f"is too long (maximum is {maximum} characters)"


def is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def normalize_email(email: Any) -> str:
    """Canonical form used for storage and lookups. Non-strings normalize to ""."""
    if not isinstance(email, str):
        return ""
    return email.strip().lower()


def is_valid_email(email: str) -> bool:
    """Syntax check only; no DNS lookups."""
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def validate_registration(email: Any, password: Any) -> Errors:
    """Check registration input. Uniqueness is checked by the caller.

    Values arrive straight from the JSON body, so a number or list in either
    field is reported as invalid rather than rejected by the request parser.
    """
    errors: Errors = {}

    normalized = normalize_email(email)
    if email is not None and not isinstance(email, str):
        errors.setdefault("email", []).append(INVALID)
    elif not normalized:
        errors.setdefault("email", []).append(BLANK)
    elif len(normalized) > EMAIL_MAX_LENGTH:
        errors.setdefault("email", []).append(too_long(EMAIL_MAX_LENGTH))
    elif not is_valid_email(normalized):
        errors.setdefault("email", []).append(INVALID)

    if password is not None and not isinstance(password, str):
        errors.setdefault("password", []).append(INVALID)
    elif not password:
        errors.setdefault("password", []).append(BLANK)
    elif len(password) < PASSWORD_MIN_LENGTH:
        errors.setdefault("password", []).append(too_short(PASSWORD_MIN_LENGTH))
    elif len(password) > PASSWORD_MAX_LENGTH:
        errors.setdefault("password", []).append(too_long(PASSWORD_MAX_LENGTH))

    return errors


def validate_post_fields(fields: Mapping[str, Any], partial: bool = False) -> Errors:
    """Check post title/body.

    With ``partial`` only the keys present in ``fields`` are checked, which is
    what an update needs. A key present with ``None`` is treated as blank.
    """
    errors: Errors = {}
    for name in ("title", "body"):
        if partial and name not in fields:
            continue
        value = fields.get(name)
        if is_blank(value):
            errors.setdefault(name, []).append(BLANK)
        elif name == "title" and len(value) > TITLE_MAX_LENGTH:
            errors.setdefault(name, []).append(too_long(TITLE_MAX_LENGTH))
    return errors
