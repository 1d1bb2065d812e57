import re
from typing import Optional

from features.users.domain.errors import UserValidationError

USERNAME_REGEX = re.compile(r"^[a-zA-Z0-9._-]{3,32}$")
EMAIL_REGEX = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
UUID_REGEX = re.compile(
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)
FULL_NAME_MAX_LENGTH = 100


def validate_username(username: Optional[str]) -> None:
    if not username:
        raise UserValidationError("username is required")
    if not USERNAME_REGEX.fullmatch(username):
        raise UserValidationError("username is invalid")


def validate_email(email: Optional[str]) -> None:
    if not email:
        raise UserValidationError("email is required")
    if not EMAIL_REGEX.fullmatch(email):
        raise UserValidationError("email is invalid")


def validate_full_name(full_name: Optional[str]) -> None:
    if not full_name:
        raise UserValidationError("full name is required")
    if len(full_name) > FULL_NAME_MAX_LENGTH:
        raise UserValidationError("full name is too long")


def validate_uuid(value: Optional[str]) -> None:
    if not value:
        raise UserValidationError("uuid is required")
    if not UUID_REGEX.fullmatch(value):
        raise UserValidationError("uuid is invalid")


def validate_id(user_id: int) -> None:
    if user_id < 1:
        raise UserValidationError("id must be positive")


def validate_create_user_input(username: Optional[str], email: Optional[str], full_name: Optional[str]) -> None:
    """Checks username, email and full name in that order, stopping at the first failure."""
    validate_username(username)
    validate_email(email)
    validate_full_name(full_name)


def validate_update_user_input(username: Optional[str], email: Optional[str], full_name: Optional[str]) -> None:
    """Checks only the fields that were provided; at least one is required."""
    if not username and not email and not full_name:
        raise UserValidationError("no fields to update")
    if username:
        validate_username(username)
    if email:
        validate_email(email)
    if full_name:
        validate_full_name(full_name)
