"""Credential shape validation."""

import re

from adcraft.errors import ValidationError

_EMAIL_PATTERN = re.compile(r"^\S+@\S+\.\S+$")

MIN_PASSWORD_LENGTH = 6


def validate_credentials(email: str | None, password: str | None) -> None:
    """Raise ValidationError when email or password is malformed."""
    if not email or not password:
        raise ValidationError("Email and password are required")
    if not _EMAIL_PATTERN.match(email):
        raise ValidationError("Invalid email format")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError("Password too short")
