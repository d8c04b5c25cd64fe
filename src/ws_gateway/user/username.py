"""Username rules shared by signup (strict) and lazy login provisioning (derived)."""

import re

from src.ws_common.errors import ValidationError

MIN_USERNAME_LENGTH = 3
FORBIDDEN_SUBSTRINGS: tuple[str, ...] = ("gmail", "com")

_ALNUM = re.compile(r"^[A-Za-z0-9]+$")
_NON_ALNUM = re.compile(r"[^a-z0-9]")


def validate_username(raw: str) -> str:
    """Check a signup username and return its lowercase form.

    Raises ValidationError naming the first rule broken.
    """
    if len(raw) < MIN_USERNAME_LENGTH:
        raise ValidationError(
            f"Username must be at least {MIN_USERNAME_LENGTH} characters"
        )
    if not _ALNUM.match(raw):
        raise ValidationError("Username must contain only letters and numbers")
    username = raw.lower()
    if any(bad in username for bad in FORBIDDEN_SUBSTRINGS):
        raise ValidationError('Username cannot contain "gmail" or "com"')
    return username


def username_base_from_email(email: str) -> str:
    """Derive a valid username stem from an email's local part.

    'Jane.Doe+shop@x.io' -> 'janedoeshop'; too-short stems get a 'user' prefix.
    """
    base = _NON_ALNUM.sub("", email.split("@", 1)[0].lower())
    # Removing one forbidden word can splice together another ("cgmailom")
    while any(bad in base for bad in FORBIDDEN_SUBSTRINGS):
        for bad in FORBIDDEN_SUBSTRINGS:
            base = base.replace(bad, "")
    if len(base) < MIN_USERNAME_LENGTH:
        base = f"user{base}"
    return base
