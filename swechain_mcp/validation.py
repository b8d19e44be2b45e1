"""Argument checks applied before any command is run."""

from __future__ import annotations

import re

ADDRESS_PREFIX = "cosmos1"
ADDRESS_MIN_LENGTH = 39
ADDRESS_MAX_LENGTH = 45

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


class ValidationError(ValueError):
    """Raised when a tool argument is missing or malformed.

    The message is shown to the caller verbatim.
    """


def is_valid_cosmos_address(address: str) -> bool:
    address = address.strip()
    return (
        address.startswith(ADDRESS_PREFIX)
        and ADDRESS_MIN_LENGTH <= len(address) <= ADDRESS_MAX_LENGTH
    )


def clean(value: str | None) -> str:
    return (value or "").strip()


def require_text(value: str | None, message: str) -> str:
    text = clean(value)
    if not text:
        raise ValidationError(message)
    return text


def require_address(address: str, message: str) -> str:
    if not is_valid_cosmos_address(address):
        raise ValidationError(message)
    return address


def is_integer(value: str) -> bool:
    return bool(_INTEGER_RE.fullmatch(value))
