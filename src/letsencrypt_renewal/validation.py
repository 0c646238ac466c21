"""Argument validators for the renewal parameter model."""

from __future__ import annotations

import re
from collections.abc import Sequence
from typing import TypeVar
from urllib.parse import urlsplit

from email_validator import EmailNotValidError, validate_email

T = TypeVar("T")

_HOST_LABEL_RE = re.compile(r"^(?!-)[A-Za-z0-9-]{1,63}(?<!-)$")
_MAX_HOST_NAME_LENGTH = 253


def verify_non_null(value: T | None, name: str) -> T:
    if value is None:
        raise ValueError(f"{name} must not be None")
    return value


def verify_string(value: str | None, name: str) -> str:
    """Return ``value`` if it is a non-empty string."""
    if value is None or not isinstance(value, str) or not value:
        raise ValueError(f"{name} must be a non-empty string, got: {value!r}")
    return value


def verify_optional_string(value: str | None, name: str) -> str | None:
    """Return ``value``, or None when it is None or empty."""
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ValueError(f"{name} must be a string, got: {value!r}")
    return value


def verify_hosts(hosts: Sequence[str] | None, name: str) -> tuple[str, ...]:
    """Validate a host name sequence and return it as a tuple, order preserved."""
    if hosts is None or isinstance(hosts, str):
        raise ValueError(f"{name} must be a sequence of host names, got: {hosts!r}")
    result = tuple(hosts)
    if not result:
        raise ValueError(f"{name} must contain at least one host name")
    for host in result:
        if not isinstance(host, str) or not host:
            raise ValueError(f"{name} must not contain empty host names, got: {list(result)!r}")
    return result


def verify_email(value: str | None, name: str) -> str:
    """Return ``value`` if it is a syntactically valid email address.

    Deliverability (DNS lookups) is not checked.
    """
    verify_string(value, name)
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as exc:
        raise ValueError(f"{name} is not a valid email address: {value!r} ({exc})") from exc
    return value


def verify_bool(value: bool, name: str) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"{name} must be a boolean, got: {value!r}")
    return value


def verify_positive_integer(value: int, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValueError(f"{name} must be a positive integer, got: {value!r}")
    return value


def verify_optional_uri(value: str | None, name: str) -> str | None:
    """Return ``value`` if it is an absolute URI, None when absent.

    Every URI here names a network endpoint, so a scheme and a host part are
    both required (``https://host/...``) and whitespace is rejected.
    """
    value = verify_optional_string(value, name)
    if value is None:
        return None
    parts = urlsplit(value)
    if not parts.scheme or not parts.netloc or any(ch.isspace() for ch in value):
        raise ValueError(f"{name} must be an absolute URI, got: {value!r}")
    return value


def verify_optional_host_name(value: str | None, name: str) -> str | None:
    """Return ``value`` if it is a valid DNS host name (RFC 1123), None when absent."""
    value = verify_optional_string(value, name)
    if value is None:
        return None
    if len(value) > _MAX_HOST_NAME_LENGTH or not all(_HOST_LABEL_RE.match(label) for label in value.split(".")):
        raise ValueError(f"{name} is not a valid host name: {value!r}")
    return value
