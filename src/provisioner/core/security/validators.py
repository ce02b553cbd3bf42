"""Security validators - tenant slugs and tenant connection URLs."""

import re
from typing import Final

from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import ArgumentError

MAX_TENANT_SLUG_LENGTH: Final[int] = 63
TENANT_SLUG_REGEX: Final[str] = r"^[a-z][a-z0-9]*([-_][a-z0-9]+)*$"

_TENANT_SLUG_PATTERN: Final[re.Pattern[str]] = re.compile(TENANT_SLUG_REGEX)

# Values an IaC engine or template leaves behind when an output is not resolved
PLACEHOLDER_TOKENS: Final[tuple[str, ...]] = (
    "[unknown]",
    "[secret]",
    "placeholder",
    "undefined",
    "${",
    "<",
    "changeme",
)


def validate_tenant_slug_format(slug: str) -> str:
    """Validate tenant slug format.

    This validates **format only**. Length is enforced by Field(max_length=...).
    """
    if not _TENANT_SLUG_PATTERN.match(slug):
        raise ValueError(
            "Slug must start with a letter and contain only lowercase letters, numbers, "
            "and single hyphens or underscores as separators"
        )
    return slug


def _parse(url: str) -> URL | None:
    try:
        return make_url(url)
    except ArgumentError:
        return None


def has_placeholder(url: str) -> bool:
    """Check whether a URL still embeds an unresolved placeholder token."""
    lowered = url.lower()
    return any(token in lowered for token in PLACEHOLDER_TOKENS)


def is_socket_url(url: str) -> bool:
    """Check whether a URL targets a unix socket (e.g. a Cloud SQL proxy sidecar).

    Socket URLs carry the socket directory in the ``host`` query parameter, or
    use no network host at all.
    """
    parsed = _parse(url)
    if parsed is None:
        return False
    query_host = parsed.query.get("host")
    if isinstance(query_host, tuple):
        query_host = query_host[0] if query_host else None
    if query_host and str(query_host).startswith("/"):
        return True
    if "unix_sock" in parsed.query:
        return True
    return not parsed.host or parsed.host.startswith("/")


def is_usable_storage_url(url: str | None) -> bool:
    """A runtime URL is storable when it parses and has no placeholder."""
    if not url or has_placeholder(url):
        return False
    return _parse(url) is not None


def is_usable_migration_url(url: str | None) -> bool:
    """Migration clients need a plain TCP PostgreSQL URL.

    Rejects placeholders, socket paths and non-PostgreSQL schemes.
    """
    if url is None or not is_usable_storage_url(url):
        return False
    parsed = _parse(url)
    if parsed is None or not parsed.drivername.startswith("postgres"):
        return False
    return not is_socket_url(url)
