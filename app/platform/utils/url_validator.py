import ipaddress
import re
from typing import Optional, Tuple
from urllib.parse import SplitResult, urlsplit, urlunsplit

SECURE_PREFIX = "https://"

_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)
_HOST_LABELS_RE = re.compile(
    r"^[a-z0-9]([a-z0-9-]{0,61}[a-z0-9])?(\.[a-z0-9]([a-z0-9-]{0,61}[a-z0-9])?)*$"
)

URL_REQUIRED_MESSAGE = "URL parameter is required"
INVALID_URL_MESSAGE = "Invalid URL format"


def _split(url: str) -> Optional[SplitResult]:
    """urlsplit that reports failure as None. Touching .port validates it."""
    try:
        parsed = urlsplit(url)
        parsed.port
    except ValueError:
        return None
    if not parsed.hostname:
        return None
    return parsed


def _lower_host(netloc: str) -> str:
    userinfo, at, host_port = netloc.rpartition("@")
    return f"{userinfo}{at}{host_port.lower()}"


def normalize_url(url: str) -> str:
    """
    Turn free-text input into the canonical https URL used for display,
    upstream calls and cache keys.

    Never raises: input that cannot be parsed falls back to
    ``https://<first path segment of the input>``.
    """
    raw = url.strip().rstrip("/")

    if _SCHEME_RE.match(raw):
        candidate = SECURE_PREFIX + raw.split("://", 1)[1]
    else:
        candidate = SECURE_PREFIX + raw

    parsed = _split(candidate)
    if parsed is None:
        bare = _SCHEME_RE.sub("", raw, count=1)
        return SECURE_PREFIX + bare.split("/", 1)[0]

    path = "" if parsed.path in ("", "/") else parsed.path
    normalized = urlunsplit(
        (parsed.scheme, _lower_host(parsed.netloc), path, parsed.query, parsed.fragment)
    )
    if normalized.endswith("/"):
        normalized = normalized[:-1]
    return normalized


def _is_plausible_host(hostname: str) -> bool:
    try:
        ipaddress.ip_address(hostname)
        return True
    except ValueError:
        pass
    try:
        ascii_host = hostname.encode("idna").decode("ascii")
    except UnicodeError:
        return False
    if ascii_host != "localhost" and "." not in ascii_host:
        return False
    return bool(_HOST_LABELS_RE.match(ascii_host))


def validate_url(url: Optional[str]) -> Tuple[bool, str, str]:
    """Returns (is_valid, normalized_url, error_message)."""
    if not url or not url.strip():
        return False, "", URL_REQUIRED_MESSAGE

    normalized_url = normalize_url(url)
    parsed = _split(normalized_url)

    if parsed is None or not _is_plausible_host(parsed.hostname):
        return False, normalized_url, INVALID_URL_MESSAGE

    return True, normalized_url, ""
