"""Input validation helpers shared by the API schemas."""

import ipaddress
import re
from urllib.parse import urlsplit

HEX_COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"

_ALLOWED_SCHEMES = frozenset({"http", "https"})
_SCRIPT_SCHEME = re.compile(r"^\s*(javascript|data|vbscript):", re.IGNORECASE)


def _is_internal_host(hostname: str) -> bool:
    if hostname in {"localhost", "0.0.0.0"} or hostname.endswith(".localhost"):
        return True
    try:
        address = ipaddress.ip_address(hostname)
    except ValueError:
        return False
    return address.is_private or address.is_loopback or address.is_link_local


def validate_public_url(url: str) -> str:
    """Return ``url`` stripped if it is a public http(s) URL, else raise ValueError.

    Rejects script schemes, non-http protocols and hosts that point at
    loopback or private networks.
    """
    cleaned = url.strip()
    if _SCRIPT_SCHEME.match(cleaned):
        raise ValueError("URL scheme is not allowed")

    parts = urlsplit(cleaned)
    if parts.scheme.lower() not in _ALLOWED_SCHEMES:
        raise ValueError("URL must start with http:// or https://")

    hostname = (parts.hostname or "").lower()
    if not hostname:
        raise ValueError("URL must include a host")
    if _is_internal_host(hostname):
        raise ValueError("URL must not point to a local or private address")

    return cleaned
