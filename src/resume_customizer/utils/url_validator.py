"""Job posting URL validation.

Rejects non-HTTP schemes and hosts that resolve to loopback, private,
link-local or reserved addresses before the extractor fetches anything.

NOTE: the hostname is resolved here and again by httpx when fetching, so a
DNS server that answers differently the second time can bypass this check.
"""

from __future__ import annotations

import ipaddress
import socket
from urllib.parse import urlparse

from resume_customizer.errors import SSRFError

_BLOCKED_HOSTNAMES = {"localhost", "localhost.localdomain"}

# Cloud metadata and unspecified addresses
_BLOCKED_IPS = {
    ipaddress.ip_address("169.254.169.254"),
    ipaddress.ip_address("0.0.0.0"),
}


def _is_blocked(addr: ipaddress.IPv4Address | ipaddress.IPv6Address) -> bool:
    return (
        addr in _BLOCKED_IPS
        or addr.is_private
        or addr.is_loopback
        or addr.is_reserved
        or addr.is_link_local
    )


def validate_url(url: str) -> str:
    """Validate that a URL is http(s) and does not target an internal host.

    Returns the URL unchanged on success.
    Raises SSRFError for blocked hosts and ValueError for malformed URLs.
    """
    parsed = urlparse(url.strip())

    if parsed.scheme not in ("http", "https"):
        raise ValueError("Only HTTP and HTTPS URLs are allowed")

    hostname = parsed.hostname
    if not hostname:
        raise ValueError(f"Invalid URL format: {url!r}")

    if hostname.lower() in _BLOCKED_HOSTNAMES:
        raise SSRFError(f"Access to this domain is not allowed: {hostname}")

    try:
        addr = ipaddress.ip_address(hostname)
    except ValueError:
        addr = None
    if addr is not None:
        if _is_blocked(addr):
            raise SSRFError(f"Access to this address is not allowed: {addr}")
        return url

    try:
        results = socket.getaddrinfo(hostname, None, socket.AF_UNSPEC, socket.SOCK_STREAM)
    except socket.gaierror as exc:
        raise ValueError(f"Cannot resolve hostname {hostname!r}: {exc}") from exc

    for _family, _type, _proto, _canonname, sockaddr in results:
        resolved = ipaddress.ip_address(sockaddr[0])
        if _is_blocked(resolved):
            raise SSRFError(f"Hostname {hostname!r} resolves to blocked address: {resolved}")

    return url
