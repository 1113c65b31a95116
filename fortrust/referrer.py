"""Referrer policies and computation of the outgoing Referer header."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional
from urllib.parse import urlsplit

_DEFAULT_PORTS = {"http": 80, "https": 443, "ws": 80, "wss": 443, "ftp": 21}


class ReferrerPolicy(Enum):
    """How much of the initiating page's URL is revealed to the request target.

    ``NO_REFERRER`` is the browser default.
    """

    NO_REFERRER = "no-referrer"
    SAME_ORIGIN = "same-origin"
    STRICT_ORIGIN = "strict-origin"
    ORIGIN = "origin"
    STRICT_ORIGIN_WHEN_CROSS_ORIGIN = "strict-origin-when-cross-origin"


@dataclass(frozen=True)
class _Origin:
    scheme: str
    host: Optional[str]
    port: Optional[int]


def _parse(url: str) -> Optional[_Origin]:
    """Parse an absolute URL into its origin parts, or None if it is not one."""
    try:
        parts = urlsplit(url.strip())
        port = parts.port
    except ValueError:
        return None
    scheme = parts.scheme.lower()
    if not scheme or not scheme[0].isalpha():
        return None
    host = parts.hostname
    if scheme in _DEFAULT_PORTS and not host:
        return None
    if port is not None and port == _DEFAULT_PORTS.get(scheme):
        port = None
    if host and ":" in host:
        host = f"[{host}]"
    return _Origin(scheme, host, port)


def same_origin(a: str, b: str) -> bool:
    """True when both URLs parse and share scheme, host and port."""
    pa = _parse(a)
    pb = _parse(b)
    if pa is None or pb is None:
        return False
    return pa == pb


def _format_origin(origin: _Origin) -> str:
    text = f"{origin.scheme}://{origin.host or ''}"
    if origin.port is not None:
        text += f":{origin.port}"
    return text


def origin_of(url: str) -> str:
    """Return ``scheme://host[:port]`` of an absolute URL; default ports are omitted."""
    parsed = _parse(url)
    if parsed is None:
        raise ValueError(f"not an absolute URL: {url!r}")
    return _format_origin(parsed)


def compute_referer(
    request_url: str,
    top_level_url: Optional[str],
    policy: ReferrerPolicy,
) -> Optional[str]:
    """Return the Referer value to send under ``policy``, or None to send none."""
    if policy is ReferrerPolicy.NO_REFERRER or top_level_url is None:
        return None
    top = top_level_url

    if policy is ReferrerPolicy.SAME_ORIGIN:
        return top if same_origin(request_url, top) else None

    if policy is ReferrerPolicy.STRICT_ORIGIN:
        request = _parse(request_url)
        top_parsed = _parse(top)
        if request is None or top_parsed is None:
            return None
        if (
            request.scheme == "https"
            and top_parsed.scheme == "https"
            and same_origin(request_url, top)
        ):
            return _format_origin(top_parsed)
        return None

    if policy is ReferrerPolicy.ORIGIN:
        top_parsed = _parse(top)
        return None if top_parsed is None else _format_origin(top_parsed)

    # STRICT_ORIGIN_WHEN_CROSS_ORIGIN
    if same_origin(request_url, top):
        return top
    top_parsed = _parse(top)
    if top_parsed is not None and top_parsed.scheme == "https":
        return _format_origin(top_parsed)
    return None