from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlsplit

CONVENTIONAL_PREFIXES = ("www.", "m.")


class InvalidInput(ValueError):
    pass


@dataclass(frozen=True)
class ParsedPattern:
    raw: str
    is_raw_regex: bool = False
    protocol: Optional[str] = None
    hostname: str = ""
    port: Optional[str] = None
    is_wildcard_subdomain: bool = False
    base_domain: str = ""
    path: str = ""
    query: str = ""
    fragment: str = ""
    has_wildcard_suffix: bool = False
    is_exact_anchor: bool = False
    resource_segment: Optional[str] = None

    @property
    def regex_source(self) -> str:
        return self.raw.strip()


def strip_conventional_prefix(host: str) -> str:
    for prefix in CONVENTIONAL_PREFIXES:
        if host.startswith(prefix) and len(host) > len(prefix):
            return host[len(prefix):]
    return host


def extract_resource_segment(path: str) -> Optional[str]:
    segments = [seg for seg in path.split("/") if seg]
    if len(segments) < 2:
        return None
    first, second = segments[0], segments[1]
    if "*" in first or "*" in second:
        return None
    return f"/{first}/{second}"


def _split_host_port(host_port: str) -> tuple[str, Optional[str]]:
    if "@" in host_port:
        host_port = host_port.rsplit("@", 1)[1]
    if host_port.startswith("["):
        end = host_port.find("]")
        if end != -1:
            rest = host_port[end + 1:]
            port = rest[1:] if rest.startswith(":") and rest[1:].isdigit() else None
            return host_port[1:end], port
    host, sep, port = host_port.rpartition(":")
    if sep and host and (port.isdigit() or not port):
        return host, port or None
    return host_port, None


def _split_path(remainder: str) -> tuple[str, str, str]:
    path, _, fragment = remainder.partition("#")
    path, _, query = path.partition("?")
    return path, query, fragment


def _build(
    raw: str,
    protocol: Optional[str],
    hostname: str,
    port: Optional[str],
    path: str,
    query: str,
    fragment: str,
    anchored: bool,
) -> ParsedPattern:
    wildcard_host = hostname.startswith("*.")
    if wildcard_host:
        base_domain = hostname[2:]
    else:
        base_domain = strip_conventional_prefix(hostname)
    if path and not path.startswith("/"):
        path = "/" + path
    if not path and (anchored or query or fragment):
        path = "/"
    return ParsedPattern(
        raw=raw,
        protocol=protocol,
        hostname=hostname,
        port=port,
        is_wildcard_subdomain=wildcard_host,
        base_domain=base_domain,
        path=path,
        query=query,
        fragment=fragment,
        has_wildcard_suffix="*" in path + query + fragment,
        is_exact_anchor=anchored,
        resource_segment=extract_resource_segment(path),
    )


def parse_pattern(raw: str) -> ParsedPattern:
    """Parse a user pattern (or a loose URL) into its structural parts.

    Raises InvalidInput for blank input; anything else degrades to the best
    partial parse instead of failing.
    """
    normalized = (raw or "").strip().lower()
    if not normalized:
        raise InvalidInput("pattern must not be empty")
    if normalized.startswith("^"):
        return ParsedPattern(raw=raw, is_raw_regex=True)

    anchored = normalized.endswith("$")
    if anchored:
        normalized = normalized[:-1]

    protocol: Optional[str] = None
    remaining = normalized
    if "://" in remaining:
        scheme, remaining = remaining.split("://", 1)
        if scheme and scheme != "*":
            protocol = scheme

    cut = len(remaining)
    for delimiter in "/?#":
        idx = remaining.find(delimiter)
        if idx != -1:
            cut = min(cut, idx)
    host_port, remainder = remaining[:cut], remaining[cut:]
    hostname, port = _split_host_port(host_port)
    if not hostname:
        # Nothing usable before the path: keep the whole string as a literal host.
        return _build(raw, None, normalized, None, "", "", "", anchored)

    path, query, fragment = _split_path(remainder)
    return _build(raw, protocol, hostname, port, path, query, fragment, anchored)


def parse_url(url: str) -> Optional[ParsedPattern]:
    """Parse a navigable URL, or return None when it is not one."""
    if not url or not url.strip():
        return None
    try:
        parts = urlsplit(url.strip())
        hostname = parts.hostname
        port = parts.port
    except ValueError:
        return None
    if not parts.scheme or not hostname:
        return None
    return ParsedPattern(
        raw=url,
        protocol=parts.scheme.lower(),
        hostname=hostname.lower(),
        port=str(port) if port is not None else None,
        base_domain=strip_conventional_prefix(hostname.lower()),
        path=parts.path.lower(),
        query=parts.query.lower(),
        fragment=parts.fragment.lower(),
    )
