from __future__ import annotations

import re

from .log import get_logger
from .patterns import ParsedPattern, strip_conventional_prefix

logger = get_logger(__name__)


def domain_matches(url_hostname: str, pattern: ParsedPattern) -> bool:
    if pattern.is_raw_regex:
        # Raw regexes are tested against the whole URL instead.
        return False
    full_host = (url_hostname or "").lower()
    host = strip_conventional_prefix(full_host)
    if not host or not pattern.base_domain:
        return False
    if pattern.is_wildcard_subdomain:
        # A wildcard base like "www.example.com" still has to match the unstripped host.
        return any(
            candidate == pattern.base_domain or candidate.endswith("." + pattern.base_domain)
            for candidate in (host, full_host)
        )
    return host == pattern.base_domain


def pattern_target(pattern: ParsedPattern) -> str:
    target = pattern.path
    if pattern.query:
        target += "?" + pattern.query
    if pattern.fragment:
        target += "#" + pattern.fragment
    return target


def url_path_for(parsed_url: ParsedPattern, pattern: ParsedPattern) -> str:
    """Path of the URL as compared against `pattern`.

    Query and fragment only take part when the pattern names them.
    """
    target = parsed_url.path or "/"
    if pattern.query and parsed_url.query:
        target += "?" + parsed_url.query
    if pattern.fragment and parsed_url.fragment:
        target += "#" + parsed_url.fragment
    return target


def _same_path(url_path: str, target: str) -> bool:
    return url_path == target or url_path + "/" == target or url_path == target + "/"


def _has_prefix(url_path: str, prefix: str) -> bool:
    return url_path.startswith(prefix) or (url_path + "/").startswith(prefix)


def _glob_matches(url_path: str, target: str) -> bool:
    tail = "/?"
    if target.endswith("/*"):
        # A final "/*" also accepts the bare prefix, like a single trailing wildcard.
        target, tail = target[:-2], "(?:/.*)?"
    elif len(target) > 1:
        target = target.rstrip("/")
    body = ".*".join(re.escape(part) for part in target.split("*"))
    return re.fullmatch(body + tail, url_path) is not None


def path_matches(url_path: str, pattern: ParsedPattern) -> bool:
    target = pattern_target(pattern)
    if not target:
        return True
    url_path = url_path or "/"

    if pattern.is_exact_anchor:
        if pattern.has_wildcard_suffix:
            return _glob_matches(url_path, target)
        return url_path.rstrip("/") == target.rstrip("/")

    if pattern.has_wildcard_suffix:
        star = target.index("*")
        if not _has_prefix(url_path, target[:star]):
            return False
        if star == len(target) - 1:
            return True
        return _glob_matches(url_path, target)

    return _same_path(url_path, target)


def raw_regex_matches(url: str, pattern: ParsedPattern) -> bool:
    try:
        return re.search(pattern.regex_source, url.strip(), re.IGNORECASE) is not None
    except re.error as exc:
        logger.debug("Invalid raw regex %r: %s", pattern.raw, exc)
        return False


def pattern_matches(url: str, parsed_url: ParsedPattern, pattern: ParsedPattern) -> bool:
    if pattern.is_raw_regex:
        return raw_regex_matches(url, pattern)
    if pattern.protocol and pattern.protocol != parsed_url.protocol:
        return False
    if pattern.port and pattern.port != parsed_url.port:
        return False
    if not domain_matches(parsed_url.hostname, pattern):
        return False
    return path_matches(url_path_for(parsed_url, pattern), pattern)
