from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Optional

from .log import get_logger

logger = get_logger(__name__)

DELIMITED_KEYWORD = re.compile(r"^/(.+)/([A-Za-z]*)$", re.DOTALL)

# g and u are accepted for compatibility and change nothing here.
SAFE_FLAGS = {
    "g": 0,
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "u": 0,
}


@dataclass(frozen=True)
class KeywordMatcher:
    keyword: str
    regex: re.Pattern[str]
    is_regex: bool

    def matches(self, url: str) -> bool:
        return self.regex.search(url or "") is not None


def _parse_flags(flags: str) -> Optional[int]:
    if len(set(flags)) != len(flags):
        return None
    value = 0
    for flag in flags:
        if flag not in SAFE_FLAGS:
            return None
        value |= SAFE_FLAGS[flag]
    return value


def _literal(keyword: str) -> KeywordMatcher:
    return KeywordMatcher(
        keyword=keyword,
        regex=re.compile(re.escape(keyword), re.IGNORECASE),
        is_regex=False,
    )


def compile_keyword(entry: str) -> Optional[KeywordMatcher]:
    """Compile a keyword entry; returns None for blank entries.

    `/body/flags` becomes a regular expression when the flags are valid and
    the body compiles. Every other entry is a case-insensitive substring.
    """
    keyword = (entry or "").strip()
    if not keyword:
        return None
    shaped = DELIMITED_KEYWORD.match(keyword)
    if not shaped:
        return _literal(keyword)
    body, flags = shaped.group(1), shaped.group(2)
    flag_value = _parse_flags(flags)
    if flag_value is None:
        logger.debug("Unsupported keyword flags %r, matching %r literally", flags, keyword)
        return _literal(keyword)
    try:
        regex = re.compile(body, flag_value)
    except re.error as exc:
        logger.debug("Invalid keyword regex %r (%s), matching literally", keyword, exc)
        return _literal(keyword)
    return KeywordMatcher(keyword=keyword, regex=regex, is_regex=True)


def compile_keywords(entries: Iterable[str]) -> list[KeywordMatcher]:
    matchers = []
    for entry in entries or ():
        matcher = compile_keyword(entry)
        if matcher is not None:
            matchers.append(matcher)
    return matchers
