from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import TYPE_CHECKING, Iterable, NamedTuple, Optional
from urllib.parse import urlsplit

from .keywords import compile_keywords
from .log import get_logger
from .matching import pattern_matches
from .patterns import InvalidInput, ParsedPattern, parse_pattern, parse_url
from .specificity import KEYWORD_SPECIFICITY, calculate_specificity

if TYPE_CHECKING:
    from .config import PolicyConfig

logger = get_logger(__name__)

BLACKLIST_MODES = {"blacklist", "denylist"}
WHITELIST_MODES = {"whitelist", "allowlist"}
COMBINED_MODE = "combined"
DEFAULT_MODE = "blacklist"

INTERNAL_SCHEMES = {
    "about",
    "browser",
    "chrome",
    "chrome-extension",
    "devtools",
    "edge",
    "moz-extension",
    "view-source",
}

REASON_DISABLED = "disabled"
REASON_INTERNAL = "internal page"
REASON_INVALID_URL = "invalid url"
REASON_NOT_ALLOWED = "not in allow list"
REASON_NO_RULE = "no matching rule"
PATTERN_PREFIX = "pattern: "
KEYWORD_PREFIX = "keyword: "


class MatchResult(NamedTuple):
    matched: bool
    specificity: int


@dataclass(frozen=True)
class RuleMatch:
    kind: str
    entry: str
    specificity: int

    @property
    def reason(self) -> str:
        prefix = KEYWORD_PREFIX if self.kind == "keyword" else PATTERN_PREFIX
        return prefix + self.entry


@dataclass(frozen=True)
class Verdict:
    blocked: bool
    reason: str
    matched_pattern: Optional[str] = None
    specificity: Optional[int] = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class Explanation:
    url: str
    mode: str
    verdict: Verdict
    allow_matches: list[RuleMatch] = field(default_factory=list)
    deny_matches: list[RuleMatch] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)


def normalize_mode(mode: Optional[str]) -> str:
    value = (mode or "").strip().lower()
    if value in BLACKLIST_MODES or value in WHITELIST_MODES or value == COMBINED_MODE:
        return value
    logger.warning("Unknown mode %r, falling back to %s", mode, DEFAULT_MODE)
    return DEFAULT_MODE


def reason_label(reason: str) -> str:
    for prefix in (PATTERN_PREFIX, KEYWORD_PREFIX):
        if reason.startswith(prefix):
            return reason[len(prefix):]
    return reason


def evaluate_pattern(url: str, parsed_url: ParsedPattern, pattern: ParsedPattern) -> MatchResult:
    if not pattern_matches(url, parsed_url, pattern):
        return MatchResult(False, 0)
    return MatchResult(True, calculate_specificity(pattern))


def collect_matches(
    url: str,
    parsed_url: ParsedPattern,
    patterns: Iterable[str],
    keywords: Iterable[str],
) -> list[RuleMatch]:
    matches: list[RuleMatch] = []
    for entry in patterns or ():
        try:
            pattern = parse_pattern(entry)
        except InvalidInput:
            logger.debug("Skipping blank pattern entry")
            continue
        result = evaluate_pattern(url, parsed_url, pattern)
        if result.matched:
            matches.append(RuleMatch("pattern", entry.strip(), result.specificity))
    for matcher in compile_keywords(keywords):
        if matcher.matches(url):
            matches.append(RuleMatch("keyword", matcher.keyword, KEYWORD_SPECIFICITY))
    return matches


def best_match(matches: list[RuleMatch]) -> Optional[RuleMatch]:
    best: Optional[RuleMatch] = None
    for match in matches:
        if best is None or match.specificity > best.specificity:
            best = match
    return best


def _verdict(blocked: bool, match: RuleMatch) -> Verdict:
    return Verdict(
        blocked=blocked,
        reason=match.reason,
        matched_pattern=match.entry,
        specificity=match.specificity,
    )


def resolve(mode: str, best_allow: Optional[RuleMatch], best_deny: Optional[RuleMatch]) -> Verdict:
    if mode in WHITELIST_MODES:
        if best_allow is not None:
            return _verdict(False, best_allow)
        return Verdict(blocked=True, reason=REASON_NOT_ALLOWED)

    if best_deny is not None:
        # Equal specificity fails closed.
        if best_allow is None or best_allow.specificity <= best_deny.specificity:
            return _verdict(True, best_deny)
    if best_allow is not None:
        return _verdict(False, best_allow)
    return Verdict(blocked=False, reason=REASON_NO_RULE)


def _precheck(url: str, is_enabled: bool) -> tuple[Optional[Verdict], Optional[ParsedPattern]]:
    if not is_enabled:
        return Verdict(blocked=False, reason=REASON_DISABLED), None
    try:
        scheme = urlsplit((url or "").strip()).scheme.lower()
    except ValueError:
        scheme = ""
    if scheme in INTERNAL_SCHEMES:
        return Verdict(blocked=False, reason=REASON_INTERNAL), None
    parsed_url = parse_url(url)
    if parsed_url is None:
        return Verdict(blocked=False, reason=REASON_INVALID_URL), None
    return None, parsed_url


def explain(
    url: str,
    allow_patterns: Iterable[str],
    deny_patterns: Iterable[str],
    allow_keywords: Iterable[str],
    deny_keywords: Iterable[str],
    mode: str,
    is_enabled: bool,
) -> Explanation:
    """Decide like `decide` and also report every rule that matched."""
    mode = normalize_mode(mode)
    early, parsed_url = _precheck(url, is_enabled)
    if early is not None:
        return Explanation(url=url, mode=mode, verdict=early)

    allow_matches = collect_matches(url, parsed_url, allow_patterns, allow_keywords)
    deny_matches = collect_matches(url, parsed_url, deny_patterns, deny_keywords)
    verdict = resolve(mode, best_match(allow_matches), best_match(deny_matches))
    return Explanation(
        url=url,
        mode=mode,
        verdict=verdict,
        allow_matches=allow_matches,
        deny_matches=deny_matches,
    )


def decide(
    url: str,
    allow_patterns: Iterable[str],
    deny_patterns: Iterable[str],
    allow_keywords: Iterable[str],
    deny_keywords: Iterable[str],
    mode: str,
    is_enabled: bool,
) -> Verdict:
    """Return whether `url` is blocked under the given policy, and why.

    Never raises: malformed URLs are allowed with reason "invalid url" and
    malformed rules degrade to literal matching or are skipped.
    """
    return explain(
        url,
        allow_patterns,
        deny_patterns,
        allow_keywords,
        deny_keywords,
        mode,
        is_enabled,
    ).verdict


@dataclass(frozen=True)
class UrlPolicy:
    mode: str = DEFAULT_MODE
    enabled: bool = True
    allow_patterns: tuple[str, ...] = ()
    deny_patterns: tuple[str, ...] = ()
    allow_keywords: tuple[str, ...] = ()
    deny_keywords: tuple[str, ...] = ()

    @classmethod
    def from_config(cls, config: "PolicyConfig") -> "UrlPolicy":
        return cls(
            mode=normalize_mode(config.mode),
            enabled=config.enabled,
            allow_patterns=tuple(config.allow_patterns),
            deny_patterns=tuple(config.deny_patterns),
            allow_keywords=tuple(config.allow_keywords),
            deny_keywords=tuple(config.deny_keywords),
        )

    def explain(self, url: str) -> Explanation:
        return explain(
            url,
            self.allow_patterns,
            self.deny_patterns,
            self.allow_keywords,
            self.deny_keywords,
            self.mode,
            self.enabled,
        )

    def evaluate(self, url: str) -> Verdict:
        return self.explain(url).verdict

    def is_allowed(self, url: str) -> bool:
        return not self.evaluate(url).blocked
