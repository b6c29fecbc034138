from __future__ import annotations

from .patterns import ParsedPattern

# Each weight exceeds the largest possible sum of every weight below it.
LITERAL_HOST_WEIGHT = 1_000_000
PATH_SEGMENT_WEIGHT = 1_000
MAX_COUNTED_SEGMENTS = 98
EXACT_PATH_WEIGHT = 100
RESOURCE_SEGMENT_WEIGHT = 10
PROTOCOL_WEIGHT = 1

RAW_REGEX_SPECIFICITY = 10_000_000

# Same score as a plain path-qualified pattern like "example.com/page".
KEYWORD_SPECIFICITY = LITERAL_HOST_WEIGHT + 2 * PATH_SEGMENT_WEIGHT + EXACT_PATH_WEIGHT


def literal_segment_count(path: str) -> int:
    return sum(1 for seg in path.split("/") if seg and seg != "*")


def calculate_specificity(pattern: ParsedPattern) -> int:
    """Score how precisely `pattern` pins down a URL.

    Higher wins when an allow and a deny rule both match. Equal scores only
    occur for patterns that are equally precise.
    """
    if pattern.is_raw_regex:
        return RAW_REGEX_SPECIFICITY

    score = 0
    if not pattern.is_wildcard_subdomain:
        score += LITERAL_HOST_WEIGHT
    if pattern.path:
        segments = min(literal_segment_count(pattern.path), MAX_COUNTED_SEGMENTS)
        score += PATH_SEGMENT_WEIGHT * (1 + segments)
    if pattern.is_exact_anchor or not pattern.has_wildcard_suffix:
        score += EXACT_PATH_WEIGHT
    if pattern.resource_segment:
        score += RESOURCE_SEGMENT_WEIGHT
    if pattern.protocol:
        score += PROTOCOL_WEIGHT
    return score
