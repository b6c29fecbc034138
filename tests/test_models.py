import pytest
from pydantic import ValidationError

from sitegate.config import PolicyConfig, normalize_entry
from sitegate.models import DecideRequest, ExplanationResponse, VerdictResponse
from sitegate.policy import Verdict, explain


def test_normalize_entry_accepts_stored_shapes() -> None:
    assert normalize_entry("  reddit.com ") == "reddit.com"
    assert normalize_entry({"pattern": "reddit.com/*"}) == "reddit.com/*"
    assert normalize_entry({"url": "youtube.com"}) == "youtube.com"
    assert normalize_entry({"other": "x"}) is None
    assert normalize_entry("   ") is None
    assert normalize_entry(42) is None


def test_policy_config_normalizes_lists() -> None:
    config = PolicyConfig(
        deny_patterns=["reddit.com", {"pattern": "*.youtube.com"}, {"url": " x.com "}, ""],
        deny_keywords=None,
        allow_keywords="wiki",
    )
    assert config.deny_patterns == ["reddit.com", "*.youtube.com", "x.com"]
    assert config.deny_keywords == []
    assert config.allow_keywords == ["wiki"]


def test_decide_request_requires_url() -> None:
    DecideRequest(url="https://example.com")
    with pytest.raises(ValidationError):
        DecideRequest()
    with pytest.raises(ValidationError):
        DecideRequest(url="https://example.com", policy={"enabled": "sometimes"})


def test_decide_request_parses_nested_policy() -> None:
    req = DecideRequest(
        url=" https://reddit.com/ ",
        policy={"mode": "combined", "deny_patterns": [{"pattern": "reddit.com"}]},
    )
    assert req.url == "https://reddit.com/"
    assert req.policy is not None
    assert req.policy.deny_patterns == ["reddit.com"]


def test_verdict_response_from_verdict() -> None:
    resp = VerdictResponse.from_verdict(
        Verdict(blocked=True, reason="pattern: reddit.com", matched_pattern="reddit.com", specificity=7)
    )
    assert resp.model_dump() == {
        "blocked": True,
        "reason": "pattern: reddit.com",
        "matched_pattern": "reddit.com",
        "specificity": 7,
    }


def test_explanation_response_from_explanation() -> None:
    explanation = explain(
        "https://reddit.com/r/news", [], ["reddit.com"], [], ["news"], "blacklist", True
    )
    resp = ExplanationResponse.from_explanation(explanation)
    assert resp.verdict.blocked is True
    assert [m.kind for m in resp.deny_matches] == ["pattern", "keyword"]
    assert resp.allow_matches == []
