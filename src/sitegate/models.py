from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, field_validator

from .config import PolicyConfig
from .policy import Explanation, RuleMatch, Verdict


class DecideRequest(BaseModel):
    url: str
    policy: Optional[PolicyConfig] = None

    @field_validator("url")
    @classmethod
    def strip_url(cls, value: str) -> str:
        return value.strip()


class VerdictResponse(BaseModel):
    blocked: bool
    reason: str
    matched_pattern: Optional[str] = None
    specificity: Optional[int] = None

    @classmethod
    def from_verdict(cls, verdict: Verdict) -> "VerdictResponse":
        return cls(**verdict.to_dict())


class RuleMatchResponse(BaseModel):
    kind: str
    entry: str
    specificity: int

    @classmethod
    def from_match(cls, match: RuleMatch) -> "RuleMatchResponse":
        return cls(kind=match.kind, entry=match.entry, specificity=match.specificity)


class ExplanationResponse(BaseModel):
    url: str
    mode: str
    verdict: VerdictResponse
    allow_matches: List[RuleMatchResponse]
    deny_matches: List[RuleMatchResponse]

    @classmethod
    def from_explanation(cls, explanation: Explanation) -> "ExplanationResponse":
        return cls(
            url=explanation.url,
            mode=explanation.mode,
            verdict=VerdictResponse.from_verdict(explanation.verdict),
            allow_matches=[RuleMatchResponse.from_match(m) for m in explanation.allow_matches],
            deny_matches=[RuleMatchResponse.from_match(m) for m in explanation.deny_matches],
        )
