import os

from fastapi import FastAPI

from .config import PolicyConfig, load_config
from .log import configure_logging, get_logger
from .models import DecideRequest, ExplanationResponse, VerdictResponse
from .policy import UrlPolicy

settings = load_config(os.getenv("SITEGATE_CONFIG"))
configure_logging(settings.log_level)
logger = get_logger(__name__)

url_policy = UrlPolicy.from_config(settings.policy)

app = FastAPI()


def _policy_for(payload: DecideRequest) -> UrlPolicy:
    if payload.policy is None:
        return url_policy
    return UrlPolicy.from_config(payload.policy)


@app.get("/health")
async def health() -> dict:
    return {"status": "ok"}


@app.get("/v1/policy", response_model=PolicyConfig)
async def current_policy() -> PolicyConfig:
    return settings.policy


@app.post("/v1/decide", response_model=VerdictResponse)
async def decide_url(payload: DecideRequest) -> VerdictResponse:
    verdict = _policy_for(payload).evaluate(payload.url)
    logger.info(
        "Decision for %s: blocked=%s reason=%s", payload.url, verdict.blocked, verdict.reason
    )
    return VerdictResponse.from_verdict(verdict)


@app.post("/v1/explain", response_model=ExplanationResponse)
async def explain_url(payload: DecideRequest) -> ExplanationResponse:
    explanation = _policy_for(payload).explain(payload.url)
    logger.info(
        "Explained %s: %d allow and %d deny matches",
        payload.url,
        len(explanation.allow_matches),
        len(explanation.deny_matches),
    )
    return ExplanationResponse.from_explanation(explanation)
