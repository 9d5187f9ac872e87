"""Policy check endpoints."""

import logging

from fastapi import APIRouter, HTTPException

from spendpilot.api.schemas.requests import ApplyRequest, DiffRequest, ScenarioInput
from spendpilot.api.schemas.responses import (
    ApplyResponse,
    DiffResponse,
    EvaluateResponse,
    PolicyConfigResponse,
)
from spendpilot.engine import SpendPolicyEngine, next_action
from spendpilot.exceptions import SpendPilotError
from spendpilot.models import Decision, Scenario

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/policy", tags=["Policy"])

# Shared engine instance
engine: SpendPolicyEngine = None


def set_engine(e: SpendPolicyEngine):
    global engine
    engine = e


def _get_engine() -> SpendPolicyEngine:
    if engine is None:
        raise HTTPException(status_code=503, detail="Policy engine not loaded")
    return engine


def _bad_request(error: SpendPilotError) -> HTTPException:
    logger.info("Rejected input: %s", error, extra={"error_code": error.code})
    return HTTPException(status_code=400, detail=error.to_dict())


def _decision_payload(scenario: Scenario, decision: Decision) -> dict:
    payload = decision.to_dict()
    payload["nextAction"] = next_action(scenario, decision).to_dict()
    return payload


@router.post("/evaluate", response_model=EvaluateResponse)
async def evaluate_scenario(request: ScenarioInput):
    """
    Evaluate a proposed transaction.

    Returns the outcome, the reasons behind it, corrective alternatives,
    coach tips and the primary next action.
    """
    policy_engine = _get_engine()
    try:
        scenario = Scenario.from_dict(request.to_payload())
    except SpendPilotError as e:
        raise _bad_request(e)

    decision = policy_engine.evaluate(scenario)
    logger.info(
        "Policy check %s -> %s",
        scenario.module.value,
        decision.outcome.value,
        extra={
            "spend_module": scenario.module.value,
            "outcome": decision.outcome.value,
            "reason_codes": [c.value for c in decision.reason_codes],
        },
    )
    return EvaluateResponse.model_validate(_decision_payload(scenario, decision))


@router.post("/diff", response_model=DiffResponse)
async def diff_scenarios(request: DiffRequest):
    """Compare a previous attempt with the current scenario."""
    policy_engine = _get_engine()
    try:
        previous = Scenario.from_dict(request.previous.to_payload())
        current = Scenario.from_dict(request.current.to_payload())
    except SpendPilotError as e:
        raise _bad_request(e)

    changes = policy_engine.diff(previous, current)
    return DiffResponse.model_validate({"changes": [c.to_dict() for c in changes]})


@router.post("/apply", response_model=ApplyResponse)
async def apply_patch(request: ApplyRequest):
    """Apply an alternative's or coach tip's patch and re-evaluate."""
    policy_engine = _get_engine()
    try:
        scenario = Scenario.from_dict(request.scenario.to_payload())
        updated, decision = policy_engine.apply(scenario, request.patch)
    except SpendPilotError as e:
        raise _bad_request(e)

    return ApplyResponse.model_validate({
        "scenario": updated.to_dict(),
        "decision": _decision_payload(updated, decision),
    })


@router.get("/config", response_model=PolicyConfigResponse)
async def get_config():
    """Active thresholds and allow-lists."""
    config = _get_engine().config
    return PolicyConfigResponse(
        name=config.name,
        version=config.version,
        fingerprint=config.fingerprint(),
        config=config.to_dict(),
    )
