"""
SpendPilot Guidance

Helpers that turn a Decision into what the requester does next: the
primary call to action, and a plain-text summary suitable for pasting
into a ticket or chat.
"""
from __future__ import annotations

from ..config import PolicyConfig
from ..models import Decision, NextAction, NextStep, Outcome, Payment, Scenario


def next_action(scenario: Scenario, decision: Decision) -> NextAction:
    """
    Primary call to action for a decision.

    Blocked decisions get a secondary-emphasis "Request exception".
    """
    if scenario.payment == Payment.PERSONAL:
        step = NextStep.CONTINUE_PERSONAL
    elif decision.outcome == Outcome.ALLOWED:
        step = NextStep.CONTINUE_CORPORATE
    elif decision.outcome == Outcome.APPROVAL_REQUIRED:
        step = NextStep.SUBMIT_FOR_APPROVAL
    else:
        return NextAction(step=NextStep.REQUEST_EXCEPTION, label=NextStep.REQUEST_EXCEPTION.label, primary=False)
    return NextAction(step=step, label=step.label)


def summarize(scenario: Scenario, decision: Decision, config: PolicyConfig) -> str:
    """Plain-text policy check summary."""
    lines = [
        f"Outcome: {decision.outcome.label}",
        f"Module: {scenario.module.label}",
        f"Payment: {scenario.payment.label}",
        f"Amount: {config.format_amount(scenario.amount)}",
        f"Time: {scenario.time_of_day}",
        f"Location: {scenario.location.label}",
        "Reasons:",
    ]
    lines.extend(f"- {r.title}: {r.detail}" for r in decision.reasons)
    return "\n".join(lines)
