"""
SpendPilot Alternative Generator

Builders for corrective AltActions and the de-duplication pass applied
to every evaluator's output.
"""
from __future__ import annotations

from typing import Any, Iterable

from ..models import AltAction, Outcome, Payment, ScenarioPatch


def alternative(
    id: str,
    title: str,
    description: str,
    expected_outcome: Outcome,
    **patch: Any,
) -> AltAction:
    """Build an AltAction whose patch is given as attribute keyword arguments."""
    return AltAction(
        id=id,
        title=title,
        description=description,
        expected_outcome=expected_outcome,
        patch=ScenarioPatch.of(**patch),
    )


def personal_payment_alternative() -> AltAction:
    """Escape hatch offered whenever CorporatePay is selected."""
    return alternative(
        "alt-personal",
        "Use personal payment",
        "Switch to personal wallet/card to proceed immediately.",
        Outcome.ALLOWED,
        payment=Payment.PERSONAL,
    )


def corporate_payment_alternative() -> AltAction:
    """Offered on personal payments, for legitimate business spend."""
    return alternative(
        "alt-back-corp",
        "Use CorporatePay instead",
        "Switch back to CorporatePay for business spend.",
        Outcome.APPROVAL_REQUIRED,
        payment=Payment.CORPORATE_PAY,
    )


def dedupe_alternatives(alternatives: Iterable[AltAction]) -> tuple[AltAction, ...]:
    """
    Drop alternatives repeating an earlier (title, patch) pair.

    First occurrence wins and keeps its position.
    """
    seen: set[tuple[str, str]] = set()
    result = []
    for alt in alternatives:
        key = alt.dedupe_key
        if key in seen:
            continue
        seen.add(key)
        result.append(alt)
    return tuple(result)
