"""Per-case onboarding workflow.

A case moves through the wizard steps below. Each workflow operation checks
the case's ``current_step`` against its own eligibility set and, in the same
transaction as its entity write, stores the step it produces:

    case creation            -> CREATED
    patient link             -> PATIENT_LINKED
    medication upsert        -> MEDICAL_LINKED
    emergency contacts       -> EMERGENCY_CONTACTS_ADDED   (no precondition)
    notification preferences -> NOTIFICATIONS_CONFIGURED

DEVICE_LINKED is reserved for device pairing. Nothing writes it yet, but the
medication and notification gates already accept it.

Step writes are unconditional (last writer wins). Two requests racing on one
case can both pass their gate; whichever commits last decides current_step.
"""
import logging
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy.ext.asyncio import AsyncSession

from episure.core.errors import InvalidWorkflowStep

if TYPE_CHECKING:
    from episure.modules.cases.models import Case

logger = logging.getLogger(__name__)

class CaseStep(str, Enum):
    CREATED = "CREATED"
    PATIENT_LINKED = "PATIENT_LINKED"
    MEDICAL_LINKED = "MEDICAL_LINKED"
    DEVICE_LINKED = "DEVICE_LINKED"
    EMERGENCY_CONTACTS_ADDED = "EMERGENCY_CONTACTS_ADDED"
    NOTIFICATIONS_CONFIGURED = "NOTIFICATIONS_CONFIGURED"

MEDICATION_STEPS = frozenset({
    CaseStep.PATIENT_LINKED.value,
    CaseStep.MEDICAL_LINKED.value,
    CaseStep.DEVICE_LINKED.value,
})

NOTIFICATION_STEPS = frozenset({
    CaseStep.CREATED.value,
    CaseStep.PATIENT_LINKED.value,
    CaseStep.MEDICAL_LINKED.value,
    CaseStep.DEVICE_LINKED.value,
    CaseStep.NOTIFICATIONS_CONFIGURED.value,
})

def ensure_step(case: "Case", allowed: frozenset[str], operation: str, *, missing_as: CaseStep | None = None) -> None:
    """Raise InvalidWorkflowStep unless the case sits in one of ``allowed``.

    ``missing_as`` is the step assumed for a case whose current_step is null;
    without it a null step is never eligible.
    """
    current = case.current_step
    if current is None and missing_as is not None:
        current = missing_as.value
    if current not in allowed:
        raise InvalidWorkflowStep(operation, case.current_step, allowed)

async def advance(session: AsyncSession, case: "Case", step: CaseStep) -> CaseStep:
    previous = case.current_step
    case.current_step = step.value
    await session.flush()
    if previous != step.value:
        logger.info("Case %s: %s -> %s", case.case_id, previous, step.value)
    return step
