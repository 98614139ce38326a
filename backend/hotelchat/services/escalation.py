# escalation recorder: guest handoff to hotel staff
# flags the session for review and forwards the contact request to the escalation workflow

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from hotelchat.services.ledger import SessionLedger
from hotelchat.services.workflow import WorkflowClient, WorkflowError

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "email")


class InvalidEscalation(Exception):
    def __init__(self, missing: list[str]):
        super().__init__(f"Missing required fields: {', '.join(missing)}")
        self.missing = missing


class EscalationOutcome(str, Enum):
    DELIVERED = "delivered"
    DEGRADED = "degraded"


@dataclass
class EscalationResult:
    outcome: EscalationOutcome
    session_flagged: bool
    error: Optional[str] = None


@dataclass
class ContactRequest:
    name: Optional[str]
    email: Optional[str]
    question: str = ""
    transcript: Any = None
    phone: Optional[str] = None
    session_id: Optional[str] = None

    def to_payload(self) -> dict[str, Any]:
        return {
            "sessionId": self.session_id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "question": self.question,
            "transcript": self.transcript,
        }


def validate_contact(name: Optional[str], email: Optional[str]) -> None:
    missing = [
        key for key, value in zip(REQUIRED_FIELDS, (name, email))
        if not isinstance(value, str) or not value.strip()
    ]
    if missing:
        raise InvalidEscalation(missing)


class EscalationRecorder:
    def __init__(self, ledger: SessionLedger, workflow: WorkflowClient):
        self.ledger = ledger
        self.workflow = workflow

    async def escalate(self, request: ContactRequest) -> EscalationResult:
        """validate, flag the session, forward. workflow failures degrade, they don't raise."""
        validate_contact(request.name, request.email)

        flagged = self.ledger.mark_needs_review(request.session_id)
        try:
            await self.workflow.escalate(request.to_payload())
        except WorkflowError as e:
            logger.warning(f"Escalation for session {request.session_id} not delivered: {e}")
            return EscalationResult(EscalationOutcome.DEGRADED, flagged, error=str(e))

        logger.info(f"Escalation for session {request.session_id} delivered")
        return EscalationResult(EscalationOutcome.DELIVERED, flagged)
