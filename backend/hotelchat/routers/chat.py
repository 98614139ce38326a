# chat router: guest messages, transcript history and escalation to staff
# guest-facing: workflow failures become a fallback bubble, never a raw error

import logging
from fastapi import APIRouter, Depends, HTTPException, Query, status

from hotelchat.models.chat import (
    ChatMessageRequest,
    ChatMessageResponse,
    EscalationRequest,
    EscalationResponse,
    HistoryEntry,
)
from hotelchat.services.escalation import ContactRequest, EscalationRecorder, InvalidEscalation
from hotelchat.services.ledger import Sender
from hotelchat.services.store import ConciergeStore, get_store
from hotelchat.services.topics import DEFAULT_TOPIC
from hotelchat.services.workflow import WorkflowAnswer, WorkflowClient, WorkflowError
from hotelchat.dependencies import get_workflow

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/chat", tags=["chat"])

FALLBACK_REPLY = (
    "I'm having trouble reaching the hotel service right now. "
    "Please try again in a moment."
)

_WIRE_SENDER = {Sender.GUEST: "user", Sender.ASSISTANT: "bot"}


def _fallback_answer() -> WorkflowAnswer:
    return WorkflowAnswer(answer=FALLBACK_REPLY, topic=DEFAULT_TOPIC, can_answer=False)


@router.post("/message", response_model=ChatMessageResponse)
async def send_message(
    body: ChatMessageRequest,
    store: ConciergeStore = Depends(get_store),
    workflow: WorkflowClient = Depends(get_workflow),
):
    """relay a guest message to the chat workflow and track the session"""
    message = body.message
    if not isinstance(message, str) or not message.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing message")

    recorded = store.ledger.record_message(body.session_id, message)
    session_id = recorded.effective_session_id

    try:
        result = await workflow.ask(session_id, message, store.knowledge.text)
    except WorkflowError as e:
        logger.error(f"Chat workflow failed for session {session_id} ({e.code}): {e}")
        result = _fallback_answer()

    if not result.answer.strip():
        logger.warning(f"Chat workflow returned an empty answer for session {session_id}")
        result = _fallback_answer()

    store.ledger.record_assistant_reply(session_id, result.answer, result.can_answer)
    topic = store.topics.increment(result.topic)

    return ChatMessageResponse(
        reply=result.answer,
        topic=topic,
        canAnswer=result.can_answer,
        sessionId=session_id,
    )


@router.get("/history", response_model=list[HistoryEntry])
async def get_history(
    session_id: str = Query(None, alias="sessionId"),
    store: ConciergeStore = Depends(get_store),
):
    """transcript for a session, empty for an unknown one"""
    return [
        HistoryEntry(sender=_WIRE_SENDER[entry.sender], text=entry.text, timestamp=entry.timestamp)
        for entry in store.ledger.get_history(session_id)
    ]


@router.post("/escalate", response_model=EscalationResponse)
async def escalate(
    body: EscalationRequest,
    store: ConciergeStore = Depends(get_store),
    workflow: WorkflowClient = Depends(get_workflow),
):
    """hand the question to staff. delivery problems are logged, the guest still gets ok."""
    recorder = EscalationRecorder(store.ledger, workflow)
    request = ContactRequest(
        name=body.name,
        email=body.email,
        phone=body.phone,
        question=body.question,
        transcript=body.transcript if body.transcript is not None else body.conversation,
        session_id=body.session_id,
    )

    try:
        result = await recorder.escalate(request)
    except InvalidEscalation as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": str(e), "details": {"missing": e.missing}},
        )

    logger.info(f"Escalation outcome for session {body.session_id}: {result.outcome.value}")
    return EscalationResponse(ok=True)
