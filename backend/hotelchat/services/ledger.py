# session ledger: in-memory per-session counters, transcript and status
# keeps a bounded newest-first view of recent sessions for the admin stats

import logging
import uuid
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_RECENT_CAP = 50

# client-supplied ids longer than this are treated as malformed
MAX_SESSION_ID_LENGTH = 128


class SessionStatus(str, Enum):
    RESOLVED = "Resolved"
    NEEDS_REVIEW = "Needs Review"


class Sender(str, Enum):
    GUEST = "guest"
    ASSISTANT = "assistant"


@dataclass
class ChatEntry:
    sender: Sender
    text: str
    timestamp: datetime


@dataclass
class Session:
    id: str
    started_at: datetime
    question_count: int = 0
    unanswered_count: int = 0
    status: SessionStatus = SessionStatus.RESOLVED
    last_unanswered_question: Optional[str] = None
    messages: list[ChatEntry] = field(default_factory=list)


@dataclass
class SessionSummary:
    """lightweight projection of a session for the recent-sessions view"""
    id: str
    question_count: int
    unanswered_count: int
    status: SessionStatus
    start_time: datetime
    last_unanswered_question: Optional[str] = None


@dataclass
class RecordResult:
    effective_session_id: str
    is_new_session: bool


def _now() -> datetime:
    return datetime.now(timezone.utc)


def new_session_id() -> str:
    return f"session-{uuid.uuid4().hex}"


def _clean_id(session_id) -> Optional[str]:
    """return a usable session id or None for missing/blank/malformed input"""
    if not isinstance(session_id, str):
        return None
    session_id = session_id.strip()
    if not session_id or len(session_id) > MAX_SESSION_ID_LENGTH:
        return None
    return session_id


class SessionLedger:
    """maps session ids to conversation state.

    none of the methods raise for a bad or unknown id: recording treats it
    as a new session, lookups return empty results, status updates no-op.
    """

    def __init__(self, recent_cap: int = DEFAULT_RECENT_CAP):
        if recent_cap < 1:
            raise ValueError("recent_cap must be at least 1")
        self.recent_cap = recent_cap
        self._sessions: dict[str, Session] = {}
        # newest id on the left, appendleft drops the oldest from the right
        self._recent: deque[str] = deque(maxlen=recent_cap)
        self._unanswered_total = 0

    @property
    def total_sessions(self) -> int:
        return len(self._sessions)

    @property
    def unanswered_questions(self) -> int:
        return self._unanswered_total

    def get(self, session_id) -> Optional[Session]:
        key = _clean_id(session_id)
        if key is None:
            return None
        return self._sessions.get(key)

    def record_message(self, session_id, text: str) -> RecordResult:
        """count a guest message, creating the session on first sight"""
        key = _clean_id(session_id)
        is_new = key is None or key not in self._sessions
        if is_new:
            key = key or new_session_id()
            while key in self._sessions:
                key = new_session_id()
            self._sessions[key] = Session(id=key, started_at=_now())
            self._recent.appendleft(key)
            logger.info(f"New chat session {key} ({len(self._sessions)} total)")

        session = self._sessions[key]
        session.question_count += 1
        session.messages.append(ChatEntry(sender=Sender.GUEST, text=text, timestamp=_now()))
        return RecordResult(effective_session_id=key, is_new_session=is_new)

    def record_assistant_reply(self, session_id, text: str, can_answer: bool) -> None:
        session = self.get(session_id)
        if session is None:
            logger.debug(f"Ignoring reply for unknown session {session_id!r}")
            return

        session.messages.append(ChatEntry(sender=Sender.ASSISTANT, text=text, timestamp=_now()))
        if not can_answer:
            session.unanswered_count += 1
            session.last_unanswered_question = self._last_guest_text(session)
            session.status = SessionStatus.NEEDS_REVIEW
            self._unanswered_total += 1

    def mark_needs_review(self, session_id) -> bool:
        """flag a session for staff review. returns False if the id is unknown."""
        session = self.get(session_id)
        if session is None:
            return False
        session.status = SessionStatus.NEEDS_REVIEW
        return True

    def get_history(self, session_id) -> list[ChatEntry]:
        session = self.get(session_id)
        if session is None:
            return []
        return list(session.messages)

    def snapshot_recent(self, limit: Optional[int] = None) -> list[SessionSummary]:
        """newest-first summaries, projected from the live sessions"""
        bound = self.recent_cap if limit is None else max(0, min(limit, self.recent_cap))
        summaries = []
        for session_id in list(self._recent)[:bound]:
            session = self._sessions[session_id]
            summaries.append(SessionSummary(
                id=session.id,
                question_count=session.question_count,
                unanswered_count=session.unanswered_count,
                status=session.status,
                start_time=session.started_at,
                last_unanswered_question=session.last_unanswered_question,
            ))
        return summaries

    @staticmethod
    def _last_guest_text(session: Session) -> Optional[str]:
        for entry in reversed(session.messages):
            if entry.sender == Sender.GUEST:
                return entry.text
        return None
