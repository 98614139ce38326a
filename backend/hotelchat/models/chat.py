# chat models: guest message, history and escalation schemas
# mirrors the widget's fetch payloads (camelCase on the wire)

from datetime import datetime
from typing import Any, Literal, Optional
from pydantic import BaseModel, Field, field_validator


class ChatMessageRequest(BaseModel):
    """guest message from the chat widget"""
    session_id: Optional[str] = Field(None, alias="sessionId")
    message: Optional[str] = None

    model_config = {"populate_by_name": True}

    @field_validator("session_id", mode="before")
    @classmethod
    def _drop_malformed_id(cls, v):
        # a non-string id is treated the same as a missing one
        return v if isinstance(v, str) else None


class ChatMessageResponse(BaseModel):
    reply: str
    topic: str
    can_answer: bool = Field(..., alias="canAnswer")
    session_id: str = Field(..., alias="sessionId")

    model_config = {"populate_by_name": True}


class HistoryEntry(BaseModel):
    """one transcript line as the widget renders it"""
    sender: Literal["user", "bot"]
    text: str
    timestamp: datetime


class EscalationRequest(BaseModel):
    """contact form submitted when the bot could not help"""
    session_id: Optional[str] = Field(None, alias="sessionId")
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    question: str = ""
    transcript: Any = None
    # older widget builds send the transcript under this key
    conversation: Any = None

    model_config = {"populate_by_name": True}

    @field_validator("session_id", mode="before")
    @classmethod
    def _drop_malformed_id(cls, v):
        return v if isinstance(v, str) else None


class EscalationResponse(BaseModel):
    ok: bool
