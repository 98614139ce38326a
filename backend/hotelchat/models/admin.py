# admin models: knowledge base upload and stats snapshot schemas
# mirrors the admin panel's HotelStats, SessionRecord and TopicStat

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class PdfUploadResponse(BaseModel):
    ok: bool = True
    path: Optional[str] = None
    text_length: int = Field(..., alias="textLength")
    filename: str

    model_config = {"populate_by_name": True}


class CurrentPdf(BaseModel):
    filename: str
    uploaded_at: datetime = Field(..., alias="uploadedAt")

    model_config = {"populate_by_name": True}


class TopicStat(BaseModel):
    topic: str
    count: int
    percentage: float = 0.0


class SessionRecord(BaseModel):
    """recent-session row in the admin table"""
    id: str
    question_count: int = Field(0, alias="questionCount")
    unanswered_count: int = Field(0, alias="unansweredCount")
    status: str
    start_time: datetime = Field(..., alias="startTime")
    last_unanswered_question: Optional[str] = Field(None, alias="lastUnansweredQuestion")

    model_config = {"populate_by_name": True}


class StatsResponse(BaseModel):
    """derived snapshot over ledger, topic tally and knowledge source"""
    total_sessions: int = Field(0, alias="totalSessions")
    unanswered_questions: int = Field(0, alias="unansweredQuestions")
    last_update: datetime = Field(..., alias="lastUpdate")
    current_pdf: Optional[CurrentPdf] = Field(None, alias="currentPdf")
    topics: list[TopicStat] = Field(default_factory=list)
    recent_sessions: list[SessionRecord] = Field(default_factory=list, alias="recentSessions")

    model_config = {"populate_by_name": True}
