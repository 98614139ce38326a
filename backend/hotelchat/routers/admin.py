# admin router: hotel pdf upload and session/topic stats
# operator-facing, so extraction errors are returned with details

import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from hotelchat.config import settings
from hotelchat.models.admin import CurrentPdf, PdfUploadResponse, SessionRecord, StatsResponse, TopicStat
from hotelchat.services.knowledge import PdfExtractionError, extract_pdf_text
from hotelchat.services.store import ConciergeStore, get_store
from hotelchat.dependencies import require_admin

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/admin", tags=["admin"], dependencies=[Depends(require_admin)])

UPLOAD_CHUNK_BYTES = 1024 * 1024


def _is_pdf(file: UploadFile) -> bool:
    filename = (file.filename or "").lower()
    return filename.endswith(".pdf") or file.content_type == "application/pdf"


def _save_upload(data: bytes, filename: str) -> str:
    """write the raw upload next to the others, returns the stored path"""
    upload_dir = Path(settings.UPLOAD_DIR)
    upload_dir.mkdir(parents=True, exist_ok=True)
    target = upload_dir / f"{uuid.uuid4().hex}{Path(filename).suffix.lower() or '.pdf'}"
    target.write_bytes(data)
    return str(target)


async def _read_limited(file: UploadFile, limit: int) -> Optional[bytes]:
    """read at most limit bytes. returns None once the upload is known to be larger."""
    if file.size is not None and file.size > limit:
        return None
    chunks = []
    total = 0
    while True:
        chunk = await file.read(min(UPLOAD_CHUNK_BYTES, limit + 1 - total))
        if not chunk:
            break
        total += len(chunk)
        if total > limit:
            return None
        chunks.append(chunk)
    return b"".join(chunks)


@router.post("/pdf", response_model=PdfUploadResponse)
async def upload_pdf(
    file: Optional[UploadFile] = File(None),
    store: ConciergeStore = Depends(get_store),
):
    """replace the hotel knowledge source with the text of an uploaded pdf"""
    if file is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file")

    filename = file.filename or "upload.pdf"
    if not _is_pdf(file):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Only PDF files are accepted")

    data = await _read_limited(file, settings.MAX_PDF_BYTES)
    if data is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"File too large. Maximum size is {settings.MAX_PDF_BYTES} bytes",
        )

    # the current knowledge source stays active until both steps succeed
    try:
        text = await run_in_threadpool(extract_pdf_text, data)
        path = await run_in_threadpool(_save_upload, data, filename)
    except PdfExtractionError as e:
        logger.error(f"Error parsing PDF {filename}: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Failed to parse PDF", "details": str(e)},
        )
    except OSError as e:
        logger.error(f"Could not store upload {filename}: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Failed to store PDF", "details": str(e)},
        )

    if not text:
        logger.warning(f"PDF {filename} has no selectable text")

    store.knowledge.replace(text, filename, path=path)
    logger.info(f"PDF uploaded, extracted text length: {len(text)}")

    return PdfUploadResponse(ok=True, path=path, textLength=len(text), filename=filename)


@router.get("/stats", response_model=StatsResponse)
async def get_stats(
    limit: int = Query(None, ge=1, description="max recent sessions, capped by the ledger"),
    store: ConciergeStore = Depends(get_store),
):
    """derived snapshot, computed fresh on every call"""
    source = store.knowledge.current
    current_pdf = CurrentPdf(filename=source.filename, uploadedAt=source.uploaded_at) if source else None

    topics = [
        TopicStat(topic=t.topic, count=t.count, percentage=t.percentage)
        for t in store.topics.snapshot()
    ]
    recent = [
        SessionRecord(
            id=s.id,
            questionCount=s.question_count,
            unansweredCount=s.unanswered_count,
            status=s.status.value,
            startTime=s.start_time,
            lastUnansweredQuestion=s.last_unanswered_question,
        )
        for s in store.ledger.snapshot_recent(limit)
    ]

    return StatsResponse(
        totalSessions=store.ledger.total_sessions,
        unansweredQuestions=store.ledger.unanswered_questions,
        lastUpdate=datetime.now(timezone.utc),
        currentPdf=current_pdf,
        topics=topics,
        recentSessions=recent,
    )
