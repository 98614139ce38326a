# knowledge source: the hotel pdf text sent to the chat workflow as hotelInfo
# extraction goes through pdfminer; the active source is only replaced after a clean extraction

import io
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from pdfminer.high_level import extract_text as pdfminer_extract_text

logger = logging.getLogger(__name__)


class PdfExtractionError(Exception):
    """raised when a document cannot be turned into text"""


@dataclass
class KnowledgeSource:
    raw_text: str
    filename: str
    uploaded_at: datetime
    path: Optional[str] = None


def _clean_text(s: str) -> str:
    # form feeds separate pages in pdfminer output
    return s.replace("\x0c", "\n").strip()


def extract_pdf_text(pdf_bytes: bytes) -> str:
    """extract selectable text from a pdf. raises PdfExtractionError on unreadable input."""
    if not pdf_bytes:
        raise PdfExtractionError("Uploaded file is empty")
    # the header may sit anywhere in the first 1024 bytes
    if b"%PDF-" not in pdf_bytes[:1024]:
        raise PdfExtractionError("File is not a PDF document")
    try:
        text = pdfminer_extract_text(io.BytesIO(pdf_bytes))
    except Exception as e:
        raise PdfExtractionError(f"Could not read PDF: {e}") from e
    return _clean_text(text or "")


class KnowledgeHolder:
    """holds the single active knowledge source, replaced wholesale on upload"""

    def __init__(self):
        self._current: Optional[KnowledgeSource] = None

    @property
    def current(self) -> Optional[KnowledgeSource]:
        return self._current

    @property
    def text(self) -> str:
        return self._current.raw_text if self._current else ""

    def replace(self, raw_text: str, filename: str, path: Optional[str] = None) -> KnowledgeSource:
        source = KnowledgeSource(
            raw_text=raw_text,
            filename=filename,
            uploaded_at=datetime.now(timezone.utc),
            path=path,
        )
        self._current = source
        logger.info(f"Knowledge source replaced: {filename} ({len(raw_text)} chars)")
        return source

    def clear(self) -> None:
        self._current = None
