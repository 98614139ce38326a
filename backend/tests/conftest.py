# shared fixtures for backend api tests
# provides a fresh store, a scripted workflow client, sample pdfs and httpx test clients

import pytest
import pytest_asyncio

from httpx import AsyncClient, ASGITransport

from hotelchat.main import app
from hotelchat.config import settings
from hotelchat.services.store import ConciergeStore, get_store
from hotelchat.services.workflow import WorkflowAnswer
from hotelchat.dependencies import get_workflow


# scripted workflow

class FakeWorkflow:
    """stand-in for WorkflowClient: returns queued answers or raises queued errors"""

    def __init__(self):
        self.default = WorkflowAnswer(answer="Breakfast is served from 7 to 10.", topic="Restaurant", can_answer=True)
        self.queued = []
        self.asked = []
        self.escalations = []
        self.escalate_error = None

    def queue(self, item):
        self.queued.append(item)

    async def ask(self, session_id, message, hotel_info):
        self.asked.append({"sessionId": session_id, "message": message, "hotelInfo": hotel_info})
        item = self.queued.pop(0) if self.queued else self.default
        if isinstance(item, Exception):
            raise item
        return item

    async def escalate(self, payload):
        self.escalations.append(payload)
        if self.escalate_error is not None:
            raise self.escalate_error

    async def close(self):
        pass


# minimal single-page pdf

def make_pdf(text: str) -> bytes:
    """build a tiny valid pdf with one line of helvetica text"""
    content = f"BT /F1 12 Tf 72 720 Td ({text}) Tj ET".encode("latin-1")
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
        b"/Contents 4 0 R /Resources << /Font << /F1 5 0 R >> >> >>",
        b"<< /Length %d >>\nstream\n" % len(content) + content + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]
    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % number + body + b"\nendobj\n"
    xref_at = len(out)
    out += b"xref\n0 %d\n" % (len(objects) + 1)
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += b"%010d 00000 n \n" % offset
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (len(objects) + 1, xref_at)
    return bytes(out)


SAMPLE_PDF_TEXT = "Check-in starts at 3 PM and breakfast is included"


@pytest.fixture
def sample_pdf():
    return make_pdf(SAMPLE_PDF_TEXT)


@pytest.fixture
def store():
    """fresh relay state for each test"""
    return ConciergeStore(recent_cap=50, count_default_topic=False)


@pytest.fixture
def workflow():
    return FakeWorkflow()


@pytest.fixture(autouse=True)
def upload_dir(tmp_path, monkeypatch):
    """keep uploaded pdfs out of the working tree"""
    target = tmp_path / "uploads"
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(target))
    monkeypatch.setattr(settings, "ADMIN_API_KEY", "")
    return target


@pytest_asyncio.fixture
async def client(store, workflow):
    """httpx async test client with the store and workflow overridden"""

    async def override_get_store():
        return store

    async def override_get_workflow():
        return workflow

    app.dependency_overrides[get_store] = override_get_store
    app.dependency_overrides[get_workflow] = override_get_workflow

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def bare_client():
    """client without overrides: exercises the real dependencies"""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
