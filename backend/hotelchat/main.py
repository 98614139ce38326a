# hotelchat backend api
# fastapi relay between the guest chat widget, the n8n workflows and the admin panel

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from hotelchat.config import settings
from hotelchat.services.store import ConciergeStore, get_store, store
from hotelchat.services.workflow import build_workflow_client
from hotelchat.routers import admin, chat

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """startup: fresh store and workflow client. shutdown: close client, drop state."""
    logger.info("Starting hotelchat backend...")
    store.open()
    app.state.workflow = build_workflow_client()
    logger.info(f"Chat workflow: {settings.N8N_WEBHOOK_URL}")
    yield
    logger.info("Shutting down hotelchat backend...")
    await app.state.workflow.close()
    app.state.workflow = None
    store.close()


app = FastAPI(
    title="Hotel Chat API",
    description="Relay for the hotel guest chat widget: n8n chat workflow, staff escalation, PDF knowledge base and stats",
    version="0.1.0",
    lifespan=lifespan,
)

# cors: allow frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL, "http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# error bodies are {"error": ..., "details"?: ...} across the api

@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    content = exc.detail if isinstance(exc.detail, dict) else {"error": exc.detail}
    return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request", "details": jsonable_encoder(exc.errors())},
    )


# register routers
app.include_router(chat.router)
app.include_router(admin.router)


@app.get("/health")
async def health_check(state: ConciergeStore = Depends(get_store)):
    """basic health check endpoint"""
    return {
        "status": "ok",
        "service": "hotelchat-api",
        "knowledgeLoaded": state.knowledge.current is not None,
    }


def run():
    """console entry point"""
    import uvicorn
    uvicorn.run("hotelchat.main:app", host="0.0.0.0", port=settings.PORT)
