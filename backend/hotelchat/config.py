# backend configuration
# loads env vars for the n8n webhooks, session ledger limits, pdf uploads and admin access

import os
from pathlib import Path
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# load .env from project root
load_dotenv(Path(__file__).parent.parent.parent / ".env")


class Settings(BaseSettings):
    # n8n workflows
    N8N_WEBHOOK_URL: str = os.getenv("N8N_WEBHOOK_URL", "https://imedkilat.onrender.com/webhook/hotel-chat")
    N8N_ESCALATE_URL: str = os.getenv("N8N_ESCALATE_URL", "https://imedkilat.onrender.com/webhook/hotel-escalate")
    WORKFLOW_TIMEOUT_SECONDS: float = 20.0

    # session ledger
    RECENT_SESSIONS_CAP: int = 50
    COUNT_UNCATEGORIZED_TOPICS: bool = False

    # knowledge base uploads
    UPLOAD_DIR: str = os.getenv("UPLOAD_DIR", "uploads")
    MAX_PDF_BYTES: int = 20 * 1024 * 1024

    # admin access: empty key leaves the admin routes open
    ADMIN_API_KEY: str = os.getenv("ADMIN_API_KEY", "")

    # cors
    FRONTEND_URL: str = os.getenv("FRONTEND_URL", "http://localhost:5173")

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    PORT: int = 4000

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
