# fastapi dependency injection
# provides the shared workflow client and the optional admin api key check

import logging
import secrets
from typing import Optional
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from hotelchat.config import settings
from hotelchat.services.workflow import WorkflowClient

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


async def get_workflow(request: Request) -> WorkflowClient:
    """workflow client created in the app lifespan"""
    workflow = getattr(request.app.state, "workflow", None)
    if workflow is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Workflow client not initialised",
        )
    return workflow


async def require_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> None:
    """guard admin routes with ADMIN_API_KEY. no key configured means open access."""
    expected = settings.ADMIN_API_KEY
    if not expected:
        return

    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing admin token",
        )

    if not secrets.compare_digest(credentials.credentials, expected):
        logger.warning("Rejected admin request with invalid token")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid admin token",
        )
