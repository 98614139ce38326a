# workflow client: outbound calls to the n8n chat and escalation webhooks
# one shared httpx client per process, bounded timeout, failures surfaced as WorkflowError

import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from hotelchat.config import settings
from hotelchat.services.topics import DEFAULT_TOPIC, normalize_topic

logger = logging.getLogger(__name__)


class WorkflowError(Exception):
    """the external workflow was unreachable, timed out, or answered badly"""

    def __init__(self, code: str, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.code = code
        self.status_code = status_code


@dataclass
class WorkflowAnswer:
    answer: str
    topic: str = DEFAULT_TOPIC
    can_answer: bool = True


def parse_chat_payload(data: Any) -> WorkflowAnswer:
    """normalize a chat webhook body. n8n may wrap the item in a list."""
    if isinstance(data, list):
        if not data:
            raise WorkflowError("malformed_response", "Workflow returned an empty list")
        data = data[0]
    if not isinstance(data, dict):
        raise WorkflowError("malformed_response", f"Unexpected workflow payload: {type(data).__name__}")

    answer = data.get("answer") or data.get("reply") or ""
    if not isinstance(answer, str):
        answer = str(answer)
    can_answer = data.get("canAnswer")
    return WorkflowAnswer(
        answer=answer,
        topic=normalize_topic(data.get("topic")),
        can_answer=can_answer if isinstance(can_answer, bool) else True,
    )


class WorkflowClient:
    def __init__(
        self,
        chat_url: str,
        escalate_url: str,
        timeout: float = 20.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.chat_url = chat_url
        self.escalate_url = escalate_url
        self._client = httpx.AsyncClient(
            headers={"User-Agent": "hotelchat-relay/0.1.0", "Accept": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    async def _post(self, url: str, body: dict[str, Any]) -> httpx.Response:
        try:
            resp = await self._client.post(url, json=body)
        except httpx.TimeoutException as e:
            raise WorkflowError("timeout", f"Workflow timed out: {url}") from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise WorkflowError("transport_error", f"Workflow unreachable: {e}") from e
        if resp.status_code >= 400:
            raise WorkflowError(
                "http_error",
                f"HTTP {resp.status_code}: {resp.text[:200]}",
                status_code=resp.status_code,
            )
        return resp

    async def ask(self, session_id: str, message: str, hotel_info: str) -> WorkflowAnswer:
        """send a guest message to the chat workflow and parse its answer"""
        resp = await self._post(self.chat_url, {
            "sessionId": session_id,
            "message": message,
            "hotelInfo": hotel_info,
        })
        try:
            data = resp.json()
        except ValueError as e:
            raise WorkflowError("malformed_response", "Workflow returned non-JSON body") from e
        return parse_chat_payload(data)

    async def escalate(self, payload: dict[str, Any]) -> None:
        """forward a contact request to the escalation workflow. the body is not inspected."""
        resp = await self._post(self.escalate_url, payload)
        logger.debug(f"Escalation workflow answered {resp.status_code}")

    async def close(self) -> None:
        await self._client.aclose()


def build_workflow_client() -> WorkflowClient:
    return WorkflowClient(
        chat_url=settings.N8N_WEBHOOK_URL,
        escalate_url=settings.N8N_ESCALATE_URL,
        timeout=settings.WORKFLOW_TIMEOUT_SECONDS,
    )
