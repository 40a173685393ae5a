"""
Farm assistant.

Server side: a stateless proxy that replays the chat history to Gemini's
``streamGenerateContent`` endpoint (SSE) and relays text chunks as they
arrive. Client side: ``AssistantSession`` keeps the transcript and fills one
model placeholder per message from the streamed body.
"""
import json
from typing import AsyncIterator, Literal, Optional

import httpx
from pydantic import BaseModel, Field

from farmdesk.core.config import settings
from farmdesk.core.exceptions import FarmDeskError
from farmdesk.core.logging import assistant_logger

APOLOGY_TEXT = "ขออภัย, เกิดข้อผิดพลาดในการสื่อสารกับผู้ช่วย AI"
MISSING_KEY_MESSAGE = "API key is not configured on the server."
UPSTREAM_FAILURE_MESSAGE = "An internal error occurred while communicating with the AI service."


class ChatMessage(BaseModel):
    role: Literal["user", "model"]
    text: str


class ChatRequest(BaseModel):
    history: list[ChatMessage] = Field(default_factory=list)
    message: str = Field(min_length=1)


class AssistantError(FarmDeskError):
    status_code = 500

    def to_dict(self) -> dict:
        return {"error": {"message": self.message}}


def build_request_body(
    history: list[ChatMessage],
    message: str,
    system_instruction: Optional[str] = None,
) -> dict:
    contents = [{"role": m.role, "parts": [{"text": m.text}]} for m in history]
    contents.append({"role": "user", "parts": [{"text": message}]})
    body = {"contents": contents}
    instruction = system_instruction if system_instruction is not None else settings.ASSISTANT_SYSTEM_INSTRUCTION
    if instruction:
        body["systemInstruction"] = {"parts": [{"text": instruction}]}
    return body


def extract_text(event: dict) -> str:
    """Concatenated text parts of one streamed GenerateContentResponse."""
    texts = []
    for candidate in event.get("candidates") or []:
        content = candidate.get("content") or {}
        for part in content.get("parts") or []:
            text = part.get("text")
            if text:
                texts.append(text)
    return "".join(texts)


def stream_url() -> str:
    return f"{settings.GEMINI_BASE_URL.rstrip('/')}/models/{settings.GEMINI_MODEL}:streamGenerateContent"


async def stream_reply(
    history: list[ChatMessage],
    message: str,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> AsyncIterator[str]:
    """Yield reply text chunks in arrival order. No retries."""
    if not settings.GEMINI_API_KEY:
        raise AssistantError(MISSING_KEY_MESSAGE)

    headers = {
        "Content-Type": "application/json",
        "x-goog-api-key": settings.GEMINI_API_KEY,
    }
    body = build_request_body(history, message)

    async with httpx.AsyncClient(transport=transport, timeout=settings.ASSISTANT_TIMEOUT_SECONDS) as client:
        async with client.stream(
            "POST", stream_url(), params={"alt": "sse"}, json=body, headers=headers,
        ) as response:
            if response.status_code != 200:
                detail = (await response.aread()).decode("utf-8", errors="replace")
                assistant_logger.warning(
                    f"Upstream returned HTTP {response.status_code}",
                    body=detail[:200],
                )
                raise AssistantError(UPSTREAM_FAILURE_MESSAGE)

            chunks = 0
            async for line in response.aiter_lines():
                if not line.startswith("data:"):
                    continue
                payload = line[len("data:"):].strip()
                if not payload:
                    continue
                text = extract_text(json.loads(payload))
                if text:
                    chunks += 1
                    yield text

            assistant_logger.debug("Reply streamed", chunks=chunks)


async def open_reply_stream(
    history: list[ChatMessage],
    message: str,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> AsyncIterator[str]:
    """Start the upstream call and wait for the first chunk.

    Failures before the first chunk surface here, while the HTTP status can
    still be chosen. Later failures are logged and re-raised so the chunked
    response aborts instead of ending like a complete reply.
    """
    replies = stream_reply(history, message, transport=transport)
    try:
        first = await replies.__anext__()
    except StopAsyncIteration:
        first = None

    async def relay():
        try:
            if first:
                yield first
            async for chunk in replies:
                yield chunk
        except (httpx.HTTPError, ValueError, AssistantError) as e:
            assistant_logger.error("Reply stream interrupted", error=e)
            raise
        finally:
            await replies.aclose()

    return relay()


class AssistantSession:
    """Client-side transcript for the chat endpoint.

    ``client`` is an ``httpx.AsyncClient`` pointed at the farmdesk API.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        endpoint: str = "/api/assistant/chat",
        token: Optional[str] = None,
    ):
        self.client = client
        self.endpoint = endpoint
        self.token = token
        self.messages: list[ChatMessage] = []

    async def send(self, message: str) -> Optional[ChatMessage]:
        if not message.strip():
            return None

        history = [m.model_copy() for m in self.messages]
        self.messages.append(ChatMessage(role="user", text=message))
        placeholder = ChatMessage(role="model", text="")
        self.messages.append(placeholder)

        headers = {"Authorization": f"Bearer {self.token}"} if self.token else {}
        payload = {"history": [m.model_dump() for m in history], "message": message}

        try:
            async with self.client.stream("POST", self.endpoint, json=payload, headers=headers) as response:
                if response.status_code != 200:
                    error_text = (await response.aread()).decode("utf-8", errors="replace")
                    raise AssistantError(f"API error: {response.status_code} - {error_text}")
                async for chunk in response.aiter_text():
                    placeholder.text += chunk
        except (httpx.HTTPError, AssistantError) as e:
            assistant_logger.error("Assistant request failed", error=e)
            if placeholder.text == "":
                placeholder.text = APOLOGY_TEXT
            else:
                self.messages.append(ChatMessage(role="model", text=APOLOGY_TEXT))
                return self.messages[-1]

        return placeholder
