"""LLM completion backends: one request/response contract over OpenAI, Groq and Gemini.

A backend takes a message history (``[{"role": ..., "content": ...}]``) and an
optional tool catalog and returns an :class:`AiResponse` holding exactly one
of: text, tool calls, or an error (with a human-readable text).

Provider failures (bad key, rate limit, rejected request, unreachable host)
are mapped to readable messages here and returned, never raised. Responses
that cannot be parsed are left to raise so the caller can treat them as
unexpected faults.
"""
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx
from openai import AsyncOpenAI, APIConnectionError, APIStatusError

logger = logging.getLogger(__name__)

PROVIDER_LABELS = {"groq": "Groq", "gemini": "Gemini", "openai": "OpenAI"}

KEY_HELP = (
    "Get your free API key at:\n"
    "• Groq: https://console.groq.com/\n"
    "• Gemini: https://makersuite.google.com/\n"
    "• OpenAI: https://platform.openai.com/"
)


@dataclass
class ToolCall:
    name: str
    arguments: Dict[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "arguments": self.arguments}


@dataclass
class AiResponse:
    text: Optional[str] = None
    tool_calls: Optional[List[ToolCall]] = None
    error: Optional[str] = None


def describe_failure(label: str, status: Optional[int] = None, detail: Optional[str] = None,
                     message: str = "", url: str = "") -> str:
    """Turn a provider failure into a message suitable for showing the user."""
    if status == 401:
        return (f"Invalid {label} API key.\n\nPlease check:\n"
                f"• Your .env file has {label.upper()}_API_KEY\n"
                f"• The key is correct\n"
                f"• You restarted the server after adding the key")
    if status == 404:
        return f"{label} endpoint not found.\n\nAPI URL: {url}\n\nPlease check the configuration."
    if status == 429:
        return (f"Rate limit exceeded for {label}.\n\nTry:\n"
                f"• Wait a moment and retry\n"
                f"• Switch to a different provider with TODO_LLM_PROVIDER")
    if detail:
        return f"{label} Error: {detail}"
    if message:
        return f"Error: {message}"
    return f"Sorry, I encountered an error with {label}."


def _error_detail(body: Any) -> Optional[str]:
    """Dig the provider's error message out of a decoded error body."""
    if not isinstance(body, dict):
        return None
    inner = body.get("error", body)
    if isinstance(inner, dict):
        msg = inner.get("message")
        return str(msg) if msg else None
    return None


class CompletionBackend:
    """Base class: key check + logging around a provider-specific call."""

    provider = ""

    def __init__(self, api_key: str, model: str, temperature: float = 0.7,
                 max_tokens: int = 1000, timeout: float = 30.0):
        self.api_key = api_key
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout

    @property
    def label(self) -> str:
        return PROVIDER_LABELS.get(self.provider, self.provider or "UNKNOWN")

    async def complete(self, messages: List[dict], tools: Optional[List[dict]] = None) -> AiResponse:
        if not self.api_key:
            name = (self.provider or "unknown").upper()
            logger.warning(f"[{self.provider}] API key missing")
            return AiResponse(
                error=f"{name} API key not configured.",
                text=f"Please add {name}_API_KEY to your .env file.\n\n{KEY_HELP}",
            )

        logger.info(f"[{self.provider}] model={self.model} messages={len(messages)} tools={len(tools or [])}")
        response = await self._complete(messages, tools)
        if response.error:
            logger.error(f"[{self.provider}] completion failed: {response.error}")
        elif response.tool_calls:
            logger.info(f"[{self.provider}] tool calls: {[tc.name for tc in response.tool_calls]}")
        return response

    async def _complete(self, messages: List[dict], tools: Optional[List[dict]]) -> AiResponse:
        raise NotImplementedError


class OpenAICompatibleBackend(CompletionBackend):
    """Chat Completions API with function tools (OpenAI and Groq)."""

    def __init__(self, provider: str, api_key: str, model: str, base_url: str,
                 transport: Optional[httpx.AsyncBaseTransport] = None, **kwargs):
        super().__init__(api_key, model, **kwargs)
        self.provider = provider
        self.base_url = base_url
        self.transport = transport
        self._client: Optional[AsyncOpenAI] = None

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            # Failures go straight back to the caller, the SDK must not retry
            http_client = httpx.AsyncClient(transport=self.transport) if self.transport else None
            self._client = AsyncOpenAI(api_key=self.api_key, base_url=self.base_url, timeout=self.timeout,
                                       max_retries=0, http_client=http_client)
        return self._client

    async def _complete(self, messages, tools):
        request: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }
        if tools:
            request["tools"] = [{"type": "function", "function": tool} for tool in tools]
            request["tool_choice"] = "auto"

        try:
            response = await self._get_client().chat.completions.create(**request)
        except APIStatusError as e:
            return self._failure(status=e.status_code, detail=_error_detail(e.body),
                                 message=e.message, url=f"{self.base_url}/chat/completions")
        except APIConnectionError as e:
            return self._failure(message=str(e))

        message = response.choices[0].message
        if message.tool_calls:
            calls = [
                ToolCall(name=tc.function.name, arguments=json.loads(tc.function.arguments or "{}"))
                for tc in message.tool_calls
            ]
            return AiResponse(tool_calls=calls)
        return AiResponse(text=message.content)

    def _failure(self, **kwargs) -> AiResponse:
        msg = describe_failure(self.label, **kwargs)
        return AiResponse(error=msg, text=msg)


class GeminiBackend(CompletionBackend):
    """Gemini generateContent API over httpx."""

    provider = "gemini"

    def __init__(self, api_key: str, model: str, base_url: str,
                 transport: Optional[httpx.AsyncBaseTransport] = None, **kwargs):
        super().__init__(api_key, model, **kwargs)
        self.base_url = base_url.rstrip("/")
        self.transport = transport

    def _build_request(self, messages: List[dict], tools: Optional[List[dict]]) -> Dict[str, Any]:
        contents = [
            {"role": "model" if m["role"] == "assistant" else "user", "parts": [{"text": m["content"]}]}
            for m in messages if m["role"] != "system"
        ]
        # Gemini has no system role here; send it as the leading user turn
        system = next((m for m in messages if m["role"] == "system"), None)
        if system:
            contents.insert(0, {"role": "user", "parts": [{"text": f"System: {system['content']}"}]})

        body: Dict[str, Any] = {
            "contents": contents,
            "generationConfig": {
                "temperature": self.temperature,
                "maxOutputTokens": self.max_tokens,
            },
        }
        if tools:
            body["tools"] = [{"functionDeclarations": tools}]
        return body

    async def _complete(self, messages, tools):
        url = f"{self.base_url}/{self.model}:generateContent"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                resp = await client.post(url, params={"key": self.api_key},
                                         json=self._build_request(messages, tools))
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPStatusError as e:
            try:
                detail = _error_detail(e.response.json())
            except ValueError:
                detail = None
            msg = describe_failure(self.label, status=e.response.status_code, detail=detail,
                                   message=f"HTTP {e.response.status_code}", url=url)
            return AiResponse(error=msg, text=msg)
        except httpx.HTTPError as e:
            msg = describe_failure(self.label, message=str(e) or type(e).__name__)
            return AiResponse(error=msg, text=msg)

        parts = data["candidates"][0]["content"]["parts"]
        calls = [
            ToolCall(name=p["functionCall"]["name"], arguments=p["functionCall"].get("args") or {})
            for p in parts if "functionCall" in p
        ]
        if calls:
            return AiResponse(tool_calls=calls)
        text = "".join(p.get("text", "") for p in parts)
        return AiResponse(text=text or None)


def create_backend(settings) -> CompletionBackend:
    """Build the completion backend selected by settings.llm_provider."""
    provider = settings.llm_provider
    common = dict(
        api_key=settings.api_key_for(provider),
        model=settings.model_for(provider),
        temperature=settings.temperature,
        max_tokens=settings.max_tokens,
        timeout=settings.request_timeout,
    )
    if provider == "groq":
        return OpenAICompatibleBackend("groq", base_url=settings.groq_base_url, **common)
    if provider == "openai":
        return OpenAICompatibleBackend("openai", base_url=settings.openai_base_url, **common)
    if provider == "gemini":
        return GeminiBackend(base_url=settings.gemini_base_url, **common)
    raise ValueError(f"Unknown provider: {provider}")
