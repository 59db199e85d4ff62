"""Google Gemini API wrapper: structured prompt in, parsed JSON out.

Every failure mode (missing key, timeout, transport error, unparsable reply)
is raised as an AIClientError subclass so callers can capture it at their
own boundary.
"""

import asyncio
import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any

from google import genai
from google.genai import types

from config import settings

logger = logging.getLogger(__name__)

_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


class AIClientError(Exception):
    """Base error for AI calls. tokens_used records spend before the failure."""

    def __init__(self, message: str, tokens_used: int = 0) -> None:
        super().__init__(message)
        self.tokens_used = tokens_used


class AINotConfiguredError(AIClientError):
    pass


class AITimeoutError(AIClientError):
    pass


class AIResponseParseError(AIClientError):
    pass


@dataclass
class AIResponse:
    data: dict[str, Any]
    tokens_used: int = 0
    finish_reason: str | None = None  # "STOP", "MAX_TOKENS", ...
    text: str = ""
    raw: Any = field(default=None, repr=False)


def parse_json_text(text: str) -> dict[str, Any]:
    """Parse a model reply as a JSON object, stripping markdown fences."""
    text = text.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else text[3:]
        if text.endswith("```"):
            text = text[:-3]
        text = text.strip()

    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as e:
        # Replies sometimes wrap the object in prose
        match = _JSON_OBJECT_RE.search(text)
        if not match:
            raise AIResponseParseError(f"Failed to parse AI response as JSON: {e}") from e
        try:
            parsed = json.loads(match.group(0))
        except json.JSONDecodeError as inner:
            raise AIResponseParseError(f"Failed to parse AI response as JSON: {inner}") from inner

    if not isinstance(parsed, dict):
        raise AIResponseParseError(f"Expected a JSON object, got {type(parsed).__name__}")
    return parsed


def _finish_reason(response: Any) -> str | None:
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return None
    reason = getattr(candidates[0], "finish_reason", None)
    if reason is None:
        return None
    return getattr(reason, "name", str(reason))


def _total_tokens(response: Any) -> int:
    usage = getattr(response, "usage_metadata", None)
    if usage is None:
        return 0
    return getattr(usage, "total_token_count", None) or 0


class GeminiClient:
    """Async JSON client over google-genai with a per-call timeout."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        timeout: float | None = None,
    ) -> None:
        self.api_key = settings.gemini_api_key if api_key is None else api_key
        self.model = model or settings.gemini_model
        self.timeout = timeout if timeout is not None else settings.ai_timeout_seconds
        self._sdk: genai.Client | None = None

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def _get_sdk(self) -> genai.Client:
        if not self.api_key:
            raise AINotConfiguredError("No GEMINI_API_KEY set - AI features disabled")
        if self._sdk is None:
            self._sdk = genai.Client(api_key=self.api_key)
        return self._sdk

    async def generate_json(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        max_tokens: int = 800,
        temperature: float = 0.3,
    ) -> AIResponse:
        """Send one prompt and return the parsed JSON reply."""
        sdk = self._get_sdk()
        config = types.GenerateContentConfig(
            system_instruction=system_prompt,
            temperature=temperature,
            max_output_tokens=max_tokens,
            response_mime_type="application/json",
        )

        try:
            response = await asyncio.wait_for(
                sdk.aio.models.generate_content(
                    model=self.model,
                    contents=user_prompt,
                    config=config,
                ),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            raise AITimeoutError(f"Gemini call timed out after {self.timeout:g}s") from e
        except Exception as e:
            logger.error("Gemini API error: %s", e)
            raise AIClientError(f"Gemini API error: {e}") from e

        tokens = _total_tokens(response)
        text = response.text or ""
        try:
            data = parse_json_text(text)
        except AIResponseParseError as e:
            logger.error("Failed to parse Gemini response as JSON: %s", e)
            e.tokens_used = tokens
            raise

        return AIResponse(
            data=data,
            tokens_used=tokens,
            finish_reason=_finish_reason(response),
            text=text,
            raw=response,
        )


_client: GeminiClient | None = None


def get_client() -> GeminiClient:
    global _client
    if _client is None:
        if not settings.gemini_api_key:
            logger.warning("No GEMINI_API_KEY set - Gemini features disabled")
        _client = GeminiClient()
    return _client
