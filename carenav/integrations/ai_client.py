"""AI / LLM integration client.

Talks to an OpenAI-compatible chat-completions API when a real key is
configured.  In mock mode (key starting with ``mock_``) every call returns
empty output and callers fall back to their deterministic paths.
"""

from __future__ import annotations

import json
from collections.abc import AsyncIterator
from typing import Any

import httpx

from carenav.config import settings
from carenav.integrations.base import BaseIntegration


def _is_mock() -> bool:
    return settings.AI_API_KEY.startswith("mock_")


def _strip_code_fence(text: str) -> str:
    text = text.strip()
    if text.startswith("```"):
        lines = [l for l in text.split("\n") if not l.strip().startswith("```")]
        text = "\n".join(lines)
    return text


class AIClient(BaseIntegration):
    """Chat-completions client with JSON, vision and streaming helpers."""

    def __init__(self) -> None:
        super().__init__("ai")
        self._base_url = settings.AI_BASE_URL.rstrip("/")
        self._model = settings.AI_MODEL
        self._timeout = settings.AI_TIMEOUT_SECONDS

    @property
    def is_mock(self) -> bool:
        return _is_mock()

    @property
    def mode(self) -> str:
        return "mock" if _is_mock() else "live"

    async def health_check(self) -> bool:
        if _is_mock():
            self.logger.info("AI client health check: OK (mock)")
            return True
        try:
            async with httpx.AsyncClient(timeout=10) as client:
                resp = await client.get(f"{self._base_url}/models", headers=self._headers())
                return resp.status_code == 200
        except httpx.HTTPError as e:
            self.logger.error("AI health check failed: %s", e)
            return False

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {settings.AI_API_KEY}",
            "Content-Type": "application/json",
        }

    def _payload(
        self,
        system: str,
        messages: list[dict[str, Any]],
        temperature: float,
        max_tokens: int,
    ) -> dict[str, Any]:
        return {
            "model": self._model,
            "messages": [{"role": "system", "content": system}, *messages],
            "temperature": temperature,
            "max_tokens": max_tokens,
        }

    async def _chat(
        self,
        system: str,
        messages: list[dict[str, Any]],
        temperature: float = 0.7,
        max_tokens: int = 4096,
        json_mode: bool = False,
    ) -> str:
        if _is_mock():
            return ""
        payload = self._payload(system, messages, temperature, max_tokens)
        if json_mode:
            payload["response_format"] = {"type": "json_object"}

        async with httpx.AsyncClient(timeout=self._timeout) as client:
            resp = await client.post(
                f"{self._base_url}/chat/completions",
                headers=self._headers(),
                json=payload,
            )
            resp.raise_for_status()
            data = resp.json()
            try:
                content = data["choices"][0]["message"]["content"]
            except (KeyError, IndexError, TypeError) as e:
                raise ValueError(f"Malformed completion response: {e!r}") from e
            if content is not None and not isinstance(content, str):
                raise ValueError("Completion content is not text")
            return content or ""

    async def _chat_json(
        self,
        system: str,
        messages: list[dict[str, Any]],
        temperature: float = 0.5,
    ) -> dict[str, Any]:
        raw = await self._chat(system, messages, temperature, json_mode=True)
        if not raw:
            return {}
        return json.loads(_strip_code_fence(raw))

    # ------------------------------------------------------------------
    # Public helpers
    # ------------------------------------------------------------------

    async def complete_json(
        self, system: str, user: str, temperature: float = 0.7
    ) -> dict[str, Any]:
        """Ask for a single JSON object.  Returns ``{}`` in mock mode."""
        self.logger.info("Requesting JSON completion (%d chars of input)", len(user))
        result = await self._chat_json(system, [{"role": "user", "content": user}], temperature)
        if result:
            self.logger.info("JSON completion received (%d keys)", len(result))
        return result

    async def complete_text(
        self, system: str, user: str, temperature: float = 0.7, max_tokens: int = 2048
    ) -> str:
        """Ask for free text.  Returns ``""`` in mock mode."""
        self.logger.info("Requesting text completion (%d chars of input)", len(user))
        result = await self._chat(
            system, [{"role": "user", "content": user}], temperature, max_tokens
        )
        if result:
            self.logger.info("Text completion received (%d chars)", len(result))
        return result

    async def analyze_image(
        self, prompt: str, image_b64: str, media_type: str
    ) -> dict[str, Any]:
        """Send one base64 image plus instructions and parse a JSON reply."""
        self.logger.info("Analyzing %s image (%d base64 chars)", media_type, len(image_b64))
        content = [
            {
                "type": "image_url",
                "image_url": {"url": f"data:{media_type};base64,{image_b64}"},
            },
            {"type": "text", "text": prompt},
        ]
        return await self._chat_json(
            "You extract structured data from healthcare documents. Return ONLY valid JSON.",
            [{"role": "user", "content": content}],
            temperature=0.2,
        )

    async def stream_chat(
        self,
        system: str,
        messages: list[dict[str, Any]],
        max_tokens: int = 1024,
    ) -> AsyncIterator[str]:
        """Yield text deltas as the model produces them.  Yields nothing in mock mode."""
        if _is_mock():
            return
        payload = self._payload(system, messages, temperature=0.7, max_tokens=max_tokens)
        payload["stream"] = True

        async with httpx.AsyncClient(timeout=self._timeout) as client:
            async with client.stream(
                "POST",
                f"{self._base_url}/chat/completions",
                headers=self._headers(),
                json=payload,
            ) as resp:
                resp.raise_for_status()
                async for line in resp.aiter_lines():
                    if not line.startswith("data: "):
                        continue
                    data = line[len("data: "):].strip()
                    if data == "[DONE]":
                        break
                    chunk = json.loads(data)
                    choices = chunk.get("choices") if isinstance(chunk, dict) else None
                    if not choices or not isinstance(choices[0], dict):
                        continue
                    delta = (choices[0].get("delta") or {}).get("content")
                    if delta:
                        yield delta
