"""Thin wrapper over the OpenAI Chat Completions API with optional streaming."""
from __future__ import annotations

import logging
import time
from typing import Callable, Dict, Iterator, List, Optional

from openai import OpenAI, OpenAIError

from packages.errors import UpstreamGenerationError
from packages.metrics import inc, observe

logger = logging.getLogger("trainlog.planning")

Messages = List[Dict[str, str]]


class CompletionClient:
    def __init__(
        self,
        api_key: Optional[str],
        model: str,
        base_url: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: int = 4000,
        timeout: float = 120.0,
        client: Optional[OpenAI] = None,
    ):
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        if client is None and api_key:
            client = OpenAI(api_key=api_key, base_url=base_url, timeout=timeout, max_retries=0)
        self._client = client

    @property
    def configured(self) -> bool:
        return self._client is not None

    def ensure_configured(self) -> None:
        self._require_client()

    def _require_client(self) -> OpenAI:
        if self._client is None:
            raise UpstreamGenerationError(
                "Completion client has no API key",
                user_message="Plan generation is not configured: set TRAINLOG_LLM_API_KEY and try again.",
            )
        return self._client

    def _create(self, messages: Messages, stream: bool):
        client = self._require_client()
        inc("completion_requests_total")
        try:
            return client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                stream=stream,
            )
        except OpenAIError as exc:
            inc("completion_failures_total")
            logger.error("completion_failed model=%s %s", self.model, exc)
            raise UpstreamGenerationError(f"Completion request failed: {exc}") from exc

    def stream(self, messages: Messages) -> Iterator[str]:
        """Yield text chunks as they arrive."""
        started = time.perf_counter()
        response = self._create(messages, stream=True)
        try:
            for chunk in response:
                if not chunk.choices:
                    continue
                text = chunk.choices[0].delta.content
                if text:
                    yield text
        except OpenAIError as exc:
            inc("completion_failures_total")
            logger.error("completion_stream_failed model=%s %s", self.model, exc)
            raise UpstreamGenerationError(f"Completion stream failed: {exc}") from exc
        finally:
            observe("completion_duration_seconds", time.perf_counter() - started)

    def complete(self, messages: Messages, on_chunk: Optional[Callable[[str], None]] = None) -> str:
        """Return the full reply text; with on_chunk, stream and report each chunk."""
        if on_chunk is not None:
            parts = []
            for text in self.stream(messages):
                on_chunk(text)
                parts.append(text)
            content = "".join(parts)
        else:
            started = time.perf_counter()
            response = self._create(messages, stream=False)
            observe("completion_duration_seconds", time.perf_counter() - started)
            content = ""
            if response.choices:
                content = response.choices[0].message.content or ""
        if not content.strip():
            inc("completion_failures_total")
            raise UpstreamGenerationError("Completion returned no text")
        logger.info("completion_ok model=%s chars=%d", self.model, len(content))
        return content
