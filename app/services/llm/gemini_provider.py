"""Gemini LLM provider using Google's Generative Language REST API."""
from __future__ import annotations

import logging
import threading

import requests

from app.services.llm.base import (
    Conversation,
    LLMProvider,
    LLMProviderError,
    LLMTimeoutError,
)

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com"


class GeminiProvider(LLMProvider):
    """LLM provider for Google Gemini models."""

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 60.0,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._logger = logging.getLogger("summarizer.llm.gemini")

    @property
    def model(self) -> str:
        return self._model

    def start_chat(self, system_instruction: str | None = None) -> "GeminiConversation":
        return GeminiConversation(self, system_instruction=system_instruction)

    def generate(self, prompt: str) -> str:
        return self._call_api([{"role": "user", "parts": [{"text": prompt}]}])

    def _call_api(self, contents: list[dict], system_instruction: str | None = None) -> str:
        """Make a call to the Gemini API and return the response text."""
        # Handle model name format (may include "models/" prefix)
        model_name = self._model
        if not model_name.startswith("models/"):
            model_name = f"models/{model_name}"

        url = f"{self._base_url}/v1beta/{model_name}:generateContent"
        body: dict = {"contents": contents}
        if system_instruction:
            body["systemInstruction"] = {"parts": [{"text": system_instruction}]}

        try:
            response = requests.post(
                url,
                params={"key": self._api_key},
                headers={"Content-Type": "application/json"},
                json=body,
                timeout=self._timeout,
            )
        except requests.Timeout as exc:
            raise LLMTimeoutError(
                f"Gemini request timed out after {self._timeout:g}s"
            ) from exc
        except requests.RequestException as exc:
            raise LLMProviderError("Failed to reach Gemini API") from exc

        if response.status_code != 200:
            self._logger.error("Gemini error: %s - %s", response.status_code, response.text[:500])
            raise LLMProviderError(f"Gemini error: {response.status_code}")

        data = response.json()
        candidates = data.get("candidates", [])
        if not candidates:
            raise LLMProviderError("Gemini response missing candidates")

        content = candidates[0].get("content", {})
        parts = content.get("parts", [])
        if not parts:
            raise LLMProviderError("Gemini response missing parts")

        return "".join(part.get("text", "") for part in parts)


class GeminiConversation(Conversation):
    """Chat history held client-side and replayed on every turn.

    Turns are appended only after the model answers, so a failed send leaves
    the history untouched and the conversation can be retried.
    """

    def __init__(self, provider: GeminiProvider, system_instruction: str | None = None) -> None:
        self._provider = provider
        self._system_instruction = system_instruction
        self._history: list[dict] = []
        self._lock = threading.Lock()

    @property
    def history(self) -> list[dict]:
        with self._lock:
            return list(self._history)

    def send_message(self, text: str) -> str:
        user_turn = {"role": "user", "parts": [{"text": text}]}
        with self._lock:
            reply = self._provider._call_api(
                self._history + [user_turn],
                system_instruction=self._system_instruction,
            )
            self._history.append(user_turn)
            self._history.append({"role": "model", "parts": [{"text": reply}]})
        return reply
