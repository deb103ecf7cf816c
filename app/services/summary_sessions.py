"""Summary sessions: start a chat over a transcript, refine it, expire it."""
from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from app.services.llm import GeminiProvider, LLMProvider, LLMProviderError
from app.services.session_store import SessionStore
from app.services.summary_normalizer import (
    REFINE_FALLBACKS,
    START_FALLBACKS,
    normalize_summary,
)
from app.services.summary_prompts import (
    CONNECTION_TEST_PROMPT,
    SYSTEM_INSTRUCTION,
    build_refine_prompt,
    build_start_prompt,
)
from app.settings import ServiceSettings


class SessionValidationError(ValueError):
    """Caller input is missing, blank, or names an unknown session."""


def _is_blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


class SummarySessionService:
    """Composes the session store, the Gemini provider and the normalizer.

    Validation always runs before any upstream call, and a new session is only
    stored once the first summary has been produced, so a failed start leaves
    no trace in the store.
    """

    def __init__(
        self,
        settings: ServiceSettings,
        store: SessionStore,
        provider_factory: Optional[Callable[[], LLMProvider]] = None,
    ) -> None:
        self._settings = settings
        self._store = store
        self._provider_factory = provider_factory
        self._logger = logging.getLogger("summarizer.summary_sessions")

    @property
    def store(self) -> SessionStore:
        return self._store

    @property
    def gemini_key_set(self) -> bool:
        return self._settings.gemini_key_set

    def _get_provider(self) -> LLMProvider:
        if self._provider_factory is not None:
            return self._provider_factory()
        if not self._settings.gemini_api_key:
            raise LLMProviderError("GEMINI_API_KEY not set")
        return GeminiProvider(
            api_key=self._settings.gemini_api_key,
            model=self._settings.gemini_model,
            base_url=self._settings.gemini_base_url,
            timeout=self._settings.gemini_timeout_seconds,
        )

    def start_session(self, transcript: Any, user_instruction: Optional[str] = None) -> dict:
        if _is_blank(transcript):
            raise SessionValidationError("Transcript is required")

        provider = self._get_provider()
        chat = provider.start_chat(system_instruction=SYSTEM_INSTRUCTION)
        self._logger.info(
            "Starting session transcript_chars=%d custom_instruction=%s",
            len(transcript),
            bool(user_instruction),
        )
        raw = chat.send_message(build_start_prompt(transcript, user_instruction))
        summary = normalize_summary(raw, START_FALLBACKS)

        session_id = self._store.create(chat)
        return {"sessionId": session_id, "summary": summary}

    def refine(self, session_id: Any, prompt: Any) -> dict:
        if session_id is not None and not isinstance(session_id, str):
            session_id = str(session_id)
        chat = self._store.get(session_id)
        if chat is None:
            raise SessionValidationError("Invalid or expired sessionId")
        if _is_blank(prompt):
            raise SessionValidationError("Prompt is required")

        self._logger.info("Refining session=%s prompt_chars=%d", session_id, len(prompt))
        raw = chat.send_message(build_refine_prompt(prompt))
        return {"summary": normalize_summary(raw, REFINE_FALLBACKS)}

    def cleanup(self) -> dict:
        before = self._store.count()
        self._store.sweep()
        after = self._store.count()
        return {
            "message": "Session cleanup completed",
            "sessions_before": before,
            "sessions_after": after,
            "cleaned": before - after,
        }

    def list_sessions(self) -> dict:
        ids = self._store.ids()
        return {"active_sessions": len(ids), "session_ids": ids}

    def test_connection(self) -> str:
        """Send a one-off prompt to confirm the credential and model work."""
        return self._get_provider().generate(CONNECTION_TEST_PROMPT)
