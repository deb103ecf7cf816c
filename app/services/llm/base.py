from __future__ import annotations

from abc import ABC, abstractmethod


class LLMProviderError(RuntimeError):
    pass


class LLMTimeoutError(LLMProviderError):
    """The upstream model did not answer within the configured timeout."""


class Conversation(ABC):
    """An in-progress exchange with a model; every message shares prior context."""

    @abstractmethod
    def send_message(self, text: str) -> str:
        """Send a user turn and return the model's reply text."""
        raise NotImplementedError


class LLMProvider(ABC):
    @abstractmethod
    def start_chat(self, system_instruction: str | None = None) -> Conversation:
        """Open a new conversation seeded with an optional system instruction."""
        raise NotImplementedError

    @abstractmethod
    def generate(self, prompt: str) -> str:
        """Send a single prompt with no history and return the response text."""
        raise NotImplementedError
