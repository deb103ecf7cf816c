from app.services.llm.base import Conversation, LLMProvider, LLMProviderError, LLMTimeoutError
from app.services.llm.gemini_provider import GeminiConversation, GeminiProvider

__all__ = [
    "Conversation",
    "LLMProvider",
    "LLMProviderError",
    "LLMTimeoutError",
    "GeminiConversation",
    "GeminiProvider",
]
