"""Summarizer interface and implementations."""

import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

import openai
from openai import OpenAI

from ..errors import SummarizerError

logger = logging.getLogger(__name__)


class Summarizer(ABC):
    """Abstract base class for summarization backends."""

    @abstractmethod
    def summarize(self, text: str, prompt: str) -> str:
        """
        Summarize text following a system prompt.

        Args:
            text: Article content
            prompt: Instructions for the summary

        Returns:
            Summary text

        Raises:
            SummarizerError: the backend failed
        """
        pass

    @abstractmethod
    def get_usage_stats(self) -> Dict:
        """Get usage statistics."""
        pass


class OpenAISummarizer(Summarizer):
    """OpenAI chat-completions summarizer."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        base_url: Optional[str] = None,
        max_tokens: int = 300,
        temperature: float = 0.7,
    ) -> None:
        """
        Initialize OpenAI summarizer.

        Args:
            api_key: OpenAI API key
            model: Model name to use
            base_url: Custom base URL (for testing or compatible servers)
            max_tokens: Completion token limit
            temperature: Sampling temperature
        """
        self.client = OpenAI(api_key=api_key, base_url=base_url)
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.total_tokens = 0
        self.api_calls = 0

    def summarize(self, text: str, prompt: str) -> str:
        # Rough token estimate: 1 token ~= 4 chars
        max_content_chars = 8000
        if len(text) > max_content_chars:
            text = text[:max_content_chars] + "..."

        try:
            self.api_calls += 1
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": prompt},
                    {"role": "user", "content": text},
                ],
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                user="anonymous",
            )
        except openai.OpenAIError as e:
            raise SummarizerError(f"Failed to generate summary: {e}") from e

        if response.usage:
            self.total_tokens += response.usage.total_tokens

        content = response.choices[0].message.content if response.choices else None
        return (content or "Unable to generate summary").strip()

    def get_usage_stats(self) -> Dict:
        return {
            "total_tokens": self.total_tokens,
            "api_calls": self.api_calls,
            "model": self.model,
        }


class MockSummarizer(Summarizer):
    """Deterministic summarizer for tests and offline runs."""

    def __init__(self) -> None:
        self.calls: List[tuple] = []

    def summarize(self, text: str, prompt: str) -> str:
        self.calls.append((text, prompt))
        words = text.split()
        return "Mock summary: " + " ".join(words[:12])

    def get_usage_stats(self) -> Dict:
        return {
            "total_tokens": len(self.calls) * 100,
            "api_calls": len(self.calls),
            "model": "mock",
        }


def create_summarizer(llm_config: Dict) -> Summarizer:
    """Build the configured summarizer, falling back to the mock one."""
    if llm_config.get("provider") == "openai":
        api_key = llm_config.get("api_key")
        if not api_key:
            logger.warning("No OpenAI API key found, using mock summarizer")
            return MockSummarizer()
        return OpenAISummarizer(
            api_key=api_key,
            model=llm_config.get("model", "gpt-4o-mini"),
            base_url=llm_config.get("base_url"),
            max_tokens=llm_config.get("max_tokens", 300),
            temperature=llm_config.get("temperature", 0.7),
        )
    if llm_config.get("provider") != "mock":
        logger.warning("Unknown LLM provider %r, using mock summarizer", llm_config.get("provider"))
    return MockSummarizer()
