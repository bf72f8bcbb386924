"""Item summaries through a pluggable summarizer."""

from .prompts import DEFAULT_PROMPTS, SHORT_SUMMARY_PROMPT, Prompt, get_prompt
from .providers import MockSummarizer, OpenAISummarizer, Summarizer, create_summarizer
from .service import SummaryResult, SummaryService

__all__ = [
    "DEFAULT_PROMPTS",
    "SHORT_SUMMARY_PROMPT",
    "MockSummarizer",
    "OpenAISummarizer",
    "Prompt",
    "Summarizer",
    "SummaryResult",
    "SummaryService",
    "create_summarizer",
    "get_prompt",
]
