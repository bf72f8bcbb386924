"""Built-in summarization prompts."""

from typing import List, Optional

from pydantic import BaseModel, Field


class Prompt(BaseModel):
    """A named system prompt for summaries."""

    id: str = Field(..., description="Prompt identifier")
    name: str = Field(..., description="Display name")
    prompt: str = Field(..., description="System prompt text")
    is_default: bool = Field(True, description="Shipped with feedfuse")


SHORT_SUMMARY_PROMPT = (
    "Summarize this article in exactly 20 words or less. Focus on the main point "
    "and key takeaway. Be concise and informative."
)

DEFAULT_PROMPTS: List[Prompt] = [
    Prompt(
        id="technical",
        name="Technical Summary",
        prompt=(
            "Provide a concise technical summary of this article, focusing on key technologies, "
            "methodologies, and technical insights. Keep it under 100 words."
        ),
    ),
    Prompt(
        id="business",
        name="Business Summary",
        prompt=(
            "Summarize this article from a business perspective, highlighting market implications, "
            "business opportunities, and strategic insights. Keep it under 100 words."
        ),
    ),
    Prompt(
        id="casual",
        name="Casual Summary",
        prompt=(
            "Write a friendly, easy-to-understand summary of this article for a general audience. "
            "Focus on the main points and why they matter. Keep it under 100 words."
        ),
    ),
    Prompt(id="short", name="Short Summary", prompt=SHORT_SUMMARY_PROMPT),
]


def get_prompt(prompt_id: str) -> Optional[Prompt]:
    for prompt in DEFAULT_PROMPTS:
        if prompt.id == prompt_id:
            return prompt
    return None
