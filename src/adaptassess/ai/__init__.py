"""
AI Services

LLM client and prompt library used for question generation and insights.
"""

from .client import AIClient, get_ai_client
from .prompt_loader import PromptLibrary, get_prompt_library

__all__ = [
    "AIClient",
    "get_ai_client",
    "PromptLibrary",
    "get_prompt_library",
]
