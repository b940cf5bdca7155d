"""
Prompt Library Loader

Loads AI prompt templates from the packaged JSON library into memory.

Architecture:
- Load once at app startup
- Keep in memory as singleton
- Fast O(1) lookup by prompt_id
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any


class PromptLibrary:
    """In-memory prompt library loaded from JSON.

    Provides fast access to AI prompt templates.
    """

    def __init__(self, prompt_library_path: Path | None = None):
        """Initialize prompt library.

        Args:
            prompt_library_path: Path to prompt library JSON.
                                 Defaults to settings.PROMPT_LIBRARY_PATH
        """
        if prompt_library_path is None:
            from adaptassess.config import settings

            prompt_library_path = settings.PROMPT_LIBRARY_PATH

        self.path = prompt_library_path
        self.prompts: dict[str, dict[str, Any]] = {}
        self.metadata: dict[str, Any] = {}
        self._load()

    def _load(self) -> None:
        """Load prompts from JSON file."""
        if not self.path.exists():
            raise FileNotFoundError(f"Prompt library not found: {self.path}")

        with open(self.path, encoding="utf-8") as f:
            data = json.load(f)

        self.metadata = {
            "version": data.get("version", "unknown"),
            "last_updated": data.get("last_updated"),
            "total_prompts": len(data.get("prompts", [])),
        }

        for prompt in data.get("prompts", []):
            self.prompts[prompt["prompt_id"]] = prompt

    def get_prompt(self, prompt_id: str) -> dict[str, Any]:
        """Get prompt by ID.

        Args:
            prompt_id: Prompt identifier (e.g., 'QGEN-001', 'INSIGHT-001')

        Returns:
            Prompt data dict with keys:
                - prompt_id: str
                - name: str
                - category: str
                - system_prompt: str
                - user_template: str
                - temperature: float
                - max_tokens: int

        Raises:
            KeyError: If prompt_id not found
        """
        if prompt_id not in self.prompts:
            available = ", ".join(sorted(self.prompts.keys()))
            raise KeyError(
                f"Prompt '{prompt_id}' not found in library.\nAvailable prompts: {available}"
            )

        return self.prompts[prompt_id]

    def render(self, prompt_id: str, context: dict[str, Any]) -> tuple[str, str]:
        """Fill a prompt's ``{{placeholders}}`` from ``context``.

        Args:
            prompt_id: Prompt identifier
            context: Placeholder values

        Returns:
            (system_prompt, user_message)
        """
        prompt = self.get_prompt(prompt_id)
        user_message = prompt.get("user_template", "")
        for key, value in context.items():
            user_message = user_message.replace(f"{{{{{key}}}}}", str(value))
        return prompt["system_prompt"], user_message

    def get_prompt_config(self, prompt_id: str) -> dict[str, Any]:
        """Get sampling configuration for prompt (temperature, max_tokens)."""
        prompt = self.get_prompt(prompt_id)
        return {
            "temperature": prompt.get("temperature", 0.5),
            "max_tokens": prompt.get("max_tokens", 800),
        }

    def list_prompts(self, category: str | None = None) -> list[str]:
        """List all prompt IDs, optionally filtered by category."""
        if category is None:
            return sorted(self.prompts.keys())

        return sorted(
            prompt_id
            for prompt_id, prompt in self.prompts.items()
            if prompt.get("category") == category
        )

    def __len__(self) -> int:
        return len(self.prompts)

    def __contains__(self, prompt_id: str) -> bool:
        return prompt_id in self.prompts

    def __repr__(self) -> str:
        return f"PromptLibrary(version={self.metadata['version']}, prompts={len(self.prompts)})"


# Global singleton instance
_prompt_library: PromptLibrary | None = None


def get_prompt_library(force_reload: bool = False) -> PromptLibrary:
    """Get singleton prompt library instance.

    Args:
        force_reload: Force reload from disk (default: False)

    Returns:
        PromptLibrary instance
    """
    global _prompt_library

    if _prompt_library is None or force_reload:
        _prompt_library = PromptLibrary()

    return _prompt_library
