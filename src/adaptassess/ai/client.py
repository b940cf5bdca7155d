"""
Unified AI Client with Provider Fallback

Attempts providers in order: Anthropic → Grok → None (caller decides)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)


class AIClient:
    """Unified AI client that tries multiple providers in order."""

    GROK_BASE_URL = "https://api.x.ai/v1"
    GROK_MODEL = "grok-3"

    def __init__(self, *, anthropic_api_key: str | None = None, grok_api_key: str | None = None):
        """Initialize AI client with available API keys.

        Args:
            anthropic_api_key: Anthropic Claude API key (priority 1)
            grok_api_key: xAI Grok API key (priority 2)
        """
        self.anthropic_api_key = anthropic_api_key
        self.grok_api_key = grok_api_key

    @property
    def is_configured(self) -> bool:
        """True if at least one provider key is available."""
        return bool(self.anthropic_api_key or self.grok_api_key)

    async def generate_completion(
        self,
        *,
        model: str,
        system: str,
        messages: Sequence[dict[str, str]],
        max_tokens: int = 2048,
        temperature: float = 0.7,
    ) -> str | None:
        """Generate completion using available AI provider.

        Tries providers in order:
        1. Anthropic Claude API (if key available)
        2. xAI Grok API (if key available)
        3. Returns None

        Args:
            model: Model identifier (Anthropic model; Grok uses its own)
            system: System prompt
            messages: Conversation messages
            max_tokens: Maximum response tokens
            temperature: Sampling temperature

        Returns:
            Generated text response, or None if all providers failed
        """
        if self.anthropic_api_key:
            result = await self._try_anthropic(
                model=model,
                system=system,
                messages=messages,
                max_tokens=max_tokens,
                temperature=temperature,
            )
            if result is not None:
                logger.info("AI completion successful via Anthropic")
                return result

        if self.grok_api_key:
            result = await self._try_grok(
                system=system,
                messages=messages,
                max_tokens=max_tokens,
                temperature=temperature,
            )
            if result is not None:
                logger.info("AI completion successful via Grok (fallback)")
                return result

        logger.warning("All AI providers failed or unavailable")
        return None

    async def _try_anthropic(
        self,
        *,
        model: str,
        system: str,
        messages: Sequence[dict[str, str]],
        max_tokens: int,
        temperature: float,
    ) -> str | None:
        """Try Anthropic Claude API.

        Returns:
            Generated text or None on error
        """
        try:
            from anthropic import AsyncAnthropic

            client = AsyncAnthropic(api_key=self.anthropic_api_key)

            response = await client.messages.create(
                model=model,
                max_tokens=max_tokens,
                temperature=temperature,
                system=system,
                messages=list(messages),  # type: ignore[arg-type]
            )

            if response.content and len(response.content) > 0:
                content_block = response.content[0]
                if hasattr(content_block, "text"):
                    return content_block.text

            logger.warning("Anthropic response had no text content")
            return None

        except Exception as e:
            logger.warning(f"Anthropic API error: {e}")
            return None

    async def _try_grok(
        self,
        *,
        system: str,
        messages: Sequence[dict[str, str]],
        max_tokens: int,
        temperature: float,
    ) -> str | None:
        """Try xAI Grok API (OpenAI-compatible).

        Returns:
            Generated text or None on error
        """
        try:
            from openai import AsyncOpenAI

            client = AsyncOpenAI(api_key=self.grok_api_key, base_url=self.GROK_BASE_URL)

            openai_messages: list[dict[str, Any]] = [{"role": "system", "content": system}]
            openai_messages.extend(messages)

            response = await client.chat.completions.create(
                model=self.GROK_MODEL,
                messages=openai_messages,  # type: ignore[arg-type]
                max_tokens=max_tokens,
                temperature=temperature,
                response_format={"type": "json_object"},
            )

            if response.choices and len(response.choices) > 0:
                return response.choices[0].message.content

            logger.warning("Grok response had no content")
            return None

        except Exception as e:
            logger.warning(f"Grok API error: {e}")
            return None


def get_ai_client() -> AIClient:
    """Get configured AI client instance.

    Returns:
        AIClient with available API keys from settings
    """
    from adaptassess.config import settings

    return AIClient(
        anthropic_api_key=settings.ANTHROPIC_API_KEY or None,
        grok_api_key=settings.GROK_API_KEY or None,
    )
