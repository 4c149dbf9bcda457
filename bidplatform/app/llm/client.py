"""LLM client for proposal generation and review with OpenAI integration.

Security: Reads API key from settings only, never hardcoded.
Provides a deterministic stub when no key is configured (local dev, tests).
"""

import logging
from typing import Protocol

from openai import AsyncOpenAI

from bidplatform.app.config import Settings, get_settings
from bidplatform.app.errors import GenerationFailed
from bidplatform.app.llm.prompts import (
    PROPOSAL_SYSTEM_PROMPT,
    PROPOSAL_USER_TEMPLATE,
    REVIEW_SYSTEM_PROMPT,
    REVIEW_USER_TEMPLATE,
)
from bidplatform.app.utils.metrics import metrics

logger = logging.getLogger(__name__)


class LLMClient(Protocol):
    """Protocol for LLM client implementations."""

    model: str

    async def generate_proposal(self, rfq_text: str) -> str:
        """Generate an HTML technical proposal for an RFQ.

        Args:
            rfq_text: Extracted RFQ text

        Returns:
            Proposal body exactly as returned by the model

        Raises:
            GenerationFailed: If the remote call fails
        """
        ...

    async def review_proposal(self, rfq_text: str, proposal: str) -> str:
        """Review a generated proposal against its RFQ.

        Args:
            rfq_text: Extracted RFQ text
            proposal: Output of generate_proposal

        Returns:
            Review body exactly as returned by the model

        Raises:
            GenerationFailed: If the remote call fails
        """
        ...


def build_proposal_messages(rfq_text: str) -> list[dict[str, str]]:
    """Build the system/user exchange for proposal generation."""
    return [
        {"role": "system", "content": PROPOSAL_SYSTEM_PROMPT},
        {"role": "user", "content": PROPOSAL_USER_TEMPLATE.format(rfq_text=rfq_text)},
    ]


def build_review_messages(rfq_text: str, proposal: str) -> list[dict[str, str]]:
    """Build the system/user exchange for proposal review."""
    return [
        {"role": "system", "content": REVIEW_SYSTEM_PROMPT},
        {
            "role": "user",
            "content": REVIEW_USER_TEMPLATE.format(rfq_text=rfq_text, proposal=proposal),
        },
    ]


class DeterministicStubClient:
    """Deterministic stub client for testing (no API key required)."""

    model = "stub"

    async def generate_proposal(self, rfq_text: str) -> str:
        """Generate deterministic stub proposal."""
        first_line = rfq_text.strip().splitlines()[0] if rfq_text.strip() else "RFQ"
        return (
            "<h1>Technical Proposal</h1>"
            f"<p>This proposal responds to: {first_line}</p>"
            "<h2>Scope of Work</h2>"
            "<ul><li>Placeholder scope item</li></ul>"
            "<p><em>This is a stub response generated without LLM synthesis.</em></p>"
        )

    async def review_proposal(self, rfq_text: str, proposal: str) -> str:
        """Generate deterministic stub review."""
        return (
            "<h1>Proposal Review</h1>"
            f"<p>Reviewed a proposal of {len(proposal)} characters "
            f"against an RFQ of {len(rfq_text)} characters.</p>"
            "<p><em>This is a stub response generated without LLM synthesis.</em></p>"
        )


class OpenAIClient:
    """OpenAI-backed LLM client."""

    def __init__(self, api_key: str, model: str = "gpt-4o", temperature: float = 0.7):
        """Initialize OpenAI client.

        Args:
            api_key: OpenAI API key (read from settings)
            model: Model name used for both generation and review
            temperature: Sampling temperature for every call
        """
        self.client = AsyncOpenAI(api_key=api_key)
        self.model = model
        self.temperature = temperature

    async def generate_proposal(self, rfq_text: str) -> str:
        """Generate proposal using OpenAI API."""
        return await self._complete("proposal", build_proposal_messages(rfq_text))

    async def review_proposal(self, rfq_text: str, proposal: str) -> str:
        """Review proposal using OpenAI API."""
        logger.info("Reviewing technical proposal (%d chars)", len(proposal))
        return await self._complete("review", build_review_messages(rfq_text, proposal))

    async def _complete(self, purpose: str, messages: list[dict[str, str]]) -> str:
        """Run one chat completion; no retry."""
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=messages,  # type: ignore[arg-type]
                temperature=self.temperature,
            )
        except Exception as e:
            metrics.inc_llm_call(purpose, "error")
            logger.error(f"OpenAI {purpose} call failed: {e}")
            raise GenerationFailed(f"Text generation failed during {purpose}") from e

        metrics.inc_llm_call(purpose, "success")
        return response.choices[0].message.content or ""


def get_llm_client(settings: Settings | None = None) -> LLMClient:
    """Factory function to get appropriate LLM client based on config.

    Returns:
        OpenAIClient if API key is configured, DeterministicStubClient otherwise
    """
    settings = settings or get_settings()
    api_key = settings.openai_api_key

    if api_key and api_key.get_secret_value():
        logger.info("Using OpenAI client for proposal generation")
        return OpenAIClient(
            api_key=api_key.get_secret_value(),
            model=settings.openai_model,
            temperature=settings.generation_temperature,
        )

    logger.warning("No OpenAI API key configured, using deterministic stub client")
    return DeterministicStubClient()
