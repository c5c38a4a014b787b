"""
Appeal Check Service.

Asks the completion model how likely a parking fine appeal is to succeed
and recovers a structured assessment from whatever text comes back.
"""

import logging
from typing import Any

from services.completion import CompletionClient
from services.normalizer import NormalizedAppealInput, normalize_appeal_input
from services.recovery import RecoveryResult, recover_appeal_assessment

logger = logging.getLogger(__name__)


APPEAL_SYSTEM_PROMPT = (
    "You are an expert parking fine appeals advisor. Analyze the provided fine "
    "details and appeal reason, then determine the likelihood of a successful "
    "appeal. Respond with a JSON object containing: appeal_strength "
    "(strong/medium/weak), confidence_score (0-100), and reasoning_summary "
    "(max 2 sentences)."
)

APPEAL_PROMPT = """Please analyze this parking fine appeal case:

FINE DETAILS:
- Contravention Code: {contravention_code}
- Location: {location}
- Date: {date}
- Amount: {amount}
- Reason: {fine_reason}
- Vehicle Registration: {registration}
- Reference: {reference}

APPEAL REASON:
- Category: {category}
- Selected Reason: {selected_reason}
- Additional Details: {additional_details}

Please analyze the strength of this appeal and provide your assessment in the following JSON format:
{{
  "appeal_strength": "strong|medium|weak",
  "confidence_score": 0-100,
  "reasoning_summary": "Brief explanation of your assessment (max 2 sentences)"
}}

Consider factors such as:
- Validity of the appeal reason
- Strength of evidence that could be provided
- Common success rates for similar appeals
- Legal precedents and council policies
- Whether the reason falls under accepted appeal categories

Respond with only the JSON object, no additional text."""


def build_appeal_prompt(normalized: NormalizedAppealInput) -> str:
    """Render the user prompt for a normalized appeal."""
    return APPEAL_PROMPT.format(
        contravention_code=normalized.contravention_code,
        location=normalized.location,
        date=normalized.date,
        amount=normalized.amount,
        fine_reason=normalized.fine_reason,
        registration=normalized.registration,
        reference=normalized.reference,
        category=normalized.category,
        selected_reason=normalized.selected_reason,
        additional_details=normalized.additional_details,
    )


class AppealCheckService:
    """Service for assessing parking fine appeals."""

    def __init__(self, client: CompletionClient, model: str | None = None):
        self.client = client
        self.model = model

    async def assess(self, fine_details: Any, appeal_reason: Any) -> RecoveryResult:
        """
        Assess the strength of an appeal.

        Args:
            fine_details: Raw fineDetails payload
            appeal_reason: Raw appealReason payload (string or object)

        Returns:
            RecoveryResult holding either the model's assessment or the fallback

        Raises:
            UpstreamCallError: If the completion call fails
        """
        normalized = normalize_appeal_input(fine_details, appeal_reason)
        logger.info(
            f"Assessing appeal: category={normalized.category!r} "
            f"contravention={normalized.contravention_code!r}"
        )

        messages = [
            {"role": "system", "content": APPEAL_SYSTEM_PROMPT},
            {"role": "user", "content": build_appeal_prompt(normalized)},
        ]
        response_text = await self.client.complete(messages, model=self.model)

        result = recover_appeal_assessment(response_text)
        logger.info(f"Appeal assessment recovery status: {result.status.value}")
        return result
