"""
Fine Extraction Service.

Sends a photographed fine notice to a vision-capable completion model and
recovers the structured fine fields from its reply.
"""

import base64
import logging

from services.completion import CompletionClient
from services.recovery import RecoveryResult, recover_fine_data

logger = logging.getLogger(__name__)


FINE_EXTRACTION_PROMPT = """Extract parking fine information from this image. Return JSON with:
- fineAmount: numeric value (e.g., "65.00")
- infractionDate: YYYY-MM-DD format
- locationAddress: parking location
- carRegistration: vehicle plate
- fineReferenceNumber: ticket/reference number
- allegedContravention: contravention code and description, if shown

Use an empty string for anything not visible on the notice.
Return ONLY valid JSON object, no markdown, no code blocks."""

DEFAULT_MIME_TYPE = "image/jpeg"


def image_to_data_url(image_bytes: bytes, mime_type: str | None) -> str:
    """Encode image bytes as a base64 data URL."""
    encoded = base64.b64encode(image_bytes).decode("ascii")
    return f"data:{mime_type or DEFAULT_MIME_TYPE};base64,{encoded}"


class FineExtractionService:
    """Service for reading fine notices from images."""

    def __init__(
        self,
        client: CompletionClient,
        model: str | None = None,
        image_detail: str = "auto",
    ):
        self.client = client
        self.model = model
        self.image_detail = image_detail

    async def extract(self, image_bytes: bytes, mime_type: str | None) -> RecoveryResult:
        """
        Extract fine fields from an image.

        Args:
            image_bytes: Raw uploaded image
            mime_type: Declared MIME type of the upload

        Returns:
            RecoveryResult with every ExtractedFineData key populated

        Raises:
            UpstreamCallError: If the completion call fails
            RecoveryError: If the reply holds no JSON object
        """
        data_url = image_to_data_url(image_bytes, mime_type)
        logger.info(f"Extracting fine data: base64 length={len(data_url)}")

        messages = [
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": FINE_EXTRACTION_PROMPT},
                    {
                        "type": "image_url",
                        "image_url": {"url": data_url, "detail": self.image_detail},
                    },
                ],
            }
        ]
        response_text = await self.client.complete(
            messages,
            model=self.model,
            response_format={"type": "json_object"},
        )

        result = recover_fine_data(response_text)
        logger.info(f"Fine extraction recovery status: {result.status.value}")
        return result
