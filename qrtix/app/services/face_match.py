# qrtix/app/services/face_match.py
"""
Face++ compare client.

Sends the stored reference photo and a freshly captured photo to the
Face++ ``compare`` endpoint and turns the answer into a yes/no decision.

The client fails closed: any error reported by the service, any transport
or parsing failure, and any answer without a confidence value is treated
as "no match". A single attempt is made per call.
"""
import logging
from typing import Any, Dict, Optional

import httpx

from qrtix.app.core.config import Settings

logger = logging.getLogger(__name__)


def interpret_compare_response(result: Dict[str, Any], threshold: float) -> bool:
    """
    Decide a match from a decoded Face++ compare response.

    Args:
        result: JSON object returned by the service.
        threshold: Minimum confidence (exclusive) on a 0-100 scale.

    Returns:
        True only if there is no ``error_message`` and ``confidence`` > threshold.
    """
    if "error_message" in result:
        logger.error(f"❌ Face++ error: {result['error_message']}")
        return False

    confidence = result.get("confidence")
    if isinstance(confidence, (int, float)) and not isinstance(confidence, bool):
        logger.info(f"Face++ confidence: {confidence:.2f}")
        return confidence > threshold

    logger.error("❌ Face++ response carries no confidence value")
    return False


class FaceMatchClient:
    """Async client for the Face++ compare API."""

    def __init__(
            self,
            compare_url: str,
            api_key: str,
            api_secret: str,
            threshold: float = 70.0,
            timeout: float = 10.0,
            http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.compare_url = compare_url
        self.api_key = api_key
        self.api_secret = api_secret
        self.threshold = threshold
        self._client = http_client or httpx.AsyncClient(timeout=timeout)

    @classmethod
    def from_settings(cls, settings: Settings) -> "FaceMatchClient":
        return cls(
            compare_url=settings.FACEPP_COMPARE_URL,
            api_key=settings.FACEPP_API_KEY,
            api_secret=settings.FACEPP_API_SECRET,
            threshold=settings.FACE_MATCH_THRESHOLD,
            timeout=settings.FACE_MATCH_TIMEOUT_SECONDS,
        )

    async def compare(self, reference_photo: str, captured_photo: str) -> bool:
        """
        Compare two base64-encoded photos.

        Args:
            reference_photo: Photo stored at registration.
            captured_photo: Photo captured for this verification.

        Returns:
            True if Face++ considers both photos the same person.
        """
        if not self.api_key or not self.api_secret:
            logger.error("❌ Face++ API key or secret is empty")
            return False

        # (None, value) parts make httpx send a multipart form without files
        form = {
            "api_key": (None, self.api_key),
            "api_secret": (None, self.api_secret),
            "image_base64_1": (None, reference_photo),
            "image_base64_2": (None, captured_photo),
        }

        try:
            response = await self._client.post(self.compare_url, files=form)
        except httpx.HTTPError as e:
            logger.error(f"❌ Could not reach Face++ API: {e!r}")
            return False

        try:
            result = response.json()
        except ValueError as e:
            logger.error(f"❌ Could not parse Face++ response: {e}")
            return False

        if not isinstance(result, dict):
            logger.error("❌ Unexpected Face++ response shape")
            return False

        return interpret_compare_response(result, self.threshold)

    async def aclose(self) -> None:
        await self._client.aclose()
