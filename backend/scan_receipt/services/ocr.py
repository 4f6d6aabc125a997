"""
OCR service for extracting text from receipt images via Google Cloud Vision.
"""

import re
import logging
from typing import Optional, List

import requests

from scan_receipt.config import settings
from scan_receipt.services.credentials import get_token_provider

logger = logging.getLogger(__name__)

_DATA_URL_PREFIX = re.compile(r'^data:image/\w+;base64,')


class OCRServiceError(Exception):
    """Vision API call failed or returned an error for the image."""


class NoTextDetectedError(OCRServiceError):
    """Vision API found no text in the image."""


def strip_data_url_prefix(image: str) -> str:
    """Remove a leading data:image/<type>;base64, prefix if present."""
    return _DATA_URL_PREFIX.sub('', image)


class VisionOCRService:
    """Service for extracting text from receipt images."""

    def __init__(
        self,
        token_provider,
        session: Optional[requests.Session] = None,
        api_url: Optional[str] = None,
        language_hints: Optional[List[str]] = None,
        timeout: Optional[float] = None
    ):
        """
        Args:
            token_provider: Object with get_access_token() returning a bearer token
            session: Optional requests session (default: a new Session)
            api_url: Vision annotate endpoint override
            language_hints: OCR language hints (default from settings)
            timeout: Request timeout in seconds
        """
        self.token_provider = token_provider
        self.session = session or requests.Session()
        self.api_url = api_url or settings.GOOGLE_VISION_API_URL
        self.language_hints = language_hints or list(settings.OCR_LANGUAGE_HINTS)
        self.timeout = timeout or settings.OCR_REQUEST_TIMEOUT

    def build_request(self, image_base64: str) -> dict:
        """Build the images:annotate body for a single image."""
        return {
            "requests": [
                {
                    "image": {"content": image_base64},
                    "features": [
                        {"type": "TEXT_DETECTION", "maxResults": 1},
                    ],
                    "imageContext": {
                        "languageHints": self.language_hints,
                    },
                },
            ],
        }

    def extract_text(self, image_base64: str) -> str:
        """
        Extract text from a base64-encoded image.

        Args:
            image_base64: Base64 image content, without data URL prefix

        Returns:
            Full recognized text as a single string

        Raises:
            CredentialsError: If no bearer token can be obtained
            OCRServiceError: If the Vision API call fails
            NoTextDetectedError: If no text was found in the image
        """
        access_token = self.token_provider.get_access_token()

        try:
            response = self.session.post(
                self.api_url,
                json=self.build_request(image_base64),
                headers={
                    "Authorization": f"Bearer {access_token}",
                    "Content-Type": "application/json",
                },
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise OCRServiceError(f"Google Vision API unreachable: {e}") from e

        if not response.ok:
            logger.warning("Vision API returned an error", extra={
                "status_code": response.status_code
            })
            raise OCRServiceError(f"Google Vision API error: {response.text}")

        try:
            data = response.json()
        except ValueError as e:
            raise OCRServiceError("Google Vision API returned invalid JSON") from e

        responses = data.get("responses") or [{}]
        image_response = responses[0] or {}

        error = image_response.get("error")
        if error:
            message = error.get("message", "unknown error") if isinstance(error, dict) else str(error)
            raise OCRServiceError(f"Google Vision API error: {message}")

        annotations = image_response.get("textAnnotations")
        if not annotations:
            raise NoTextDetectedError("No text detected in image")

        text = annotations[0].get("description") or ""
        logger.debug("Vision text extracted", extra={"text_length": len(text)})

        return text


def get_ocr_service() -> VisionOCRService:
    """Create the OCR service for the configured service account."""
    return VisionOCRService(get_token_provider(settings.GOOGLE_SERVICE_ACCOUNT_JSON))
