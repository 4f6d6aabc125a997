"""
Scan API router: receipt image in, extracted fields out.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse
import logging

from scan_receipt.config import settings
from scan_receipt.models.receipt import ScanRequest, ScanResult, ErrorResponse
from scan_receipt.services.credentials import CredentialsError
from scan_receipt.services.ocr import (
    OCRServiceError,
    NoTextDetectedError,
    get_ocr_service,
    strip_data_url_prefix,
)
from scan_receipt.services.parser import ReceiptParser

router = APIRouter(prefix="/scan-receipt", tags=["scan"])
logger = logging.getLogger(__name__)


def error_response(status_code: int, error: str, code: str) -> JSONResponse:
    """Build the {error, code} envelope."""
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error, code=code).model_dump()
    )


@router.post("", response_model=ScanResult)
def scan_receipt(request: ScanRequest):
    """
    Scan a receipt image and extract amount, date and merchant.

    This endpoint:
    1. Accepts a base64 image (optionally as a data URL)
    2. Runs Google Vision text detection with an Italian language hint
    3. Parses the recognized text
    4. Returns the extracted fields with a confidence score

    Args:
        request: Body with the image payload

    Returns:
        ScanResult, or an {error, code} envelope on failure
    """
    if not settings.GOOGLE_SERVICE_ACCOUNT_JSON:
        logger.error("Google service account not configured")
        return error_response(500, "Google Service Account not configured", "config_error")

    if not request.image:
        return error_response(400, "No image provided", "invalid_request")

    image_base64 = strip_data_url_prefix(request.image)

    try:
        text = get_ocr_service().extract_text(image_base64)

    except CredentialsError as e:
        logger.error("Service account authentication failed", extra={"reason": str(e)})
        return error_response(502, f"Service account authentication failed: {e}", "auth_error")

    except NoTextDetectedError as e:
        logger.info("No text detected in receipt image")
        return error_response(422, str(e), "no_text_detected")

    except OCRServiceError as e:
        logger.error("OCR failed", extra={"reason": str(e)})
        return error_response(502, f"Failed to process receipt: {e}", "ocr_error")

    except Exception as e:
        logger.error("Error processing receipt", exc_info=True)
        return error_response(500, f"Failed to process receipt: {e}", "processing_error")

    result = ReceiptParser().parse(text)

    logger.info("Receipt scanned", extra={
        "confidence": result.confidence,
        "has_amount": result.amount is not None,
        "has_date": result.date is not None,
        "has_merchant": result.merchant is not None,
    })

    return result
