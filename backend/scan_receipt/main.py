import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from scan_receipt.config import settings
from scan_receipt.models.receipt import ErrorResponse

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)

app = FastAPI(
    title="ScanReceipt API",
    description="Extract amount, date and merchant from Italian receipt photos",
    version="0.1.0",
    debug=settings.DEBUG
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_methods=["POST", "OPTIONS"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)


@app.exception_handler(RequestValidationError)
async def invalid_request_handler(request: Request, exc: RequestValidationError):
    # Malformed or non-JSON bodies get the same envelope as a missing image
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(error="Invalid request body", code="invalid_request").model_dump()
    )


@app.get("/")
async def root():
    return {
        "message": "ScanReceipt API",
        "version": "0.1.0",
        "status": "running"
    }

@app.get("/health")
async def health_check():
    return {"status": "healthy"}

# Import routers
from scan_receipt.routers import scan

# Include routers
app.include_router(scan.router)
