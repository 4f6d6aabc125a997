from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    # App
    APP_NAME: str = "ScanReceipt"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # CORS
    ALLOWED_ORIGINS: List[str] = ["*"]

    # Google service account (full JSON document)
    GOOGLE_SERVICE_ACCOUNT_JSON: str = ""
    GOOGLE_TOKEN_URL: str = "https://oauth2.googleapis.com/token"

    # OCR
    GOOGLE_VISION_API_URL: str = "https://vision.googleapis.com/v1/images:annotate"
    VISION_SCOPE: str = "https://www.googleapis.com/auth/cloud-vision"
    OCR_LANGUAGE_HINTS: List[str] = ["it"]
    OCR_REQUEST_TIMEOUT: float = 30.0

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
