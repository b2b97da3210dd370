from __future__ import annotations

import os


class Settings:
    s3_endpoint_url: str | None = os.getenv("S3_ENDPOINT_URL", "http://localhost:4566") or None
    s3_region: str = os.getenv("S3_REGION", "ap-southeast-1")
    s3_access_key: str | None = os.getenv("S3_ACCESS_KEY")
    s3_secret_key: str | None = os.getenv("S3_SECRET_KEY")
    s3_secure: bool = os.getenv("S3_SECURE", "false").lower() == "true"
    s3_addressing_style: str = os.getenv("S3_ADDRESSING_STYLE", "path")

    upload_source_path: str = os.getenv("UPLOAD_SOURCE_PATH", "./sample.txt")
    upload_pre_delay_seconds: float = float(os.getenv("UPLOAD_PRE_DELAY_SECONDS", "0"))

    log_level: str = os.getenv("LOG_LEVEL", "WARNING")


settings = Settings()
