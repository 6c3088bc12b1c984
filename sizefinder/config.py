import os
from pydantic import BaseModel


class Settings(BaseModel):
    api_key: str = os.getenv("API_KEY", "change-me")

    storage_dir: str = os.getenv("STORAGE_DIR", os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "storage")))

    # Reference data: unset means the built-in charts and guides
    reference_path: str | None = os.getenv("SIZEFINDER_REFERENCE_PATH")
    default_unit: str = os.getenv("SIZEFINDER_DEFAULT_UNIT", "cm")
    include_inseam: bool = os.getenv("SIZEFINDER_INCLUDE_INSEAM", "1") == "1"

    # Session recorder: none | file | webhook
    recorder: str = os.getenv("SIZEFINDER_RECORDER", "none")
    recorder_url: str | None = os.getenv("SIZEFINDER_RECORDER_URL")

    # JWT
    jwt_secret: str = os.getenv("JWT_SECRET", "dev-secret")
    jwt_audience: str | None = os.getenv("JWT_AUDIENCE")
    jwt_issuer: str | None = os.getenv("JWT_ISSUER")
    jwt_ttl_seconds: int = int(os.getenv("JWT_TTL_SECONDS", "3600"))

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_json: bool = os.getenv("LOG_JSON", "0") == "1"


settings = Settings()
