import os
from pydantic import BaseModel

class Settings(BaseModel):
    # Basic
    ENV: str = os.getenv("ENV", "dev")
    DEFAULT_REGION: str = os.getenv("DEFAULT_REGION", "India")
    DEFAULT_CURRENCY: str = os.getenv("CURRENCY", "INR")
    DEFAULT_STAGE: str = os.getenv("DEFAULT_STAGE", "Seed")

    # Generative model
    MODEL_PROVIDER: str = os.getenv("MODEL_PROVIDER", "gemini")  # gemini | mock
    GEMINI_API_KEY: str | None = os.getenv("GEMINI_API_KEY")
    GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")

    # Chat
    MAX_MESSAGE_CHARS: int = int(os.getenv("MAX_MESSAGE_CHARS", "2500"))

    # Security
    RATE_LIMIT_RPM: int = int(os.getenv("RATE_LIMIT_RPM", "60"))
    RATE_LIMIT_WINDOW_SECONDS: int = int(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "60"))

    # CORS
    ALLOW_ORIGINS: str = os.getenv("ALLOW_ORIGINS", "*")

    # Rate-limit counters
    USE_REDIS: bool = os.getenv("USE_REDIS", "false").lower() == "true"
    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")

    # Metrics
    PROMETHEUS_ENABLED: bool = os.getenv("PROMETHEUS_ENABLED", "true").lower() == "true"

    def has_model_credential(self) -> bool:
        # The mock model runs offline and needs no key.
        return self.MODEL_PROVIDER == "mock" or bool(self.GEMINI_API_KEY)

settings = Settings()
