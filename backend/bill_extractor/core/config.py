from pathlib import Path

from pydantic_settings import BaseSettings
from dotenv import load_dotenv

ENV_FILE = Path(__file__).resolve().parents[3] / ".env"
load_dotenv(dotenv_path=ENV_FILE)

_BACKEND_DIR = Path(__file__).resolve().parents[2]


class Settings(BaseSettings):
    # Provider credentials
    OPENAI_API_KEY: str = ""
    ANTHROPIC_API_KEY: str = ""
    GOOGLE_API_KEY: str = ""
    XAI_API_KEY: str = ""

    # Extraction
    EXTRACTION_DEFAULT_MODEL: str = "gpt-4o"
    EXTRACTION_COMPARE_MODELS: str = "gpt-4o,gpt-4o-mini,o3-mini"
    EXTRACTION_MAX_ATTEMPTS: int = 2
    EXTRACTION_RETRY_DELAY_SECONDS: float = 1.0
    EXTRACTION_MAX_OUTPUT_TOKENS: int = 4000

    # Uploads
    UPLOAD_DIR: str = str(_BACKEND_DIR / "uploads")
    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024

    # HTTP
    LOG_LEVEL: str = "INFO"
    CORS_ALLOW_ORIGINS: str = "*"

    @staticmethod
    def _split_csv(value: str) -> list[str]:
        return [item.strip() for item in (value or "").split(",") if item.strip()]

    @property
    def compare_models(self) -> list[str]:
        return self._split_csv(self.EXTRACTION_COMPARE_MODELS)

    @property
    def cors_allow_origins(self) -> list[str]:
        return self._split_csv(self.CORS_ALLOW_ORIGINS) or ["*"]

    @property
    def upload_dir(self) -> Path:
        return Path(self.UPLOAD_DIR)

    class Config:
        env_file = str(ENV_FILE)
        extra = "ignore"


settings = Settings()
