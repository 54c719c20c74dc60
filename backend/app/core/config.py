from pydantic_settings import BaseSettings
from pydantic import Field
from typing import List, Optional
from pathlib import Path

class Settings(BaseSettings):
    app_name: str = Field(default="Rail Booking API", alias="APP_NAME")
    app_version: str = Field(default="1.0.0", alias="APP_VERSION")
    env: str = Field(default="development", alias="ENV")
    api_prefix: str = Field(default="/api/v1", alias="API_PREFIX")
    secret_key: str = Field(default="devsecret", alias="SECRET_KEY")
    algorithm: str = Field(default="HS256", alias="ALGORITHM")
    session_expire_minutes: int = Field(default=120, alias="SESSION_EXPIRE_MINUTES")
    # In-memory SQLite unless a real database is configured
    database_url: str = Field(default="sqlite://", alias="DATABASE_URL")
    # Fare charged for seat classes missing from the fare table
    default_fare: int = Field(default=553, alias="DEFAULT_FARE")
    order_submit_timeout_seconds: float = Field(default=10.0, alias="ORDER_SUBMIT_TIMEOUT_SECONDS")
    train_service_url: Optional[str] = Field(default=None, alias="TRAIN_SERVICE_URL")
    train_service_timeout_seconds: float = Field(default=10.0, alias="TRAIN_SERVICE_TIMEOUT_SECONDS")
    # Raw env value (string), parsed to a list via property to avoid JSON decoding errors
    cors_origins_raw: Optional[str] = Field(default=None, alias="CORS_ORIGINS", description="Comma or space separated list of allowed CORS origins")

    class Config:
        # Load env from backend/.env regardless of CWD
        env_file = str(Path(__file__).resolve().parents[2] / ".env")
        case_sensitive = False

    @property
    def is_development(self) -> bool:
        return self.env.lower() in {"dev", "development"}

    def _parse_list(self, v: Optional[str]) -> List[str]:
        if v is None:
            return []
        s = v.strip()
        if not s:
            return []
        if s.startswith("[") and s.endswith("]"):
            try:
                import json
                loaded = json.loads(s)
                if isinstance(loaded, list):
                    return [str(e).strip() for e in loaded if str(e).strip()]
            except ValueError:
                pass
        return [e.strip() for e in s.replace(" ", ",").split(",") if e.strip()]

    @property
    def cors_origins(self) -> List[str]:
        items = self._parse_list(self.cors_origins_raw)
        # Fallback dev defaults if none provided (Vite dev server)
        if not items:
            return ["http://localhost:5173", "http://127.0.0.1:5173"]
        return items

settings = Settings()  # type: ignore
