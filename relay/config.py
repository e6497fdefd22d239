# relay/config.py
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Network (Render and friends inject PORT)
    HOST: str = "0.0.0.0"
    PORT: int = 10000

    # Handshake origin allow-list
    CORS_ORIGINS: List[str] = Field(default_factory=lambda: [
        "https://www.degenswim.tv",
        "https://nextjs-degen.vercel.app",
        "http://localhost:3000",  # local development
    ])
    ALLOW_MISSING_ORIGIN: bool = True   # non-browser clients send no Origin

    # Duplicate suppression horizon
    DEDUP_TTL_SECONDS: float = 10.0

    # WebSocket
    WS_PING_INTERVAL: int = 20   # seconds
    WS_PING_TIMEOUT: int = 20    # seconds
    WS_MAX_FRAME_BYTES: int = 2**20

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
    )

    def allowed_origins(self) -> List[Optional[str]]:
        origins: List[Optional[str]] = list(self.CORS_ORIGINS)
        if self.ALLOW_MISSING_ORIGIN:
            origins.append(None)
        return origins


settings = Settings()
