# server/config.py

import os
from dataclasses import dataclass
from dotenv import load_dotenv


# -------------------------------
# Application Settings
# -------------------------------

@dataclass(frozen=True)
class Settings:
    """
    Runtime configuration for the auction server.
    Built once at startup and handed to create_app().
    """
    jwt_secret_key: str
    database_url: str = "sqlite:///./data/auction.db"
    port: int = 5000
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60
    require_auth: bool = False
    log_level: str = "INFO"


def _as_bool(value: str | None) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes", "on")


def load_settings() -> Settings:
    """
    Reads settings from the environment, after loading a local .env file if present.
    """
    load_dotenv()

    secret = os.getenv("JWT_SECRET_KEY")
    if not secret:
        raise RuntimeError("JWT_SECRET_KEY environment variable not set!")

    return Settings(
        jwt_secret_key=secret,
        database_url=os.getenv("DATABASE_URL", Settings.database_url),
        port=int(os.getenv("PORT", Settings.port)),
        access_token_expire_minutes=int(
            os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", Settings.access_token_expire_minutes)
        ),
        require_auth=_as_bool(os.getenv("REQUIRE_AUTH")),
        log_level=os.getenv("LOG_LEVEL", Settings.log_level),
    )
