from pydantic import AnyUrl, BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from typing import Literal


class ClientConfig(BaseModel):
    """A configured caller: its identifier and granted scopes."""
    client_id: str
    scopes: list[str] = Field(default_factory=list)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    SERVICE_PORT: int = 8080
    LOG_JSON: bool = True
    MAX_PAYLOAD_SIZE: int = 65536
    # Backend adapter selection: "memory" or "redis"
    STORE_ADAPTER: Literal["memory", "redis"] = "memory"
    REDIS_URL: AnyUrl | None = None
    REDIS_KEY_PREFIX: str = "secretstore:secret:"
    # Fernet key; a throwaway key is generated when empty
    ENCRYPTION_KEY: str = ""
    # Expiry sweeper; 0 disables the periodic task
    SWEEP_INTERVAL_SECONDS: float = 3600.0
    # Sweep cutoff is now + delay (negative keeps expired rows around longer)
    EXPIRATION_DELAY_SECONDS: float = 0.0
    # JSON mapping of API key -> {"client_id": ..., "scopes": [...]}
    API_CLIENTS: dict[str, ClientConfig] = Field(default_factory=dict)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
