from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings

DEFAULT_TARGET_HOST = "youtubei.googleapis.com"


class Settings(BaseSettings):
    target_host: str = DEFAULT_TARGET_HOST
    egress_subnet: str | None = None
    egress_range_id: int | None = Field(default=None, ge=0, le=0xFFFF)
    verify_tls: bool = True
    impersonate: str = "chrome"
    host: str = "127.0.0.1"
    port: int = 9000
    log_level: str = "INFO"

    model_config = {"env_prefix": "TUBESCOPE_", "env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
