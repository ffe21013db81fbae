from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # CORS
    cors_origins: list[str] = ["http://localhost:5173"]

    # Google Address Validation API
    api_key: str | None = None
    api_base: str = "https://addressvalidation.googleapis.com/v1"
    request_timeout: float = 10.0

    # Redis
    redis_url: str = "redis://localhost:6379"

    # Cache
    cache_enabled: bool = True
    cache_ttl_validation: int = Field(86400, ge=0)  # 24 hours

    model_config = {"env_prefix": "ADDRESS_VALIDATION_"}


settings = Settings()
