from functools import lru_cache
from typing import List, Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")
    APP_NAME: str = "Wardrobe Assistant API"
    APP_ENV: str = "dev"
    API_PREFIX: str = ""
    CORS_ORIGINS: str = "*"
    LOG_LEVEL: str = "INFO"
    # Hosted data/auth platform
    REMOTE_BACKEND: Literal["supabase", "memory"] = "supabase"
    SUPABASE_URL: str = ""
    SUPABASE_KEY: str = ""
    SUPABASE_SERVICE_ROLE_KEY: str = ""
    SUPABASE_TIMEOUT_S: float = 10.0
    # Admin header secret; falls back to the service-role key
    ADMIN_SECRET: Optional[str] = None
    # Profiles
    USERNAME_MAX_ATTEMPTS: int = 50
    # Creation generation
    GENERATION_PROVIDER: str = "mock"
    GENERATION_COUNT: int = 3
    GENERATION_ITEMS_PER_CREATION: int = 3

    @property
    def cors_origin_list(self) -> List[str]:
        val = self.CORS_ORIGINS
        if not val: return []
        if val == "*": return ["*"]
        return [v.strip() for v in val.split(",")]

    @property
    def admin_secret(self) -> str:
        return self.ADMIN_SECRET if self.ADMIN_SECRET is not None else self.SUPABASE_SERVICE_ROLE_KEY


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
