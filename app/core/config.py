from typing import List
from pydantic_settings import BaseSettings
from pydantic import Field

class Settings(BaseSettings):
    PROJECT_NAME: str = "Storefront API"
    DATABASE_URL: str = "sqlite:///./store.db"
    DATABASE_ECHO: bool = False
    SQLITE_BUSY_TIMEOUT: float = 30.0

    # "sync" marks orders PAID at checkout, "deferred" leaves them PENDING
    # until a payment notification arrives
    PAYMENT_MODE: str = Field("sync", pattern="^(sync|deferred)$")

    # Pagination
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    CORS_ORIGINS: List[str] = ["*"]

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
