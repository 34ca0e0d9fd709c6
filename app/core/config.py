from pydantic_settings import BaseSettings
from typing import Optional

class Settings(BaseSettings):
    # Database
    DATABASE_URL: Optional[str] = None
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_USER: str = "volunteer_hub"
    DB_PASSWORD: str = "volunteer_hub_password"
    DB_NAME: str = "volunteer_hub_db"
    SQL_ECHO: bool = False

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return f"postgresql://{self.DB_USER}:{self.DB_PASSWORD}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

    # Logging
    LOG_LEVEL: str = "INFO"

    # URLs
    FRONTEND_URL: str = "http://localhost:3000"

    # Reporting
    REPORT_MAX_CONCURRENT_READS: int = 8  # Worker threads for per-entity sub-reads
    REPORT_SUB_READ_TIMEOUT_SECONDS: Optional[float] = None  # None = wait for the store

    class Config:
        env_file = ".env"
        extra = "ignore"  # Allow extra fields in .env file

settings = Settings()
