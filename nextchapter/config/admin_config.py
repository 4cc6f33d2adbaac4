from typing import Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    ENV: str = "dev"                # "dev" / "staging" / "prod"
    ENABLE_ADMIN: bool = True
    ADMIN_USER_ID : Optional[str] = None  # identity subject allowed into /admin besides role=admin
    SERVICE_NAME : str = "nextchapter"

    class Config:
        env_file = ".env"
        extra="ignore"

admin_config = Settings()
