import os
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

env = os.getenv("APP_ENV", "development")
env_file = f".env.{env}"

class Settings(BaseSettings):
    # async driver URL: sqlite+aiosqlite, mysql+aiomysql or postgresql+asyncpg
    database_url: str = Field(default="sqlite+aiosqlite:///./clinic_db.sqlite3")
    database_echo: bool = False

    # dialect used when rendering CREATE TABLE statements
    ddl_dialect: str = "mysql"

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=env_file,
        env_file_encoding="utf-8",
        extra="ignore",
    )

settings = Settings()
