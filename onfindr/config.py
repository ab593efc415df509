from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    PORT: int = 3000
    DB_PATH: str = "/data/onfindr.db"
    LOG_LEVEL: str = "info"
    INCLUDE_DEBUG_DETAIL: bool = False


settings = Settings()
