# happydb/core/config.py

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    ENV: str = "local"
    LOG_LEVEL: str = "INFO"

    HAPPYDB_BASE_URL: str = (
        "https://raw.githubusercontent.com/megagonlabs/HappyDB/master/happydb/data"
    )
    HAPPY_MOMENTS_FILE: str = "cleaned_hm.csv"
    DEMOGRAPHICS_FILE: str = "demographic.csv"

    FETCH_TIMEOUT: float = 60.0
    FETCH_MAX_RETRIES: int = 3
    FETCH_BACKOFF_FACTOR: float = 0.5

    REPORT_DIR: str = "reports"

    model_config = SettingsConfigDict(
        env_file=None,
        env_file_encoding="utf-8",
    )

    @property
    def HAPPY_MOMENTS_URL(self) -> str:
        return f"{self.HAPPYDB_BASE_URL.rstrip('/')}/{self.HAPPY_MOMENTS_FILE}"

    @property
    def DEMOGRAPHICS_URL(self) -> str:
        return f"{self.HAPPYDB_BASE_URL.rstrip('/')}/{self.DEMOGRAPHICS_FILE}"


settings = Settings()
