from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


class Settings(BaseSettings):
    # Article fetching
    fetch_timeout: int = 10
    fetch_retries: int = 2
    user_agent: str = DEFAULT_USER_AGENT

    # Pause between consecutive article requests
    article_delay_seconds: float = 0.5

    # Output of the extraction stage
    output_file: str = "news_today_full.json"

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )
