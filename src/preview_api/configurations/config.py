import os
from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic_settings import (
    BaseSettings,
    GoogleSecretManagerSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

env_name = os.getenv("ENV", "dev")
load_dotenv("config/.env", override=True)
load_dotenv(f"config/.env.{env_name}", override=True)


class Settings(BaseSettings):
    env: str = "dev"
    gcp_project_id: Optional[str] = None

    # Origin the frontend is served from, used for embed origin/parent params
    public_origin: str = "http://localhost:3000"

    youtube_api_key: Optional[str] = None
    x_bearer_token: Optional[str] = None

    rate_limit_requests: int = 10
    rate_limit_window_seconds: float = 60.0

    preview_cache_ttl_seconds: float = 300.0
    platform_cache_ttl_seconds: float = 1800.0
    preview_cache_size: int = 2048
    platform_cache_size: int = 4096

    cache_backend: Literal["memory", "redis"] = "memory"
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_password: Optional[str] = None

    api_timeout_seconds: float = 8.0
    oembed_timeout_seconds: float = 5.0
    scrape_timeout_seconds: float = 10.0

    bot_user_agent: str = "Mozilla/5.0 (compatible; LinkPreviewBot/1.0)"
    browser_user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
    )

    batch_max_urls: int = 5

    # pages are cut off here before parsing, meta tags live in the head anyway
    max_html_bytes: int = 2_000_000

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        extra="allow",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        project_id = os.getenv("GCP_PROJECT_ID")
        if not project_id:
            return (
                init_settings,
                env_settings,
                dotenv_settings,
                file_secret_settings,
            )

        gcp_settings = GoogleSecretManagerSettingsSource(
            settings_cls,
            project_id=project_id,
        )
        # Priority order: init -> env -> dotenv -> gcp_secrets -> file_secrets
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            gcp_settings,
            file_secret_settings,
        )


settings = Settings()
