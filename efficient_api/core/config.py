from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL


class Settings(BaseSettings):
    model_config = SettingsConfigDict()

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Full URL override; when unset the URL is assembled from the DB_* parts.
    database_url: str | None = Field(default=None, alias="DATABASE_URL")
    db_driver: str = Field(default="postgresql+psycopg2", alias="DB_DRIVER")
    db_user: str = Field(default="postgres", alias="DB_USER")
    db_password: str = Field(default="postgres", alias="DB_PASSWORD")
    db_host: str = Field(default="postgres", alias="DB_HOST")
    db_port: int = Field(default=5432, alias="DB_PORT")
    db_name: str = Field(default="messages", alias="DB_NAME")

    dd_service: str = Field(default="efficient-message-api", alias="DD_SERVICE")
    dd_env: str = Field(default="local", alias="DD_ENV")
    dd_version: str = Field(default="0.1.0", alias="DD_VERSION")
    dd_agent_host: str | None = Field(default=None, alias="DD_AGENT_HOST")
    dd_dogstatsd_port: int = Field(default=8125, alias="DD_DOGSTATSD_PORT")

    metrics_enabled: bool = Field(default=True, alias="METRICS_ENABLED")
    stats_enabled: bool = Field(default=True, alias="STATS_ENABLED")

    def sqlalchemy_url(self) -> str:
        if self.database_url:
            return self.database_url
        url = URL.create(
            self.db_driver,
            username=self.db_user,
            password=self.db_password,
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
        )
        return url.render_as_string(hide_password=False)


@lru_cache
def get_settings() -> Settings:
    return Settings()
