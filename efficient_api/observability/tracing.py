from __future__ import annotations

from ddtrace import config as dd_config

from efficient_api.core.config import get_settings


def setup_tracing() -> None:
    settings = get_settings()
    dd_config.service = settings.dd_service
    dd_config.env = settings.dd_env
    dd_config.version = settings.dd_version
    dd_config.fastapi["service_name"] = settings.dd_service
    dd_config.sqlalchemy["service"] = f"{settings.dd_service}-postgres"
