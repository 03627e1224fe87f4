from __future__ import annotations

import os
from dataclasses import dataclass


def _get_bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    api_base_url: str
    default_city: str
    request_timeout_seconds: int
    fetch_limit: int
    collection_cap: int
    search_cap: int
    collections_config_path: str
    share_base_url: str
    log_level: str
    verbose_fetch_logs: bool


def load_settings() -> Settings:
    return Settings(
        api_base_url=os.getenv("LUMINA_API_BASE", "http://localhost:3000").strip(),
        default_city=os.getenv("DEFAULT_CITY", "Manhattan"),
        request_timeout_seconds=int(os.getenv("REQUEST_TIMEOUT_SECONDS", "15")),
        fetch_limit=int(os.getenv("FETCH_LIMIT", "50")),
        collection_cap=int(os.getenv("COLLECTION_CAP", "15")),
        search_cap=int(os.getenv("SEARCH_CAP", "20")),
        collections_config_path=os.getenv("COLLECTIONS_CONFIG_PATH", "config/collections.yaml"),
        share_base_url=os.getenv("SHARE_BASE_URL", "https://lumina.app/plan"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        verbose_fetch_logs=_get_bool_env("VERBOSE_FETCH_LOGS", True),
    )


def validate_settings(settings: Settings) -> list[str]:
    errors: list[str] = []
    if not settings.api_base_url:
        errors.append("LUMINA_API_BASE is required")
    elif "://" not in settings.api_base_url:
        errors.append("LUMINA_API_BASE must include scheme, e.g. http://")
    if not settings.default_city.strip():
        errors.append("DEFAULT_CITY is required")
    if settings.request_timeout_seconds <= 0:
        errors.append("REQUEST_TIMEOUT_SECONDS must be > 0")
    if settings.fetch_limit <= 0:
        errors.append("FETCH_LIMIT must be > 0")
    if settings.collection_cap <= 0:
        errors.append("COLLECTION_CAP must be > 0")
    if settings.search_cap <= 0:
        errors.append("SEARCH_CAP must be > 0")
    if not settings.collections_config_path.strip():
        errors.append("COLLECTIONS_CONFIG_PATH is required")
    if "://" not in settings.share_base_url:
        errors.append("SHARE_BASE_URL must include scheme, e.g. https://")
    return errors
