"""Application configuration loaded from environment variables."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from cosmos_demos.errors import ConfigurationError

logger = logging.getLogger(__name__)

APPSETTINGS_FILE = "appsettings.json"


def _env(key: str, default: str = "") -> str:
    return os.environ.get(key, default)


@dataclass(frozen=True)
class CosmosConfig:
    endpoint: str = field(default_factory=lambda: _env("COSMOS_ENDPOINT"))
    key: str = field(default_factory=lambda: _env("COSMOS_KEY"))


@dataclass(frozen=True)
class AppConfig:
    log_level: str = field(default_factory=lambda: _env("LOG_LEVEL", "INFO"))


@dataclass(frozen=True)
class Settings:
    cosmos: CosmosConfig = field(default_factory=CosmosConfig)
    app: AppConfig = field(default_factory=AppConfig)


def _read_appsettings(path: Path) -> dict[str, str]:
    """Return the ``cosmosDb`` section of an appsettings.json file."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"{path} is not valid JSON: {exc}") from exc
    section = data.get("cosmosDb", {}) if isinstance(data, dict) else {}
    if not isinstance(section, dict):
        raise ConfigurationError(f"{path}: 'cosmosDb' must be an object")
    return {k: v for k, v in section.items() if isinstance(v, str)}


def load_settings(
    env_file: str | Path | None = None,
    appsettings: str | Path | None = None,
) -> Settings:
    """Build settings from ``.env``, the process environment and appsettings.json.

    Real environment variables win over ``.env`` entries. Endpoint and key
    still missing afterwards are taken from the ``cosmosDb`` section of
    appsettings.json when that file exists.
    """
    load_dotenv(env_file or find_dotenv(usecwd=True), override=False)
    settings = Settings()

    appsettings_path = Path(appsettings) if appsettings else Path.cwd() / APPSETTINGS_FILE
    if appsettings_path.is_file() and not (settings.cosmos.endpoint and settings.cosmos.key):
        section = _read_appsettings(appsettings_path)
        logger.debug("Reading Cosmos settings from %s", appsettings_path)
        settings = replace(
            settings,
            cosmos=replace(
                settings.cosmos,
                endpoint=settings.cosmos.endpoint or section.get("endpoint", ""),
                key=settings.cosmos.key or section.get("key", ""),
            ),
        )

    required = {
        "COSMOS_ENDPOINT": settings.cosmos.endpoint,
        "COSMOS_KEY": settings.cosmos.key,
    }
    missing = [name for name, value in required.items() if not value]
    if missing:
        raise ConfigurationError(
            f"{', '.join(missing)} not set: add to .env or {APPSETTINGS_FILE}"
        )
    return settings
