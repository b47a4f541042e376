"""Configuration management for Showreel."""

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)


def expand_env_vars(value: Any) -> Any:
    """Recursively expand environment variables in strings, dicts, and lists.

    Supports both ${VAR} and $VAR patterns.
    """
    if isinstance(value, str):
        pattern = re.compile(r'\$\{([^}]+)\}')
        result = pattern.sub(lambda m: os.environ.get(m.group(1), ''), value)
        pattern = re.compile(r'\$([A-Za-z_][A-Za-z0-9_]*)')
        result = pattern.sub(lambda m: os.environ.get(m.group(1), ''), result)
        return result
    elif isinstance(value, dict):
        return {k: expand_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [expand_env_vars(item) for item in value]
    else:
        return value


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() == "true"


@dataclass
class WebConfig:
    """Web server configuration."""
    host: str = "0.0.0.0"
    port: int = 8080
    session_secret: str = ""  # random per process if not set


@dataclass
class CatalogConfig:
    """Catalog source + query configuration."""
    source_url: str = "http://localhost:3001/api/videos"
    fetch_timeout: int = 10  # seconds, single attempt
    page_size: int = 12
    fill_missing_views: bool = True  # invent a view count when the source has none
    uploader: str = "AcrossMedia"  # shown for every entry; not in source data


@dataclass
class Config:
    """Main configuration container."""
    web: WebConfig = field(default_factory=WebConfig)
    catalog: CatalogConfig = field(default_factory=CatalogConfig)

    @classmethod
    def from_yaml(cls, path: Path | str) -> "Config":
        """Load configuration from YAML file with environment variable expansion."""
        path = Path(path)
        with open(path, "r") as f:
            raw_config = yaml.safe_load(f) or {}

        expanded_config = expand_env_vars(raw_config)

        web_data = expanded_config.get("web") or {}
        catalog_data = expanded_config.get("catalog") or {}

        return cls(
            web=WebConfig(**web_data),
            catalog=CatalogConfig(**catalog_data),
        )

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration directly from environment variables."""
        return cls(
            web=WebConfig(
                host=os.environ.get("SHOWREEL_WEB_HOST", "0.0.0.0"),
                port=int(os.environ.get("SHOWREEL_WEB_PORT", "8080")),
                session_secret=os.environ.get("SHOWREEL_SESSION_SECRET", ""),
            ),
            catalog=CatalogConfig(
                source_url=os.environ.get("SHOWREEL_SOURCE_URL", "http://localhost:3001/api/videos"),
                fetch_timeout=int(os.environ.get("SHOWREEL_FETCH_TIMEOUT", "10")),
                page_size=int(os.environ.get("SHOWREEL_PAGE_SIZE", "12")),
                fill_missing_views=_env_bool("SHOWREEL_FILL_MISSING_VIEWS", "true"),
                uploader=os.environ.get("SHOWREEL_UPLOADER", "AcrossMedia"),
            ),
        )


def load_config(config_path: str | None = None) -> Config:
    """Load configuration from file or environment.

    Tries in order:
    1. Provided config_path
    2. Default paths: config.yaml, config.yml
    3. Environment variables (fallback)
    """
    config: Config | None = None

    if config_path:
        path = Path(config_path)
        if path.exists():
            config = Config.from_yaml(path)
        else:
            raise FileNotFoundError(f"Config file not found: {config_path}")
    else:
        for default_path in ["config.yaml", "config.yml"]:
            path = Path(default_path)
            if path.exists():
                config = Config.from_yaml(path)
                break

    if config is None:
        config = Config.from_env()

    source_url = config.catalog.source_url
    if not source_url:
        logger.warning("catalog.source_url is empty, the catalog will always be empty")
    elif not source_url.startswith(("http://", "https://")):
        logger.warning("catalog.source_url %r is not an http(s) URL, fetches will fail", source_url)

    if config.catalog.page_size < 1:
        logger.warning("Invalid catalog.page_size %r, falling back to 12", config.catalog.page_size)
        config.catalog.page_size = 12

    return config
