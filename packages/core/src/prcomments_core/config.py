import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: dict = {
    "api_base_url": "https://api.github.com",
    "accept_header": "application/vnd.github.v3+json",
    "user_agent": "comments-fetcher",
    "per_page": 100,  # GitHub's maximum page size
    "max_pages": 10,
    "timeout_seconds": 60.0,  # wall-clock budget for all pages of one fetch
    "cookie_name": "comments_session",
    "cookie_max_age": 60 * 60 * 24 * 7,
    "production": False,
    "session_secret": None,
}

MIN_SECRET_LENGTH = 32
_INSECURE_DEV_SECRET = "insecure-default-for-development-only-change-me"


class ConfigError(ValueError):
    """Raised when the merged configuration is unusable."""


@dataclass(frozen=True)
class AppConfig:
    """Validated, immutable settings shared by the fetcher, store and web app.

    Built once at startup by load_config() and passed explicitly to whatever
    needs it. Nothing reads the environment after that.
    """

    api_base_url: str
    accept_header: str
    user_agent: str
    per_page: int
    max_pages: int
    timeout_seconds: float
    cookie_name: str
    cookie_max_age: int
    production: bool
    session_secret: str

    @classmethod
    def from_dict(cls, values: dict) -> "AppConfig":
        """Build an AppConfig from a merged settings dict, validating every field."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            logger.warning("Ignoring unknown config keys: %s", ", ".join(unknown))

        merged = {**DEFAULT_CONFIG, **{k: v for k, v in values.items() if k in known}}

        try:
            per_page = int(merged["per_page"])
            max_pages = int(merged["max_pages"])
            timeout_seconds = float(merged["timeout_seconds"])
            cookie_max_age = int(merged["cookie_max_age"])
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid numeric config value: {e}") from e

        if not 1 <= per_page <= 100:
            raise ConfigError(f"per_page must be between 1 and 100, got {per_page}")
        if max_pages < 1:
            raise ConfigError(f"max_pages must be at least 1, got {max_pages}")
        if timeout_seconds <= 0:
            raise ConfigError(f"timeout_seconds must be positive, got {timeout_seconds}")
        if cookie_max_age <= 0:
            raise ConfigError(f"cookie_max_age must be positive, got {cookie_max_age}")

        production = bool(merged["production"])
        secret = merged["session_secret"]
        if not secret or len(secret) < MIN_SECRET_LENGTH:
            if production:
                raise ConfigError(
                    f"SESSION_SECRET must be set and at least {MIN_SECRET_LENGTH} characters long in production"
                )
            logger.warning("SESSION_SECRET not set or too short. Using insecure default for development only.")
            secret = _INSECURE_DEV_SECRET

        return cls(
            api_base_url=str(merged["api_base_url"]).rstrip("/"),
            accept_header=str(merged["accept_header"]),
            user_agent=str(merged["user_agent"]),
            per_page=per_page,
            max_pages=max_pages,
            timeout_seconds=timeout_seconds,
            cookie_name=str(merged["cookie_name"]),
            cookie_max_age=cookie_max_age,
            production=production,
            session_secret=secret,
        )


def load_config(config_path: str = ".prcomments.yml", cli_overrides: Optional[dict] = None) -> AppConfig:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .prcomments.yml in the current directory
      3. CLI argument overrides
      4. Environment variables (SESSION_SECRET, PRCOMMENTS_ENV)
    """
    config = dict(DEFAULT_CONFIG)

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        if not isinstance(file_config, dict):
            raise ConfigError(f"{config_path} must contain a mapping, got {type(file_config).__name__}")
        config.update(file_config)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    # Secrets only ever come from the environment, never from the YAML file.
    config["session_secret"] = os.environ.get("SESSION_SECRET")
    if os.environ.get("PRCOMMENTS_ENV") == "production":
        config["production"] = True

    return AppConfig.from_dict(config)
