"""
Configuration loader for providers, translation and storage.

Non-secret defaults live in config/providers.yml; credentials and per-deploy
overrides come from the environment (a local .env is honoured).
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)


class NeoSettings(BaseModel):
    base_url: str = "https://api.neoinsurance.uz"
    login: str = ""
    password: str = ""
    timeout_seconds: float = Field(default=30.0, gt=0)


class EuroasiaSettings(BaseModel):
    base_url: str = ""
    api_key: str = ""
    timeout_seconds: float = Field(default=30.0, gt=0)
    # 0 disables caching: vehicle groups are fetched on every request
    vehicle_group_cache_ttl: int = Field(default=0, ge=0)


class GrossSettings(BaseModel):
    base_url: str = "https://gross.uz"
    login: str = ""
    password: str = ""


class TrustSettings(BaseModel):
    base_url: str = "https://api.online-trust.uz"
    login: str = ""
    password: str = ""
    timeout_seconds: float = Field(default=30.0, gt=0)
    token_ttl_seconds: int = Field(default=3600, gt=0)
    token_refresh_margin_seconds: int = Field(default=300, ge=0)


class TranslationSettings(BaseModel):
    enabled: bool = True
    libretranslate_url: str = "https://libretranslate.com/translate"
    mymemory_url: str = "https://api.mymemory.translated.net/get"
    timeout_seconds: float = Field(default=10.0, gt=0)
    cache_ttl_seconds: int = Field(default=30 * 24 * 3600, gt=0)


class AggregatorSettings(BaseModel):
    providers: List[str] = Field(default_factory=lambda: ["neo", "euroasia", "gross", "trust"])
    adapter_timeout_seconds: float = Field(default=15.0, gt=0)


class Settings(BaseModel):
    neo: NeoSettings = Field(default_factory=NeoSettings)
    euroasia: EuroasiaSettings = Field(default_factory=EuroasiaSettings)
    gross: GrossSettings = Field(default_factory=GrossSettings)
    trust: TrustSettings = Field(default_factory=TrustSettings)
    translation: TranslationSettings = Field(default_factory=TranslationSettings)
    aggregator: AggregatorSettings = Field(default_factory=AggregatorSettings)
    redis_url: Optional[str] = None
    database_url: Optional[str] = None


# env var -> (section, key); section None means a top-level key
_ENV_OVERRIDES = {
    "NEO_BASE_URL": ("neo", "base_url"),
    "NEO_LOGIN": ("neo", "login"),
    "NEO_PASSWORD": ("neo", "password"),
    "EUROASIA_BASE_URL": ("euroasia", "base_url"),
    "EUROASIA_API_KEY": ("euroasia", "api_key"),
    "EUROASIA_VEHICLE_GROUP_CACHE_TTL": ("euroasia", "vehicle_group_cache_ttl"),
    "GROSS_BASE_URL": ("gross", "base_url"),
    "GROSS_LOGIN": ("gross", "login"),
    "GROSS_PASSWORD": ("gross", "password"),
    "TRUST_BASE_URL": ("trust", "base_url"),
    "TRUST_LOGIN": ("trust", "login"),
    "TRUST_PASSWORD": ("trust", "password"),
    "AGGREGATOR_ADAPTER_TIMEOUT": ("aggregator", "adapter_timeout_seconds"),
    "LIBRETRANSLATE_URL": ("translation", "libretranslate_url"),
    "MYMEMORY_URL": ("translation", "mymemory_url"),
    "TRANSLATION_TIMEOUT": ("translation", "timeout_seconds"),
    "REDIS_URL": (None, "redis_url"),
    "DATABASE_URL": (None, "database_url"),
}


def load_settings(config_path: Optional[Path] = None, env: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from config/providers.yml overlaid with environment variables.

    Args:
        config_path: Path to the YAML file. Defaults to config/providers.yml
        env: Mapping used instead of os.environ (tests)

    Raises:
        ValidationError: If the merged configuration doesn't match the schema
    """
    if env is None:
        load_dotenv()
        env = os.environ

    if config_path is None:
        config_path = Path(__file__).parent.parent.parent / "config" / "providers.yml"

    data: Dict[str, Any] = {}
    if config_path.exists():
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    else:
        logger.warning("Provider config not found at %s, using defaults", config_path)

    for env_name, (section, key) in _ENV_OVERRIDES.items():
        value = env.get(env_name)
        if value is None or value == "":
            continue
        if section is None:
            data[key] = value
        else:
            data.setdefault(section, {})[key] = value

    if env.get("INTEGRATIONS_MODE", "").strip().lower() == "mock":
        data.setdefault("translation", {})["enabled"] = False

    try:
        settings = Settings(**data)
    except ValidationError as e:
        logger.error("Provider config validation failed: %s", e)
        raise

    logger.info("Loaded settings for providers: %s", ", ".join(settings.aggregator.providers))
    return settings
