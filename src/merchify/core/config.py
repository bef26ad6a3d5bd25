"""Configuration management for the Merchify SDK.

This module provides centralized configuration management using Pydantic Settings.
All configuration is loaded from environment variables with the MERCHIFY_ prefix,
allowing the SDK to be pointed at a different environment without code changes.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (MERCHIFY_* prefix)
2. .env file in the working directory
3. Default values defined in MerchifySettings

Example .env file:
    MERCHIFY_ENVIRONMENT=development
    MERCHIFY_MEMORY_CACHE_SIZE=500
    MERCHIFY_STORAGE_CACHE_SIZE=100
    MERCHIFY_CACHE_DIR=~/.cache/merchify

Endpoint Selection
------------------
The SDK talks to three services: the general API, the mockup renderer and
the URL signer. Each client may pass explicit URLs for any of them. Any URL
not supplied falls back to the ``API_URLS`` table entry selected by
``MerchifySettings.environment``.

Usage Example
-------------
    from merchify.core.config import settings, resolve_endpoints

    endpoints = resolve_endpoints(environment=settings.environment)
    print(endpoints.mockup_api_url)
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

Environment = Literal["production", "development"]

API_URLS: dict[str, dict[str, str]] = {
    "production": {
        "api_url": "https://api.merchify.io",
        "mockup_api_url": "https://api.merchify.io/v1/mockups/",
        "url_signer_endpoint": "https://api.merchify.io/v1/url-signer/sign",
    },
    "development": {
        "api_url": "http://localhost:8080",
        "mockup_api_url": "http://localhost:8089",
        "url_signer_endpoint": "http://localhost:8102/sign",
    },
}

RATE_LIMITS = {
    "requests_per_minute": 450,
    "requests_per_second": 20,
}

CACHE_CONFIG = {
    "storage_cache_size": 100,  # durable mirror size
    "memory_cache_size": 500,  # in-memory cache size
    "signature_cache_key": "merchify_signature_cache",
}


class MerchifySettings(BaseSettings):
    """Main configuration for the Merchify SDK.

    Values are loaded from environment variables with the MERCHIFY_ prefix,
    with fallback to the defaults defined here.

    Attributes
    ----------
    Environment:
        environment : Literal["production", "development"]
            Selects the endpoint table used when a client does not pass
            explicit service URLs.

    Signature Cache:
        memory_cache_size : int
            Maximum number of signatures kept in memory per client
        storage_cache_size : int
            Maximum number of signatures mirrored to the durable store
        signature_cache_key : str
            Name of the durable slot holding persisted signatures
        persist_signatures : bool
            Disable to keep the signature cache memory-only
        cache_dir : Path
            Directory used by the file-backed durable store

    Rate Observation:
        requests_per_minute : int
            Advisory per-minute request limit reported to callers
        requests_per_second : int
            Advisory per-second request limit reported to callers

    Notes
    -----
    - Nothing is created on disk at load time; the durable store creates
      ``cache_dir`` lazily and falls back to memory-only if it cannot.
    - The rate limits are informational only. The SDK never blocks.

    Examples
    --------
        >>> custom = MerchifySettings(environment="development", persist_signatures=False)
        >>> custom.memory_cache_size
        500
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="MERCHIFY_",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Environment = Field(
        default="production",
        description="Endpoint table to use when URLs are not supplied explicitly",
    )

    # Signature cache
    memory_cache_size: int = Field(
        default=CACHE_CONFIG["memory_cache_size"],
        description="Maximum number of in-memory cached signatures",
        ge=1,
    )
    storage_cache_size: int = Field(
        default=CACHE_CONFIG["storage_cache_size"],
        description="Maximum number of signatures mirrored to the durable store",
        ge=0,
    )
    signature_cache_key: str = Field(
        default=CACHE_CONFIG["signature_cache_key"],
        description="Durable slot name for persisted signatures",
        min_length=1,
    )
    persist_signatures: bool = Field(
        default=True,
        description="Mirror recent signatures to a durable store across sessions",
    )
    cache_dir: Path = Field(
        default=Path.home() / ".cache" / "merchify",
        description="Directory for the file-backed signature store",
    )

    # Advisory rate limits
    requests_per_minute: int = Field(default=RATE_LIMITS["requests_per_minute"], ge=1)
    requests_per_second: int = Field(default=RATE_LIMITS["requests_per_second"], ge=1)


@dataclass(frozen=True)
class Endpoints:
    """Resolved service URLs for a single client."""

    api_url: str
    mockup_api_url: str
    url_signer_endpoint: str


def resolve_endpoints(
    *,
    environment: Environment = "production",
    api_url: str | None = None,
    mockup_api_url: str | None = None,
    url_signer_endpoint: str | None = None,
) -> Endpoints:
    """Pick service URLs, preferring explicit values over the environment table.

    Args:
        environment: Key into ``API_URLS`` used for any URL not given.
        api_url: Explicit general API base URL.
        mockup_api_url: Explicit mockup renderer base URL.
        url_signer_endpoint: Explicit URL signer endpoint.

    Returns:
        Endpoints with every URL filled in.
    """
    defaults = API_URLS[environment]
    return Endpoints(
        api_url=api_url or defaults["api_url"],
        mockup_api_url=mockup_api_url or defaults["mockup_api_url"],
        url_signer_endpoint=url_signer_endpoint or defaults["url_signer_endpoint"],
    )


# Global settings instance
# Loaded once at import from MERCHIFY_* environment variables and .env.
settings = MerchifySettings()
