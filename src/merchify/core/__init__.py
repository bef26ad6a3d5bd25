"""Core building blocks of the Merchify SDK.

- **MerchifySettings**: Configuration management using Pydantic Settings
- **SignatureCache**: Two-tier cache of URL signatures
- **RateObserver**: Advisory per-client request counters
- **KeyValueStore**: Durable slot interface (JsonFileStore, InMemoryStore)

These modules have no knowledge of the mockup request format; they are used
by :mod:`merchify.api.mockups`.
"""

from merchify.core.config import MerchifySettings, settings
from merchify.core.rate_observer import RateObserver
from merchify.core.signature_cache import SignatureCache
from merchify.core.storage import InMemoryStore, JsonFileStore, KeyValueStore

__all__ = [
    "InMemoryStore",
    "JsonFileStore",
    "KeyValueStore",
    "MerchifySettings",
    "RateObserver",
    "SignatureCache",
    "settings",
]
