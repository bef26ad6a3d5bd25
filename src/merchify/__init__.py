"""Merchify SDK - signed mockup image URLs for the Merchify API."""

__version__ = "0.1.0"

from merchify.api.models import (
    ClientOptions,
    ColorDesignElement,
    DesignElement,
    ImageAlignment,
    ImageDesignElement,
    MockupRequest,
    MockupUrl,
    ProductSelection,
)
from merchify.client import MerchifyClient, create_client
from merchify.core.config import MerchifySettings, settings
from merchify.core.errors import (
    InvalidUrlError,
    MerchifyError,
    SigningError,
    UnknownError,
    ValidationError,
)
from merchify.core.rate_observer import RateLimitInfo
from merchify.core.signature_cache import CacheStats

__all__ = [
    "CacheStats",
    "ClientOptions",
    "ColorDesignElement",
    "DesignElement",
    "ImageAlignment",
    "ImageDesignElement",
    "InvalidUrlError",
    "MerchifyClient",
    "MerchifyError",
    "MerchifySettings",
    "MockupRequest",
    "MockupUrl",
    "ProductSelection",
    "RateLimitInfo",
    "SigningError",
    "UnknownError",
    "ValidationError",
    "create_client",
    "settings",
]
