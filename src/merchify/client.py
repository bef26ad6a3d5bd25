"""Client factory for the Merchify SDK.

Usage Example
-------------
    import asyncio
    from merchify import create_client

    client = create_client(account_id="acct_123", client_id="pk_live_abc")

    result = asyncio.run(
        client.mockups.get_mockup_url(
            {
                "design": [
                    {"type": "color", "hex": "#FF0000", "placement": "front",
                     "width": 1200, "height": 1200, "alignment": "center"},
                ],
                "product": {"productId": "p1", "mockupId": "m1", "variantId": "v1"},
            }
        )
    )
    print(result.url)
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import httpx
from pydantic.alias_generators import to_snake

from merchify.api.mockups import MockupService
from merchify.api.models import ClientOptions
from merchify.api.validation import validate_client_options
from merchify.core.config import MerchifySettings, resolve_endpoints
from merchify.core.config import settings as default_settings
from merchify.core.rate_observer import RateLimits, RateObserver, Scheduler
from merchify.core.signature_cache import SignatureCache
from merchify.core.storage import JsonFileStore, KeyValueStore

logger = logging.getLogger(__name__)


class MerchifyClient:
    """Handle returned by :func:`create_client`.

    Attributes:
        mockups: Service for building signed mockup URLs.
    """

    def __init__(self, options: ClientOptions, mockups: MockupService):
        self._options = options
        self.mockups = mockups

    def get_config(self) -> ClientOptions:
        """Return a copy of the options this client was created with."""
        return self._options.model_copy()

    def close(self) -> None:
        """Cancel pending timers owned by this client."""
        self.mockups.close()

    async def __aenter__(self) -> MerchifyClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        self.close()


def create_client(
    options: ClientOptions | Mapping[str, Any] | None = None,
    /,
    *,
    settings: MerchifySettings | None = None,
    storage: KeyValueStore | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    scheduler: Scheduler | None = None,
    **kwargs: Any,
) -> MerchifyClient:
    """Create a client bound to one account.

    Args:
        options: ClientOptions or mapping (camelCase or snake_case keys).
            Keyword arguments are merged on top.
        settings: Settings to use instead of the global MERCHIFY_* settings.
        storage: Durable store for signatures. Defaults to a JsonFileStore in
            ``settings.cache_dir`` when ``settings.persist_signatures`` is set.
        transport: httpx transport used for signer requests.
        scheduler: Timer source for the rate observer.
        **kwargs: Client options given as keyword arguments.

    Returns:
        A ready-to-use MerchifyClient.

    Raises:
        ValidationError: If ``accountId`` or ``clientId`` is missing.
    """
    if isinstance(options, ClientOptions) and not kwargs:
        client_options = options
    else:
        merged: dict[str, Any] = {}
        if isinstance(options, ClientOptions):
            merged.update(options.model_dump(exclude_none=True))
        elif options is not None:
            # Accept camelCase and snake_case keys without one shadowing the other
            merged.update({to_snake(key): value for key, value in options.items()})
        merged.update({to_snake(key): value for key, value in kwargs.items()})
        client_options = validate_client_options(merged)

    settings = settings or default_settings
    logger.info(f"Creating Merchify client for account {client_options.account_id}")

    endpoints = resolve_endpoints(
        environment=settings.environment,
        api_url=client_options.api_url,
        mockup_api_url=client_options.mockup_api_url,
        url_signer_endpoint=client_options.url_signer_endpoint,
    )

    if storage is None and settings.persist_signatures:
        storage = JsonFileStore(settings.cache_dir)

    signature_cache = SignatureCache(
        memory_capacity=settings.memory_cache_size,
        storage_capacity=settings.storage_cache_size,
        store=storage,
        cache_name=settings.signature_cache_key,
    )
    rate_observer = RateObserver(
        limits=RateLimits(
            requests_per_minute=settings.requests_per_minute,
            requests_per_second=settings.requests_per_second,
        ),
        scheduler=scheduler,
    )

    mockups = MockupService(
        account_id=client_options.account_id,
        client_id=client_options.client_id,
        endpoints=endpoints,
        signature_cache=signature_cache,
        rate_observer=rate_observer,
        transport=transport,
    )
    return MerchifyClient(client_options, mockups)
