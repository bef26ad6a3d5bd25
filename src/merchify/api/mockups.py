"""Signed mockup URL generation.

:class:`MockupService` is the SDK's core entry point. For each request it:

1. validates the request (no I/O on failure)
2. records the attempt with the per-client :class:`RateObserver`
3. builds the canonical relative mockup URL
4. qualifies it with ``accountId`` to form the signature cache key
5. on a cache hit, appends the cached signature locally
6. on a miss, asks the URL signer service for a signature, caches it and
   returns the server-built signed URL

Exactly one signer request is made per cache miss. There are no retries and
concurrent misses for the same key are not coalesced; both reach the signer
and the later write wins in the cache.

Signer Protocol
---------------
::

    GET <url_signer_endpoint>?url=<cache key>&clientId=<client id>
    Accept: application/json
    X-Client-ID: <client id>

    200 {"signature": "...", "urlWithSignature": "/mockup?...&sig=..."}
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import httpx

from merchify.api.models import MockupRequest, MockupUrl
from merchify.api.urls import (
    add_account_id,
    add_signature,
    build_canonical_mockup_path,
    normalize_relative,
    to_absolute,
)
from merchify.api.validation import validate_mockup_request
from merchify.core.config import Endpoints
from merchify.core.errors import SigningError, UnknownError
from merchify.core.rate_observer import RateLimitInfo, RateObserver
from merchify.core.signature_cache import CacheStats, SignatureCache

logger = logging.getLogger(__name__)


class MockupService:
    """Builds and signs mockup URLs for one account.

    Args:
        account_id: Account the URLs are signed for; scopes the cache key.
        client_id: Client identifier sent to the signer.
        endpoints: Resolved service URLs.
        signature_cache: Cache owned by this service's client.
        rate_observer: Advisory counters owned by this service's client.
        transport: Optional httpx transport, mainly for tests.
    """

    def __init__(
        self,
        account_id: str,
        client_id: str,
        endpoints: Endpoints,
        signature_cache: SignatureCache,
        rate_observer: RateObserver,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.account_id = account_id
        self.client_id = client_id
        self.endpoints = endpoints
        self.signature_cache = signature_cache
        self.rate_observer = rate_observer
        self._transport = transport

    async def get_mockup_url(self, request: MockupRequest | Mapping[str, Any]) -> MockupUrl:
        """Return a signed absolute URL for the requested mockup.

        Args:
            request: MockupRequest or mapping with ``design`` and ``product``.

        Returns:
            MockupUrl holding the absolute signed URL.

        Raises:
            ValidationError: If the request is malformed. Nothing is tracked.
            SigningError: If the signer fails or returns an unusable body.
            InvalidUrlError: If the signer returns an absolute URL.
            UnknownError: For any other failure during signing.
        """
        logger.debug(f"Getting mockup URL with input: {request}")
        mockup_request = validate_mockup_request(request)

        self.rate_observer.track()
        try:
            mockup_path = build_canonical_mockup_path(mockup_request)
            signed_url = await self._get_signed_url(mockup_path)
        except Exception as e:
            logger.error(f"Error generating mockup URL: {e}")
            self.rate_observer.decrease_queue()
            raise

        logger.debug(f"Returning url: {signed_url}")
        return MockupUrl(url=signed_url)

    async def _get_signed_url(self, url: str) -> str:
        cache_key = add_account_id(normalize_relative(url), self.account_id)

        cached_signature = self.signature_cache.get(cache_key)
        if cached_signature:
            logger.debug("Cache hit for URL signature")
            return to_absolute(
                add_signature(cache_key, cached_signature), self.endpoints.mockup_api_url
            )

        logger.debug("Cache miss for URL signature, requesting from signer")
        signature, url_with_signature = await self._request_signature(cache_key)

        # The signer returns a relative URL; anchor it on the mockup API
        signed_url = to_absolute(
            normalize_relative(url_with_signature), self.endpoints.mockup_api_url
        )

        self.signature_cache.set(cache_key, signature)
        return signed_url

    async def _request_signature(self, cache_key: str) -> tuple[str, str]:
        """Ask the signer for a signature for ``cache_key``.

        Returns:
            ``(signature, url_with_signature)`` from the signer response.
        """
        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.get(
                    self.endpoints.url_signer_endpoint,
                    params={"url": cache_key, "clientId": self.client_id},
                    headers={
                        "Accept": "application/json",
                        "X-Client-ID": self.client_id,
                    },
                )
        except httpx.HTTPError as e:
            raise SigningError(f"URL signing request failed: {e}") from e
        except Exception as e:
            raise UnknownError(f"Unknown error while getting signed URL: {e}") from e

        if not response.is_success:
            message = f"URL signing failed: {response.status_code} {response.reason_phrase}"
            raise SigningError(
                f"{message} {response.text}".rstrip(),
                status_code=response.status_code,
                body=response.text,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise SigningError(
                "Invalid response from signer service - body is not JSON",
                status_code=response.status_code,
                body=response.text,
            ) from e

        signature = data.get("signature") if isinstance(data, dict) else None
        url_with_signature = data.get("urlWithSignature") if isinstance(data, dict) else None
        if not signature or not url_with_signature:
            raise SigningError(
                "Invalid response from signer service - missing signature or urlWithSignature",
                status_code=response.status_code,
                body=response.text,
            )

        logger.info(f"Signed new mockup URL for account {self.account_id}")
        return signature, url_with_signature

    def get_rate_limit_info(self) -> RateLimitInfo:
        return self.rate_observer.snapshot()

    def get_cache_stats(self) -> CacheStats:
        return self.signature_cache.stats()

    def close(self) -> None:
        """Cancel pending rate-window timers."""
        self.rate_observer.close()
