"""Canonical mockup URL construction.

The relative mockup URL doubles as the signing input and, once qualified with
the account ID, as the signature cache key. Two logically identical requests
must therefore produce byte-identical URLs. Query parameters are emitted in a
fixed order:

    /mockup?productId=..&mockupId=..&variantId=..&design=..[&width=..]

``design`` is the compact camelCase JSON of the design elements, base64
encoded and then percent-encoded.

Percent-encoding follows JavaScript's ``encodeURIComponent`` so that URLs
built here match the ones the signer service builds and verifies.
"""

from __future__ import annotations

import base64
import json
import re
from collections.abc import Sequence
from urllib.parse import quote

from merchify.api.models import DEFAULT_VARIANT_ID, DesignElement, MockupRequest
from merchify.core.errors import InvalidUrlError

# Characters encodeURIComponent leaves alone besides letters, digits and "_.-~"
_COMPONENT_SAFE = "!*'()"

_ABSOLUTE_URL = re.compile(r"^(?:[a-zA-Z][a-zA-Z0-9+.\-]*:|//)")


def encode_component(value: object) -> str:
    return quote(str(value), safe=_COMPONENT_SAFE)


def is_absolute(url: str) -> bool:
    return bool(_ABSOLUTE_URL.match(url))


def normalize_relative(url: str) -> str:
    """Ensure ``url`` is relative and starts with exactly one ``/``.

    Raises:
        InvalidUrlError: If ``url`` has a scheme or is protocol-relative.
    """
    if is_absolute(url):
        raise InvalidUrlError(
            f'URL must be relative. Please provide a URL that starts with "/" instead of a full URL: {url}'
        )
    return "/" + url.lstrip("/")


def to_absolute(relative_url: str, base_url: str) -> str:
    """Join ``base_url`` and ``relative_url`` with exactly one ``/``."""
    return f"{base_url.rstrip('/')}/{relative_url.lstrip('/')}"


def append_query_param(url: str, key: str, value: object) -> str:
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{key}={encode_component(value)}"


def add_signature(url: str, signature: str) -> str:
    return append_query_param(url, "sig", signature)


def add_account_id(url: str, account_id: str) -> str:
    return append_query_param(url, "accountId", account_id)


def encode_design(design: Sequence[DesignElement]) -> str:
    """Serialise design elements into the ``design`` query value.

    Fields are dumped in model order with camelCase names, ``None`` values
    are omitted and no whitespace is emitted, so the output depends only on
    the request's values.
    """
    payload = [element.model_dump(by_alias=True, exclude_none=True) for element in design]
    compact = json.dumps(payload, separators=(",", ":"), ensure_ascii=False)
    encoded = base64.b64encode(compact.encode("utf-8")).decode("ascii")
    return encode_component(encoded)


def build_canonical_mockup_path(request: MockupRequest) -> str:
    """Build the relative mockup URL for ``request``.

    Args:
        request: Validated mockup request.

    Returns:
        Relative URL starting with ``/mockup?``.
    """
    product = request.product
    path = (
        f"/mockup?productId={encode_component(product.product_id)}"
        f"&mockupId={encode_component(product.mockup_id)}"
        f"&variantId={encode_component(product.variant_id or DEFAULT_VARIANT_ID)}"
        f"&design={encode_design(request.design)}"
    )

    if product.width:
        path += f"&width={product.width}"

    return path
