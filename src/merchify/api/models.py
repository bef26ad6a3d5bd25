"""Pydantic models for mockup requests, responses and client options.

Field names are snake_case in Python and camelCase on the wire, matching the
JSON the mockup service expects inside the ``design`` query parameter. Every
model accepts either spelling on input.

Models
------
ColorDesignElement / ImageDesignElement
    The two variants of :data:`DesignElement`, discriminated by ``type``.
ProductSelection
    Which product, mockup and variant to render.
MockupRequest
    Design elements plus product selection: the input to
    ``MockupService.get_mockup_url``.
MockupUrl
    The signed absolute URL returned to callers.
ClientOptions
    Account credentials and optional endpoint overrides for ``create_client``.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from merchify.core.rate_observer import RateInfo, RateLimitInfo, RateLimits
from merchify.core.signature_cache import CacheStats

DEFAULT_VARIANT_ID = "VtPGZi"

ImageAlignment = Literal[
    "center",
    "top",
    "far-top",
    "bottom",
    "far-bottom",
    "left",
    "far-left",
    "right",
    "far-right",
]


class WireModel(BaseModel):
    """Base for models serialised with camelCase field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class ColorDesignElement(WireModel):
    """A placement filled with a solid colour.

    Attributes:
        type: Always ``"color"``.
        placement: Placement name on the product (e.g. ``"front"``).
        width: Placement width in pixels.
        height: Placement height in pixels.
        alignment: How the fill is aligned within the placement.
        hex: Colour as a hex string, e.g. ``"#FF0000"``.
        is_tile: Whether the fill is tiled.
    """

    model_config = ConfigDict(extra="forbid")

    type: Literal["color"] = "color"
    placement: str
    width: int
    height: int
    alignment: ImageAlignment = "center"
    hex: str = Field(..., min_length=1)
    is_tile: bool = False


class ImageDesignElement(WireModel):
    """A placement filled with an image.

    Attributes:
        type: Always ``"image"``.
        placement: Placement name on the product (e.g. ``"front"``).
        width: Placement width in pixels.
        height: Placement height in pixels.
        alignment: How the image is aligned within the placement.
        image_url: Public URL of the artwork.
        is_tile: Whether the image is repeated as a tile pattern.
        tile_scale: Optional tile scale understood by the renderer.
    """

    model_config = ConfigDict(extra="forbid")

    type: Literal["image"] = "image"
    placement: str
    width: int
    height: int
    alignment: ImageAlignment = "center"
    image_url: str = Field(..., min_length=1)
    is_tile: bool = False
    tile_scale: str | None = None


DesignElement = Annotated[
    Union[ColorDesignElement, ImageDesignElement],
    Field(discriminator="type"),
]


class ProductSelection(WireModel):
    """Product, mockup and variant to render the design onto."""

    product_id: str = Field(..., min_length=1)
    mockup_id: str = Field(..., min_length=1)
    variant_id: str | None = Field(
        default=None,
        description=f"Variant to render; the service default {DEFAULT_VARIANT_ID!r} when omitted.",
    )
    width: int | None = Field(default=None, description="Rendered image width in pixels.")


class MockupRequest(WireModel):
    """Everything needed to build a mockup URL."""

    design: list[DesignElement] = Field(..., min_length=1)
    product: ProductSelection


class MockupUrl(BaseModel):
    url: str


class ClientOptions(WireModel):
    """Options passed to ``create_client``.

    Attributes:
        account_id: Account the signed URLs are issued for.
        client_id: Public client identifier sent to the signer.
        api_url: Override for the general API base URL.
        mockup_api_url: Override for the mockup renderer base URL.
        url_signer_endpoint: Override for the URL signer endpoint.
    """

    account_id: str = Field(..., min_length=1)
    client_id: str = Field(..., min_length=1)
    api_url: str | None = None
    mockup_api_url: str | None = None
    url_signer_endpoint: str | None = None


__all__ = [
    "DEFAULT_VARIANT_ID",
    "CacheStats",
    "ClientOptions",
    "ColorDesignElement",
    "DesignElement",
    "ImageAlignment",
    "ImageDesignElement",
    "MockupRequest",
    "MockupUrl",
    "ProductSelection",
    "RateInfo",
    "RateLimitInfo",
    "RateLimits",
]
