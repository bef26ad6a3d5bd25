"""Validation of client options and mockup requests.

Both helpers accept either a model instance or plain mappings (camelCase or
snake_case keys) and return a validated model. Failures raise
:class:`~merchify.core.errors.ValidationError` with a message meant for the
developer integrating the SDK. The common mistakes get dedicated messages;
anything else falls through to pydantic and is converted.
"""

import logging
from collections.abc import Mapping
from typing import Any

import pydantic

from merchify.api.models import ClientOptions, MockupRequest
from merchify.core.errors import ValidationError

logger = logging.getLogger(__name__)

_REQUIRED_FIELDS_BY_TYPE = {
    "image": ("image_url", "imageUrl"),
    "color": ("hex", "hex"),
}


def _lookup(data: Mapping[str, Any], snake: str, camel: str) -> Any:
    value = data.get(snake)
    if value is None:
        value = data.get(camel)
    return value


def _format_pydantic_error(error: pydantic.ValidationError) -> str:
    messages = []
    for detail in error.errors():
        location = ".".join(str(part) for part in detail["loc"])
        messages.append(f"{location}: {detail['msg']}" if location else detail["msg"])
    return "; ".join(messages)


def validate_client_options(options: ClientOptions | Mapping[str, Any]) -> ClientOptions:
    """Check that the account and client IDs are present.

    Args:
        options: Options passed to ``create_client``.

    Returns:
        Validated ClientOptions.

    Raises:
        ValidationError: If ``accountId`` or ``clientId`` is missing, or any
            option has the wrong type.
    """
    if isinstance(options, ClientOptions):
        return options

    if not isinstance(options, Mapping):
        raise ValidationError("Client options must be a mapping or ClientOptions instance")

    if not _lookup(options, "account_id", "accountId"):
        logger.error("accountId is required")
        raise ValidationError("accountId is required")

    if not _lookup(options, "client_id", "clientId"):
        logger.error("clientId is required")
        raise ValidationError("clientId is required")

    try:
        return ClientOptions.model_validate(dict(options))
    except pydantic.ValidationError as e:
        raise ValidationError(f"Invalid client options: {_format_pydantic_error(e)}") from e


def _check_design_element(element: Any) -> None:
    if isinstance(element, pydantic.BaseModel):
        # Model instances were validated on construction
        return

    if not isinstance(element, Mapping):
        raise ValidationError("Each design element must be a mapping or design element model")

    required = _REQUIRED_FIELDS_BY_TYPE.get(element.get("type"))
    if required is None or not _lookup(element, *required):
        raise ValidationError("Each design image must have either an imageUrl or hex color")


def validate_mockup_request(request: MockupRequest | Mapping[str, Any]) -> MockupRequest:
    """Validate a mockup request before any cache lookup or network call.

    Ensures that:
    1. At least one design element and a product selection are present
    2. Image elements carry an ``imageUrl`` and colour elements a ``hex``
    3. The product has both a ``productId`` and a ``mockupId``

    Args:
        request: MockupRequest or mapping with ``design`` and ``product`` keys.

    Returns:
        Validated MockupRequest.

    Raises:
        ValidationError: If any of the checks above fail, or the request is
            otherwise malformed.
    """
    if isinstance(request, MockupRequest):
        return request

    if not isinstance(request, Mapping):
        raise ValidationError("Mockup request must be a mapping or MockupRequest instance")

    design = request.get("design")
    product = request.get("product")

    if not design or not product:
        raise ValidationError(
            "Invalid input: at least one design image and product details are required"
        )

    for element in design:
        _check_design_element(element)

    if isinstance(product, Mapping):
        if not _lookup(product, "product_id", "productId") or not _lookup(
            product, "mockup_id", "mockupId"
        ):
            raise ValidationError("Product ID and mockup ID are required")

    try:
        return MockupRequest.model_validate({"design": list(design), "product": product})
    except pydantic.ValidationError as e:
        raise ValidationError(f"Invalid mockup request: {_format_pydantic_error(e)}") from e
