"""Reusable checks that append violations to an :class:`ErrorAccumulator`."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional
from urllib.parse import urlparse

from pydantic import AnyUrl, TypeAdapter, ValidationError

from ..errors import ErrorAccumulator, FastFedSecurityError

logger = logging.getLogger(__name__)

_URL_ADAPTER = TypeAdapter(AnyUrl)


def missing_value(name: str) -> str:
    return f'Missing value for "{name}"'


def validate_required(errors: ErrorAccumulator, name: str, value: Any) -> bool:
    """Report ``name`` as missing when ``value`` is ``None`` or empty."""
    if value is None or (isinstance(value, (str, list, set, frozenset, dict)) and not value):
        errors.add(missing_value(name))
        return False
    return True


def validate_string_collection(
    errors: ErrorAccumulator, name: str, values: Optional[Iterable[Any]]
) -> None:
    if values is None:
        return
    for member in values:
        if not isinstance(member, str) or not member.strip():
            errors.add(
                f'Invalid contents for "{name}". List contains empty or null members.'
            )
            return


def validate_url(errors: ErrorAccumulator, name: str, value: Optional[str]) -> None:
    """Require ``value`` to be a well-formed ``https`` URL, if present."""
    if value is None:
        return
    try:
        url = _URL_ADAPTER.validate_python(value)
    except ValidationError:
        errors.add(f'Invalid url format for "{name}" (received: "{value}")')
        return
    if url.scheme != "https":
        errors.add(
            f'Invalid url protocol for "{name}". Must be "https" (received: "{value}")'
        )


def assert_provider_domain_is_valid(remote_url: str, provider_domain: Optional[str]) -> None:
    """Check that metadata was served over HTTPS from the domain it claims.

    Raises:
        FastFedSecurityError: if the endpoint is not HTTPS or its host does not
            end with ``provider_domain``.
    """

    parsed = urlparse(remote_url)
    if not parsed.scheme or not parsed.hostname:
        raise ValueError(f"Malformed url: {remote_url}")
    if parsed.scheme != "https":
        logger.warning(f"Metadata endpoint {remote_url} is not served over HTTPS")
        raise FastFedSecurityError(
            f'Protocol of the FastFed Metadata Endpoint is not HTTPS ("{remote_url}")'
        )

    host = parsed.hostname.lower()
    if not provider_domain or not host.endswith(provider_domain.lower()):
        logger.warning(
            f"Metadata endpoint {remote_url} does not match provider_domain {provider_domain}"
        )
        raise FastFedSecurityError(
            "The URL of the FastFed Metadata Endpoint does not match the value of the "
            "provider_domain received within the metadata contents "
            f'(endpoint_url="{remote_url}", provider_domain="{provider_domain}")'
        )
