"""Documents exchanged during the FastFed handshake."""

from __future__ import annotations

from .attributes import DesiredAttributes, SchemaGrammarAttributes
from .base import Metadata
from .capabilities import Capabilities
from .provider import (
    ApplicationProviderMetadata,
    CommonProviderMetadata,
    DisplaySettings,
    IdentityProviderMetadata,
    ProviderContactInformation,
)
from .registration import (
    HandshakeFinalization,
    Jwt,
    RegistrationRequest,
    RegistrationResponse,
)

__all__ = [
    "Metadata",
    "Capabilities",
    "DesiredAttributes",
    "SchemaGrammarAttributes",
    "ProviderContactInformation",
    "DisplaySettings",
    "CommonProviderMetadata",
    "IdentityProviderMetadata",
    "ApplicationProviderMetadata",
    "Jwt",
    "RegistrationRequest",
    "RegistrationResponse",
    "HandshakeFinalization",
]
