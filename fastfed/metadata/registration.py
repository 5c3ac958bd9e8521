"""Handshake messages exchanged after the metadata has been retrieved."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Iterable, Optional, Set, Type

from pydantic import Field, PrivateAttr

from ..constants import (
    AUTHENTICATION_PROFILES,
    FASTFED_HANDSHAKE_FINALIZE_URI,
    JWT_AUDIENCE,
    JWT_EXPIRATION,
    JWT_ISSUER,
    PROVISIONING_PROFILES,
    ExtensionPoint,
)
from ..errors import ErrorAccumulator
from ..json_object import JsonObject, JsonObjectBuilder, parse_json
from ..security.tokens import JwtCodec
from .base import Metadata, MetadataT

if TYPE_CHECKING:
    from ..config import FastFedConfig


class Jwt(Metadata):
    """Registered claims common to every handshake JWT."""

    issuer: Optional[str] = None
    audience: Optional[str] = None
    expiration: Optional[datetime] = None

    def to_json(self) -> JsonObject:
        builder = JsonObjectBuilder()
        builder.put_all(super().to_json())
        builder.put(JWT_ISSUER, self.issuer)
        builder.put(JWT_AUDIENCE, self.audience)
        builder.put(JWT_EXPIRATION, self.expiration)
        return builder.build()

    def hydrate_from_json(self, json: Optional[JsonObject]) -> None:
        if json is None:
            return
        super().hydrate_from_json(json)
        self.issuer = json.get_string(JWT_ISSUER)
        self.audience = json.get_string(JWT_AUDIENCE)
        self.expiration = json.get_datetime(JWT_EXPIRATION)

    def validate(self, errors: ErrorAccumulator) -> None:
        self.validate_required_string(errors, JWT_ISSUER, self.issuer)
        self.validate_required_string(errors, JWT_AUDIENCE, self.audience)
        self.validate_required_object(errors, JWT_EXPIRATION, self.expiration)

    @classmethod
    def from_jwt(
        cls: Type[MetadataT],
        configuration: "FastFedConfig",
        compact: str,
        codec: Optional[JwtCodec] = None,
    ) -> MetadataT:
        """Decode ``compact`` with ``codec`` and hydrate and validate its claims."""
        codec = codec or JwtCodec()
        message = cls(configuration)
        message.hydrate_and_validate_json(JsonObject(codec.parse(compact)))
        return message

    def to_jwt(self, codec: JwtCodec) -> str:
        return codec.serialize(self.to_json().to_dict())


class RegistrationRequest(Jwt):
    """Sent by the Identity Provider to start registration with the Application Provider."""

    authentication_profiles: Set[str] = Field(default_factory=set)
    provisioning_profiles: Set[str] = Field(default_factory=set)

    def requested_profiles(self) -> Set[str]:
        return self.authentication_profiles | self.provisioning_profiles

    def to_json(self) -> JsonObject:
        builder = JsonObjectBuilder()
        builder.put_all(super().to_json())
        builder.put(AUTHENTICATION_PROFILES, self.authentication_profiles)
        builder.put(PROVISIONING_PROFILES, self.provisioning_profiles)
        return builder.build()

    def hydrate_from_json(self, json: Optional[JsonObject]) -> None:
        if json is None:
            return
        super().hydrate_from_json(json)
        self.authentication_profiles = json.get_string_set(AUTHENTICATION_PROFILES) or set()
        self.provisioning_profiles = json.get_string_set(PROVISIONING_PROFILES) or set()
        self.hydrate_extensions(json, ExtensionPoint.REGISTRATION_REQUEST)

    def validate(self, errors: ErrorAccumulator) -> None:
        super().validate(errors)
        self.validate_optional_string_collection(
            errors, AUTHENTICATION_PROFILES, self.authentication_profiles
        )
        self.validate_optional_string_collection(
            errors, PROVISIONING_PROFILES, self.provisioning_profiles
        )
        self.validate_extensions(
            errors, self.requested_profiles(), ExtensionPoint.REGISTRATION_REQUEST
        )


class RegistrationResponse(Metadata):
    """Returned by the Application Provider once registration succeeds.

    Extensions are only required for the profiles enabled in the contract,
    which the caller supplies as ``enabled_profiles``.
    """

    handshake_finalize_uri: Optional[str] = None

    _enabled_profiles: Set[str] = PrivateAttr(default_factory=set)

    def __init__(
        self,
        configuration: "FastFedConfig",
        enabled_profiles: Iterable[str] = (),
        **data: Any,
    ) -> None:
        super().__init__(configuration, **data)
        self._enabled_profiles = set(enabled_profiles)

    @property
    def enabled_profiles(self) -> Set[str]:
        return set(self._enabled_profiles)

    @classmethod
    def from_json(  # type: ignore[override]
        cls,
        configuration: "FastFedConfig",
        text: str,
        enabled_profiles: Iterable[str] = (),
    ) -> "RegistrationResponse":
        response = cls(configuration, enabled_profiles)
        response.hydrate_and_validate_json(parse_json(text))
        return response

    def to_json(self) -> JsonObject:
        builder = JsonObjectBuilder()
        builder.put_all(super().to_json())
        builder.put(FASTFED_HANDSHAKE_FINALIZE_URI, self.handshake_finalize_uri)
        return builder.build()

    def hydrate_from_json(self, json: Optional[JsonObject]) -> None:
        if json is None:
            return
        super().hydrate_from_json(json)
        self.handshake_finalize_uri = json.get_string(FASTFED_HANDSHAKE_FINALIZE_URI)
        self.hydrate_extensions(json, ExtensionPoint.REGISTRATION_RESPONSE)

    def validate(self, errors: ErrorAccumulator) -> None:
        self.validate_optional_url(
            errors, FASTFED_HANDSHAKE_FINALIZE_URI, self.handshake_finalize_uri
        )
        self.validate_extensions(
            errors, self._enabled_profiles, ExtensionPoint.REGISTRATION_RESPONSE
        )


class HandshakeFinalization(Jwt):
    """Sent by the Identity Provider to the finalize endpoint to complete the handshake."""
