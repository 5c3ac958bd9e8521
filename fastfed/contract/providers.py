"""Redacted provider records stored inside a contract."""

from __future__ import annotations

from typing import Dict, Iterable, NoReturn, Optional

from pydantic import Field, field_validator

from ..constants import (
    APPLICATION_PROVIDER,
    APPLICATION_PROVIDER_METADATA_EXTENSIONS,
    DISPLAY_SETTINGS,
    ENTITY_ID,
    FASTFED_HANDSHAKE_FINALIZE_URI,
    FASTFED_HANDSHAKE_REGISTER_URI,
    FASTFED_HANDSHAKE_START_URI,
    IDENTITY_PROVIDER,
    IDENTITY_PROVIDER_METADATA_EXTENSIONS,
    JWKS_URI,
    PROVIDER_CONTACT_INFORMATION,
    PROVIDER_DOMAIN,
    REGISTRATION_REQUEST_EXTENSIONS,
    REGISTRATION_RESPONSE_EXTENSIONS,
    ExtensionPoint,
)
from ..errors import ErrorAccumulator
from ..json_object import JsonObject, JsonObjectBuilder
from ..metadata.base import Metadata
from ..metadata.provider import (
    ApplicationProviderMetadata,
    CommonProviderMetadata,
    DisplaySettings,
    IdentityProviderMetadata,
    ProviderContactInformation,
)


def _copy_table(table: Dict[str, Metadata]) -> Dict[str, Metadata]:
    return {urn: extension.copy() for urn, extension in table.items()}


class Provider(Metadata):
    """Identity fields of one party, copied from its metadata.

    Contract providers keep two explicitly named extension tables instead of
    the single table inherited from :class:`Metadata`, so the inherited
    extension accessors are disabled.
    """

    entity_id: Optional[str] = None
    provider_domain: Optional[str] = None
    provider_contact_information: Optional[ProviderContactInformation] = None
    display_settings: Optional[DisplaySettings] = None

    @field_validator("provider_domain")
    @classmethod
    def _lower_case_domain(cls, v: Optional[str]) -> Optional[str]:
        return v.lower() if v else v

    def copy_identity_from(self, metadata: CommonProviderMetadata) -> None:
        self.entity_id = metadata.entity_id
        self.provider_domain = metadata.provider_domain
        self.provider_contact_information = (
            metadata.provider_contact_information.copy()
            if metadata.provider_contact_information is not None
            else None
        )
        self.display_settings = (
            metadata.display_settings.copy() if metadata.display_settings is not None else None
        )

    # Inherited single-table accessors
    def _single_table_disabled(self) -> NoReturn:
        raise NotImplementedError(
            f"{type(self).__name__} stores extensions in dedicated tables per extension point"
        )

    def add_extension(self, urn: str, extension: Metadata) -> None:
        self._single_table_disabled()

    def has_extension(self, urn: str) -> bool:
        self._single_table_disabled()

    def get_extension(self, urn: str) -> Optional[Metadata]:
        self._single_table_disabled()

    def hydrate_extensions(self, json: JsonObject, point: ExtensionPoint) -> None:
        self._single_table_disabled()

    def validate_extensions(
        self, errors: ErrorAccumulator, active_urns: Iterable[str], point: ExtensionPoint
    ) -> None:
        self._single_table_disabled()

    # ------------------------------------------------------------------
    def to_json(self) -> JsonObject:
        builder = JsonObjectBuilder()
        builder.put(ENTITY_ID, self.entity_id)
        builder.put(PROVIDER_DOMAIN, self.provider_domain)
        if self.provider_contact_information is not None:
            builder.put_all(self.provider_contact_information.to_json())
        if self.display_settings is not None:
            builder.put_all(self.display_settings.to_json())
        return builder.build()

    def hydrate_from_json(self, json: Optional[JsonObject]) -> None:
        if json is None:
            return
        super().hydrate_from_json(json)
        self.entity_id = json.get_string(ENTITY_ID)
        self.provider_domain = json.get_string(PROVIDER_DOMAIN)
        self.provider_contact_information = self.hydrate_child(
            json, PROVIDER_CONTACT_INFORMATION, ProviderContactInformation
        )
        self.display_settings = self.hydrate_child(json, DISPLAY_SETTINGS, DisplaySettings)

    def validate(self, errors: ErrorAccumulator) -> None:
        self.validate_required_string(errors, ENTITY_ID, self.entity_id)
        self.validate_required_string(errors, PROVIDER_DOMAIN, self.provider_domain)
        self.validate_required_object(
            errors, PROVIDER_CONTACT_INFORMATION, self.provider_contact_information
        )
        self.validate_required_object(errors, DISPLAY_SETTINGS, self.display_settings)
        if self.provider_contact_information is not None:
            self.provider_contact_information.validate(errors)
        if self.display_settings is not None:
            self.display_settings.validate(errors)


class IdentityProvider(Provider):
    jwks_uri: Optional[str] = None
    handshake_start_uri: Optional[str] = None
    metadata_extensions: Dict[str, Metadata] = Field(default_factory=dict)
    registration_request_extensions: Dict[str, Metadata] = Field(default_factory=dict)

    @classmethod
    def from_metadata(cls, metadata: IdentityProviderMetadata) -> "IdentityProvider":
        provider = cls(metadata.configuration)
        provider.copy_identity_from(metadata)
        provider.jwks_uri = metadata.jwks_uri
        provider.handshake_start_uri = metadata.handshake_start_uri
        provider.metadata_extensions = _copy_table(metadata.extensions)
        return provider

    def to_json(self) -> JsonObject:
        builder = JsonObjectBuilder(IDENTITY_PROVIDER)
        builder.put_all(super().to_json())
        builder.put(JWKS_URI, self.jwks_uri)
        builder.put(FASTFED_HANDSHAKE_START_URI, self.handshake_start_uri)
        builder.put(
            IDENTITY_PROVIDER_METADATA_EXTENSIONS,
            self.extension_table_to_json(self.metadata_extensions),
        )
        builder.put(
            REGISTRATION_REQUEST_EXTENSIONS,
            self.extension_table_to_json(self.registration_request_extensions),
        )
        return builder.build()

    def hydrate_from_json(self, json: Optional[JsonObject]) -> None:
        if json is None:
            return
        json = json.unwrap_object_if_needed(IDENTITY_PROVIDER)
        super().hydrate_from_json(json)
        self.jwks_uri = json.get_string(JWKS_URI)
        self.handshake_start_uri = json.get_string(FASTFED_HANDSHAKE_START_URI)
        self.metadata_extensions = self.hydrate_extension_table(
            json.get_object(IDENTITY_PROVIDER_METADATA_EXTENSIONS),
            ExtensionPoint.IDENTITY_PROVIDER_METADATA,
        )
        self.registration_request_extensions = self.hydrate_extension_table(
            json.get_object(REGISTRATION_REQUEST_EXTENSIONS),
            ExtensionPoint.REGISTRATION_REQUEST,
        )

    def validate(self, errors: ErrorAccumulator) -> None:
        super().validate(errors)
        self.validate_required_url(errors, JWKS_URI, self.jwks_uri)
        self.validate_required_url(errors, FASTFED_HANDSHAKE_START_URI, self.handshake_start_uri)

    def validate_profile_extensions(
        self, errors: ErrorAccumulator, enabled_profiles: Iterable[str]
    ) -> None:
        """Validate both extension tables for the contract's enabled profiles.

        Registration request data is only present once the request has been
        overlaid, so its absence is not an error.
        """
        enabled = set(enabled_profiles)
        self.validate_extension_table(
            errors,
            self.metadata_extensions,
            enabled,
            ExtensionPoint.IDENTITY_PROVIDER_METADATA,
            member=IDENTITY_PROVIDER_METADATA_EXTENSIONS,
        )
        self.validate_extension_table(
            errors,
            self.registration_request_extensions,
            enabled,
            ExtensionPoint.REGISTRATION_REQUEST,
            member=REGISTRATION_REQUEST_EXTENSIONS,
            enforce_required=False,
        )


class ApplicationProvider(Provider):
    handshake_register_uri: Optional[str] = None
    handshake_finalize_uri: Optional[str] = None
    metadata_extensions: Dict[str, Metadata] = Field(default_factory=dict)
    registration_response_extensions: Dict[str, Metadata] = Field(default_factory=dict)

    @classmethod
    def from_metadata(cls, metadata: ApplicationProviderMetadata) -> "ApplicationProvider":
        provider = cls(metadata.configuration)
        provider.copy_identity_from(metadata)
        provider.handshake_register_uri = metadata.handshake_register_uri
        provider.metadata_extensions = _copy_table(metadata.extensions)
        return provider

    def to_json(self) -> JsonObject:
        builder = JsonObjectBuilder(APPLICATION_PROVIDER)
        builder.put_all(super().to_json())
        builder.put(FASTFED_HANDSHAKE_REGISTER_URI, self.handshake_register_uri)
        builder.put(FASTFED_HANDSHAKE_FINALIZE_URI, self.handshake_finalize_uri)
        builder.put(
            APPLICATION_PROVIDER_METADATA_EXTENSIONS,
            self.extension_table_to_json(self.metadata_extensions),
        )
        builder.put(
            REGISTRATION_RESPONSE_EXTENSIONS,
            self.extension_table_to_json(self.registration_response_extensions),
        )
        return builder.build()

    def hydrate_from_json(self, json: Optional[JsonObject]) -> None:
        if json is None:
            return
        json = json.unwrap_object_if_needed(APPLICATION_PROVIDER)
        super().hydrate_from_json(json)
        self.handshake_register_uri = json.get_string(FASTFED_HANDSHAKE_REGISTER_URI)
        self.handshake_finalize_uri = json.get_string(FASTFED_HANDSHAKE_FINALIZE_URI)
        self.metadata_extensions = self.hydrate_extension_table(
            json.get_object(APPLICATION_PROVIDER_METADATA_EXTENSIONS),
            ExtensionPoint.APPLICATION_PROVIDER_METADATA,
        )
        self.registration_response_extensions = self.hydrate_extension_table(
            json.get_object(REGISTRATION_RESPONSE_EXTENSIONS),
            ExtensionPoint.REGISTRATION_RESPONSE,
        )

    def validate(self, errors: ErrorAccumulator) -> None:
        super().validate(errors)
        self.validate_required_url(
            errors, FASTFED_HANDSHAKE_REGISTER_URI, self.handshake_register_uri
        )
        self.validate_optional_url(
            errors, FASTFED_HANDSHAKE_FINALIZE_URI, self.handshake_finalize_uri
        )

    def validate_profile_extensions(
        self, errors: ErrorAccumulator, enabled_profiles: Iterable[str]
    ) -> None:
        """Validate both extension tables for the contract's enabled profiles.

        Registration response data is only present once the response has been
        overlaid, so its absence is not an error.
        """
        enabled = set(enabled_profiles)
        self.validate_extension_table(
            errors,
            self.metadata_extensions,
            enabled,
            ExtensionPoint.APPLICATION_PROVIDER_METADATA,
            member=APPLICATION_PROVIDER_METADATA_EXTENSIONS,
        )
        self.validate_extension_table(
            errors,
            self.registration_response_extensions,
            enabled,
            ExtensionPoint.REGISTRATION_RESPONSE,
            member=REGISTRATION_RESPONSE_EXTENSIONS,
            enforce_required=False,
        )
