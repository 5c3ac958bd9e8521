"""Provider metadata documents published at a FastFed metadata endpoint."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Optional, Set, Type

from pydantic import field_validator

from .. import transport
from ..constants import (
    APPLICATION_PROVIDER,
    CAPABILITIES,
    DISPLAY_NAME,
    DISPLAY_SETTINGS,
    EMAIL,
    ENTITY_ID,
    FASTFED_HANDSHAKE_REGISTER_URI,
    FASTFED_HANDSHAKE_START_URI,
    ICON_URI,
    IDENTITY_PROVIDER,
    JWKS_URI,
    LICENSE,
    LOGO_URI,
    ORGANIZATION,
    PHONE,
    PROVIDER_CONTACT_INFORMATION,
    PROVIDER_DOMAIN,
    ExtensionPoint,
)
from ..errors import ErrorAccumulator
from ..json_object import JsonObject, JsonObjectBuilder
from .base import Metadata, MetadataT
from .capabilities import Capabilities
from .validation import assert_provider_domain_is_valid

if TYPE_CHECKING:
    from ..config import FastFedConfig

logger = logging.getLogger(__name__)


class ProviderContactInformation(Metadata):
    organization: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None

    def to_json(self) -> JsonObject:
        builder = JsonObjectBuilder(PROVIDER_CONTACT_INFORMATION)
        builder.put(ORGANIZATION, self.organization)
        builder.put(PHONE, self.phone)
        builder.put(EMAIL, self.email)
        return builder.build()

    def hydrate_from_json(self, json: Optional[JsonObject]) -> None:
        if json is None:
            return
        json = json.unwrap_object_if_needed(PROVIDER_CONTACT_INFORMATION)
        super().hydrate_from_json(json)
        self.organization = json.get_string(ORGANIZATION)
        self.phone = json.get_string(PHONE)
        self.email = json.get_string(EMAIL)

    def validate(self, errors: ErrorAccumulator) -> None:
        self.validate_required_string(errors, ORGANIZATION, self.organization)
        self.validate_required_string(errors, PHONE, self.phone)
        self.validate_required_string(errors, EMAIL, self.email)


class DisplaySettings(Metadata):
    display_name: Optional[str] = None
    logo_uri: Optional[str] = None
    icon_uri: Optional[str] = None
    license: Optional[str] = None

    def to_json(self) -> JsonObject:
        builder = JsonObjectBuilder(DISPLAY_SETTINGS)
        builder.put(DISPLAY_NAME, self.display_name)
        builder.put(LOGO_URI, self.logo_uri)
        builder.put(ICON_URI, self.icon_uri)
        builder.put(LICENSE, self.license)
        return builder.build()

    def hydrate_from_json(self, json: Optional[JsonObject]) -> None:
        if json is None:
            return
        json = json.unwrap_object_if_needed(DISPLAY_SETTINGS)
        super().hydrate_from_json(json)
        self.display_name = json.get_string(DISPLAY_NAME)
        self.logo_uri = json.get_string(LOGO_URI)
        self.icon_uri = json.get_string(ICON_URI)
        self.license = json.get_string(LICENSE)

    def validate(self, errors: ErrorAccumulator) -> None:
        self.validate_required_string(errors, DISPLAY_NAME, self.display_name)
        self.validate_optional_url(errors, LOGO_URI, self.logo_uri)
        self.validate_optional_url(errors, ICON_URI, self.icon_uri)
        self.validate_required_url(errors, LICENSE, self.license)
        supported = self.configuration.supported_licenses
        if self.license and supported and self.license not in supported:
            errors.add(
                f'Unsupported license for "{self.fully_qualified_name(LICENSE)}" '
                f'(received: "{self.license}")'
            )


class CommonProviderMetadata(Metadata):
    """Identity fields shared by Identity Provider and Application Provider metadata."""

    entity_id: Optional[str] = None
    provider_domain: Optional[str] = None
    provider_contact_information: Optional[ProviderContactInformation] = None
    display_settings: Optional[DisplaySettings] = None
    capabilities: Optional[Capabilities] = None

    @field_validator("provider_domain")
    @classmethod
    def _lower_case_domain(cls, v: Optional[str]) -> Optional[str]:
        return v.lower() if v else v

    def declared_known_profiles(self) -> Set[str]:
        """Profiles from this provider's capabilities that the registry knows."""
        if self.capabilities is None:
            return set()
        return self.capabilities.filter_to_known_profiles().all_profiles()

    def to_json(self) -> JsonObject:
        builder = JsonObjectBuilder()
        builder.put_all(super().to_json())
        builder.put(ENTITY_ID, self.entity_id)
        builder.put(PROVIDER_DOMAIN, self.provider_domain)
        if self.provider_contact_information is not None:
            builder.put_all(self.provider_contact_information.to_json())
        if self.display_settings is not None:
            builder.put_all(self.display_settings.to_json())
        if self.capabilities is not None:
            builder.put_all(self.capabilities.to_json())
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
        self.capabilities = self.hydrate_child(json, CAPABILITIES, Capabilities)

    def validate(self, errors: ErrorAccumulator) -> None:
        self.validate_required_string(errors, ENTITY_ID, self.entity_id)
        self.validate_required_string(errors, PROVIDER_DOMAIN, self.provider_domain)
        self.validate_required_object(
            errors, PROVIDER_CONTACT_INFORMATION, self.provider_contact_information
        )
        self.validate_required_object(errors, DISPLAY_SETTINGS, self.display_settings)
        self.validate_required_object(errors, CAPABILITIES, self.capabilities)
        if self.provider_contact_information is not None:
            self.provider_contact_information.validate(errors)
        if self.display_settings is not None:
            self.display_settings.validate(errors)
        if self.capabilities is not None:
            self.capabilities.validate(errors)

    @classmethod
    def from_remote_endpoint(
        cls: Type[MetadataT],
        configuration: "FastFedConfig",
        url: str,
        fetch: Optional[Callable[[str], str]] = None,
    ) -> MetadataT:
        """Retrieve metadata from ``url`` and check it belongs to that endpoint.

        Raises:
            InvalidMetadataError: if the document is malformed.
            FastFedSecurityError: if ``url`` is not HTTPS or its host does not
                match the declared ``provider_domain``.
        """
        fetch = fetch or transport.fetch
        logger.info(f"Retrieving {cls.__name__} from {url}")
        metadata = cls.from_json(configuration, fetch(url))
        assert_provider_domain_is_valid(url, metadata.provider_domain)
        return metadata


class IdentityProviderMetadata(CommonProviderMetadata):
    jwks_uri: Optional[str] = None
    handshake_start_uri: Optional[str] = None

    def to_json(self) -> JsonObject:
        builder = JsonObjectBuilder(IDENTITY_PROVIDER)
        builder.put_all(super().to_json())
        builder.put(JWKS_URI, self.jwks_uri)
        builder.put(FASTFED_HANDSHAKE_START_URI, self.handshake_start_uri)
        return builder.build()

    def hydrate_from_json(self, json: Optional[JsonObject]) -> None:
        if json is None:
            return
        json = json.unwrap_object_if_needed(IDENTITY_PROVIDER)
        super().hydrate_from_json(json)
        self.jwks_uri = json.get_string(JWKS_URI)
        self.handshake_start_uri = json.get_string(FASTFED_HANDSHAKE_START_URI)
        self.hydrate_extensions(json, ExtensionPoint.IDENTITY_PROVIDER_METADATA)

    def validate(self, errors: ErrorAccumulator) -> None:
        super().validate(errors)
        self.validate_required_url(errors, JWKS_URI, self.jwks_uri)
        self.validate_required_url(errors, FASTFED_HANDSHAKE_START_URI, self.handshake_start_uri)
        self.validate_extensions(
            errors,
            self.declared_known_profiles(),
            ExtensionPoint.IDENTITY_PROVIDER_METADATA,
        )


class ApplicationProviderMetadata(CommonProviderMetadata):
    handshake_register_uri: Optional[str] = None

    def to_json(self) -> JsonObject:
        builder = JsonObjectBuilder(APPLICATION_PROVIDER)
        builder.put_all(super().to_json())
        builder.put(FASTFED_HANDSHAKE_REGISTER_URI, self.handshake_register_uri)
        return builder.build()

    def hydrate_from_json(self, json: Optional[JsonObject]) -> None:
        if json is None:
            return
        json = json.unwrap_object_if_needed(APPLICATION_PROVIDER)
        super().hydrate_from_json(json)
        self.handshake_register_uri = json.get_string(FASTFED_HANDSHAKE_REGISTER_URI)
        self.hydrate_extensions(json, ExtensionPoint.APPLICATION_PROVIDER_METADATA)

    def validate(self, errors: ErrorAccumulator) -> None:
        super().validate(errors)
        self.validate_required_url(
            errors, FASTFED_HANDSHAKE_REGISTER_URI, self.handshake_register_uri
        )
        self.validate_extensions(
            errors,
            self.declared_known_profiles(),
            ExtensionPoint.APPLICATION_PROVIDER_METADATA,
        )
