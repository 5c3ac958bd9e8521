"""Enterprise SCIM 2.0 provisioning profile."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

from ..constants import (
    DESIRED_ATTRIBUTES,
    ENTERPRISE_SCIM,
    JWKS_URI,
    OAUTH2_JWT_PROFILE,
    OAUTH2_SCOPE,
    OAUTH2_TOKEN_ENDPOINT,
    PROVIDER_AUTHENTICATION_METHOD,
    PROVIDER_AUTHENTICATION_METHODS,
    PROVIDER_AUTHENTICATION_PROTOCOLS,
    PROVIDER_CONTACT_INFORMATION,
    SCIM_CAN_SUPPORT_NESTED_GROUPS,
    SCIM_MAX_GROUP_MEMBERSHIP_CHANGES,
    SCIM_SERVICE_URI,
    ExtensionPoint,
)
from ..errors import ErrorAccumulator
from ..json_object import JsonObject, JsonObjectBuilder
from ..metadata.attributes import DesiredAttributes
from ..metadata.base import Metadata
from ..metadata.provider import ProviderContactInformation
from .base import Profile

if TYPE_CHECKING:
    from ..config import FastFedConfig


class ScimApplicationProviderExtension(Metadata):
    """Provisioning requirements published by the Application Provider.

    ``can_support_nested_groups`` and ``max_group_membership_changes`` fall
    back to the configured defaults when the document omits them.
    """

    desired_attributes: Optional[DesiredAttributes] = None
    can_support_nested_groups: bool = False
    max_group_membership_changes: int = 100

    def __init__(self, configuration: "FastFedConfig", **data: Any) -> None:
        data.setdefault("can_support_nested_groups", configuration.scim_can_support_nested_groups)
        data.setdefault(
            "max_group_membership_changes", configuration.scim_max_group_membership_changes
        )
        super().__init__(configuration, **data)

    def to_json(self) -> JsonObject:
        builder = JsonObjectBuilder()
        builder.put(SCIM_CAN_SUPPORT_NESTED_GROUPS, self.can_support_nested_groups)
        builder.put(SCIM_MAX_GROUP_MEMBERSHIP_CHANGES, self.max_group_membership_changes)
        if self.desired_attributes is not None:
            builder.put_all(self.desired_attributes.to_json())
        return builder.build()

    def hydrate_from_json(self, json: Optional[JsonObject]) -> None:
        if json is None:
            return
        super().hydrate_from_json(json)
        self.desired_attributes = self.hydrate_child(json, DESIRED_ATTRIBUTES, DesiredAttributes)

        nested = json.get_boolean(SCIM_CAN_SUPPORT_NESTED_GROUPS)
        if nested is None:
            nested = self.configuration.scim_can_support_nested_groups
        self.can_support_nested_groups = nested

        max_changes = json.get_integer(SCIM_MAX_GROUP_MEMBERSHIP_CHANGES)
        if max_changes is None:
            max_changes = self.configuration.scim_max_group_membership_changes
        self.max_group_membership_changes = max_changes

    def validate(self, errors: ErrorAccumulator) -> None:
        self.validate_required_object(errors, DESIRED_ATTRIBUTES, self.desired_attributes)
        if self.desired_attributes is not None:
            self.desired_attributes.validate(errors)

        lower = self.configuration.scim_max_group_membership_changes_lower_limit
        upper = self.configuration.scim_max_group_membership_changes_upper_limit
        if self.max_group_membership_changes > upper:
            errors.add(
                f"Invalid value of '{SCIM_MAX_GROUP_MEMBERSHIP_CHANGES}', the received value "
                f"{self.max_group_membership_changes} exceeds the upper limit of {upper}"
            )
        elif self.max_group_membership_changes < lower:
            errors.add(
                f"Invalid value of '{SCIM_MAX_GROUP_MEMBERSHIP_CHANGES}', the received value "
                f"{self.max_group_membership_changes} is below the lower limit of {lower}"
            )


class Oauth2JwtClientMetadata(Metadata):
    """How the Identity Provider authenticates to the SCIM service."""

    jwks_uri: Optional[str] = None

    def to_json(self) -> JsonObject:
        return JsonObjectBuilder().put(JWKS_URI, self.jwks_uri).build()

    def hydrate_from_json(self, json: Optional[JsonObject]) -> None:
        if json is None:
            return
        super().hydrate_from_json(json)
        self.jwks_uri = json.get_string(JWKS_URI)

    def validate(self, errors: ErrorAccumulator) -> None:
        self.validate_required_url(errors, JWKS_URI, self.jwks_uri)


class Oauth2JwtServiceMetadata(Metadata):
    """Where the Identity Provider obtains tokens for the SCIM service."""

    token_endpoint: Optional[str] = None
    scope: Optional[str] = None

    def to_json(self) -> JsonObject:
        builder = JsonObjectBuilder()
        builder.put(OAUTH2_TOKEN_ENDPOINT, self.token_endpoint)
        builder.put(OAUTH2_SCOPE, self.scope)
        return builder.build()

    def hydrate_from_json(self, json: Optional[JsonObject]) -> None:
        if json is None:
            return
        super().hydrate_from_json(json)
        self.token_endpoint = json.get_string(OAUTH2_TOKEN_ENDPOINT)
        self.scope = json.get_string(OAUTH2_SCOPE)

    def validate(self, errors: ErrorAccumulator) -> None:
        self.validate_required_url(errors, OAUTH2_TOKEN_ENDPOINT, self.token_endpoint)
        self.validate_required_string(errors, OAUTH2_SCOPE, self.scope)


class ProviderAuthenticationMethods(Metadata):
    """Authentication methods offered by the Identity Provider, keyed by protocol URN."""

    def supports_oauth2_jwt(self) -> bool:
        return self.has_extension(OAUTH2_JWT_PROFILE)

    def to_json(self) -> JsonObject:
        builder = JsonObjectBuilder(PROVIDER_AUTHENTICATION_METHODS)
        builder.put_all(super().to_json())
        return builder.build()

    def hydrate_from_json(self, json: Optional[JsonObject]) -> None:
        if json is None:
            return
        json = json.unwrap_object_if_needed(PROVIDER_AUTHENTICATION_METHODS)
        super().hydrate_from_json(json)
        self.extensions = {}
        for protocol in json.keys():
            if protocol == OAUTH2_JWT_PROFILE:
                method = self.hydrate_child(json, protocol, Oauth2JwtClientMetadata)
                if method is not None:
                    self.add_extension(protocol, method)
            else:
                json.errors.add(
                    f"Unsupported '{json.json_path or PROVIDER_AUTHENTICATION_METHODS}' "
                    f"(value='{protocol}')"
                )

    def validate(self, errors: ErrorAccumulator) -> None:
        for method in self.extensions.values():
            method.validate(errors)


class ScimRegistrationRequestExtension(Metadata):
    provider_contact_information: Optional[ProviderContactInformation] = None
    provider_authentication_methods: Optional[ProviderAuthenticationMethods] = None

    def to_json(self) -> JsonObject:
        builder = JsonObjectBuilder()
        if self.provider_contact_information is not None:
            builder.put_all(self.provider_contact_information.to_json())
        if self.provider_authentication_methods is not None:
            builder.put_all(self.provider_authentication_methods.to_json())
        return builder.build()

    def hydrate_from_json(self, json: Optional[JsonObject]) -> None:
        if json is None:
            return
        super().hydrate_from_json(json)
        self.provider_contact_information = self.hydrate_child(
            json, PROVIDER_CONTACT_INFORMATION, ProviderContactInformation
        )
        self.provider_authentication_methods = self.hydrate_child(
            json, PROVIDER_AUTHENTICATION_METHODS, ProviderAuthenticationMethods
        )

    def validate(self, errors: ErrorAccumulator) -> None:
        self.validate_required_object(
            errors, PROVIDER_CONTACT_INFORMATION, self.provider_contact_information
        )
        self.validate_required_object(
            errors, PROVIDER_AUTHENTICATION_METHODS, self.provider_authentication_methods
        )
        if self.provider_contact_information is not None:
            self.provider_contact_information.validate(errors)
        if self.provider_authentication_methods is not None:
            self.provider_authentication_methods.validate(errors)


class ScimRegistrationResponseExtension(Metadata):
    scim_service_uri: Optional[str] = None
    provider_authentication_method: Optional[str] = None
    provider_authentication_metadata: Optional[Oauth2JwtServiceMetadata] = None

    def to_json(self) -> JsonObject:
        builder = JsonObjectBuilder()
        builder.put(SCIM_SERVICE_URI, self.scim_service_uri)
        builder.put(PROVIDER_AUTHENTICATION_METHOD, self.provider_authentication_method)
        if self.provider_authentication_method and self.provider_authentication_metadata:
            builder.put(
                self.provider_authentication_method,
                self.provider_authentication_metadata.to_json(),
            )
        return builder.build()

    def hydrate_from_json(self, json: Optional[JsonObject]) -> None:
        if json is None:
            return
        super().hydrate_from_json(json)
        self.scim_service_uri = json.get_string(SCIM_SERVICE_URI)
        self.provider_authentication_method = None
        self.provider_authentication_metadata = None

        protocol = json.get_string(PROVIDER_AUTHENTICATION_METHOD)
        if protocol is None:
            return
        if protocol not in PROVIDER_AUTHENTICATION_PROTOCOLS:
            json.errors.add(
                f"Unsupported '{PROVIDER_AUTHENTICATION_METHOD}' (value='{protocol}')"
            )
            return
        self.provider_authentication_method = protocol
        self.provider_authentication_metadata = self.hydrate_child(
            json, protocol, Oauth2JwtServiceMetadata
        )

    def validate(self, errors: ErrorAccumulator) -> None:
        self.validate_required_url(errors, SCIM_SERVICE_URI, self.scim_service_uri)
        self.validate_required_string(
            errors, PROVIDER_AUTHENTICATION_METHOD, self.provider_authentication_method
        )
        if self.provider_authentication_method is not None:
            self.validate_required_object(
                errors,
                self.provider_authentication_method,
                self.provider_authentication_metadata,
            )
        if self.provider_authentication_metadata is not None:
            self.provider_authentication_metadata.validate(errors)


class EnterpriseScim(Profile):
    urn = ENTERPRISE_SCIM
    extension_types = {
        ExtensionPoint.APPLICATION_PROVIDER_METADATA: ScimApplicationProviderExtension,
        ExtensionPoint.REGISTRATION_REQUEST: ScimRegistrationRequestExtension,
        ExtensionPoint.REGISTRATION_RESPONSE: ScimRegistrationResponseExtension,
    }
    required_extensions = frozenset(extension_types)
