"""Enterprise SAML 2.0 authentication profile."""

from __future__ import annotations

from typing import Optional

from ..constants import DESIRED_ATTRIBUTES, ENTERPRISE_SAML, SAML_METADATA_URI, ExtensionPoint
from ..errors import ErrorAccumulator
from ..json_object import JsonObject, JsonObjectBuilder
from ..metadata.attributes import DesiredAttributes
from ..metadata.base import Metadata
from .base import Profile


class SamlApplicationProviderExtension(Metadata):
    desired_attributes: Optional[DesiredAttributes] = None

    def to_json(self) -> JsonObject:
        builder = JsonObjectBuilder()
        if self.desired_attributes is not None:
            builder.put_all(self.desired_attributes.to_json())
        return builder.build()

    def hydrate_from_json(self, json: Optional[JsonObject]) -> None:
        if json is None:
            return
        super().hydrate_from_json(json)
        self.desired_attributes = self.hydrate_child(json, DESIRED_ATTRIBUTES, DesiredAttributes)

    def validate(self, errors: ErrorAccumulator) -> None:
        self.validate_required_object(errors, DESIRED_ATTRIBUTES, self.desired_attributes)
        if self.desired_attributes is not None:
            self.desired_attributes.validate(errors)


class SamlRegistrationExtension(Metadata):
    """SAML data carried by both the registration request and response."""

    saml_metadata_uri: Optional[str] = None

    def to_json(self) -> JsonObject:
        return JsonObjectBuilder().put(SAML_METADATA_URI, self.saml_metadata_uri).build()

    def hydrate_from_json(self, json: Optional[JsonObject]) -> None:
        if json is None:
            return
        super().hydrate_from_json(json)
        self.saml_metadata_uri = json.get_string(SAML_METADATA_URI)

    def validate(self, errors: ErrorAccumulator) -> None:
        self.validate_required_url(errors, SAML_METADATA_URI, self.saml_metadata_uri)


class EnterpriseSaml(Profile):
    urn = ENTERPRISE_SAML
    extension_types = {
        ExtensionPoint.APPLICATION_PROVIDER_METADATA: SamlApplicationProviderExtension,
        ExtensionPoint.REGISTRATION_REQUEST: SamlRegistrationExtension,
        ExtensionPoint.REGISTRATION_RESPONSE: SamlRegistrationExtension,
    }
    required_extensions = frozenset(extension_types)
