import json
from typing import Optional

import pytest

from fastfed.config import DEFAULT_CONFIG
from fastfed.constants import ENTERPRISE_SAML, ENTERPRISE_SCIM, ExtensionPoint
from fastfed.errors import ErrorAccumulator, InvalidMetadataError
from fastfed.json_object import JsonObject, JsonObjectBuilder
from fastfed.metadata import ApplicationProviderMetadata, Metadata
from fastfed.profiles import (
    KNOWN_PROFILES,
    EnterpriseSaml,
    EnterpriseScim,
    Profile,
    ProfileRegistry,
)
from fastfed.profiles.saml import SamlApplicationProviderExtension
from fastfed.profiles.scim import ScimApplicationProviderExtension

CUSTOM_URN = "urn:example:fastfed:1.0:authentication:custom"


class CustomExtension(Metadata):
    tenant: Optional[str] = None

    def to_json(self) -> JsonObject:
        return JsonObjectBuilder().put("tenant", self.tenant).build()

    def hydrate_from_json(self, json: Optional[JsonObject]) -> None:
        if json is None:
            return
        super().hydrate_from_json(json)
        self.tenant = json.get_string("tenant")

    def validate(self, errors: ErrorAccumulator) -> None:
        self.validate_required_string(errors, "tenant", self.tenant)


class CustomProfile(Profile):
    urn = CUSTOM_URN
    extension_types = {ExtensionPoint.APPLICATION_PROVIDER_METADATA: CustomExtension}
    required_extensions = frozenset(extension_types)


def test_known_profiles():
    assert len(KNOWN_PROFILES) == 2
    assert isinstance(KNOWN_PROFILES.get_by_urn(ENTERPRISE_SAML), EnterpriseSaml)
    assert isinstance(KNOWN_PROFILES.get_by_urn(ENTERPRISE_SCIM), EnterpriseScim)
    assert KNOWN_PROFILES.get_by_urn("urn:unknown") is None
    assert not KNOWN_PROFILES.contains_urn("urn:unknown")


def test_registry_rejects_profile_without_urn():
    with pytest.raises(ValueError):
        ProfileRegistry([Profile()])


def test_profile_extension_factories():
    saml = EnterpriseSaml()

    assert isinstance(
        saml.new_extension(ExtensionPoint.APPLICATION_PROVIDER_METADATA, DEFAULT_CONFIG),
        SamlApplicationProviderExtension,
    )
    assert saml.new_extension(ExtensionPoint.IDENTITY_PROVIDER_METADATA, DEFAULT_CONFIG) is None
    assert saml.requires_extension(ExtensionPoint.REGISTRATION_RESPONSE)
    assert not saml.requires_extension(ExtensionPoint.IDENTITY_PROVIDER_METADATA)


def test_scim_extension_takes_defaults_from_configuration():
    config = DEFAULT_CONFIG.model_copy(
        update={"scim_can_support_nested_groups": True, "scim_max_group_membership_changes": 300}
    )
    extension = EnterpriseScim().new_extension(
        ExtensionPoint.APPLICATION_PROVIDER_METADATA, config
    )

    assert isinstance(extension, ScimApplicationProviderExtension)
    assert extension.can_support_nested_groups is True
    assert extension.max_group_membership_changes == 300


def test_registered_profile_is_hydrated_and_validated(minimal_app_metadata_doc):
    config = DEFAULT_CONFIG.with_profile(CustomProfile())
    body = minimal_app_metadata_doc["application_provider"]
    body["capabilities"]["authentication_profiles"] = [CUSTOM_URN]
    body[CUSTOM_URN] = {"tenant": "acme"}

    metadata = ApplicationProviderMetadata.from_json(config, json.dumps(minimal_app_metadata_doc))

    extension = metadata.get_extension(CUSTOM_URN)
    assert isinstance(extension, CustomExtension)
    assert extension.tenant == "acme"
    assert metadata.to_json().to_dict()["application_provider"][CUSTOM_URN] == {"tenant": "acme"}


def test_registered_profile_requires_its_extension(minimal_app_metadata_doc):
    config = DEFAULT_CONFIG.with_profile(CustomProfile())
    body = minimal_app_metadata_doc["application_provider"]
    body["capabilities"]["authentication_profiles"] = [CUSTOM_URN]

    with pytest.raises(InvalidMetadataError) as exc_info:
        ApplicationProviderMetadata.from_json(config, json.dumps(minimal_app_metadata_doc))

    assert f'Missing value for "application_provider.{CUSTOM_URN}"' in exc_info.value.errors.errors


def test_unregistered_profile_extension_is_ignored(minimal_app_metadata_doc):
    body = minimal_app_metadata_doc["application_provider"]
    body["capabilities"]["authentication_profiles"] = [CUSTOM_URN]
    body[CUSTOM_URN] = {"tenant": "acme"}

    metadata = ApplicationProviderMetadata.from_json(
        DEFAULT_CONFIG, json.dumps(minimal_app_metadata_doc)
    )

    assert not metadata.has_extension(CUSTOM_URN)
    assert metadata.declared_known_profiles() == set()
