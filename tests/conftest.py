"""Shared documents and objects for the handshake tests."""

import copy
import json
import time

import pytest

from fastfed.config import DEFAULT_CONFIG
from fastfed.constants import (
    ENTERPRISE_SAML,
    ENTERPRISE_SCIM,
    FASTFED_LICENSE,
    OAUTH2_JWT_PROFILE,
    SCIM_SCHEMA_GRAMMAR,
)
from fastfed.contract import Contract
from fastfed.metadata import ApplicationProviderMetadata, IdentityProviderMetadata
from fastfed.security import JwtCodec

CONTACT = {
    "organization": "Example Inc.",
    "phone": "+1-800-555-5555",
    "email": "support@example.com",
}

IDP_METADATA = {
    "identity_provider": {
        "entity_id": "https://tenant-12345.idp.example.com/",
        "provider_domain": "example.com",
        "provider_contact_information": CONTACT,
        "display_settings": {
            "display_name": "Example Identity Provider",
            "logo_uri": "https://idp.example.com/images/logo.png",
            "icon_uri": "https://idp.example.com/images/icon.png",
            "license": FASTFED_LICENSE,
        },
        "capabilities": {
            "authentication_profiles": [ENTERPRISE_SAML],
            "provisioning_profiles": [ENTERPRISE_SCIM],
            "schema_grammars": [SCIM_SCHEMA_GRAMMAR],
            "signing_algorithms": ["ES512", "RS256"],
        },
        "jwks_uri": "https://tenant-12345.idp.example.com/keys",
        "fastfed_handshake_start_uri": "https://tenant-12345.idp.example.com/fastfed/start",
    }
}

SAML_DESIRED_ATTRIBUTES = {
    SCIM_SCHEMA_GRAMMAR: {
        "required_user_attributes": [
            "externalId",
            "userName",
            "emails[primary eq true].value",
        ],
        "optional_user_attributes": ["displayName", "phoneNumbers[primary eq true].value"],
    }
}

SCIM_DESIRED_ATTRIBUTES = {
    SCIM_SCHEMA_GRAMMAR: {
        "required_user_attributes": ["externalId", "userName", "active"],
        "optional_user_attributes": ["displayName"],
        "required_group_attributes": ["displayName", "externalId"],
        "optional_group_attributes": ["members"],
    }
}

APP_METADATA = {
    "application_provider": {
        "entity_id": "https://tenant-67890.app.example.com/",
        "provider_domain": "app.example.com",
        "provider_contact_information": CONTACT,
        "display_settings": {
            "display_name": "Example Application Provider",
            "logo_uri": "https://app.example.com/images/logo.png",
            "icon_uri": "https://app.example.com/images/icon.png",
            "license": FASTFED_LICENSE,
        },
        "capabilities": {
            "authentication_profiles": [ENTERPRISE_SAML],
            "provisioning_profiles": [ENTERPRISE_SCIM],
            "schema_grammars": [SCIM_SCHEMA_GRAMMAR],
            "signing_algorithms": ["ES512", "RS256"],
        },
        ENTERPRISE_SAML: {"desired_attributes": SAML_DESIRED_ATTRIBUTES},
        ENTERPRISE_SCIM: {
            "can_support_nested_groups": True,
            "max_group_membership_changes": 500,
            "desired_attributes": SCIM_DESIRED_ATTRIBUTES,
        },
        "fastfed_handshake_register_uri": "https://tenant-67890.app.example.com/fastfed/register",
    }
}

MINIMAL_APP_METADATA = {
    "application_provider": {
        "entity_id": "https://tenant-67890.app.example.com/",
        "provider_domain": "app.example.com",
        "provider_contact_information": CONTACT,
        "display_settings": {
            "display_name": "Example Application Provider",
            "license": FASTFED_LICENSE,
        },
        "capabilities": {
            "schema_grammars": [SCIM_SCHEMA_GRAMMAR],
            "signing_algorithms": ["RS256"],
        },
        "fastfed_handshake_register_uri": "https://tenant-67890.app.example.com/fastfed/register",
    }
}

REGISTRATION_REQUEST = {
    "iss": "https://tenant-12345.idp.example.com",
    "aud": "https://tenant-67890.app.example.com",
    "exp": 1234567890,
    "authentication_profiles": [ENTERPRISE_SAML],
    ENTERPRISE_SAML: {
        "saml_metadata_uri": "https://tenant-12345.idp.example.com/saml-metadata.xml"
    },
    "provisioning_profiles": [ENTERPRISE_SCIM],
    ENTERPRISE_SCIM: {
        "provider_contact_information": CONTACT,
        "provider_authentication_methods": {
            OAUTH2_JWT_PROFILE: {"jwks_uri": "https://provisioning.example.com/keys"}
        },
    },
}

REGISTRATION_RESPONSE = {
    "fastfed_handshake_finalize_uri": "https://tenant-67890.app.example.com/fastfed/finalize",
    ENTERPRISE_SAML: {
        "saml_metadata_uri": "https://tenant-67890.app.example.com/saml-metadata.xml"
    },
    ENTERPRISE_SCIM: {
        "scim_service_uri": "https://tenant-67890.app.example.com/scim/v2",
        "provider_authentication_method": OAUTH2_JWT_PROFILE,
        OAUTH2_JWT_PROFILE: {
            "token_endpoint": "https://tenant-67890.app.example.com/oauth/token",
            "scope": "scim",
        },
    },
}

SIGNING_KEY = "fastfed-test-signing-key-0123456789abcdef"


@pytest.fixture
def config():
    return DEFAULT_CONFIG


@pytest.fixture
def idp_metadata_doc():
    return copy.deepcopy(IDP_METADATA)


@pytest.fixture
def app_metadata_doc():
    return copy.deepcopy(APP_METADATA)


@pytest.fixture
def minimal_app_metadata_doc():
    return copy.deepcopy(MINIMAL_APP_METADATA)


@pytest.fixture
def registration_request_doc():
    return copy.deepcopy(REGISTRATION_REQUEST)


@pytest.fixture
def registration_response_doc():
    return copy.deepcopy(REGISTRATION_RESPONSE)


@pytest.fixture
def future_registration_request_doc():
    doc = copy.deepcopy(REGISTRATION_REQUEST)
    doc["exp"] = int(time.time()) + 600
    return doc


@pytest.fixture
def signing_key():
    return SIGNING_KEY


@pytest.fixture
def jwt_codec():
    return JwtCodec(
        key=SIGNING_KEY,
        algorithm="HS256",
        audience=REGISTRATION_REQUEST["aud"],
    )


@pytest.fixture
def idp_metadata(config, idp_metadata_doc):
    return IdentityProviderMetadata.from_json(config, json.dumps(idp_metadata_doc))


@pytest.fixture
def app_metadata(config, app_metadata_doc):
    return ApplicationProviderMetadata.from_json(config, json.dumps(app_metadata_doc))


@pytest.fixture
def contract(idp_metadata, app_metadata):
    return Contract.negotiate(idp_metadata, app_metadata)
