import json
from datetime import datetime, timezone

import jwt
import pytest

from fastfed.constants import ENTERPRISE_SAML, ENTERPRISE_SCIM, OAUTH2_JWT_PROFILE
from fastfed.errors import InvalidMetadataError
from fastfed.metadata import HandshakeFinalization, RegistrationRequest, RegistrationResponse


def test_registration_request_from_unverified_jwt(config, registration_request_doc, signing_key):
    compact = jwt.encode(registration_request_doc, signing_key, algorithm="HS256")

    request = RegistrationRequest.from_jwt(config, compact)

    assert request.issuer == "https://tenant-12345.idp.example.com"
    assert request.audience == "https://tenant-67890.app.example.com"
    assert request.expiration == datetime(2009, 2, 13, 23, 31, 30, tzinfo=timezone.utc)
    assert request.requested_profiles() == {ENTERPRISE_SAML, ENTERPRISE_SCIM}

    saml = request.get_extension(ENTERPRISE_SAML)
    assert saml.saml_metadata_uri == "https://tenant-12345.idp.example.com/saml-metadata.xml"
    scim = request.get_extension(ENTERPRISE_SCIM)
    assert scim.provider_contact_information.organization == "Example Inc."
    assert scim.provider_authentication_methods.supports_oauth2_jwt()


def test_registration_request_signed_round_trip(
    config, future_registration_request_doc, jwt_codec
):
    original = RegistrationRequest.from_jwt(
        config, jwt.encode(future_registration_request_doc, "unused-key-for-unverified-decode")
    )

    restored = RegistrationRequest.from_jwt(config, original.to_jwt(jwt_codec), jwt_codec)

    assert restored == original


def test_registration_request_requires_claims_and_extensions(config, registration_request_doc):
    del registration_request_doc["iss"]
    del registration_request_doc[ENTERPRISE_SCIM]

    with pytest.raises(InvalidMetadataError) as exc_info:
        RegistrationRequest.from_jwt(config, jwt.encode(registration_request_doc, "k" * 32))

    assert exc_info.value.errors.errors == [
        'Missing value for "iss"',
        f'Missing value for "{ENTERPRISE_SCIM}"',
    ]


def test_registration_request_rejects_unknown_authentication_method(
    config, registration_request_doc
):
    methods = registration_request_doc[ENTERPRISE_SCIM]["provider_authentication_methods"]
    methods["urn:example:bogus"] = {"jwks_uri": "https://example.com/keys"}

    with pytest.raises(InvalidMetadataError) as exc_info:
        RegistrationRequest.from_jwt(config, jwt.encode(registration_request_doc, "k" * 32))

    assert any("(value='urn:example:bogus')" in e for e in exc_info.value.errors.errors)


def test_registration_response(config, registration_response_doc):
    response = RegistrationResponse.from_json(
        config,
        json.dumps(registration_response_doc),
        enabled_profiles={ENTERPRISE_SAML, ENTERPRISE_SCIM},
    )

    assert response.handshake_finalize_uri.endswith("/fastfed/finalize")
    scim = response.get_extension(ENTERPRISE_SCIM)
    assert scim.scim_service_uri == "https://tenant-67890.app.example.com/scim/v2"
    assert scim.provider_authentication_method == OAUTH2_JWT_PROFILE
    assert scim.provider_authentication_metadata.scope == "scim"
    assert response.enabled_profiles == {ENTERPRISE_SAML, ENTERPRISE_SCIM}


def test_registration_response_only_requires_enabled_profile_extensions(
    config, registration_response_doc
):
    del registration_response_doc[ENTERPRISE_SCIM]

    response = RegistrationResponse.from_json(
        config, json.dumps(registration_response_doc), enabled_profiles={ENTERPRISE_SAML}
    )
    assert not response.has_extension(ENTERPRISE_SCIM)

    with pytest.raises(InvalidMetadataError) as exc_info:
        RegistrationResponse.from_json(
            config,
            json.dumps(registration_response_doc),
            enabled_profiles={ENTERPRISE_SAML, ENTERPRISE_SCIM},
        )
    assert exc_info.value.errors.errors == [f'Missing value for "{ENTERPRISE_SCIM}"']


def test_registration_response_rejects_unsupported_authentication_method(
    config, registration_response_doc
):
    registration_response_doc[ENTERPRISE_SCIM]["provider_authentication_method"] = "urn:bogus"

    with pytest.raises(InvalidMetadataError) as exc_info:
        RegistrationResponse.from_json(config, json.dumps(registration_response_doc))

    assert exc_info.value.errors.errors == [
        "Unsupported 'provider_authentication_method' (value='urn:bogus')"
    ]


def test_handshake_finalization(config, signing_key):
    compact = jwt.encode(
        {"iss": "https://idp.example.com", "aud": "https://app.example.com", "exp": 1234567890},
        signing_key,
        algorithm="HS256",
    )

    finalization = HandshakeFinalization.from_jwt(config, compact)

    assert finalization.audience == "https://app.example.com"
