import pytest

from fastfed.constants import ENTERPRISE_SAML, ENTERPRISE_SCIM, SCIM_SCHEMA_GRAMMAR
from fastfed.errors import InvalidMetadataError
from fastfed.metadata import Capabilities


def test_hydrate_wrapped_capabilities(config):
    capabilities = Capabilities.from_json(
        config,
        '{"capabilities": {"authentication_profiles": ["%s"], '
        '"signing_algorithms": ["RS256", "RS256", "ES512"]}}' % ENTERPRISE_SAML,
    )

    assert capabilities.authentication_profiles == {ENTERPRISE_SAML}
    assert capabilities.provisioning_profiles == set()
    assert capabilities.signing_algorithms == {"RS256", "ES512"}
    assert capabilities.json_path == "capabilities"


def test_all_profiles_and_filter_to_known_profiles(config):
    capabilities = Capabilities(
        config,
        authentication_profiles={ENTERPRISE_SAML, "urn:example:unknown"},
        provisioning_profiles={ENTERPRISE_SCIM},
        schema_grammars={SCIM_SCHEMA_GRAMMAR},
    )

    filtered = capabilities.filter_to_known_profiles()

    assert filtered.all_profiles() == {ENTERPRISE_SAML, ENTERPRISE_SCIM}
    assert filtered.schema_grammars == {SCIM_SCHEMA_GRAMMAR}
    assert "urn:example:unknown" in capabilities.authentication_profiles


def test_to_json_is_wrapped_and_sorted(config):
    capabilities = Capabilities(config, signing_algorithms={"RS256", "ES512"})

    assert capabilities.to_json().to_dict() == {
        "capabilities": {"signing_algorithms": ["ES512", "RS256"]}
    }


def test_non_string_members_are_rejected(config):
    with pytest.raises(InvalidMetadataError) as exc_info:
        Capabilities.from_json(config, '{"capabilities": {"signing_algorithms": [1]}}')

    assert exc_info.value.errors.errors == [
        'Invalid type for "capabilities.signing_algorithms" '
        "(expected: Array containing Strings, received: Array containing Numbers)"
    ]


def test_copy_is_independent(config):
    original = Capabilities(config, schema_grammars={SCIM_SCHEMA_GRAMMAR})
    duplicate = original.copy()
    duplicate.schema_grammars.add("urn:example:grammar")

    assert original.schema_grammars == {SCIM_SCHEMA_GRAMMAR}
    assert duplicate.configuration is original.configuration
    assert duplicate != original
