"""Tests for configuration loading."""

import pytest
from pydantic import ValidationError

from fastfed.config import DEFAULT_CONFIG, FastFedConfig, load_config
from fastfed.constants import ENTERPRISE_SAML, ENTERPRISE_SCIM, SCIM_SCHEMA_GRAMMAR
from fastfed.profiles import KNOWN_PROFILES, Profile


def test_defaults():
    config = FastFedConfig()

    assert config.preferred_schema_grammar == SCIM_SCHEMA_GRAMMAR
    assert config.scim_can_support_nested_groups is False
    assert config.scim_max_group_membership_changes == 100
    assert config.profile_registry.all_urns() == {ENTERPRISE_SAML, ENTERPRISE_SCIM}


def test_load_config_from_env(tmp_path, monkeypatch):
    config_path = tmp_path / "fastfed.yaml"
    config_path.write_text(
        """
scim_can_support_nested_groups: true
scim_max_group_membership_changes: 250
supported_licenses:
  - https://licenses.example.com/fastfed
"""
    )
    monkeypatch.setenv("FASTFED_CONFIG", str(config_path))

    config = load_config()
    assert config.scim_can_support_nested_groups is True
    assert config.scim_max_group_membership_changes == 250
    assert config.supported_licenses == ("https://licenses.example.com/fastfed",)


def test_load_config_missing_file_uses_defaults(tmp_path):
    config = load_config(str(tmp_path / "absent.yaml"))

    assert config.scim_max_group_membership_changes == 100


def test_load_config_rejects_unknown_schema_grammar(tmp_path, monkeypatch):
    monkeypatch.setenv("FASTFED_PREFERRED_SCHEMA_GRAMMAR", "urn:example:unknown")

    with pytest.raises(ValidationError):
        load_config(str(tmp_path / "absent.yaml"))


def test_group_membership_default_must_be_within_limits():
    with pytest.raises(ValidationError) as exc_info:
        FastFedConfig(scim_max_group_membership_changes=5000)

    assert "must be between 100 and 1000 (received: 5000)" in str(exc_info.value)


def test_config_is_immutable():
    with pytest.raises(ValidationError):
        DEFAULT_CONFIG.scim_max_group_membership_changes = 200


def test_with_profile_leaves_original_registry_untouched():
    class CustomProfile(Profile):
        urn = "urn:example:fastfed:custom"

    config = DEFAULT_CONFIG.with_profile(CustomProfile())

    assert "urn:example:fastfed:custom" in config.profile_registry
    assert "urn:example:fastfed:custom" not in DEFAULT_CONFIG.profile_registry
    assert "urn:example:fastfed:custom" not in KNOWN_PROFILES
