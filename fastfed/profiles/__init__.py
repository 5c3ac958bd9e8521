"""Authentication and provisioning profiles known to the handshake engine."""

from __future__ import annotations

from .base import Profile
from .registry import ProfileRegistry
from .saml import EnterpriseSaml
from .scim import EnterpriseScim

# Profiles available to the default configuration. Treat as read-only; use
# ``FastFedConfig.with_profile`` to register additional profiles.
KNOWN_PROFILES = ProfileRegistry([EnterpriseSaml(), EnterpriseScim()])


__all__ = [
    "Profile",
    "ProfileRegistry",
    "EnterpriseSaml",
    "EnterpriseScim",
    "KNOWN_PROFILES",
]
