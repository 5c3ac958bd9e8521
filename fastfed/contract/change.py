"""Classification of the difference between two contract snapshots."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Optional, Set

from ..compatibility import get_shared_capabilities
from ..errors import FastFedSecurityError
from ..metadata.provider import (
    ApplicationProviderMetadata,
    CommonProviderMetadata,
    DisplaySettings,
    IdentityProviderMetadata,
    ProviderContactInformation,
)
from .models import Contract, EnabledProfiles
from .providers import Provider

logger = logging.getLogger(__name__)


class ContractChangeType(str, Enum):
    NONE = "None"
    CREATE = "Create"
    METADATA_REFRESH = "MetadataRefresh"
    PROFILE_CHANGE = "ProfileChange"
    TERMINATE = "Terminate"


class ContractChange:
    """What changed between ``old_contract`` and ``new_contract``.

    The change type is decided in order: no old contract is ``Create``; no
    enabled profiles in the new contract is ``Terminate``; any profile added
    or removed is ``ProfileChange``; any other difference is
    ``MetadataRefresh``; otherwise ``None``.
    """

    def __init__(self, old_contract: Optional[Contract], new_contract: Contract) -> None:
        if new_contract is None:
            raise ValueError("new_contract must not be None")
        self.old_contract = old_contract
        self.new_contract = new_contract

        configuration = new_contract.configuration
        old = self._enabled(old_contract, configuration)
        new = self._enabled(new_contract, configuration)
        self.authentication_profiles_added: Set[str] = (
            new.authentication_profiles - old.authentication_profiles
        )
        self.authentication_profiles_removed: Set[str] = (
            old.authentication_profiles - new.authentication_profiles
        )
        self.provisioning_profiles_added: Set[str] = (
            new.provisioning_profiles - old.provisioning_profiles
        )
        self.provisioning_profiles_removed: Set[str] = (
            old.provisioning_profiles - new.provisioning_profiles
        )
        self.change_type = self._classify(new)
        logger.info(f"Classified contract change as {self.change_type.value}")

    @staticmethod
    def _enabled(contract: Optional[Contract], configuration: Any) -> EnabledProfiles:
        if contract is None or contract.enabled_profiles is None:
            return EnabledProfiles(configuration)
        return contract.enabled_profiles

    def _classify(self, new: EnabledProfiles) -> ContractChangeType:
        if self.old_contract is None:
            return ContractChangeType.CREATE
        if new.is_empty():
            return ContractChangeType.TERMINATE
        if self.has_changes_to_authentication_profiles() or (
            self.has_changes_to_provisioning_profiles()
        ):
            return ContractChangeType.PROFILE_CHANGE
        if self.old_contract != self.new_contract:
            return ContractChangeType.METADATA_REFRESH
        return ContractChangeType.NONE

    def has_changes_to_authentication_profiles(self) -> bool:
        return bool(self.authentication_profiles_added or self.authentication_profiles_removed)

    def has_changes_to_provisioning_profiles(self) -> bool:
        return bool(self.provisioning_profiles_added or self.provisioning_profiles_removed)

    def __repr__(self) -> str:
        return f"ContractChange(change_type={self.change_type.value!r})"

    # ------------------------------------------------------------------
    @classmethod
    def background_refresh(
        cls,
        current_contract: Contract,
        idp_metadata: IdentityProviderMetadata,
        app_metadata: ApplicationProviderMetadata,
    ) -> "ContractChange":
        """Refresh ``current_contract`` from freshly retrieved metadata.

        Only contact information, display settings and signing algorithms
        are taken from the metadata, and signing algorithms are only ever
        added. ``current_contract`` itself is left untouched.

        Raises:
            FastFedSecurityError: if the refresh would change anything beyond
                provider metadata.
        """
        if current_contract is None or idp_metadata is None or app_metadata is None:
            raise ValueError("current_contract, idp_metadata and app_metadata are required")

        new_contract = current_contract.copy()
        _refresh_provider(new_contract.identity_provider, idp_metadata)
        _refresh_provider(new_contract.application_provider, app_metadata)

        if idp_metadata.capabilities is not None and app_metadata.capabilities is not None:
            shared = get_shared_capabilities(idp_metadata.capabilities, app_metadata.capabilities)
            new_contract.signing_algorithms = (
                current_contract.signing_algorithms | shared.signing_algorithms
            )

        change = cls(current_contract, new_contract)
        if change.change_type not in (
            ContractChangeType.NONE,
            ContractChangeType.METADATA_REFRESH,
        ):
            logger.error(
                f"Background refresh produced a {change.change_type.value} change; aborting"
            )
            raise FastFedSecurityError(
                "Illegal contract change during background refresh "
                f"(changeType='{change.change_type.value}')"
            )
        return change


def _refresh_provider(provider: Optional[Provider], metadata: CommonProviderMetadata) -> None:
    if provider is None:
        return

    contact = metadata.provider_contact_information
    if contact is not None:
        if provider.provider_contact_information is None:
            provider.provider_contact_information = ProviderContactInformation(
                provider.configuration
            )
        provider.provider_contact_information.organization = contact.organization
        provider.provider_contact_information.phone = contact.phone
        provider.provider_contact_information.email = contact.email

    display = metadata.display_settings
    if display is not None:
        if provider.display_settings is None:
            provider.display_settings = DisplaySettings(provider.configuration)
        provider.display_settings.display_name = display.display_name
        provider.display_settings.logo_uri = display.logo_uri
        provider.display_settings.icon_uri = display.icon_uri
