"""Contracts, contract proposals and contract change classification."""

from __future__ import annotations

from .change import ContractChange, ContractChangeType
from .models import Contract, EnabledProfiles
from .proposal import ContractProposal, ContractProposalStatus
from .providers import ApplicationProvider, IdentityProvider, Provider

__all__ = [
    "Provider",
    "IdentityProvider",
    "ApplicationProvider",
    "EnabledProfiles",
    "Contract",
    "ContractProposal",
    "ContractProposalStatus",
    "ContractChange",
    "ContractChangeType",
]
