"""fastfed: capability negotiation and contract lifecycle for the FastFed handshake."""

from .config import DEFAULT_CONFIG, FastFedConfig, load_config
from .compatibility import assert_compatibility, evaluate_compatibility, get_shared_capabilities
from .contract import (
    Contract,
    ContractChange,
    ContractChangeType,
    ContractProposal,
    ContractProposalStatus,
    EnabledProfiles,
)
from .errors import (
    ErrorAccumulator,
    FastFedError,
    FastFedSecurityError,
    IncompatibleProvidersError,
    InvalidChangeError,
    InvalidMetadataError,
)
from .metadata import (
    ApplicationProviderMetadata,
    Capabilities,
    IdentityProviderMetadata,
    RegistrationRequest,
    RegistrationResponse,
)
from .profiles import KNOWN_PROFILES, Profile, ProfileRegistry

__version__ = "0.1.0"
__all__ = [
    "DEFAULT_CONFIG",
    "FastFedConfig",
    "load_config",
    "assert_compatibility",
    "evaluate_compatibility",
    "get_shared_capabilities",
    "Contract",
    "ContractChange",
    "ContractChangeType",
    "ContractProposal",
    "ContractProposalStatus",
    "EnabledProfiles",
    "ErrorAccumulator",
    "FastFedError",
    "FastFedSecurityError",
    "IncompatibleProvidersError",
    "InvalidChangeError",
    "InvalidMetadataError",
    "ApplicationProviderMetadata",
    "Capabilities",
    "IdentityProviderMetadata",
    "RegistrationRequest",
    "RegistrationResponse",
    "KNOWN_PROFILES",
    "Profile",
    "ProfileRegistry",
]
