from __future__ import annotations

import os
from typing import Any, Dict, Optional, Tuple

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .constants import FASTFED_LICENSE, SCHEMA_GRAMMARS_SUPPORTED, SCIM_SCHEMA_GRAMMAR
from .profiles import KNOWN_PROFILES, Profile, ProfileRegistry


class FastFedConfig(BaseModel):
    """Process-wide settings shared by every document.

    Instances are immutable and are shared, never copied, by the documents
    that reference them.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    profile_registry: ProfileRegistry = Field(default_factory=lambda: KNOWN_PROFILES)
    preferred_schema_grammar: str = SCIM_SCHEMA_GRAMMAR
    supported_licenses: Tuple[str, ...] = (FASTFED_LICENSE,)

    scim_can_support_nested_groups: bool = False
    scim_max_group_membership_changes: int = 100
    scim_max_group_membership_changes_lower_limit: int = 100
    scim_max_group_membership_changes_upper_limit: int = 1000

    @field_validator("preferred_schema_grammar")
    @classmethod
    def _ensure_schema_grammar(cls, v: str) -> str:
        if v not in SCHEMA_GRAMMARS_SUPPORTED:
            raise ValueError(f"Unsupported schema grammar: {v}")
        return v

    @model_validator(mode="after")
    def _check_group_membership_bounds(self) -> "FastFedConfig":
        lower = self.scim_max_group_membership_changes_lower_limit
        upper = self.scim_max_group_membership_changes_upper_limit
        if lower > upper:
            raise ValueError(
                "scim_max_group_membership_changes_lower_limit must not exceed the upper limit"
            )
        value = self.scim_max_group_membership_changes
        if not lower <= value <= upper:
            raise ValueError(
                f"scim_max_group_membership_changes must be between {lower} and {upper} "
                f"(received: {value})"
            )
        return self

    def with_profile(self, profile: Profile) -> "FastFedConfig":
        """Return a copy whose registry also contains ``profile``."""
        registry = self.profile_registry.copy()
        registry.add(profile)
        return self.model_copy(update={"profile_registry": registry})

    def __deepcopy__(self, memo: Optional[Dict[int, Any]] = None) -> "FastFedConfig":
        return self


DEFAULT_CONFIG = FastFedConfig()


def load_config(path: Optional[str] = None) -> FastFedConfig:
    """Load configuration from YAML file.

    Args:
        path: Optional path to config file. Falls back to FASTFED_CONFIG env
            variable or 'fastfed.yaml' in the current directory.
    """

    config_path = path or os.getenv("FASTFED_CONFIG", "fastfed.yaml")
    data: Dict[str, Any] = {}
    if os.path.exists(config_path):
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

    env_grammar = os.getenv("FASTFED_PREFERRED_SCHEMA_GRAMMAR")
    if env_grammar:
        data["preferred_schema_grammar"] = env_grammar
    return FastFedConfig(**data)
