"""Capabilities published by a provider."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Set

from pydantic import Field

from ..constants import (
    AUTHENTICATION_PROFILES,
    CAPABILITIES,
    PROVISIONING_PROFILES,
    SCHEMA_GRAMMARS,
    SIGNING_ALGORITHMS,
)
from ..errors import ErrorAccumulator
from ..json_object import JsonObject, JsonObjectBuilder
from .base import Metadata

if TYPE_CHECKING:
    from ..profiles.registry import ProfileRegistry


class Capabilities(Metadata):
    """The four capability sets of a provider. An absent set is an empty set."""

    authentication_profiles: Set[str] = Field(default_factory=set)
    provisioning_profiles: Set[str] = Field(default_factory=set)
    schema_grammars: Set[str] = Field(default_factory=set)
    signing_algorithms: Set[str] = Field(default_factory=set)

    def all_profiles(self) -> Set[str]:
        """Union of the authentication and provisioning profiles."""
        return self.authentication_profiles | self.provisioning_profiles

    def filter_to_known_profiles(
        self, registry: Optional["ProfileRegistry"] = None
    ) -> "Capabilities":
        """Return a copy without profiles that ``registry`` does not know."""
        if registry is None:
            registry = self.configuration.profile_registry
        known = registry.all_urns()
        filtered = self.copy()
        filtered.authentication_profiles = self.authentication_profiles & known
        filtered.provisioning_profiles = self.provisioning_profiles & known
        return filtered

    def to_json(self) -> JsonObject:
        builder = JsonObjectBuilder(CAPABILITIES)
        builder.put_all(super().to_json())
        builder.put(AUTHENTICATION_PROFILES, self.authentication_profiles)
        builder.put(PROVISIONING_PROFILES, self.provisioning_profiles)
        builder.put(SCHEMA_GRAMMARS, self.schema_grammars)
        builder.put(SIGNING_ALGORITHMS, self.signing_algorithms)
        return builder.build()

    def hydrate_from_json(self, json: Optional[JsonObject]) -> None:
        if json is None:
            return
        json = json.unwrap_object_if_needed(CAPABILITIES)
        super().hydrate_from_json(json)
        self.authentication_profiles = json.get_string_set(AUTHENTICATION_PROFILES) or set()
        self.provisioning_profiles = json.get_string_set(PROVISIONING_PROFILES) or set()
        self.schema_grammars = json.get_string_set(SCHEMA_GRAMMARS) or set()
        self.signing_algorithms = json.get_string_set(SIGNING_ALGORITHMS) or set()

    def validate(self, errors: ErrorAccumulator) -> None:
        self.validate_optional_string_collection(
            errors, AUTHENTICATION_PROFILES, self.authentication_profiles
        )
        self.validate_optional_string_collection(
            errors, PROVISIONING_PROFILES, self.provisioning_profiles
        )
        self.validate_optional_string_collection(errors, SCHEMA_GRAMMARS, self.schema_grammars)
        self.validate_optional_string_collection(
            errors, SIGNING_ALGORITHMS, self.signing_algorithms
        )
