"""Lookup table from profile URN to profile descriptor."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Set

from .base import Profile

logger = logging.getLogger(__name__)


class ProfileRegistry:
    """Profiles the engine knows how to hydrate and validate."""

    def __init__(self, profiles: Iterable[Profile] = ()) -> None:
        self._profiles: Dict[str, Profile] = {}
        for profile in profiles:
            self.add(profile)

    def add(self, profile: Profile) -> None:
        if not profile.urn:
            raise ValueError("profile urn must be a non-empty string")
        logger.debug(f"Registering profile {profile.urn}")
        self._profiles[profile.urn] = profile

    def contains_urn(self, urn: str) -> bool:
        return urn in self._profiles

    def get_by_urn(self, urn: str) -> Optional[Profile]:
        return self._profiles.get(urn)

    def all_profiles(self) -> List[Profile]:
        return list(self._profiles.values())

    def all_urns(self) -> Set[str]:
        return set(self._profiles)

    def copy(self) -> "ProfileRegistry":
        return ProfileRegistry(self._profiles.values())

    def __contains__(self, urn: object) -> bool:
        return urn in self._profiles

    def __len__(self) -> int:
        return len(self._profiles)

    def __repr__(self) -> str:
        return f"ProfileRegistry({sorted(self._profiles)!r})"
