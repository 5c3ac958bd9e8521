"""The contract negotiated between an Identity Provider and an Application Provider."""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Set

from pydantic import Field

from ..compatibility import assert_compatibility
from ..constants import (
    APPLICATION_PROVIDER,
    AUTHENTICATION_PROFILES,
    CONTRACT,
    ENABLED_PROFILES,
    IDENTITY_PROVIDER,
    PROVISIONING_PROFILES,
    SIGNING_ALGORITHMS,
)
from ..errors import ErrorAccumulator, FastFedSecurityError
from ..json_object import JsonObject, JsonObjectBuilder
from ..metadata.base import Metadata
from ..metadata.capabilities import Capabilities
from ..metadata.provider import ApplicationProviderMetadata, IdentityProviderMetadata
from ..metadata.registration import RegistrationRequest, RegistrationResponse
from ..security.tokens import JwtCodec
from .providers import ApplicationProvider, IdentityProvider

logger = logging.getLogger(__name__)


class EnabledProfiles(Metadata):
    """Profiles switched on for a contract."""

    authentication_profiles: Set[str] = Field(default_factory=set)
    provisioning_profiles: Set[str] = Field(default_factory=set)

    @classmethod
    def from_capabilities(cls, capabilities: Capabilities) -> "EnabledProfiles":
        return cls(
            capabilities.configuration,
            authentication_profiles=set(capabilities.authentication_profiles),
            provisioning_profiles=set(capabilities.provisioning_profiles),
        )

    def all_profiles(self) -> Set[str]:
        return self.authentication_profiles | self.provisioning_profiles

    def is_empty(self) -> bool:
        return not self.authentication_profiles and not self.provisioning_profiles

    def to_json(self) -> JsonObject:
        builder = JsonObjectBuilder(ENABLED_PROFILES)
        builder.put(AUTHENTICATION_PROFILES, self.authentication_profiles)
        builder.put(PROVISIONING_PROFILES, self.provisioning_profiles)
        return builder.build()

    def hydrate_from_json(self, json: Optional[JsonObject]) -> None:
        if json is None:
            return
        json = json.unwrap_object_if_needed(ENABLED_PROFILES)
        super().hydrate_from_json(json)
        self.authentication_profiles = json.get_string_set(AUTHENTICATION_PROFILES) or set()
        self.provisioning_profiles = json.get_string_set(PROVISIONING_PROFILES) or set()

    def validate(self, errors: ErrorAccumulator) -> None:
        self.validate_optional_string_collection(
            errors, AUTHENTICATION_PROFILES, self.authentication_profiles
        )
        self.validate_optional_string_collection(
            errors, PROVISIONING_PROFILES, self.provisioning_profiles
        )


def _format(values: Iterable[str]) -> str:
    return "[" + ", ".join(sorted(values)) + "]"


class Contract(Metadata):
    """Durable record of what two providers agreed during the handshake.

    A contract is created with :meth:`negotiate` (or hydrated from storage)
    and is afterwards changed only by the two overlay operations.
    """

    identity_provider: Optional[IdentityProvider] = None
    application_provider: Optional[ApplicationProvider] = None
    enabled_profiles: Optional[EnabledProfiles] = None
    signing_algorithms: Set[str] = Field(default_factory=set)

    @classmethod
    def negotiate(
        cls,
        idp_metadata: IdentityProviderMetadata,
        app_metadata: ApplicationProviderMetadata,
    ) -> "Contract":
        """Build a contract from the two providers' metadata.

        Raises:
            IncompatibleProvidersError: listing every incompatible dimension.
        """
        shared = assert_compatibility(idp_metadata, app_metadata)
        contract = cls(
            app_metadata.configuration,
            identity_provider=IdentityProvider.from_metadata(idp_metadata),
            application_provider=ApplicationProvider.from_metadata(app_metadata),
            enabled_profiles=EnabledProfiles.from_capabilities(shared),
            signing_algorithms=set(shared.signing_algorithms),
        )
        logger.info(
            f"Negotiated contract between {idp_metadata.entity_id} and "
            f"{app_metadata.entity_id} (profiles={sorted(contract.enabled_profiles.all_profiles())})"
        )
        return contract

    def current_enabled_profiles(self) -> EnabledProfiles:
        if self.enabled_profiles is None:
            return EnabledProfiles(self.configuration)
        return self.enabled_profiles

    # ------------------------------------------------------------------
    # Handshake overlays
    # ------------------------------------------------------------------
    def overlay_registration_request(self, request: RegistrationRequest) -> None:
        """Apply the profile selection and extension data of ``request``.

        The request may only narrow the enabled profiles. Nothing is changed
        when it asks for anything else.

        Raises:
            FastFedSecurityError: if the request names profiles that are not enabled.
        """
        if self.identity_provider is None:
            raise ValueError("Contract has no identity provider")

        enabled = self.current_enabled_profiles()
        errors = ErrorAccumulator()
        self._check_scope_down(
            errors,
            "authentication",
            request.authentication_profiles,
            enabled.authentication_profiles,
        )
        self._check_scope_down(
            errors, "provisioning", request.provisioning_profiles, enabled.provisioning_profiles
        )
        if errors.has_errors():
            logger.warning(f"Rejected registration request:\n{errors}")
            raise FastFedSecurityError(str(errors))

        self.enabled_profiles = EnabledProfiles(
            self.configuration,
            authentication_profiles=set(request.authentication_profiles),
            provisioning_profiles=set(request.provisioning_profiles),
        )
        # Only extensions for requested profiles were validated with the request.
        requested = request.requested_profiles()
        self.identity_provider.registration_request_extensions = {
            urn: extension.copy()
            for urn, extension in request.extensions.items()
            if urn in requested
        }
        logger.info(
            f"Applied registration request from {request.issuer} "
            f"(profiles={sorted(self.enabled_profiles.all_profiles())})"
        )

    @staticmethod
    def _check_scope_down(
        errors: ErrorAccumulator, kind: str, requested: Set[str], allowed: Set[str]
    ) -> None:
        if not requested <= allowed:
            errors.add(
                f"Registration request contains incompatible {kind} profiles "
                f"(requestedProfiles='{_format(requested)}', "
                f"allowedProfiles='{_format(allowed)}')"
            )

    def validate_and_overlay_registration_request(
        self, compact: str, codec: Optional[JwtCodec] = None
    ) -> RegistrationRequest:
        """Decode, validate and overlay a registration request JWT."""
        request = RegistrationRequest.from_jwt(self.configuration, compact, codec)
        self.overlay_registration_request(request)
        return request

    def overlay_registration_response(self, response: RegistrationResponse) -> None:
        """Record the finalize endpoint and extension data of ``response``."""
        if self.application_provider is None:
            raise ValueError("Contract has no application provider")
        self.application_provider.handshake_finalize_uri = response.handshake_finalize_uri
        self.application_provider.registration_response_extensions = {
            urn: extension.copy() for urn, extension in response.extensions.items()
        }
        logger.info(
            f"Applied registration response for {self.application_provider.entity_id}"
        )

    def validate_and_overlay_registration_response(self, text: str) -> RegistrationResponse:
        """Parse, validate and overlay a registration response."""
        response = RegistrationResponse.from_json(
            self.configuration, text, self.current_enabled_profiles().all_profiles()
        )
        self.overlay_registration_response(response)
        return response

    # ------------------------------------------------------------------
    def to_json(self) -> JsonObject:
        builder = JsonObjectBuilder(CONTRACT)
        builder.put_all(super().to_json())
        if self.identity_provider is not None:
            builder.put_all(self.identity_provider.to_json())
        if self.application_provider is not None:
            builder.put_all(self.application_provider.to_json())
        if self.enabled_profiles is not None:
            builder.put_all(self.enabled_profiles.to_json())
        builder.put(SIGNING_ALGORITHMS, self.signing_algorithms)
        return builder.build()

    def hydrate_from_json(self, json: Optional[JsonObject]) -> None:
        if json is None:
            return
        json = json.unwrap_object_if_needed(CONTRACT)
        super().hydrate_from_json(json)
        self.identity_provider = self.hydrate_child(json, IDENTITY_PROVIDER, IdentityProvider)
        self.application_provider = self.hydrate_child(
            json, APPLICATION_PROVIDER, ApplicationProvider
        )
        # An empty enabled_profiles object is normalized away; it still means
        # "no profiles enabled" for a stored contract.
        self.enabled_profiles = self.hydrate_child(
            json, ENABLED_PROFILES, EnabledProfiles
        ) or EnabledProfiles(self.configuration)
        self.signing_algorithms = json.get_string_set(SIGNING_ALGORITHMS) or set()

    def validate(self, errors: ErrorAccumulator) -> None:
        self.validate_required_object(errors, IDENTITY_PROVIDER, self.identity_provider)
        self.validate_required_object(errors, APPLICATION_PROVIDER, self.application_provider)
        # Hydration always fills enabled_profiles; this guards contracts built in code.
        self.validate_required_object(errors, ENABLED_PROFILES, self.enabled_profiles)
        self.validate_required_string_collection(
            errors, SIGNING_ALGORITHMS, self.signing_algorithms
        )
        enabled = self.current_enabled_profiles().all_profiles()
        if self.identity_provider is not None:
            self.identity_provider.validate(errors)
            self.identity_provider.validate_profile_extensions(errors, enabled)
        if self.application_provider is not None:
            self.application_provider.validate(errors)
            self.application_provider.validate_profile_extensions(errors, enabled)
        if self.enabled_profiles is not None:
            self.enabled_profiles.validate(errors)
