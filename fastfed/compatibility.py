"""Pairwise compatibility of Identity Provider and Application Provider capabilities."""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from .errors import ErrorAccumulator, IncompatibleProvidersError
from .metadata.capabilities import Capabilities
from .metadata.provider import ApplicationProviderMetadata, IdentityProviderMetadata

logger = logging.getLogger(__name__)


def _format(values: Iterable[str]) -> str:
    return "[" + ", ".join(sorted(values)) + "]"


def _incompatibility(
    dimension: str, idp_values: Iterable[str], app_values: Iterable[str]
) -> str:
    return (
        f"Incompatible {dimension}. (IdentityProvider='{_format(idp_values)}', "
        f"ApplicationProvider='{_format(app_values)}')"
    )


def _capabilities_of(metadata: object, role: str) -> Capabilities:
    capabilities = getattr(metadata, "capabilities", None)
    if capabilities is None:
        raise ValueError(f"{role} metadata does not declare capabilities")
    return capabilities


def get_shared_capabilities(idp: Capabilities, app: Capabilities) -> Capabilities:
    """Intersect the four capability sets of the two providers."""
    return Capabilities(
        app.configuration,
        authentication_profiles=idp.authentication_profiles & app.authentication_profiles,
        provisioning_profiles=idp.provisioning_profiles & app.provisioning_profiles,
        schema_grammars=idp.schema_grammars & app.schema_grammars,
        signing_algorithms=idp.signing_algorithms & app.signing_algorithms,
    )


def evaluate_capabilities(
    errors: ErrorAccumulator, idp: Capabilities, app: Capabilities
) -> Optional[Capabilities]:
    """Return the shared capabilities, or ``None`` after recording every incompatibility.

    Profile sets only need to overlap when the Application Provider declares
    any; schema grammars and signing algorithms must always overlap.
    """

    shared = get_shared_capabilities(idp, app)
    compatible = True

    if app.authentication_profiles and not shared.authentication_profiles:
        errors.add(
            _incompatibility(
                "authentication profiles",
                idp.authentication_profiles,
                app.authentication_profiles,
            )
        )
        compatible = False

    if app.provisioning_profiles and not shared.provisioning_profiles:
        errors.add(
            _incompatibility(
                "provisioning profiles", idp.provisioning_profiles, app.provisioning_profiles
            )
        )
        compatible = False

    if not shared.schema_grammars:
        errors.add(
            _incompatibility("schema grammars", idp.schema_grammars, app.schema_grammars)
        )
        compatible = False

    if not shared.signing_algorithms:
        errors.add(
            _incompatibility(
                "signing algorithms", idp.signing_algorithms, app.signing_algorithms
            )
        )
        compatible = False

    return shared if compatible else None


def evaluate_compatibility(
    errors: ErrorAccumulator,
    idp_metadata: IdentityProviderMetadata,
    app_metadata: ApplicationProviderMetadata,
) -> Optional[Capabilities]:
    """Compare the capabilities declared by two metadata documents."""
    return evaluate_capabilities(
        errors,
        _capabilities_of(idp_metadata, "Identity Provider"),
        _capabilities_of(app_metadata, "Application Provider"),
    )


def assert_compatibility(
    idp_metadata: IdentityProviderMetadata, app_metadata: ApplicationProviderMetadata
) -> Capabilities:
    """Return the shared capabilities of the two providers.

    Raises:
        IncompatibleProvidersError: listing every incompatible dimension.
    """

    errors = ErrorAccumulator()
    shared = evaluate_compatibility(errors, idp_metadata, app_metadata)
    if shared is None:
        logger.warning(
            f"Providers {idp_metadata.entity_id} and {app_metadata.entity_id} "
            f"are incompatible:\n{errors}"
        )
        raise IncompatibleProvidersError(str(errors), errors)
    return shared
