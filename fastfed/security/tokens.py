"""Compact JWT encoding for handshake messages."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Sequence

import jwt

from ..errors import ErrorAccumulator, FastFedSecurityError, InvalidMetadataError

logger = logging.getLogger(__name__)


class JwtCodec:
    """Parses and serializes the JWTs exchanged during the handshake.

    When ``key`` is ``None`` tokens are decoded without signature checks,
    which is only appropriate once the caller has verified the token by other
    means. With a key, the signature, expiry and (if configured) audience are
    verified by PyJWT.
    """

    def __init__(
        self,
        key: Optional[Any] = None,
        algorithm: str = "RS256",
        algorithms: Optional[Sequence[str]] = None,
        audience: Optional[str] = None,
        leeway: int = 0,
    ) -> None:
        self.key = key
        self.algorithm = algorithm
        self.algorithms = list(algorithms or [algorithm])
        self.audience = audience
        self.leeway = leeway

    def parse(self, compact: str) -> Dict[str, Any]:
        """Return the claims of ``compact``.

        Raises:
            InvalidMetadataError: if the token cannot be decoded.
            FastFedSecurityError: if signature or claim verification fails.
        """
        try:
            if self.key is None:
                return jwt.decode(compact, options={"verify_signature": False})
            return jwt.decode(
                compact,
                self.key,
                algorithms=self.algorithms,
                audience=self.audience,
                leeway=self.leeway,
                options={"verify_aud": self.audience is not None},
            )
        except jwt.exceptions.InvalidSignatureError as exc:
            logger.warning(f"Rejected JWT with invalid signature: {exc}")
            raise FastFedSecurityError(f"Invalid JWT signature: {exc}") from exc
        except jwt.exceptions.DecodeError as exc:
            errors = ErrorAccumulator()
            errors.add(f"Malformed JWT: {exc}")
            raise InvalidMetadataError(errors) from exc
        except jwt.exceptions.InvalidTokenError as exc:
            logger.warning(f"Rejected JWT: {exc}")
            raise FastFedSecurityError(f"Invalid JWT: {exc}") from exc

    def serialize(self, claims: Dict[str, Any]) -> str:
        """Encode ``claims`` as a compact JWT signed with ``key``."""
        if self.key is None:
            raise ValueError("A signing key is required to serialize a JWT")
        return jwt.encode(claims, self.key, algorithm=self.algorithm)
