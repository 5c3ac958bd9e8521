"""Error accumulation and the exception hierarchy."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class ErrorAccumulator(BaseModel):
    """Collects validation failures so a document reports all of them at once."""

    errors: List[str] = Field(default_factory=list)

    def add(self, message: str) -> None:
        self.errors.append(message)

    def add_all(self, other: "ErrorAccumulator") -> None:
        self.errors.extend(other.errors)

    def has_errors(self) -> bool:
        return bool(self.errors)

    def clear(self) -> None:
        self.errors.clear()

    def __str__(self) -> str:
        return "\n".join(self.errors)


class FastFedError(Exception):
    """Base class for errors raised by the handshake engine."""


class InvalidMetadataError(FastFedError, ValueError):
    """Raised once per document with every violation that was found."""

    def __init__(self, errors: ErrorAccumulator) -> None:
        self.errors = errors
        super().__init__(f"Metadata is malformed or non-compliant:\n{errors}")


class FastFedSecurityError(FastFedError):
    """A security rule was violated; the current operation must be aborted."""


class IncompatibleProvidersError(FastFedSecurityError):
    """The two providers share no usable configuration."""

    def __init__(self, message: str, errors: Optional[ErrorAccumulator] = None) -> None:
        self.errors = errors if errors is not None else ErrorAccumulator()
        super().__init__(message)


class InvalidChangeError(FastFedError, ValueError):
    """An object was asked to make a transition it does not allow."""
