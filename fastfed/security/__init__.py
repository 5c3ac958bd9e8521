"""Security helpers for the FastFed handshake."""

from __future__ import annotations

from .tokens import JwtCodec

__all__ = ["JwtCodec"]
