import time

import jwt
import pytest

from fastfed.errors import FastFedSecurityError, InvalidMetadataError
from fastfed.security import JwtCodec

AUDIENCE = "https://tenant-67890.app.example.com"


def _claims(**overrides):
    claims = {"iss": "https://idp.example.com", "aud": AUDIENCE, "exp": int(time.time()) + 600}
    claims.update(overrides)
    return claims


def test_serialize_and_parse(jwt_codec):
    claims = _claims()

    assert jwt_codec.parse(jwt_codec.serialize(claims)) == claims


def test_parse_without_key_skips_verification(signing_key):
    compact = jwt.encode(_claims(exp=1), signing_key, algorithm="HS256")

    assert JwtCodec().parse(compact)["exp"] == 1


def test_wrong_key_is_a_security_error(jwt_codec):
    compact = jwt.encode(_claims(), "another-signing-key-0123456789abcdef", algorithm="HS256")

    with pytest.raises(FastFedSecurityError, match="Invalid JWT signature"):
        jwt_codec.parse(compact)


def test_expired_token_is_a_security_error(jwt_codec, signing_key):
    compact = jwt.encode(_claims(exp=int(time.time()) - 60), signing_key, algorithm="HS256")

    with pytest.raises(FastFedSecurityError):
        jwt_codec.parse(compact)


def test_wrong_audience_is_a_security_error(jwt_codec, signing_key):
    compact = jwt.encode(_claims(aud="https://other.example.com"), signing_key, algorithm="HS256")

    with pytest.raises(FastFedSecurityError):
        jwt_codec.parse(compact)


def test_garbage_is_malformed():
    with pytest.raises(InvalidMetadataError) as exc_info:
        JwtCodec().parse("not-a-jwt")

    assert exc_info.value.errors.errors[0].startswith("Malformed JWT: ")


def test_serialize_requires_key():
    with pytest.raises(ValueError):
        JwtCodec().serialize(_claims())
