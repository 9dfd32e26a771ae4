"""JWK (JSON Web Key) export/import for P-256 issuer keys.

Publications carry the issuer public key as an RFC 7517 JWK in their
protected header and identify the issuer by its RFC 7638 SHA-256 thumbprint.
"""
from __future__ import annotations

import hashlib
import json

from cryptography.hazmat.primitives.asymmetric import ec

from dynamic_status_list.errors import InputError
from dynamic_status_list.protocol.derivation import b64url_decode, b64url_encode

_COORDINATE_SIZE = 32


def to_jwk(public_key: ec.EllipticCurvePublicKey) -> dict[str, str]:
    """Export a P-256 public key as a JWK dict."""
    numbers = public_key.public_numbers()
    return {
        "kty": "EC",
        "crv": "P-256",
        "x": b64url_encode(numbers.x.to_bytes(_COORDINATE_SIZE, "big")),
        "y": b64url_encode(numbers.y.to_bytes(_COORDINATE_SIZE, "big")),
    }


def from_jwk(jwk: object) -> ec.EllipticCurvePublicKey:
    """Load a P-256 public key from a JWK dict.

    Raises
    ------
    InputError
        If the JWK is not an EC P-256 public key or its point is invalid.
    """
    if not isinstance(jwk, dict):
        raise InputError("JWK must be a JSON object")
    if jwk.get("kty") != "EC":
        raise InputError(f"Unsupported key type: {jwk.get('kty')}, expected 'EC'")
    if jwk.get("crv") != "P-256":
        raise InputError(f"Unsupported curve: {jwk.get('crv')}, expected 'P-256'")
    for member in ("x", "y"):
        if not isinstance(jwk.get(member), str):
            raise InputError(f"JWK missing required {member!r} parameter")

    x = int.from_bytes(b64url_decode(jwk["x"]), "big")
    y = int.from_bytes(b64url_decode(jwk["y"]), "big")
    try:
        return ec.EllipticCurvePublicNumbers(x, y, ec.SECP256R1()).public_key()
    except ValueError as exc:
        raise InputError(f"Invalid P-256 public key in JWK: {exc}") from exc


def thumbprint(jwk: dict[str, str]) -> str:
    """Return the hex RFC 7638 SHA-256 thumbprint of an EC JWK."""
    required = {member: jwk[member] for member in ("crv", "kty", "x", "y")}
    canonical = json.dumps(required, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


__all__ = ["from_jwk", "thumbprint", "to_jwk"]
