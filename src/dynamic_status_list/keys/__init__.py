"""Issuer key material: signing key, JWK helpers and the master secret."""
from __future__ import annotations

from dynamic_status_list.keys.jwk import from_jwk, thumbprint, to_jwk
from dynamic_status_list.keys.secret_store import SecretStore, derive_master_secret

__all__ = [
    "SecretStore",
    "derive_master_secret",
    "from_jwk",
    "thumbprint",
    "to_jwk",
]
