"""Mock credential issuance and status metadata tokens.

Credentials here are plain ES256 JWTs with a ``jti``; the real issuance
format is out of scope. What matters to the status list is the metadata
produced when a credential is enrolled:

- private metadata ``{sub: jti, seed: hex}``, delivered to the holder only;
- optionally a detached revocation token ``{sub: jti, sdb: url}`` pointing
  at the status list distribution point.
"""
from __future__ import annotations

import enum
import secrets as _secrets
from typing import Any

from dynamic_status_list.artifacts import CredentialBundleFile
from dynamic_status_list.errors import InputError
from dynamic_status_list.keys.secret_store import SecretStore

JTI_BYTES = 16
DEFAULT_DISTRIBUTION_URL = "http://localhost:4321/sdb/1"


class EntryCapability(enum.Flag):
    """Optional capabilities requested when enrolling a credential."""

    NONE = 0
    DETACHED = enum.auto()


class CredentialIssuer:
    """Signs mock credentials and their status metadata.

    Parameters
    ----------
    secrets:
        Issuer key material.
    distribution_url:
        Status list distribution point embedded in credentials and
        detached tokens.
    """

    def __init__(
        self,
        secrets: SecretStore,
        distribution_url: str = DEFAULT_DISTRIBUTION_URL,
    ) -> None:
        self._secrets = secrets
        self._distribution_url = distribution_url

    @staticmethod
    def new_jti() -> str:
        """Return a fresh random credential identifier (32 hex chars)."""
        return _secrets.token_hex(JTI_BYTES)

    def issue_mock_credential(self, subject: str = "Alice") -> CredentialBundleFile:
        """Issue a signed mock credential with a fresh jti."""
        claims: dict[str, Any] = {
            "sub": subject,
            "jti": self.new_jti(),
            "sdb": self._distribution_url,
        }
        return CredentialBundleFile(jwt=self._secrets.sign(claims))

    def read_jti(self, credential_jwt: str) -> str:
        """Verify a credential issued by this issuer and return its jti.

        Raises
        ------
        InvalidSignatureError
            If the credential was not signed by this issuer.
        InputError
            If the credential has no string ``jti`` claim.
        """
        claims = self._secrets.verify(credential_jwt)
        jti = claims.get("jti")
        if not isinstance(jti, str):
            raise InputError("credential has no 'jti' claim")
        return jti

    def private_metadata_jwt(self, jti: str, seed: bytes) -> str:
        """Sign the holder's private metadata token."""
        return self._secrets.sign({"sub": jti, "seed": seed.hex()})

    def detached_jwt(self, jti: str) -> str:
        """Sign a detached revocation token pointing at the distribution point."""
        return self._secrets.sign({"sub": jti, "sdb": self._distribution_url})


__all__ = [
    "CredentialIssuer",
    "DEFAULT_DISTRIBUTION_URL",
    "EntryCapability",
]
