"""SecretStore — the issuer's signing key and derived master secret.

The store is loaded once at startup and is immutable afterwards. It owns:

- an ECDSA P-256 private key used to sign credentials, private metadata and
  status list publications (ES256);
- a 32-byte master secret derived from the private scalar with HKDF-SHA256.
  Every credential seed is derived from it, so regenerating the key makes
  every previously issued seed underivable.

The key is stored unencrypted as PEM. Production deployments should keep it
on an encrypted volume.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import jwt
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from dynamic_status_list.errors import CryptoFailure, InputError, InvalidSignatureError, StorageError
from dynamic_status_list.keys.jwk import thumbprint, to_jwk

logger = logging.getLogger(__name__)

ALGORITHM = "ES256"
MASTER_SECRET_SIZE = 32
MASTER_SECRET_INFO = b"dynamic-status-list/v1 master secret"


class SecretStore:
    """Issuer key material.

    Parameters
    ----------
    private_key:
        ECDSA private key on the P-256 curve.

    Raises
    ------
    InputError
        If the key is not a P-256 key.
    """

    __slots__ = ("_private_key", "_public_jwk", "_thumbprint", "_master_secret")

    def __init__(self, private_key: ec.EllipticCurvePrivateKey) -> None:
        if not isinstance(private_key, ec.EllipticCurvePrivateKey) or not isinstance(
            private_key.curve, ec.SECP256R1
        ):
            raise InputError("issuer key must be an ECDSA P-256 private key")
        self._private_key = private_key
        self._public_jwk = to_jwk(private_key.public_key())
        self._thumbprint = thumbprint(self._public_jwk)
        self._master_secret = derive_master_secret(private_key)

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    @classmethod
    def generate(cls) -> "SecretStore":
        """Create a store around a freshly generated P-256 key."""
        return cls(ec.generate_private_key(ec.SECP256R1()))

    @classmethod
    def from_pem(cls, key_pem: bytes) -> "SecretStore":
        """Reconstruct a store from an unencrypted PEM private key.

        Raises
        ------
        InputError
            If the PEM cannot be parsed or is not a P-256 key.
        """
        try:
            key = serialization.load_pem_private_key(key_pem, password=None)
        except (ValueError, TypeError) as exc:
            raise InputError(f"failed to parse issuer key: {exc}") from exc
        if not isinstance(key, ec.EllipticCurvePrivateKey):
            raise InputError("issuer key must be an ECDSA P-256 private key")
        return cls(key)

    @classmethod
    def load_or_generate(cls, path: Path) -> "SecretStore":
        """Load the key at *path*, generating and saving a new one if absent."""
        if path.exists():
            logger.info("Loading issuer key from %s", path)
            return cls.from_pem(path.read_bytes())

        logger.info("Generating new EC key (ES256) at %s", path)
        store = cls.generate()
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(store.private_key_pem())
            path.chmod(0o600)
        except OSError as exc:
            raise StorageError(f"failed to store issuer key at {path}: {exc}") from exc
        return store

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def public_key(self) -> ec.EllipticCurvePublicKey:
        """The issuer public key."""
        return self._private_key.public_key()

    @property
    def public_jwk(self) -> dict[str, str]:
        """A copy of the issuer public key as a JWK."""
        return dict(self._public_jwk)

    @property
    def thumbprint(self) -> str:
        """Hex SHA-256 JWK thumbprint of the issuer public key."""
        return self._thumbprint

    @property
    def master_secret(self) -> bytes:
        """The 32-byte master secret. Never write this into an artifact."""
        return self._master_secret

    def private_key_pem(self) -> bytes:
        """Return PEM-encoded private key bytes (unencrypted)."""
        return self._private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )

    # ------------------------------------------------------------------
    # Signing
    # ------------------------------------------------------------------

    def sign(self, claims: dict[str, Any]) -> str:
        """Sign *claims* as a compact ES256 JWS with the issuer JWK in the header.

        Raises
        ------
        CryptoFailure
            If the signing primitive fails.
        """
        try:
            return jwt.encode(
                claims,
                self._private_key,
                algorithm=ALGORITHM,
                headers={"jwk": self.public_jwk},
            )
        except (jwt.PyJWTError, ValueError, TypeError) as exc:
            raise CryptoFailure(f"failed to sign token: {exc}") from exc

    def verify(self, token: str) -> dict[str, Any]:
        """Verify a token signed by this store and return its claims.

        Time-based claims are not enforced; callers decide what a stale
        token means for them.

        Raises
        ------
        InvalidSignatureError
            If the signature does not verify under the issuer key.
        """
        try:
            return jwt.decode(
                token,
                self.public_key,
                algorithms=[ALGORITHM],
                options={"verify_exp": False, "verify_nbf": False, "verify_iat": False},
            )
        except jwt.PyJWTError as exc:
            raise InvalidSignatureError(f"token verification failed: {exc}") from exc

    def __repr__(self) -> str:
        return f"SecretStore(thumbprint={self._thumbprint!r})"


def derive_master_secret(private_key: ec.EllipticCurvePrivateKey) -> bytes:
    """Derive the 32-byte master secret from the private scalar with HKDF-SHA256."""
    scalar = private_key.private_numbers().private_value.to_bytes(32, "big")
    hkdf = HKDF(
        algorithm=hashes.SHA256(),
        length=MASTER_SECRET_SIZE,
        salt=None,
        info=MASTER_SECRET_INFO,
    )
    return hkdf.derive(scalar)


__all__ = ["ALGORITHM", "SecretStore", "derive_master_secret"]
