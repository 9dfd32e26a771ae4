"""Holder-side proof building.

A holder receives private metadata ``{jti, seed}`` once, out of band, at
issuance. With it the holder recomputes its own epoch token and revocation
identifier for any timestamp, without ever seeing the issuer's master
secret, and checks the result against a publication.
"""
from __future__ import annotations

import binascii
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

import jwt

from dynamic_status_list.artifacts import (
    CredentialBundleFile,
    HolderProofFile,
    PrivateMetadataClaims,
    parse_model,
    read_model,
    write_model,
)
from dynamic_status_list.errors import InputError, MissingMetadataError
from dynamic_status_list.protocol.derivation import (
    DEFAULT_PERIOD_SECONDS,
    SEED_SIZE,
    encode_identifier,
    identifier_to_text,
    rotate_token,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PrivateMetadata:
    """Secret status metadata held by a credential holder.

    Parameters
    ----------
    jti:
        Identifier of the credential.
    seed:
        32-byte per-credential seed, or None when the issuer did not
        provide one.
    """

    jti: str
    seed: bytes | None

    @classmethod
    def from_jwt(cls, token: str) -> "PrivateMetadata":
        """Parse the private metadata token issued with a credential.

        The token is read without signature verification; it arrives over
        the same channel as the credential itself.

        Raises
        ------
        InputError
            If the token is malformed or the seed is not 32 bytes of hex.
        """
        try:
            raw = jwt.decode(token, options={"verify_signature": False})
        except jwt.PyJWTError as exc:
            raise InputError(f"malformed private metadata token: {exc}") from exc

        claims = parse_model(PrivateMetadataClaims, raw, "private metadata")
        if not claims.seed:
            return cls(jti=claims.sub, seed=None)
        try:
            seed = bytes.fromhex(claims.seed)
        except (ValueError, binascii.Error) as exc:
            raise InputError(f"private metadata seed is not valid hex: {exc}") from exc
        if len(seed) != SEED_SIZE:
            raise InputError(
                f"private metadata seed must be {SEED_SIZE} bytes, got {len(seed)}"
            )
        return cls(jti=claims.sub, seed=seed)

    @classmethod
    def from_bundle(cls, bundle: CredentialBundleFile) -> "PrivateMetadata":
        """Extract the private metadata from a credential bundle.

        Raises
        ------
        MissingMetadataError
            If the bundle carries no private metadata.
        """
        if not bundle.private_metadata:
            raise MissingMetadataError()
        return cls.from_jwt(bundle.private_metadata)


@dataclass(frozen=True)
class HolderProof:
    """A holder-computed candidate identifier for one timestamp.

    Parameters
    ----------
    jti:
        Credential identifier.
    token:
        Base64url epoch token at *timestamp*.
    identifier:
        Base64url revocation identifier under the *claimed_valid* hypothesis.
    timestamp:
        Unix second the proof was computed for.
    claimed_valid:
        Validity hypothesis the identifier was encoded with.
    """

    jti: str
    token: str
    identifier: str
    timestamp: int
    claimed_valid: bool

    def to_file(self) -> HolderProofFile:
        """Convert to the on-disk artifact; ``revoked`` is the negated hypothesis."""
        return HolderProofFile(
            jti=self.jti,
            token=self.token,
            sid=self.identifier,
            iat=self.timestamp,
            revoked=not self.claimed_valid,
        )

    @classmethod
    def from_file(cls, artifact: HolderProofFile) -> "HolderProof":
        """Build a proof from its on-disk artifact."""
        return cls(
            jti=artifact.jti,
            token=artifact.token,
            identifier=artifact.sid,
            timestamp=artifact.iat,
            claimed_valid=not artifact.revoked,
        )

    def save(self, path: Path) -> None:
        """Write the proof artifact to *path*."""
        write_model(self.to_file(), path)

    @classmethod
    def load(cls, path: Path) -> "HolderProof":
        """Read a proof artifact from *path*."""
        return cls.from_file(read_model(HolderProofFile, path))


class HolderProofBuilder:
    """Recomputes a holder's token and identifier from private metadata.

    Parameters
    ----------
    period:
        Epoch length in seconds; must match the issuer's.
    clock:
        Returns the current unix time. Injectable for tests.
    """

    def __init__(
        self,
        period: int = DEFAULT_PERIOD_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._period = period
        self._clock = clock

    def build_proof(
        self,
        metadata: PrivateMetadata | None,
        timestamp: int | None = None,
        valid: bool = True,
    ) -> HolderProof:
        """Build a proof at *timestamp* under the validity hypothesis *valid*.

        Parameters
        ----------
        metadata:
            Private metadata from issuance.
        timestamp:
            Unix seconds; defaults to now. May be backdated to prove past
            status.
        valid:
            Hypothesis to encode. ``True`` yields the identifier published
            for a valid credential.

        Raises
        ------
        MissingMetadataError
            If *metadata* or its seed is absent.
        """
        if metadata is None or metadata.seed is None:
            raise MissingMetadataError()

        at = int(self._clock()) if timestamp is None else timestamp
        epoch_token = rotate_token(metadata.seed, at, self._period)
        identifier = encode_identifier(metadata.jti, epoch_token.token, valid)

        logger.debug("Built holder proof for epoch %d", epoch_token.epoch)
        return HolderProof(
            jti=metadata.jti,
            token=epoch_token.to_text(),
            identifier=identifier_to_text(identifier),
            timestamp=at,
            claimed_valid=valid,
        )


__all__ = ["HolderProof", "HolderProofBuilder", "PrivateMetadata"]
