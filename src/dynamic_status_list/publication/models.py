"""Publication — the signed, time-bounded set of revocation identifiers.

A publication is immutable once signed. It is superseded in full by the
next one; no incremental diff is ever published.

Wire format
-----------
A compact ES256 JWS whose protected header carries the issuer JWK and whose
claims are::

    {
        "typ": "dsl/v1",
        "iss": "<hex SHA-256 JWK thumbprint>",
        "nbf": <not before>,
        "exp": <not after>,
        "nxt": <next update>,
        "sid": ["<base64url identifier>", ...]
    }

On disk the JWS is wrapped as ``{"dsl_jwt": "...", "nbf": <not before>}``.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jwt

from dynamic_status_list.artifacts import (
    PUBLICATION_TYPE,
    PublicationClaims,
    PublicationEnvelope,
    parse_model,
    read_model,
    write_model,
)
from dynamic_status_list.errors import InputError, InvalidSignatureError
from dynamic_status_list.keys.jwk import from_jwk, thumbprint
from dynamic_status_list.keys.secret_store import ALGORITHM


@dataclass(frozen=True)
class Publication:
    """A signed status list publication.

    Parameters
    ----------
    issuer_thumbprint:
        Hex SHA-256 thumbprint of the issuer public key.
    not_before:
        Unix second from which the publication applies.
    not_after:
        Last unix second of the epoch the identifiers were computed for.
    next_update:
        Unix second at which the next publication is due.
    identifiers:
        Shuffled base64url revocation identifiers, one per tracked credential.
    token:
        The compact signed JWS. Empty for unsigned publications.
    """

    issuer_thumbprint: str
    not_before: int
    not_after: int
    next_update: int
    identifiers: tuple[str, ...]
    token: str = ""
    _lookup: frozenset[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_lookup", frozenset(self.identifiers))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def identifier_set(self) -> frozenset[str]:
        """The identifiers as a set for membership tests."""
        return self._lookup

    def contains(self, identifier: str) -> bool:
        """Return True if *identifier* is published."""
        return identifier in self._lookup

    def covers(self, unix_time: int) -> bool:
        """Return True if *unix_time* falls inside ``[not_before, not_after]``."""
        return self.not_before <= unix_time <= self.not_after

    def __len__(self) -> int:
        return len(self.identifiers)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def claims(self) -> dict[str, Any]:
        """Return the claim set that gets signed."""
        return {
            "typ": PUBLICATION_TYPE,
            "iss": self.issuer_thumbprint,
            "nbf": self.not_before,
            "exp": self.not_after,
            "nxt": self.next_update,
            "sid": list(self.identifiers),
        }

    def to_envelope(self) -> PublicationEnvelope:
        """Wrap the signed token for storage.

        Raises
        ------
        InputError
            If the publication has not been signed.
        """
        if not self.token:
            raise InputError("cannot store an unsigned publication")
        return PublicationEnvelope(dsl_jwt=self.token, nbf=self.not_before)

    def save(self, path: Path) -> None:
        """Persist the publication envelope to *path*."""
        write_model(self.to_envelope(), path)

    @classmethod
    def from_token(
        cls,
        token: str,
        expected_thumbprint: str | None = None,
    ) -> "Publication":
        """Verify a signed publication and reconstruct it.

        The signature is checked against the JWK embedded in the protected
        header, whose thumbprint must equal the ``iss`` claim. Pass
        *expected_thumbprint* to pin a specific issuer. ``exp`` is not
        enforced so historical publications stay verifiable.

        Raises
        ------
        InvalidSignatureError
            If the signature, embedded key or issuer does not check out.
        InputError
            If the token or its claims are malformed.
        """
        try:
            header = jwt.get_unverified_header(token)
        except jwt.PyJWTError as exc:
            raise InputError(f"malformed publication token: {exc}") from exc

        if "jwk" not in header:
            raise InvalidSignatureError("publication header carries no issuer JWK")
        public_key = from_jwk(header["jwk"])
        key_thumbprint = thumbprint(header["jwk"])

        try:
            raw_claims = jwt.decode(
                token,
                public_key,
                algorithms=[ALGORITHM],
                options={"verify_exp": False, "verify_nbf": False, "verify_iat": False},
            )
        except jwt.InvalidSignatureError as exc:
            raise InvalidSignatureError(f"publication signature is invalid: {exc}") from exc
        except jwt.PyJWTError as exc:
            raise InputError(f"malformed publication token: {exc}") from exc

        claims = parse_model(PublicationClaims, raw_claims, "publication claims")
        if claims.iss != key_thumbprint:
            raise InvalidSignatureError(
                "publication issuer does not match the signing key thumbprint"
            )
        if expected_thumbprint is not None and claims.iss != expected_thumbprint.lower():
            raise InvalidSignatureError(
                f"publication was issued by {claims.iss}, expected {expected_thumbprint}"
            )

        return cls(
            issuer_thumbprint=claims.iss,
            not_before=claims.nbf,
            not_after=claims.exp,
            next_update=claims.nxt,
            identifiers=tuple(claims.sid),
            token=token,
        )

    @classmethod
    def load(cls, path: Path, expected_thumbprint: str | None = None) -> "Publication":
        """Read a publication envelope from *path* and verify it."""
        envelope = read_model(PublicationEnvelope, path)
        publication = cls.from_token(envelope.dsl_jwt, expected_thumbprint)
        if envelope.nbf != publication.not_before:
            raise InputError(
                f"envelope nbf {envelope.nbf} does not match signed nbf "
                f"{publication.not_before}"
            )
        return publication


__all__ = ["Publication"]
