"""Revocation identifier derivation.

Three pure steps turn issuer secrets into the values published in a
status list:

1. :func:`derive_seed` maps (master secret, jti) to a per-credential seed.
2. :func:`rotate_token` maps (seed, time, period) to a one-epoch token.
3. :func:`encode_identifier` maps (jti, token, validity) to the published
   revocation identifier.

Identifier encoding
-------------------
::

    base    = SHA256(token || SHA256(jti))
    valid   -> base
    revoked -> SHA256(base)

Anyone holding the token can compute both candidates and test membership;
without the token every published identifier looks like random bytes.
"""
from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import math
import struct
from dataclasses import dataclass

from dynamic_status_list.errors import CryptoFailure, InputError

SEED_SIZE: int = 32
TOKEN_SIZE: int = 32
DEFAULT_PERIOD_SECONDS: int = 60


@dataclass(frozen=True)
class EpochToken:
    """A token valid for exactly one epoch.

    Parameters
    ----------
    token:
        32-byte HMAC-SHA256 output.
    epoch:
        ``floor(unix_time / period)`` the token was derived for.
    """

    token: bytes
    epoch: int

    def to_text(self) -> str:
        """Return the token as unpadded base64url."""
        return b64url_encode(self.token)


# ---------------------------------------------------------------------------
# Encoding helpers
# ---------------------------------------------------------------------------


def b64url_encode(data: bytes) -> str:
    """Encode bytes as base64url without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def b64url_decode(text: str) -> bytes:
    """Decode unpadded (or padded) base64url text.

    Raises
    ------
    InputError
        If *text* is not valid base64url.
    """
    try:
        return base64.urlsafe_b64decode(text + "=" * (-len(text) % 4))
    except (binascii.Error, ValueError) as exc:
        raise InputError(f"invalid base64url value: {exc}") from exc


def jti_digest(jti: str) -> bytes:
    """Return SHA256 of the UTF-8 encoded credential identifier."""
    return hashlib.sha256(jti.encode("utf-8")).digest()


# ---------------------------------------------------------------------------
# Seed
# ---------------------------------------------------------------------------


def derive_seed(master_secret: bytes, jti: str) -> bytes:
    """Derive the per-credential seed ``SHA256(master_secret || SHA256(jti))``.

    Parameters
    ----------
    master_secret:
        The issuer's 32-byte master secret.
    jti:
        Credential identifier. Treated as opaque; the empty string is valid.

    Returns
    -------
    bytes
        32-byte seed.
    """
    return hashlib.sha256(master_secret + jti_digest(jti)).digest()


# ---------------------------------------------------------------------------
# Token rotation
# ---------------------------------------------------------------------------


def epoch_for(unix_time: float, period: int = DEFAULT_PERIOD_SECONDS) -> int:
    """Return ``floor(unix_time / period)``.

    Raises
    ------
    InputError
        If *period* is not positive or *unix_time* is negative.
    """
    if period <= 0:
        raise InputError(f"period must be positive, got {period}")
    if unix_time < 0:
        raise InputError(f"timestamp must not be negative, got {unix_time}")
    if isinstance(unix_time, int):
        return unix_time // period
    return math.floor(unix_time / period)


def epoch_start(epoch: int, period: int = DEFAULT_PERIOD_SECONDS) -> int:
    """Return the first unix second belonging to *epoch*."""
    return epoch * period


def rotate_token(
    seed: bytes,
    unix_time: float,
    period: int = DEFAULT_PERIOD_SECONDS,
) -> EpochToken:
    """Compute ``HMAC-SHA256(seed, BigEndian64(epoch))`` for the epoch of *unix_time*.

    Two timestamps inside the same ``[epoch * period, (epoch + 1) * period)``
    window yield identical tokens.

    Raises
    ------
    CryptoFailure
        If *seed* is not 32 bytes. Seeds come from :func:`derive_seed` or
        validated metadata, so this is an invariant violation.
    InputError
        If *unix_time* is negative or *period* is not positive.
    """
    if len(seed) != SEED_SIZE:
        raise CryptoFailure(
            f"seed must be {SEED_SIZE} bytes, got {len(seed)}"
        )
    epoch = epoch_for(unix_time, period)
    try:
        message = struct.pack(">Q", epoch)
    except struct.error as exc:
        raise InputError(f"epoch {epoch} does not fit in 64 bits") from exc
    token = hmac.new(seed, message, hashlib.sha256).digest()
    return EpochToken(token=token, epoch=epoch)


# ---------------------------------------------------------------------------
# Identifier encoding
# ---------------------------------------------------------------------------


def encode_identifier(jti: str, token: bytes, valid: bool) -> bytes:
    """Encode the revocation identifier for *jti* under *token*.

    The revoked form is one extra SHA256 iteration over the valid form, so
    ``encode_identifier(j, t, False) == SHA256(encode_identifier(j, t, True))``.
    """
    base = hashlib.sha256(token + jti_digest(jti)).digest()
    if valid:
        return base
    return hashlib.sha256(base).digest()


def identifier_to_text(identifier: bytes) -> str:
    """Serialize an identifier the way publications carry it."""
    return b64url_encode(identifier)


def identifier_from_text(text: str) -> bytes:
    """Parse a base64url identifier back to bytes."""
    return b64url_decode(text)


def compute_identifier(
    jti: str,
    seed: bytes,
    unix_time: float,
    valid: bool,
    period: int = DEFAULT_PERIOD_SECONDS,
) -> str:
    """Run token rotation and encoding in one step; return base64url text."""
    epoch_token = rotate_token(seed, unix_time, period)
    return identifier_to_text(encode_identifier(jti, epoch_token.token, valid))


def compute_identifier_with_token(jti: str, token_text: str, valid: bool) -> str:
    """Encode an identifier from a base64url token as carried by holder proofs."""
    return identifier_to_text(encode_identifier(jti, b64url_decode(token_text), valid))
