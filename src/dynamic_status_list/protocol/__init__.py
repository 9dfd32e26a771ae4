"""Seed derivation, epoch token rotation and identifier encoding."""
from __future__ import annotations

from dynamic_status_list.protocol.derivation import (
    DEFAULT_PERIOD_SECONDS,
    EpochToken,
    b64url_decode,
    b64url_encode,
    compute_identifier,
    compute_identifier_with_token,
    derive_seed,
    encode_identifier,
    epoch_for,
    epoch_start,
    identifier_from_text,
    identifier_to_text,
    rotate_token,
)

__all__ = [
    "DEFAULT_PERIOD_SECONDS",
    "EpochToken",
    "b64url_decode",
    "b64url_encode",
    "compute_identifier",
    "compute_identifier_with_token",
    "derive_seed",
    "encode_identifier",
    "epoch_for",
    "epoch_start",
    "identifier_from_text",
    "identifier_to_text",
    "rotate_token",
]
