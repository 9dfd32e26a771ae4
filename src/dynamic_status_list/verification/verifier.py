"""Verifier — decide a credential's status from a publication and a holder proof.

Given the holder's epoch token, the verifier computes both candidate
identifiers (valid-encoded and revoked-encoded) and looks them up in the
published set. Exactly one must be present:

============================  ===================================
Present                       Outcome
============================  ===================================
valid-encoded only            ``True`` (credential still valid)
revoked-encoded only          ``False`` (credential revoked)
neither                       :class:`IdentifierNotFoundError`
both                          :class:`AmbiguousResultError`
============================  ===================================

The verifier learns the status of this one credential only; the other
published identifiers stay opaque to it.
"""
from __future__ import annotations

import logging

from dynamic_status_list.errors import AmbiguousResultError, IdentifierNotFoundError, InputError
from dynamic_status_list.holder.proof import HolderProof
from dynamic_status_list.protocol.derivation import (
    TOKEN_SIZE,
    b64url_decode,
    encode_identifier,
    identifier_to_text,
)
from dynamic_status_list.publication.models import Publication

logger = logging.getLogger(__name__)


class Verifier:
    """Checks holder proofs against publications."""

    def verify(self, publication: Publication, proof: HolderProof) -> bool:
        """Return True if the proof's credential is valid in *publication*.

        Parameters
        ----------
        publication:
            A verified publication.
        proof:
            Holder proof carrying the jti and the epoch token.

        Returns
        -------
        bool
            True for valid, False for revoked.

        Raises
        ------
        InputError
            If the proof token is not a 32-byte base64url value.
        IdentifierNotFoundError
            If neither candidate identifier is published.
        AmbiguousResultError
            If both candidates are published.
        """
        token = b64url_decode(proof.token)
        if len(token) != TOKEN_SIZE:
            raise InputError(f"proof token must be {TOKEN_SIZE} bytes, got {len(token)}")

        valid_candidate = identifier_to_text(encode_identifier(proof.jti, token, True))
        revoked_candidate = identifier_to_text(encode_identifier(proof.jti, token, False))

        valid_found = publication.contains(valid_candidate)
        revoked_found = publication.contains(revoked_candidate)

        if valid_found and revoked_found:
            logger.critical(
                "Both candidate identifiers present in publication from %s",
                publication.issuer_thumbprint,
            )
            raise AmbiguousResultError(
                "both the valid and the revoked identifier are published; "
                "the publication is inconsistent"
            )
        if valid_found:
            return True
        if revoked_found:
            return False

        if publication.covers(proof.timestamp):
            detail = "credential is not tracked by this publication"
        else:
            detail = (
                f"proof computed at {proof.timestamp} is outside the publication "
                f"window [{publication.not_before}, {publication.not_after}]"
            )
        raise IdentifierNotFoundError(f"status list identifier not found: {detail}")


__all__ = ["Verifier"]
