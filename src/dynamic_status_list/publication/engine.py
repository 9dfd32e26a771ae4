"""PublicationEngine — recompute and sign the full identifier set.

Every run is independent: snapshot the registry, derive one identifier per
tracked credential for the epoch containing ``now``, shuffle, sign. Given the
same snapshot and timestamp the result is identical up to the order of the
identifiers, which is deliberately randomized on every run so that a
credential's position cannot be tracked across publications.
"""
from __future__ import annotations

import dataclasses
import logging
import random
import time
from collections.abc import Mapping

from dynamic_status_list.keys.secret_store import SecretStore
from dynamic_status_list.protocol.derivation import (
    DEFAULT_PERIOD_SECONDS,
    derive_seed,
    encode_identifier,
    epoch_for,
    epoch_start,
    identifier_to_text,
    rotate_token,
)
from dynamic_status_list.publication.models import Publication
from dynamic_status_list.registry.revocation_registry import RevocationRegistry

logger = logging.getLogger(__name__)


class PublicationEngine:
    """Builds signed publications from registry snapshots.

    Parameters
    ----------
    secrets:
        Issuer key material; provides the master secret and signing key.
    period:
        Epoch length in seconds.
    rng:
        Source of randomness for the shuffle. Defaults to
        :class:`random.SystemRandom`; inject a seeded :class:`random.Random`
        only in tests.
    """

    def __init__(
        self,
        secrets: SecretStore,
        period: int = DEFAULT_PERIOD_SECONDS,
        rng: random.Random | None = None,
    ) -> None:
        self._secrets = secrets
        self._period = period
        self._rng = rng or random.SystemRandom()

    @property
    def period(self) -> int:
        """Epoch length in seconds."""
        return self._period

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    def publish(self, registry: RevocationRegistry, now: int | None = None) -> Publication:
        """Compute, shuffle and sign the identifier set for *registry* at *now*.

        Parameters
        ----------
        registry:
            Source of the tracked credentials. Only :meth:`snapshot` is used.
        now:
            Unix seconds; defaults to the current time.

        Returns
        -------
        Publication
            Signed publication valid until the end of the current epoch.
        """
        if now is None:
            now = int(time.time())

        snapshot = registry.snapshot()
        identifiers = self.compute_identifiers(snapshot, now)

        next_epoch_start = epoch_start(epoch_for(now, self._period) + 1, self._period)
        unsigned = Publication(
            issuer_thumbprint=self._secrets.thumbprint,
            not_before=now,
            not_after=next_epoch_start - 1,
            next_update=next_epoch_start,
            identifiers=tuple(identifiers),
        )
        signed = dataclasses.replace(unsigned, token=self._secrets.sign(unsigned.claims()))

        logger.info(
            "Published status list with %d entries, valid %d..%d",
            len(signed),
            signed.not_before,
            signed.not_after,
        )
        return signed

    def compute_identifiers(self, snapshot: Mapping[str, bool], now: int) -> list[str]:
        """Return shuffled base64url identifiers for every entry in *snapshot*."""
        master_secret = self._secrets.master_secret
        identifiers: list[str] = []
        for jti, valid in snapshot.items():
            seed = derive_seed(master_secret, jti)
            epoch_token = rotate_token(seed, now, self._period)
            identifiers.append(
                identifier_to_text(encode_identifier(jti, epoch_token.token, valid))
            )
        self._rng.shuffle(identifiers)
        return identifiers


__all__ = ["PublicationEngine"]
