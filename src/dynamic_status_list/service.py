"""StatusListService — the issuer-side context object.

Bundles the secret store, registry, publication engine and credential issuer
of one deployment and exposes the operations the command line and the
background scheduler use. There is no module-level state; every collaborator
is passed in or built from :class:`StatusListSettings`.

Locking
-------
The registry guards its own map. On top of that the service serializes
complete publish sequences (snapshot, sign, persist) so a publication built
from an older snapshot can never overwrite a newer one on disk.
"""
from __future__ import annotations

import logging
import random
import threading
from pathlib import Path

from dynamic_status_list.artifacts import CredentialBundleFile, read_model, write_model
from dynamic_status_list.config import StatusListSettings
from dynamic_status_list.issuance.credentials import CredentialIssuer, EntryCapability
from dynamic_status_list.keys.secret_store import SecretStore
from dynamic_status_list.protocol.derivation import derive_seed
from dynamic_status_list.publication.engine import PublicationEngine
from dynamic_status_list.publication.models import Publication
from dynamic_status_list.publication.scheduler import PublicationScheduler
from dynamic_status_list.registry.revocation_registry import RevocationRegistry

logger = logging.getLogger(__name__)


class StatusListService:
    """Issuer operations over one registry and one signing key.

    Parameters
    ----------
    settings:
        Deployment configuration.
    secrets:
        Issuer key material.
    registry:
        The revocation registry. Built from *settings* if omitted.
    rng:
        Shuffle randomness for the publication engine (tests only).
    persist:
        When False, publications are kept in memory and not written to
        ``settings.publication_path``.
    """

    def __init__(
        self,
        settings: StatusListSettings,
        secrets: SecretStore,
        registry: RevocationRegistry | None = None,
        rng: random.Random | None = None,
        persist: bool = True,
    ) -> None:
        self._settings = settings
        self._secrets = secrets
        self._registry = registry if registry is not None else RevocationRegistry()
        self._engine = PublicationEngine(secrets, period=settings.period_seconds, rng=rng)
        self._issuer = CredentialIssuer(secrets, settings.distribution_url)
        self._persist = persist
        self._publish_lock = threading.Lock()
        self._current: Publication | None = None

    @classmethod
    def open(cls, settings: StatusListSettings) -> "StatusListService":
        """Load (or create) the key and registry files named by *settings*."""
        secrets = SecretStore.load_or_generate(settings.key_path)
        registry = RevocationRegistry(persist_path=settings.registry_path)
        return cls(settings, secrets, registry)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def settings(self) -> StatusListSettings:
        return self._settings

    @property
    def secrets(self) -> SecretStore:
        return self._secrets

    @property
    def registry(self) -> RevocationRegistry:
        return self._registry

    @property
    def issuer(self) -> CredentialIssuer:
        return self._issuer

    @property
    def current_publication(self) -> Publication | None:
        """The most recent publication produced by this service."""
        return self._current

    # ------------------------------------------------------------------
    # Issuance
    # ------------------------------------------------------------------

    def issue_credential(self, out: Path | None = None) -> CredentialBundleFile:
        """Issue a mock credential and optionally write its bundle to *out*."""
        bundle = self._issuer.issue_mock_credential()
        if out is not None:
            write_model(bundle, out)
            logger.info("Mock credential written to %s", out)
        return bundle

    def create_entry(
        self,
        bundle_path: Path,
        capabilities: EntryCapability = EntryCapability.NONE,
        now: int | None = None,
    ) -> CredentialBundleFile:
        """Enroll the credential stored at *bundle_path* in the status list.

        Derives the credential's seed, attaches signed private metadata (and
        a detached revocation token when requested) to the bundle file,
        tracks the jti as valid and republishes.

        Returns
        -------
        CredentialBundleFile
            The updated bundle, also written back to *bundle_path*.
        """
        bundle = read_model(CredentialBundleFile, bundle_path)
        jti = self._issuer.read_jti(bundle.jwt)
        seed = derive_seed(self._secrets.master_secret, jti)

        detached = ""
        if EntryCapability.DETACHED in capabilities:
            detached = self._issuer.detached_jwt(jti)

        updated = CredentialBundleFile(
            jwt=bundle.jwt,
            private_metadata=self._issuer.private_metadata_jwt(jti, seed),
            detached_dsl_jwt=detached,
        )

        self._registry.track(jti)
        write_model(updated, bundle_path)
        self.republish(now)
        return updated

    # ------------------------------------------------------------------
    # Revocation and publication
    # ------------------------------------------------------------------

    def revoke(self, jti: str, now: int | None = None) -> Publication:
        """Revoke *jti* and publish the updated status list.

        Raises
        ------
        NotFoundError
            If *jti* is not tracked.
        """
        self._registry.revoke(jti)
        return self.republish(now)

    def republish(self, now: int | None = None) -> Publication:
        """Recompute, sign and persist the full status list."""
        with self._publish_lock:
            publication = self._engine.publish(self._registry, now)
            if self._persist:
                publication.save(self._settings.publication_path)
            self._current = publication
        return publication

    def scheduler(self) -> PublicationScheduler:
        """Return a scheduler that republishes once per epoch."""
        return PublicationScheduler(self.republish, self._settings.period_seconds)


__all__ = ["StatusListService"]
