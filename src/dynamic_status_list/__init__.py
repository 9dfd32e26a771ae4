"""dynamic-status-list — privacy-preserving credential revocation.

An issuer publishes, once per epoch, a shuffled and signed set of
pseudorandom revocation identifiers, one per tracked credential. Only the
holder of a credential (and whoever the holder shows its epoch token to)
can tell which identifier is theirs and whether it encodes "valid" or
"revoked".

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
>>> import dynamic_status_list
>>> dynamic_status_list.__version__
'0.1.0'

Quick start
-----------
::

    from dynamic_status_list import (
        SecretStore, RevocationRegistry, PublicationEngine,
        HolderProofBuilder, PrivateMetadata, Verifier, derive_seed,
    )

    secrets = SecretStore.generate()
    registry = RevocationRegistry()
    registry.track("abc")
    publication = PublicationEngine(secrets).publish(registry, now=1_700_000_000)

    metadata = PrivateMetadata("abc", derive_seed(secrets.master_secret, "abc"))
    proof = HolderProofBuilder().build_proof(metadata, timestamp=1_700_000_000)
    assert Verifier().verify(publication, proof) is True
"""
from __future__ import annotations

__version__: str = "0.1.0"

# ------------------------------------------------------------------
# Errors
# ------------------------------------------------------------------
from dynamic_status_list.errors import (
    AmbiguousResultError,
    CryptoFailure,
    IdentifierNotFoundError,
    InputError,
    InvalidSignatureError,
    MissingMetadataError,
    NotFoundError,
    StatusListError,
    StorageError,
)

# ------------------------------------------------------------------
# Protocol
# ------------------------------------------------------------------
from dynamic_status_list.protocol.derivation import (
    EpochToken,
    derive_seed,
    encode_identifier,
    rotate_token,
)

# ------------------------------------------------------------------
# Issuer side
# ------------------------------------------------------------------
from dynamic_status_list.config import StatusListSettings
from dynamic_status_list.issuance.credentials import CredentialIssuer, EntryCapability
from dynamic_status_list.keys.secret_store import SecretStore
from dynamic_status_list.publication.engine import PublicationEngine
from dynamic_status_list.publication.models import Publication
from dynamic_status_list.publication.scheduler import PublicationScheduler
from dynamic_status_list.registry.revocation_registry import RevocationRegistry
from dynamic_status_list.service import StatusListService

# ------------------------------------------------------------------
# Holder and verifier side
# ------------------------------------------------------------------
from dynamic_status_list.holder.proof import HolderProof, HolderProofBuilder, PrivateMetadata
from dynamic_status_list.verification.verifier import Verifier

__all__ = [
    # version
    "__version__",
    # errors
    "AmbiguousResultError",
    "CryptoFailure",
    "IdentifierNotFoundError",
    "InputError",
    "InvalidSignatureError",
    "MissingMetadataError",
    "NotFoundError",
    "StatusListError",
    "StorageError",
    # protocol
    "EpochToken",
    "derive_seed",
    "encode_identifier",
    "rotate_token",
    # issuer side
    "CredentialIssuer",
    "EntryCapability",
    "Publication",
    "PublicationEngine",
    "PublicationScheduler",
    "RevocationRegistry",
    "SecretStore",
    "StatusListService",
    "StatusListSettings",
    # holder and verifier side
    "HolderProof",
    "HolderProofBuilder",
    "PrivateMetadata",
    "Verifier",
]
