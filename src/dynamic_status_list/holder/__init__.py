"""Holder-side status proofs computed from private issuance metadata."""
from __future__ import annotations

from dynamic_status_list.holder.proof import HolderProof, HolderProofBuilder, PrivateMetadata

__all__ = ["HolderProof", "HolderProofBuilder", "PrivateMetadata"]
