"""Verification of holder proofs against signed publications."""
from __future__ import annotations

from dynamic_status_list.verification.verifier import Verifier

__all__ = ["Verifier"]
