"""Registry of tracked credentials and their validity bit."""
from __future__ import annotations

from dynamic_status_list.registry.revocation_registry import RevocationRegistry

__all__ = ["RevocationRegistry"]
