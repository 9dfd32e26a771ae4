"""Mock credential issuance and status metadata signing."""
from __future__ import annotations

from dynamic_status_list.issuance.credentials import (
    DEFAULT_DISTRIBUTION_URL,
    CredentialIssuer,
    EntryCapability,
)

__all__ = ["CredentialIssuer", "DEFAULT_DISTRIBUTION_URL", "EntryCapability"]
