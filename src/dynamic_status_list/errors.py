"""Exception hierarchy for dynamic-status-list.

Every error raised by this package derives from :class:`StatusListError`.
Recoverable input problems subclass :class:`ValueError` or :class:`KeyError`
as well, so callers that only know the builtin types still catch them.
"""
from __future__ import annotations


class StatusListError(Exception):
    """Base class for all dynamic-status-list errors."""


# ---------------------------------------------------------------------------
# Recoverable
# ---------------------------------------------------------------------------


class InputError(StatusListError, ValueError):
    """Raised for malformed files, missing fields or bad hex/base64 input."""


class MissingMetadataError(InputError):
    """Raised when a holder tries to build a proof without seed metadata."""

    def __init__(self, detail: str = "private metadata missing") -> None:
        super().__init__(detail)


class InvalidSignatureError(InputError):
    """Raised when a signed artifact fails signature or issuer checks."""


class NotFoundError(StatusListError, KeyError):
    """Raised when a credential identifier is not tracked by the registry."""

    def __init__(self, jti: str) -> None:
        self.jti = jti
        super().__init__(
            f"jti {jti!r} not found. Create a new entry first using the 'new' command."
        )

    def __str__(self) -> str:
        return str(self.args[0])


class StorageError(StatusListError):
    """Raised when persisting state fails; the change is not committed."""


class IdentifierNotFoundError(StatusListError):
    """Raised when neither candidate identifier is in the publication.

    Signals a stale publication, an untracked credential or a proof
    computed for another epoch. It is not evidence of validity either way.
    """


# ---------------------------------------------------------------------------
# Fatal
# ---------------------------------------------------------------------------


class AmbiguousResultError(StatusListError):
    """Raised when both the valid and the revoked identifier are published."""


class CryptoFailure(StatusListError):
    """Raised when a signing or MAC primitive fails. There is no fallback."""


__all__ = [
    "AmbiguousResultError",
    "CryptoFailure",
    "IdentifierNotFoundError",
    "InputError",
    "InvalidSignatureError",
    "MissingMetadataError",
    "NotFoundError",
    "StatusListError",
    "StorageError",
]
