"""Tests for dynamic_status_list.issuance.credentials — CredentialIssuer."""
from __future__ import annotations

import jwt
import pytest

from dynamic_status_list.errors import InputError, InvalidSignatureError
from dynamic_status_list.issuance.credentials import (
    DEFAULT_DISTRIBUTION_URL,
    CredentialIssuer,
    EntryCapability,
)
from dynamic_status_list.keys.secret_store import SecretStore


@pytest.fixture(scope="module")
def store() -> SecretStore:
    return SecretStore.generate()


@pytest.fixture()
def issuer(store: SecretStore) -> CredentialIssuer:
    return CredentialIssuer(store, "https://status.example/sdb/1")


class TestCredentialIssuer:
    def test_new_jti_is_32_hex_chars(self) -> None:
        jti = CredentialIssuer.new_jti()
        assert len(jti) == 32
        int(jti, 16)

    def test_new_jti_is_unique(self) -> None:
        assert len({CredentialIssuer.new_jti() for _ in range(50)}) == 50

    def test_mock_credential_claims(self, issuer: CredentialIssuer, store: SecretStore) -> None:
        bundle = issuer.issue_mock_credential()
        claims = store.verify(bundle.jwt)
        assert claims["sub"] == "Alice"
        assert claims["sdb"] == "https://status.example/sdb/1"
        assert bundle.private_metadata == ""

    def test_read_jti(self, issuer: CredentialIssuer, store: SecretStore) -> None:
        bundle = issuer.issue_mock_credential()
        assert issuer.read_jti(bundle.jwt) == store.verify(bundle.jwt)["jti"]

    def test_read_jti_requires_claim(self, issuer: CredentialIssuer, store: SecretStore) -> None:
        with pytest.raises(InputError):
            issuer.read_jti(store.sign({"sub": "Alice"}))

    def test_read_jti_rejects_foreign_issuer(self, issuer: CredentialIssuer) -> None:
        foreign = CredentialIssuer(SecretStore.generate()).issue_mock_credential()
        with pytest.raises(InvalidSignatureError):
            issuer.read_jti(foreign.jwt)

    def test_private_metadata_token(self, issuer: CredentialIssuer) -> None:
        token = issuer.private_metadata_jwt("abc", bytes(range(32)))
        claims = jwt.decode(token, options={"verify_signature": False})
        assert claims == {"sub": "abc", "seed": bytes(range(32)).hex()}

    def test_detached_token(self, issuer: CredentialIssuer) -> None:
        claims = jwt.decode(issuer.detached_jwt("abc"), options={"verify_signature": False})
        assert claims == {"sub": "abc", "sdb": "https://status.example/sdb/1"}

    def test_default_distribution_url(self, store: SecretStore) -> None:
        bundle = CredentialIssuer(store).issue_mock_credential()
        assert store.verify(bundle.jwt)["sdb"] == DEFAULT_DISTRIBUTION_URL


class TestEntryCapability:
    def test_none_has_no_detached(self) -> None:
        assert EntryCapability.DETACHED not in EntryCapability.NONE

    def test_detached_flag(self) -> None:
        assert EntryCapability.DETACHED in (EntryCapability.NONE | EntryCapability.DETACHED)
