#!/usr/bin/env python3
"""Example: Quickstart

Walks one credential through the whole status list lifecycle in memory:
enroll, publish, prove as the holder, verify, revoke, verify again.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install dynamic-status-list
"""
from __future__ import annotations

import time

import dynamic_status_list
from dynamic_status_list import (
    HolderProofBuilder,
    PrivateMetadata,
    SecretStore,
    StatusListService,
    StatusListSettings,
    Verifier,
    derive_seed,
)


def main() -> None:
    print(f"dynamic-status-list version: {dynamic_status_list.__version__}")

    # Step 1: An issuer with a fresh key, nothing written to disk
    settings = StatusListSettings()
    service = StatusListService(settings, SecretStore.generate(), persist=False)
    print(f"Issuer thumbprint: {service.secrets.thumbprint[:16]}...")

    # Step 2: Track a credential and publish
    jti = service.issuer.new_jti()
    service.registry.track(jti)
    now = int(time.time())
    publication = service.republish(now)
    print(f"Published {len(publication)} identifier(s), valid until {publication.not_after}")

    # Step 3: The holder derives its proof from private metadata
    metadata = PrivateMetadata(jti=jti, seed=derive_seed(service.secrets.master_secret, jti))
    proof = HolderProofBuilder(period=settings.period_seconds).build_proof(metadata, timestamp=now)
    print(f"Holder identifier: {proof.identifier}")

    # Step 4: Verify, revoke, verify again
    print(f"Valid: {Verifier().verify(publication, proof)}")
    publication = service.revoke(jti, now=now)
    print(f"Valid after revocation: {Verifier().verify(publication, proof)}")

    print("\nQuickstart complete.")


if __name__ == "__main__":
    main()
