# -*- coding: utf-8 -*-
"""
nftpermit.tests.conftest
========================

Shared fixtures:

- **Deterministic accounts**: secp256k1 keys derived from a tag via keccak, so
  addresses are stable across runs. Each account can sign raw digests and
  permits (signing is an external capability; it lives only in tests).
- **ManualClock**: an injectable block-time source that tests move by hand.
- **domain / registry / token**: a fresh deployment per test with asset 0
  issued to the owner account.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Dict

import pytest
from eth_keys import keys

from nftpermit.encoding.typed_data import permit_digest
from nftpermit.registry import OwnershipRegistry
from nftpermit.token import PermitToken
from nftpermit.types import DomainContext, PermitMessage
from nftpermit.utils.hash import keccak_256

os.environ.setdefault("PYTHONHASHSEED", "0")
os.environ.setdefault("TZ", "UTC")

# 2026-01-01T00:00:00Z; any fixed value works, tests only compare against it.
GENESIS_TIME = 1_767_225_600
DAY = 24 * 60 * 60

TOKEN_ADDRESS = "0x" + "5f" * 20


@dataclass
class Signer:
    label: str
    key: keys.PrivateKey

    @property
    def address(self) -> str:
        return self.key.public_key.to_checksum_address()

    def sign_digest(self, digest: bytes) -> bytes:
        """65-byte r || s || v with wallet-style v ∈ {27, 28}."""
        sig = self.key.sign_msg_hash(digest)
        return sig.to_bytes()[:64] + bytes([sig.v + 27])

    def sign_permit(
        self,
        domain: DomainContext,
        spender: str,
        asset_id: int,
        nonce: int,
        deadline: int,
    ) -> bytes:
        msg = PermitMessage(spender=spender, asset_id=asset_id, nonce=nonce, deadline=deadline)
        return self.sign_digest(permit_digest(domain, msg))


def make_account(label: str) -> Signer:
    secret = keccak_256(b"nftpermit-tests|" + label.encode("utf-8"))
    return Signer(label=label, key=keys.PrivateKey(secret))


class ManualClock:
    def __init__(self, start: int = GENESIS_TIME) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> int:
        self.now += seconds
        return self.now


@pytest.fixture(scope="session")
def accounts() -> Dict[str, Signer]:
    return {name: make_account(name) for name in ("alice", "bob", "carol", "dave", "eve")}


@pytest.fixture
def alice(accounts) -> Signer:
    return accounts["alice"]


@pytest.fixture
def bob(accounts) -> Signer:
    return accounts["bob"]


@pytest.fixture
def carol(accounts) -> Signer:
    return accounts["carol"]


@pytest.fixture
def dave(accounts) -> Signer:
    return accounts["dave"]


@pytest.fixture
def eve(accounts) -> Signer:
    return accounts["eve"]


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def domain() -> DomainContext:
    return DomainContext(
        name="Mock NFT",
        version="1",
        chain_id=1337,
        verifying_contract=TOKEN_ADDRESS,
    )


@pytest.fixture
def registry(alice) -> OwnershipRegistry:
    """Registry with asset 0 issued to alice (nonce 0, no approval)."""
    reg = OwnershipRegistry()
    assert reg.issue(alice.address) == 0
    return reg


@pytest.fixture
def token(alice, clock) -> PermitToken:
    """Token deployment with asset 0 minted by alice."""
    t = PermitToken(
        "Mock NFT",
        "mNft",
        chain_id=1337,
        verifying_contract=TOKEN_ADDRESS,
        clock=clock,
    )
    assert t.mint(alice.address) == 0
    return t
