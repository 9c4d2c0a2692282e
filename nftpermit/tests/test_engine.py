# -*- coding: utf-8 -*-
"""
Permit engine tests

Scenarios
- approve via permit, transfer, replay of the same permit is refused
- expired permit → DeadlineExpired
- forged / unauthorized signer → InvalidSignature
Properties
- nonce changes only on transfer; permits never consume it
- stale nonce, forged signature and unauthorized signer are indistinguishable
- transfer_with_permit is all-or-nothing
"""
from __future__ import annotations

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from nftpermit.errors import (
    DeadlineExpired,
    InvalidSignature,
    NotOwner,
    PermitError,
    UnknownAsset,
)
from nftpermit.permit import apply_permit, transfer_with_permit, verify_permit
from nftpermit.registry import OwnershipRegistry
from nftpermit.types import PermitMessage
from nftpermit.tests.conftest import DAY, GENESIS_TIME, make_account

NOW = GENESIS_TIME


def _permit(signer, domain, spender, *, asset_id=0, nonce=0, deadline=NOW + 7 * DAY):
    msg = PermitMessage(spender=spender, asset_id=asset_id, nonce=nonce, deadline=deadline)
    return msg, signer.sign_permit(domain, spender, asset_id, nonce, deadline)


# ----------------------------- scenarios -------------------------------------


def test_permit_then_transfer_invalidates_replay(domain, registry, alice, bob, carol):
    msg, sig = _permit(alice, domain, bob.address)

    apply_permit(domain, registry, msg, sig, now=NOW)
    assert registry.approved_of(0) == bob.address
    assert registry.nonce_of(0) == 0

    registry.transfer(0, alice.address, carol.address)
    assert registry.nonce_of(0) == 1
    assert registry.approved_of(0) is None

    with pytest.raises(InvalidSignature):
        apply_permit(domain, registry, msg, sig, now=NOW)
    assert registry.approved_of(0) is None


def test_expired_permit(domain, registry, alice, bob):
    msg, sig = _permit(alice, domain, bob.address, deadline=NOW - 1)
    with pytest.raises(DeadlineExpired):
        apply_permit(domain, registry, msg, sig, now=NOW)
    assert registry.approved_of(0) is None


def test_deadline_is_inclusive(domain, registry, alice, bob):
    msg, sig = _permit(alice, domain, bob.address, deadline=NOW)
    apply_permit(domain, registry, msg, sig, now=NOW)
    assert registry.approved_of(0) == bob.address


def test_forged_signature_after_transfer(domain, registry, alice, bob, carol, eve):
    registry.transfer(0, alice.address, carol.address)
    # eve signs a message claiming alice's authority at nonce 0
    msg, sig = _permit(eve, domain, bob.address, nonce=0)
    with pytest.raises(InvalidSignature):
        apply_permit(domain, registry, msg, sig, now=NOW)


def test_unauthorized_signer_with_current_nonce(domain, registry, bob, dave):
    msg, sig = _permit(dave, domain, bob.address)
    with pytest.raises(InvalidSignature):
        apply_permit(domain, registry, msg, sig, now=NOW)


def test_unauthorized_signer_wins_over_expiry(domain, registry, bob, dave):
    msg, sig = _permit(dave, domain, bob.address, deadline=NOW - 10)
    with pytest.raises(InvalidSignature):
        apply_permit(domain, registry, msg, sig, now=NOW)


def test_malformed_signature_is_invalid_signature(domain, registry, bob):
    msg = PermitMessage(spender=bob.address, asset_id=0, nonce=0, deadline=NOW + DAY)
    for bad in (b"", b"\x00" * 65, b"\x01" * 64 + b"\x1d", "0xnothex"):
        with pytest.raises(InvalidSignature) as ei:
            apply_permit(domain, registry, msg, bad, now=NOW)
        assert ei.value.__cause__ is None
        assert ei.value.__suppress_context__


def test_signature_for_other_domain_rejected(domain, registry, alice, bob):
    from dataclasses import replace

    other = replace(domain, chain_id=domain.chain_id + 1)
    msg, sig = _permit(alice, other, bob.address)
    with pytest.raises(InvalidSignature):
        apply_permit(domain, registry, msg, sig, now=NOW)


def test_tampered_message_rejected(domain, registry, alice, bob, carol):
    msg, sig = _permit(alice, domain, bob.address)
    tampered = PermitMessage(spender=carol.address, asset_id=0, nonce=0, deadline=msg.deadline)
    with pytest.raises(InvalidSignature):
        apply_permit(domain, registry, tampered, sig, now=NOW)


def test_unknown_asset(domain, registry, alice, bob):
    msg, sig = _permit(alice, domain, bob.address, asset_id=5)
    with pytest.raises(UnknownAsset):
        apply_permit(domain, registry, msg, sig, now=NOW)


def test_operator_and_approved_spender_can_sign(domain, registry, alice, bob, carol, dave):
    registry.set_operator_approval(alice.address, carol.address, True)
    msg, sig = _permit(carol, domain, bob.address)
    apply_permit(domain, registry, msg, sig, now=NOW)
    assert registry.approved_of(0) == bob.address

    # bob, now the approved spender, re-delegates to dave
    msg, sig = _permit(bob, domain, dave.address)
    apply_permit(domain, registry, msg, sig, now=NOW)
    assert registry.approved_of(0) == dave.address


def test_verify_permit_returns_signer_without_mutation(domain, registry, alice, bob):
    msg, sig = _permit(alice, domain, bob.address)
    before = registry.snapshot()
    assert verify_permit(domain, registry, msg, sig, now=NOW) == alice.address
    assert registry.snapshot() == before


def test_now_must_be_a_timestamp(domain, registry, alice, bob):
    msg, sig = _permit(alice, domain, bob.address)
    with pytest.raises(ValueError):
        apply_permit(domain, registry, msg, sig, now=-1)


def test_errors_do_not_reveal_the_failing_check(domain, registry, alice, bob, dave):
    stale_msg, stale_sig = _permit(alice, domain, bob.address, nonce=0)
    registry.transfer(0, alice.address, alice.address)  # nonce → 1, owner unchanged
    forged_msg, forged_sig = _permit(dave, domain, bob.address, nonce=1)

    errors = []
    for m, s in ((stale_msg, stale_sig), (forged_msg, forged_sig)):
        with pytest.raises(InvalidSignature) as ei:
            apply_permit(domain, registry, m, s, now=NOW)
        errors.append(ei.value.to_dict())
    assert errors[0] == errors[1]
    assert "data" not in errors[0]


# ----------------------------- transfer with permit ---------------------------


def test_transfer_with_permit_moves_asset(domain, registry, alice, bob):
    msg, sig = _permit(alice, domain, bob.address)
    transfer_with_permit(domain, registry, bob.address, alice.address, bob.address, msg, sig, now=NOW)
    assert registry.owner_of(0) == bob.address
    assert registry.nonce_of(0) == 1
    assert registry.approved_of(0) is None
    names = [e.name for e in registry.events.events[-2:]]
    assert names == ["Approval", "Transfer"]
    (approval,) = registry.events.named("Approval")
    assert approval.args["approved"] == bob.address
    assert len(registry.events.named("Transfer")) == 2


def test_transfer_with_permit_wrong_caller(domain, registry, alice, bob, carol):
    msg, sig = _permit(alice, domain, bob.address)
    before = registry.snapshot()
    with pytest.raises(InvalidSignature):
        transfer_with_permit(domain, registry, carol.address, alice.address, bob.address, msg, sig, now=NOW)
    with pytest.raises(InvalidSignature):
        transfer_with_permit(domain, registry, carol.address, alice.address, carol.address, msg, sig, now=NOW)
    assert registry.snapshot() == before


@pytest.mark.parametrize("case", ["expired", "forged", "stale", "wrong_from"])
def test_transfer_with_permit_is_all_or_nothing(domain, registry, alice, bob, carol, eve, case):
    if case == "expired":
        msg, sig = _permit(alice, domain, bob.address, deadline=NOW - 1)
        from_ = alice.address
    elif case == "forged":
        msg, sig = _permit(eve, domain, bob.address)
        from_ = alice.address
    elif case == "stale":
        msg, sig = _permit(alice, domain, bob.address, nonce=1)
        from_ = alice.address
    else:
        msg, sig = _permit(alice, domain, bob.address)
        from_ = carol.address

    before = registry.snapshot()
    with pytest.raises(PermitError) as ei:
        transfer_with_permit(domain, registry, bob.address, from_, bob.address, msg, sig, now=NOW)
    if case == "wrong_from":
        assert isinstance(ei.value, NotOwner)
    assert registry.owner_of(0) == alice.address
    assert registry.nonce_of(0) == 0
    assert registry.approved_of(0) is None
    assert registry.snapshot() == before


# ----------------------------- properties -------------------------------------


_ACCOUNTS = [make_account(f"prop-{i}") for i in range(4)]

_ops = st.lists(
    st.tuples(
        st.sampled_from(["transfer", "permit", "operator", "stale"]),
        st.integers(min_value=0, max_value=3),
        st.booleans(),
    ),
    max_size=25,
)


@settings(max_examples=30, deadline=None)
@given(ops=_ops)
def test_nonce_moves_only_on_transfer(ops):
    from nftpermit.types import DomainContext

    domain = DomainContext("Prop NFT", "1", 31337, "0x" + "77" * 20)
    reg = OwnershipRegistry()
    reg.issue(_ACCOUNTS[0].address)
    old = []  # (msg, sig) pairs signed by an owner at some earlier nonce

    for op, idx, flag in ops:
        other = _ACCOUNTS[idx]
        owner_addr = reg.owner_of(0)
        owner = next(a for a in _ACCOUNTS if a.address == owner_addr)
        nonce = reg.nonce_of(0)

        if op == "transfer":
            reg.transfer(0, owner_addr, other.address)
            assert reg.nonce_of(0) == nonce + 1
        elif op == "permit":
            msg = PermitMessage(spender=other.address, asset_id=0, nonce=nonce, deadline=NOW + DAY)
            sig = owner.sign_permit(domain, other.address, 0, nonce, NOW + DAY)
            apply_permit(domain, reg, msg, sig, now=NOW)
            old.append((msg, sig))
            assert reg.nonce_of(0) == nonce
            assert reg.approved_of(0) == other.address
        elif op == "operator":
            reg.set_operator_approval(owner_addr, other.address, flag)
            assert reg.nonce_of(0) == nonce
        else:
            for msg, sig in old:
                if msg.nonce != nonce:
                    before = reg.snapshot()
                    with pytest.raises(InvalidSignature):
                        apply_permit(domain, reg, msg, sig, now=NOW)
                    assert reg.snapshot() == before


def test_wallet_signed_typed_data_is_accepted(domain, registry, alice, bob):
    eth_account = pytest.importorskip("eth_account")
    from eth_account.messages import encode_typed_data

    from nftpermit.encoding.typed_data import permit_typed_data

    msg = PermitMessage(spender=bob.address, asset_id=0, nonce=0, deadline=NOW + DAY)
    wallet = eth_account.Account.from_key(alice.key.to_bytes())
    signed = wallet.sign_message(encode_typed_data(full_message=permit_typed_data(domain, msg)))

    apply_permit(domain, registry, msg, bytes(signed.signature), now=NOW)
    assert registry.approved_of(0) == bob.address


def test_permit_transfer_races_plain_transfer(domain, accounts):
    """Exactly one of two racing transfers of a fresh asset wins; the nonce ends at 1."""
    import threading

    alice, bob, carol = accounts["alice"], accounts["bob"], accounts["carol"]
    for _ in range(25):
        reg = OwnershipRegistry()
        reg.issue(alice.address)
        msg, sig = _permit(alice, domain, bob.address)
        start = threading.Barrier(2)
        outcomes = {}

        def redeem() -> None:
            start.wait()
            try:
                transfer_with_permit(domain, reg, bob.address, alice.address, bob.address, msg, sig, now=NOW)
                outcomes["permit"] = "ok"
            except (InvalidSignature, NotOwner) as e:
                outcomes["permit"] = type(e).__name__

        def move() -> None:
            start.wait()
            try:
                reg.transfer(0, alice.address, carol.address)
                outcomes["plain"] = "ok"
            except NotOwner:
                outcomes["plain"] = "NotOwner"

        threads = [threading.Thread(target=redeem), threading.Thread(target=move)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert list(outcomes.values()).count("ok") == 1
        assert reg.nonce_of(0) == 1
        assert reg.approved_of(0) is None
        winner = bob.address if outcomes["permit"] == "ok" else carol.address
        assert reg.owner_of(0) == winner
        assert reg.balance_of(winner) == 1
        assert reg.balance_of(alice.address) == 0
