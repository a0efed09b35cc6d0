import struct

import pytest

from stellar_review.operations import (
    AllowTrustOp,
    CreateAccountOp,
    OperationType,
    PaymentOp,
    parse_operation,
)
from stellar_review.types import AssetType, KeyType, LedgerEntryType, Price, SignerKeyType
from stellar_review.xdr import XdrError, XdrReader

KEY = bytes(range(32))
KEY2 = bytes(range(32, 64))
POOL = bytes(range(64, 96))


def u32(value):
    return struct.pack(">I", value)


def i32(value):
    return struct.pack(">i", value)


def u64(value):
    return struct.pack(">Q", value)


def i64(value):
    return struct.pack(">q", value)


def account(key=KEY):
    return u32(0) + key


def native():
    return u32(0)


def credit4(code=b"USD\0", issuer=KEY2):
    return u32(1) + code + account(issuer)


def muxed(key=KEY):
    return u32(0) + key


def header(op_type, source=b""):
    if source:
        return u32(1) + source + u32(op_type)
    return u32(0) + u32(op_type)


def parse(data):
    reader = XdrReader(data)
    op = parse_operation(reader)
    return op, reader


def test_create_account():
    op, reader = parse(header(0) + account() + i64(12345))
    assert op.type == OperationType.CREATE_ACCOUNT
    assert op.source_account is None
    assert op.body == CreateAccountOp(KEY, 12345)
    assert reader.remaining() == 0


def test_payment_with_muxed_source():
    source = u32(0x100) + u64(7) + KEY2
    op, reader = parse(header(1, source) + muxed() + credit4() + i64(500))
    assert op.source_account.type == KeyType.MUXED_ED25519
    assert op.source_account.id == 7
    assert op.source_account.ed25519 == KEY2
    assert isinstance(op.body, PaymentOp)
    assert op.body.asset.type == AssetType.CREDIT_ALPHANUM4
    assert op.body.asset.code == b"USD\0"
    assert op.body.asset.issuer == KEY2
    assert op.body.amount == 500
    assert reader.remaining() == 0


def test_path_payment_strict_receive_with_path():
    data = (
        header(2) + native() + i64(10) + muxed() + credit4() + i64(20)
        + u32(2) + native() + credit4()
    )
    op, reader = parse(data)
    assert op.body.send_max == 10
    assert op.body.dest_amount == 20
    assert len(op.body.path) == 2
    assert op.body.path[0].is_native()
    assert reader.remaining() == 0


def test_path_payment_path_too_long():
    data = header(13) + native() + i64(10) + muxed() + native() + i64(5) + u32(6)
    with pytest.raises(XdrError):
        parse(data)


def test_path_payment_strict_send():
    data = header(13) + native() + i64(11) + muxed() + native() + i64(3) + u32(0)
    op, reader = parse(data)
    assert op.type == OperationType.PATH_PAYMENT_STRICT_SEND
    assert op.body.send_amount == 11
    assert op.body.dest_min == 3
    assert op.body.path == ()


def test_manage_sell_and_buy_offer():
    tail = native() + credit4() + i64(100) + i32(3) + i32(4) + i64(99)
    sell, _ = parse(header(3) + tail)
    buy, _ = parse(header(12) + tail)
    assert sell.body.amount == 100
    assert sell.body.price == Price(3, 4)
    assert sell.body.offer_id == 99
    assert buy.body.buy_amount == 100
    assert buy.body.offer_id == 99


def test_zero_price_denominator_rejected():
    with pytest.raises(XdrError):
        parse(header(4) + native() + credit4() + i64(1) + i32(1) + i32(0))


def test_set_options_all_absent():
    op, reader = parse(header(5) + u32(0) * 9)
    assert op.body.home_domain is None
    assert op.body.signer is None
    assert op.body.master_weight is None
    assert reader.remaining() == 0


def test_set_options_fields_present():
    data = (
        header(5)
        + u32(1) + account(KEY2)
        + u32(1) + u32(1)
        + u32(1) + u32(2)
        + u32(1) + u32(10)
        + u32(0) + u32(0) + u32(0)
        + u32(1) + u32(7) + b"example\0"
        + u32(1) + u32(1) + KEY + u32(5)
    )
    op, reader = parse(data)
    body = op.body
    assert body.inflation_destination == KEY2
    assert body.clear_flags == 1
    assert body.set_flags == 2
    assert body.master_weight == 10
    assert body.low_threshold is None
    assert body.home_domain == b"example"
    assert body.signer.key.type == SignerKeyType.PRE_AUTH_TX
    assert body.signer.weight == 5
    assert reader.remaining() == 0


def test_set_options_home_domain_bad_padding():
    data = header(5) + u32(0) * 7 + u32(1) + u32(3) + b"abcX" + u32(0)
    with pytest.raises(XdrError):
        parse(data)


def test_set_options_home_domain_too_long():
    data = header(5) + u32(0) * 7 + u32(1) + u32(33) + bytes(36) + u32(0)
    with pytest.raises(XdrError):
        parse(data)


def test_change_trust_pool_share():
    data = header(6) + u32(3) + u32(0) + native() + credit4() + i32(30) + u64(2**64 - 1)
    op, _ = parse(data)
    assert op.body.line.type == AssetType.POOL_SHARE
    assert op.body.line.liquidity_pool.fee == 30
    assert op.body.limit == 2**64 - 1


def test_allow_trust():
    data = header(7) + account() + u32(2) + b"LONGCODE\0\0\0\0" + u32(1)
    op, reader = parse(data)
    assert op.body == AllowTrustOp(KEY, AssetType.CREDIT_ALPHANUM12, b"LONGCODE\0\0\0\0", 1)
    assert reader.remaining() == 0


def test_allow_trust_native_rejected():
    with pytest.raises(XdrError):
        parse(header(7) + account() + u32(0) + u32(1))


def test_account_merge_and_empty_operations():
    merge, _ = parse(header(8) + muxed(KEY2))
    inflation, reader = parse(header(9))
    end, _ = parse(header(17))
    assert merge.body.destination.ed25519 == KEY2
    assert inflation.body is None
    assert inflation.type == OperationType.INFLATION
    assert end.body is None
    assert reader.remaining() == 0


def test_manage_data_with_and_without_value():
    with_value, _ = parse(header(10) + u32(4) + b"name" + u32(1) + u32(2) + b"hi\0\0")
    removed, _ = parse(header(10) + u32(4) + b"name" + u32(0))
    assert with_value.body.data_name == b"name"
    assert with_value.body.data_value == b"hi"
    assert removed.body.data_value is None


def test_manage_data_value_too_long():
    with pytest.raises(XdrError):
        parse(header(10) + u32(4) + b"name" + u32(1) + u32(65) + bytes(68))


def test_bump_sequence():
    op, _ = parse(header(11) + i64(2**62))
    assert op.body.bump_to == 2**62


def test_create_claimable_balance():
    claimant_a = u32(0) + account() + u32(0)
    claimant_b = u32(0) + account(KEY2) + u32(1) + u32(2) + u32(4) + i64(100) + u32(3) + u32(0)
    data = header(14) + native() + i64(77) + u32(2) + claimant_a + claimant_b
    op, reader = parse(data)
    assert op.body.amount == 77
    assert [c.destination for c in op.body.claimants] == [KEY, KEY2]
    assert reader.remaining() == 0


def test_too_many_claimants():
    with pytest.raises(XdrError):
        parse(header(14) + native() + i64(1) + u32(11))


def test_unknown_claimant_type():
    with pytest.raises(XdrError):
        parse(header(14) + native() + i64(1) + u32(1) + u32(1) + account() + u32(0))


def test_claim_and_clawback_claimable_balance():
    claim, _ = parse(header(15) + u32(0) + POOL)
    clawback, _ = parse(header(20) + u32(0) + POOL)
    assert claim.body.balance_id.v0 == POOL
    assert clawback.body.balance_id.v0 == POOL


def test_begin_sponsoring():
    op, _ = parse(header(16) + account(KEY2))
    assert op.body.sponsored_id == KEY2


def test_revoke_sponsorship_ledger_entry_and_signer():
    entry, _ = parse(header(18) + u32(0) + u32(2) + account() + i64(42))
    signer, reader = parse(header(18) + u32(1) + account() + u32(2) + KEY2)
    assert entry.body.ledger_key.type == LedgerEntryType.OFFER
    assert entry.body.ledger_key.offer_id == 42
    assert signer.body.account_id == KEY
    assert signer.body.signer_key.type == SignerKeyType.HASH_X
    assert signer.body.signer_key.key == KEY2
    assert reader.remaining() == 0


def test_revoke_sponsorship_unknown_type():
    with pytest.raises(XdrError):
        parse(header(18) + u32(2))


def test_clawback():
    op, _ = parse(header(19) + credit4() + muxed(KEY2) + i64(9))
    assert op.body.from_account.ed25519 == KEY2
    assert op.body.amount == 9


def test_set_trust_line_flags():
    op, _ = parse(header(21) + account() + credit4() + u32(1) + u32(4))
    assert op.body.trustor == KEY
    assert op.body.clear_flags == 1
    assert op.body.set_flags == 4


def test_liquidity_pool_deposit_and_withdraw():
    deposit, _ = parse(
        header(22) + POOL + i64(1) + i64(2) + i32(1) + i32(2) + i32(3) + i32(4)
    )
    withdraw, reader = parse(header(23) + POOL + i64(5) + i64(6) + i64(7))
    assert deposit.body.liquidity_pool_id == POOL
    assert deposit.body.min_price == Price(1, 2)
    assert deposit.body.max_price == Price(3, 4)
    assert (withdraw.body.amount, withdraw.body.min_amount_a, withdraw.body.min_amount_b) == (
        5,
        6,
        7,
    )
    assert reader.remaining() == 0


def test_unknown_operation_type():
    with pytest.raises(XdrError):
        parse(header(24))


def test_truncated_operation():
    with pytest.raises(XdrError):
        parse(header(0) + account() + b"\x00\x01")


def test_operations_read_in_sequence():
    data = header(11) + i64(3) + header(9)
    reader = XdrReader(data)
    first = parse_operation(reader)
    second = parse_operation(reader)
    assert first.body.bump_to == 3
    assert second.type == OperationType.INFLATION
    assert reader.remaining() == 0