"""Reading the XDR encoding of Stellar transaction components."""

from __future__ import annotations

import struct
from enum import IntEnum
from typing import Callable, TypeVar

from .types import (
    CLAIMABLE_BALANCE_ID_SIZE,
    CLAIMABLE_BALANCE_ID_TYPE_V0,
    ED25519_KEY_SIZE,
    HASH_SIZE,
    LIQUIDITY_POOL_ID_SIZE,
    SIGNED_PAYLOAD_MAX_SIZE,
    Asset,
    AssetType,
    ChangeTrustAsset,
    ClaimableBalanceId,
    KeyType,
    LedgerBounds,
    LedgerEntryType,
    LedgerKey,
    LiquidityPoolParameters,
    Memo,
    MemoType,
    MuxedAccount,
    Preconditions,
    Price,
    SignedPayload,
    SignerKey,
    SignerKeyType,
    TimeBounds,
    TrustLineAsset,
)

MEMO_TEXT_MAX_SIZE = 28
DATA_NAME_MAX_SIZE = 64
MAX_EXTRA_SIGNERS = 2
LIQUIDITY_POOL_CONSTANT_PRODUCT = 0

T = TypeVar("T")
E = TypeVar("E", bound=IntEnum)


class XdrError(ValueError):
    """Raised when XDR data is truncated or malformed."""


class PreconditionType(IntEnum):
    NONE = 0
    TIME = 1
    V2 = 2


class ClaimPredicateType(IntEnum):
    UNCONDITIONAL = 0
    AND = 1
    OR = 2
    NOT = 3
    BEFORE_ABSOLUTE_TIME = 4
    BEFORE_RELATIVE_TIME = 5


def _padded(size: int) -> int:
    return size + (4 - size % 4) % 4


def _enum(enum_cls: type[E], value: int, what: str) -> E:
    try:
        return enum_cls(value)
    except ValueError:
        raise XdrError(f"unknown {what} {value}") from None


class XdrReader:
    """A cursor over big-endian XDR data."""

    def __init__(self, data: bytes, offset: int = 0) -> None:
        self.data = bytes(data)
        if not 0 <= offset <= len(self.data):
            raise XdrError(f"offset {offset} outside data of {len(self.data)} bytes")
        self.offset = offset

    def remaining(self) -> int:
        return len(self.data) - self.offset

    def read_bytes(self, size: int) -> bytes:
        if size < 0 or size > self.remaining():
            raise XdrError(f"cannot read {size} bytes, {self.remaining()} left")
        chunk = self.data[self.offset:self.offset + size]
        self.offset += size
        return chunk

    def _unpack(self, fmt: str, size: int) -> int:
        return struct.unpack(fmt, self.read_bytes(size))[0]

    def read_u32(self) -> int:
        return self._unpack(">I", 4)

    def read_i32(self) -> int:
        return self._unpack(">i", 4)

    def read_u64(self) -> int:
        return self._unpack(">Q", 8)

    def read_i64(self) -> int:
        return self._unpack(">q", 8)

    def read_bool(self) -> bool:
        value = self.read_u32()
        if value not in (0, 1):
            raise XdrError(f"invalid boolean {value}")
        return value == 1

    def read_opaque(self, max_length: int) -> bytes:
        """Variable-length opaque data whose padding must be zero."""
        size = self.read_u32()
        if size > max_length:
            raise XdrError(f"opaque length {size} exceeds {max_length}")
        padded = _padded(size)
        if padded > self.remaining():
            raise XdrError("opaque data truncated")
        body = self.read_bytes(padded)
        if any(body[size:]):
            raise XdrError("non-zero padding")
        return body[:size]

    def read_optional(self, reader: Callable[[XdrReader], T]) -> T | None:
        """Read a presence flag, then the value when present."""
        if self.read_bool():
            return reader(self)
        return None


def parse_signer_key(reader: XdrReader) -> SignerKey:
    key_type = _enum(SignerKeyType, reader.read_u32(), "signer key type")
    if key_type != SignerKeyType.ED25519_SIGNED_PAYLOAD:
        return SignerKey(key_type, key=reader.read_bytes(ED25519_KEY_SIZE))
    ed25519 = reader.read_bytes(ED25519_KEY_SIZE)
    length = reader.read_u32()
    if not 0 < length <= SIGNED_PAYLOAD_MAX_SIZE:
        raise XdrError(f"signed payload length {length} out of range")
    payload = reader.read_bytes(_padded(length))[:length]
    return SignerKey(key_type, signed_payload=SignedPayload(ed25519, payload))


def parse_account_id(reader: XdrReader) -> bytes:
    """Raw ed25519 key of an account id; the key type is read but not checked."""
    reader.read_u32()
    return reader.read_bytes(ED25519_KEY_SIZE)


def parse_muxed_account(reader: XdrReader) -> MuxedAccount:
    key_type = _enum(KeyType, reader.read_u32(), "account key type")
    if key_type == KeyType.ED25519:
        return MuxedAccount(key_type, reader.read_bytes(ED25519_KEY_SIZE))
    account_id = reader.read_u64()
    return MuxedAccount(key_type, reader.read_bytes(ED25519_KEY_SIZE), account_id)


_CODE_SIZES = {AssetType.CREDIT_ALPHANUM4: 4, AssetType.CREDIT_ALPHANUM12: 12}


def _read_credit(reader: XdrReader, asset_type: AssetType) -> tuple[bytes, bytes]:
    code = reader.read_bytes(_CODE_SIZES[asset_type])
    return code, parse_account_id(reader)


def parse_asset(reader: XdrReader) -> Asset:
    asset_type = _enum(AssetType, reader.read_u32(), "asset type")
    if asset_type == AssetType.NATIVE:
        return Asset.native()
    if asset_type == AssetType.POOL_SHARE:
        raise XdrError("pool share is not a plain asset")
    code, issuer = _read_credit(reader, asset_type)
    return Asset(asset_type, code, issuer)


def parse_trust_line_asset(reader: XdrReader) -> TrustLineAsset:
    asset_type = _enum(AssetType, reader.read_u32(), "asset type")
    if asset_type == AssetType.NATIVE:
        return TrustLineAsset(asset_type)
    if asset_type == AssetType.POOL_SHARE:
        pool_id = reader.read_bytes(LIQUIDITY_POOL_ID_SIZE)
        return TrustLineAsset(asset_type, liquidity_pool_id=pool_id)
    code, issuer = _read_credit(reader, asset_type)
    return TrustLineAsset(asset_type, code, issuer)


def parse_liquidity_pool_parameters(reader: XdrReader) -> LiquidityPoolParameters:
    pool_type = reader.read_u32()
    if pool_type != LIQUIDITY_POOL_CONSTANT_PRODUCT:
        raise XdrError(f"unknown liquidity pool type {pool_type}")
    asset_a = parse_asset(reader)
    asset_b = parse_asset(reader)
    return LiquidityPoolParameters(asset_a, asset_b, reader.read_i32())


def parse_change_trust_asset(reader: XdrReader) -> ChangeTrustAsset:
    asset_type = _enum(AssetType, reader.read_u32(), "asset type")
    if asset_type == AssetType.NATIVE:
        return ChangeTrustAsset(asset_type)
    if asset_type == AssetType.POOL_SHARE:
        params = parse_liquidity_pool_parameters(reader)
        return ChangeTrustAsset(asset_type, liquidity_pool=params)
    code, issuer = _read_credit(reader, asset_type)
    return ChangeTrustAsset(asset_type, code, issuer)


def parse_price(reader: XdrReader) -> Price:
    numerator = reader.read_i32()
    denominator = reader.read_i32()
    if denominator == 0:
        raise XdrError("price denominator is zero")
    return Price(numerator, denominator)


def parse_claimant_predicate(reader: XdrReader) -> None:
    """Validate a claim predicate tree; its content is not kept."""
    pending = 1
    while pending:
        pending -= 1
        kind = _enum(ClaimPredicateType, reader.read_u32(), "claim predicate type")
        if kind in (ClaimPredicateType.AND, ClaimPredicateType.OR):
            count = reader.read_u32()
            if count != 2:
                raise XdrError(f"compound predicate needs 2 parts, got {count}")
            pending += 2
        elif kind == ClaimPredicateType.NOT:
            if reader.read_bool():
                pending += 1
        elif kind in (
            ClaimPredicateType.BEFORE_ABSOLUTE_TIME,
            ClaimPredicateType.BEFORE_RELATIVE_TIME,
        ):
            reader.read_i64()


def parse_claimable_balance_id(reader: XdrReader) -> ClaimableBalanceId:
    id_type = reader.read_u32()
    if id_type != CLAIMABLE_BALANCE_ID_TYPE_V0:
        raise XdrError(f"unknown claimable balance id type {id_type}")
    return ClaimableBalanceId(reader.read_bytes(CLAIMABLE_BALANCE_ID_SIZE), id_type)


def parse_ledger_key(reader: XdrReader) -> LedgerKey:
    entry_type = _enum(LedgerEntryType, reader.read_u32(), "ledger entry type")
    if entry_type == LedgerEntryType.ACCOUNT:
        return LedgerKey(entry_type, account_id=parse_account_id(reader))
    if entry_type == LedgerEntryType.TRUSTLINE:
        account_id = parse_account_id(reader)
        return LedgerKey(entry_type, account_id=account_id, asset=parse_trust_line_asset(reader))
    if entry_type == LedgerEntryType.OFFER:
        seller = parse_account_id(reader)
        return LedgerKey(entry_type, account_id=seller, offer_id=reader.read_i64())
    if entry_type == LedgerEntryType.DATA:
        account_id = parse_account_id(reader)
        name = reader.read_opaque(DATA_NAME_MAX_SIZE)
        return LedgerKey(entry_type, account_id=account_id, data_name=name)
    if entry_type == LedgerEntryType.CLAIMABLE_BALANCE:
        return LedgerKey(entry_type, balance_id=parse_claimable_balance_id(reader))
    return LedgerKey(entry_type, liquidity_pool_id=reader.read_bytes(LIQUIDITY_POOL_ID_SIZE))


def parse_time_bounds(reader: XdrReader) -> TimeBounds:
    min_time = reader.read_u64()
    return TimeBounds(min_time, reader.read_u64())


def parse_ledger_bounds(reader: XdrReader) -> LedgerBounds:
    min_ledger = reader.read_u32()
    return LedgerBounds(min_ledger, reader.read_u32())


def _parse_extra_signers(reader: XdrReader) -> None:
    count = reader.read_u32()
    if count > MAX_EXTRA_SIGNERS:
        raise XdrError(f"at most {MAX_EXTRA_SIGNERS} extra signers allowed, got {count}")
    for _ in range(count):
        parse_signer_key(reader)


def parse_preconditions(reader: XdrReader) -> Preconditions:
    kind = _enum(PreconditionType, reader.read_u32(), "precondition type")
    if kind == PreconditionType.NONE:
        return Preconditions()
    if kind == PreconditionType.TIME:
        return Preconditions(time_bounds=parse_time_bounds(reader))
    time_bounds = reader.read_optional(parse_time_bounds)
    ledger_bounds = reader.read_optional(parse_ledger_bounds)
    min_seq_num = reader.read_optional(XdrReader.read_i64)
    min_seq_age = reader.read_u64()
    min_seq_ledger_gap = reader.read_u32()
    _parse_extra_signers(reader)
    return Preconditions(
        time_bounds=time_bounds,
        ledger_bounds=ledger_bounds,
        min_seq_num=min_seq_num,
        min_seq_age=min_seq_age,
        min_seq_ledger_gap=min_seq_ledger_gap,
    )


def parse_memo(reader: XdrReader) -> Memo:
    memo_type = _enum(MemoType, reader.read_u32(), "memo type")
    if memo_type == MemoType.NONE:
        return Memo()
    if memo_type == MemoType.ID:
        return Memo(memo_type, id=reader.read_u64())
    if memo_type == MemoType.TEXT:
        return Memo(memo_type, text=reader.read_opaque(MEMO_TEXT_MAX_SIZE))
    return Memo(memo_type, hash=reader.read_bytes(HASH_SIZE))