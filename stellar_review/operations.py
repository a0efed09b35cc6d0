"""Decoding of the operations carried by a Stellar transaction."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Union

from .types import (
    LIQUIDITY_POOL_ID_SIZE,
    Asset,
    AssetType,
    ChangeTrustAsset,
    ClaimableBalanceId,
    LedgerKey,
    MuxedAccount,
    Price,
    SignerKey,
)
from .xdr import (
    XdrError,
    XdrReader,
    parse_account_id,
    parse_asset,
    parse_change_trust_asset,
    parse_claimable_balance_id,
    parse_claimant_predicate,
    parse_ledger_key,
    parse_muxed_account,
    parse_price,
    parse_signer_key,
)

PATH_PAYMENT_MAX_PATH_LENGTH = 5
CLAIMANTS_MAX_LENGTH = 10
DATA_NAME_MAX_SIZE = 64
DATA_VALUE_MAX_SIZE = 64
HOME_DOMAIN_MAX_SIZE = 32
CLAIMANT_TYPE_V0 = 0
REVOKE_SPONSORSHIP_LEDGER_ENTRY = 0
REVOKE_SPONSORSHIP_SIGNER = 1

_ALLOW_TRUST_CODE_SIZES = {AssetType.CREDIT_ALPHANUM4: 4, AssetType.CREDIT_ALPHANUM12: 12}


class OperationType(IntEnum):
    CREATE_ACCOUNT = 0
    PAYMENT = 1
    PATH_PAYMENT_STRICT_RECEIVE = 2
    MANAGE_SELL_OFFER = 3
    CREATE_PASSIVE_SELL_OFFER = 4
    SET_OPTIONS = 5
    CHANGE_TRUST = 6
    ALLOW_TRUST = 7
    ACCOUNT_MERGE = 8
    INFLATION = 9
    MANAGE_DATA = 10
    BUMP_SEQUENCE = 11
    MANAGE_BUY_OFFER = 12
    PATH_PAYMENT_STRICT_SEND = 13
    CREATE_CLAIMABLE_BALANCE = 14
    CLAIM_CLAIMABLE_BALANCE = 15
    BEGIN_SPONSORING_FUTURE_RESERVES = 16
    END_SPONSORING_FUTURE_RESERVES = 17
    REVOKE_SPONSORSHIP = 18
    CLAWBACK = 19
    CLAWBACK_CLAIMABLE_BALANCE = 20
    SET_TRUST_LINE_FLAGS = 21
    LIQUIDITY_POOL_DEPOSIT = 22
    LIQUIDITY_POOL_WITHDRAW = 23


@dataclass(frozen=True)
class CreateAccountOp:
    destination: bytes
    starting_balance: int


@dataclass(frozen=True)
class PaymentOp:
    destination: MuxedAccount
    asset: Asset
    amount: int


@dataclass(frozen=True)
class PathPaymentStrictReceiveOp:
    send_asset: Asset
    send_max: int
    destination: MuxedAccount
    dest_asset: Asset
    dest_amount: int
    path: tuple[Asset, ...] = ()


@dataclass(frozen=True)
class CreatePassiveSellOfferOp:
    selling: Asset
    buying: Asset
    amount: int
    price: Price


@dataclass(frozen=True)
class ManageSellOfferOp:
    selling: Asset
    buying: Asset
    amount: int
    price: Price
    offer_id: int


@dataclass(frozen=True)
class Signer:
    key: SignerKey
    weight: int


@dataclass(frozen=True)
class SetOptionsOp:
    """Account options; fields left unset in the operation are None."""

    inflation_destination: bytes | None = None
    clear_flags: int | None = None
    set_flags: int | None = None
    master_weight: int | None = None
    low_threshold: int | None = None
    medium_threshold: int | None = None
    high_threshold: int | None = None
    home_domain: bytes | None = None
    signer: Signer | None = None


@dataclass(frozen=True)
class ChangeTrustOp:
    line: ChangeTrustAsset
    limit: int


@dataclass(frozen=True)
class AllowTrustOp:
    """Trust authorization; ``asset_code`` keeps its raw zero padding."""

    trustor: bytes
    asset_type: AssetType
    asset_code: bytes
    authorize: int


@dataclass(frozen=True)
class AccountMergeOp:
    destination: MuxedAccount


@dataclass(frozen=True)
class ManageDataOp:
    """A data entry change; ``data_value`` is None when the entry is removed."""

    data_name: bytes
    data_value: bytes | None = None


@dataclass(frozen=True)
class BumpSequenceOp:
    bump_to: int


@dataclass(frozen=True)
class ManageBuyOfferOp:
    selling: Asset
    buying: Asset
    buy_amount: int
    price: Price
    offer_id: int


@dataclass(frozen=True)
class PathPaymentStrictSendOp:
    send_asset: Asset
    send_amount: int
    destination: MuxedAccount
    dest_asset: Asset
    dest_min: int
    path: tuple[Asset, ...] = ()


@dataclass(frozen=True)
class Claimant:
    """A claimant; its predicate is validated but not kept."""

    destination: bytes
    type: int = CLAIMANT_TYPE_V0


@dataclass(frozen=True)
class CreateClaimableBalanceOp:
    asset: Asset
    amount: int
    claimants: tuple[Claimant, ...]


@dataclass(frozen=True)
class ClaimClaimableBalanceOp:
    balance_id: ClaimableBalanceId


@dataclass(frozen=True)
class BeginSponsoringFutureReservesOp:
    sponsored_id: bytes


@dataclass(frozen=True)
class RevokeSponsorshipOp:
    """Revokes sponsorship of a ledger entry or of a signer."""

    type: int
    ledger_key: LedgerKey | None = None
    account_id: bytes | None = None
    signer_key: SignerKey | None = None


@dataclass(frozen=True)
class ClawbackOp:
    asset: Asset
    from_account: MuxedAccount
    amount: int


@dataclass(frozen=True)
class ClawbackClaimableBalanceOp:
    balance_id: ClaimableBalanceId


@dataclass(frozen=True)
class SetTrustLineFlagsOp:
    trustor: bytes
    asset: Asset
    clear_flags: int
    set_flags: int


@dataclass(frozen=True)
class LiquidityPoolDepositOp:
    liquidity_pool_id: bytes
    max_amount_a: int
    max_amount_b: int
    min_price: Price
    max_price: Price


@dataclass(frozen=True)
class LiquidityPoolWithdrawOp:
    liquidity_pool_id: bytes
    amount: int
    min_amount_a: int
    min_amount_b: int


OperationBody = Union[
    CreateAccountOp,
    PaymentOp,
    PathPaymentStrictReceiveOp,
    CreatePassiveSellOfferOp,
    ManageSellOfferOp,
    SetOptionsOp,
    ChangeTrustOp,
    AllowTrustOp,
    AccountMergeOp,
    ManageDataOp,
    BumpSequenceOp,
    ManageBuyOfferOp,
    PathPaymentStrictSendOp,
    CreateClaimableBalanceOp,
    ClaimClaimableBalanceOp,
    BeginSponsoringFutureReservesOp,
    RevokeSponsorshipOp,
    ClawbackOp,
    ClawbackClaimableBalanceOp,
    SetTrustLineFlagsOp,
    LiquidityPoolDepositOp,
    LiquidityPoolWithdrawOp,
]


@dataclass(frozen=True)
class Operation:
    """One operation; ``body`` is None for operations that carry no data."""

    type: OperationType
    source_account: MuxedAccount | None = None
    body: OperationBody | None = None


def _parse_path(reader: XdrReader) -> tuple[Asset, ...]:
    length = reader.read_u32()
    if length > PATH_PAYMENT_MAX_PATH_LENGTH:
        raise XdrError(f"payment path longer than {PATH_PAYMENT_MAX_PATH_LENGTH}")
    return tuple(parse_asset(reader) for _ in range(length))


def _create_account(reader: XdrReader) -> CreateAccountOp:
    destination = parse_account_id(reader)
    return CreateAccountOp(destination, reader.read_i64())


def _payment(reader: XdrReader) -> PaymentOp:
    destination = parse_muxed_account(reader)
    asset = parse_asset(reader)
    return PaymentOp(destination, asset, reader.read_i64())


def _path_payment_strict_receive(reader: XdrReader) -> PathPaymentStrictReceiveOp:
    send_asset = parse_asset(reader)
    send_max = reader.read_i64()
    destination = parse_muxed_account(reader)
    dest_asset = parse_asset(reader)
    dest_amount = reader.read_i64()
    path = _parse_path(reader)
    return PathPaymentStrictReceiveOp(
        send_asset, send_max, destination, dest_asset, dest_amount, path
    )


def _path_payment_strict_send(reader: XdrReader) -> PathPaymentStrictSendOp:
    send_asset = parse_asset(reader)
    send_amount = reader.read_i64()
    destination = parse_muxed_account(reader)
    dest_asset = parse_asset(reader)
    dest_min = reader.read_i64()
    path = _parse_path(reader)
    return PathPaymentStrictSendOp(
        send_asset, send_amount, destination, dest_asset, dest_min, path
    )


def _manage_sell_offer(reader: XdrReader) -> ManageSellOfferOp:
    selling = parse_asset(reader)
    buying = parse_asset(reader)
    amount = reader.read_i64()
    price = parse_price(reader)
    return ManageSellOfferOp(selling, buying, amount, price, reader.read_i64())


def _manage_buy_offer(reader: XdrReader) -> ManageBuyOfferOp:
    selling = parse_asset(reader)
    buying = parse_asset(reader)
    buy_amount = reader.read_i64()
    price = parse_price(reader)
    return ManageBuyOfferOp(selling, buying, buy_amount, price, reader.read_i64())


def _create_passive_sell_offer(reader: XdrReader) -> CreatePassiveSellOfferOp:
    selling = parse_asset(reader)
    buying = parse_asset(reader)
    amount = reader.read_i64()
    return CreatePassiveSellOfferOp(selling, buying, amount, parse_price(reader))


def _change_trust(reader: XdrReader) -> ChangeTrustOp:
    line = parse_change_trust_asset(reader)
    return ChangeTrustOp(line, reader.read_u64())


def _parse_signer(reader: XdrReader) -> Signer:
    key = parse_signer_key(reader)
    return Signer(key, reader.read_u32())


def _set_options(reader: XdrReader) -> SetOptionsOp:
    inflation_destination = reader.read_optional(parse_account_id)
    clear_flags = reader.read_optional(XdrReader.read_u32)
    set_flags = reader.read_optional(XdrReader.read_u32)
    master_weight = reader.read_optional(XdrReader.read_u32)
    low_threshold = reader.read_optional(XdrReader.read_u32)
    medium_threshold = reader.read_optional(XdrReader.read_u32)
    high_threshold = reader.read_optional(XdrReader.read_u32)
    home_domain = None
    if reader.read_u32():
        home_domain = reader.read_opaque(HOME_DOMAIN_MAX_SIZE)
    signer = reader.read_optional(_parse_signer)
    return SetOptionsOp(
        inflation_destination=inflation_destination,
        clear_flags=clear_flags,
        set_flags=set_flags,
        master_weight=master_weight,
        low_threshold=low_threshold,
        medium_threshold=medium_threshold,
        high_threshold=high_threshold,
        home_domain=home_domain,
        signer=signer,
    )


def _allow_trust(reader: XdrReader) -> AllowTrustOp:
    trustor = parse_account_id(reader)
    raw_type = reader.read_u32()
    try:
        asset_type = AssetType(raw_type)
        size = _ALLOW_TRUST_CODE_SIZES[asset_type]
    except (ValueError, KeyError):
        raise XdrError(f"unsupported allow trust asset type {raw_type}") from None
    code = reader.read_bytes(size)
    return AllowTrustOp(trustor, asset_type, code, reader.read_u32())


def _account_merge(reader: XdrReader) -> AccountMergeOp:
    return AccountMergeOp(parse_muxed_account(reader))


def _manage_data(reader: XdrReader) -> ManageDataOp:
    name = reader.read_opaque(DATA_NAME_MAX_SIZE)
    value = None
    if reader.read_bool():
        value = reader.read_opaque(DATA_VALUE_MAX_SIZE)
    return ManageDataOp(name, value)


def _bump_sequence(reader: XdrReader) -> BumpSequenceOp:
    return BumpSequenceOp(reader.read_i64())


def _parse_claimant(reader: XdrReader) -> Claimant:
    claimant_type = reader.read_u32()
    if claimant_type != CLAIMANT_TYPE_V0:
        raise XdrError(f"unknown claimant type {claimant_type}")
    destination = parse_account_id(reader)
    parse_claimant_predicate(reader)
    return Claimant(destination, claimant_type)


def _create_claimable_balance(reader: XdrReader) -> CreateClaimableBalanceOp:
    asset = parse_asset(reader)
    amount = reader.read_i64()
    count = reader.read_u32()
    if count > CLAIMANTS_MAX_LENGTH:
        raise XdrError(f"more than {CLAIMANTS_MAX_LENGTH} claimants")
    claimants = tuple(_parse_claimant(reader) for _ in range(count))
    return CreateClaimableBalanceOp(asset, amount, claimants)


def _claim_claimable_balance(reader: XdrReader) -> ClaimClaimableBalanceOp:
    return ClaimClaimableBalanceOp(parse_claimable_balance_id(reader))


def _begin_sponsoring(reader: XdrReader) -> BeginSponsoringFutureReservesOp:
    return BeginSponsoringFutureReservesOp(parse_account_id(reader))


def _revoke_sponsorship(reader: XdrReader) -> RevokeSponsorshipOp:
    kind = reader.read_u32()
    if kind == REVOKE_SPONSORSHIP_LEDGER_ENTRY:
        return RevokeSponsorshipOp(kind, ledger_key=parse_ledger_key(reader))
    if kind == REVOKE_SPONSORSHIP_SIGNER:
        account_id = parse_account_id(reader)
        return RevokeSponsorshipOp(
            kind, account_id=account_id, signer_key=parse_signer_key(reader)
        )
    raise XdrError(f"unknown revoke sponsorship type {kind}")


def _clawback(reader: XdrReader) -> ClawbackOp:
    asset = parse_asset(reader)
    from_account = parse_muxed_account(reader)
    return ClawbackOp(asset, from_account, reader.read_i64())


def _clawback_claimable_balance(reader: XdrReader) -> ClawbackClaimableBalanceOp:
    return ClawbackClaimableBalanceOp(parse_claimable_balance_id(reader))


def _set_trust_line_flags(reader: XdrReader) -> SetTrustLineFlagsOp:
    trustor = parse_account_id(reader)
    asset = parse_asset(reader)
    clear_flags = reader.read_u32()
    return SetTrustLineFlagsOp(trustor, asset, clear_flags, reader.read_u32())


def _liquidity_pool_deposit(reader: XdrReader) -> LiquidityPoolDepositOp:
    pool_id = reader.read_bytes(LIQUIDITY_POOL_ID_SIZE)
    max_amount_a = reader.read_i64()
    max_amount_b = reader.read_i64()
    min_price = parse_price(reader)
    return LiquidityPoolDepositOp(
        pool_id, max_amount_a, max_amount_b, min_price, parse_price(reader)
    )


def _liquidity_pool_withdraw(reader: XdrReader) -> LiquidityPoolWithdrawOp:
    pool_id = reader.read_bytes(LIQUIDITY_POOL_ID_SIZE)
    amount = reader.read_i64()
    min_amount_a = reader.read_i64()
    return LiquidityPoolWithdrawOp(pool_id, amount, min_amount_a, reader.read_i64())


_PARSERS: dict[OperationType, Callable[[XdrReader], OperationBody]] = {
    OperationType.CREATE_ACCOUNT: _create_account,
    OperationType.PAYMENT: _payment,
    OperationType.PATH_PAYMENT_STRICT_RECEIVE: _path_payment_strict_receive,
    OperationType.MANAGE_SELL_OFFER: _manage_sell_offer,
    OperationType.CREATE_PASSIVE_SELL_OFFER: _create_passive_sell_offer,
    OperationType.SET_OPTIONS: _set_options,
    OperationType.CHANGE_TRUST: _change_trust,
    OperationType.ALLOW_TRUST: _allow_trust,
    OperationType.ACCOUNT_MERGE: _account_merge,
    OperationType.MANAGE_DATA: _manage_data,
    OperationType.BUMP_SEQUENCE: _bump_sequence,
    OperationType.MANAGE_BUY_OFFER: _manage_buy_offer,
    OperationType.PATH_PAYMENT_STRICT_SEND: _path_payment_strict_send,
    OperationType.CREATE_CLAIMABLE_BALANCE: _create_claimable_balance,
    OperationType.CLAIM_CLAIMABLE_BALANCE: _claim_claimable_balance,
    OperationType.BEGIN_SPONSORING_FUTURE_RESERVES: _begin_sponsoring,
    OperationType.REVOKE_SPONSORSHIP: _revoke_sponsorship,
    OperationType.CLAWBACK: _clawback,
    OperationType.CLAWBACK_CLAIMABLE_BALANCE: _clawback_claimable_balance,
    OperationType.SET_TRUST_LINE_FLAGS: _set_trust_line_flags,
    OperationType.LIQUIDITY_POOL_DEPOSIT: _liquidity_pool_deposit,
    OperationType.LIQUIDITY_POOL_WITHDRAW: _liquidity_pool_withdraw,
}


def parse_operation(reader: XdrReader) -> Operation:
    """Read one operation: optional source account, type, then its body."""
    source = reader.read_optional(parse_muxed_account)
    raw_type = reader.read_u32()
    try:
        op_type = OperationType(raw_type)
    except ValueError:
        raise XdrError(f"unknown operation type {raw_type}") from None
    parser = _PARSERS.get(op_type)
    body = parser(reader) if parser is not None else None
    return Operation(op_type, source, body)