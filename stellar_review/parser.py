"""Step-wise parsing of a signature base: network, envelope, then operations."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

from .operations import Operation, parse_operation
from .types import HASH_SIZE, Memo, MuxedAccount, NetworkType, Preconditions
from .xdr import XdrError, XdrReader, parse_memo, parse_muxed_account, parse_preconditions

MAX_OPS = 20

# SHA256("Public Global Stellar Network ; September 2015")
NETWORK_ID_PUBLIC_HASH = bytes.fromhex(
    "7ac33997544e3175d266bd022439b22cdb16508c01163f26e5cb2a3e1045a979"
)
# SHA256("Test SDF Network ; September 2015")
NETWORK_ID_TEST_HASH = bytes.fromhex(
    "cee0302d59844d32bdca915c8203dd44b33fbb7edc19051ea37abedf28ecd472"
)


class EnvelopeType(IntEnum):
    TX = 2
    TX_FEE_BUMP = 5


class UnknownEnvelopeTypeError(XdrError):
    """Raised when the envelope is neither a transaction nor a fee bump."""


@dataclass
class TransactionDetails:
    """Header of a transaction and the operation most recently read from it."""

    source_account: MuxedAccount
    fee: int
    sequence_number: int
    preconditions: Preconditions
    memo: Memo
    operations_count: int
    operation_index: int = 0
    operation: Operation | None = None


@dataclass(frozen=True)
class FeeBumpTransactionDetails:
    fee_source: MuxedAccount
    fee: int


@dataclass
class TxContext:
    """Parsing state carried between calls to :func:`parse_tx_xdr`."""

    offset: int = 0
    network: NetworkType = NetworkType.UNKNOWN
    envelope_type: EnvelopeType | None = None
    tx_details: TransactionDetails | None = None
    fee_bump_tx_details: FeeBumpTransactionDetails | None = field(default=None)


def parse_network(reader: XdrReader) -> NetworkType:
    """Read the 32-byte network id and tell which known network it names."""
    network_id = reader.read_bytes(HASH_SIZE)
    if network_id == NETWORK_ID_PUBLIC_HASH:
        return NetworkType.PUBLIC
    if network_id == NETWORK_ID_TEST_HASH:
        return NetworkType.TEST
    return NetworkType.UNKNOWN


def parse_transaction_details(reader: XdrReader) -> TransactionDetails:
    """Read a transaction header up to and including its operation count."""
    source_account = parse_muxed_account(reader)
    fee = reader.read_u32()
    sequence_number = reader.read_i64()
    preconditions = parse_preconditions(reader)
    memo = parse_memo(reader)
    operations_count = reader.read_u32()
    if operations_count > MAX_OPS:
        raise XdrError(f"more than {MAX_OPS} operations: {operations_count}")
    return TransactionDetails(
        source_account=source_account,
        fee=fee,
        sequence_number=sequence_number,
        preconditions=preconditions,
        memo=memo,
        operations_count=operations_count,
    )


def parse_fee_bump_transaction_details(reader: XdrReader) -> FeeBumpTransactionDetails:
    fee_source = parse_muxed_account(reader)
    return FeeBumpTransactionDetails(fee_source, reader.read_i64())


def _read_envelope_type(reader: XdrReader) -> EnvelopeType:
    raw = reader.read_u32()
    try:
        return EnvelopeType(raw)
    except ValueError:
        raise UnknownEnvelopeTypeError(f"unknown envelope type {raw}") from None


def parse_tx_xdr(data: bytes, ctx: TxContext) -> TxContext:
    """Parse the next operation of ``data``, reading the header first when at offset 0.

    The context is updated only when the whole step succeeds.
    """
    reader = XdrReader(data, ctx.offset)
    if ctx.offset == 0:
        network = parse_network(reader)
        envelope_type = _read_envelope_type(reader)
        fee_bump = None
        if envelope_type == EnvelopeType.TX_FEE_BUMP:
            fee_bump = parse_fee_bump_transaction_details(reader)
            inner = reader.read_u32()
            if inner != EnvelopeType.TX:
                raise XdrError(f"fee bump must wrap a transaction, got envelope {inner}")
        details = parse_transaction_details(reader)
    else:
        if ctx.tx_details is None:
            raise XdrError("no transaction header parsed before this offset")
        network = ctx.network
        envelope_type = ctx.envelope_type
        fee_bump = ctx.fee_bump_tx_details
        details = ctx.tx_details

    operation = parse_operation(reader)

    ctx.network = network
    ctx.envelope_type = envelope_type
    ctx.fee_bump_tx_details = fee_bump
    ctx.tx_details = details
    details.operation = operation
    details.operation_index += 1
    ctx.offset = reader.offset
    return ctx