"""Data types for decoded Stellar transaction content."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

ED25519_KEY_SIZE = 32
HASH_SIZE = 32
LIQUIDITY_POOL_ID_SIZE = 32
CLAIMABLE_BALANCE_ID_SIZE = 32
CLAIMABLE_BALANCE_ID_TYPE_V0 = 0
SIGNED_PAYLOAD_MAX_SIZE = 64
UINT64_MAX = (1 << 64) - 1


def _check_size(name: str, value: bytes | None, size: int) -> None:
    if value is None or len(value) != size:
        raise ValueError(f"{name} must be {size} bytes")


class NetworkType(IntEnum):
    PUBLIC = 0
    TEST = 1
    UNKNOWN = 2


class AssetType(IntEnum):
    NATIVE = 0
    CREDIT_ALPHANUM4 = 1
    CREDIT_ALPHANUM12 = 2
    POOL_SHARE = 3


_CODE_SIZES = {AssetType.CREDIT_ALPHANUM4: 4, AssetType.CREDIT_ALPHANUM12: 12}


def _check_credit(type_: AssetType, code: bytes | None, issuer: bytes | None) -> None:
    _check_size("asset code", code, _CODE_SIZES[type_])
    _check_size("issuer", issuer, ED25519_KEY_SIZE)


@dataclass(frozen=True)
class Asset:
    """A native or credit asset; the code keeps its raw zero padding."""

    type: AssetType
    code: bytes | None = None
    issuer: bytes | None = None

    def __post_init__(self) -> None:
        if self.type in _CODE_SIZES:
            _check_credit(self.type, self.code, self.issuer)
        elif self.type != AssetType.NATIVE:
            raise ValueError(f"unsupported asset type {self.type!r}")

    @staticmethod
    def native() -> Asset:
        return Asset(AssetType.NATIVE)

    def is_native(self) -> bool:
        return self.type == AssetType.NATIVE


@dataclass(frozen=True)
class LiquidityPoolParameters:
    """Constant-product liquidity pool parameters."""

    asset_a: Asset
    asset_b: Asset
    fee: int


@dataclass(frozen=True)
class TrustLineAsset:
    """An asset that may also be a liquidity pool share referenced by id."""

    type: AssetType
    code: bytes | None = None
    issuer: bytes | None = None
    liquidity_pool_id: bytes | None = None

    def __post_init__(self) -> None:
        if self.type in _CODE_SIZES:
            _check_credit(self.type, self.code, self.issuer)
        elif self.type == AssetType.POOL_SHARE:
            _check_size("liquidity pool id", self.liquidity_pool_id, LIQUIDITY_POOL_ID_SIZE)


@dataclass(frozen=True)
class ChangeTrustAsset:
    """An asset that may also be a liquidity pool share given by its parameters."""

    type: AssetType
    code: bytes | None = None
    issuer: bytes | None = None
    liquidity_pool: LiquidityPoolParameters | None = None

    def __post_init__(self) -> None:
        if self.type in _CODE_SIZES:
            _check_credit(self.type, self.code, self.issuer)
        elif self.type == AssetType.POOL_SHARE and self.liquidity_pool is None:
            raise ValueError("pool share asset needs liquidity pool parameters")


class KeyType(IntEnum):
    ED25519 = 0
    MUXED_ED25519 = 0x100


@dataclass(frozen=True)
class MuxedAccount:
    """An account key, optionally multiplexed with a 64-bit id."""

    type: KeyType
    ed25519: bytes
    id: int | None = None

    def __post_init__(self) -> None:
        _check_size("ed25519 key", self.ed25519, ED25519_KEY_SIZE)
        if self.type == KeyType.MUXED_ED25519:
            if self.id is None or not 0 <= self.id <= UINT64_MAX:
                raise ValueError("muxed account id must be an unsigned 64-bit integer")

    def is_muxed(self) -> bool:
        return self.type == KeyType.MUXED_ED25519


class SignerKeyType(IntEnum):
    ED25519 = 0
    PRE_AUTH_TX = 1
    HASH_X = 2
    ED25519_SIGNED_PAYLOAD = 3


@dataclass(frozen=True)
class SignedPayload:
    """An ed25519 key together with the payload it signs."""

    ed25519: bytes
    payload: bytes


@dataclass(frozen=True)
class SignerKey:
    """A signer key; ``key`` holds the 32 raw bytes for the simple kinds."""

    type: SignerKeyType
    key: bytes | None = None
    signed_payload: SignedPayload | None = None

    def __post_init__(self) -> None:
        if self.type == SignerKeyType.ED25519_SIGNED_PAYLOAD:
            if self.signed_payload is None:
                raise ValueError("signed payload signer needs a signed payload")
        else:
            _check_size("signer key", self.key, ED25519_KEY_SIZE)


@dataclass(frozen=True)
class ClaimableBalanceId:
    """A claimable balance identifier."""

    v0: bytes
    type: int = CLAIMABLE_BALANCE_ID_TYPE_V0

    def __post_init__(self) -> None:
        _check_size("claimable balance id", self.v0, CLAIMABLE_BALANCE_ID_SIZE)


@dataclass(frozen=True)
class Price:
    """A rational price n/d."""

    n: int
    d: int


@dataclass(frozen=True)
class TimeBounds:
    min_time: int
    max_time: int


@dataclass(frozen=True)
class LedgerBounds:
    min_ledger: int
    max_ledger: int


@dataclass(frozen=True)
class Preconditions:
    """Transaction validity conditions; absent parts are None."""

    time_bounds: TimeBounds | None = None
    ledger_bounds: LedgerBounds | None = None
    min_seq_num: int | None = None
    min_seq_age: int = 0
    min_seq_ledger_gap: int = 0


class MemoType(IntEnum):
    NONE = 0
    TEXT = 1
    ID = 2
    HASH = 3
    RETURN = 4


@dataclass(frozen=True)
class Memo:
    """A transaction memo; ``hash`` holds the value of HASH and RETURN memos."""

    type: MemoType = MemoType.NONE
    id: int | None = None
    text: bytes | None = None
    hash: bytes | None = None


class LedgerEntryType(IntEnum):
    ACCOUNT = 0
    TRUSTLINE = 1
    OFFER = 2
    DATA = 3
    CLAIMABLE_BALANCE = 4
    LIQUIDITY_POOL = 5


@dataclass(frozen=True)
class LedgerKey:
    """A key naming one ledger entry; only the fields of its type are set."""

    type: LedgerEntryType
    account_id: bytes | None = None
    asset: TrustLineAsset | None = None
    offer_id: int | None = None
    data_name: bytes | None = None
    balance_id: ClaimableBalanceId | None = None
    liquidity_pool_id: bytes | None = None