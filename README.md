# stellar-review

Decode Stellar transaction signature payloads (XDR). Turn their fields into the
short, human-readable strings a signer reviews before approving: StrKey
addresses, amounts, assets, flags and timestamps.

The package has no dependencies beyond the standard library.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Modules

- `stellar_review.types`: frozen dataclasses and enums for decoded content.
  Examples are `Asset`, `MuxedAccount`, `SignerKey`, `Memo`, `Preconditions`,
  `LedgerKey` and `NetworkType`.
- `stellar_review.xdr`: `XdrReader`, a cursor over big-endian XDR data, and
  parsers for individual structures. These include `parse_asset`,
  `parse_muxed_account`, `parse_signer_key`, `parse_memo`,
  `parse_preconditions` and `parse_ledger_key`.
- `stellar_review.operations`: `parse_operation` and one dataclass per
  operation kind, such as `PaymentOp`, `SetOptionsOp` and
  `LiquidityPoolDepositOp`.
- `stellar_review.parser`: `parse_tx_xdr`, `TxContext` and the transaction and
  fee-bump header types.
- `stellar_review.strkey`: StrKey encoding of keys and accounts, `crc16` and
  `base64_encode`.
- `stellar_review.display`: the `print_*` functions that render values as
  review text.

## Parsing a transaction

A signature payload starts with a 32-byte network id. The envelope type comes
next, then the transaction body. A fee-bump envelope wraps an inner
transaction.

`parse_tx_xdr` works in steps:

- The first call, at offset 0, reads the header and the first operation.
- Each later call reads the next operation.
- Its position and the decoded header are kept in a `TxContext`.

```python
from stellar_review.parser import TxContext, parse_tx_xdr

ctx = TxContext()
parse_tx_xdr(payload, ctx)                 # header + first operation
details = ctx.tx_details
print(ctx.network, details.fee, details.operations_count)
print(details.operation.type)

while details.operation_index < details.operations_count:
    parse_tx_xdr(payload, ctx)             # next operation
    print(details.operation.type)
```

The context is updated only when a whole step succeeds.

Malformed or truncated input raises `stellar_review.xdr.XdrError`. An envelope
type other than a transaction or a fee bump raises
`stellar_review.parser.UnknownEnvelopeTypeError`, which is a subclass of
`XdrError`. A transaction may hold at most 20 operations.

## Encoding keys

```python
from stellar_review.strkey import encode_ed25519_public_key, encode_muxed_account

encode_ed25519_public_key(bytes(32))  # a 56-character address starting with 'G'
```

`stellar_review.strkey` can encode:

- hash-x keys (`encode_hash_x_key`)
- pre-authorised transaction keys (`encode_pre_auth_tx_key`)
- signed payloads (`encode_ed25519_signed_payload`)
- muxed accounts (`encode_muxed_account`), which give an `M...` address when
  multiplexed

Invalid input raises `StrKeyError`.

## Formatting for display

```python
from stellar_review.display import print_amount, print_summary, print_time
from stellar_review.types import Asset, NetworkType

print_amount(10_000_000_000, Asset.native(), NetworkType.PUBLIC)  # '1,000 XLM'
print_summary("GABCDEFGHIJKLMNOP", 3, 4)                         # 'GAB..MNOP'
print_time(0)                                                    # '1970-01-01 00:00:00'
```

Details of some renderings:

- Native assets render as `XLM` on a known network and as `native` otherwise.
- Credit assets render as `CODE@` followed by the issuer, shortened.
- Flag sets render as comma-separated names, for example through
  `print_account_flags`.

A value that cannot be rendered raises `stellar_review.display.FormatError`.

## What this package does not do

The package only decodes and formats. It does not:

- hold or derive keys;
- sign transactions or compute transaction hashes;
- provide any confirmation screen, menu, settings store or device
  communication.

No command-line tool is included.