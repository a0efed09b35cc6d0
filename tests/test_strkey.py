import base64

import pytest

from stellar_review import strkey
from stellar_review.strkey import (
    StrKeyError,
    base64_encode,
    crc16,
    encode_ed25519_public_key,
    encode_ed25519_signed_payload,
    encode_hash_x_key,
    encode_key,
    encode_muxed_account,
    encode_pre_auth_tx_key,
)
from stellar_review.types import KeyType, MuxedAccount, SignedPayload

KEY = bytes(range(32))


def _decode(text: str) -> bytes:
    padded = text + "=" * (-len(text) % 8)
    raw = base64.b32decode(padded)
    body, checksum = raw[:-2], raw[-2:]
    assert crc16(body).to_bytes(2, "little") == checksum
    return body


def test_crc16_check_value():
    assert crc16(b"123456789") == 0x31C3


def test_crc16_empty():
    assert crc16(b"") == 0


def test_base64_matches_standard_encoding():
    for data in (b"", b"a", b"ab", b"abc", bytes(range(50))):
        assert base64_encode(data) == base64.b64encode(data).decode()


def test_zero_public_key():
    assert encode_ed25519_public_key(bytes(32)) == (
        "GAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAWHF"
    )


@pytest.mark.parametrize(
    "encoder, version",
    [
        (encode_ed25519_public_key, strkey.VERSION_BYTE_ED25519_PUBLIC_KEY),
        (encode_hash_x_key, strkey.VERSION_BYTE_HASH_X),
        (encode_pre_auth_tx_key, strkey.VERSION_BYTE_PRE_AUTH_TX_KEY),
    ],
)
def test_key_round_trip(encoder, version):
    text = encoder(KEY)
    assert len(text) == strkey.ENCODED_KEY_LENGTH
    assert _decode(text) == bytes([version]) + KEY


def test_encode_key_rejects_wrong_size():
    with pytest.raises(StrKeyError):
        encode_key(KEY[:31], strkey.VERSION_BYTE_HASH_X)


def test_encode_key_rejects_bad_version():
    with pytest.raises(StrKeyError):
        encode_key(KEY, 256)


def test_muxed_plain_account_is_public_key():
    account = MuxedAccount(KeyType.ED25519, KEY)
    assert encode_muxed_account(account) == encode_ed25519_public_key(KEY)


def test_muxed_account_round_trip():
    account = MuxedAccount(KeyType.MUXED_ED25519, KEY, 1234567890123)
    text = encode_muxed_account(account)
    assert len(text) == strkey.ENCODED_MUXED_ACCOUNT_LENGTH
    body = _decode(text)
    assert body[0] == strkey.VERSION_BYTE_MUXED_ACCOUNT
    assert body[1:33] == KEY
    assert int.from_bytes(body[33:], "big") == 1234567890123


@pytest.mark.parametrize("size", [1, 3, 4, 29, 64])
def test_signed_payload_round_trip(size):
    payload = bytes(range(1, size + 1))
    text = encode_ed25519_signed_payload(SignedPayload(KEY, payload))
    body = _decode(text)
    assert body[0] == strkey.VERSION_BYTE_ED25519_SIGNED_PAYLOAD
    assert body[1:33] == KEY
    assert int.from_bytes(body[33:37], "big") == size
    assert body[37 : 37 + size] == payload
    assert set(body[37 + size :]) <= {0}
    assert (len(body) - 37) % 4 == 0


@pytest.mark.parametrize("payload", [b"", bytes(65)])
def test_signed_payload_size_limits(payload):
    with pytest.raises(StrKeyError):
        encode_ed25519_signed_payload(SignedPayload(KEY, payload))