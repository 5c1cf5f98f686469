"""
Scalar domain codecs: ActorId, ChainEpoch and BigInt.

- ActorId    : u64, CBOR major type 0
- ChainEpoch : i64, CBOR major type 0 or 1
- BigInt     : CBOR byte string carrying ``sign || magnitude`` where sign is
               0x00 (non-negative) or 0x01 (negative) and magnitude is the
               minimal big-endian encoding of ``abs(value)``. Zero is the
               single byte 0x00; an empty payload also decodes to zero.

Every writer has a size helper next to it so message sizing mirrors message
writing one-to-one.
"""

from __future__ import annotations

from typing import Tuple

from .cbor import (
    INT64_MAX,
    INT64_MIN,
    UINT64_MAX,
    BytesLike,
    Writer,
    get_bytes_size,
    get_int64_size,
    get_uint64_size,
    read_bytes,
    read_int64,
    read_uint64,
)
from .errors import EncodeError, InvalidBigInt

# Serialized BigInt payloads (sign byte included) are capped like the chain does.
BIGINT_MAX_SERIALIZED_LEN = 128

_SIGN_POSITIVE = 0x00
_SIGN_NEGATIVE = 0x01


# ------------------------
# ActorId
# ------------------------


def check_actor_id(value: int, name: str = "actor_id") -> int:
    if not isinstance(value, int) or isinstance(value, bool) or not 0 <= value <= UINT64_MAX:
        raise EncodeError(f"{name} must be an unsigned 64-bit integer", field=name, value=repr(value))
    return value


def get_actor_id_size(value: int) -> int:
    return get_uint64_size(value)


def write_actor_id(w: Writer, value: int) -> None:
    w.write_uint64(value)


def read_actor_id(buf: BytesLike, cursor: int) -> Tuple[int, int]:
    return read_uint64(buf, cursor)


# ------------------------
# ChainEpoch
# ------------------------


def check_chain_epoch(value: int, name: str = "epoch") -> int:
    if not isinstance(value, int) or isinstance(value, bool) or not INT64_MIN <= value <= INT64_MAX:
        raise EncodeError(f"{name} must be a signed 64-bit integer", field=name, value=repr(value))
    return value


def get_chain_epoch_size(value: int) -> int:
    return get_int64_size(value)


def write_chain_epoch(w: Writer, value: int) -> None:
    w.write_int64(value)


def read_chain_epoch(buf: BytesLike, cursor: int) -> Tuple[int, int]:
    return read_int64(buf, cursor)


# ------------------------
# BigInt
# ------------------------


def serialize_bigint(value: int) -> bytes:
    """Encode an arbitrary-precision integer as ``sign || magnitude``."""
    if not isinstance(value, int) or isinstance(value, bool):
        raise EncodeError("big integer must be an int", value=repr(value))
    mag = abs(value)
    raw = mag.to_bytes((mag.bit_length() + 7) // 8, "big")
    out = bytes([_SIGN_NEGATIVE if value < 0 else _SIGN_POSITIVE]) + raw
    if len(out) > BIGINT_MAX_SERIALIZED_LEN:
        raise EncodeError("big integer too large", length=len(out), limit=BIGINT_MAX_SERIALIZED_LEN)
    return out


def deserialize_bytes_bigint(raw: BytesLike) -> int:
    """Inverse of `serialize_bigint`; an empty payload is zero."""
    if len(raw) == 0:
        return 0
    if len(raw) > BIGINT_MAX_SERIALIZED_LEN:
        raise InvalidBigInt("big integer payload too large", length=len(raw), limit=BIGINT_MAX_SERIALIZED_LEN)
    sign = raw[0]
    if sign not in (_SIGN_POSITIVE, _SIGN_NEGATIVE):
        raise InvalidBigInt("big integer sign byte must be 0x00 or 0x01", sign=sign)
    mag = int.from_bytes(bytes(raw[1:]), "big")
    return -mag if sign == _SIGN_NEGATIVE else mag


def get_bigint_size(serialized: BytesLike) -> int:
    """Wire size of an *already serialized* BigInt payload."""
    return get_bytes_size(serialized)


def write_bigint(w: Writer, serialized: BytesLike) -> None:
    w.write_bytes(serialized)


def read_bigint(buf: BytesLike, cursor: int) -> Tuple[int, int]:
    raw, cursor = read_bytes(buf, cursor)
    return deserialize_bytes_bigint(raw), cursor


__all__ = [
    "BIGINT_MAX_SERIALIZED_LEN",
    "check_actor_id",
    "get_actor_id_size",
    "write_actor_id",
    "read_actor_id",
    "check_chain_epoch",
    "get_chain_epoch_size",
    "write_chain_epoch",
    "read_chain_epoch",
    "serialize_bigint",
    "deserialize_bytes_bigint",
    "get_bigint_size",
    "write_bigint",
    "read_bigint",
]
