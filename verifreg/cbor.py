"""
verifreg.cbor
=============

Cursor-based CBOR primitives for the verified-registry codec.

Only the narrow subset that appears in actor call parameters and returns is
supported:

- major type 0: unsigned integer
- major type 1: negative integer (ChainEpoch)
- major type 2: byte string
- major type 4: definite-length array

Maps, tags, text, floats and indefinite-length items are never produced and
are rejected on read.

Readers are pure functions of ``(buf, cursor)`` returning ``(value, cursor)``;
they never hold position state. Writers go through a `Writer` that owns one
pre-sized buffer and refuses to grow: every message encoder computes the exact
size first (see verifreg.sizes) and `Writer.finish()` checks that the cursor
landed on it.

Decoding accepts non-minimal integer heads; encoding always emits the
shortest form.
"""

from __future__ import annotations

from typing import Tuple, Union

from .errors import (
    IndefiniteLength,
    InsufficientBytes,
    IntegerOverflow,
    SerializationError,
    UnexpectedMajorType,
)

BytesLike = Union[bytes, bytearray, memoryview]

MAJOR_UINT = 0
MAJOR_NINT = 1
MAJOR_BYTES = 2
MAJOR_ARRAY = 4

UINT32_MAX = 0xFFFFFFFF
UINT64_MAX = 0xFFFFFFFFFFFFFFFF
INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1

# ------------------------
# Size prediction
# ------------------------


def get_prefix_size(n: int) -> int:
    """Bytes taken by a major-type head whose argument is ``n``."""
    if n < 24:
        return 1
    if n <= 0xFF:
        return 2
    if n <= 0xFFFF:
        return 3
    if n <= 0xFFFFFFFF:
        return 5
    return 9


def get_uint64_size(n: int) -> int:
    return get_prefix_size(n)


def get_int64_size(n: int) -> int:
    return get_prefix_size(n if n >= 0 else -1 - n)


def get_bytes_size(data: BytesLike) -> int:
    return get_prefix_size(len(data)) + len(data)


# ------------------------
# Writer
# ------------------------


class Writer:
    """
    Fixed-capacity CBOR writer.

    The buffer is allocated once with the capacity computed by the caller.
    Writing past it, or finishing short of it, is a `SerializationError`:
    both mean a size helper and its writer disagree.
    """

    __slots__ = ("_buf", "_pos")

    def __init__(self, capacity: int):
        self._buf = bytearray(capacity)
        self._pos = 0

    @property
    def capacity(self) -> int:
        return len(self._buf)

    @property
    def position(self) -> int:
        return self._pos

    def _put(self, chunk: BytesLike) -> None:
        end = self._pos + len(chunk)
        if end > len(self._buf):
            raise SerializationError(
                "write exceeds precomputed capacity",
                capacity=len(self._buf),
                position=self._pos,
                chunk=len(chunk),
            )
        self._buf[self._pos:end] = chunk
        self._pos = end

    def _head(self, major: int, n: int) -> None:
        if n < 0 or n > UINT64_MAX:
            raise SerializationError("head argument out of range", major=major, value=str(n))
        if n < 24:
            self._put(bytes([(major << 5) | n]))
        elif n <= 0xFF:
            self._put(bytes([(major << 5) | 24, n]))
        elif n <= 0xFFFF:
            self._put(bytes([(major << 5) | 25]) + n.to_bytes(2, "big"))
        elif n <= 0xFFFFFFFF:
            self._put(bytes([(major << 5) | 26]) + n.to_bytes(4, "big"))
        else:
            self._put(bytes([(major << 5) | 27]) + n.to_bytes(8, "big"))

    def start_fixed_array(self, count: int) -> None:
        self._head(MAJOR_ARRAY, count)

    def write_uint64(self, n: int) -> None:
        self._head(MAJOR_UINT, n)

    def write_int64(self, n: int) -> None:
        if n >= 0:
            self._head(MAJOR_UINT, n)
        else:
            # Negative x is major type 1 with argument -(x+1)
            self._head(MAJOR_NINT, -1 - n)

    def write_bytes(self, data: BytesLike) -> None:
        self._head(MAJOR_BYTES, len(data))
        self._put(data)

    def finish(self) -> bytes:
        if self._pos != len(self._buf):
            raise SerializationError(
                "encoded length differs from precomputed capacity",
                capacity=len(self._buf),
                written=self._pos,
            )
        return bytes(self._buf)


# ------------------------
# Readers
# ------------------------


def _need(buf: BytesLike, cursor: int, k: int) -> None:
    if cursor + k > len(buf):
        raise InsufficientBytes(cursor, k, max(len(buf) - cursor, 0))


def read_head(buf: BytesLike, cursor: int) -> Tuple[int, int, int]:
    """Read an initial byte plus argument; returns ``(major, argument, cursor)``."""
    _need(buf, cursor, 1)
    ib = buf[cursor]
    major = ib >> 5
    ai = ib & 0x1F
    if ai < 24:
        return major, ai, cursor + 1
    if ai > 27:
        raise IndefiniteLength(cursor, ai)
    width = 1 << (ai - 24)
    _need(buf, cursor + 1, width)
    arg = int.from_bytes(bytes(buf[cursor + 1:cursor + 1 + width]), "big")
    return major, arg, cursor + 1 + width


def _read_expected(buf: BytesLike, cursor: int, major: int) -> Tuple[int, int]:
    got, arg, nxt = read_head(buf, cursor)
    if got != major:
        raise UnexpectedMajorType(cursor, major, got)
    return arg, nxt


def read_fixed_array(buf: BytesLike, cursor: int) -> Tuple[int, int]:
    return _read_expected(buf, cursor, MAJOR_ARRAY)


def read_uint64(buf: BytesLike, cursor: int) -> Tuple[int, int]:
    return _read_expected(buf, cursor, MAJOR_UINT)


def read_uint32(buf: BytesLike, cursor: int) -> Tuple[int, int]:
    value, nxt = _read_expected(buf, cursor, MAJOR_UINT)
    if value > UINT32_MAX:
        raise IntegerOverflow(cursor, value, 32)
    return value, nxt


def read_int64(buf: BytesLike, cursor: int) -> Tuple[int, int]:
    major, arg, nxt = read_head(buf, cursor)
    if major == MAJOR_UINT:
        if arg > INT64_MAX:
            raise IntegerOverflow(cursor, arg, 64)
        return arg, nxt
    if major == MAJOR_NINT:
        value = -1 - arg
        if value < INT64_MIN:
            raise IntegerOverflow(cursor, value, 64)
        return value, nxt
    raise UnexpectedMajorType(cursor, MAJOR_UINT, major)


def read_bytes(buf: BytesLike, cursor: int) -> Tuple[bytes, int]:
    length, nxt = _read_expected(buf, cursor, MAJOR_BYTES)
    _need(buf, nxt, length)
    return bytes(buf[nxt:nxt + length]), nxt + length


__all__ = [
    "MAJOR_UINT",
    "MAJOR_NINT",
    "MAJOR_BYTES",
    "MAJOR_ARRAY",
    "UINT32_MAX",
    "UINT64_MAX",
    "INT64_MIN",
    "INT64_MAX",
    "get_prefix_size",
    "get_uint64_size",
    "get_int64_size",
    "get_bytes_size",
    "Writer",
    "read_head",
    "read_fixed_array",
    "read_uint64",
    "read_uint32",
    "read_int64",
    "read_bytes",
]
