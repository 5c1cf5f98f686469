"""
verifreg.errors
---------------

Error taxonomy for the verified-registry call codec.

Design goals
------------
- One root `VerifRegError` with machine-friendly `code` and optional `data`.
- Exactly one *structural* decode error: `LengthMismatch(expected, actual)`.
- A separate family for primitive CBOR failures (truncation, wrong major
  type, numeric overflow) that the message layer propagates untouched.
- Safe JSON representation (`to_dict`) suitable for logs and CLI output.

This module uses only stdlib so it can be imported before anything else.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional


class ErrorCode(str, Enum):
    # Generic
    CONFIG = "VERIFREG/CONFIG"

    # Encoding side
    ENCODE = "VERIFREG/ENCODE"
    SERIALIZATION = "VERIFREG/SERIALIZATION"

    # Decoding side
    LENGTH_MISMATCH = "VERIFREG/LENGTH_MISMATCH"
    TRAILING_BYTES = "VERIFREG/TRAILING_BYTES"
    CBOR_DECODE = "VERIFREG/CBOR_DECODE"
    INSUFFICIENT_BYTES = "VERIFREG/INSUFFICIENT_BYTES"
    UNEXPECTED_MAJOR_TYPE = "VERIFREG/UNEXPECTED_MAJOR_TYPE"
    INDEFINITE_LENGTH = "VERIFREG/INDEFINITE_LENGTH"
    INTEGER_OVERFLOW = "VERIFREG/INTEGER_OVERFLOW"
    INVALID_BIGINT = "VERIFREG/INVALID_BIGINT"

    # Call facade
    UNKNOWN_METHOD = "VERIFREG/UNKNOWN_METHOD"
    ACTOR_CALL = "VERIFREG/ACTOR_CALL"
    INVALID_CODEC = "VERIFREG/INVALID_CODEC"


@dataclass(eq=False)
class VerifRegError(Exception):
    """
    Root error for the codec.

    Attributes
    ----------
    code: str
        Machine-stable error code (see ErrorCode).
    message: str
        Human hint suitable for logs.
    data: dict
        Optional machine data (offsets, lengths, method numbers).
    cause: Optional[BaseException]
        Wrapped original exception; not part of equality.
    """

    code: str
    message: str
    data: Dict[str, Any] = field(default_factory=dict)
    cause: Optional[BaseException] = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        super().__init__(f"{self.code_str}: {self.message}")

    @property
    def code_str(self) -> str:
        return self.code.value if isinstance(self.code, ErrorCode) else str(self.code)

    def to_dict(self, include_cause: bool = False) -> Dict[str, Any]:
        """JSON-safe shape suitable for logs and CLI output."""
        out: Dict[str, Any] = {
            "code": self.code_str,
            "message": self.message,
            "data": _coerce_json(self.data),
        }
        cause = self.cause or self.__cause__
        if include_cause and cause is not None:
            out["cause"] = {"type": type(cause).__name__, "message": str(cause)}
        return out

    def __str__(self) -> str:
        parts = [f"{self.code_str}: {self.message}"]
        if self.data:
            parts.append("[" + ", ".join(f"{k}={v}" for k, v in self.data.items()) + "]")
        return " ".join(parts)

    def __reduce__(self):
        return (_restore, (type(self), self.args, dict(self.__dict__)))


# ---------------------------------------------------------------------------
# Structural (schema) errors
# ---------------------------------------------------------------------------


class LengthMismatch(VerifRegError):
    """A fixed-shape array checkpoint reported a different element count."""

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(
            code=ErrorCode.LENGTH_MISMATCH,
            message=f"invalid array length: expected {expected}, got {actual}",
            data={"expected": expected, "actual": actual},
        )
        self.expected = expected
        self.actual = actual


class TrailingBytes(VerifRegError):
    def __init__(self, consumed: int, total: int) -> None:
        super().__init__(
            code=ErrorCode.TRAILING_BYTES,
            message=f"{total - consumed} trailing byte(s) after decoded value",
            data={"consumed": consumed, "total": total},
        )
        self.consumed = consumed
        self.total = total


# ---------------------------------------------------------------------------
# Primitive CBOR failures
# ---------------------------------------------------------------------------


class CBORDecodeError(VerifRegError):
    def __init__(self, message="malformed CBOR", code: str = ErrorCode.CBOR_DECODE, **data: Any) -> None:
        super().__init__(code=code, message=message, data=_jsonmap(data))


class InsufficientBytes(CBORDecodeError):
    def __init__(self, offset: int, needed: int, available: int) -> None:
        super().__init__(
            f"need {needed} byte(s) at offset {offset}, only {available} available",
            code=ErrorCode.INSUFFICIENT_BYTES,
            offset=offset,
            needed=needed,
            available=available,
        )


class UnexpectedMajorType(CBORDecodeError):
    def __init__(self, offset: int, expected: int, actual: int) -> None:
        super().__init__(
            f"expected CBOR major type {expected} at offset {offset}, got {actual}",
            code=ErrorCode.UNEXPECTED_MAJOR_TYPE,
            offset=offset,
            expected=expected,
            actual=actual,
        )


class IndefiniteLength(CBORDecodeError):
    def __init__(self, offset: int, info: int) -> None:
        super().__init__(
            f"unsupported additional info {info} at offset {offset} (indefinite or reserved)",
            code=ErrorCode.INDEFINITE_LENGTH,
            offset=offset,
            info=info,
        )


class IntegerOverflow(CBORDecodeError):
    def __init__(self, offset: int, value: int, bits: int) -> None:
        super().__init__(
            f"integer {value} at offset {offset} does not fit in {bits} bits",
            code=ErrorCode.INTEGER_OVERFLOW,
            offset=offset,
            value=str(value),
            bits=bits,
        )


class InvalidBigInt(CBORDecodeError):
    def __init__(self, message="invalid big integer payload", **data: Any) -> None:
        super().__init__(message, code=ErrorCode.INVALID_BIGINT, **data)


# ---------------------------------------------------------------------------
# Encoding side
# ---------------------------------------------------------------------------


class EncodeError(VerifRegError):
    """An in-memory value is outside its wire domain (negative id, u32 overflow, ...)."""

    def __init__(self, message="value cannot be encoded", **data: Any) -> None:
        super().__init__(code=ErrorCode.ENCODE, message=message, data=_jsonmap(data))


class SerializationError(VerifRegError):
    """The writer's cursor disagrees with the precomputed capacity."""

    def __init__(self, message="serialization failed", **data: Any) -> None:
        super().__init__(code=ErrorCode.SERIALIZATION, message=message, data=_jsonmap(data))


# ---------------------------------------------------------------------------
# Facade / config
# ---------------------------------------------------------------------------


class UnknownMethod(VerifRegError):
    def __init__(self, key: Any) -> None:
        super().__init__(
            code=ErrorCode.UNKNOWN_METHOD,
            message=f"unknown verified registry method: {key!r}",
            data={"method": _coerce_json(key)},
        )


class ActorCallError(VerifRegError):
    def __init__(self, method: str, exit_code: int) -> None:
        super().__init__(
            code=ErrorCode.ACTOR_CALL,
            message=f"{method} failed with exit code {exit_code}",
            data={"method": method, "exit_code": exit_code},
        )
        self.exit_code = exit_code


class InvalidCodec(VerifRegError):
    def __init__(self, method: str, expected: int, actual: int) -> None:
        super().__init__(
            code=ErrorCode.INVALID_CODEC,
            message=f"{method} returned codec {actual:#x}, expected {expected:#x}",
            data={"method": method, "expected": expected, "actual": actual},
        )


class ConfigError(VerifRegError):
    def __init__(self, message="invalid configuration", **data: Any) -> None:
        super().__init__(code=ErrorCode.CONFIG, message=message, data=_jsonmap(data))


# ---------------------------------------------------------------------------
# Internals
# ---------------------------------------------------------------------------


def _restore(cls: type, args: tuple, state: Dict[str, Any]) -> VerifRegError:
    e = cls.__new__(cls)
    e.args = args
    e.__dict__.update(state)
    return e


def _jsonmap(data: Mapping[str, Any]) -> Dict[str, Any]:
    return {k: _coerce_json(v) for k, v in data.items()}


def _coerce_json(v: Any) -> Any:
    # Keep JSON primitives; hex-encode bytes; stringify the rest.
    if v is None or isinstance(v, (bool, int, float, str)):
        return v
    if isinstance(v, dict):
        return {str(k): _coerce_json(x) for k, x in v.items()}
    if isinstance(v, (list, tuple)):
        return [_coerce_json(x) for x in v]
    if isinstance(v, (bytes, bytearray)):
        return "0x" + bytes(v).hex()
    return str(v)


__all__ = [
    "ErrorCode",
    "VerifRegError",
    "LengthMismatch",
    "TrailingBytes",
    "CBORDecodeError",
    "InsufficientBytes",
    "UnexpectedMajorType",
    "IndefiniteLength",
    "IntegerOverflow",
    "InvalidBigInt",
    "EncodeError",
    "SerializationError",
    "UnknownMethod",
    "ActorCallError",
    "InvalidCodec",
    "ConfigError",
]
