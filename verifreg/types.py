"""
verifreg.types
==============

Typed parameter/return shapes for verified-registry actor calls.

Every shape is a frozen dataclass: plain values with structural equality and
no shared state. Scalars are range-checked on construction so the encoders
only ever see values that fit their wire domain; sequences are normalised to
tuples.

Scalar aliases
--------------
- ActorId    : int in [0, 2**64)
- ChainEpoch : int in [-2**63, 2**63)
- BigInt     : int, arbitrary precision (sign-prefixed bytes on the wire)

JSON form (`to_obj` / `from_obj`, used by the CLI): bytes are ``0x`` hex
strings; BigInt values are emitted as decimal strings and accepted as either
ints or strings.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Tuple

from .cbor import UINT32_MAX, UINT64_MAX
from .errors import EncodeError
from .scalars import BIGINT_MAX_SERIALIZED_LEN, check_actor_id, check_chain_epoch

ActorId = int
ChainEpoch = int
BigInt = int


# ---------------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------------


def _u32(value: Any, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool) or not 0 <= value <= UINT32_MAX:
        raise EncodeError(f"{name} must be an unsigned 32-bit integer", field=name, value=repr(value))
    return value


def _u64(value: Any, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool) or not 0 <= value <= UINT64_MAX:
        raise EncodeError(f"{name} must be an unsigned 64-bit integer", field=name, value=repr(value))
    return value


def _bytes(value: Any, name: str) -> bytes:
    if not isinstance(value, (bytes, bytearray, memoryview)):
        raise EncodeError(f"{name} must be bytes", field=name, type=type(value).__name__)
    return bytes(value)


def _bigint(value: Any, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise EncodeError(f"{name} must be an int", field=name, value=repr(value))
    # sign byte + minimal magnitude
    if 1 + (abs(value).bit_length() + 7) // 8 > BIGINT_MAX_SERIALIZED_LEN:
        raise EncodeError(
            f"{name} does not fit in {BIGINT_MAX_SERIALIZED_LEN} serialized bytes",
            field=name,
            bits=abs(value).bit_length(),
        )
    return value


def _actor_ids(values: Iterable[Any], name: str) -> Tuple[int, ...]:
    return tuple(check_actor_id(v, f"{name}[{i}]") for i, v in enumerate(values))


def _of(values: Iterable[Any], cls: type, name: str) -> tuple:
    out = tuple(values)
    for i, v in enumerate(out):
        if not isinstance(v, cls):
            raise EncodeError(f"{name}[{i}] must be {cls.__name__}", field=name, type=type(v).__name__)
    return out


def hex_bytes(b: bytes) -> str:
    return "0x" + b.hex()


def parse_hex(s: Any) -> bytes:
    if isinstance(s, (bytes, bytearray)):
        return bytes(s)
    if not isinstance(s, str):
        raise EncodeError("expected a hex string", type=type(s).__name__)
    h = s[2:] if s.lower().startswith("0x") else s
    try:
        return bytes.fromhex(h)
    except ValueError as e:
        raise EncodeError(f"invalid hex string: {s!r}") from e


def parse_bigint(v: Any) -> int:
    if isinstance(v, str):
        try:
            return int(v, 0)
        except ValueError as e:
            raise EncodeError(f"invalid integer string: {v!r}") from e
    return _bigint(v, "bigint")


def _json_int(v: Any, name: str) -> int:
    """JSON integer field: an int, or a decimal / 0x string. Floats and bools are refused."""
    if isinstance(v, str):
        try:
            return int(v, 0)
        except ValueError as e:
            raise EncodeError(f"{name}: invalid integer string {v!r}", field=name) from e
    if not isinstance(v, int) or isinstance(v, bool):
        raise EncodeError(f"{name} must be an integer", field=name, value=repr(v))
    return v


def _json_obj(o: Any, name: str) -> Mapping[str, Any]:
    if not isinstance(o, Mapping):
        raise TypeError(f"{name} must be a JSON object, got {type(o).__name__}")
    return o


def _json_list(o: Mapping[str, Any], key: str, name: str) -> list:
    v = o.get(key, [])
    if not isinstance(v, (list, tuple)):
        raise TypeError(f"{name}.{key} must be a JSON array, got {type(v).__name__}")
    return list(v)


def _json_ids(o: Mapping[str, Any], key: str, name: str) -> Tuple[int, ...]:
    return tuple(_json_int(x, f"{name}.{key}[{i}]") for i, x in enumerate(_json_list(o, key, name)))


# ---------------------------------------------------------------------------
# Batch results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FailCode:
    """Which batch element failed (``index``) and the exit code it failed with."""

    index: int
    code: int

    def __post_init__(self) -> None:
        _u32(self.index, "FailCode.index")
        _u32(self.code, "FailCode.code")

    def to_obj(self) -> Mapping[str, Any]:
        return {"index": self.index, "code": self.code}

    @staticmethod
    def from_obj(o: Mapping[str, Any]) -> "FailCode":
        o = _json_obj(o, "FailCode")
        return FailCode(index=_json_int(o["index"], "FailCode.index"), code=_json_int(o["code"], "FailCode.code"))


@dataclass(frozen=True)
class BatchReturn:
    """
    Outcome of a batched call. ``fail_codes`` keeps the order the actor
    produced (increasing index); it is never sorted or deduplicated here.
    """

    success_count: int
    fail_codes: Tuple[FailCode, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        _u32(self.success_count, "BatchReturn.success_count")
        object.__setattr__(self, "fail_codes", _of(self.fail_codes, FailCode, "BatchReturn.fail_codes"))

    def to_obj(self) -> Mapping[str, Any]:
        return {
            "success_count": self.success_count,
            "fail_codes": [fc.to_obj() for fc in self.fail_codes],
        }

    @staticmethod
    def from_obj(o: Mapping[str, Any]) -> "BatchReturn":
        o = _json_obj(o, "BatchReturn")
        return BatchReturn(
            success_count=_json_int(o["success_count"], "BatchReturn.success_count"),
            fail_codes=tuple(FailCode.from_obj(x) for x in _json_list(o, "fail_codes", "BatchReturn")),
        )


ExtendClaimTermsReturn = BatchReturn


# ---------------------------------------------------------------------------
# Claims
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Claim:
    provider: ActorId
    client: ActorId
    data: bytes
    size: int
    term_min: ChainEpoch
    term_max: ChainEpoch
    term_start: ChainEpoch
    sector: ActorId

    def __post_init__(self) -> None:
        check_actor_id(self.provider, "Claim.provider")
        check_actor_id(self.client, "Claim.client")
        object.__setattr__(self, "data", _bytes(self.data, "Claim.data"))
        _u64(self.size, "Claim.size")
        check_chain_epoch(self.term_min, "Claim.term_min")
        check_chain_epoch(self.term_max, "Claim.term_max")
        check_chain_epoch(self.term_start, "Claim.term_start")
        check_actor_id(self.sector, "Claim.sector")

    def to_obj(self) -> Mapping[str, Any]:
        return {
            "provider": self.provider,
            "client": self.client,
            "data": hex_bytes(self.data),
            "size": self.size,
            "term_min": self.term_min,
            "term_max": self.term_max,
            "term_start": self.term_start,
            "sector": self.sector,
        }

    @staticmethod
    def from_obj(o: Mapping[str, Any]) -> "Claim":
        o = _json_obj(o, "Claim")
        return Claim(
            provider=_json_int(o["provider"], "Claim.provider"),
            client=_json_int(o["client"], "Claim.client"),
            data=parse_hex(o["data"]),
            size=_json_int(o["size"], "Claim.size"),
            term_min=_json_int(o["term_min"], "Claim.term_min"),
            term_max=_json_int(o["term_max"], "Claim.term_max"),
            term_start=_json_int(o["term_start"], "Claim.term_start"),
            sector=_json_int(o["sector"], "Claim.sector"),
        )


@dataclass(frozen=True)
class ClaimTerm:
    """Requested new maximum term for one claim."""

    provider: ActorId
    claim_id: ActorId
    term_max: ChainEpoch

    def __post_init__(self) -> None:
        check_actor_id(self.provider, "ClaimTerm.provider")
        check_actor_id(self.claim_id, "ClaimTerm.claim_id")
        check_chain_epoch(self.term_max, "ClaimTerm.term_max")

    def to_obj(self) -> Mapping[str, Any]:
        return {"provider": self.provider, "claim_id": self.claim_id, "term_max": self.term_max}

    @staticmethod
    def from_obj(o: Mapping[str, Any]) -> "ClaimTerm":
        o = _json_obj(o, "ClaimTerm")
        return ClaimTerm(
            provider=_json_int(o["provider"], "ClaimTerm.provider"),
            claim_id=_json_int(o["claim_id"], "ClaimTerm.claim_id"),
            term_max=_json_int(o["term_max"], "ClaimTerm.term_max"),
        )


# ---------------------------------------------------------------------------
# Method parameters / returns
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GetClaimsParams:
    provider: ActorId
    claim_ids: Tuple[ActorId, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        check_actor_id(self.provider, "GetClaimsParams.provider")
        object.__setattr__(self, "claim_ids", _actor_ids(self.claim_ids, "GetClaimsParams.claim_ids"))

    def to_obj(self) -> Mapping[str, Any]:
        return {"provider": self.provider, "claim_ids": list(self.claim_ids)}

    @staticmethod
    def from_obj(o: Mapping[str, Any]) -> "GetClaimsParams":
        o = _json_obj(o, "GetClaimsParams")
        return GetClaimsParams(
            provider=_json_int(o["provider"], "GetClaimsParams.provider"),
            claim_ids=_json_ids(o, "claim_ids", "GetClaimsParams"),
        )


@dataclass(frozen=True)
class GetClaimsReturn:
    batch_info: BatchReturn
    claims: Tuple[Claim, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not isinstance(self.batch_info, BatchReturn):
            raise EncodeError("GetClaimsReturn.batch_info must be BatchReturn")
        object.__setattr__(self, "claims", _of(self.claims, Claim, "GetClaimsReturn.claims"))

    def to_obj(self) -> Mapping[str, Any]:
        return {
            "batch_info": self.batch_info.to_obj(),
            "claims": [c.to_obj() for c in self.claims],
        }

    @staticmethod
    def from_obj(o: Mapping[str, Any]) -> "GetClaimsReturn":
        o = _json_obj(o, "GetClaimsReturn")
        return GetClaimsReturn(
            batch_info=BatchReturn.from_obj(o["batch_info"]),
            claims=tuple(Claim.from_obj(x) for x in _json_list(o, "claims", "GetClaimsReturn")),
        )


@dataclass(frozen=True)
class AddVerifiedClientParams:
    addr: bytes
    allowance: BigInt

    def __post_init__(self) -> None:
        object.__setattr__(self, "addr", _bytes(self.addr, "AddVerifiedClientParams.addr"))
        _bigint(self.allowance, "AddVerifiedClientParams.allowance")

    def to_obj(self) -> Mapping[str, Any]:
        return {"addr": hex_bytes(self.addr), "allowance": str(self.allowance)}

    @staticmethod
    def from_obj(o: Mapping[str, Any]) -> "AddVerifiedClientParams":
        o = _json_obj(o, "AddVerifiedClientParams")
        return AddVerifiedClientParams(addr=parse_hex(o["addr"]), allowance=parse_bigint(o["allowance"]))


@dataclass(frozen=True)
class RemoveExpiredAllocationsParams:
    client: ActorId
    allocation_ids: Tuple[ActorId, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        check_actor_id(self.client, "RemoveExpiredAllocationsParams.client")
        object.__setattr__(
            self,
            "allocation_ids",
            _actor_ids(self.allocation_ids, "RemoveExpiredAllocationsParams.allocation_ids"),
        )

    def to_obj(self) -> Mapping[str, Any]:
        return {"client": self.client, "allocation_ids": list(self.allocation_ids)}

    @staticmethod
    def from_obj(o: Mapping[str, Any]) -> "RemoveExpiredAllocationsParams":
        o = _json_obj(o, "RemoveExpiredAllocationsParams")
        return RemoveExpiredAllocationsParams(
            client=_json_int(o["client"], "RemoveExpiredAllocationsParams.client"),
            allocation_ids=_json_ids(o, "allocation_ids", "RemoveExpiredAllocationsParams"),
        )


@dataclass(frozen=True)
class RemoveExpiredAllocationsReturn:
    considered: Tuple[ActorId, ...]
    results: BatchReturn
    datacap_recovered: BigInt

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "considered", _actor_ids(self.considered, "RemoveExpiredAllocationsReturn.considered")
        )
        if not isinstance(self.results, BatchReturn):
            raise EncodeError("RemoveExpiredAllocationsReturn.results must be BatchReturn")
        _bigint(self.datacap_recovered, "RemoveExpiredAllocationsReturn.datacap_recovered")

    def to_obj(self) -> Mapping[str, Any]:
        return {
            "considered": list(self.considered),
            "results": self.results.to_obj(),
            "datacap_recovered": str(self.datacap_recovered),
        }

    @staticmethod
    def from_obj(o: Mapping[str, Any]) -> "RemoveExpiredAllocationsReturn":
        o = _json_obj(o, "RemoveExpiredAllocationsReturn")
        return RemoveExpiredAllocationsReturn(
            considered=_json_ids(o, "considered", "RemoveExpiredAllocationsReturn"),
            results=BatchReturn.from_obj(o["results"]),
            datacap_recovered=parse_bigint(o["datacap_recovered"]),
        )


@dataclass(frozen=True)
class ExtendClaimTermsParams:
    terms: Tuple[ClaimTerm, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "terms", _of(self.terms, ClaimTerm, "ExtendClaimTermsParams.terms"))

    def to_obj(self) -> Mapping[str, Any]:
        return {"terms": [t.to_obj() for t in self.terms]}

    @staticmethod
    def from_obj(o: Mapping[str, Any]) -> "ExtendClaimTermsParams":
        o = _json_obj(o, "ExtendClaimTermsParams")
        return ExtendClaimTermsParams(
            terms=tuple(ClaimTerm.from_obj(x) for x in _json_list(o, "terms", "ExtendClaimTermsParams"))
        )


@dataclass(frozen=True)
class RemoveExpiredClaimsParams:
    provider: ActorId
    claim_ids: Tuple[ActorId, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        check_actor_id(self.provider, "RemoveExpiredClaimsParams.provider")
        object.__setattr__(self, "claim_ids", _actor_ids(self.claim_ids, "RemoveExpiredClaimsParams.claim_ids"))

    def to_obj(self) -> Mapping[str, Any]:
        return {"provider": self.provider, "claim_ids": list(self.claim_ids)}

    @staticmethod
    def from_obj(o: Mapping[str, Any]) -> "RemoveExpiredClaimsParams":
        o = _json_obj(o, "RemoveExpiredClaimsParams")
        return RemoveExpiredClaimsParams(
            provider=_json_int(o["provider"], "RemoveExpiredClaimsParams.provider"),
            claim_ids=_json_ids(o, "claim_ids", "RemoveExpiredClaimsParams"),
        )


@dataclass(frozen=True)
class RemoveExpiredClaimsReturn:
    considered: Tuple[ActorId, ...]
    results: BatchReturn

    def __post_init__(self) -> None:
        object.__setattr__(self, "considered", _actor_ids(self.considered, "RemoveExpiredClaimsReturn.considered"))
        if not isinstance(self.results, BatchReturn):
            raise EncodeError("RemoveExpiredClaimsReturn.results must be BatchReturn")

    def to_obj(self) -> Mapping[str, Any]:
        return {"considered": list(self.considered), "results": self.results.to_obj()}

    @staticmethod
    def from_obj(o: Mapping[str, Any]) -> "RemoveExpiredClaimsReturn":
        o = _json_obj(o, "RemoveExpiredClaimsReturn")
        return RemoveExpiredClaimsReturn(
            considered=_json_ids(o, "considered", "RemoveExpiredClaimsReturn"),
            results=BatchReturn.from_obj(o["results"]),
        )


__all__ = [
    "ActorId",
    "ChainEpoch",
    "BigInt",
    "FailCode",
    "BatchReturn",
    "ExtendClaimTermsReturn",
    "Claim",
    "ClaimTerm",
    "GetClaimsParams",
    "GetClaimsReturn",
    "AddVerifiedClientParams",
    "RemoveExpiredAllocationsParams",
    "RemoveExpiredAllocationsReturn",
    "ExtendClaimTermsParams",
    "RemoveExpiredClaimsParams",
    "RemoveExpiredClaimsReturn",
    "hex_bytes",
    "parse_hex",
    "parse_bigint",
]
