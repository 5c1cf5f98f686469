"""
verifreg.methods

Exported verified-registry methods and the codec pair for each of them.

Method numbers are the FRC-42 hashes of the exported method names; the actor
lives at the singleton id address f06. Every entry binds:

- the parameter type, its encoder and its (actor side) decoder,
- the return type, its decoder and its (actor side) encoder; AddVerifiedClient
  returns nothing, so its return slots are None.

Lookups accept the method number, the canonical name ("GetClaims") or a
snake/kebab spelling ("get_claims", "get-claims").
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Callable, Dict, Optional, Tuple

from . import deserialize as de
from . import serialize as se
from . import types as t
from .config import DAG_CBOR_CODEC, VERIFREG_ACTOR_ID
from .errors import UnknownMethod


class Method(IntEnum):
    ADD_VERIFIED_CLIENT = 3916220144
    REMOVE_EXPIRED_ALLOCATIONS = 2421068268
    GET_CLAIMS = 2199871187
    EXTEND_CLAIM_TERMS = 1752273514
    REMOVE_EXPIRED_CLAIMS = 2873373899


@dataclass(frozen=True)
class MethodSpec:
    name: str
    number: int
    params_type: type
    encode_params: Callable[[Any], bytes]
    decode_params: Callable[..., Any]
    return_type: Optional[type] = None
    decode_return: Optional[Callable[..., Any]] = None
    encode_return: Optional[Callable[[Any], bytes]] = None

    @property
    def has_return(self) -> bool:
        return self.decode_return is not None


_SPECS: Tuple[MethodSpec, ...] = (
    MethodSpec(
        name="AddVerifiedClient",
        number=Method.ADD_VERIFIED_CLIENT,
        params_type=t.AddVerifiedClientParams,
        encode_params=se.serialize_add_verified_client_params,
        decode_params=de.deserialize_add_verified_client_params,
    ),
    MethodSpec(
        name="RemoveExpiredAllocations",
        number=Method.REMOVE_EXPIRED_ALLOCATIONS,
        params_type=t.RemoveExpiredAllocationsParams,
        encode_params=se.serialize_remove_expired_allocations_params,
        decode_params=de.deserialize_remove_expired_allocations_params,
        return_type=t.RemoveExpiredAllocationsReturn,
        decode_return=de.deserialize_remove_expired_allocations_return,
        encode_return=se.serialize_remove_expired_allocations_return,
    ),
    MethodSpec(
        name="GetClaims",
        number=Method.GET_CLAIMS,
        params_type=t.GetClaimsParams,
        encode_params=se.serialize_get_claims_params,
        decode_params=de.deserialize_get_claims_params,
        return_type=t.GetClaimsReturn,
        decode_return=de.deserialize_get_claims_return,
        encode_return=se.serialize_get_claims_return,
    ),
    MethodSpec(
        name="ExtendClaimTerms",
        number=Method.EXTEND_CLAIM_TERMS,
        params_type=t.ExtendClaimTermsParams,
        encode_params=se.serialize_extend_claim_terms_params,
        decode_params=de.deserialize_extend_claim_terms_params,
        return_type=t.BatchReturn,
        decode_return=de.deserialize_extend_claim_terms_return,
        encode_return=se.serialize_extend_claim_terms_return,
    ),
    MethodSpec(
        name="RemoveExpiredClaims",
        number=Method.REMOVE_EXPIRED_CLAIMS,
        params_type=t.RemoveExpiredClaimsParams,
        encode_params=se.serialize_remove_expired_claims_params,
        decode_params=de.deserialize_remove_expired_claims_params,
        return_type=t.RemoveExpiredClaimsReturn,
        decode_return=de.deserialize_remove_expired_claims_return,
        encode_return=se.serialize_remove_expired_claims_return,
    ),
)


def _norm(name: str) -> str:
    return name.replace("_", "").replace("-", "").lower()


_BY_NUMBER: Dict[int, MethodSpec] = {int(s.number): s for s in _SPECS}
_BY_NAME: Dict[str, MethodSpec] = {_norm(s.name): s for s in _SPECS}


def all_methods() -> Tuple[MethodSpec, ...]:
    return _SPECS


def method_by_number(number: int) -> MethodSpec:
    try:
        return _BY_NUMBER[int(number)]
    except (KeyError, ValueError):
        raise UnknownMethod(number) from None


def method_by_name(name: str) -> MethodSpec:
    try:
        return _BY_NAME[_norm(name)]
    except KeyError:
        raise UnknownMethod(name) from None


def resolve(key: str | int) -> MethodSpec:
    """Look a method up by number, decimal string, or name."""
    if isinstance(key, int):
        return method_by_number(key)
    if key.strip().isdigit():
        return method_by_number(int(key))
    return method_by_name(key)


__all__ = [
    "VERIFREG_ACTOR_ID",
    "DAG_CBOR_CODEC",
    "Method",
    "MethodSpec",
    "all_methods",
    "method_by_number",
    "method_by_name",
    "resolve",
]
