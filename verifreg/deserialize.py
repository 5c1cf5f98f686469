"""
Message decoders.

Reply bytes come from outside and are treated as untrusted. Each decoder
threads an explicit cursor through typed reads and checks every fixed-shape
array head against its schema constant:

- top-level arrays (2 or 3 elements depending on the message),
- BatchReturn (2), FailCode (2), Claim (8), ClaimTerm (3).

A mismatch raises `LengthMismatch(expected, actual)` on the spot and nothing
is returned. Sequence heads are data-dependent and only determine how many
elements follow. Truncation, wrong major types and out-of-range integers are
raised by the primitive readers and propagate unchanged.

Bytes left over after the value are ignored unless ``strict=True``, in which
case `TrailingBytes` is raised.
"""

from __future__ import annotations

import logging
from typing import List, Tuple

from .cbor import BytesLike, read_bytes, read_fixed_array, read_uint32, read_uint64
from .errors import LengthMismatch, TrailingBytes
from .scalars import read_actor_id, read_bigint, read_chain_epoch
from .sizes import (
    ADD_VERIFIED_CLIENT_PARAMS_LEN,
    BATCH_RETURN_LEN,
    CLAIM_LEN,
    CLAIM_TERM_LEN,
    EXTEND_CLAIM_TERMS_PARAMS_LEN,
    FAIL_CODE_LEN,
    GET_CLAIMS_PARAMS_LEN,
    GET_CLAIMS_RETURN_LEN,
    REMOVE_EXPIRED_ALLOCATIONS_PARAMS_LEN,
    REMOVE_EXPIRED_ALLOCATIONS_RETURN_LEN,
    REMOVE_EXPIRED_CLAIMS_PARAMS_LEN,
    REMOVE_EXPIRED_CLAIMS_RETURN_LEN,
)
from .types import (
    AddVerifiedClientParams,
    BatchReturn,
    Claim,
    ClaimTerm,
    ExtendClaimTermsParams,
    FailCode,
    GetClaimsParams,
    GetClaimsReturn,
    RemoveExpiredAllocationsParams,
    RemoveExpiredAllocationsReturn,
    RemoveExpiredClaimsParams,
    RemoveExpiredClaimsReturn,
)

log = logging.getLogger(__name__)


# ------------------------
# Checkpoints
# ------------------------


def _read_fixed(buf: BytesLike, cursor: int, expected: int, what: str) -> int:
    actual, nxt = read_fixed_array(buf, cursor)
    if actual != expected:
        log.debug("array length mismatch in %s at offset %d: expected %d, got %d", what, cursor, expected, actual)
        raise LengthMismatch(expected, actual)
    return nxt


def _finish(buf: BytesLike, cursor: int, strict: bool) -> None:
    if strict and cursor != len(buf):
        raise TrailingBytes(cursor, len(buf))


# ------------------------
# Shared readers
# ------------------------


def _read_actor_ids(buf: BytesLike, cursor: int) -> Tuple[Tuple[int, ...], int]:
    n, cursor = read_fixed_array(buf, cursor)
    out: List[int] = []
    for _ in range(n):
        v, cursor = read_actor_id(buf, cursor)
        out.append(v)
    return tuple(out), cursor


def _read_batch_return(buf: BytesLike, cursor: int) -> Tuple[BatchReturn, int]:
    cursor = _read_fixed(buf, cursor, BATCH_RETURN_LEN, "BatchReturn")
    success_count, cursor = read_uint32(buf, cursor)
    n, cursor = read_fixed_array(buf, cursor)
    fail_codes: List[FailCode] = []
    for _ in range(n):
        cursor = _read_fixed(buf, cursor, FAIL_CODE_LEN, "FailCode")
        index, cursor = read_uint32(buf, cursor)
        code, cursor = read_uint32(buf, cursor)
        fail_codes.append(FailCode(index=index, code=code))
    return BatchReturn(success_count=success_count, fail_codes=tuple(fail_codes)), cursor


def _read_claim(buf: BytesLike, cursor: int) -> Tuple[Claim, int]:
    cursor = _read_fixed(buf, cursor, CLAIM_LEN, "Claim")
    provider, cursor = read_actor_id(buf, cursor)
    client, cursor = read_actor_id(buf, cursor)
    data, cursor = read_bytes(buf, cursor)
    size, cursor = read_uint64(buf, cursor)
    term_min, cursor = read_chain_epoch(buf, cursor)
    term_max, cursor = read_chain_epoch(buf, cursor)
    term_start, cursor = read_chain_epoch(buf, cursor)
    sector, cursor = read_actor_id(buf, cursor)
    claim = Claim(
        provider=provider,
        client=client,
        data=data,
        size=size,
        term_min=term_min,
        term_max=term_max,
        term_start=term_start,
        sector=sector,
    )
    return claim, cursor


def _read_claim_term(buf: BytesLike, cursor: int) -> Tuple[ClaimTerm, int]:
    cursor = _read_fixed(buf, cursor, CLAIM_TERM_LEN, "ClaimTerm")
    provider, cursor = read_actor_id(buf, cursor)
    claim_id, cursor = read_actor_id(buf, cursor)
    term_max, cursor = read_chain_epoch(buf, cursor)
    return ClaimTerm(provider=provider, claim_id=claim_id, term_max=term_max), cursor


# ------------------------
# Returns
# ------------------------


def deserialize_get_claims_return(data: BytesLike, *, strict: bool = False) -> GetClaimsReturn:
    cursor = _read_fixed(data, 0, GET_CLAIMS_RETURN_LEN, "GetClaimsReturn")
    batch_info, cursor = _read_batch_return(data, cursor)
    n, cursor = read_fixed_array(data, cursor)
    claims: List[Claim] = []
    for _ in range(n):
        claim, cursor = _read_claim(data, cursor)
        claims.append(claim)
    _finish(data, cursor, strict)
    return GetClaimsReturn(batch_info=batch_info, claims=tuple(claims))


def deserialize_remove_expired_allocations_return(
    data: BytesLike, *, strict: bool = False
) -> RemoveExpiredAllocationsReturn:
    cursor = _read_fixed(data, 0, REMOVE_EXPIRED_ALLOCATIONS_RETURN_LEN, "RemoveExpiredAllocationsReturn")
    considered, cursor = _read_actor_ids(data, cursor)
    results, cursor = _read_batch_return(data, cursor)
    recovered, cursor = read_bigint(data, cursor)
    _finish(data, cursor, strict)
    return RemoveExpiredAllocationsReturn(
        considered=considered, results=results, datacap_recovered=recovered
    )


def deserialize_extend_claim_terms_return(data: BytesLike, *, strict: bool = False) -> BatchReturn:
    ret, cursor = _read_batch_return(data, 0)
    _finish(data, cursor, strict)
    return ret


def deserialize_remove_expired_claims_return(
    data: BytesLike, *, strict: bool = False
) -> RemoveExpiredClaimsReturn:
    cursor = _read_fixed(data, 0, REMOVE_EXPIRED_CLAIMS_RETURN_LEN, "RemoveExpiredClaimsReturn")
    considered, cursor = _read_actor_ids(data, cursor)
    results, cursor = _read_batch_return(data, cursor)
    _finish(data, cursor, strict)
    return RemoveExpiredClaimsReturn(considered=considered, results=results)


# ------------------------
# Parameters (actor side)
# ------------------------


def deserialize_get_claims_params(data: BytesLike, *, strict: bool = False) -> GetClaimsParams:
    cursor = _read_fixed(data, 0, GET_CLAIMS_PARAMS_LEN, "GetClaimsParams")
    provider, cursor = read_actor_id(data, cursor)
    claim_ids, cursor = _read_actor_ids(data, cursor)
    _finish(data, cursor, strict)
    return GetClaimsParams(provider=provider, claim_ids=claim_ids)


def deserialize_add_verified_client_params(
    data: BytesLike, *, strict: bool = False
) -> AddVerifiedClientParams:
    cursor = _read_fixed(data, 0, ADD_VERIFIED_CLIENT_PARAMS_LEN, "AddVerifiedClientParams")
    addr, cursor = read_bytes(data, cursor)
    allowance, cursor = read_bigint(data, cursor)
    _finish(data, cursor, strict)
    return AddVerifiedClientParams(addr=addr, allowance=allowance)


def deserialize_remove_expired_allocations_params(
    data: BytesLike, *, strict: bool = False
) -> RemoveExpiredAllocationsParams:
    cursor = _read_fixed(data, 0, REMOVE_EXPIRED_ALLOCATIONS_PARAMS_LEN, "RemoveExpiredAllocationsParams")
    client, cursor = read_actor_id(data, cursor)
    allocation_ids, cursor = _read_actor_ids(data, cursor)
    _finish(data, cursor, strict)
    return RemoveExpiredAllocationsParams(client=client, allocation_ids=allocation_ids)


def deserialize_extend_claim_terms_params(
    data: BytesLike, *, strict: bool = False
) -> ExtendClaimTermsParams:
    cursor = _read_fixed(data, 0, EXTEND_CLAIM_TERMS_PARAMS_LEN, "ExtendClaimTermsParams")
    n, cursor = read_fixed_array(data, cursor)
    terms: List[ClaimTerm] = []
    for _ in range(n):
        term, cursor = _read_claim_term(data, cursor)
        terms.append(term)
    _finish(data, cursor, strict)
    return ExtendClaimTermsParams(terms=tuple(terms))


def deserialize_remove_expired_claims_params(
    data: BytesLike, *, strict: bool = False
) -> RemoveExpiredClaimsParams:
    cursor = _read_fixed(data, 0, REMOVE_EXPIRED_CLAIMS_PARAMS_LEN, "RemoveExpiredClaimsParams")
    provider, cursor = read_actor_id(data, cursor)
    claim_ids, cursor = _read_actor_ids(data, cursor)
    _finish(data, cursor, strict)
    return RemoveExpiredClaimsParams(provider=provider, claim_ids=claim_ids)


__all__ = [
    "deserialize_get_claims_return",
    "deserialize_remove_expired_allocations_return",
    "deserialize_extend_claim_terms_return",
    "deserialize_remove_expired_claims_return",
    "deserialize_get_claims_params",
    "deserialize_add_verified_client_params",
    "deserialize_remove_expired_allocations_params",
    "deserialize_extend_claim_terms_params",
    "deserialize_remove_expired_claims_params",
]
