"""
Exact encoded sizes for every message shape.

Each ``size_*`` function returns precisely the number of bytes the matching
``serialize_*`` writes: array heads plus every field's CBOR width. Integer
widths depend on magnitude (1, 2, 3, 5 or 9 bytes). Byte strings and BigInts
are sized from their payload, so a BigInt has to be serialized before it can
be sized; callers that already hold the payload pass it in to avoid doing the
work twice.

All functions are pure. They mirror the writers in verifreg.serialize
one-to-one; keep them in step.
"""

from __future__ import annotations

from typing import Iterable, Optional

from .cbor import get_bytes_size, get_prefix_size, get_uint64_size
from .scalars import get_actor_id_size, get_bigint_size, get_chain_epoch_size, serialize_bigint
from .types import (
    AddVerifiedClientParams,
    BatchReturn,
    Claim,
    ClaimTerm,
    ExtendClaimTermsParams,
    GetClaimsParams,
    GetClaimsReturn,
    RemoveExpiredAllocationsParams,
    RemoveExpiredAllocationsReturn,
    RemoveExpiredClaimsParams,
    RemoveExpiredClaimsReturn,
)

# Fixed array lengths per schema checkpoint
GET_CLAIMS_PARAMS_LEN = 2
GET_CLAIMS_RETURN_LEN = 2
ADD_VERIFIED_CLIENT_PARAMS_LEN = 2
REMOVE_EXPIRED_ALLOCATIONS_PARAMS_LEN = 2
REMOVE_EXPIRED_ALLOCATIONS_RETURN_LEN = 3
EXTEND_CLAIM_TERMS_PARAMS_LEN = 1
REMOVE_EXPIRED_CLAIMS_PARAMS_LEN = 2
REMOVE_EXPIRED_CLAIMS_RETURN_LEN = 2
BATCH_RETURN_LEN = 2
FAIL_CODE_LEN = 2
CLAIM_LEN = 8
CLAIM_TERM_LEN = 3


# ------------------------
# Shared pieces
# ------------------------


def size_actor_ids(ids: Iterable[int]) -> int:
    ids = tuple(ids)
    return get_prefix_size(len(ids)) + sum(get_actor_id_size(i) for i in ids)


def size_batch_return(br: BatchReturn) -> int:
    total = get_prefix_size(BATCH_RETURN_LEN)
    total += get_uint64_size(br.success_count)
    total += get_prefix_size(len(br.fail_codes))
    for fc in br.fail_codes:
        total += get_prefix_size(FAIL_CODE_LEN)
        total += get_uint64_size(fc.index) + get_uint64_size(fc.code)
    return total


def size_claim(c: Claim) -> int:
    return (
        get_prefix_size(CLAIM_LEN)
        + get_actor_id_size(c.provider)
        + get_actor_id_size(c.client)
        + get_bytes_size(c.data)
        + get_uint64_size(c.size)
        + get_chain_epoch_size(c.term_min)
        + get_chain_epoch_size(c.term_max)
        + get_chain_epoch_size(c.term_start)
        + get_actor_id_size(c.sector)
    )


def size_claim_term(t: ClaimTerm) -> int:
    return (
        get_prefix_size(CLAIM_TERM_LEN)
        + get_actor_id_size(t.provider)
        + get_actor_id_size(t.claim_id)
        + get_chain_epoch_size(t.term_max)
    )


# ------------------------
# Parameters
# ------------------------


def size_get_claims_params(params: GetClaimsParams) -> int:
    return (
        get_prefix_size(GET_CLAIMS_PARAMS_LEN)
        + get_actor_id_size(params.provider)
        + size_actor_ids(params.claim_ids)
    )


def size_add_verified_client_params(
    params: AddVerifiedClientParams, allowance_raw: Optional[bytes] = None
) -> int:
    if allowance_raw is None:
        allowance_raw = serialize_bigint(params.allowance)
    return (
        get_prefix_size(ADD_VERIFIED_CLIENT_PARAMS_LEN)
        + get_bytes_size(params.addr)
        + get_bigint_size(allowance_raw)
    )


def size_remove_expired_allocations_params(params: RemoveExpiredAllocationsParams) -> int:
    return (
        get_prefix_size(REMOVE_EXPIRED_ALLOCATIONS_PARAMS_LEN)
        + get_actor_id_size(params.client)
        + size_actor_ids(params.allocation_ids)
    )


def size_extend_claim_terms_params(params: ExtendClaimTermsParams) -> int:
    return (
        get_prefix_size(EXTEND_CLAIM_TERMS_PARAMS_LEN)
        + get_prefix_size(len(params.terms))
        + sum(size_claim_term(t) for t in params.terms)
    )


def size_remove_expired_claims_params(params: RemoveExpiredClaimsParams) -> int:
    return (
        get_prefix_size(REMOVE_EXPIRED_CLAIMS_PARAMS_LEN)
        + get_actor_id_size(params.provider)
        + size_actor_ids(params.claim_ids)
    )


# ------------------------
# Returns
# ------------------------


def size_get_claims_return(ret: GetClaimsReturn) -> int:
    return (
        get_prefix_size(GET_CLAIMS_RETURN_LEN)
        + size_batch_return(ret.batch_info)
        + get_prefix_size(len(ret.claims))
        + sum(size_claim(c) for c in ret.claims)
    )


def size_remove_expired_allocations_return(
    ret: RemoveExpiredAllocationsReturn, recovered_raw: Optional[bytes] = None
) -> int:
    if recovered_raw is None:
        recovered_raw = serialize_bigint(ret.datacap_recovered)
    return (
        get_prefix_size(REMOVE_EXPIRED_ALLOCATIONS_RETURN_LEN)
        + size_actor_ids(ret.considered)
        + size_batch_return(ret.results)
        + get_bigint_size(recovered_raw)
    )


def size_extend_claim_terms_return(ret: BatchReturn) -> int:
    return size_batch_return(ret)


def size_remove_expired_claims_return(ret: RemoveExpiredClaimsReturn) -> int:
    return (
        get_prefix_size(REMOVE_EXPIRED_CLAIMS_RETURN_LEN)
        + size_actor_ids(ret.considered)
        + size_batch_return(ret.results)
    )


__all__ = [
    "GET_CLAIMS_PARAMS_LEN",
    "GET_CLAIMS_RETURN_LEN",
    "ADD_VERIFIED_CLIENT_PARAMS_LEN",
    "REMOVE_EXPIRED_ALLOCATIONS_PARAMS_LEN",
    "REMOVE_EXPIRED_ALLOCATIONS_RETURN_LEN",
    "EXTEND_CLAIM_TERMS_PARAMS_LEN",
    "REMOVE_EXPIRED_CLAIMS_PARAMS_LEN",
    "REMOVE_EXPIRED_CLAIMS_RETURN_LEN",
    "BATCH_RETURN_LEN",
    "FAIL_CODE_LEN",
    "CLAIM_LEN",
    "CLAIM_TERM_LEN",
    "size_actor_ids",
    "size_batch_return",
    "size_claim",
    "size_claim_term",
    "size_get_claims_params",
    "size_add_verified_client_params",
    "size_remove_expired_allocations_params",
    "size_extend_claim_terms_params",
    "size_remove_expired_claims_params",
    "size_get_claims_return",
    "size_remove_expired_allocations_return",
    "size_extend_claim_terms_return",
    "size_remove_expired_claims_return",
]
