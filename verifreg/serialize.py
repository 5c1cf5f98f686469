"""
Message encoders.

Every encoder follows the same three steps:

1. size the message exactly (verifreg.sizes),
2. allocate one `Writer` of that capacity,
3. write the top-level array head, then each field in declared order;
   sequences are a nested array head followed by their items.

`Writer.finish()` fails if the bytes written differ from the capacity, so a
size helper drifting from its writer cannot produce silently corrupt output.
Inputs are never mutated.

Parameter encoders are what a caller sends to the verified registry actor.
The ``serialize_*_return`` encoders produce the actor's reply shapes; they are
used to build fixtures and to exercise the decoders end to end.
"""

from __future__ import annotations

from .cbor import Writer
from .scalars import serialize_bigint, write_actor_id, write_bigint, write_chain_epoch
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
    size_add_verified_client_params,
    size_extend_claim_terms_params,
    size_extend_claim_terms_return,
    size_get_claims_params,
    size_get_claims_return,
    size_remove_expired_allocations_params,
    size_remove_expired_allocations_return,
    size_remove_expired_claims_params,
    size_remove_expired_claims_return,
)
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

# ------------------------
# Shared writers
# ------------------------


def _write_actor_ids(w: Writer, ids) -> None:
    w.start_fixed_array(len(ids))
    for i in ids:
        write_actor_id(w, i)


def _write_batch_return(w: Writer, br: BatchReturn) -> None:
    w.start_fixed_array(BATCH_RETURN_LEN)
    w.write_uint64(br.success_count)
    w.start_fixed_array(len(br.fail_codes))
    for fc in br.fail_codes:
        w.start_fixed_array(FAIL_CODE_LEN)
        w.write_uint64(fc.index)
        w.write_uint64(fc.code)


def _write_claim(w: Writer, c: Claim) -> None:
    w.start_fixed_array(CLAIM_LEN)
    write_actor_id(w, c.provider)
    write_actor_id(w, c.client)
    w.write_bytes(c.data)
    w.write_uint64(c.size)
    write_chain_epoch(w, c.term_min)
    write_chain_epoch(w, c.term_max)
    write_chain_epoch(w, c.term_start)
    write_actor_id(w, c.sector)


def _write_claim_term(w: Writer, t: ClaimTerm) -> None:
    w.start_fixed_array(CLAIM_TERM_LEN)
    write_actor_id(w, t.provider)
    write_actor_id(w, t.claim_id)
    write_chain_epoch(w, t.term_max)


# ------------------------
# Parameters
# ------------------------


def serialize_get_claims_params(params: GetClaimsParams) -> bytes:
    w = Writer(size_get_claims_params(params))
    w.start_fixed_array(GET_CLAIMS_PARAMS_LEN)
    write_actor_id(w, params.provider)
    _write_actor_ids(w, params.claim_ids)
    return w.finish()


def serialize_add_verified_client_params(params: AddVerifiedClientParams) -> bytes:
    allowance = serialize_bigint(params.allowance)
    w = Writer(size_add_verified_client_params(params, allowance_raw=allowance))
    w.start_fixed_array(ADD_VERIFIED_CLIENT_PARAMS_LEN)
    w.write_bytes(params.addr)
    write_bigint(w, allowance)
    return w.finish()


def serialize_remove_expired_allocations_params(params: RemoveExpiredAllocationsParams) -> bytes:
    w = Writer(size_remove_expired_allocations_params(params))
    w.start_fixed_array(REMOVE_EXPIRED_ALLOCATIONS_PARAMS_LEN)
    write_actor_id(w, params.client)
    _write_actor_ids(w, params.allocation_ids)
    return w.finish()


def serialize_extend_claim_terms_params(params: ExtendClaimTermsParams) -> bytes:
    w = Writer(size_extend_claim_terms_params(params))
    w.start_fixed_array(EXTEND_CLAIM_TERMS_PARAMS_LEN)
    w.start_fixed_array(len(params.terms))
    for t in params.terms:
        _write_claim_term(w, t)
    return w.finish()


def serialize_remove_expired_claims_params(params: RemoveExpiredClaimsParams) -> bytes:
    w = Writer(size_remove_expired_claims_params(params))
    w.start_fixed_array(REMOVE_EXPIRED_CLAIMS_PARAMS_LEN)
    write_actor_id(w, params.provider)
    _write_actor_ids(w, params.claim_ids)
    return w.finish()


# ------------------------
# Returns (actor side)
# ------------------------


def serialize_get_claims_return(ret: GetClaimsReturn) -> bytes:
    # [ [success_count, [[index, code], ...]], [claim, ...] ]
    w = Writer(size_get_claims_return(ret))
    w.start_fixed_array(GET_CLAIMS_RETURN_LEN)
    _write_batch_return(w, ret.batch_info)
    w.start_fixed_array(len(ret.claims))
    for c in ret.claims:
        _write_claim(w, c)
    return w.finish()


def serialize_remove_expired_allocations_return(ret: RemoveExpiredAllocationsReturn) -> bytes:
    recovered = serialize_bigint(ret.datacap_recovered)
    w = Writer(size_remove_expired_allocations_return(ret, recovered_raw=recovered))
    w.start_fixed_array(REMOVE_EXPIRED_ALLOCATIONS_RETURN_LEN)
    _write_actor_ids(w, ret.considered)
    _write_batch_return(w, ret.results)
    write_bigint(w, recovered)
    return w.finish()


def serialize_extend_claim_terms_return(ret: BatchReturn) -> bytes:
    w = Writer(size_extend_claim_terms_return(ret))
    _write_batch_return(w, ret)
    return w.finish()


def serialize_remove_expired_claims_return(ret: RemoveExpiredClaimsReturn) -> bytes:
    w = Writer(size_remove_expired_claims_return(ret))
    w.start_fixed_array(REMOVE_EXPIRED_CLAIMS_RETURN_LEN)
    _write_actor_ids(w, ret.considered)
    _write_batch_return(w, ret.results)
    return w.finish()


__all__ = [
    "serialize_get_claims_params",
    "serialize_add_verified_client_params",
    "serialize_remove_expired_allocations_params",
    "serialize_extend_claim_terms_params",
    "serialize_remove_expired_claims_params",
    "serialize_get_claims_return",
    "serialize_remove_expired_allocations_return",
    "serialize_extend_claim_terms_return",
    "serialize_remove_expired_claims_return",
]
