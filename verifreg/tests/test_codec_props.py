"""
Property tests for the message codecs.

For arbitrary (bounded) values of every message shape:
- the encoded length equals the precomputed size,
- decoding the encoding yields an equal value,
- re-encoding the decoded value is byte-identical.
"""
from __future__ import annotations

import pytest

pytest.importorskip("hypothesis")
from hypothesis import given, settings
from hypothesis import strategies as st

from verifreg import deserialize as de
from verifreg import serialize as se
from verifreg import sizes
from verifreg.errors import CBORDecodeError, TrailingBytes
from verifreg.types import (
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

# ---- Strategies --------------------------------------------------------------

u32 = st.integers(min_value=0, max_value=2**32 - 1)
u64 = st.integers(min_value=0, max_value=2**64 - 1)
i64 = st.integers(min_value=-(2**63), max_value=2**63 - 1)
# 127 magnitude bytes plus the sign byte hits the 128-byte cap exactly
bigints = st.integers(min_value=-(2**1016 - 1), max_value=2**1016 - 1)
ids = st.lists(u64, max_size=30)

fail_codes = st.builds(FailCode, index=u32, code=u32)
batches = st.builds(BatchReturn, success_count=u32, fail_codes=st.lists(fail_codes, max_size=8))
claims = st.builds(
    Claim,
    provider=u64,
    client=u64,
    data=st.binary(max_size=80),
    size=u64,
    term_min=i64,
    term_max=i64,
    term_start=i64,
    sector=u64,
)
claim_terms = st.builds(ClaimTerm, provider=u64, claim_id=u64, term_max=i64)

CASES = {
    "get_claims_params": (
        st.builds(GetClaimsParams, provider=u64, claim_ids=ids),
        se.serialize_get_claims_params,
        de.deserialize_get_claims_params,
        sizes.size_get_claims_params,
    ),
    "add_verified_client_params": (
        st.builds(AddVerifiedClientParams, addr=st.binary(max_size=66), allowance=bigints),
        se.serialize_add_verified_client_params,
        de.deserialize_add_verified_client_params,
        sizes.size_add_verified_client_params,
    ),
    "remove_expired_allocations_params": (
        st.builds(RemoveExpiredAllocationsParams, client=u64, allocation_ids=ids),
        se.serialize_remove_expired_allocations_params,
        de.deserialize_remove_expired_allocations_params,
        sizes.size_remove_expired_allocations_params,
    ),
    "extend_claim_terms_params": (
        st.builds(ExtendClaimTermsParams, terms=st.lists(claim_terms, max_size=10)),
        se.serialize_extend_claim_terms_params,
        de.deserialize_extend_claim_terms_params,
        sizes.size_extend_claim_terms_params,
    ),
    "remove_expired_claims_params": (
        st.builds(RemoveExpiredClaimsParams, provider=u64, claim_ids=ids),
        se.serialize_remove_expired_claims_params,
        de.deserialize_remove_expired_claims_params,
        sizes.size_remove_expired_claims_params,
    ),
    "get_claims_return": (
        st.builds(GetClaimsReturn, batch_info=batches, claims=st.lists(claims, max_size=5)),
        se.serialize_get_claims_return,
        de.deserialize_get_claims_return,
        sizes.size_get_claims_return,
    ),
    "remove_expired_allocations_return": (
        st.builds(RemoveExpiredAllocationsReturn, considered=ids, results=batches, datacap_recovered=bigints),
        se.serialize_remove_expired_allocations_return,
        de.deserialize_remove_expired_allocations_return,
        sizes.size_remove_expired_allocations_return,
    ),
    "extend_claim_terms_return": (
        batches,
        se.serialize_extend_claim_terms_return,
        de.deserialize_extend_claim_terms_return,
        sizes.size_extend_claim_terms_return,
    ),
    "remove_expired_claims_return": (
        st.builds(RemoveExpiredClaimsReturn, considered=ids, results=batches),
        se.serialize_remove_expired_claims_return,
        de.deserialize_remove_expired_claims_return,
        sizes.size_remove_expired_claims_return,
    ),
}


@pytest.mark.parametrize("name", sorted(CASES))
def test_roundtrip_and_exact_size(name: str) -> None:
    strategy, encode, decode, size = CASES[name]

    @settings(max_examples=60, deadline=None)
    @given(strategy)
    def check(value) -> None:
        raw = encode(value)
        assert len(raw) == size(value)
        back = decode(raw, strict=True)
        assert back == value
        assert encode(back) == raw

    check()


@settings(max_examples=40, deadline=None)
@given(batches, st.binary(min_size=1, max_size=8))
def test_trailing_garbage_only_matters_when_strict(batch: BatchReturn, junk: bytes) -> None:
    raw = se.serialize_extend_claim_terms_return(batch) + junk
    assert de.deserialize_extend_claim_terms_return(raw) == batch
    with pytest.raises(TrailingBytes):
        de.deserialize_extend_claim_terms_return(raw, strict=True)


@settings(max_examples=40, deadline=None)
@given(st.builds(RemoveExpiredClaimsReturn, considered=ids, results=batches), st.data())
def test_truncation_never_yields_a_value(ret: RemoveExpiredClaimsReturn, data) -> None:
    raw = se.serialize_remove_expired_claims_return(ret)
    cut = data.draw(st.integers(min_value=0, max_value=len(raw) - 1))
    with pytest.raises(CBORDecodeError):
        de.deserialize_remove_expired_claims_return(raw[:cut])
