from __future__ import annotations

import pytest

from verifreg import serialize as se
from verifreg import sizes
from verifreg.errors import EncodeError
from verifreg.tests import h, sample_batch, sample_claim
from verifreg.types import (
    AddVerifiedClientParams,
    BatchReturn,
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
# Golden vectors (parameters)
# ------------------------


def test_get_claims_params_golden() -> None:
    p = GetClaimsParams(provider=1000, claim_ids=(5, 6))
    out = se.serialize_get_claims_params(p)
    assert out == h("82 19 03e8 82 05 06")
    assert len(out) == sizes.size_get_claims_params(p) == 7


def test_get_claims_params_empty_list() -> None:
    assert se.serialize_get_claims_params(GetClaimsParams(provider=0)) == h("82 00 80")


def test_add_verified_client_params_zero_allowance() -> None:
    addr = bytes(range(20))
    p = AddVerifiedClientParams(addr=addr, allowance=0)
    out = se.serialize_add_verified_client_params(p)
    assert len(out) == 24 == sizes.size_add_verified_client_params(p)
    assert out[:2] == h("82 54")
    assert out[2:22] == addr
    assert out[-2:] == h("41 00")


def test_add_verified_client_params_large_allowance() -> None:
    # 1 PiB of datacap
    p = AddVerifiedClientParams(addr=h("00e807"), allowance=2**50)
    out = se.serialize_add_verified_client_params(p)
    assert out == h("82 43 00e807 48 00 04000000000000")


def test_add_verified_client_params_oversized_allowance() -> None:
    with pytest.raises(EncodeError):
        AddVerifiedClientParams(addr=b"\x00", allowance=1 << 1100)


def test_remove_expired_allocations_params_golden() -> None:
    p = RemoveExpiredAllocationsParams(client=42, allocation_ids=())
    assert se.serialize_remove_expired_allocations_params(p) == h("82 18 2a 80")

    p = RemoveExpiredAllocationsParams(client=42, allocation_ids=(1, 300, 70000))
    assert se.serialize_remove_expired_allocations_params(p) == h(
        "82 18 2a 83 01 19 012c 1a 00011170"
    )


def test_extend_claim_terms_params_golden() -> None:
    p = ExtendClaimTermsParams(terms=(ClaimTerm(provider=1000, claim_id=7, term_max=1555200),))
    out = se.serialize_extend_claim_terms_params(p)
    assert out == h("81 81 83 19 03e8 07 1a 0017bb00")
    assert len(out) == sizes.size_extend_claim_terms_params(p)


def test_extend_claim_terms_params_empty() -> None:
    assert se.serialize_extend_claim_terms_params(ExtendClaimTermsParams()) == h("81 80")


def test_remove_expired_claims_params_golden() -> None:
    p = RemoveExpiredClaimsParams(provider=1000, claim_ids=(24,))
    assert se.serialize_remove_expired_claims_params(p) == h("82 19 03e8 81 18 18")


# ------------------------
# Golden vectors (returns)
# ------------------------


def test_extend_claim_terms_return_is_bare_batch() -> None:
    out = se.serialize_extend_claim_terms_return(sample_batch())
    assert out == h("82 02 81 82 01 10")


def test_remove_expired_claims_return_golden() -> None:
    r = RemoveExpiredClaimsReturn(considered=(5,), results=BatchReturn(success_count=1))
    assert se.serialize_remove_expired_claims_return(r) == h("82 81 05 82 01 80")


def test_remove_expired_allocations_return_golden() -> None:
    r = RemoveExpiredAllocationsReturn(considered=(), results=BatchReturn(0), datacap_recovered=2048)
    out = se.serialize_remove_expired_allocations_return(r)
    assert out == h("83 80 82 00 80 43 00 0800")
    assert len(out) == sizes.size_remove_expired_allocations_return(r)


def test_get_claims_return_layout() -> None:
    claim = sample_claim(data=h("0102"), size=2048, term_min=10, term_max=20, term_start=-5, sector=1)
    r = GetClaimsReturn(batch_info=BatchReturn(success_count=1), claims=(claim,))
    out = se.serialize_get_claims_return(r)
    assert out == h(
        "82"  # [batch_info, claims]
        "82 01 80"  # BatchReturn{1, []}
        "81 88 19 03e8 19 03e9 42 0102 19 0800 0a 14 24 01"
    )
    assert len(out) == sizes.size_get_claims_return(r)


# ------------------------
# Properties of the encoder
# ------------------------


def test_encoding_is_deterministic_and_pure() -> None:
    p = GetClaimsParams(provider=1, claim_ids=tuple(range(30)))
    a = se.serialize_get_claims_params(p)
    b = se.serialize_get_claims_params(p)
    assert a == b
    assert p.claim_ids == tuple(range(30))


@pytest.mark.parametrize("n", [23, 24, 255, 256])
def test_sequence_head_width_follows_count(n: int) -> None:
    p = RemoveExpiredClaimsParams(provider=1, claim_ids=(0,) * n)
    out = se.serialize_remove_expired_claims_params(p)
    assert len(out) == sizes.size_remove_expired_claims_params(p)
    assert len(out) == 1 + 1 + sizes.size_actor_ids((0,) * n)
