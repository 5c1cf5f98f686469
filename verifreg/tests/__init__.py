"""
Common helpers for the verifreg/ test-suite.

    from verifreg.tests import h, sample_claim, sample_batch
"""

from __future__ import annotations

from verifreg.types import BatchReturn, Claim, FailCode

__all__ = ["h", "sample_claim", "sample_batch"]


def h(s: str) -> bytes:
    """Hex literal helper that tolerates spaces: h("82 05 06")."""
    return bytes.fromhex(s.replace(" ", ""))


def sample_claim(**kw) -> Claim:
    fields = dict(
        provider=1000,
        client=1001,
        data=h("0181e203922020") + bytes(range(32)),
        size=34359738368,
        term_min=518400,
        term_max=1555200,
        term_start=-5,
        sector=42,
    )
    fields.update(kw)
    return Claim(**fields)


def sample_batch(success: int = 2, fails=((1, 16),)) -> BatchReturn:
    return BatchReturn(success_count=success, fail_codes=tuple(FailCode(i, c) for i, c in fails))
