"""
verifreg: CBOR codec for verified registry actor calls.

Encodes typed call parameters into the exact CBOR bytes the verified registry
actor expects, and decodes its untrusted replies back into typed values,
rejecting anything whose shape differs from the schema.

Public surface:
- types: parameter/return dataclasses (GetClaimsParams, Claim, BatchReturn, ...)
- serialize_*_params / deserialize_*_return: per-message codecs
- size_*: exact encoded sizes
- errors: LengthMismatch and the primitive CBOR error family
- VerifRegAPI: encode → send → decode facade over a caller-supplied transport
"""

from .api import CallResult, VerifRegAPI
from .deserialize import (
    deserialize_add_verified_client_params,
    deserialize_extend_claim_terms_params,
    deserialize_extend_claim_terms_return,
    deserialize_get_claims_params,
    deserialize_get_claims_return,
    deserialize_remove_expired_allocations_params,
    deserialize_remove_expired_allocations_return,
    deserialize_remove_expired_claims_params,
    deserialize_remove_expired_claims_return,
)
from .errors import CBORDecodeError, LengthMismatch, VerifRegError
from .serialize import (
    serialize_add_verified_client_params,
    serialize_extend_claim_terms_params,
    serialize_extend_claim_terms_return,
    serialize_get_claims_params,
    serialize_get_claims_return,
    serialize_remove_expired_allocations_params,
    serialize_remove_expired_allocations_return,
    serialize_remove_expired_claims_params,
    serialize_remove_expired_claims_return,
)
from .types import (
    AddVerifiedClientParams,
    BatchReturn,
    Claim,
    ClaimTerm,
    ExtendClaimTermsParams,
    ExtendClaimTermsReturn,
    FailCode,
    GetClaimsParams,
    GetClaimsReturn,
    RemoveExpiredAllocationsParams,
    RemoveExpiredAllocationsReturn,
    RemoveExpiredClaimsParams,
    RemoveExpiredClaimsReturn,
)
from .version import __version__

__all__ = [
    "__version__",
    # facade
    "CallResult",
    "VerifRegAPI",
    # errors
    "VerifRegError",
    "LengthMismatch",
    "CBORDecodeError",
    # types
    "FailCode",
    "BatchReturn",
    "Claim",
    "ClaimTerm",
    "GetClaimsParams",
    "GetClaimsReturn",
    "AddVerifiedClientParams",
    "RemoveExpiredAllocationsParams",
    "RemoveExpiredAllocationsReturn",
    "ExtendClaimTermsParams",
    "ExtendClaimTermsReturn",
    "RemoveExpiredClaimsParams",
    "RemoveExpiredClaimsReturn",
    # encoders
    "serialize_get_claims_params",
    "serialize_add_verified_client_params",
    "serialize_remove_expired_allocations_params",
    "serialize_extend_claim_terms_params",
    "serialize_remove_expired_claims_params",
    "serialize_get_claims_return",
    "serialize_remove_expired_allocations_return",
    "serialize_extend_claim_terms_return",
    "serialize_remove_expired_claims_return",
    # decoders
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
