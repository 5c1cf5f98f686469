"""
verifreg.api

Thin synchronous facade over the verified registry actor.

The facade never talks to a chain itself. The caller supplies ``send``:

    def send(actor_id: int, method: int, codec: int, params: bytes) -> CallResult: ...

which performs the actual invocation (an FVM syscall shim, an RPC client, a
test double...). For each method the facade encodes the parameters, calls
``send`` exactly once and decodes the reply:

- a non-zero exit code raises `ActorCallError`,
- a non-empty reply in a codec other than DAG-CBOR raises `InvalidCodec`,
- decoding errors propagate unchanged.

There are no retries and no partial results.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Protocol

from . import logging as vlog
from .config import Config, defaults
from .errors import ActorCallError, EncodeError, InvalidCodec
from .methods import Method, MethodSpec, method_by_number
from .types import (
    AddVerifiedClientParams,
    BatchReturn,
    ExtendClaimTermsParams,
    GetClaimsParams,
    GetClaimsReturn,
    RemoveExpiredAllocationsParams,
    RemoveExpiredAllocationsReturn,
    RemoveExpiredClaimsParams,
    RemoveExpiredClaimsReturn,
)

log = vlog.get_logger(__name__)


@dataclass(frozen=True)
class CallResult:
    exit_code: int
    codec: int
    data: bytes = b""


class Send(Protocol):
    def __call__(self, actor_id: int, method: int, codec: int, params: bytes) -> CallResult: ...


class VerifRegAPI:
    """Encode → send → decode for every exported verified registry method."""

    def __init__(self, send: Send, config: Optional[Config] = None):
        self._send = send
        self._cfg = config or defaults()

    @property
    def config(self) -> Config:
        return self._cfg

    def call(self, spec: MethodSpec, params: Any) -> Any:
        if not isinstance(params, spec.params_type):
            raise EncodeError(
                f"{spec.name} expects {spec.params_type.__name__}, got {type(params).__name__}",
                method=spec.name,
            )
        raw = spec.encode_params(params)
        actor_id = self._cfg.actor.actor_id
        codec = self._cfg.actor.codec
        with vlog.trace_scope():
            vlog.bind(method=spec.name, actor=actor_id)
            log.debug(
                "calling %s",
                spec.name,
                extra={"method_num": int(spec.number), "params_len": len(raw)},
            )
            res = self._send(actor_id, int(spec.number), codec, raw)

            if res.exit_code != 0:
                log.warning("%s failed", spec.name, extra={"exit_code": res.exit_code})
                raise ActorCallError(spec.name, res.exit_code)
            if not spec.has_return:
                return None
            if res.data and res.codec != codec:
                raise InvalidCodec(spec.name, codec, res.codec)

            ret = spec.decode_return(res.data, strict=self._cfg.codec.strict_trailing)
            log.debug("%s ok", spec.name, extra={"return_len": len(res.data)})
            return ret

    # ---- per-method helpers ----

    def add_verified_client(self, params: AddVerifiedClientParams) -> None:
        self.call(method_by_number(Method.ADD_VERIFIED_CLIENT), params)

    def remove_expired_allocations(
        self, params: RemoveExpiredAllocationsParams
    ) -> RemoveExpiredAllocationsReturn:
        return self.call(method_by_number(Method.REMOVE_EXPIRED_ALLOCATIONS), params)

    def get_claims(self, params: GetClaimsParams) -> GetClaimsReturn:
        return self.call(method_by_number(Method.GET_CLAIMS), params)

    def extend_claim_terms(self, params: ExtendClaimTermsParams) -> BatchReturn:
        return self.call(method_by_number(Method.EXTEND_CLAIM_TERMS), params)

    def remove_expired_claims(self, params: RemoveExpiredClaimsParams) -> RemoveExpiredClaimsReturn:
        return self.call(method_by_number(Method.REMOVE_EXPIRED_CLAIMS), params)


__all__ = ["CallResult", "Send", "VerifRegAPI"]
