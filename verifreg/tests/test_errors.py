from __future__ import annotations

import json
import pickle

import pytest

from verifreg import config
from verifreg import logging as vlog
from verifreg.errors import (
    CBORDecodeError,
    ConfigError,
    ErrorCode,
    InsufficientBytes,
    InvalidCodec,
    LengthMismatch,
    VerifRegError,
)


def test_length_mismatch_shape() -> None:
    e = LengthMismatch(expected=8, actual=7)
    assert isinstance(e, VerifRegError)
    assert not isinstance(e, CBORDecodeError)
    assert e.code == ErrorCode.LENGTH_MISMATCH
    assert str(e) == "VERIFREG/LENGTH_MISMATCH: invalid array length: expected 8, got 7 [expected=8, actual=7]"


def test_to_dict_is_json_safe() -> None:
    e = InsufficientBytes(offset=3, needed=5, available=1)
    d = e.to_dict()
    assert d == {
        "code": "VERIFREG/INSUFFICIENT_BYTES",
        "message": "need 5 byte(s) at offset 3, only 1 available",
        "data": {"offset": 3, "needed": 5, "available": 1},
    }
    json.dumps(d)


def test_codec_hex_in_message() -> None:
    e = InvalidCodec("GetClaims", 0x71, 0x55)
    assert "0x55" in e.message and "0x71" in e.message


def test_cause_is_reported_on_request(tmp_path) -> None:
    bad = tmp_path / "c.json"
    bad.write_text("{", encoding="utf-8")
    with pytest.raises(ConfigError) as ei:
        config.load(bad)
    assert "cause" not in ei.value.to_dict()
    assert ei.value.to_dict(include_cause=True)["cause"]["type"] == "JSONDecodeError"


def test_log_fields_bind_and_unbind() -> None:
    with vlog.trace_scope("t1") as tid:
        assert tid == "t1"
        vlog.bind(method="GetClaims", raw=b"\xff")
        assert vlog.context() == {"trace_id": "t1", "method": "GetClaims", "raw": "ff"}
        vlog.unbind("method", "raw")
        assert vlog.context() == {"trace_id": "t1"}
        vlog.clear_context()
        assert vlog.context() == {}
    assert vlog.context() == {}


@pytest.mark.parametrize(
    "err",
    [
        LengthMismatch(expected=2, actual=3),
        InsufficientBytes(offset=1, needed=8, available=2),
        InvalidCodec("GetClaims", 0x71, 0x55),
        ConfigError("bad level", level="LOUD"),
    ],
)
def test_errors_survive_pickle(err: VerifRegError) -> None:
    back = pickle.loads(pickle.dumps(err))
    assert type(back) is type(err)
    assert back.to_dict() == err.to_dict()
    assert str(back) == str(err)
    assert back.args == err.args


def test_pickled_length_mismatch_keeps_counts() -> None:
    back = pickle.loads(pickle.dumps(LengthMismatch(expected=8, actual=7)))
    assert (back.expected, back.actual) == (8, 7)
