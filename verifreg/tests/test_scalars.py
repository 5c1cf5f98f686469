from __future__ import annotations

import pytest

from verifreg import scalars
from verifreg.cbor import Writer
from verifreg.errors import EncodeError, InvalidBigInt, UnexpectedMajorType
from verifreg.tests import h


@pytest.mark.parametrize(
    "value,payload",
    [
        (0, "00"),
        (1, "0001"),
        (255, "00ff"),
        (256, "000100"),
        (-1, "0101"),
        (-256, "01 0100"),
        (10**18, "00 0de0b6b3a7640000"),
    ],
)
def test_bigint_sign_magnitude(value: int, payload: str) -> None:
    raw = h(payload)
    assert scalars.serialize_bigint(value) == raw
    assert scalars.deserialize_bytes_bigint(raw) == value


def test_bigint_zero_forms() -> None:
    assert scalars.deserialize_bytes_bigint(b"") == 0
    assert scalars.deserialize_bytes_bigint(b"\x00") == 0
    # "negative zero" carries no magnitude
    assert scalars.deserialize_bytes_bigint(b"\x01") == 0


def test_bigint_leading_zero_magnitude_is_tolerated() -> None:
    assert scalars.deserialize_bytes_bigint(h("00 0001")) == 1


@pytest.mark.parametrize("sign", [0x02, 0x80, 0xFF])
def test_bigint_bad_sign(sign: int) -> None:
    with pytest.raises(InvalidBigInt) as ei:
        scalars.deserialize_bytes_bigint(bytes([sign, 1]))
    assert ei.value.data["sign"] == sign


def test_bigint_length_cap() -> None:
    limit = scalars.BIGINT_MAX_SERIALIZED_LEN
    biggest = (1 << (8 * (limit - 1))) - 1
    raw = scalars.serialize_bigint(biggest)
    assert len(raw) == limit
    assert scalars.deserialize_bytes_bigint(raw) == biggest
    assert scalars.serialize_bigint(-biggest)[0] == 0x01

    with pytest.raises(EncodeError):
        scalars.serialize_bigint(biggest + 1)
    with pytest.raises(InvalidBigInt):
        scalars.deserialize_bytes_bigint(b"\x00" + b"\x01" * limit)


def test_bigint_rejects_non_int() -> None:
    with pytest.raises(EncodeError):
        scalars.serialize_bigint(True)
    with pytest.raises(EncodeError):
        scalars.serialize_bigint("12")  # type: ignore[arg-type]


def test_bigint_wire_roundtrip_through_writer() -> None:
    payload = scalars.serialize_bigint(-1000)
    w = Writer(scalars.get_bigint_size(payload))
    scalars.write_bigint(w, payload)
    out = w.finish()
    assert out == h("43 01 03e8")
    assert scalars.read_bigint(out, 0) == (-1000, 4)


def test_read_bigint_needs_byte_string() -> None:
    with pytest.raises(UnexpectedMajorType):
        scalars.read_bigint(h("05"), 0)


def test_actor_id_domain() -> None:
    assert scalars.check_actor_id(0) == 0
    assert scalars.check_actor_id(2**64 - 1) == 2**64 - 1
    for bad in (-1, 2**64, True, 1.0, "6"):
        with pytest.raises(EncodeError) as ei:
            scalars.check_actor_id(bad, "provider")  # type: ignore[arg-type]
        assert ei.value.data["field"] == "provider"


def test_chain_epoch_domain() -> None:
    assert scalars.check_chain_epoch(-(2**63)) == -(2**63)
    assert scalars.check_chain_epoch(2**63 - 1) == 2**63 - 1
    for bad in (-(2**63) - 1, 2**63, False):
        with pytest.raises(EncodeError):
            scalars.check_chain_epoch(bad)


def test_chain_epoch_negative_on_wire() -> None:
    w = Writer(scalars.get_chain_epoch_size(-5))
    scalars.write_chain_epoch(w, -5)
    out = w.finish()
    assert out == h("24")
    assert scalars.read_chain_epoch(out, 0) == (-5, 1)


def test_actor_id_on_wire() -> None:
    w = Writer(scalars.get_actor_id_size(1000))
    scalars.write_actor_id(w, 1000)
    out = w.finish()
    assert out == h("19 03e8")
    assert scalars.read_actor_id(out, 0) == (1000, 3)
