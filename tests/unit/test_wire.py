import struct

import pytest

from pricer.core.types import OptionKind, PricingRequest, PricingResult
from pricer.errors import DecodeError, DecodeErrorKind
from pricer.wire import (
    REQUEST_SIZE,
    RESPONSE_SIZE,
    decode_request,
    decode_result,
    encode_request,
    encode_result,
)


def test_sizes():
    assert REQUEST_SIZE == 43
    assert RESPONSE_SIZE == 24


def test_request_layout_is_little_endian():
    req = PricingRequest(S=101.5, K=99.0, r=0.03, sigma=0.21, T=0.5, kind=OptionKind.PUT, steps=513)
    buf = encode_request(req)

    assert len(buf) == 43
    assert struct.unpack_from("<5d", buf, 0) == (101.5, 99.0, 0.03, 0.21, 0.5)
    assert buf[40] == 1
    assert buf[41:43] == (513).to_bytes(2, "little")


def test_decode_hand_built_buffer():
    buf = struct.pack("<5d", 100.0, 100.0, 0.05, 0.2, 1.0) + bytes([0]) + (1000).to_bytes(2, "little")

    req = decode_request(buf)

    assert req == PricingRequest(S=100.0, K=100.0, r=0.05, sigma=0.2, T=1.0,
                                 kind=OptionKind.CALL, steps=1000)


@pytest.mark.parametrize("kind_byte", [1, 2, 0x7F, 0xFF])
def test_any_nonzero_kind_byte_is_put(kind_byte):
    buf = struct.pack("<5dBH", 1.0, 1.0, 0.0, 0.1, 1.0, kind_byte, 0)
    assert decode_request(buf).kind == OptionKind.PUT


def test_round_trip_is_bit_exact():
    req = PricingRequest(S=0.1 + 0.2, K=1e-300, r=-0.0125, sigma=1 / 3, T=7.0 / 365.0,
                         kind=OptionKind.CALL, steps=65535)

    back = decode_request(encode_request(req))

    assert back == req
    for name in ("S", "K", "r", "sigma", "T"):
        assert getattr(back, name).hex() == getattr(req, name).hex()


@pytest.mark.parametrize("length", [0, 1, 24, 41, 42, 44, 45, 86])
def test_wrong_length_request_is_rejected(length):
    with pytest.raises(DecodeError) as exc:
        decode_request(b"\xff" * length)

    assert exc.value.kind == DecodeErrorKind.WRONG_LENGTH
    assert exc.value.expected == 43
    assert exc.value.actual == length


def test_result_layout():
    buf = encode_result(PricingResult(price=10.45, delta=0.63, vega=37.5))

    assert len(buf) == 24
    assert struct.unpack("<3d", buf) == (10.45, 0.63, 37.5)
    assert decode_result(buf) == PricingResult(price=10.45, delta=0.63, vega=37.5)


def test_wrong_length_result_is_rejected():
    with pytest.raises(DecodeError):
        decode_result(b"\x00" * 23)
