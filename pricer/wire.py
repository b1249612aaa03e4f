"""Fixed-size little-endian wire format.

Request (43 bytes):  S, K, r, sigma, T as float64 | kind uint8 (0 = call) | steps uint16
Response (24 bytes): price, delta, vega as float64
"""

import struct

from .core.types import OptionKind, PricingRequest, PricingResult
from .errors import DecodeError, DecodeErrorKind

REQUEST_FORMAT = struct.Struct("<5dBH")
RESPONSE_FORMAT = struct.Struct("<3d")

REQUEST_SIZE = REQUEST_FORMAT.size    # 43
RESPONSE_SIZE = RESPONSE_FORMAT.size  # 24


def _check_length(buf: bytes, expected: int) -> None:
    if len(buf) != expected:
        raise DecodeError(DecodeErrorKind.WRONG_LENGTH, expected, len(buf))


def decode_request(buf: bytes) -> PricingRequest:
    _check_length(buf, REQUEST_SIZE)
    S, K, r, sigma, T, kind, steps = REQUEST_FORMAT.unpack(buf)
    return PricingRequest(
        S=S, K=K, r=r, sigma=sigma, T=T,
        kind=OptionKind.CALL if kind == 0 else OptionKind.PUT,
        steps=steps,
    )


def encode_request(req: PricingRequest) -> bytes:
    kind = 0 if req.kind == OptionKind.CALL else 1
    return REQUEST_FORMAT.pack(req.S, req.K, req.r, req.sigma, req.T, kind, req.steps)


def encode_result(result: PricingResult) -> bytes:
    return RESPONSE_FORMAT.pack(result.price, result.delta, result.vega)


def decode_result(buf: bytes) -> PricingResult:
    _check_length(buf, RESPONSE_SIZE)
    price, delta, vega = RESPONSE_FORMAT.unpack(buf)
    return PricingResult(price=price, delta=delta, vega=vega)
