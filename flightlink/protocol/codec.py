"""
Typed value codec for the state channel.

Every value travels in a fixed little-endian layout determined by the state's
declared kind. Floats are packed and unpacked through ``struct`` so the IEEE-754
bit pattern survives unchanged (``-0.0`` stays negative, NaN payloads are kept).
"""

from __future__ import annotations

import struct
from typing import Any

from .constants import ENCODING, INT32_MAX, INT32_MIN, INT64_MAX, INT64_MIN, READ_FLAG, WRITE_FLAG
from .errors import DecodeError, EncodeError
from .kinds import StateKind, normalize_kind
from .messages import StateValue

_FLOAT32 = struct.Struct("<f")
_FLOAT64 = struct.Struct("<d")


def encode_int32(value: int) -> bytes:
    if not (INT32_MIN <= value <= INT32_MAX):
        raise EncodeError(f"{value} does not fit in int32")
    return int(value).to_bytes(4, "little", signed=True)


def encode_int64(value: int) -> bytes:
    if not (INT64_MIN <= value <= INT64_MAX):
        raise EncodeError(f"{value} does not fit in int64")
    return int(value).to_bytes(8, "little", signed=True)


def encode_string(text: str) -> bytes:
    """Encode text as ``len:int32`` followed by UTF-8 bytes."""
    data = text.encode(ENCODING)
    return encode_int32(len(data)) + data


def decode_string(payload: bytes) -> str:
    """Decode a length-prefixed UTF-8 string; trailing bytes are ignored."""
    if len(payload) < 4:
        raise DecodeError("String payload shorter than its length prefix")
    length = int.from_bytes(payload[:4], "little", signed=True)
    if length < 0 or 4 + length > len(payload):
        raise DecodeError(f"String length {length} exceeds payload of {len(payload)} bytes")
    try:
        return bytes(payload[4 : 4 + length]).decode(ENCODING)
    except UnicodeDecodeError as exc:
        raise DecodeError(f"Invalid UTF-8 in string payload: {exc}") from exc


def _check_size(kind: StateKind, payload: bytes) -> None:
    expected = kind.payload_size
    if len(payload) != expected:
        raise DecodeError(f"{kind.description} payload must be {expected} bytes, got {len(payload)}")


def decode_value(kind: StateKind, payload: bytes) -> StateValue:
    """Decode ``payload`` according to ``kind``; raise DecodeError when it does not fit."""
    kind = normalize_kind(kind)
    if kind is StateKind.STRING:
        return decode_string(payload)
    if not kind.is_data:
        raise DecodeError(f"{kind.description} states carry no value")

    _check_size(kind, payload)
    if kind is StateKind.BOOL:
        return payload[0] != 0
    if kind is StateKind.INT or kind is StateKind.LONG:
        return int.from_bytes(payload, "little", signed=True)
    if kind is StateKind.FLOAT:
        return _FLOAT32.unpack(payload)[0]
    return _FLOAT64.unpack(payload)[0]


def encode_value(kind: StateKind, value: Any) -> bytes:
    """Encode ``value`` into the layout of ``kind`` (without id or write flag)."""
    kind = normalize_kind(kind)
    if kind is StateKind.BOOL:
        return b"\x01" if value else b"\x00"
    if kind is StateKind.STRING:
        if not isinstance(value, str):
            raise EncodeError(f"String state expects str, got {type(value).__name__}")
        return encode_string(value)
    if kind is StateKind.INT or kind is StateKind.LONG:
        if not isinstance(value, int):
            raise EncodeError(f"{kind.description} state expects int, got {type(value).__name__}")
        return encode_int32(value) if kind is StateKind.INT else encode_int64(value)
    if kind is StateKind.FLOAT or kind is StateKind.DOUBLE:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise EncodeError(f"{kind.description} state expects float, got {type(value).__name__}")
        packer = _FLOAT32 if kind is StateKind.FLOAT else _FLOAT64
        try:
            return packer.pack(value)
        except (OverflowError, struct.error) as exc:
            raise EncodeError(f"{value} does not fit in {kind.description}: {exc}") from exc
    raise EncodeError(f"Cannot encode a value for {kind.description} states")


def encode_write(state_id: int, kind: StateKind, value: Any) -> bytes:
    """Build ``[id:4][1][value]``."""
    return encode_int32(state_id) + bytes([WRITE_FLAG]) + encode_value(kind, value)


def encode_read(state_id: int) -> bytes:
    """Build ``[id:4][0]``; also used to trigger commands and request the manifest."""
    return encode_int32(state_id) + bytes([READ_FLAG])


__all__ = [
    "encode_int32",
    "encode_int64",
    "encode_string",
    "decode_string",
    "decode_value",
    "encode_value",
    "encode_write",
    "encode_read",
]
