"""
Wire-level building blocks of the state channel: value kinds, the typed value
codec, frame reassembly and the manifest registry. Nothing here does I/O.
"""

from .codec import decode_string, decode_value, encode_read, encode_string, encode_value, encode_write
from .constants import DEFAULT_PORT, ENCODING, HEADER_SIZE, MANIFEST_ID
from .errors import DecodeError, EncodeError, ErrorCode, FramingError, ProtocolError, SendError, TransportError
from .framing import FrameBuffer, decode_manifest_payload, encode_frame
from .kinds import StateKind, normalize_kind
from .manifest import Manifest, ManifestRegistry, parse_manifest
from .messages import Frame, StateEntry, StateValue
from .validator import load_schema, validate_document

__all__ = [
    "DEFAULT_PORT",
    "ENCODING",
    "HEADER_SIZE",
    "MANIFEST_ID",
    "ErrorCode",
    "ProtocolError",
    "TransportError",
    "SendError",
    "FramingError",
    "DecodeError",
    "EncodeError",
    "StateKind",
    "normalize_kind",
    "StateEntry",
    "StateValue",
    "Frame",
    "decode_value",
    "encode_value",
    "encode_write",
    "encode_read",
    "encode_string",
    "decode_string",
    "FrameBuffer",
    "encode_frame",
    "decode_manifest_payload",
    "Manifest",
    "ManifestRegistry",
    "parse_manifest",
    "load_schema",
    "validate_document",
]
