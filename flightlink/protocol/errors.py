from __future__ import annotations

from enum import IntEnum


class ErrorCode(IntEnum):
    """Error categories surfaced by the protocol and client layers."""

    TRANSPORT_FAILED = 1001
    CONNECTION_RESET = 1002
    SEND_FAILED = 1003
    FRAMING_ERROR = 1004
    DECODE_FAILED = 1005
    ENCODE_FAILED = 1006
    INVALID_SESSION = 1007


class ProtocolError(Exception):
    """Structured protocol exception carrying an error code + message."""

    def __init__(self, code: ErrorCode, message: str = "") -> None:
        self.code = code
        self.message = message
        super().__init__(f"{code.name} ({int(code)}): {message}")

    def to_payload(self) -> dict:
        """Map error into a plain dict suitable for logs or UI layers."""
        return {
            "error_code": int(self.code),
            "error_name": self.code.name,
            "error_message": self.message,
        }


class TransportError(ProtocolError):
    """Connection could not be opened, or failed while reading."""

    def __init__(self, message: str = "", code: ErrorCode = ErrorCode.TRANSPORT_FAILED) -> None:
        super().__init__(code, message)


class SendError(ProtocolError):
    def __init__(self, message: str = "") -> None:
        super().__init__(ErrorCode.SEND_FAILED, message)


class FramingError(ProtocolError):
    """The byte stream cannot be split into frames any more."""

    def __init__(self, message: str = "") -> None:
        super().__init__(ErrorCode.FRAMING_ERROR, message)


class DecodeError(ProtocolError):
    def __init__(self, message: str = "") -> None:
        super().__init__(ErrorCode.DECODE_FAILED, message)


class EncodeError(ProtocolError):
    def __init__(self, message: str = "") -> None:
        super().__init__(ErrorCode.ENCODE_FAILED, message)


__all__ = [
    "ErrorCode",
    "ProtocolError",
    "TransportError",
    "SendError",
    "FramingError",
    "DecodeError",
    "EncodeError",
]
