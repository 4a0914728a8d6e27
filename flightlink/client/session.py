"""
Endpoint information announced by a running simulator.

The simulator periodically broadcasts one JSON document per datagram. Listening
for it is left to the caller; this module turns a received document into a
:class:`SessionInfo` whose ``ipv4`` can be handed to ``StateClient.connect``.
"""

from __future__ import annotations

import ipaddress
import json
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from flightlink.protocol import validator
from flightlink.protocol.constants import ENCODING
from flightlink.protocol.errors import ErrorCode, ProtocolError


def _is_ipv4(address: str) -> bool:
    try:
        ipaddress.IPv4Address(address)
    except ValueError:
        return False
    return True


class SessionInfo(BaseModel):
    """One discovery broadcast."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    addresses: List[str] = Field(..., alias="Addresses", description="Every address of the device")
    state: str = Field(default="", alias="State", description="Session state, e.g. Playing")
    version: str = Field(default="", alias="Version")
    device_id: str = Field(default="", alias="DeviceID")
    device_name: str = Field(default="", alias="DeviceName")
    aircraft: str = Field(default="", alias="Aircraft")
    livery: str = Field(default="", alias="Livery")

    @property
    def ipv4(self) -> Optional[str]:
        """First IPv4 address in ``addresses``, which is where the client connects."""
        for address in self.addresses:
            if _is_ipv4(address):
                return address
        return None


def parse_session(data: Union[bytes, str, Dict[str, Any]]) -> SessionInfo:
    """Validate a discovery document and build a SessionInfo that has an IPv4 address."""
    if isinstance(data, (bytes, bytearray)):
        try:
            data = bytes(data).decode(ENCODING)
        except UnicodeDecodeError as exc:
            raise ProtocolError(ErrorCode.INVALID_SESSION, f"Broadcast is not UTF-8: {exc}") from exc
    if isinstance(data, str):
        try:
            data = json.loads(data)
        except json.JSONDecodeError as exc:
            raise ProtocolError(ErrorCode.INVALID_SESSION, f"Broadcast is not JSON: {exc}") from exc

    validator.validate_document(data, "session", ErrorCode.INVALID_SESSION)
    try:
        session = SessionInfo.model_validate(data)
    except ValidationError as exc:
        raise ProtocolError(ErrorCode.INVALID_SESSION, f"Session validation failed: {exc}") from exc
    if session.ipv4 is None:
        raise ProtocolError(ErrorCode.INVALID_SESSION, "IPv4 address not found in Addresses")
    return session


__all__ = ["SessionInfo", "parse_session"]
