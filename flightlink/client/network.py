from __future__ import annotations

import asyncio
import contextlib
import logging
import weakref
from enum import StrEnum
from typing import Any, Dict, Optional, Tuple

from flightlink.client.config import CLIENT_CONFIG, DEFAULT_CONFIG
from flightlink.client.delegate import ClientDelegate
from flightlink.client.session import SessionInfo
from flightlink.protocol import codec
from flightlink.protocol.constants import MANIFEST_ID
from flightlink.protocol.errors import (
    DecodeError,
    ErrorCode,
    FramingError,
    ProtocolError,
    SendError,
    TransportError,
)
from flightlink.protocol.framing import FrameBuffer, decode_manifest_payload
from flightlink.protocol.kinds import StateKind
from flightlink.protocol.manifest import Manifest, ManifestRegistry
from flightlink.protocol.messages import Frame, StateEntry, StateValue

logger = logging.getLogger(__name__)

VALUE_EVENTS: Dict[StateKind, str] = {
    StateKind.BOOL: "did_receive_bool",
    StateKind.INT: "did_receive_int32",
    StateKind.FLOAT: "did_receive_float32",
    StateKind.DOUBLE: "did_receive_float64",
    StateKind.STRING: "did_receive_string",
    StateKind.LONG: "did_receive_int64",
}


class ConnectionState(StrEnum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    READY = "ready"
    FAILED = "failed"


class StateClient:
    """
    TCP client for the simulator's state channel.

    After connecting it requests the manifest, then turns every incoming frame
    into a typed delegate event. Writes are fire-and-forget. All methods must
    be called from the thread running the event loop; delegate events are
    delivered on that loop in frame-arrival order.
    """

    def __init__(
        self,
        delegate: Optional[ClientDelegate] = None,
        config: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.config = {**DEFAULT_CONFIG, **(config or CLIENT_CONFIG)}
        self.host: Optional[str] = None
        self.port: int = int(self.config["server_port"])
        self.read_chunk_size: int = int(self.config["read_chunk_size"])
        self.backoff: float = float(self.config["reconnect_backoff"])
        self.max_backoff: float = float(self.config["max_reconnect_backoff"])
        self.max_retries: int = int(self.config["max_reconnect_retries"])
        self.debug_mode: bool = bool(self.config["debug_mode"])

        self.state: ConnectionState = ConnectionState.DISCONNECTED
        self.error: Optional[ProtocolError] = None
        self.reader: Optional[asyncio.StreamReader] = None
        self.writer: Optional[asyncio.StreamWriter] = None

        self._generation = 0
        self._receive_task: Optional[asyncio.Task] = None
        self._drain_task: Optional[asyncio.Task] = None
        self._frames = FrameBuffer()
        self._registry = ManifestRegistry()
        self._delegate_ref: Optional[weakref.ReferenceType] = None
        self.delegate = delegate

    def __repr__(self) -> str:
        return f"StateClient({self.host}:{self.port}, {self.state}, {len(self.manifest)} states)"

    @property
    def delegate(self) -> Optional[ClientDelegate]:
        if self._delegate_ref is None:
            return None
        return self._delegate_ref()

    @delegate.setter
    def delegate(self, delegate: Optional[ClientDelegate]) -> None:
        self._delegate_ref = weakref.ref(delegate) if delegate is not None else None

    @property
    def connected(self) -> bool:
        return self.state is ConnectionState.READY

    @property
    def manifest(self) -> Manifest:
        return self._registry.snapshot

    @property
    def states(self) -> Tuple[StateEntry, ...]:
        """States from the last manifest, sorted by id."""
        return self._registry.snapshot.entries

    def find_state(self, state_id: int) -> Optional[StateEntry]:
        return self._registry.find_by_id(state_id)

    def find_state_by_name(self, name: str) -> Optional[StateEntry]:
        return self._registry.find_by_name(name)

    async def connect(self, host: str, port: Optional[int] = None) -> None:
        """
        Open the state channel to ``host``.

        Failures are reported through ``did_receive_error`` and leave the
        client in ``FAILED``; nothing is raised.
        """
        self.disconnect()
        generation = self._generation
        self.host = host
        if port is not None:
            self.port = int(port)
        self.error = None
        self.state = ConnectionState.CONNECTING

        try:
            reader, writer = await self._open_connection(generation)
        except TransportError as exc:
            if generation == self._generation:
                self._fail(exc)
            return

        if generation != self._generation:
            # disconnect() was called while the connection was being opened
            writer.close()
            return

        self.reader, self.writer = reader, writer
        self.state = ConnectionState.READY
        logger.info("Connected to %s:%s", self.host, self.port)
        self._notify("did_connect")
        if generation != self._generation:
            return
        self.get_manifest()
        self._receive_task = asyncio.create_task(
            self._receive_loop(reader, generation), name="flightlink-recv-loop"
        )

    async def connect_session(self, session: SessionInfo, port: Optional[int] = None) -> None:
        """Connect to the IPv4 address announced in a discovery broadcast."""
        if session.ipv4 is None:
            raise ProtocolError(ErrorCode.INVALID_SESSION, "Session has no IPv4 address")
        await self.connect(session.ipv4, port)

    def disconnect(self) -> None:
        """Drop the connection. Safe to call when already disconnected."""
        if self.state is ConnectionState.DISCONNECTED and self.writer is None:
            return
        self._teardown()
        self.state = ConnectionState.DISCONNECTED
        logger.info("Disconnected from %s:%s", self.host, self.port)

    async def close(self) -> None:
        """Disconnect and wait for the socket and background tasks to finish."""
        writer = self.writer
        tasks = [task for task in (self._receive_task, self._drain_task) if task is not None]
        self.disconnect()
        for task in tasks:
            if task is not asyncio.current_task():
                with contextlib.suppress(asyncio.CancelledError):
                    await task
        if writer is not None:
            try:
                await writer.wait_closed()
            except (ConnectionError, OSError) as exc:
                logger.debug("Error while closing connection: %s", exc)

    async def _open_connection(self, generation: int) -> Tuple[asyncio.StreamReader, asyncio.StreamWriter]:
        retries = 0
        delay = self.backoff
        while True:
            try:
                return await asyncio.open_connection(self.host, self.port)
            except OSError as exc:
                if retries >= self.max_retries or generation != self._generation:
                    raise TransportError(f"Cannot connect to {self.host}:{self.port}: {exc}") from exc
                retries += 1
                logger.warning("Connect attempt %s failed: %s", retries, exc)
                await asyncio.sleep(delay)
                delay = min(delay * 2, self.max_backoff)

    def _teardown(self) -> None:
        self._generation += 1
        task = self._receive_task
        self._receive_task = None
        if task is not None and task is not asyncio.current_task() and not task.done():
            task.cancel()
        drain = self._drain_task
        self._drain_task = None
        if drain is not None and drain is not asyncio.current_task() and not drain.done():
            drain.cancel()
        writer = self.writer
        self.reader = None
        self.writer = None
        if writer is not None:
            writer.close()
        self._frames.clear()

    def _fail(self, error: ProtocolError) -> None:
        self.error = error
        self.state = ConnectionState.FAILED
        logger.error("Connection to %s:%s failed: %s", self.host, self.port, error)
        self._notify("did_receive_error", error)

    async def _receive_loop(self, reader: asyncio.StreamReader, generation: int) -> None:
        while generation == self._generation:
            try:
                data = await reader.read(self.read_chunk_size)
            except asyncio.CancelledError:
                break
            except (ConnectionError, OSError) as exc:
                if generation == self._generation:
                    self._fail(TransportError(f"Receive failed: {exc}", ErrorCode.CONNECTION_RESET))
                break

            if generation != self._generation:
                break
            if not data:
                logger.info("Remote closed the connection")
                self.disconnect()
                break
            self._handle_data(data, generation)

    def _handle_data(self, data: bytes, generation: int) -> None:
        """Buffer ``data`` and dispatch every frame it completes."""
        self._frames.append(data)
        while generation == self._generation:
            try:
                frame = self._frames.next_frame()
            except FramingError as exc:
                self._teardown()
                self._fail(exc)
                return
            if frame is None:
                return
            self._dispatch(frame)

    def _dispatch(self, frame: Frame) -> None:
        if frame.is_manifest:
            self._handle_manifest(frame.payload)
            return

        entry = self._registry.find_by_id(frame.id)
        if entry is None:
            logger.debug("Dropping frame for unknown state %s", frame.id)
            return
        try:
            value = codec.decode_value(entry.kind, frame.payload)
        except DecodeError as exc:
            logger.debug("Dropping frame for state %s: %s", frame.id, exc)
            return
        self._notify(VALUE_EVENTS[entry.kind], value, frame.id)

    def _handle_manifest(self, payload: bytes) -> None:
        try:
            text = decode_manifest_payload(payload)
        except DecodeError as exc:
            logger.debug("Dropping manifest frame: %s", exc)
            return
        manifest = self._registry.rebuild(text)
        logger.info("Received manifest with %s states", len(manifest))
        self._notify("did_receive_manifest", manifest.entries)

    def _notify(self, event: str, *args: Any) -> None:
        delegate = self.delegate
        if delegate is None:
            return
        handler = getattr(delegate, event, None)
        if handler is None:
            return
        try:
            handler(self, *args)
        except Exception as exc:
            logger.exception("Delegate error in %s: %s", event, exc)

    def set_bool(self, state_id: int, value: bool) -> None:
        self._write(state_id, StateKind.BOOL, value)

    def set_int32(self, state_id: int, value: int) -> None:
        self._write(state_id, StateKind.INT, value)

    def set_float32(self, state_id: int, value: float) -> None:
        self._write(state_id, StateKind.FLOAT, value)

    def set_float64(self, state_id: int, value: float) -> None:
        self._write(state_id, StateKind.DOUBLE, value)

    def set_int64(self, state_id: int, value: int) -> None:
        self._write(state_id, StateKind.LONG, value)

    def set_string(self, state_id: int, value: str) -> None:
        self._write(state_id, StateKind.STRING, value)

    def get(self, state_id: int) -> None:
        """Ask the remote to send the current value of ``state_id``."""
        if state_id != MANIFEST_ID:
            self._check_state(state_id)
        self._send(codec.encode_read(state_id))

    def command(self, state_id: int) -> None:
        """Trigger the command ``state_id``."""
        self._check_state(state_id, StateKind.COMMAND)
        self._send(codec.encode_read(state_id))

    def get_manifest(self) -> None:
        """Request the manifest; the answer replaces ``states``."""
        self.get(MANIFEST_ID)

    def _write(self, state_id: int, kind: StateKind, value: StateValue) -> None:
        self._check_state(state_id, kind)
        self._send(codec.encode_write(state_id, kind, value))

    def _check_state(self, state_id: int, kind: Optional[StateKind] = None) -> None:
        if not self.debug_mode:
            return
        entry = self._registry.find_by_id(state_id)
        if entry is None:
            logger.warning("Request sent to nonexistent state %s", state_id)
        elif kind is not None and entry.kind is not kind:
            logger.warning(
                "Request with type %s sent to state %s of type %s",
                kind.description,
                state_id,
                entry.kind.description,
            )

    def _send(self, data: bytes) -> None:
        writer = self.writer
        if writer is None:
            logger.warning("Dropping %s byte message: not connected", len(data))
            return
        try:
            writer.write(data)
        except (ConnectionError, RuntimeError) as exc:
            logger.warning("Send failed: %s", exc)
            self._notify("did_receive_error", SendError(f"Send failed: {exc}"))
            return
        if self._drain_task is None or self._drain_task.done():
            self._drain_task = asyncio.create_task(
                self._drain(writer, self._generation), name="flightlink-drain"
            )

    async def _drain(self, writer: asyncio.StreamWriter, generation: int) -> None:
        try:
            await writer.drain()
        except (ConnectionError, OSError) as exc:
            if generation != self._generation:
                return
            logger.warning("Send failed: %s", exc)
            self._notify("did_receive_error", SendError(f"Send failed: {exc}"))


__all__ = ["ConnectionState", "StateClient", "VALUE_EVENTS"]
