from __future__ import annotations

from typing import List, Optional

from .codec import decode_string, encode_int32
from .constants import HEADER_SIZE
from .errors import FramingError
from .messages import Frame


def encode_frame(frame_id: int, payload: bytes) -> bytes:
    """Encode a frame as the remote sends it: id:int32 + size:int32 + payload."""
    return encode_int32(frame_id) + encode_int32(len(payload)) + bytes(payload)


def decode_manifest_payload(payload: bytes) -> str:
    """Extract the manifest text from the payload of an id -1 frame."""
    return decode_string(payload)


class FrameBuffer:
    """
    Reassemble frames from an ordered byte stream.

    Chunks may split a header, split a payload, or carry several frames at once.
    Nothing is consumed until a whole frame (header + payload) is buffered.
    """

    def __init__(self) -> None:
        self._buffer = bytearray()

    @property
    def pending(self) -> int:
        return len(self._buffer)

    def clear(self) -> None:
        self._buffer.clear()

    def append(self, data: bytes) -> None:
        if data:
            self._buffer.extend(data)

    def feed(self, data: bytes) -> List[Frame]:
        """Append ``data`` and return every frame that is now complete, in order."""
        self.append(data)
        frames: List[Frame] = []
        while True:
            frame = self.next_frame()
            if frame is None:
                return frames
            frames.append(frame)

    def next_frame(self) -> Optional[Frame]:
        """Pop the next complete frame, or return None until more bytes arrive."""
        buffer = self._buffer
        if len(buffer) < HEADER_SIZE:
            return None
        frame_id = int.from_bytes(buffer[0:4], "little", signed=True)
        size = int.from_bytes(buffer[4:8], "little", signed=True)
        if size < 0:
            raise FramingError(f"Negative payload size {size} for frame {frame_id}")
        end = HEADER_SIZE + size
        if len(buffer) < end:
            return None
        payload = bytes(buffer[HEADER_SIZE:end])
        del buffer[:end]
        return Frame(frame_id, payload)


__all__ = ["FrameBuffer", "encode_frame", "decode_manifest_payload"]
