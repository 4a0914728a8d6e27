import pytest

from flightlink.protocol import Frame, FrameBuffer, decode_manifest_payload, encode_frame
from flightlink.protocol.codec import encode_string
from flightlink.protocol.errors import DecodeError, FramingError

FRAMES = [
    Frame(1, b"\x01"),
    Frame(-1, encode_string("1,0,On\n2,1,Count\n")),
    Frame(7, b""),
    Frame(3, b"abcd"),
]
STREAM = b"".join(encode_frame(frame.id, frame.payload) for frame in FRAMES)


def test_encode_frame_header():
    assert encode_frame(5, b"xy") == b"\x05\x00\x00\x00\x02\x00\x00\x00xy"


def test_contiguous_stream_yields_all_frames():
    buffer = FrameBuffer()
    assert buffer.feed(STREAM) == FRAMES
    assert buffer.pending == 0


def test_one_byte_at_a_time_yields_same_frames():
    buffer = FrameBuffer()
    frames = []
    for index in range(len(STREAM)):
        frames.extend(buffer.feed(STREAM[index : index + 1]))
    assert frames == FRAMES
    assert buffer.pending == 0


def test_every_two_chunk_split_yields_same_frames():
    for split in range(len(STREAM) + 1):
        buffer = FrameBuffer()
        frames = buffer.feed(STREAM[:split]) + buffer.feed(STREAM[split:])
        assert frames == FRAMES, f"split at {split}"


def test_partial_header_is_kept():
    buffer = FrameBuffer()
    assert buffer.feed(STREAM[:5]) == []
    assert buffer.pending == 5
    assert buffer.feed(STREAM[5:9]) == [FRAMES[0]]
    assert buffer.pending == 0


def test_partial_payload_is_not_consumed():
    data = encode_frame(9, b"0123456789")
    buffer = FrameBuffer()
    assert buffer.feed(data[:12]) == []
    assert buffer.pending == 12
    assert buffer.feed(data[12:]) == [Frame(9, b"0123456789")]


def test_frame_tail_and_next_head_in_one_chunk():
    first = encode_frame(1, b"aaaa")
    second = encode_frame(2, b"bb")
    buffer = FrameBuffer()
    assert buffer.feed(first[:10]) == []
    assert buffer.feed(first[10:] + second[:3]) == [Frame(1, b"aaaa")]
    assert buffer.feed(second[3:]) == [Frame(2, b"bb")]


def test_empty_chunks_are_harmless():
    buffer = FrameBuffer()
    assert buffer.feed(b"") == []
    assert buffer.feed(STREAM) == FRAMES


def test_negative_size_raises():
    buffer = FrameBuffer()
    with pytest.raises(FramingError):
        buffer.feed(b"\x01\x00\x00\x00\xff\xff\xff\xff")


def test_clear_drops_partial_data():
    buffer = FrameBuffer()
    buffer.feed(STREAM[:6])
    buffer.clear()
    assert buffer.pending == 0
    assert buffer.feed(STREAM) == FRAMES


def test_manifest_payload():
    assert decode_manifest_payload(FRAMES[1].payload) == "1,0,On\n2,1,Count\n"
    with pytest.raises(DecodeError):
        decode_manifest_payload(b"\x10\x00\x00\x00short")
