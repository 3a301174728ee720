"""
TAP Reader Unit Tests
=====================

Tests for reading length-prefixed blocks from TAP streams.

Test Categories
---------------
1. Block reading: prefixes, payloads, empty blocks, large blocks
2. End of tape: clean end, dangling bytes, truncated blocks
3. Strict mode: truncation reported as TruncatedBlockError
4. Helpers: iter_blocks, read_tap_block, read_tap_blocks
"""

import pytest
from io import BytesIO
import struct

from acetap.tap import (
    DEFAULT_BUFFER_SIZE,
    TapReader,
    read_tap_block,
    read_tap_blocks,
)
from acetap.errors import TapError, TruncatedBlockError


# =============================================================================
# Test Fixtures
# =============================================================================

def make_tap(*blocks: bytes) -> bytes:
    """Build a TAP image from block payloads."""
    result = bytearray()
    for block in blocks:
        result.extend(struct.pack("<H", len(block)))
        result.extend(block)
    return bytes(result)


class TrickleStream(BytesIO):
    """A stream that hands out at most one byte per readinto() call."""

    def readinto(self, buffer) -> int:
        view = memoryview(buffer)
        if len(view) == 0:
            return 0
        return super().readinto(view[:1])


@pytest.fixture
def ace_header_block() -> bytes:
    """A 25-byte ACE dictionary header (type byte, name, lengths)."""
    return bytes([0x00]) + b"hello     " + bytes(14)


# =============================================================================
# Block Reading Tests
# =============================================================================

class TestReadBlock:
    """Tests for TapReader.read_block()."""

    def test_single_block(self):
        """Test reading one block with a little-endian prefix."""
        reader = TapReader(BytesIO(b"\x02\x00\xaa\xbb"))
        block = reader.read_block()

        assert block is not None
        assert bytes(block) == b"\xaa\xbb"
        assert reader.blocks_read == 1

    def test_length_is_little_endian(self):
        """Test that the low byte of the prefix comes first."""
        payload = bytes(range(256)) * 2 + b"\x01"  # 513 bytes = 0x0201
        reader = TapReader(BytesIO(b"\x01\x02" + payload))
        block = reader.read_block()

        assert block is not None
        assert len(block) == 0x0201

    def test_multiple_blocks_in_order(self, ace_header_block: bytes):
        """Test that blocks come back in stream order."""
        data = make_tap(ace_header_block, b"\x01\x02\x03")
        reader = TapReader(BytesIO(data))

        first = reader.read_block()
        assert first is not None
        assert bytes(first) == ace_header_block

        second = reader.read_block()
        assert second is not None
        assert bytes(second) == b"\x01\x02\x03"

        assert reader.read_block() is None

    def test_empty_block_is_not_end_of_tape(self):
        """Test that a zero-length block is returned as an empty block."""
        reader = TapReader(BytesIO(make_tap(b"", b"\x55")))

        block = reader.read_block()
        assert block is not None
        assert len(block) == 0

        block = reader.read_block()
        assert block is not None
        assert bytes(block) == b"\x55"

    def test_largest_block(self):
        """Test a block using the full 16-bit length."""
        payload = bytes([0x5A]) * 0xFFFF
        reader = TapReader(BytesIO(make_tap(payload)))
        block = reader.read_block()

        assert block is not None
        assert len(block) == 0xFFFF
        assert bytes(block) == payload

    def test_short_reads_are_completed(self):
        """Test that a stream returning one byte at a time is handled."""
        reader = TapReader(TrickleStream(make_tap(b"\x10\x20\x30")))
        block = reader.read_block()

        assert block is not None
        assert bytes(block) == b"\x10\x20\x30"

    def test_buffer_is_reused(self):
        """Test that blocks are read into the caller's buffer."""
        buffer = bytearray(DEFAULT_BUFFER_SIZE)
        reader = TapReader(BytesIO(make_tap(b"\xde\xad")), buffer=buffer)
        reader.read_block()

        assert buffer[:2] == b"\xde\xad"

    def test_buffer_too_small(self):
        """Test rejection of a buffer that cannot hold the largest block."""
        with pytest.raises(ValueError):
            TapReader(BytesIO(b""), buffer=bytearray(100))


# =============================================================================
# End of Tape Tests
# =============================================================================

class TestEndOfTape:
    """Tests for end-of-stream handling in lenient mode."""

    def test_empty_stream(self):
        """Test that an empty stream has no blocks."""
        reader = TapReader(BytesIO(b""))
        assert reader.read_block() is None
        assert not reader.truncated

    def test_single_dangling_byte(self):
        """Test that one byte is not enough for a length prefix."""
        reader = TapReader(BytesIO(make_tap(b"\x01") + b"\x07"))

        assert reader.read_block() is not None
        assert reader.read_block() is None
        assert reader.truncated

    def test_truncated_block_ends_tape(self):
        """Test that a block shorter than its prefix ends the tape quietly."""
        reader = TapReader(BytesIO(b"\x05\x00\x01\x02"))

        assert reader.read_block() is None
        assert reader.truncated
        assert reader.blocks_read == 0

    def test_truncated_after_good_blocks(self):
        """Test that complete blocks before a truncated one are kept."""
        data = make_tap(b"\x01", b"\x02\x03") + b"\x10\x00\xff"
        assert read_tap_blocks(data) == [b"\x01", b"\x02\x03"]


# =============================================================================
# Strict Mode Tests
# =============================================================================

class TestStrictMode:
    """Tests for strict truncation handling."""

    def test_truncated_block_raises(self):
        """Test that strict mode reports the declared and available sizes."""
        reader = TapReader(BytesIO(b"\x05\x00\x01\x02"), strict=True)

        with pytest.raises(TruncatedBlockError) as exc_info:
            reader.read_block()

        assert exc_info.value.declared == 5
        assert exc_info.value.available == 2
        assert exc_info.value.offset == 0

    def test_truncated_prefix_raises(self):
        """Test that a lone trailing byte is an error in strict mode."""
        reader = TapReader(BytesIO(make_tap(b"\x01") + b"\x07"), strict=True)
        reader.read_block()

        with pytest.raises(TruncatedBlockError) as exc_info:
            reader.read_block()

        assert exc_info.value.declared is None
        assert exc_info.value.available == 1
        assert exc_info.value.offset == 3

    def test_clean_end_does_not_raise(self):
        """Test that strict mode accepts a well-formed tape."""
        assert read_tap_blocks(make_tap(b"\x01", b""), strict=True) == [b"\x01", b""]

    def test_error_hierarchy(self):
        """Test that TruncatedBlockError is a TapError."""
        with pytest.raises(TapError):
            read_tap_blocks(b"\x03\x00\x00", strict=True)


# =============================================================================
# Helper Function Tests
# =============================================================================

class TestHelpers:
    """Tests for the convenience functions."""

    def test_iter_blocks_returns_copies(self):
        """Test that iterated blocks survive later reads."""
        reader = TapReader(BytesIO(make_tap(b"\xaa\xaa", b"\xbb\xbb")))
        blocks = list(reader.iter_blocks())

        assert blocks == [b"\xaa\xaa", b"\xbb\xbb"]
        assert all(isinstance(block, bytes) for block in blocks)

    def test_read_tap_block(self):
        """Test reading a single block from a stream."""
        stream = BytesIO(make_tap(b"\x01\x02", b"\x03"))

        assert read_tap_block(stream) == b"\x01\x02"
        assert read_tap_block(stream) == b"\x03"
        assert read_tap_block(stream) is None

    def test_read_tap_blocks_empty(self):
        """Test splitting an empty image."""
        assert read_tap_blocks(b"") == []
