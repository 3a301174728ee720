"""
TAP Block Reader
================

This module reads blocks from Jupiter ACE TAP tape images.

TAP Format
----------
A TAP file is a plain concatenation of blocks, each one:

    Offset  Size    Description
    ------  ----    -----------
    0       2       Block length n (little-endian)
    2       n       Block bytes

There is no file header, no timing information and no marker telling
header blocks apart from data blocks.

End of Tape
-----------
The tape ends when fewer than 2 bytes remain for a length prefix, or when
fewer than n bytes remain for the block itself. By default a truncated
final block is treated exactly like a clean end of tape; pass
``strict=True`` to get a TruncatedBlockError instead.

Usage Examples
--------------
Reading blocks with a reusable buffer:
    >>> with open("game.tap", "rb") as f:
    ...     reader = TapReader(f)
    ...     while (block := reader.read_block()) is not None:
    ...         print(len(block))

Reading an in-memory image:
    >>> blocks = read_tap_blocks(Path("game.tap").read_bytes())
"""

from io import BytesIO
from typing import BinaryIO, Iterator, Optional
import logging

from acetap.errors import TruncatedBlockError

# Logger for this module
logger = logging.getLogger(__name__)

# Block length prefix size in bytes
LENGTH_PREFIX_SIZE = 2

# Holds the longest block a 16-bit prefix can describe
DEFAULT_BUFFER_SIZE = 0x10000


# =============================================================================
# Tap Reader
# =============================================================================

class TapReader:
    """
    Reads successive length-prefixed blocks from a TAP byte stream.

    The reader fills a single buffer that is reused for every block. The
    memoryview returned by read_block() therefore stays valid only until
    the next call; copy it (or use iter_blocks()) to keep it.

    Attributes:
        stream: Binary stream supporting readinto()
        strict: Raise TruncatedBlockError instead of stopping quietly
        blocks_read: Number of complete blocks returned so far
        truncated: True once the reader stopped on a truncated block
    """

    def __init__(
        self,
        stream: BinaryIO,
        buffer: Optional[bytearray] = None,
        strict: bool = False,
    ):
        if buffer is None:
            buffer = bytearray(DEFAULT_BUFFER_SIZE)
        if len(buffer) < DEFAULT_BUFFER_SIZE:
            raise ValueError(
                f"Block buffer too small: {len(buffer)} bytes, "
                f"need {DEFAULT_BUFFER_SIZE}"
            )
        self.stream = stream
        self.strict = strict
        self.blocks_read = 0
        self.truncated = False
        self._buffer = buffer
        self._view = memoryview(buffer)
        self._offset = 0

    def read_block(self) -> Optional[memoryview]:
        """
        Read the next block.

        Returns:
            A view of the block bytes (valid until the next read), or None
            at the end of the tape

        Raises:
            TruncatedBlockError: In strict mode, if the tape ends inside
                a length prefix or inside a block
        """
        block_offset = self._offset

        got = self._read_exact(self._view[:LENGTH_PREFIX_SIZE])
        if got < LENGTH_PREFIX_SIZE:
            if got:
                self._stop_truncated(None, got, block_offset)
            else:
                logger.debug(f"End of tape after {self.blocks_read} blocks")
            return None

        length = self._buffer[0] | (self._buffer[1] << 8)

        block = self._view[:length]
        got = self._read_exact(block)
        if got < length:
            self._stop_truncated(length, got, block_offset)
            return None

        self.blocks_read += 1
        logger.debug(f"Read block {self.blocks_read}: {length} bytes at offset {block_offset}")
        return block

    def iter_blocks(self) -> Iterator[bytes]:
        """
        Iterate over the remaining blocks.

        Yields:
            An independent copy of each block's bytes
        """
        while True:
            block = self.read_block()
            if block is None:
                return
            yield bytes(block)

    def _read_exact(self, target: memoryview) -> int:
        """Fill target from the stream; return the number of bytes read."""
        total = 0
        size = len(target)
        while total < size:
            count = self.stream.readinto(target[total:])
            if not count:
                break
            total += count
        self._offset += total
        return total

    def _stop_truncated(self, declared: Optional[int], available: int, offset: int) -> None:
        """Handle a block cut short by the end of the stream."""
        if self.strict:
            raise TruncatedBlockError(declared, available, offset)
        self.truncated = True
        if declared is None:
            logger.debug(f"Ignoring {available} trailing byte(s) at offset {offset}")
        else:
            logger.debug(
                f"Truncated block at offset {offset} "
                f"(declared {declared}, got {available}); treating as end of tape"
            )


# =============================================================================
# Convenience Functions
# =============================================================================

def read_tap_block(
    stream: BinaryIO,
    buffer: Optional[bytearray] = None,
    strict: bool = False,
) -> Optional[bytes]:
    """
    Read a single block from a TAP stream.

    Args:
        stream: Binary stream positioned at a length prefix
        buffer: Optional scratch buffer (at least 65536 bytes)
        strict: Raise on truncation instead of returning None

    Returns:
        The block bytes, or None at the end of the tape
    """
    block = TapReader(stream, buffer=buffer, strict=strict).read_block()
    if block is None:
        return None
    return bytes(block)


def read_tap_blocks(data: bytes, strict: bool = False) -> list[bytes]:
    """
    Split an in-memory TAP image into its blocks.

    Example:
        >>> read_tap_blocks(b"\\x02\\x00\\xaa\\xbb")
        [b'\\xaa\\xbb']
    """
    return list(TapReader(BytesIO(data), strict=strict).iter_blocks())
