"""
TZX Emitter
===========

This module writes TZX tape images, one TAP block at a time.

Every TAP block becomes:

    [Turbo Data record, 19 bytes]  ID 0x11, ACE pulse timings
    [flag byte]                    0x00 for headers, 0xFF for data
    [payload]                      the TAP block, verbatim
    [End mark, 6 bytes]            ID 0x13, two pulses

The emitter holds no state between blocks: the caller decides the role
of each block and passes it in.

Usage
-----
    >>> emitter = TzxEmitter()
    >>> with open("game.tzx", "wb") as out:
    ...     emitter.write_header(out)
    ...     emitter.write_block(out, BlockRole.HEADER, header_bytes)
    ...     emitter.write_block(out, BlockRole.DATA, data_bytes)
"""

from typing import BinaryIO, Union
import logging

from acetap.tzx.records import (
    ACE_TIMINGS,
    EndMarkRecord,
    MAX_BLOCK_SIZE,
    BlockRole,
    TurboDataRecord,
    TzxHeader,
)

# Logger for this module
logger = logging.getLogger(__name__)

BytesLike = Union[bytes, bytearray, memoryview]


class TzxEmitter:
    """
    Encodes TAP blocks as TZX records and writes them to a sink.

    The timing table and end mark are fixed to the Jupiter ACE ROM
    values; they are not configurable.
    """

    def __init__(self) -> None:
        self.timings = ACE_TIMINGS
        self._header = TzxHeader().to_bytes()
        self._end_mark = EndMarkRecord(
            pulses=(self.timings.end_mark1, self.timings.end_mark2)
        ).to_bytes()

    def write_header(self, sink: BinaryIO) -> int:
        """
        Write the 10-byte TZX header.

        Must be called exactly once, before any block.

        Returns:
            Number of bytes written
        """
        sink.write(self._header)
        return len(self._header)

    def write_block(self, sink: BinaryIO, role: BlockRole, block: BytesLike) -> int:
        """
        Write one TAP block as a turbo data record plus end mark.

        Args:
            sink: Binary output stream
            role: Whether this is a header or a data block
            block: The TAP block payload (0-65535 bytes)

        Returns:
            Number of bytes written
        """
        data = self.encode_block(role, block)
        sink.write(data)

        written = len(data)
        logger.debug(
            f"Wrote {role.name.lower()} block: flag 0x{role.flag_byte:02X}, "
            f"{len(block)} payload bytes, {written} bytes total"
        )
        return written

    def encode_block(self, role: BlockRole, block: BytesLike) -> bytes:
        """Encode one TAP block as turbo data record, flag, payload and end mark."""
        length = len(block)
        if length > MAX_BLOCK_SIZE:
            raise ValueError(f"Block too large: {length} bytes (max {MAX_BLOCK_SIZE})")
        return (
            TurboDataRecord.for_block(role, length, self.timings).to_bytes()
            + bytes([role.flag_byte])
            + bytes(block)
            + self._end_mark
        )

    def encode_header(self) -> bytes:
        """Return the 10-byte TZX header."""
        return self._header
