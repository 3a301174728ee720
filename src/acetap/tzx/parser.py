"""
TZX Parser
==========

This module reads back TZX files made of the two block types the
converter writes: turbo data blocks (ID 0x11) and pulse sequences
(ID 0x13). It is an inspection tool; it does not turn TZX files back
into TAP files.

Usage Examples
--------------
Listing the blocks of a converted file:
    >>> parser = TzxParser.from_file("game.tap.tzx")
    >>> for block in parser.blocks:
    ...     print(block.role, len(block.payload))

Summary information:
    >>> info = parser.get_info()
    >>> print(info["version"], info["block_count"])
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Optional, Union
import logging

from acetap.errors import TzxError, TzxFormatError
from acetap.tzx.records import (
    BlockId,
    BlockRole,
    EndMarkRecord,
    TurboDataRecord,
    TzxHeader,
)

# Logger for this module
logger = logging.getLogger(__name__)


# =============================================================================
# Parsed Block
# =============================================================================

@dataclass
class TurboDataBlock:
    """
    One turbo data block together with its data and trailing end mark.

    Attributes:
        record: The 19-byte parameter block
        flag: First byte of the block data
        payload: Remaining block data
        end_mark: The pulse sequence that followed, if any
        offset: File offset of the record
    """
    record: TurboDataRecord
    flag: int
    payload: bytes = field(repr=False)
    end_mark: Optional[EndMarkRecord] = None
    offset: int = 0

    @property
    def role(self) -> Optional[BlockRole]:
        """The ACE block role, or None for a foreign flag byte."""
        try:
            return BlockRole.from_flag(self.flag)
        except ValueError:
            return None


# =============================================================================
# TZX Parser
# =============================================================================

@dataclass
class TzxParser:
    """
    Parser for converter-produced TZX files.

    Attributes:
        data: The raw TZX file bytes
        header: The parsed TZX header
        blocks: Turbo data blocks in file order
        is_valid: True once parsing succeeded
        error_message: Reason parsing failed, if it did
    """
    # Raw TZX file data (private, not exposed in repr)
    data: bytes = field(repr=False)

    header: Optional[TzxHeader] = None

    blocks: list[TurboDataBlock] = field(default_factory=list)

    is_valid: bool = False

    error_message: Optional[str] = None

    def __post_init__(self) -> None:
        """Parse the file data after initialization."""
        self._parse()

    @classmethod
    def from_file(cls, filepath: Union[str, Path]) -> "TzxParser":
        """
        Create a TzxParser from a file path.

        Raises:
            FileNotFoundError: If the file doesn't exist
            TzxFormatError: If the file cannot be parsed
        """
        return cls(data=Path(filepath).read_bytes())

    @classmethod
    def from_bytes(cls, data: bytes) -> "TzxParser":
        """Create a TzxParser from raw bytes."""
        return cls(data=bytes(data))

    def _parse(self) -> None:
        try:
            self._parse_header()
            self._parse_blocks()
            self.is_valid = True
        except TzxError as e:
            self.is_valid = False
            self.error_message = str(e)
            logger.error(f"Failed to parse TZX: {e}")
            raise
        except ValueError as e:
            self.is_valid = False
            self.error_message = str(e)
            logger.error(f"Failed to parse TZX: {e}")
            raise TzxFormatError(f"Failed to parse TZX: {e}") from e

    def _parse_header(self) -> None:
        self.header = TzxHeader.from_bytes(self.data)
        logger.debug(f"TZX version {self.header.version}")

    def _parse_blocks(self) -> None:
        self.blocks.clear()
        data = self.data
        offset = TzxHeader.HEADER_SIZE

        while offset < len(data):
            block_id = data[offset]

            if block_id == BlockId.TURBO_DATA:
                offset = self._parse_turbo_block(offset)
            elif block_id == BlockId.PULSE_SEQUENCE:
                end_mark = EndMarkRecord.from_bytes(data[offset:])
                if self.blocks and self.blocks[-1].end_mark is None:
                    self.blocks[-1].end_mark = end_mark
                else:
                    logger.debug(f"Pulse sequence without a data block at offset {offset}")
                offset += end_mark.get_size()
            else:
                raise TzxFormatError(
                    f"Unsupported block {BlockId.get_name(block_id)} at offset {offset}"
                )

    def _parse_turbo_block(self, offset: int) -> int:
        """Parse a turbo data block at offset; return the offset after it."""
        data = self.data
        record = TurboDataRecord.from_bytes(data[offset:offset + TurboDataRecord.SIZE])
        start = offset + TurboDataRecord.SIZE
        end = start + record.data_length

        if end > len(data):
            raise TzxFormatError(
                f"Truncated turbo data block at offset {offset}: "
                f"declared {record.data_length} bytes, {len(data) - start} available"
            )
        if record.data_length == 0:
            raise TzxFormatError(f"Turbo data block without a flag byte at offset {offset}")

        block = TurboDataBlock(
            record=record,
            flag=data[start],
            payload=data[start + 1:end],
            offset=offset,
        )
        self.blocks.append(block)
        logger.debug(
            f"Parsed turbo data block at offset {offset}: flag 0x{block.flag:02X}, "
            f"{len(block.payload)} bytes"
        )
        return end

    # =========================================================================
    # Queries
    # =========================================================================

    def iter_blocks(self, role: Optional[BlockRole] = None) -> Iterator[TurboDataBlock]:
        """
        Iterate over blocks, optionally only those with a given role.
        """
        for block in self.blocks:
            if role is None or block.role is role:
                yield block

    def get_payloads(self) -> list[bytes]:
        """Return the block payloads in tape order."""
        return [block.payload for block in self.blocks]

    def get_info(self) -> dict:
        """
        Get summary information about the file.

        Returns:
            Dictionary with version, block counts and payload size
        """
        if self.header is None:
            return {"error": self.error_message or "TZX not parsed"}

        return {
            "version": self.header.version,
            "block_count": len(self.blocks),
            "header_blocks": sum(1 for _ in self.iter_blocks(BlockRole.HEADER)),
            "data_blocks": sum(1 for _ in self.iter_blocks(BlockRole.DATA)),
            "payload_bytes": sum(len(block.payload) for block in self.blocks),
            "file_size": len(self.data),
        }


# =============================================================================
# Convenience Functions
# =============================================================================

def parse_tzx(data: bytes) -> TzxParser:
    """
    Parse a TZX file from bytes.

    Raises:
        TzxFormatError: If the data is not a converter-style TZX file
    """
    return TzxParser.from_bytes(data)


def parse_tzx_file(filepath: Union[str, Path]) -> TzxParser:
    """
    Parse a TZX file from disk.

    Raises:
        FileNotFoundError: If the file doesn't exist
        TzxFormatError: If the file is not a converter-style TZX file
    """
    return TzxParser.from_file(filepath)
