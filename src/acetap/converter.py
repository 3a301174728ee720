"""
TAP to TZX Conversion
=====================

This module drives the conversion: it writes the TZX header, then reads
TAP blocks one by one and hands each to the emitter, alternating the
block role between header and data.

Conversion States
-----------------
    RUNNING  - header written, blocks being copied
    DONE     - the TAP stream is exhausted

The first block is always taken to be a header block. TAP does not say
which blocks are headers, so the role simply alternates from there.

Usage Examples
--------------
Converting a file (writes game.tap.tzx):
    >>> result = convert_file("game.tap")
    >>> print(result.blocks_written)

Converting in memory:
    >>> tzx = convert_bytes(Path("game.tap").read_bytes())

Strict reading:
    >>> convert_file("damaged.tap", config=ConversionConfig(strict=True))
"""

from dataclasses import dataclass
from enum import Enum
from io import BytesIO
from pathlib import Path
from typing import BinaryIO, Optional, Union
import logging

from acetap.errors import InputOpenError, OutputCreateError, ResourceExhaustedError
from acetap.tap.reader import DEFAULT_BUFFER_SIZE, TapReader
from acetap.tzx.emitter import TzxEmitter
from acetap.tzx.records import BlockRole

# Logger for this module
logger = logging.getLogger(__name__)

# Appended to the full input file name to name the output
DEFAULT_OUTPUT_SUFFIX = ".tzx"


# =============================================================================
# Configuration and Results
# =============================================================================

@dataclass
class ConversionConfig:
    """
    Options for one conversion run.

    Attributes:
        strict: Fail on a truncated TAP block instead of stopping there
        output_suffix: Suffix appended to the input path for the output
        buffer_size: Size of the block buffer allocated once per run
    """
    strict: bool = False
    output_suffix: str = DEFAULT_OUTPUT_SUFFIX
    buffer_size: int = DEFAULT_BUFFER_SIZE


@dataclass
class ConversionResult:
    """
    Outcome of a conversion run.

    Attributes:
        blocks_written: Number of TAP blocks converted
        header_blocks: Blocks written with the header role
        data_blocks: Blocks written with the data role
        bytes_written: Size of the TZX output
        truncated: True if the TAP stream ended inside a block
        output_path: Where the TZX was written (file conversions only)
    """
    blocks_written: int = 0
    header_blocks: int = 0
    data_blocks: int = 0
    bytes_written: int = 0
    truncated: bool = False
    output_path: Optional[Path] = None


class ConversionState(Enum):
    RUNNING = "running"
    DONE = "done"


# =============================================================================
# Conversion
# =============================================================================

def allocate_block_buffer(size: int = DEFAULT_BUFFER_SIZE) -> bytearray:
    """
    Allocate the reusable block buffer.

    Raises:
        ResourceExhaustedError: If the buffer cannot be allocated
    """
    try:
        return bytearray(size)
    except MemoryError:
        raise ResourceExhaustedError(size) from None


def convert_stream(
    source: BinaryIO,
    sink: BinaryIO,
    config: Optional[ConversionConfig] = None,
) -> ConversionResult:
    """
    Convert a TAP byte stream into a TZX byte stream.

    Args:
        source: Readable binary stream positioned at the first TAP block
        sink: Writable binary stream for the TZX output
        config: Conversion options (defaults to lenient reading)

    Returns:
        A ConversionResult describing what was written

    Raises:
        TruncatedBlockError: In strict mode, on a truncated block
        ResourceExhaustedError: If the block buffer cannot be allocated
    """
    config = config or ConversionConfig()
    buffer = allocate_block_buffer(config.buffer_size)
    reader = TapReader(source, buffer=buffer, strict=config.strict)
    emitter = TzxEmitter()
    result = ConversionResult()

    result.bytes_written += emitter.write_header(sink)
    role = BlockRole.HEADER
    state = ConversionState.RUNNING

    while state is ConversionState.RUNNING:
        block = reader.read_block()
        if block is None:
            state = ConversionState.DONE
            continue

        result.bytes_written += emitter.write_block(sink, role, block)
        result.blocks_written += 1
        if role is BlockRole.HEADER:
            result.header_blocks += 1
        else:
            result.data_blocks += 1
        role = role.toggled()

    result.truncated = reader.truncated
    logger.info(
        f"Converted {result.blocks_written} blocks "
        f"({result.header_blocks} header, {result.data_blocks} data), "
        f"{result.bytes_written} bytes written"
    )
    return result


def convert_bytes(data: bytes, config: Optional[ConversionConfig] = None) -> bytes:
    """
    Convert an in-memory TAP image to TZX bytes.

    Example:
        >>> tzx = convert_bytes(b"\\x02\\x00\\xaa\\xbb")
        >>> tzx[:7]
        b'ZXTape!'
    """
    sink = BytesIO()
    convert_stream(BytesIO(data), sink, config)
    return sink.getvalue()


def derive_output_path(
    input_path: Union[str, Path],
    suffix: str = DEFAULT_OUTPUT_SUFFIX,
) -> Path:
    """
    Name the output after the input by appending a suffix.

    The suffix is appended to the whole name, so "game.tap" becomes
    "game.tap.tzx".
    """
    input_path = Path(input_path)
    return input_path.with_name(input_path.name + suffix)


def convert_file(
    input_path: Union[str, Path],
    output_path: Optional[Union[str, Path]] = None,
    config: Optional[ConversionConfig] = None,
) -> ConversionResult:
    """
    Convert a TAP file to a TZX file.

    Both files are closed on every exit path. If the conversion fails
    part way through, the partial output is left on disk.

    Args:
        input_path: The TAP file to read
        output_path: The TZX file to write (default: input + ".tzx")
        config: Conversion options

    Returns:
        A ConversionResult with output_path set

    Raises:
        InputOpenError: If the input file cannot be opened
        OutputCreateError: If the output file cannot be created
        TruncatedBlockError: In strict mode, on a truncated block
        ResourceExhaustedError: If the block buffer cannot be allocated
    """
    config = config or ConversionConfig()
    input_path = Path(input_path)
    if output_path is None:
        output_path = derive_output_path(input_path, config.output_suffix)
    output_path = Path(output_path)

    try:
        source = open(input_path, "rb")
    except OSError as e:
        raise InputOpenError(input_path, e.strerror or str(e)) from e

    with source:
        try:
            sink = open(output_path, "wb")
        except OSError as e:
            raise OutputCreateError(output_path, e.strerror or str(e)) from e

        with sink:
            logger.debug(f"Converting {input_path} -> {output_path}")
            result = convert_stream(source, sink, config)

    result.output_path = output_path
    return result
