"""
ACE TAP Converter Error Hierarchy
=================================

This module defines the exception hierarchy for the whole package.
All exceptions inherit from AceTapError, allowing callers to catch every
converter-related error with a single except clause if desired.

Exception Hierarchy
-------------------
AceTapError (base)
├── TapError (TAP input handling)
│   └── TruncatedBlockError - block shorter than its length prefix (strict mode)
├── TzxError (TZX output handling)
│   └── TzxFormatError - invalid or unsupported TZX data
└── ConversionError (file-level conversion)
    ├── InputOpenError - input file cannot be opened
    ├── OutputCreateError - output file cannot be created
    └── ResourceExhaustedError - block buffer cannot be allocated

Design Philosophy
-----------------
Reading a truncated TAP block is normally not an error at all: the
converter treats it as the end of the tape. TruncatedBlockError only
appears when the caller asks for strict reading.

Failures writing to an already open output sink are not wrapped; they
surface as the OSError raised by the sink.
"""

from pathlib import Path
from typing import Optional, Union


# =============================================================================
# Base Exception Class
# =============================================================================

class AceTapError(Exception):
    """
    Base exception for all converter errors.

        try:
            convert_file("game.tap")
        except AceTapError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# TAP Exceptions
# =============================================================================

class TapError(AceTapError):
    """Base exception for TAP input errors."""
    pass


class TruncatedBlockError(TapError):
    """
    A TAP block ends before its declared length.

    Only raised in strict mode. In the default lenient mode a truncated
    block marks the end of the tape.

    Attributes:
        declared: Length announced by the block's 2-byte prefix
            (None when the prefix itself was cut short)
        available: Number of bytes actually present
        offset: Stream offset of the block's length prefix
    """

    def __init__(
        self,
        declared: Optional[int],
        available: int,
        offset: Optional[int] = None,
    ):
        self.declared = declared
        self.available = available
        self.offset = offset

        if declared is None:
            message = f"truncated block length prefix ({available} of 2 bytes)"
        else:
            message = (
                f"truncated block: declared {declared} bytes, "
                f"only {available} available"
            )
        if offset is not None:
            message += f" at offset {offset}"
        super().__init__(message)


# =============================================================================
# TZX Exceptions
# =============================================================================

class TzxError(AceTapError):
    """Base exception for TZX handling errors."""
    pass


class TzxFormatError(TzxError):
    """
    Invalid TZX data.

    Raised when reading a TZX file that:
    - Is missing the "ZXTape!" signature or the 0x1A marker
    - Contains a block type other than 0x11 (turbo data) or 0x13 (end mark)
    - Ends in the middle of a block
    """
    pass


# =============================================================================
# Conversion Exceptions
# =============================================================================

class ConversionError(AceTapError):
    """Base exception for file-level conversion errors."""
    pass


class InputOpenError(ConversionError):
    """The input TAP file cannot be opened."""

    def __init__(self, path: Union[str, Path], reason: str = ""):
        self.path = Path(path)
        self.reason = reason
        message = f"cannot open '{path}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class OutputCreateError(ConversionError):
    """The output TZX file cannot be created."""

    def __init__(self, path: Union[str, Path], reason: str = ""):
        self.path = Path(path)
        self.reason = reason
        message = f"cannot create '{path}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class ResourceExhaustedError(ConversionError):
    """
    The working block buffer cannot be allocated.

    The converter allocates a single fixed-size buffer per run; running
    out of memory at that point aborts the conversion.
    """

    def __init__(self, size: int):
        self.size = size
        super().__init__(f"out of memory allocating a {size}-byte block buffer")
