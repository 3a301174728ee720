"""
acetap - Jupiter ACE TAP to TZX Converter
=========================================

This package converts TAP tape images for the Jupiter ACE into TZX tape
images that emulators can play back with the ACE's own pulse timings.

The Jupiter ACE loads from tape at its own speed, with a 3.25 MHz Z80
and ROM routines unlike the ZX Spectrum's. A TAP file keeps only the
bytes of each block; the TZX written here adds a turbo data block per
TAP block, carrying the ACE pilot, sync and bit timings, followed by the
ACE's two-pulse end mark.

Main Components
---------------
- **tap**: TAP reading
    Splits a TAP stream into its length-prefixed blocks

- **tzx**: TZX writing and inspection
    Header, turbo data records, end marks and a read-back parser

- **converter**: The conversion driver
    File and stream level conversion with strict or lenient reading

Quick Start
-----------
Convert a file:
    >>> from acetap import convert_file
    >>> result = convert_file("game.tap")        # writes game.tap.tzx

Inspect the output:
    >>> from acetap import TzxParser
    >>> parser = TzxParser.from_file("game.tap.tzx")
    >>> for block in parser.blocks:
    ...     print(block.role, len(block.payload))

Or use the command-line tools:
    $ acetap2tzx game.tap
    $ acetzxls game.tap.tzx

Reference Documentation
-----------------------
- TZX format: https://worldofspectrum.net/TZXformat.html
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from acetap.errors import (
    AceTapError,
    TapError,
    TruncatedBlockError,
    TzxError,
    TzxFormatError,
    ConversionError,
    InputOpenError,
    OutputCreateError,
    ResourceExhaustedError,
)

from acetap.tap import TapReader, read_tap_block, read_tap_blocks

from acetap.tzx import (
    ACE_TIMINGS,
    BlockRole,
    TimingTable,
    TurboDataRecord,
    EndMarkRecord,
    TzxHeader,
    TzxEmitter,
    TzxParser,
)

from acetap.converter import (
    ConversionConfig,
    ConversionResult,
    convert_bytes,
    convert_file,
    convert_stream,
    derive_output_path,
)

__all__ = [
    # Version info
    "__version__",
    # Exception hierarchy
    "AceTapError",
    "TapError",
    "TruncatedBlockError",
    "TzxError",
    "TzxFormatError",
    "ConversionError",
    "InputOpenError",
    "OutputCreateError",
    "ResourceExhaustedError",
    # TAP
    "TapReader",
    "read_tap_block",
    "read_tap_blocks",
    # TZX
    "ACE_TIMINGS",
    "BlockRole",
    "TimingTable",
    "TurboDataRecord",
    "EndMarkRecord",
    "TzxHeader",
    "TzxEmitter",
    "TzxParser",
    # Conversion
    "ConversionConfig",
    "ConversionResult",
    "convert_bytes",
    "convert_file",
    "convert_stream",
    "derive_output_path",
]
