"""
TZX File Handling
=================

Writing (and reading back) TZX tape images for the Jupiter ACE.

This module provides:
- **TzxEmitter**: Write the TZX header and one record per TAP block
- **TzxParser**: Decode converter output for inspection
- **Records**: TZX header, turbo data record, end mark, block role and
  the ACE timing table

Quick Start
-----------
    >>> from acetap.tzx import TzxEmitter, BlockRole
    >>> emitter = TzxEmitter()
    >>> data = emitter.encode_header() + emitter.encode_block(BlockRole.HEADER, b"\\xaa")

Reference
---------
- TZX format: https://worldofspectrum.net/TZXformat.html
"""

# =============================================================================
# Public API Exports
# =============================================================================

from acetap.tzx.records import (
    # Constants
    ACE_CLOCK_HZ,
    DATA_PILOT_PULSES,
    HEADER_PILOT_PULSES,
    MAX_BLOCK_SIZE,
    TZX_CLOCK_HZ,
    TZX_MAJOR_VERSION,
    TZX_MINOR_VERSION,
    TZX_SIGNATURE,
    # Enums
    BlockId,
    BlockRole,
    # Data structures
    ACE_TIMINGS,
    EndMarkRecord,
    TimingTable,
    TurboDataRecord,
    TzxHeader,
)

from acetap.tzx.emitter import TzxEmitter

from acetap.tzx.parser import (
    TurboDataBlock,
    TzxParser,
    parse_tzx,
    parse_tzx_file,
)

__all__ = [
    # Constants
    "ACE_CLOCK_HZ",
    "DATA_PILOT_PULSES",
    "HEADER_PILOT_PULSES",
    "MAX_BLOCK_SIZE",
    "TZX_CLOCK_HZ",
    "TZX_MAJOR_VERSION",
    "TZX_MINOR_VERSION",
    "TZX_SIGNATURE",
    # Enums
    "BlockId",
    "BlockRole",
    # Data structures
    "ACE_TIMINGS",
    "EndMarkRecord",
    "TimingTable",
    "TurboDataRecord",
    "TzxHeader",
    # Emitter
    "TzxEmitter",
    # Parser
    "TurboDataBlock",
    "TzxParser",
    "parse_tzx",
    "parse_tzx_file",
]
