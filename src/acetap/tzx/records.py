"""
TZX Record Definitions
======================

This module defines the data structures written to (and read back from)
TZX tape images produced by the converter.

File Structure Overview
-----------------------
A converted TZX file contains:
1. TZX Header (10 bytes): "ZXTape!" + 0x1A + major version + minor version
2. For every TAP block, in tape order:
   - Turbo Data record header (19 bytes, ID 0x11)
   - Flag byte (1 byte)
   - Block payload (n bytes)
   - End-mark pulse sequence (6 bytes, ID 0x13)

Turbo Data Record (ID 0x11)
---------------------------
    Offset  Size    Description
    ------  ----    -----------
    0       1       Block ID (0x11)
    1       2       Pilot pulse length
    3       2       First sync pulse length
    5       2       Second sync pulse length
    7       2       Zero bit pulse length
    9       2       One bit pulse length
    11      2       Pilot tone length (pulse count)
    13      1       Used bits in the last byte
    14      2       Pause after this block (ms)
    16      3       Length of the data that follows

All multi-byte fields are little-endian.

Timings
-------
The Jupiter ACE runs its Z80 at 3.25 MHz while TZX pulse lengths are
expressed in T-states of a 3.5 MHz Z80. The values in ACE_TIMINGS are the
ACE ROM timings already rescaled to the TZX clock; multiply by 325/350 to
get the ACE's own figures.

Reference
---------
- TZX format: https://worldofspectrum.net/TZXformat.html
- ACE tape timings:
  http://jupiterace.proboards.com/index.cgi?board=programmingaceforth&action=display&thread=266
"""

from dataclasses import dataclass
from enum import IntEnum
import struct


# =============================================================================
# Format Constants
# =============================================================================

TZX_SIGNATURE = b"ZXTape!"
TZX_EOF_MARKER = 0x1A
TZX_MAJOR_VERSION = 1
TZX_MINOR_VERSION = 13

TZX_CLOCK_HZ = 3_500_000    # TZX pulse lengths are 3.5 MHz T-states
ACE_CLOCK_HZ = 3_250_000    # Jupiter ACE Z80 clock

# Pilot tone lengths used by the ACE ROM (pulse counts)
HEADER_PILOT_PULSES = 0x2000
DATA_PILOT_PULSES = 0x0400

# A TAP length prefix is 16 bits wide
MAX_BLOCK_SIZE = 0xFFFF


# =============================================================================
# Enumeration Types
# =============================================================================

class BlockId(IntEnum):
    """TZX block identifiers understood by this package."""
    TURBO_DATA = 0x11       # Turbo speed data block
    PULSE_SEQUENCE = 0x13   # Sequence of pulses of different lengths

    @classmethod
    def get_name(cls, block_id: int) -> str:
        """Get a human-readable name for a block ID."""
        names = {
            0x11: "Turbo Data",
            0x13: "Pulse Sequence",
        }
        return names.get(block_id, f"Unknown (0x{block_id:02X})")


class BlockRole(IntEnum):
    """
    Role of a tape block.

    The ACE writes every file as a header block followed by a data block.
    TAP files do not record which is which, so the converter assumes the
    first block is a header and alternates from there.

    The enum value is the flag byte written in front of the payload.
    """
    HEADER = 0x00
    DATA = 0xFF

    @property
    def flag_byte(self) -> int:
        """The flag byte that precedes the payload on tape."""
        return int(self)

    @property
    def pilot_pulses(self) -> int:
        """Pilot tone length; headers get the longer leader."""
        if self is BlockRole.HEADER:
            return HEADER_PILOT_PULSES
        return DATA_PILOT_PULSES

    def toggled(self) -> "BlockRole":
        """Return the role of the block that follows this one."""
        return BlockRole(~self & 0xFF)

    @classmethod
    def from_flag(cls, flag: int) -> "BlockRole":
        """Convert a flag byte to a BlockRole."""
        try:
            return cls(flag)
        except ValueError:
            raise ValueError(f"Not an ACE flag byte: 0x{flag:02X}") from None


# =============================================================================
# Timing Table
# =============================================================================

@dataclass(frozen=True)
class TimingTable:
    """
    Pulse lengths for one tape encoding, in TZX T-states.

    Attributes:
        pilot: Length of each pilot tone pulse
        sync1: First sync pulse
        sync2: Second sync pulse
        zero: Both pulses of a 0 bit
        one: Both pulses of a 1 bit
        end_mark1: First pulse of the end mark
        end_mark2: Second pulse of the end mark
    """
    pilot: int
    sync1: int
    sync2: int
    zero: int
    one: int
    end_mark1: int
    end_mark2: int

    def to_native(self) -> dict[str, int]:
        """
        Rescale every pulse length to the ACE's own 3.25 MHz clock.

        Returns:
            Mapping of field name to ACE T-states (rounded)
        """
        return {
            name: round(getattr(self, name) * ACE_CLOCK_HZ / TZX_CLOCK_HZ)
            for name in ("pilot", "sync1", "sync2", "zero", "one",
                         "end_mark1", "end_mark2")
        }


ACE_TIMINGS = TimingTable(
    pilot=2114,
    sync1=602,
    sync2=826,
    zero=812,
    one=1666,
    end_mark1=972,
    end_mark2=4509,
)


# =============================================================================
# TZX Header
# =============================================================================

@dataclass(frozen=True)
class TzxHeader:
    """
    The 10-byte header at the start of every TZX file.

    Structure:
        Offset  Size    Description
        ------  ----    -----------
        0       7       "ZXTape!"
        7       1       0x1A
        8       1       Major version
        9       1       Minor version
    """
    major: int = TZX_MAJOR_VERSION
    minor: int = TZX_MINOR_VERSION

    HEADER_SIZE = 10

    def to_bytes(self) -> bytes:
        """Serialize the header to 10 bytes."""
        return TZX_SIGNATURE + bytes([TZX_EOF_MARKER, self.major, self.minor])

    @classmethod
    def from_bytes(cls, data: bytes) -> "TzxHeader":
        """Deserialize a header, validating the signature."""
        if len(data) < cls.HEADER_SIZE:
            raise ValueError(f"Header too short: need 10 bytes, got {len(data)}")
        if data[0:7] != TZX_SIGNATURE or data[7] != TZX_EOF_MARKER:
            raise ValueError(f"Invalid TZX signature: {bytes(data[0:8])!r}")
        return cls(major=data[8], minor=data[9])

    @property
    def version(self) -> str:
        return f"{self.major}.{self.minor:02d}"


# =============================================================================
# Turbo Data Record (ID 0x11)
# =============================================================================

@dataclass
class TurboDataRecord:
    """
    Parameter block of a TZX turbo data record.

    Only the 19-byte header is represented here; the data it announces
    (flag byte + payload) follows it in the file.
    """
    pilot: int
    sync1: int
    sync2: int
    zero: int
    one: int
    pilot_pulses: int
    data_length: int
    used_bits: int = 8
    pause_ms: int = 0

    FORMAT = "<B5HHBHHB"
    SIZE = 19

    @classmethod
    def for_block(
        cls,
        role: BlockRole,
        payload_length: int,
        timings: TimingTable = ACE_TIMINGS,
    ) -> "TurboDataRecord":
        """
        Build the record announcing one TAP block.

        The data length includes the flag byte written before the payload.
        """
        return cls(
            pilot=timings.pilot,
            sync1=timings.sync1,
            sync2=timings.sync2,
            zero=timings.zero,
            one=timings.one,
            pilot_pulses=role.pilot_pulses,
            data_length=payload_length + 1,
        )

    @property
    def payload_length(self) -> int:
        """Length of the payload without the flag byte."""
        return self.data_length - 1

    def to_bytes(self) -> bytes:
        """Serialize the record header to 19 bytes."""
        return struct.pack(
            self.FORMAT,
            BlockId.TURBO_DATA,
            self.pilot,
            self.sync1,
            self.sync2,
            self.zero,
            self.one,
            self.pilot_pulses,
            self.used_bits,
            self.pause_ms,
            self.data_length & 0xFFFF,
            (self.data_length >> 16) & 0xFF,
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> "TurboDataRecord":
        """Deserialize a record header from 19 bytes."""
        if len(data) < cls.SIZE:
            raise ValueError(f"Turbo data record too short: {len(data)} bytes")
        (
            block_id,
            pilot,
            sync1,
            sync2,
            zero,
            one,
            pilot_pulses,
            used_bits,
            pause_ms,
            length_low,
            length_high,
        ) = struct.unpack(cls.FORMAT, data[0:cls.SIZE])
        if block_id != BlockId.TURBO_DATA:
            raise ValueError(f"Not a turbo data record: ID 0x{block_id:02X}")
        return cls(
            pilot=pilot,
            sync1=sync1,
            sync2=sync2,
            zero=zero,
            one=one,
            pilot_pulses=pilot_pulses,
            data_length=(length_high << 16) | length_low,
            used_bits=used_bits,
            pause_ms=pause_ms,
        )


# =============================================================================
# End Mark (ID 0x13)
# =============================================================================

@dataclass
class EndMarkRecord:
    """
    Pulse sequence written after each block.

    The ACE ROM finishes every block with two extra pulses, a short one
    and a long one. TZX has no dedicated field for them, so they are
    written as an ID 0x13 pulse sequence.
    """
    pulses: tuple[int, ...] = (ACE_TIMINGS.end_mark1, ACE_TIMINGS.end_mark2)

    def to_bytes(self) -> bytes:
        """Serialize as [0x13] [count] [pulse LE16]..."""
        return struct.pack(
            f"<BB{len(self.pulses)}H",
            BlockId.PULSE_SEQUENCE,
            len(self.pulses),
            *self.pulses,
        )

    def get_size(self) -> int:
        return 2 + 2 * len(self.pulses)

    @classmethod
    def from_bytes(cls, data: bytes) -> "EndMarkRecord":
        """Deserialize a pulse sequence record."""
        if len(data) < 2:
            raise ValueError("Pulse sequence record too short")
        if data[0] != BlockId.PULSE_SEQUENCE:
            raise ValueError(f"Not a pulse sequence record: ID 0x{data[0]:02X}")
        count = data[1]
        end = 2 + 2 * count
        if len(data) < end:
            raise ValueError(
                f"Pulse sequence record truncated: need {end} bytes, got {len(data)}"
            )
        return cls(pulses=struct.unpack(f"<{count}H", data[2:end]))
