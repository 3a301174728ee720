"""
TAP File Handling
=================

Reading of Jupiter ACE TAP tape images: a stream of blocks, each preceded
by a 2-byte little-endian length.

    >>> from acetap.tap import read_tap_blocks
    >>> read_tap_blocks(b"\\x02\\x00\\xaa\\xbb")
    [b'\\xaa\\xbb']
"""

from acetap.tap.reader import (
    DEFAULT_BUFFER_SIZE,
    LENGTH_PREFIX_SIZE,
    TapReader,
    read_tap_block,
    read_tap_blocks,
)

__all__ = [
    "DEFAULT_BUFFER_SIZE",
    "LENGTH_PREFIX_SIZE",
    "TapReader",
    "read_tap_block",
    "read_tap_blocks",
]
