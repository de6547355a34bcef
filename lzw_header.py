"""
The 3-byte .Z header.

    offset 0-1  magic 0x1F 0x9D
    offset 2    flags: 0x80 block mode (CLEAR enabled), 0x60 reserved,
                low 5 bits max code length
"""

import logging
from typing import NamedTuple

from lzw_dictionary import DEFAULT_MAX_BITS, MAX_BITS, MIN_BITS, check_max_bits
from lzw_errors import CorruptStreamError, NotCompressedError

logger = logging.getLogger(__name__)

MAGIC = b'\x1f\x9d'
HEADER_SIZE = 3

BLOCK_MODE = 0x80
RESERVED_MASK = 0x60
FLAG_MASK = 0xE0
BITS_MASK = 0x1F


class Header(NamedTuple):
    max_bits: int
    block_mode: bool
    flags: int


def encode_header(max_bits=DEFAULT_MAX_BITS, block_mode=True):
    check_max_bits(max_bits)
    flags = BLOCK_MODE if block_mode else 0
    return MAGIC + bytes([flags | max_bits])


def decode_header(data):
    """
    Parse the first three bytes of a stream.

    Raises NotCompressedError for a wrong or truncated magic. A flag
    pattern other than plain block mode only logs a warning.
    """
    if len(data) < HEADER_SIZE or data[:2] != MAGIC:
        raise NotCompressedError("Input is not in compressed format (bad magic header)")

    third = data[2]
    flags = third & FLAG_MASK
    max_bits = third & BITS_MASK

    if flags != BLOCK_MODE:
        logger.warning(
            "Unexpected header flags 0x%02x; the input may come from a very old "
            "version of compress. Proceeding anyway.", flags
        )
    if not MIN_BITS <= max_bits <= MAX_BITS:
        raise CorruptStreamError(
            f"Stream was compressed with {max_bits}-bit codes; only "
            f"{MIN_BITS} to {MAX_BITS} bits are supported",
            position=2,
        )

    return Header(max_bits, bool(third & BLOCK_MODE), flags)


def read_header(source):
    return decode_header(source.read(HEADER_SIZE))
