"""
Adaptive LZW dictionary shared by the encoder and decoder.

Entries live in an arena addressed by code: entry k is stored as
(prefix code, suffix byte), so a sequence is rebuilt by walking back
through its prefixes. The encoder's trie is a flat map from
(parent code, next byte) to child code over the same arena. Both views
grow together, so code k means the same sequence on both sides.
"""

import logging

from lzw_errors import ConfigurationError

logger = logging.getLogger(__name__)

MIN_BITS = 9            # Narrowest legal max code length
MAX_BITS = 16           # Widest code the format allows
DEFAULT_MAX_BITS = 16
INITIAL_WIDTH = 9       # Every stream (and every CLEAR) starts at 9-bit codes

CLEAR_CODE = 256        # Reserved in block mode
FIRST_CODE = 257        # First learned code in block mode


def check_max_bits(max_bits):
    """Reject a max code length outside 9-16. Never clamps."""
    if isinstance(max_bits, bool) or not isinstance(max_bits, int):
        raise ConfigurationError(f"Max code length must be an integer, got {max_bits!r}")
    if not MIN_BITS <= max_bits <= MAX_BITS:
        raise ConfigurationError(
            f"Invalid max code length {max_bits}: must be between {MIN_BITS} and {MAX_BITS}"
        )
    return max_bits


class Dictionary:
    """
    Code table for one compress/decompress session.

    latest_code is the most recently assigned code (256 right after a
    reset in block mode, where 256 is reserved for CLEAR).
    current_width is the width of codes the encoder writes next; it is
    at most max_bits, except for a full 9-bit table, which uses 10.
    """

    __slots__ = ('max_bits', 'max_code', 'block_mode', 'latest_code',
                 'current_width', '_prefix', '_suffix', '_children')

    def __init__(self, max_bits=DEFAULT_MAX_BITS, block_mode=True):
        self.max_bits = check_max_bits(max_bits)
        self.max_code = (1 << max_bits) - 1
        self.block_mode = block_mode

        # Literals have no prefix; their slots only keep indexes aligned
        self._prefix = [-1] * 256
        self._suffix = bytearray(range(256))
        self._children = {}
        self.reset()

    def reset(self):
        """Drop every learned entry and return to 9-bit codes."""
        del self._prefix[256:]
        del self._suffix[256:]
        self._children.clear()
        if self.block_mode:
            # Placeholder for CLEAR so that list index == code
            self._prefix.append(-1)
            self._suffix.append(0)
            self.latest_code = CLEAR_CODE
        else:
            self.latest_code = 255
        self.current_width = INITIAL_WIDTH

    def __len__(self):
        return len(self._suffix)

    @property
    def is_full(self):
        return self.latest_code >= self.max_code

    @property
    def next_width(self):
        """
        Width of the next code a decoder reads.

        The decoder adds each entry one code after the encoder did, so it
        must widen as soon as the next code it will assign reaches
        2**current_width, one insertion ahead of its own dictionary.

        A full 9-bit table still moves on to 10-bit codes: the reference
        decoders start with maxcode 511 whatever the header says.
        """
        if self.latest_code + 1 == 1 << self.current_width:
            if not self.is_full or self.current_width == INITIAL_WIDTH:
                return self.current_width + 1
        return self.current_width

    def is_assigned(self, code):
        if code < 0 or code > self.latest_code:
            return False
        return not (self.block_mode and code == CLEAR_CODE)

    def extend(self, node, byte):
        """
        Return the code for node's sequence followed by byte, or None.

        node is None at the trie root, where every byte has a child.
        """
        if node is None:
            return byte
        return self._children.get((node << 8) | byte)

    def insert(self, parent, byte):
        """
        Assign the next code to parent's sequence + byte.

        Returns the new code, or None when the table is full (frozen).
        The first refusal on a full 9-bit table widens codes to 10 bits.
        """
        if self.latest_code >= self.max_code:
            if self.current_width == INITIAL_WIDTH:
                self.current_width += 1
                logger.debug("9-bit dictionary full, writing 10-bit codes from here on")
            return None

        code = self.latest_code + 1
        self._prefix.append(parent)
        self._suffix.append(byte)
        self._children[(parent << 8) | byte] = code
        self.latest_code = code

        if code == 1 << self.current_width:
            self.current_width += 1
            logger.debug("Code %d assigned, widening codes to %d bits", code, self.current_width)
        if code == self.max_code:
            logger.debug("Dictionary full at code %d, no further entries until CLEAR", code)
        return code

    def resolve(self, code):
        """Rebuild the byte sequence for an assigned code."""
        prefix = self._prefix
        suffix = self._suffix
        out = bytearray()
        while code > 255:
            out.append(suffix[code])
            code = prefix[code]
        out.append(code)
        out.reverse()
        return bytes(out)
