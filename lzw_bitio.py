"""
Bit-level I/O for .Z code streams.

Codes are variable width (9 to 16 bits) but the stream is stored as
bytes. Codes are packed least-significant bit first. The reference
implementations also write codes in groups of eight: when the code width
changes, or after a CLEAR, the unfinished group is padded with zero bits
so the next group starts on a fresh boundary. Both classes track the
current group so the writer pads and the reader skips identically.
"""

CHUNK_SIZE = 1 << 16    # Bytes buffered before touching the underlying stream
GROUP_SIZE = 8          # Codes per group


class BitWriter:
    """
    Writes variable-width codes to a binary stream.

    Flushing follows the legacy two-tier rule: once the buffer holds 16 or
    more bits a little-endian 16-bit word is written and the overflow is
    kept, otherwise only the low byte is written. Fewer than 8 bits remain
    buffered between codes.
    """

    def __init__(self, sink):
        self.sink = sink
        self.buffer = 0        # Pending bits, lowest bit first
        self.n_bits = 0        # Number of valid bits in buffer
        self.codes_written = 0
        self.bytes_written = 0
        self._out = bytearray()
        self._group_width = None
        self._group_codes = 0

    def write(self, code, width):
        """Append one code of 'width' bits. A new width starts a new group."""
        if width != self._group_width:
            if self._group_codes:
                self.align()
            self._group_width = width

        self._pack(code, width)
        self._group_codes += 1
        self.codes_written += 1

    def _pack(self, code, width):
        self.buffer |= code << self.n_bits
        self.n_bits += width

        if self.n_bits >= 16:
            self._out += (self.buffer & 0xFFFF).to_bytes(2, 'little')
            self.buffer >>= 16
            self.n_bits -= 16
        else:
            self._out.append(self.buffer & 0xFF)
            self.buffer >>= 8
            self.n_bits -= 8

        if len(self._out) >= CHUNK_SIZE:
            self._drain()

    def align(self):
        """Pad the current group with zero codes up to its end."""
        if self._group_width is not None:
            for _ in range(-self._group_codes % GROUP_SIZE):
                self._pack(0, self._group_width)
        self._group_codes = 0

    def _drain(self):
        if self._out:
            self.sink.write(bytes(self._out))
            self.bytes_written += len(self._out)
            self._out.clear()

    def close(self):
        """Flush the trailing partial byte, if any, and everything buffered."""
        if self.n_bits > 0:
            self._out.append(self.buffer & 0xFF)
            self.buffer = 0
            self.n_bits = 0
        self._drain()
        if hasattr(self.sink, 'flush'):
            self.sink.flush()


class BitReader:
    """
    Reads variable-width codes from a binary stream.

    Mirrors BitWriter: bytes are added above the bits already buffered and
    codes are taken from the low end. Returns None once fewer bits than
    requested remain; those bits are end-of-stream padding.
    """

    def __init__(self, source, offset=0):
        self.source = source
        self.buffer = 0
        self.n_bits = 0
        self.bits_read = 0       # Bits consumed, padding included
        self.codes_read = 0
        self.offset = offset     # Byte offset of the first code in the stream
        self._chunk = b''
        self._index = 0
        self._eof = False
        self._group_width = None
        self._group_codes = 0

    @property
    def position(self):
        """Byte offset of the next unread bit, counted from the stream start."""
        return self.offset + self.bits_read // 8

    def _next_byte(self):
        if self._index >= len(self._chunk):
            if self._eof:
                return None
            self._chunk = self.source.read(CHUNK_SIZE)
            self._index = 0
            if not self._chunk:
                self._eof = True
                return None
        byte = self._chunk[self._index]
        self._index += 1
        return byte

    def _fill(self, num_bits):
        while self.n_bits < num_bits:
            byte = self._next_byte()
            if byte is None:
                return False
            self.buffer |= byte << self.n_bits
            self.n_bits += 8
        return True

    def _consume(self, num_bits):
        self.buffer >>= num_bits
        self.n_bits -= num_bits
        self.bits_read += num_bits

    def read(self, width):
        """Read one code of 'width' bits, or None at end of stream."""
        if width != self._group_width:
            if self._group_codes:
                self.align()
            self._group_width = width

        if not self._fill(width):
            return None

        code = self.buffer & ((1 << width) - 1)
        self._consume(width)
        self._group_codes += 1
        self.codes_read += 1
        return code

    def align(self):
        """Skip the zero padding that ends the current group."""
        if self._group_width is not None:
            pad = (-self._group_codes % GROUP_SIZE) * self._group_width
            self._fill(pad)
            self._consume(min(pad, self.n_bits))
        self._group_codes = 0
