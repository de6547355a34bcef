#!/usr/bin/env python3
"""
Unix compress (.Z) LZW codec

Reads and writes the classic "compress" format: a 3-byte header followed
by LSB-first variable-width codes (9 bits growing up to 16). When the
dictionary fills, it stops adding entries and keeps using the existing
ones until a CLEAR code resets it.

Usage:
    Compress:   python3 lzw_compress.py compress input.txt [output.Z] -b 16
    Decompress: python3 lzw_compress.py decompress input.txt.Z [output.txt]
"""

import argparse
import io
import logging
import os
import sys

from lzw_bitio import CHUNK_SIZE, BitReader, BitWriter
from lzw_dictionary import CLEAR_CODE, DEFAULT_MAX_BITS, Dictionary, check_max_bits
from lzw_errors import ConfigurationError, CorruptStreamError, LZWError
from lzw_header import HEADER_SIZE, encode_header, read_header

logger = logging.getLogger(__name__)

# ============================================================================
# LZW COMPRESSION
# ============================================================================


class Encoder:
    """
    Streaming LZW encoder writing a .Z stream to 'sink'.

    Feed input with write() as many times as needed, then call finish().
    The trie walk keeps the current match as a dictionary code (None at
    the root), so a chunk boundary can fall anywhere.
    """

    def __init__(self, sink, max_bits=DEFAULT_MAX_BITS, block_mode=True):
        # Validates max_bits before anything reaches the sink
        header = encode_header(max_bits, block_mode)

        self.dictionary = Dictionary(max_bits, block_mode)
        self.bytes_in = 0
        self._node = None
        self._finished = False
        self._writer = BitWriter(sink)
        sink.write(header)

    @property
    def bytes_out(self):
        return HEADER_SIZE + self._writer.bytes_written

    @property
    def codes_written(self):
        return self._writer.codes_written

    def write(self, data):
        """Compress a chunk of input."""
        dictionary = self.dictionary
        writer = self._writer
        node = self._node

        for byte in data:
            child = dictionary.extend(node, byte)
            if child is not None:
                # Known sequence - keep extending the match
                node = child
                continue

            # New sequence: emit the match, learn match + byte (unless frozen),
            # and start over from the single byte
            writer.write(node, dictionary.current_width)
            dictionary.insert(node, byte)
            node = byte

        self._node = node
        self.bytes_in += len(data)

    def clear(self):
        """
        Emit the pending match and a CLEAR code, then reset the dictionary.

        The decoder reads CLEAR at the width it expects after learning the
        entry for the previous code, which can be one bit wider than the
        encoder's own current width.
        """
        dictionary = self.dictionary
        if not dictionary.block_mode:
            raise ConfigurationError("CLEAR codes require block mode")

        if self._node is not None:
            self._writer.write(self._node, dictionary.current_width)
            self._node = None

        self._writer.write(CLEAR_CODE, dictionary.next_width)
        self._writer.align()
        dictionary.reset()
        logger.debug("CLEAR emitted after %d input bytes", self.bytes_in)

    def finish(self):
        """Emit the final match and flush. Empty input leaves only the header."""
        if self._finished:
            return
        if self._node is not None:
            self._writer.write(self._node, self.dictionary.current_width)
            self._node = None
        self._writer.close()
        self._finished = True


def compress_stream(source, sink, max_bits=DEFAULT_MAX_BITS, block_mode=True):
    """Compress everything readable from 'source' into 'sink'. Returns bytes written."""
    encoder = Encoder(sink, max_bits, block_mode)
    while True:
        chunk = source.read(CHUNK_SIZE)
        if not chunk:
            break
        encoder.write(chunk)
    encoder.finish()
    return encoder.bytes_out


def compress_bytes(data, max_bits=DEFAULT_MAX_BITS, block_mode=True):
    sink = io.BytesIO()
    encoder = Encoder(sink, max_bits, block_mode)
    encoder.write(data)
    encoder.finish()
    return sink.getvalue()

# ============================================================================
# LZW DECOMPRESSION
# ============================================================================


class Decoder:
    """
    LZW decoder for a .Z stream.

    The header is parsed on construction, so a stream in the wrong format
    is rejected before any output exists.
    """

    def __init__(self, source):
        self.header = read_header(source)
        self.dictionary = Dictionary(self.header.max_bits, self.header.block_mode)
        self.bytes_out = 0
        self._reader = BitReader(source, offset=HEADER_SIZE)

    def _corrupt(self, code, width):
        reader = self._reader
        position = reader.offset + (reader.bits_read - width) // 8
        index = reader.codes_read - 1
        return CorruptStreamError(
            f"Corrupt input: invalid code {code} (code #{index}, byte offset {position})",
            code=code, position=position, index=index,
        )

    def run(self, sink):
        """Decode the whole stream into 'sink'. Returns bytes written."""
        dictionary = self.dictionary
        reader = self._reader
        block_mode = dictionary.block_mode
        out = bytearray()
        prev = None  # Code decoded last, None right after start or CLEAR

        while True:
            width = dictionary.next_width
            code = reader.read(width)
            if code is None:
                break

            if block_mode and code == CLEAR_CODE:
                logger.debug("CLEAR at byte offset %d", reader.position)
                dictionary.reset()
                reader.align()
                prev = None
                continue

            if dictionary.is_assigned(code):
                entry = dictionary.resolve(code)
            elif prev is not None and code == dictionary.latest_code + 1 and not dictionary.is_full:
                # The encoder used the entry it created on its previous step
                # (the KwKwK case): previous sequence + its own first byte
                entry = dictionary.resolve(prev)
                entry += entry[:1]
            else:
                raise self._corrupt(code, width)

            out += entry

            # Mirror the encoder: previous sequence + first byte of this one
            if prev is not None:
                dictionary.insert(prev, entry[0])
            prev = code

            if len(out) >= CHUNK_SIZE:
                sink.write(bytes(out))
                self.bytes_out += len(out)
                out.clear()

        if out:
            sink.write(bytes(out))
            self.bytes_out += len(out)
        return self.bytes_out


def decompress_stream(source, sink):
    return Decoder(source).run(sink)


def decompress_bytes(data):
    sink = io.BytesIO()
    decompress_stream(io.BytesIO(data), sink)
    return sink.getvalue()

# ============================================================================
# FILE HELPERS
# ============================================================================


def default_compress_path(path):
    return path + '.Z'


def default_decompress_path(path):
    if path.endswith('.Z') and len(path) > 2:
        return path[:-2]
    raise ConfigurationError(f"Cannot derive an output name from {path!r}: please specify one")


def compress(input_file, output_file=None, max_bits=DEFAULT_MAX_BITS, block_mode=True):
    """
    Compress 'input_file' into 'output_file' (default: input_file + '.Z').

    An invalid max_bits is rejected before the output file is created.
    Returns the compressed size in bytes.
    """
    check_max_bits(max_bits)
    if output_file is None:
        output_file = default_compress_path(input_file)

    with open(input_file, 'rb') as src, open(output_file, 'wb') as dst:
        return compress_stream(src, dst, max_bits, block_mode)


def decompress(input_file, output_file=None):
    """
    Decompress 'input_file' into 'output_file' (default: name without '.Z').

    A partial output file is removed if decoding fails, whether the stream
    is corrupt or reading/writing fails midway.
    Returns the decompressed size in bytes.
    """
    if output_file is None:
        output_file = default_decompress_path(input_file)

    with open(input_file, 'rb') as src:
        decoder = Decoder(src)
        with open(output_file, 'wb') as dst:
            try:
                return decoder.run(dst)
            except (LZWError, OSError):
                dst.close()
                os.remove(output_file)
                raise

# ============================================================================
# COMMAND-LINE INTERFACE
# ============================================================================


def main(argv=None):
    """Parse command-line arguments and run compression or decompression."""
    parser = argparse.ArgumentParser(description='Unix compress (.Z) LZW codec')
    parser.add_argument('-v', '--verbose', action='store_true', help='log codec details')
    sub = parser.add_subparsers(dest='mode', required=True)

    # Compress subcommand
    c = sub.add_parser('compress')
    c.add_argument('input')
    c.add_argument('output', nargs='?')
    c.add_argument('-b', '--max-bits', type=int, default=DEFAULT_MAX_BITS)
    c.add_argument('-C', '--no-block-mode', dest='block_mode', action='store_false',
                   help='write an old-style stream without CLEAR support')

    # Decompress subcommand
    d = sub.add_parser('decompress')
    d.add_argument('input')
    d.add_argument('output', nargs='?')

    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format='%(levelname)s: %(message)s')

    try:
        if args.mode == 'compress':
            output = args.output or default_compress_path(args.input)
            compress(args.input, output, args.max_bits, args.block_mode)
            print(f"Compressed: {args.input} -> {output}")
        else:
            output = args.output or default_decompress_path(args.input)
            decompress(args.input, output)
            print(f"Decompressed: {args.input} -> {output}")
    except (LZWError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
