#!/usr/bin/env python3
"""Generate test inputs for the .Z codec."""

import os
import random

WORDS = (
    "the quick brown fox jumps over lazy dog alice was beginning to get very "
    "tired of sitting by her sister on bank and having nothing do once or twice "
    "she had peeped into book reading but it no pictures conversations in"
).split()


def ab_repetitive(num_repetitions=250000):
    """Repetitive 'ab' pattern."""
    return b'ab' * num_repetitions


def ab_random(size_bytes=500000, seed=42):
    """Random 'a' and 'b' characters."""
    rng = random.Random(seed)
    return bytes(rng.choice(b'ab') for _ in range(size_bytes))


def random_binary(size_bytes=100000, seed=42):
    """Uniform random bytes (incompressible)."""
    rng = random.Random(seed)
    return bytes(rng.getrandbits(8) for _ in range(size_bytes))


def english_text(num_words=20000, seed=42):
    """Word salad with line breaks, compressible like prose."""
    rng = random.Random(seed)
    lines = []
    for _ in range(0, num_words, 12):
        lines.append(' '.join(rng.choice(WORDS) for _ in range(12)))
    return ('\n'.join(lines) + '\n').encode('ascii')


def distinct_pairs(length):
    """
    Bytes whose adjacent pairs never repeat (length <= 257).

    Every byte after the first misses the trie, so compressing n bytes
    emits n codes and learns exactly n - 1 entries.
    """
    if not 1 <= length <= 257:
        raise ValueError(f"Length {length} out of range 1-257")
    data = bytes(range(min(length, 256)))
    if length == 257:
        data += b'\x05'
    return data


CORPUS = {
    'ab_repeat.txt': lambda: ab_repetitive(50000),
    'ab_random.txt': lambda: ab_random(100000),
    'random.bin': lambda: random_binary(50000),
    'english.txt': lambda: english_text(20000),
    'zeros.bin': lambda: bytes(200000),
}


def main():
    """Write the whole corpus into test_data/."""
    os.makedirs('test_data', exist_ok=True)

    for name, make in CORPUS.items():
        path = os.path.join('test_data', name)
        print(f"Generating {path}...")
        with open(path, 'wb') as f:
            f.write(make())
        size = os.path.getsize(path)
        print(f"  Created: {size:,} bytes ({size / 1024:.2f} KB)")

    print("\nTest data generation complete!")


if __name__ == '__main__':
    main()
