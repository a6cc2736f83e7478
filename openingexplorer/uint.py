"""Variable-length unsigned integers: seven bits per byte, least significant first."""

from __future__ import annotations

from typing import BinaryIO

_U64_LIMIT = 1 << 64


def read_uint(reader: BinaryIO) -> int:
    """Read one variable-length unsigned 64-bit integer from a binary stream."""
    n = 0
    shift = 0
    while True:
        if shift >= 64:
            raise ValueError("variable-length integer too long")
        chunk = reader.read(1)
        if not chunk:
            raise EOFError("unexpected end of data while reading integer")
        byte = chunk[0]
        n |= (byte & 0x7F) << shift
        if not byte & 0x80:
            return n
        shift += 7


def write_uint(out: BinaryIO, n: int) -> None:
    """Write ``n`` as a variable-length unsigned 64-bit integer."""
    if not 0 <= n < _U64_LIMIT:
        raise ValueError(f"integer out of range for u64: {n}")
    encoded = bytearray()
    while n > 0x7F:
        encoded.append((n & 0x7F) | 0x80)
        n >>= 7
    encoded.append(n)
    out.write(bytes(encoded))