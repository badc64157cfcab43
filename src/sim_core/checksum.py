"""Two's-complement byte-sum checksum used to terminate Simple Code files."""
from __future__ import annotations

from typing import BinaryIO

from .protocol import CHUNK_SIZE, U32_MAX


def byte_sum(data: bytes, start: int = 0) -> int:
    """Add every byte of ``data`` to ``start`` in a 32-bit wraparound register."""
    return (start + sum(data)) & U32_MAX


def twos_complement(total: int) -> int:
    """Negate a 32-bit sum: ``~total + 1`` truncated to 32 bits."""
    return (~total + 1) & U32_MAX


def compute_checksum(f: BinaryIO) -> int:
    """Re-scan ``f`` from offset 0 to EOF and return its checksum.

    Leaves the stream positioned at EOF so the checksum can be appended.
    """
    total = 0
    f.seek(0)
    while True:
        chunk = f.read(CHUNK_SIZE)
        if not chunk:
            break
        total = byte_sum(chunk, total)
    return twos_complement(total)
