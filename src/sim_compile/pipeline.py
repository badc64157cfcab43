"""Binary-to-Simple-Code conversion pipeline.

SizeProbe -> header -> data record + payload -> end record -> checksum.
Each stage works on explicit stream handles and raises on the first failure.
"""
from __future__ import annotations

import struct
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO
from warnings import warn

from sim_core.checksum import compute_checksum
from sim_core.errors import OpenError, ReadError, WriteError
from sim_core.protocol import CHECKSUM_FMT, CHUNK_SIZE, FILE_HEADER_LEN
from sim_core.records import DataRecord, EndRecord, FileHeader, check_u32


@dataclass(frozen=True)
class ConversionResult:
    payload_size: int
    load_address: int
    checksum: int
    output_size: int


def _write(out: BinaryIO, data: bytes) -> None:
    try:
        n = out.write(data)
    except OSError as e:
        raise WriteError(str(e)) from e
    if n is not None and n != len(data):
        raise WriteError(f"short write ({n} of {len(data)} bytes)")


def _seek(out: BinaryIO, offset: int, whence: int = 0) -> None:
    try:
        out.seek(offset, whence)
    except OSError as e:
        raise WriteError(f"cannot seek output ({e})") from e


def probe_size(f: BinaryIO) -> int:
    """Return the byte length of a seekable stream and rewind it to offset 0."""
    try:
        f.seek(0, 2)
        size = f.tell()
        f.seek(0)
    except OSError as e:
        raise ReadError(f"cannot determine input size ({e})") from e
    return size


def write_header(out: BinaryIO, payload_size: int) -> None:
    """Write the 14-byte file header at offset 0, overwriting what is there."""
    data = FileHeader(payload_size).encode()
    _seek(out, 0)
    _write(out, data)


def write_data_record(src: BinaryIO, out: BinaryIO, load_address: int, payload_size: int) -> None:
    """Write the data record descriptor and stream ``payload_size`` bytes after it.

    ``src`` must be positioned at the start of the payload.
    """
    descriptor = DataRecord(load_address, payload_size).encode()
    _seek(out, FILE_HEADER_LEN)
    _write(out, descriptor)

    # Single data record: a raw binary carries no layout to split on.
    copied = 0
    while copied < payload_size:
        try:
            chunk = src.read(min(CHUNK_SIZE, payload_size - copied))
        except OSError as e:
            raise ReadError(str(e)) from e
        if not chunk:
            raise ReadError(f"input ended after {copied} of {payload_size} bytes")
        _write(out, chunk)
        copied += len(chunk)

    # Drop stale bytes from a reused output so the end record follows the payload.
    try:
        out.truncate()
    except OSError as e:
        raise WriteError(str(e)) from e


def write_end_record(out: BinaryIO) -> None:
    _seek(out, 0, 2)
    _write(out, EndRecord().encode())


def write_checksum(out: BinaryIO) -> int:
    """Checksum everything written so far and append it. Returns the checksum."""
    try:
        checksum = compute_checksum(out)
    except OSError as e:
        raise ReadError(f"cannot re-read output ({e})") from e
    _seek(out, 0, 2)
    _write(out, struct.pack(CHECKSUM_FMT, checksum))
    return checksum


def convert_stream(src: BinaryIO, out: BinaryIO, load_address: int = 0) -> ConversionResult:
    """Run the full pipeline from ``src`` into ``out`` (which must be readable too)."""
    check_u32("load address", load_address)
    payload_size = probe_size(src)
    check_u32("payload size", payload_size)

    write_header(out, payload_size)
    write_data_record(src, out, load_address, payload_size)
    write_end_record(out)
    checksum = write_checksum(out)

    try:
        out.flush()
    except OSError as e:
        raise WriteError(str(e)) from e

    return ConversionResult(
        payload_size=payload_size,
        load_address=load_address,
        checksum=checksum,
        output_size=out.tell(),
    )


def convert_file(input_path: Path, output_path: Path, load_address: int = 0) -> ConversionResult:
    """Convert a firmware binary file into a Simple Code file.

    A failure after the output is created leaves the partial file on disk.
    """
    input_path = Path(input_path)
    output_path = Path(output_path)
    print(f"Converting: {input_path}")

    check_u32("load address", load_address)

    try:
        fin = open(input_path, "rb")
    except OSError as e:
        raise OpenError(f"{input_path} ({e.strerror})") from e

    with fin:
        check_u32("payload size", probe_size(fin))
        if output_path.exists():
            warn(f"Overwriting existing file {output_path}")
        try:
            fout = open(output_path, "w+b")
        except OSError as e:
            raise OpenError(f"{output_path} ({e.strerror})", output=True) from e

        with fout:
            result = convert_stream(fin, fout, load_address)

    print(f"Calculated checksum = 0x{result.checksum:08x}")
    print(f"PASS: Simple Code file generated at {output_path}")
    print(f"  Load address: 0x{result.load_address:08X}")
    print(f"  Payload: {result.payload_size} bytes")
    print(f"  Output: {result.output_size} bytes")
    return result
