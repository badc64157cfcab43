"""Simple Code records as typed values.

Each record knows how to encode itself to its exact on-disk bytes and how
to decode those bytes back. Field layouts come from ``sim_core.protocol``.
"""
from __future__ import annotations

import struct
from dataclasses import dataclass

from .errors import LayoutError
from .protocol import (
    MAGIC_SIM_FILE,
    REC_TYPE_DATA,
    REC_TYPE_END,
    DATA_REC_FLAG,
    FILE_HEADER_FMT,
    FILE_HEADER_LEN,
    DATA_REC_FMT,
    DATA_REC_LEN,
    END_REC_FMT,
    END_REC_LEN,
    U32_MAX,
)


def check_u32(name: str, value: int) -> int:
    """Reject values that cannot be stored in a 32-bit unsigned field."""
    if not 0 <= value <= U32_MAX:
        raise LayoutError(f"{name} {value} is outside 0..0x{U32_MAX:08X}")
    return value


@dataclass(frozen=True)
class FileHeader:
    """14-byte file header: magic, reserved, payload size, reserved."""

    payload_size: int
    magic: bytes = MAGIC_SIM_FILE
    reserved: bytes = bytes(4)
    tail: bytes = bytes(2)

    def encode(self) -> bytes:
        check_u32("payload size", self.payload_size)
        return struct.pack(FILE_HEADER_FMT, self.magic, self.reserved, self.payload_size, self.tail)

    @classmethod
    def decode(cls, data: bytes) -> "FileHeader":
        magic, reserved, size, tail = struct.unpack(FILE_HEADER_FMT, data[:FILE_HEADER_LEN])
        return cls(payload_size=size, magic=magic, reserved=reserved, tail=tail)

    @property
    def has_valid_reserved(self) -> bool:
        return self.reserved == bytes(4) and self.tail == bytes(2)


@dataclass(frozen=True)
class DataRecord:
    """12-byte data record descriptor. The payload follows it on disk."""

    load_address: int
    payload_size: int
    rec_type: int = REC_TYPE_DATA
    flag: int = DATA_REC_FLAG
    reserved: int = 0

    def encode(self) -> bytes:
        check_u32("load address", self.load_address)
        check_u32("payload size", self.payload_size)
        return struct.pack(
            DATA_REC_FMT,
            self.rec_type,
            self.flag,
            self.reserved,
            self.load_address,
            self.payload_size,
        )

    @classmethod
    def decode(cls, data: bytes) -> "DataRecord":
        rec_type, flag, reserved, addr, size = struct.unpack(DATA_REC_FMT, data[:DATA_REC_LEN])
        return cls(load_address=addr, payload_size=size, rec_type=rec_type, flag=flag, reserved=reserved)

    @property
    def has_valid_reserved(self) -> bool:
        return self.flag == DATA_REC_FLAG and self.reserved == 0


@dataclass(frozen=True)
class EndRecord:
    """Single-byte end-of-records marker."""

    rec_type: int = REC_TYPE_END

    def encode(self) -> bytes:
        return struct.pack(END_REC_FMT, self.rec_type)

    @classmethod
    def decode(cls, data: bytes) -> "EndRecord":
        (rec_type,) = struct.unpack(END_REC_FMT, data[:END_REC_LEN])
        return cls(rec_type=rec_type)
