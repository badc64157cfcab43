"""Simple Code core - records, checksum and shared error types."""
from .checksum import byte_sum, twos_complement, compute_checksum
from .errors import SimError, OpenError, ReadError, WriteError, LayoutError
from .records import FileHeader, DataRecord, EndRecord

__all__ = [
    "byte_sum",
    "twos_complement",
    "compute_checksum",
    "SimError",
    "OpenError",
    "ReadError",
    "WriteError",
    "LayoutError",
    "FileHeader",
    "DataRecord",
    "EndRecord",
]
