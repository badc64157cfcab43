"""Firmware binary to Simple Code converter."""
from .pipeline import (
    ConversionResult,
    probe_size,
    write_header,
    write_data_record,
    write_end_record,
    write_checksum,
    convert_stream,
    convert_file,
)

__all__ = [
    "ConversionResult",
    "probe_size",
    "write_header",
    "write_data_record",
    "write_end_record",
    "write_checksum",
    "convert_stream",
    "convert_file",
]
