import io
import struct

import pytest

from sim_compile.pipeline import (
    convert_file,
    convert_stream,
    probe_size,
    write_checksum,
    write_data_record,
    write_end_record,
    write_header,
)
from sim_core import LayoutError, OpenError, ReadError, WriteError
from sim_core.checksum import byte_sum, compute_checksum, twos_complement
from sim_core.records import DataRecord, EndRecord, FileHeader


def convert_bytes(payload: bytes, load_address: int = 0) -> bytes:
    out = io.BytesIO()
    convert_stream(io.BytesIO(payload), out, load_address)
    return out.getvalue()


def expected_checksum(data: bytes) -> int:
    return (0xFFFFFFFF - (sum(data) & 0xFFFFFFFF) + 1) & 0xFFFFFFFF


# --- Records ---------------------------------------------------------------

def test_header_layout():
    b = FileHeader(0x01020304).encode()
    assert b == bytes.fromhex("7f494152 00000000 01020304 0000")
    assert len(b) == 14


def test_data_record_layout():
    b = DataRecord(load_address=0x08000000, payload_size=0x10).encode()
    assert b == bytes.fromhex("01010000 08000000 00000010")


def test_end_record_layout():
    assert EndRecord().encode() == b"\x03"


def test_records_decode_what_they_encode():
    hdr = FileHeader.decode(FileHeader(1234).encode())
    assert hdr.payload_size == 1234
    assert hdr.has_valid_reserved

    rec = DataRecord.decode(DataRecord(0xFFFFFFFF, 7).encode())
    assert (rec.load_address, rec.payload_size) == (0xFFFFFFFF, 7)
    assert rec.has_valid_reserved


@pytest.mark.parametrize("value", [-1, 0x1_0000_0000])
def test_out_of_range_fields_rejected(value):
    with pytest.raises(LayoutError):
        DataRecord(load_address=value, payload_size=0).encode()
    with pytest.raises(LayoutError):
        FileHeader(value).encode()


# --- Checksum --------------------------------------------------------------

def test_byte_sum_wraps_at_32_bits():
    assert byte_sum(b"\xff\x01", 0xFFFFFFFF) == 0xFF


def test_twos_complement():
    assert twos_complement(0) == 0
    assert twos_complement(1) == 0xFFFFFFFF
    assert twos_complement(0x1C6) == 0xFFFFFE3A


def test_compute_checksum_rescans_from_start():
    f = io.BytesIO(b"\x01\x02\x03")
    f.seek(2)
    assert compute_checksum(f) == twos_complement(6)
    assert f.tell() == 3


# --- Stages ----------------------------------------------------------------

def test_probe_size_rewinds():
    f = io.BytesIO(b"abcdef")
    f.seek(3)
    assert probe_size(f) == 6
    assert f.tell() == 0


def test_probe_size_unseekable_input():
    class Pipe(io.RawIOBase):
        def readable(self):
            return True

        def seekable(self):
            return False

        def seek(self, *args):
            raise io.UnsupportedOperation("seek")

    with pytest.raises(ReadError):
        probe_size(Pipe())


def test_header_overwrites_offset_zero():
    out = io.BytesIO(b"\xaa" * 20)
    out.seek(17)
    write_header(out, 3)
    assert out.getvalue()[:14] == bytes.fromhex("7f494152 00000000 00000003 0000")
    assert out.getvalue()[14:] == b"\xaa" * 6


def test_data_record_short_payload_is_fatal():
    out = io.BytesIO()
    write_header(out, 5)
    with pytest.raises(ReadError, match="after 2 of 5 bytes"):
        write_data_record(io.BytesIO(b"ab"), out, 0, 5)


def test_data_record_streams_in_chunks():
    payload = bytes(range(256)) * 600  # larger than one 64KB chunk
    out = io.BytesIO()
    write_header(out, len(payload))
    write_data_record(io.BytesIO(payload), out, 0x100, len(payload))
    assert out.getvalue()[26:] == payload


def test_end_record_and_checksum_append():
    out = io.BytesIO()
    write_header(out, 0)
    write_data_record(io.BytesIO(), out, 0, 0)
    write_end_record(out)
    body = out.getvalue()
    assert body[-1] == 0x03

    checksum = write_checksum(out)
    data = out.getvalue()
    assert checksum == expected_checksum(body)
    assert data[-4:] == struct.pack(">I", checksum)


def test_write_failure_is_fatal():
    class FullDisk(io.BytesIO):
        def write(self, b):
            if self.tell() + len(b) > 20:
                raise OSError(28, "No space left on device")
            return super().write(b)

    with pytest.raises(WriteError, match="No space left"):
        convert_stream(io.BytesIO(b"x" * 100), FullDisk())


def test_short_write_is_fatal():
    class Short(io.BytesIO):
        def write(self, b):
            return super().write(b[:1])

    with pytest.raises(WriteError, match="short write"):
        convert_stream(io.BytesIO(b"abc"), Short())


# --- Whole-file properties -------------------------------------------------

@pytest.mark.parametrize("size", [0, 1, 3, 255, 70000])
def test_output_layout_properties(size):
    payload = bytes((i * 37) & 0xFF for i in range(size))
    addr = 0x20001000
    data = convert_bytes(payload, addr)

    assert len(data) == 14 + 12 + size + 1 + 4
    assert struct.unpack(">I", data[8:12])[0] == size
    assert struct.unpack(">I", data[18:22])[0] == addr
    assert struct.unpack(">I", data[22:26])[0] == size
    assert data[26:26 + size] == payload
    assert data[26 + size] == 0x03
    assert struct.unpack(">I", data[-4:])[0] == expected_checksum(data[:27 + size])


def test_three_byte_scenario():
    data = convert_bytes(b"\x10\x20\x30", 0)
    assert data[8:12] == b"\x00\x00\x00\x03"
    assert data[14:26] == bytes.fromhex("010100000000000000000003")
    assert data[26:29] == b"\x10\x20\x30"
    assert data[29] == 0x03
    assert data[30:] == bytes.fromhex("fffffe3a")


def test_empty_payload():
    data = convert_bytes(b"")
    assert len(data) == 31
    assert data[8:12] == bytes(4)
    assert data[22:26] == bytes(4)
    assert data[-4:] == bytes.fromhex("fffffea0")


def test_max_load_address():
    data = convert_bytes(b"\x00", 0xFFFFFFFF)
    assert data[18:22] == b"\xff\xff\xff\xff"


def test_bad_load_address_writes_nothing():
    out = io.BytesIO()
    with pytest.raises(LayoutError):
        convert_stream(io.BytesIO(b"abc"), out, load_address=1 << 32)
    assert out.getvalue() == b""


def test_convert_file_idempotent(tmp_path):
    src = tmp_path / "fw.bin"
    src.write_bytes(bytes(range(200)))
    a = tmp_path / "a.sim"
    b = tmp_path / "b.sim"

    ra = convert_file(src, a, load_address=4096)
    rb = convert_file(src, b, load_address=4096)

    assert a.read_bytes() == b.read_bytes()
    assert ra == rb
    assert ra.output_size == 231


def test_convert_file_overwrites_with_warning(tmp_path):
    src = tmp_path / "fw.bin"
    src.write_bytes(b"\x01\x02")
    out = tmp_path / "fw.sim"
    out.write_bytes(b"\xee" * 100)

    with pytest.warns(UserWarning, match="Overwriting"):
        convert_file(src, out)
    assert len(out.read_bytes()) == 33


def test_convert_file_missing_input(tmp_path):
    out = tmp_path / "fw.sim"
    with pytest.raises(OpenError) as ei:
        convert_file(tmp_path / "missing.bin", out)
    assert ei.value.code == "E_OPEN_INPUT"
    assert not out.exists()


def test_convert_file_unwritable_output(tmp_path):
    src = tmp_path / "fw.bin"
    src.write_bytes(b"\x00")
    with pytest.raises(OpenError) as ei:
        convert_file(src, tmp_path / "no_such_dir" / "fw.sim")
    assert ei.value.code == "E_OPEN_OUTPUT"


def test_convert_file_prints_checksum(tmp_path, capsys):
    src = tmp_path / "fw.bin"
    src.write_bytes(b"\x10\x20\x30")
    convert_file(src, tmp_path / "fw.sim")
    assert "Calculated checksum = 0xfffffe3a" in capsys.readouterr().out


def test_reused_output_stream_drops_stale_bytes():
    out = io.BytesIO()
    convert_stream(io.BytesIO(b"x" * 100), out, 0)
    result = convert_stream(io.BytesIO(b"\x10\x20\x30"), out, 0)

    data = out.getvalue()
    assert len(data) == 34
    assert result.output_size == 34
    assert data[29] == 0x03
    assert data == convert_bytes(b"\x10\x20\x30", 0)


def test_output_seek_failure_is_write_error():
    class NoSeek(io.BytesIO):
        def seek(self, *args):
            raise OSError(29, "Illegal seek")

    with pytest.raises(WriteError, match="cannot seek output"):
        write_header(NoSeek(), 3)
