import struct
from pathlib import Path
from sim_core.checksum import byte_sum, twos_complement
from sim_core.const import ERRORS
from sim_core.protocol import (
    MAGIC_SIM_FILE, REC_TYPE_DATA, REC_TYPE_END, CHECKSUM_FMT, CHECKSUM_LEN,
    CHUNK_SIZE, FILE_HEADER_LEN, PAYLOAD_OFFSET, OVERHEAD_LEN,
)
from sim_core.records import DataRecord, EndRecord, FileHeader

def _fail(code: str, **extra) -> dict:
    err = {"code": code, "message": ERRORS[code], **extra}
    return {"status": "FAIL", "error_count": 1, "errors": [err]}

def _sum_prefix(f, length: int) -> int:
    total = 0
    f.seek(0)
    remaining = length
    while remaining:
        chunk = f.read(min(CHUNK_SIZE, remaining))
        if not chunk:
            break
        total = byte_sum(chunk, total)
        remaining -= len(chunk)
    return total

def verify_sim(path: Path) -> dict:
    path = Path(path)
    file_size = path.stat().st_size
    if file_size < OVERHEAD_LEN:
        return _fail("E_TRUNCATED", path=str(path), size=file_size)

    with open(path, "rb") as f:
        head = f.read(PAYLOAD_OFFSET)
        header = FileHeader.decode(head)
        record = DataRecord.decode(head[FILE_HEADER_LEN:])

        if header.magic != MAGIC_SIM_FILE:
            return _fail("E_MAGIC", found=header.magic.hex())
        if not header.has_valid_reserved:
            return _fail("E_RESERVED", record="header")
        if record.rec_type != REC_TYPE_DATA:
            return _fail("E_RECORD_TYPE", found=record.rec_type)
        if not record.has_valid_reserved:
            return _fail("E_RESERVED", record="data")
        if header.payload_size != record.payload_size:
            return _fail("E_SIZE_MISMATCH", header=header.payload_size, record=record.payload_size)

        expected_size = OVERHEAD_LEN + record.payload_size
        if file_size != expected_size:
            return _fail("E_LENGTH", expected=expected_size, found=file_size)

        end_off = PAYLOAD_OFFSET + record.payload_size
        f.seek(end_off)
        end = EndRecord.decode(f.read(1))
        if end.rec_type != REC_TYPE_END:
            return _fail("E_END_MARKER", offset=end_off, found=end.rec_type)

        (stored,) = struct.unpack(CHECKSUM_FMT, f.read(CHECKSUM_LEN))
        computed = twos_complement(_sum_prefix(f, end_off + 1))

    if stored != computed:
        return _fail("E_CHECKSUM", expected=f"{computed:08x}", stored=f"{stored:08x}")

    return {
        "status": "PASS",
        "error_count": 0,
        "errors": [],
        "payload_size": record.payload_size,
        "load_address": record.load_address,
        "checksum": f"{stored:08x}",
    }
