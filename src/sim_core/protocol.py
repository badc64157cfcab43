"""IAR Simple Code protocol constants.

Single source of truth for on-disk magic values and record layouts.
Keep this file stable. Encoder and verifier must remain synchronized.
"""

# File magic
MAGIC_SIM_FILE = b"\x7fIAR"  # 7F 49 41 52

# Record types
REC_TYPE_DATA = 0x01
REC_TYPE_END = 0x03

# Reserved byte following the data record type
DATA_REC_FLAG = 0x01

# Header: [Magic(4) | Reserved(4) | PayloadSize(4) | Reserved(2)] = 14 bytes
FILE_HEADER_FMT = ">4s4sI2s"
FILE_HEADER_LEN = 14

# Data record: [Type(1) | Flag(1) | Reserved(2) | LoadAddr(4) | Size(4)] = 12 bytes
DATA_REC_FMT = ">BBHII"
DATA_REC_LEN = 12

# End record: [Type(1)]
END_REC_FMT = ">B"
END_REC_LEN = 1

# Checksum: big-endian u32 trailing the end record
CHECKSUM_FMT = ">I"
CHECKSUM_LEN = 4

# Absolute offset of the first payload byte
PAYLOAD_OFFSET = FILE_HEADER_LEN + DATA_REC_LEN

# Everything that is not payload
OVERHEAD_LEN = FILE_HEADER_LEN + DATA_REC_LEN + END_REC_LEN + CHECKSUM_LEN

U32_MAX = 0xFFFFFFFF

# Streaming copy / re-scan block size
CHUNK_SIZE = 64 * 1024  # 64KB
