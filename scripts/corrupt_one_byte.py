import sys
from pathlib import Path

def main():
    if len(sys.argv) != 2:
        print("Usage: corrupt_one_byte.py <file.sim>")
        raise SystemExit(2)

    p = Path(sys.argv[1])
    b = bytearray(p.read_bytes())
    # Header (14) + data record (12) + end marker (1) + checksum (4).
    if len(b) <= 31:
        print("File has no payload to corrupt.")
        raise SystemExit(2)

    # Flip the first payload byte. Sizes stay intact so only the checksum breaks.
    idx = 14 + 12
    b[idx] ^= 0x01
    p.write_bytes(bytes(b))
    print(f"Corrupted 1 byte at offset {idx} in {p}")

if __name__ == "__main__":
    main()
