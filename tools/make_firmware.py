import random
import sys
from pathlib import Path

def generate_firmware(out_path: str, size: int, seed: int = 7800) -> Path:
    """Write ``size`` pseudo-random bytes. Same seed, same image."""
    rng = random.Random(seed)
    data = bytes(rng.randrange(256) for _ in range(size))
    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_bytes(data)
    print(f"GENERATED: {out} ({size} bytes)")
    return out

if __name__ == "__main__":
    # Usage:
    #   python tools/make_firmware.py OUT_FILE [SIZE] [--seed N]
    args = [a for a in sys.argv[1:] if a]

    seed = 7800
    if "--seed" in args:
        i = args.index("--seed")
        if i + 1 >= len(args):
            raise SystemExit("--seed requires a value")
        seed = int(args[i + 1])
        args = args[:i] + args[i + 2:]

    if not args:
        raise SystemExit("Usage: make_firmware.py OUT_FILE [SIZE] [--seed N]")

    size = int(args[1]) if len(args) > 1 else 4096
    generate_firmware(args[0], size, seed=seed)
