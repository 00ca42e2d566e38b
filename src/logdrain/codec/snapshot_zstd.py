from __future__ import annotations

from pathlib import Path
from typing import Tuple

import zstandard as zstd

from logdrain.codec.snapshot import (
    BadMagicError,
    CorruptSnapshotError,
    Index,
    encode_snapshot,
    read_snapshot,
)


ZSTD_FRAME_MAGIC = b"\x28\xb5\x2f\xfd"


def is_zstd_path(path: Path | str) -> bool:
    return str(path).endswith(".zst")


def sniff_magic(path: Path) -> bytes:
    with path.open("rb") as f:
        return f.read(4)


def save_snapshot_zstd(path: Path | str, next_id: int, index: Index, level: int = 10) -> int:
    """
    Same snapshot bytes, wrapped in a single zstd frame.
    Returns the compressed size.
    """
    raw = encode_snapshot(next_id, index)
    comp = zstd.ZstdCompressor(level=level).compress(raw)
    Path(path).write_bytes(comp)
    return len(comp)


def load_snapshot_zstd(path: Path | str) -> Tuple[int, Index]:
    p = Path(path)
    magic = sniff_magic(p)
    if magic != ZSTD_FRAME_MAGIC:
        raise BadMagicError(f"{p} is not a zstd frame (magic {magic!r})")

    # streamed, so frames without a recorded content size decode too
    with p.open("rb") as f:
        try:
            with zstd.ZstdDecompressor().stream_reader(f) as reader:
                return read_snapshot(reader)
        except zstd.ZstdError as e:
            raise CorruptSnapshotError(f"zstd frame in {p} could not be decompressed: {e}") from e
