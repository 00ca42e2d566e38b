from __future__ import annotations

import struct
from typing import BinaryIO, Dict, Tuple

from logdrain.mem.cluster import LogCluster, Template


# Snapshot layout (little-endian):
#   magic u32, version u32, next_id u32
#   { BEGIN_CLUSTER_GROUP u16, len u32
#     { BEGIN_EVENT_GROUP u16, sig_len u32, sig utf8
#       { BEGIN_TEMPLATE u16, id u32, count u32, ntok u32, (tok_len u32, tok utf8)* }*
#       END_TEMPLATE u16
#     }* END_EVENT_GROUP u16
#   }* END_CLUSTER_GROUP u16
DRAIN_MAGIC = 0x94067823
SNAPSHOT_VERSION = 1

BEGIN_CLUSTER_GROUP = 0x01
END_CLUSTER_GROUP = 0x02
BEGIN_EVENT_GROUP = 0x03
END_EVENT_GROUP = 0x04
BEGIN_TEMPLATE = 0x05
END_TEMPLATE = 0x06

_TAG_NAMES = {
    BEGIN_CLUSTER_GROUP: "BEGIN_CLUSTER_GROUP",
    END_CLUSTER_GROUP: "END_CLUSTER_GROUP",
    BEGIN_EVENT_GROUP: "BEGIN_EVENT_GROUP",
    END_EVENT_GROUP: "END_EVENT_GROUP",
    BEGIN_TEMPLATE: "BEGIN_TEMPLATE",
    END_TEMPLATE: "END_TEMPLATE",
}

_U16 = struct.Struct("<H")
_U32 = struct.Struct("<I")
_U32_MAX = 0xFFFFFFFF

Index = Dict[int, Dict[str, LogCluster]]


class SnapshotError(ValueError):
    """
    Raised when bytes are not a valid, compatible engine snapshot.
    I/O failures are not wrapped: they surface as OSError.
    """
    pass


class BadMagicError(SnapshotError):
    pass


class UnsupportedVersionError(SnapshotError):
    pass


class TruncatedSnapshotError(SnapshotError):
    pass


class CorruptSnapshotError(SnapshotError):
    pass


# ==========================
# Writer
# ==========================

def _u16(x: int) -> bytes:
    return _U16.pack(x)


def _u32(x: int, what: str = "value") -> bytes:
    x = int(x)
    if not 0 <= x <= _U32_MAX:
        raise ValueError(f"{what} {x} does not fit in a u32 snapshot field")
    return _U32.pack(x)


def _str(s: str) -> bytes:
    b = s.encode("utf-8")
    return _u32(len(b), "string length") + b


def encode_snapshot(next_id: int, index: Index) -> bytes:
    out = bytearray()
    out += _u32(DRAIN_MAGIC)
    out += _u32(SNAPSHOT_VERSION)
    out += _u32(next_id, "next_id")

    for length, group in index.items():
        out += _u16(BEGIN_CLUSTER_GROUP)
        out += _u32(length, "cluster group length")

        for sig, cluster in group.items():
            out += _u16(BEGIN_EVENT_GROUP)
            out += _str(sig)

            for template in cluster.templates:
                out += _u16(BEGIN_TEMPLATE)
                out += _u32(template.id, "template id")
                out += _u32(template.count, f"template {template.id} count")
                out += _u32(len(template.tokens))
                for tok in template.tokens:
                    out += _str(tok)

            out += _u16(END_TEMPLATE)

        out += _u16(END_EVENT_GROUP)

    out += _u16(END_CLUSTER_GROUP)
    return bytes(out)


def write_snapshot(writer: BinaryIO, next_id: int, index: Index) -> int:
    """
    Writes the full snapshot to `writer`. Returns the number of bytes written.
    """
    blob = encode_snapshot(next_id, index)
    writer.write(blob)
    return len(blob)


# ==========================
# Reader
# ==========================

class _Reader:
    def __init__(self, stream: BinaryIO):
        self.stream = stream
        self.offset = 0

    def read_exact(self, n: int, what: str) -> bytes:
        """
        Keeps reading until `n` bytes arrived; only an empty read means EOF.
        """
        buf = bytearray()
        while len(buf) < n:
            chunk = self.stream.read(n - len(buf))
            if not chunk:
                raise TruncatedSnapshotError(
                    f"snapshot truncated at byte {self.offset + len(buf)}: "
                    f"needed {n} bytes for {what}, got {len(buf)}"
                )
            buf += chunk
        self.offset += n
        return bytes(buf)

    def u16(self, what: str) -> int:
        return _U16.unpack(self.read_exact(2, what))[0]

    def u32(self, what: str) -> int:
        return _U32.unpack(self.read_exact(4, what))[0]

    def string(self, what: str) -> str:
        n = self.u32(f"{what} length")
        start = self.offset
        raw = self.read_exact(n, what)
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise CorruptSnapshotError(f"invalid UTF-8 in {what} at byte {start}: {e.reason}") from e

    def tag(self, expected_begin: int, expected_end: int) -> bool:
        """
        True for the begin tag, False for the end tag, error otherwise.
        """
        at = self.offset
        t = self.u16("tag")
        if t == expected_begin:
            return True
        if t == expected_end:
            return False
        raise CorruptSnapshotError(
            f"unexpected tag 0x{t:04x} at byte {at}: expected "
            f"{_TAG_NAMES[expected_begin]} or {_TAG_NAMES[expected_end]}"
        )


def read_snapshot(stream: BinaryIO) -> Tuple[int, Index]:
    """
    Parses one snapshot from `stream` into (next_id, index).

    Nothing is returned unless the whole snapshot parsed and validated, so a
    caller can swap the result in atomically. Bytes after the final
    END_CLUSTER_GROUP tag are not consumed.
    """
    r = _Reader(stream)

    magic = r.u32("magic")
    if magic != DRAIN_MAGIC:
        raise BadMagicError(f"bad snapshot magic: 0x{magic:08x} (expected 0x{DRAIN_MAGIC:08x})")

    version = r.u32("version")
    if version != SNAPSHOT_VERSION:
        raise UnsupportedVersionError(
            f"unsupported snapshot version: {version} (expected {SNAPSHOT_VERSION})"
        )

    next_id = r.u32("next_id")
    index: Index = {}
    max_id = 0

    while r.tag(BEGIN_CLUSTER_GROUP, END_CLUSTER_GROUP):
        length = r.u32("cluster group length")
        if length in index:
            raise CorruptSnapshotError(f"duplicate cluster group for length {length}")
        group: Dict[str, LogCluster] = {}

        while r.tag(BEGIN_EVENT_GROUP, END_EVENT_GROUP):
            sig = r.string("event signature")
            if sig in group:
                raise CorruptSnapshotError(f"duplicate signature {sig!r} in length {length} group")
            cluster = LogCluster(length=length)

            while r.tag(BEGIN_TEMPLATE, END_TEMPLATE):
                tid = r.u32("template id")
                count = r.u32("template count")
                if count == 0:
                    raise CorruptSnapshotError(f"template {tid} has an occurrence count of 0")
                ntok = r.u32("template token count")
                if ntok != length:
                    raise CorruptSnapshotError(
                        f"template {tid} has {ntok} tokens in a length {length} group"
                    )
                tokens = [r.string("template token") for _ in range(ntok)]
                cluster.templates.append(Template(id=tid, tokens=tokens, count=count))
                max_id = max(max_id, tid)

            group[sig] = cluster

        index[length] = group

    if max_id and next_id <= max_id:
        raise CorruptSnapshotError(f"next_id {next_id} does not exceed highest template id {max_id}")

    return next_id, index
