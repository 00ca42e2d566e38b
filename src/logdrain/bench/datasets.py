import random
from typing import List


def toy_service_log() -> str:
    """
    Small hand-written log (kept for tests).
    """
    return (
        "081109 203615 148 INFO dfs.DataNode$PacketResponder: PacketResponder 1 for block blk_38865049064139660 terminating\n"
        "081109 203807 222 INFO dfs.DataNode$PacketResponder: PacketResponder 0 for block blk_-6952295868487656571 terminating\n"
        "User alice logged in from 10.0.0.1\n"
        "User bob logged in from 10.0.0.2\n"
        "\n"
        "Connection closed by peer\n"
        "Latency=0.032s status=200\n"
        "Latency=0.028s status=500\n"
    )


def toy_hdfs_log(lines: int = 2000, seed: int = 7) -> List[str]:
    """
    Synthetic HDFS-like lines: a handful of event shapes with random
    block ids, ports, sizes and hosts. Deterministic for a given seed.
    """
    rng = random.Random(seed)

    def ip() -> str:
        return f"10.250.{rng.randint(0, 20)}.{rng.randint(1, 254)}"

    def blk() -> str:
        sign = "-" if rng.random() < 0.5 else ""
        return f"blk_{sign}{rng.randint(10**17, 10**19)}"

    shapes = [
        lambda: f"INFO dfs.DataNode$DataXceiver: Receiving block {blk()} src: /{ip()}:{rng.randint(30000, 60000)} dest: /{ip()}:50010",
        lambda: f"INFO dfs.DataNode$PacketResponder: PacketResponder {rng.randint(0, 2)} for block {blk()} terminating",
        lambda: f"INFO dfs.DataNode$PacketResponder: Received block {blk()} of size {rng.randint(1000, 67108864)} from /{ip()}",
        lambda: f"INFO dfs.FSNamesystem: BLOCK* NameSystem.addStoredBlock: blockMap updated: {ip()}:50010 is added to {blk()} size {rng.randint(1000, 67108864)}",
        lambda: f"INFO dfs.FSNamesystem: BLOCK* NameSystem.allocateBlock: /user/root/rand/_temporary/part-{rng.randint(0, 999):05d} {blk()}",
        lambda: f"WARN dfs.DataNode$DataXceiver: {ip()}:50010:Got exception while serving {blk()} to /{ip()}:",
        lambda: f"INFO dfs.DataBlockScanner: Verification succeeded for {blk()}",
    ]

    out: List[str] = []
    for _ in range(lines):
        ts = f"0811{rng.randint(9, 11):02d} {rng.randint(0, 235959):06d} {rng.randint(1, 999)}"
        out.append(f"{ts} {rng.choice(shapes)()}")
    return out
