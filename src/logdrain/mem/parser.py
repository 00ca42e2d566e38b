from __future__ import annotations

import io
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Dict, Iterator, Optional, Tuple

from logdrain.codec.snapshot import Index, read_snapshot, write_snapshot, encode_snapshot
from logdrain.codec.snapshot_zstd import is_zstd_path, load_snapshot_zstd, save_snapshot_zstd
from logdrain.config import DrainConfig
from logdrain.mem.cluster import LogCluster, ParseOutput, Template
from logdrain.mem.tokenizer import signature, tokenize


logger = logging.getLogger(__name__)


@dataclass
class DrainParser:
    """
    Incremental template miner.

    Lines are routed by token count, then by first-token signature, to one
    LogCluster which either updates its closest template or creates a new one.
    Template ids come from a single counter so they are unique across clusters.

    Not thread-safe: one owner calls parse/save/load at a time.
    """
    next_id: int = 1
    clusters: Index = field(default_factory=dict)
    config: DrainConfig = field(default_factory=DrainConfig, compare=False, repr=False)

    def parse(self, line: str) -> Optional[ParseOutput]:
        """
        Returns None when the line has no tokens (blank / only delimiters).
        """
        tokens = list(tokenize(line, self.config.delimiters))
        if not tokens:
            return None

        length = len(tokens)
        group = self.clusters.get(length)
        if group is None:
            group = {}
            self.clusters[length] = group

        sig = signature(tokens[0])
        cluster = group.get(sig)
        if cluster is None:
            cluster = LogCluster(length=length)
            group[sig] = cluster

        out = cluster.process(tokens, self.next_id, self.config.sim_threshold)

        if out.template == self.next_id:
            self.next_id += 1

        return out

    def count_templates(self) -> int:
        return sum(len(c.templates) for group in self.clusters.values() for c in group.values())

    def count_clusters(self) -> int:
        return sum(len(group) for group in self.clusters.values())

    def iter_templates(self) -> Iterator[Tuple[int, str, Template]]:
        for length, group in self.clusters.items():
            for sig, cluster in group.items():
                for template in cluster.templates:
                    yield length, sig, template

    # ==========================
    # Persistence
    # ==========================

    def save_writer(self, writer: BinaryIO) -> int:
        return write_snapshot(writer, self.next_id, self.clusters)

    def load_reader(self, reader: BinaryIO) -> None:
        """
        Replaces this engine's state with the snapshot read from `reader`.
        On any failure the current state is left as it was.
        """
        next_id, clusters = read_snapshot(reader)
        self._swap_in(next_id, clusters)

    def to_bytes(self) -> bytes:
        return encode_snapshot(self.next_id, self.clusters)

    @classmethod
    def from_bytes(cls, data: bytes, config: Optional[DrainConfig] = None) -> "DrainParser":
        parser = cls(config=config or DrainConfig())
        parser.load_reader(io.BytesIO(data))
        return parser

    def save(self, path: Path | str) -> int:
        """
        Writes a snapshot file; `.zst` paths are zstd-compressed.
        Returns the number of bytes written.
        """
        if is_zstd_path(path):
            n = save_snapshot_zstd(path, self.next_id, self.clusters)
        else:
            # encode before opening so an unencodable engine leaves no empty file
            blob = self.to_bytes()
            with open(path, "wb") as f:
                f.write(blob)
            n = len(blob)
        logger.info("Saved drain parser to %s (%d templates, %d bytes)", path, self.count_templates(), n)
        return n

    def load(self, path: Path | str) -> None:
        t0 = time.perf_counter()
        logger.info("Loading drain parser from %s", path)

        if is_zstd_path(path):
            next_id, clusters = load_snapshot_zstd(path)
        else:
            with open(path, "rb") as f:
                next_id, clusters = read_snapshot(f)
        self._swap_in(next_id, clusters)

        dt = (time.perf_counter() - t0) * 1000.0
        logger.info("Loaded drain parser in %.2f ms (%d templates)", dt, self.count_templates())

    @classmethod
    def from_path(cls, path: Path | str, config: Optional[DrainConfig] = None) -> "DrainParser":
        parser = cls(config=config or DrainConfig())
        parser.load(path)
        return parser

    def _swap_in(self, next_id: int, clusters: Dict[int, Dict[str, LogCluster]]) -> None:
        self.next_id = next_id
        self.clusters = clusters
