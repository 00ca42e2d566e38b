from __future__ import annotations

import time
from dataclasses import dataclass
from typing import List

from drain3 import TemplateMiner
from drain3.template_miner_config import TemplateMinerConfig

from logdrain.config import DrainConfig
from logdrain.mem.parser import DrainParser


@dataclass
class MinerReport:
    name: str
    lines: int
    templates: int
    seconds: float

    @property
    def lines_per_sec(self) -> float:
        return self.lines / max(self.seconds, 1e-9)


def build_drain3_miner() -> TemplateMiner:
    """
    Drain3 wants TemplateMiner(persistence_handler, config); no persistence here.
    """
    cfg = TemplateMinerConfig()
    cfg.profiling_enabled = False
    return TemplateMiner(None, cfg)


def run_logdrain(lines: List[str], config: DrainConfig | None = None) -> MinerReport:
    parser = DrainParser(config=config or DrainConfig())
    t0 = time.perf_counter()
    for ln in lines:
        parser.parse(ln)
    dt = time.perf_counter() - t0
    return MinerReport(name="logdrain", lines=len(lines), templates=parser.count_templates(), seconds=dt)


def run_drain3(lines: List[str]) -> MinerReport:
    miner = build_drain3_miner()
    t0 = time.perf_counter()
    for ln in lines:
        if ln.strip():
            miner.add_log_message(ln)
    dt = time.perf_counter() - t0
    return MinerReport(name="drain3", lines=len(lines), templates=len(miner.drain.clusters), seconds=dt)


def compare(lines: List[str], config: DrainConfig | None = None) -> List[MinerReport]:
    return [run_logdrain(lines, config), run_drain3(lines)]
