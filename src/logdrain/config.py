from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


DEFAULT_DELIMITERS: Tuple[str, ...] = (" ", "=", ",", ":")
DEFAULT_SIM_THRESHOLD = 0.5
DEFAULT_PROGRESS_EVERY = 10_000


@dataclass(frozen=True)
class DrainConfig:
    """
    Knobs for the template miner.

    Defaults reproduce the reference behaviour. None of this is written into
    snapshots, so a snapshot mined with one config can be reloaded with another.
    """
    delimiters: Tuple[str, ...] = DEFAULT_DELIMITERS
    sim_threshold: float = DEFAULT_SIM_THRESHOLD
    progress_every: int = DEFAULT_PROGRESS_EVERY

    def __post_init__(self) -> None:
        if not self.delimiters:
            raise ValueError("delimiters cannot be empty")
        for d in self.delimiters:
            if len(d) != 1:
                raise ValueError(f"delimiter must be a single character, got {d!r}")
        if not 0.0 <= self.sim_threshold <= 1.0:
            raise ValueError(f"sim_threshold must be in [0, 1], got {self.sim_threshold}")
        if self.progress_every < 0:
            raise ValueError("progress_every cannot be negative")
