from __future__ import annotations

import csv
import os
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, TextIO

from logdrain.mem.cluster import ParseOutput


CSV_HEADER = ["timestamp", "template", "label"]
CSV_DELIMITER = ";"

# Label written for lines that produced no tokens; real ids start at 1.
NO_TEMPLATE = 0


@dataclass
class ParseResults:
    """
    Per-line results of a parse run, kept aligned with the input line numbers.
    """
    labels: List[int] = field(default_factory=list)
    tokens: List[str] = field(default_factory=list)

    def add(self, out: Optional[ParseOutput]) -> None:
        if out is None:
            self.labels.append(NO_TEMPLATE)
            self.tokens.append("")
        else:
            self.labels.append(out.template)
            self.tokens.append(" ".join(out.tokens))

    def __len__(self) -> int:
        return len(self.labels)


def _open_for_write(path: str) -> TextIO:
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    return open(path, "w", encoding="utf-8", newline="")


def write_lines(path: str, items: Iterable[object]) -> int:
    n = 0
    with _open_for_write(path) as f:
        for item in items:
            f.write(f"{item}\n")
            n += 1
    return n


class CsvSink:
    """
    `;`-delimited rows: timestamp;template;label, timestamp and label left empty.
    """

    def __init__(self, path: str):
        self.path = path
        self._f = _open_for_write(path)
        self._w = csv.writer(self._f, delimiter=CSV_DELIMITER, lineterminator="\n")
        self._w.writerow(CSV_HEADER)
        self.rows = 0

    def add(self, out: Optional[ParseOutput]) -> None:
        template = NO_TEMPLATE if out is None else out.template
        self._w.writerow(["", str(template), ""])
        self.rows += 1

    def close(self) -> None:
        self._f.close()

    def __enter__(self) -> "CsvSink":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
