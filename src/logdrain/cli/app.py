from __future__ import annotations

import argparse
import logging
import os
import time
from typing import List, Optional

from logdrain.api.export import CsvSink, ParseResults, write_lines
from logdrain.bench.datasets import toy_hdfs_log
from logdrain.codec.snapshot import SnapshotError
from logdrain.config import DEFAULT_PROGRESS_EVERY, DEFAULT_SIM_THRESHOLD, DrainConfig
from logdrain.mem.parser import DrainParser


logger = logging.getLogger(__name__)


def _read_lines(path: str, limit: Optional[int] = None) -> List[str]:
    """
    Splits on "\\n" only (a trailing "\\r" is dropped), so form feeds and other
    exotic separators stay inside their line.
    """
    with open(path, "r", encoding="utf-8", errors="replace", newline="") as f:
        text = f.read()

    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    lines = [ln[:-1] if ln.endswith("\r") else ln for ln in lines]

    if limit is not None:
        lines = lines[:limit]
    return lines


def _config_from_args(args: argparse.Namespace) -> DrainConfig:
    return DrainConfig(
        sim_threshold=getattr(args, "sim_threshold", DEFAULT_SIM_THRESHOLD),
        progress_every=getattr(args, "progress_every", DEFAULT_PROGRESS_EVERY),
    )


# ==========================
# Commands
# ==========================

def cmd_drain(args: argparse.Namespace) -> int:
    if not os.path.exists(args.input_path):
        raise SystemExit(f"input file not found: {args.input_path}")

    config = _config_from_args(args)
    parser = DrainParser(config=config)
    if args.load_model:
        parser.load(args.load_model)

    lines = _read_lines(args.input_path)
    total = len(lines)

    results = ParseResults()
    csv_sink = CsvSink(args.save_csv) if args.save_csv else None

    t0 = time.perf_counter()
    try:
        for line_num, line in enumerate(lines):
            out = parser.parse(line)
            results.add(out)
            if csv_sink is not None:
                csv_sink.add(out)

            if config.progress_every and line_num % config.progress_every == 0:
                speed = line_num / max(time.perf_counter() - t0, 1e-9)
                logger.info("[%d/%d] %.2f lines/s", line_num, total, speed)
    finally:
        if csv_sink is not None:
            csv_sink.close()

    if args.save_tokens:
        write_lines(args.save_tokens, results.tokens)

    if args.save_templates:
        write_lines(args.save_templates, results.labels)

    if args.save_model:
        parser.save(args.save_model)

    print(f"Number of templates: {parser.count_templates()}")
    return 0


def cmd_inspect(args: argparse.Namespace) -> int:
    parser = DrainParser.from_path(args.model)

    print("logdrain snapshot")
    print("------------------------------")
    print("model     :", args.model)
    print("next_id   :", parser.next_id)
    print("lengths   :", len(parser.clusters))
    print("clusters  :", parser.count_clusters())
    print("templates :", parser.count_templates())
    print("------------------------------")

    if args.show_templates:
        rows = sorted(parser.iter_templates(), key=lambda r: r[2].id)
        for length, sig, t in rows:
            print(f"{t.id}\t{t.count}\t{length}\t{sig}\t{' '.join(t.tokens)}")
    return 0


def cmd_bench(args: argparse.Namespace) -> int:
    from logdrain.bench.drain3_compare import compare

    if args.input_path:
        lines = _read_lines(args.input_path, limit=args.lines)
    else:
        lines = toy_hdfs_log(lines=args.lines, seed=args.seed)

    print("logdrain bench")
    print("------------------------------------------------------------")
    print(f"{'miner':<10} {'lines':>8} {'templates':>10} {'lines/s':>14}")
    for rep in compare(lines, _config_from_args(args)):
        print(f"{rep.name:<10} {rep.lines:>8} {rep.templates:>10} {rep.lines_per_sec:>14.2f}")
    print("------------------------------------------------------------")
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="logdrain", description="Incremental log template miner")
    sub = p.add_subparsers(dest="cmd", required=True)

    pd = sub.add_parser("drain", help="Mine templates from a log file")
    pd.add_argument("-i", "--input-path", required=True, help="Input log file")
    pd.add_argument("-t", "--save-tokens", help="Write template text per line")
    pd.add_argument("-s", "--save-templates", help="Write template id per line")
    pd.add_argument("-c", "--save-csv", help="Write ';'-delimited timestamp;template;label rows")
    pd.add_argument("--load-model", help="Start from this snapshot (.zst = compressed)")
    pd.add_argument("--save-model", help="Write the final snapshot here (.zst = compressed)")
    pd.add_argument("--sim-threshold", type=float, default=DEFAULT_SIM_THRESHOLD)
    pd.add_argument("--progress-every", type=int, default=DEFAULT_PROGRESS_EVERY,
                    help="Log throughput every N lines (0 = never)")
    pd.set_defaults(fn=cmd_drain)

    pi = sub.add_parser("inspect", help="Summarize a saved snapshot")
    pi.add_argument("-m", "--model", required=True, help="Snapshot file")
    pi.add_argument("--show-templates", action="store_true", help="List every template")
    pi.set_defaults(fn=cmd_inspect)

    pb = sub.add_parser("bench", help="Compare against drain3")
    pb.add_argument("-i", "--input-path", help="Log file (default: synthetic HDFS-like log)")
    pb.add_argument("--lines", type=int, default=20_000)
    pb.add_argument("--seed", type=int, default=7)
    pb.add_argument("--sim-threshold", type=float, default=DEFAULT_SIM_THRESHOLD)
    pb.set_defaults(fn=cmd_bench)

    return p


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return int(args.fn(args))
    except SnapshotError as e:
        raise SystemExit(f"invalid snapshot: {e}")
    except ValueError as e:
        raise SystemExit(f"error: {e}")
    except OSError as e:
        raise SystemExit(f"I/O error: {e}")


if __name__ == "__main__":
    raise SystemExit(main())
