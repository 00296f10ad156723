"""Build the lookup engine from a dataset and time lookups against it.

Usage:
    python scripts/benchmark_lookup.py --dataset data/browscap.csv --skip-rows 2
    python scripts/benchmark_lookup.py --dataset data/browscap.csv --user-agents uas.txt --rounds 3
"""

from __future__ import annotations

import argparse
import statistics
import time
from pathlib import Path

from uacaps.core.config import DatasetConfig
from uacaps.core.logging import setup_logging
from uacaps.engine.lookup import LookupEngine

SAMPLE_USER_AGENTS: list[str] = [
    "Mozilla/5.0 (iPhone; CPU iPhone OS 17_4 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.4 Mobile/15E148 Safari/604.1",
    "Mozilla/5.0 (iPad; CPU OS 16_6 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/16.6 Mobile/15E148 Safari/604.1",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.4 Safari/605.1.15",
    "Mozilla/5.0 (X11; Linux x86_64; rv:125.0) Gecko/20100101 Firefox/125.0",
    "Mozilla/5.0 (Linux; Android 14; Pixel 8) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Mobile Safari/537.36",
    "Mozilla/5.0 (compatible; Googlebot/2.1; +http://www.google.com/bot.html)",
    "curl/8.4.0",
    "completely unknown agent",
]


def read_user_agents(path: Path) -> list[str]:
    """One user agent per line; blank lines are skipped."""
    with path.open(encoding="utf-8") as fh:
        return [line.rstrip("\n") for line in fh if line.strip()]


def time_lookups(engine: LookupEngine, user_agents: list[str], rounds: int) -> list[float]:
    """Per-lookup latencies in milliseconds."""
    timings: list[float] = []
    for _ in range(rounds):
        for ua in user_agents:
            started = time.perf_counter()
            engine.lookup(ua)
            timings.append((time.perf_counter() - started) * 1000)
    return timings


def main() -> None:
    parser = argparse.ArgumentParser(description="Benchmark uacaps lookups")
    parser.add_argument("--dataset", required=True, help="Path to the pattern dataset CSV")
    parser.add_argument("--skip-rows", type=int, default=0, help="Preamble lines before the header")
    parser.add_argument("--delimiter", default=",", help="Field delimiter")
    parser.add_argument("--user-agents", default=None, help="File with one user agent per line")
    parser.add_argument("--rounds", type=int, default=1, help="Times to replay the user agents")
    parser.add_argument("--log-level", default="INFO", help="Logging level")
    args = parser.parse_args()

    setup_logging(args.log_level)
    config = DatasetConfig(delimiter=args.delimiter, skip_rows=args.skip_rows)

    started = time.perf_counter()
    engine = LookupEngine.initialize(args.dataset, config)
    print(f"Built engine with {len(engine)} entries in {time.perf_counter() - started:.2f}s")
    print(f"Index: {engine.stats().model_dump()}")

    user_agents = read_user_agents(Path(args.user_agents)) if args.user_agents else SAMPLE_USER_AGENTS
    timings = sorted(time_lookups(engine, user_agents, args.rounds))
    if not timings:
        print("No user agents to look up")
        return

    p95 = timings[min(len(timings) - 1, int(len(timings) * 0.95))]
    print(f"Lookups: {len(timings)}")
    print(f"  mean   {statistics.fmean(timings):.3f} ms")
    print(f"  median {statistics.median(timings):.3f} ms")
    print(f"  p95    {p95:.3f} ms")
    print(f"  max    {timings[-1]:.3f} ms")


if __name__ == "__main__":
    main()
