# experiments.py

"""
Shannon-Fano Experiment: bit-string output vs packed output

Runs repeated compress/decompress experiments over synthetic text and records
timings, compressed sizes and round-trip correctness

Outputs (in --outdir):
  - metrics.csv     (raw row per run per configuration)
  - summary.csv     (grouped mean/stdev)
  - *.png           (charts)

How to run:
  python experiments.py --outdir results --runs 5
  python experiments.py --outdir results --runs 3 --size_kb 64 --max_kb 256
  python experiments.py --outdir results --generators uniform64,english_like --no_plots
"""

from __future__ import annotations

import argparse
import csv
import random
import statistics
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Tuple

import matplotlib.pyplot as plt

# Our implementations
import shannon_fano as sf
from knapsack import naive_knapsack_solve

PIPELINES = ("text", "packed")


# Utilities

def now_ns() -> int:
    return time.perf_counter_ns()

def ns_to_ms(ns: int) -> float:
    return ns / 1_000_000.0

def safe_mkdir(p: Path) -> None:
    p.mkdir(parents=True, exist_ok=True)


def pack_bits(bits: str) -> Tuple[bytes, int]:
    """
    Packs a '0'/'1' string into bytes
    Returns (packed_bytes, pad_bits) where pad_bits is number of 0 bits added at the end
    """
    out = bytearray()
    acc = 0
    acc_bits = 0

    for ch in bits:
        acc = (acc << 1) | (1 if ch == '1' else 0)
        acc_bits += 1
        if acc_bits == 8:
            out.append(acc & 0xFF)
            acc = 0
            acc_bits = 0

    pad_bits = 0
    if acc_bits != 0:
        pad_bits = 8 - acc_bits
        acc = acc << pad_bits
        out.append(acc & 0xFF)

    return bytes(out), pad_bits


def unpack_bits(packed: bytes, pad_bits: int) -> str:
    total_bits = len(packed) * 8 - pad_bits
    return ''.join(f"{byte:08b}" for byte in packed)[:total_bits]


# Synthetic dataset generators

def _sample_cdf(rng: random.Random, cdf: List[float]) -> int:
    r = rng.random()
    lo, hi = 0, len(cdf) - 1
    while lo < hi:
        mid = (lo + hi) // 2
        if r <= cdf[mid]:
            hi = mid
        else:
            lo = mid + 1
    return lo

def _cdf(weights: List[float]) -> List[float]:
    total = sum(weights)
    cdf = []
    acc = 0.0
    for w in weights:
        acc += w / total
        cdf.append(acc)
    return cdf

def gen_uniform(size: int, alphabet: int = 64, seed: int = 0) -> str:
    rng = random.Random(seed)
    return ''.join(chr(32 + rng.randrange(0, alphabet)) for _ in range(size))

def gen_repetitive(size: int, dominant: str = 'A', dom_frac: float = 0.90, seed: int = 0) -> str:
    rng = random.Random(seed)
    others = [chr(i) for i in range(32, 127) if chr(i) != dominant]
    return ''.join(dominant if rng.random() < dom_frac else rng.choice(others) for _ in range(size))

def gen_zipf_like(size: int, alphabet: int = 64, s: float = 1.2, seed: int = 0) -> str:
    rng = random.Random(seed)
    cdf = _cdf([1.0 / ((i + 1) ** s) for i in range(alphabet)])
    return ''.join(chr(32 + _sample_cdf(rng, cdf)) for _ in range(size))

def gen_english_like(size: int, seed: int = 0) -> str:
    rng = random.Random(seed)
    chars = (
        " etaoinshrdlcumwfgypbvkjxq"
        "ETAOINSHRDLCUMWFGYPBVKJXQ"
        "\n"
    )
    weights = []
    for ch in chars:
        if ch == ' ':
            weights.append(13.0)
        elif ch == '\n':
            weights.append(1.5)
        elif ch.lower() in "etaoinshrdlu":
            weights.append(6.0)
        elif ch.lower() in "cmfwgypbvk":
            weights.append(2.5)
        else:
            weights.append(1.2)
    cdf = _cdf(weights)
    return ''.join(chars[_sample_cdf(rng, cdf)] for _ in range(size))

GENERATOR_REGISTRY: Dict[str, Callable[[int, int], str]] = {
    "uniform64": lambda size, seed: gen_uniform(size, alphabet=64, seed=seed),
    "uniform16": lambda size, seed: gen_uniform(size, alphabet=16, seed=seed),
    "zipf64": lambda size, seed: gen_zipf_like(size, alphabet=64, s=1.2, seed=seed),
    "repetitive90": lambda size, seed: gen_repetitive(size, dominant='A', dom_frac=0.90, seed=seed),
    "english_like": lambda size, seed: gen_english_like(size, seed=seed),
}

def generate_dataset(name: str, size: int, seed: int) -> str:
    fn = GENERATOR_REGISTRY.get(name)
    if fn is None:
        raise ValueError(f"unknown generator {name!r}, expected one of {sorted(GENERATOR_REGISTRY)}")
    return fn(size, seed)


# Experiment runner

@dataclass
class MetricRow:
    exp_name: str
    dataset_name: str
    text_length: int
    run_id: int
    pipeline: str  # "text" or "packed"
    unique_symbols: int

    build_ms: float
    encode_ms: float
    decode_ms: float
    total_ms: float

    compressed_bits: int
    compressed_bytes: int
    bits_per_symbol: float
    correctness_ok: int  # 1 or 0


def run_one(text: str, pipeline: str, solve=naive_knapsack_solve) -> MetricRow:
    if pipeline not in PIPELINES:
        raise ValueError(f"pipeline must be one of {PIPELINES}")

    # Frequencies + tree + code tables
    t0 = now_ns()
    code_map, keys = sf.build_code_tables(text, solve)
    t1 = now_ns()
    build_ms = ns_to_ms(t1 - t0)

    # encode: translation, plus bit packing for "packed"
    t2 = now_ns()
    bits = sf.shannon_fano_encode(text, code_map)
    if pipeline == "packed":
        packed, pad_bits = pack_bits(bits)
        compressed_bytes = len(packed)
    else:
        compressed_bytes = len(bits)  # one character per bit
    t3 = now_ns()
    encode_ms = ns_to_ms(t3 - t2)

    t4 = now_ns()
    if pipeline == "packed":
        decoded = sf.decompress(unpack_bits(packed, pad_bits), keys)
    else:
        decoded = sf.decompress(bits, keys)
    t5 = now_ns()
    decode_ms = ns_to_ms(t5 - t4)

    return MetricRow(
        exp_name="",
        dataset_name="",
        text_length=len(text),
        run_id=0,
        pipeline=pipeline,
        unique_symbols=len(set(text)),
        build_ms=build_ms,
        encode_ms=encode_ms,
        decode_ms=decode_ms,
        total_ms=build_ms + encode_ms + decode_ms,
        compressed_bits=len(bits),
        compressed_bytes=compressed_bytes,
        bits_per_symbol=len(bits) / max(1, len(text)),
        correctness_ok=1 if decoded == text else 0,
    )


def write_csv(path: Path, rows: List[MetricRow]) -> None:
    fields = list(MetricRow.__dataclass_fields__.keys())
    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=fields)
        w.writeheader()
        for r in rows:
            w.writerow({k: getattr(r, k) for k in fields})


def mean_stdev(vals: List[float]) -> Tuple[float, float]:
    if len(vals) == 1:
        return vals[0], 0.0
    return statistics.mean(vals), statistics.stdev(vals)


def group_summary(rows: List[MetricRow], out_path: Path) -> None:
    """
    Group by exp_name, dataset_name, text_length, pipeline and compute mean/stdev
    """
    key_to: Dict[Tuple[str, str, int, str], List[MetricRow]] = {}
    for r in rows:
        key = (r.exp_name, r.dataset_name, r.text_length, r.pipeline)
        key_to.setdefault(key, []).append(r)

    measured = ["bits_per_symbol", "build_ms", "encode_ms", "decode_ms", "total_ms"]
    summary_fields = ["exp_name", "dataset_name", "text_length", "pipeline", "n_runs"]
    for m in measured:
        summary_fields += [f"{m}_mean", f"{m}_stdev"]
    summary_fields.append("correctness_ok_rate")

    with out_path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=summary_fields)
        w.writeheader()
        for key, items in sorted(key_to.items()):
            exp_name, dataset_name, length, pipeline = key
            row = {
                "exp_name": exp_name,
                "dataset_name": dataset_name,
                "text_length": length,
                "pipeline": pipeline,
                "n_runs": len(items),
                "correctness_ok_rate": sum(x.correctness_ok for x in items) / len(items),
            }
            for m in measured:
                row[f"{m}_mean"], row[f"{m}_stdev"] = mean_stdev([getattr(x, m) for x in items])
            w.writerow(row)


# Plotting

def plot_distribution(rows: List[MetricRow], outdir: Path) -> List[Path]:
    exp_rows = [r for r in rows if r.exp_name == "exp1_distribution"]
    if not exp_rows:
        return []

    datasets = sorted(set(r.dataset_name for r in exp_rows))
    x = list(range(len(datasets)))

    def mean_for(dataset: str, pipeline: str, field: str) -> float:
        vals = [getattr(r, field) for r in exp_rows if r.dataset_name == dataset and r.pipeline == pipeline]
        return statistics.mean(vals) if vals else float("nan")

    written = []
    for field, ylabel, name in (
        ("bits_per_symbol", "Code Bits per Symbol", "exp1_bits_per_symbol.png"),
        ("total_ms", "Total Time (ms) (build + encode + decode)", "exp1_total_time.png"),
    ):
        plt.figure()
        for p in PIPELINES:
            y = [mean_for(d, p, field) for d in datasets]
            plt.plot(x, y, marker="o", label=p)
        plt.xticks(x, datasets, rotation=20, ha="right")
        plt.ylabel(ylabel)
        plt.title(f"Experiment 1: {ylabel} by Distribution")
        plt.legend()
        plt.tight_layout()
        plt.savefig(outdir / name, dpi=200)
        plt.close()
        written.append(outdir / name)
    return written


def plot_size_scaling(rows: List[MetricRow], outdir: Path) -> List[Path]:
    exp_rows = [r for r in rows if r.exp_name == "exp2_size_scaling"]
    written = []

    for dist in sorted(set(r.dataset_name for r in exp_rows)):
        dist_rows = [r for r in exp_rows if r.dataset_name == dist]
        sizes = sorted(set(r.text_length for r in dist_rows))

        def mean_size(size: int, pipeline: str) -> float:
            vals = [r.total_ms for r in dist_rows if r.text_length == size and r.pipeline == pipeline]
            return statistics.mean(vals) if vals else float("nan")

        plt.figure()
        for p in PIPELINES:
            plt.plot(sizes, [mean_size(s, p) for s in sizes], marker="o", label=p)
        plt.xlabel("Text Length (characters)")
        plt.ylabel("Total Time (ms) (build + encode + decode)")
        plt.title(f"Experiment 2: Total Runtime vs Size ({dist})")
        plt.legend()
        plt.tight_layout()
        path = outdir / f"exp2_total_time_{dist}.png"
        plt.savefig(path, dpi=200)
        plt.close()
        written.append(path)
    return written


# Main

def parse_csv_list(s: str) -> List[str]:
    return [x.strip() for x in s.split(",") if x.strip()]

def run_experiments(generators: List[str], size: int, max_size: int, runs: int, seed: int) -> List[MetricRow]:
    rows: List[MetricRow] = []

    # Experiment 1: distributions (fixed size)
    for gen_name in generators:
        for run_id in range(1, runs + 1):
            text = generate_dataset(gen_name, size, seed + run_id)
            for pipeline in PIPELINES:
                row = run_one(text, pipeline)
                row.exp_name = "exp1_distribution"
                row.dataset_name = gen_name
                row.run_id = run_id
                rows.append(row)

    # Experiment 2: size scaling (powers of 2 up to max_size)
    sizes: List[int] = []
    s = max(1, size // 8)
    while s <= max_size:
        sizes.append(s)
        s *= 2

    for gen_name in generators:
        for length in sizes:
            for run_id in range(1, runs + 1):
                text = generate_dataset(gen_name, length, seed + 10_000 + length + run_id)
                for pipeline in PIPELINES:
                    row = run_one(text, pipeline)
                    row.exp_name = "exp2_size_scaling"
                    row.dataset_name = gen_name
                    row.run_id = run_id
                    rows.append(row)
    return rows

def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Benchmark Shannon-Fano compression on synthetic text.")
    ap.add_argument("--outdir", type=str, default="results", help="Output directory for CSV and plots")
    ap.add_argument("--runs", type=int, default=5, help="Repetitions per configuration (>=3 recommended for timing)")
    ap.add_argument("--seed", type=int, default=123, help="Base random seed")
    ap.add_argument("--size_kb", type=int, default=64, help="Experiment 1 fixed text size in KB")
    ap.add_argument("--max_kb", type=int, default=256, help="Experiment 2 max text size in KB")
    ap.add_argument("--generators", type=str, default="uniform64,zipf64,repetitive90,english_like",
                    help="Comma-separated dataset generator names")
    ap.add_argument("--no_plots", action="store_true", help="Only write CSV files")
    args = ap.parse_args(argv)

    outdir = Path(args.outdir)
    safe_mkdir(outdir)

    rows = run_experiments(
        parse_csv_list(args.generators),
        size=max(1, args.size_kb) * 1024,
        max_size=max(1, args.max_kb) * 1024,
        runs=max(1, args.runs),
        seed=args.seed,
    )

    metrics_csv = outdir / "metrics.csv"
    summary_csv = outdir / "summary.csv"
    write_csv(metrics_csv, rows)
    group_summary(rows, summary_csv)

    if not args.no_plots:
        plot_distribution(rows, outdir)
        plot_size_scaling(rows, outdir)
        print("Charts saved in:", outdir.resolve())

    ok_rate = sum(r.correctness_ok for r in rows) / max(1, len(rows))
    print(f"Wrote {len(rows)} rows to {metrics_csv}")
    print(f"Wrote grouped summary to {summary_csv}")
    print(f"Correctness rate across all runs: {ok_rate:.3f}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
