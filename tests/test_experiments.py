import csv

import pytest

import experiments


def test_pack_bits_pads_final_byte():
    assert experiments.pack_bits("1") == (b"\x80", 7)
    assert experiments.pack_bits("00000001") == (b"\x01", 0)
    assert experiments.pack_bits("") == (b"", 0)


def test_unpack_bits_drops_padding():
    packed, pad = experiments.pack_bits("1011001")

    assert experiments.unpack_bits(packed, pad) == "1011001"


@pytest.mark.parametrize("name", sorted(experiments.GENERATOR_REGISTRY))
def test_generators_are_deterministic(name):
    first = experiments.generate_dataset(name, 200, seed=3)

    assert len(first) == 200
    assert first == experiments.generate_dataset(name, 200, seed=3)


def test_unknown_generator_raises():
    with pytest.raises(ValueError):
        experiments.generate_dataset("nope", 10, seed=0)


@pytest.mark.parametrize("pipeline", experiments.PIPELINES)
def test_run_one_round_trips(pipeline):
    text = experiments.gen_english_like(2000, seed=1)

    row = experiments.run_one(text, pipeline)

    assert row.correctness_ok == 1
    assert row.text_length == 2000
    assert row.unique_symbols == len(set(text))
    if pipeline == "packed":
        assert row.compressed_bytes == (row.compressed_bits + 7) // 8
    else:
        assert row.compressed_bytes == row.compressed_bits


def test_run_one_rejects_unknown_pipeline():
    with pytest.raises(ValueError):
        experiments.run_one("abc", "zip")


def test_main_writes_csv(tmp_path):
    code = experiments.main([
        "--outdir", str(tmp_path), "--runs", "1", "--size_kb", "1", "--max_kb", "1",
        "--generators", "uniform16,english_like", "--no_plots",
    ])

    assert code == 0
    with (tmp_path / "metrics.csv").open(newline="") as f:
        rows = list(csv.DictReader(f))
    assert rows and all(r["correctness_ok"] == "1" for r in rows)
    with (tmp_path / "summary.csv").open(newline="") as f:
        summary = list(csv.DictReader(f))
    assert all(float(r["correctness_ok_rate"]) == 1.0 for r in summary)


def test_plots_are_written(tmp_path):
    rows = experiments.run_experiments(["zipf64"], size=512, max_size=512, runs=1, seed=0)

    written = experiments.plot_distribution(rows, tmp_path) + experiments.plot_size_scaling(rows, tmp_path)

    assert written
    assert all(p.exists() for p in written)


def test_run_one_times_translation_separately_from_build():
    text = experiments.gen_english_like(200_000, seed=0)

    row = experiments.run_one(text, "text")

    assert row.correctness_ok == 1
    assert row.encode_ms > 0.01 * row.build_ms


@pytest.mark.parametrize("text, bits", [("", 0), ("zzzz", 4)])
def test_run_one_degenerate_texts(text, bits):
    for pipeline in experiments.PIPELINES:
        row = experiments.run_one(text, pipeline)
        assert row.correctness_ok == 1
        assert row.compressed_bits == bits
