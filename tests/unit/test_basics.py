from pathlib import Path

from scripts import generate_dataset
from weldcalc import config
from weldcalc.engine.catalog import PipeCatalog
from weldcalc.infrastructure.dataset import load_dataset


def test_get_settings_defaults(monkeypatch):
    for name in ("WELDCALC_DATASET", "WELDCALC_HISTORY", "WELDCALC_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    config.get_settings.cache_clear()
    try:
        settings = config.get_settings()
    finally:
        config.get_settings.cache_clear()

    assert settings.dataset_path == Path("data/db.txt")
    assert settings.history_key == "pipeCalculations"
    assert settings.history_path.name == "store.json"
    assert settings.dataset_read_attempts > 0
    assert settings.columns.nominal_size == "N-SIZE"
    assert settings.log_level == "WARNING"


def test_settings_read_prefixed_environment(monkeypatch, tmp_path: Path):
    monkeypatch.setenv("WELDCALC_DATASET", str(tmp_path / "pipes.txt"))
    monkeypatch.setenv("WELDCALC_LOG_JSON", "true")

    settings = config.Settings()

    assert settings.dataset_path == tmp_path / "pipes.txt"
    assert settings.log_json is True


def test_generate_dataset_output_loads(tmp_path: Path):
    tsv_path = tmp_path / "generated.txt"

    written = generate_dataset._generate_rows_tsv(tsv_path, rows=80, seed=123)

    records = load_dataset(tsv_path, backoff=0)
    assert written == len(records) == 80
    catalog = PipeCatalog(records)
    assert catalog.distinct_joint_types() == ["BW", "SW"]
    assert catalog.distinct_sizes("BW")[:3] == ["0.5", "0.75", "1"]


def test_generate_dataset_is_deterministic(tmp_path: Path):
    first, second = tmp_path / "a.txt", tmp_path / "b.txt"

    generate_dataset._generate_rows_tsv(first, rows=10, seed=7)
    generate_dataset._generate_rows_tsv(second, rows=10, seed=7)

    assert first.read_text(encoding="utf-8") == second.read_text(encoding="utf-8")
