"""Tests for HeatmapConfig JSON persistence."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from tpsheatmap.errors import InvalidConfigurationError
from tpsheatmap.heatmap_config import SCHEMA_VERSION, HeatmapConfig
from tpsheatmap.options import HeatmapOptions


def test_load_missing_file_uses_defaults(tmp_path: Path) -> None:
    cfg = HeatmapConfig.load(config_path=tmp_path / "missing.json")
    assert cfg.get_options() == HeatmapOptions()
    assert not (tmp_path / "missing.json").exists()


def test_save_writes_schema_and_leaves_no_temp_file(tmp_path: Path) -> None:
    path = tmp_path / "sub" / "cfg.json"
    HeatmapConfig.load(config_path=path).save()
    assert json.loads(path.read_text())["schema_version"] == SCHEMA_VERSION
    assert [p.name for p in path.parent.iterdir()] == ["cfg.json"]


def test_save_then_load(tmp_path: Path) -> None:
    path = tmp_path / "cfg.json"
    cfg = HeatmapConfig.load(config_path=path)
    cfg.set_options(HeatmapOptions(day_width_columns=48, reduction="average"))
    cfg.save()

    loaded = HeatmapConfig.load(config_path=path).get_options()
    assert loaded.day_width_columns == 48
    assert loaded.reduction == "average"


def test_invalid_json_uses_defaults(tmp_path: Path) -> None:
    path = tmp_path / "cfg.json"
    path.write_text("{not json")
    assert HeatmapConfig.load(config_path=path).get_options() == HeatmapOptions()


def test_schema_mismatch_resets(tmp_path: Path) -> None:
    path = tmp_path / "cfg.json"
    path.write_text(json.dumps({"schema_version": 999, "options": {"day_height": 7}}))
    assert HeatmapConfig.load(config_path=path).get_options().day_height == HeatmapOptions().day_height

    path.write_text(json.dumps({"schema_version": "one", "options": {"day_height": 7}}))
    assert HeatmapConfig.load(config_path=path).get_options() == HeatmapOptions()


def test_out_of_range_options_fall_back_to_defaults(tmp_path: Path) -> None:
    path = tmp_path / "cfg.json"
    path.write_text(json.dumps({"schema_version": SCHEMA_VERSION, "options": {"day_height": 0}}))
    assert HeatmapConfig.load(config_path=path).get_options() == HeatmapOptions()


def test_set_options_rejects_invalid(tmp_path: Path) -> None:
    cfg = HeatmapConfig.load(config_path=tmp_path / "cfg.json")
    with pytest.raises(InvalidConfigurationError):
        cfg.set_options(HeatmapOptions(spacing=-1))


def test_unreadable_options_fall_back_to_defaults(tmp_path: Path) -> None:
    path = tmp_path / "cfg.json"
    path.write_text(json.dumps({"schema_version": SCHEMA_VERSION, "options": {"week_index_mode": "bogus"}}))
    assert HeatmapConfig.load(config_path=path).get_options() == HeatmapOptions()


def test_default_config_path_is_per_user() -> None:
    path = HeatmapConfig.default_config_path()
    assert path.name == "heatmap_config.json"
    assert "tpsheatmap" in str(path)
