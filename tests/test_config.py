from __future__ import annotations

from pathlib import Path

import pytest

from globemaker.config import DEFAULT_DATASET, AppConfig, StyleConfig, load_config


def test_no_config_path_gives_builtin_defaults():
    cfg = load_config(None)
    assert cfg == AppConfig.default()
    assert cfg.dataset.path == Path(DEFAULT_DATASET)
    assert cfg.defaults.iso3 == ("ETH",)
    assert (cfg.defaults.width, cfg.defaults.height) == (800, 800)
    assert cfg.style.highlight_color == "#EF4A60"
    assert cfg.style.graticule_step_deg == 30.0


def test_partial_config_keeps_other_defaults(tmp_path):
    path = tmp_path / "globe.yaml"
    path.write_text(
        "dataset:\n  path: data/world.json\n"
        "defaults:\n  iso3: [civ, gha]\n  width: 640\n"
        "style:\n  highlight_color: '#112233'\n",
        encoding="utf-8",
    )
    cfg = load_config(path)

    assert cfg.source_path == path.resolve()
    assert cfg.dataset.path == tmp_path.resolve() / "data" / "world.json"
    assert cfg.defaults.iso3 == ("CIV", "GHA")
    assert cfg.defaults.width == 640
    assert cfg.defaults.height == 800
    assert cfg.style.highlight_color == "#112233"
    assert cfg.style.base_color == StyleConfig.default().base_color


def test_empty_config_file_is_allowed(tmp_path):
    path = tmp_path / "globe.yaml"
    path.write_text("", encoding="utf-8")
    cfg = load_config(path)
    assert cfg.style == StyleConfig.default()
    assert cfg.defaults == AppConfig.default().defaults


def test_missing_config_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml")


@pytest.mark.parametrize(
    "body",
    [
        "- just\n- a list\n",
        "defaults:\n  width: wide\n",
        "defaults:\n  width: 0\n",
        "style:\n  graticule_step_deg: 0\n",
        "style:\n  country_stroke_width: -1\n",
        "dataset: nope\n",
    ],
)
def test_invalid_config_values_raise(tmp_path, body):
    path = tmp_path / "globe.yaml"
    path.write_text(body, encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(path)
