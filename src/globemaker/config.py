"""Typed configuration loader for the optional `globe.yaml` file."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, cast

import yaml

DEFAULT_DATASET = "wrl_polbnd_int_25m_a_unhcr.json"
DEFAULT_CODES = ("ETH",)
DEFAULT_WIDTH = 800
DEFAULT_HEIGHT = 800


def _mapping(value: Any, field_name: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ValueError(f"Expected mapping for '{field_name}'")
    return cast(Mapping[str, Any], value)


def _str(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Expected non-empty string for '{field_name}'")
    return value.strip()


def _positive_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValueError(f"Expected positive integer for '{field_name}'")
    return value


def _float(value: Any, field_name: str) -> float:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    raise ValueError(f"Expected float for '{field_name}'")


def _code_list(value: Any, field_name: str) -> tuple[str, ...]:
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, list):
        raise ValueError(f"Expected list for '{field_name}'")
    out: list[str] = []
    for idx, item in enumerate(value):
        out.append(_str(item, f"{field_name}[{idx}]").upper())
    if not out:
        raise ValueError(f"Expected at least one code for '{field_name}'")
    return tuple(out)


def _path_from_cfg(value: Any, field_name: str, root_dir: Path) -> Path:
    raw = _str(value, field_name)
    p = Path(raw)
    return p if p.is_absolute() else root_dir / p


@dataclass(frozen=True, slots=True)
class DatasetConfig:
    path: Path

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any], root_dir: Path) -> DatasetConfig:
        if raw.get("path") is None:
            return cls.default()
        return cls(path=_path_from_cfg(raw.get("path"), "dataset.path", root_dir))

    @classmethod
    def default(cls) -> DatasetConfig:
        return cls(path=Path(DEFAULT_DATASET))


@dataclass(frozen=True, slots=True)
class DefaultsConfig:
    """Fallbacks for options the command line leaves unset."""

    iso3: tuple[str, ...]
    width: int
    height: int

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> DefaultsConfig:
        return cls(
            iso3=_code_list(raw.get("iso3", list(DEFAULT_CODES)), "defaults.iso3"),
            width=_positive_int(raw.get("width", DEFAULT_WIDTH), "defaults.width"),
            height=_positive_int(raw.get("height", DEFAULT_HEIGHT), "defaults.height"),
        )

    @classmethod
    def default(cls) -> DefaultsConfig:
        return cls(iso3=DEFAULT_CODES, width=DEFAULT_WIDTH, height=DEFAULT_HEIGHT)


@dataclass(frozen=True, slots=True)
class StyleConfig:
    highlight_color: str
    base_color: str
    ocean_color: str
    graticule_color: str
    country_stroke_width: float
    graticule_stroke_width: float
    graticule_step_deg: float

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> StyleConfig:
        base = cls.default()
        step = _float(raw.get("graticule_step_deg", base.graticule_step_deg), "style.graticule_step_deg")
        if step <= 0 or step > 90:
            raise ValueError("style.graticule_step_deg must be in (0, 90]")
        country_stroke_width = _float(
            raw.get("country_stroke_width", base.country_stroke_width),
            "style.country_stroke_width",
        )
        graticule_stroke_width = _float(
            raw.get("graticule_stroke_width", base.graticule_stroke_width),
            "style.graticule_stroke_width",
        )
        if country_stroke_width < 0 or graticule_stroke_width < 0:
            raise ValueError("style stroke widths must be >= 0")
        return cls(
            highlight_color=_str(raw.get("highlight_color", base.highlight_color), "style.highlight_color"),
            base_color=_str(raw.get("base_color", base.base_color), "style.base_color"),
            ocean_color=_str(raw.get("ocean_color", base.ocean_color), "style.ocean_color"),
            graticule_color=_str(raw.get("graticule_color", base.graticule_color), "style.graticule_color"),
            country_stroke_width=country_stroke_width,
            graticule_stroke_width=graticule_stroke_width,
            graticule_step_deg=step,
        )

    @classmethod
    def default(cls) -> StyleConfig:
        return cls(
            highlight_color="#EF4A60",
            base_color="#D1CCCB",
            ocean_color="white",
            graticule_color="white",
            country_stroke_width=0.5,
            graticule_stroke_width=1.0,
            graticule_step_deg=30.0,
        )


@dataclass(frozen=True, slots=True)
class AppConfig:
    source_path: Path | None
    dataset: DatasetConfig
    defaults: DefaultsConfig
    style: StyleConfig

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any], source_path: Path) -> AppConfig:
        root_dir = source_path.parent.resolve()
        return cls(
            source_path=source_path.resolve(),
            dataset=DatasetConfig.from_mapping(_mapping(raw.get("dataset"), "dataset"), root_dir),
            defaults=DefaultsConfig.from_mapping(_mapping(raw.get("defaults"), "defaults")),
            style=StyleConfig.from_mapping(_mapping(raw.get("style"), "style")),
        )

    @classmethod
    def default(cls) -> AppConfig:
        return cls(
            source_path=None,
            dataset=DatasetConfig.default(),
            defaults=DefaultsConfig.default(),
            style=StyleConfig.default(),
        )


def load_config(path: str | Path | None) -> AppConfig:
    """Load the YAML config file into typed settings; None gives built-in defaults."""
    if path is None:
        return AppConfig.default()
    cfg_path = Path(path).resolve()
    if not cfg_path.exists():
        raise FileNotFoundError(f"Config file not found: {cfg_path}")
    with cfg_path.open("r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh)
    if raw is None:
        raw = {}
    if not isinstance(raw, Mapping):
        raise ValueError("Top-level config must be a YAML mapping")
    return AppConfig.from_mapping(cast(Mapping[str, Any], raw), cfg_path)
