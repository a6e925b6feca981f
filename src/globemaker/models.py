"""Domain models shared across pipeline modules."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable


def normalize_code(value: Any) -> str | None:
    """Return an upper-cased country code, or None for missing/blank values."""
    if not isinstance(value, str):
        return None
    normalized = value.strip().upper()
    return normalized or None


def parse_code_list(raw: str | Iterable[str]) -> tuple[str, ...]:
    """Split a comma-separated code list, dropping blanks and duplicates."""
    items = raw.split(",") if isinstance(raw, str) else list(raw)
    codes: list[str] = []
    for item in items:
        code = normalize_code(item)
        if code is not None and code not in codes:
            codes.append(code)
    return tuple(codes)


@dataclass(frozen=True, slots=True)
class Feature:
    """One country or territory boundary decoded from the topology."""

    code: str | None
    is_secondary_territory: bool
    geometry: Any

    @property
    def is_main_territory(self) -> bool:
        return not self.is_secondary_territory


@dataclass(frozen=True, slots=True)
class RenderRequest:
    highlight_codes: frozenset[str]
    width: int
    height: int

    @classmethod
    def for_codes(cls, codes: Iterable[str], *, width: int, height: int) -> RenderRequest:
        return cls(highlight_codes=frozenset(parse_code_list(codes)), width=width, height=height)


@dataclass(frozen=True, slots=True)
class RenderedGlobe:
    """Output of one render: the SVG markup plus how it was centered."""

    svg: str
    rotation: tuple[float, float]
    missing_codes: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class RenderConfig:
    """Process-wide run settings resolved from the command line."""

    codes: tuple[str, ...]
    width: int
    height: int
    batch_mode: bool
    output_path: Path
    output_dir: Path
    dataset_path: Path
    config_path: Path | None = None
    verbose: bool = False
    log_file: Path | None = None

    def default_request(self) -> RenderRequest:
        return RenderRequest.for_codes(self.codes, width=self.width, height=self.height)

    def request_for(self, code: str) -> RenderRequest:
        return RenderRequest.for_codes((code,), width=self.width, height=self.height)
