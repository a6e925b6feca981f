"""Single-image and batch SVG output."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from .models import Feature, RenderConfig, RenderedGlobe
from .render import GlobeRenderer
from .util import ensure_directory, write_text

_LOGGER = logging.getLogger("globemaker.writer")


@dataclass(slots=True)
class WriteReport:
    written: list[Path] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    infos: list[str] = field(default_factory=list)

    def add_written(self, path: Path) -> None:
        self.written.append(path)
        self.infos.append(f"Written: {path}")

    def add_warning(self, msg: str) -> None:
        self.warnings.append(msg)

    def add_info(self, msg: str) -> None:
        self.infos.append(msg)


def write_single(renderer: GlobeRenderer, config: RenderConfig) -> WriteReport:
    """Render every configured code into one image at `config.output_path`."""
    report = WriteReport()
    request = config.default_request()
    rendered = renderer.render(request)
    _record_missing_codes(report, rendered, requested=len(request.highlight_codes))
    write_text(config.output_path, rendered.svg)
    report.add_written(config.output_path)
    return report


def write_batch(
    renderer: GlobeRenderer,
    features: Sequence[Feature],
    config: RenderConfig,
) -> WriteReport:
    """Write `<code>.svg` for each main-territory feature, in dataset order."""
    report = WriteReport()
    output_dir = config.output_dir
    if ensure_directory(output_dir):
        report.add_info(f"Created directory: {output_dir}")

    main_features = [feature for feature in features if feature.is_main_territory]
    for idx, feature in enumerate(main_features, start=1):
        if feature.code is None:
            report.add_warning(f"Skipped main-territory feature #{idx} without a country code.")
            continue
        rendered = renderer.render(config.request_for(feature.code))
        path = output_dir / f"{feature.code}.svg"
        write_text(path, rendered.svg)
        _LOGGER.debug("(%d/%d) wrote %s", idx, len(main_features), path)
        report.add_written(path)
    report.add_info(f"Batch summary: {len(report.written)} of {len(main_features)} main-territory features written.")
    return report


def format_write_lines(report: WriteReport) -> Sequence[str]:
    lines: list[str] = []
    lines.extend(f"[INFO] {msg}" for msg in report.infos)
    lines.extend(f"[WARN] {msg}" for msg in report.warnings)
    return lines


def _record_missing_codes(report: WriteReport, rendered: RenderedGlobe, *, requested: int) -> None:
    for code in rendered.missing_codes:
        report.add_warning(f"iso3 code not found: {code}")
    if rendered.missing_codes and len(rendered.missing_codes) == requested:
        report.add_info("No highlighted feature found; globe left at the default center.")
