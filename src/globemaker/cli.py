"""CLI entrypoint for the globemaker SVG renderer."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Sequence

import yaml

from .config import AppConfig, load_config
from .io_topo import DatasetNotFound, EmptyTopology, TopologyRepository
from .models import RenderConfig, parse_code_list
from .render import GlobeRenderer
from .util import setup_logging
from .writer import format_write_lines, write_batch, write_single

LOGGER = logging.getLogger("globemaker.cli")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="globemaker",
        description="Render orthographic globe SVGs with selected countries highlighted.",
        allow_abbrev=False,
    )
    # Value options take nargs="?" so a dangling flag keeps its default instead of aborting.
    parser.add_argument(
        "--iso3",
        "-i",
        nargs="?",
        default=None,
        help="Comma-separated ISO3 codes to highlight (default: ETH).",
    )
    parser.add_argument("--width", "-w", nargs="?", default=None, help="Width of the output SVG (default: 800).")
    parser.add_argument("--height", nargs="?", default=None, help="Height of the output SVG (default: 800).")
    parser.add_argument(
        "--output",
        "-o",
        nargs="?",
        default=None,
        help="Output filename for single-image mode (default: <ISO3>.svg).",
    )
    parser.add_argument(
        "--all",
        dest="all_countries",
        action="store_true",
        help="Generate one SVG per main-territory country code.",
    )
    parser.add_argument(
        "--outdir",
        "-d",
        nargs="?",
        default=None,
        help="Directory for --all output (default: current directory).",
    )
    parser.add_argument("--dataset", nargs="?", default=None, help="Path to the TopoJSON boundary dataset.")
    parser.add_argument("--config", default=None, help="Optional YAML config with defaults and style.")
    parser.add_argument("--log-file", default=None, help="Also write logs to this file.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logs.")
    return parser


def parse_args(argv: Sequence[str] | None) -> tuple[argparse.Namespace, list[str]]:
    parser = _build_parser()
    args, unknown = parser.parse_known_args(argv)
    return args, list(unknown)


def _positive_int_or(raw: str | None, default: int) -> int:
    if raw is None:
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        return default
    return value if value > 0 else default


def resolve_config(args: argparse.Namespace, app_cfg: AppConfig) -> RenderConfig:
    """Fill every unset option: command line first, then config file, then built-ins."""
    codes = parse_code_list(args.iso3) if args.iso3 else ()
    if not codes:
        codes = app_cfg.defaults.iso3
    output_path = Path(args.output) if args.output else Path(f"{','.join(codes)}.svg")
    return RenderConfig(
        codes=codes,
        width=_positive_int_or(args.width, app_cfg.defaults.width),
        height=_positive_int_or(args.height, app_cfg.defaults.height),
        batch_mode=bool(args.all_countries),
        output_path=output_path,
        output_dir=Path(args.outdir) if args.outdir else Path("."),
        dataset_path=Path(args.dataset) if args.dataset else app_cfg.dataset.path,
        config_path=Path(args.config) if args.config else None,
        verbose=bool(args.verbose),
        log_file=Path(args.log_file) if args.log_file else None,
    )


def _run(cfg: RenderConfig, app_cfg: AppConfig) -> int:
    try:
        features = TopologyRepository(cfg.dataset_path).load_features()
    except (DatasetNotFound, EmptyTopology) as exc:
        LOGGER.error("%s", exc)
        return 1
    main_count = sum(1 for feature in features if feature.is_main_territory)
    LOGGER.info(
        "Loaded %d features (%d main territories) from %s",
        len(features),
        main_count,
        cfg.dataset_path,
    )

    renderer = GlobeRenderer(features, app_cfg.style)
    if cfg.batch_mode:
        report = write_batch(renderer, features, cfg)
    else:
        report = write_single(renderer, cfg)
    for line in format_write_lines(report):
        LOGGER.info(line)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args, unknown = parse_args(argv)
    setup_logging(Path(args.log_file) if args.log_file else None, verbose=bool(args.verbose))
    for item in unknown:
        LOGGER.warning("Unrecognized option: %s", item)

    try:
        app_cfg = load_config(args.config)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        LOGGER.error("Config load failed: %s", exc)
        return 1
    cfg = resolve_config(args, app_cfg)
    LOGGER.debug("Resolved run config: %s", cfg)
    return _run(cfg, app_cfg)


if __name__ == "__main__":
    raise SystemExit(main())
