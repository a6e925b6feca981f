from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Sequence

import pytest
from shapely.geometry import box

from globemaker.models import Feature

# (iso3, secondary_territory, west, south, size)
WORLD_ENTRIES: tuple[tuple[str, int, float, float, float], ...] = (
    ("CIV", 0, -8.0, 5.0, 3.0),
    ("GHA", 0, -3.0, 5.0, 3.0),
    ("ETH", 0, 36.0, 4.0, 8.0),
    ("FRA", 0, 2.0, 43.0, 5.0),
    ("FRA", 1, -54.0, 2.0, 2.0),
    ("NZL", 0, 170.0, -45.0, 5.0),
)


def square_ring(west: float, south: float, size: float) -> list[list[float]]:
    return [
        [west, south],
        [west + size, south],
        [west + size, south + size],
        [west, south + size],
        [west, south],
    ]


def topology_document(
    collections: dict[str, Sequence[tuple[Any, Any, float, float, float]]],
) -> dict[str, Any]:
    """Build an unquantized TopoJSON document with one closed arc per polygon."""
    arcs: list[list[list[float]]] = []
    objects: dict[str, Any] = {}
    for name, entries in collections.items():
        geometries = []
        for iso3, secondary, west, south, size in entries:
            arcs.append(square_ring(west, south, size))
            properties: dict[str, Any] = {}
            if iso3 is not None:
                properties["iso3"] = iso3
            if secondary is not None:
                properties["secondary_territory"] = secondary
            geometries.append(
                {"type": "Polygon", "arcs": [[len(arcs) - 1]], "properties": properties}
            )
        objects[name] = {"type": "GeometryCollection", "geometries": geometries}
    return {"type": "Topology", "objects": objects, "arcs": arcs}


def write_topology(path: Path, document: dict[str, Any]) -> Path:
    path.write_text(json.dumps(document), encoding="utf-8")
    return path


@pytest.fixture
def world_features() -> list[Feature]:
    return [
        Feature(code=iso3, is_secondary_territory=bool(secondary), geometry=box(w, s, w + size, s + size))
        for iso3, secondary, w, s, size in WORLD_ENTRIES
    ]


@pytest.fixture
def world_topology(tmp_path: Path) -> Path:
    return write_topology(
        tmp_path / "world.json",
        topology_document({"countries": WORLD_ENTRIES}),
    )
