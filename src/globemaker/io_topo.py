"""TopoJSON boundary dataset loading."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping

from .models import Feature, normalize_code

_LOGGER = logging.getLogger("globemaker.io_topo")

PREFERRED_COLLECTION = "countries"


class DatasetNotFound(FileNotFoundError):
    """The boundary dataset file does not exist."""


class EmptyTopology(ValueError):
    """The topology carries no named object collections."""


def select_collection_name(objects: Mapping[str, Any]) -> str:
    """Pick `countries` when present, otherwise the first collection in the file."""
    if not objects:
        raise EmptyTopology("No topology objects found in the TopoJSON")
    if PREFERRED_COLLECTION in objects:
        return PREFERRED_COLLECTION
    return next(iter(objects))


class TopologyRepository:
    """Thin wrapper around TopoJSON file access.

    Arc stitching and dequantization are left to GDAL's TopoJSON driver via
    GeoPandas; this class only decides which collection to read and maps
    rows onto `Feature` records.
    """

    CODE_PROPERTY = "iso3"
    SECONDARY_PROPERTY = "secondary_territory"

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def read_objects(self) -> Mapping[str, Any]:
        if not self.path.exists():
            raise DatasetNotFound(f"TopoJSON not found: {self.path}")
        with self.path.open("r", encoding="utf-8") as fh:
            raw = json.load(fh)
        objects = raw.get("objects") if isinstance(raw, Mapping) else None
        if not isinstance(objects, Mapping) or not objects:
            raise EmptyTopology(f"No topology objects found in {self.path}")
        return objects

    def collection_name(self) -> str:
        return select_collection_name(self.read_objects())

    def load_collection(self, layer: str) -> Any:
        """Load one object collection as a GeoDataFrame."""
        gpd = self._require_geopandas()
        return gpd.read_file(self.path, layer=layer)

    def load_features(self) -> list[Feature]:
        """Decode the selected collection into features, in dataset order."""
        layer = self.collection_name()
        _LOGGER.debug("Reading topology collection '%s' from %s", layer, self.path)
        frame = self.load_collection(layer)
        features: list[Feature] = []
        for row in frame.itertuples(index=False):
            row_dict = row._asdict()
            features.append(
                Feature(
                    code=normalize_code(row_dict.get(self.CODE_PROPERTY)),
                    is_secondary_territory=self._to_int_or_none(row_dict.get(self.SECONDARY_PROPERTY)) != 0,
                    geometry=row_dict.get("geometry"),
                )
            )
        return features

    @staticmethod
    def _to_int_or_none(value: Any) -> int | None:
        try:
            return int(value) if value is not None else None
        except (TypeError, ValueError):
            return None

    @staticmethod
    def _require_geopandas() -> Any:
        try:
            import geopandas as gpd
        except ImportError as exc:  # pragma: no cover
            raise RuntimeError("geopandas is required for TopoJSON data loading") from exc
        return gpd
