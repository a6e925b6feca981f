"""Orthographic globe projection, hemisphere clipping and SVG path data."""

from __future__ import annotations

import math
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Iterable

import numpy as np
import shapely
from pyproj import Geod, Transformer
from shapely import affinity
from shapely.geometry import GeometryCollection, LineString, MultiLineString, Polygon, box
from shapely.ops import unary_union
from shapely.prepared import prep

CLIP_ANGLE_DEG = 90.0

_HORIZON_INSET_DEG = 0.5
_HORIZON_AZIMUTH_STEP_DEG = 0.25
_GRATICULE_PRECISION_DEG = 2.5
_GRATICULE_MINOR_LAT = 80.0
_PATH_DIGITS = 3

_WORLD = box(-180.0, -90.0, 180.0, 90.0)
_SPHERE = Geod(ellps="sphere")
_LONLAT_SPHERE = "+proj=longlat +R=1 +no_defs"

Bounds = tuple[float, float, float, float]


@dataclass(frozen=True, slots=True)
class GlobeProjection:
    """Orthographic view of the globe fitted to a canvas.

    `rotation` follows the (lambda, phi) convention of rotating the sphere, so
    the point shown at the canvas center is `(-rotation[0], -rotation[1])`.
    """

    scale: float
    translate: tuple[float, float]
    rotation: tuple[float, float] = (0.0, 0.0)

    @classmethod
    def fit(
        cls,
        width: int,
        height: int,
        rotation: tuple[float, float] = (0.0, 0.0),
    ) -> GlobeProjection:
        return cls(
            scale=(min(width, height) / 2) - 2,
            translate=(width / 2, height / 2),
            rotation=rotation,
        )

    @property
    def center(self) -> tuple[float, float]:
        return (0.0 - self.rotation[0], 0.0 - self.rotation[1])

    def project(self, geometry: Any) -> Any | None:
        """Clip a lon/lat geometry to the visible hemisphere and map it to canvas pixels."""
        if geometry is None or geometry.is_empty:
            return None
        if not geometry.is_valid:
            geometry = shapely.make_valid(geometry)
        center_lon, center_lat = self.center
        if _prepared_hemisphere(center_lon, center_lat).contains(geometry):
            clipped = geometry
        else:
            clipped = _same_dimension(
                geometry.intersection(visible_hemisphere(center_lon, center_lat)),
                geometry,
            )
        if clipped.is_empty:
            return None
        if shapely.get_dimensions(clipped) == 1:
            clipped = _merge_lines(clipped)
        projected = shapely.transform(
            clipped,
            _orthographic_transformer(center_lon, center_lat).transform,
            interleaved=False,
        )
        tx, ty = self.translate
        return affinity.affine_transform(projected, [self.scale, 0.0, 0.0, -self.scale, tx, ty])

    def path(self, geometry: Any) -> str:
        projected = self.project(geometry)
        return "" if projected is None else path_data(projected)

    def sphere_path(self) -> str:
        """Outline of the whole globe disc."""
        cx, cy = self.translate
        r = _fmt(self.scale)
        top = f"{_fmt(cx)},{_fmt(cy - self.scale)}"
        bottom = f"{_fmt(cx)},{_fmt(cy + self.scale)}"
        return f"M{top}A{r},{r},0,1,1,{bottom}A{r},{r},0,1,1,{top}Z"


@lru_cache(maxsize=64)
def visible_hemisphere(center_lon: float, center_lat: float) -> Any:
    """Return the lon/lat region facing a viewer above `(center_lon, center_lat)`.

    The horizon is traced as a geodesic circle slightly inside 90 degrees, so
    every clipped vertex has a finite orthographic image.
    """
    azimuths = np.arange(0.0, 360.0 + _HORIZON_AZIMUTH_STEP_DEG / 2, _HORIZON_AZIMUTH_STEP_DEG)
    count = len(azimuths)
    distance = math.radians(CLIP_ANGLE_DEG - _HORIZON_INSET_DEG) * _SPHERE.a
    lons, lats, _ = _SPHERE.fwd(
        np.full(count, float(center_lon)),
        np.full(count, float(center_lat)),
        azimuths,
        np.full(count, distance),
    )
    unwrapped = np.unwrap(np.asarray(lons, dtype=float), period=360.0)
    coords = list(zip(unwrapped.tolist(), np.asarray(lats, dtype=float).tolist()))

    # A horizon that encloses a pole wraps all the way round in longitude.
    if center_lat > _HORIZON_INSET_DEG:
        coords += [(coords[-1][0], 90.0), (coords[0][0], 90.0)]
    elif center_lat < -_HORIZON_INSET_DEG:
        coords += [(coords[-1][0], -90.0), (coords[0][0], -90.0)]

    cap = Polygon(coords)
    if not cap.is_valid:
        cap = shapely.make_valid(cap)
    pieces = [affinity.translate(cap, xoff=shift).intersection(_WORLD) for shift in (-360.0, 0.0, 360.0)]
    return unary_union(pieces)


@lru_cache(maxsize=64)
def _prepared_hemisphere(center_lon: float, center_lat: float) -> Any:
    return prep(visible_hemisphere(center_lon, center_lat))


@lru_cache(maxsize=64)
def _orthographic_transformer(center_lon: float, center_lat: float) -> Transformer:
    target = (
        f"+proj=ortho +lon_0={center_lon:.10f} +lat_0={center_lat:.10f} "
        "+R=1 +units=m +no_defs"
    )
    return Transformer.from_crs(_LONLAT_SPHERE, target, always_xy=True)


def _same_dimension(clipped: Any, source: Any) -> Any:
    """Drop slivers of lower dimension that an intersection can leave behind."""
    if clipped.geom_type != "GeometryCollection":
        return clipped
    dimension = shapely.get_dimensions(source)
    parts = [part for part in shapely.get_parts(clipped) if shapely.get_dimensions(part) == dimension]
    return GeometryCollection(parts)


def _merge_lines(geometry: Any) -> Any:
    """Rejoin line pieces the hemisphere clip left split at shared vertices."""
    lines = [part for part in shapely.get_parts(geometry) if part.geom_type == "LineString"]
    if not lines:
        return geometry
    return shapely.line_merge(MultiLineString(lines))


def graticule(step_deg: float = 30.0, precision_deg: float = _GRATICULE_PRECISION_DEG) -> MultiLineString:
    """Longitude/latitude grid lines in lon/lat.

    Meridians run between +/-80 degrees except the major ones every 90 degrees,
    which reach the poles. Parallels are drawn every `step_deg` within +/-80.
    """
    lines: list[LineString] = []
    minor_lons = {round(lon, 9) for lon in np.arange(-180.0, 180.0, step_deg).tolist()}
    major_lons = {-180.0, -90.0, 0.0, 90.0}
    for lon in sorted(minor_lons | major_lons):
        extent = 90.0 if lon in major_lons else _GRATICULE_MINOR_LAT
        lats = _inclusive_range(-extent, extent, precision_deg)
        lines.append(LineString([(lon, lat) for lat in lats]))

    first_lat = math.ceil(-_GRATICULE_MINOR_LAT / step_deg) * step_deg
    lons = _inclusive_range(-180.0, 180.0, precision_deg)
    for lat in np.arange(first_lat, _GRATICULE_MINOR_LAT + step_deg / 1e6, step_deg).tolist():
        lines.append(LineString([(lon, round(lat, 9)) for lon in lons]))
    return MultiLineString(lines)


def _inclusive_range(start: float, stop: float, step: float) -> list[float]:
    count = max(int(round((stop - start) / step)), 1) + 1
    return np.linspace(start, stop, count).tolist()


def geographic_bounds(geometries: Iterable[Any]) -> Bounds | None:
    """Bounding box `(west, south, east, north)` over lon/lat geometries.

    Longitude spans are merged on the circle and the widest empty gap is left
    out, so a box crossing the antimeridian comes back with `west > east`.
    """
    intervals: list[tuple[float, float]] = []
    south = math.inf
    north = -math.inf
    for geometry in geometries:
        if geometry is None or geometry.is_empty:
            continue
        for part in shapely.get_parts(geometry):
            minx, miny, maxx, maxy = part.bounds
            intervals.append((minx, maxx))
            south = min(south, miny)
            north = max(north, maxy)
    if not intervals:
        return None

    merged: list[tuple[float, float]] = []
    for start, end in sorted(intervals):
        if merged and start <= merged[-1][1]:
            merged[-1] = (merged[-1][0], max(merged[-1][1], end))
        else:
            merged.append((start, end))

    west, east = merged[0][0], merged[-1][1]
    widest_gap = merged[0][0] + 360.0 - merged[-1][1]
    for left, right in zip(merged, merged[1:]):
        gap = right[0] - left[1]
        if gap > widest_gap:
            widest_gap = gap
            west, east = right[0], left[1]
    return (west, south, east, north)


def bounds_center(bounds: Bounds) -> tuple[float, float]:
    west, south, east, north = bounds
    span = east - west
    if span < 0:
        span += 360.0
    lon = west + span / 2.0
    if lon > 180.0:
        lon -= 360.0
    return (lon, (south + north) / 2.0)


def path_data(geometry: Any) -> str:
    """Serialize projected geometry as SVG path data (`M`/`L`/`Z` commands)."""
    return "".join(_iter_path_segments(geometry))


def _iter_path_segments(geometry: Any) -> Iterable[str]:
    geom_type = getattr(geometry, "geom_type", "")
    if geom_type == "Polygon":
        yield _ring_path(geometry.exterior.coords, closed=True)
        for interior in geometry.interiors:
            yield _ring_path(interior.coords, closed=True)
    elif geom_type in ("LineString", "LinearRing"):
        yield _ring_path(geometry.coords, closed=geom_type == "LinearRing")
    elif geom_type in ("MultiPolygon", "MultiLineString", "GeometryCollection"):
        for part in geometry.geoms:
            yield from _iter_path_segments(part)


def _ring_path(coords: Any, *, closed: bool) -> str:
    points = [(float(x), float(y)) for x, y, *_ in coords]
    if closed and len(points) > 1 and points[0] == points[-1]:
        points = points[:-1]
    if not points:
        return ""
    head, *rest = points
    out = [f"M{_fmt(head[0])},{_fmt(head[1])}"]
    out.extend(f"L{_fmt(x)},{_fmt(y)}" for x, y in rest)
    if closed:
        out.append("Z")
    return "".join(out)


def _fmt(value: float) -> str:
    text = f"{value:.{_PATH_DIGITS}f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text
