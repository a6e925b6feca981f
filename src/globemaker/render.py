"""Orthographic globe SVG rendering."""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from typing import Any, Sequence

import svgwrite

from .config import StyleConfig
from .models import Feature, RenderedGlobe, RenderRequest
from .projection import GlobeProjection, bounds_center, geographic_bounds, graticule

_LOGGER = logging.getLogger("globemaker.render")

_IDENTITY_ROTATION = (0.0, 0.0)

# Set by svgwrite on the drawing root; the written files keep only width, height and xmlns.
_PROFILE_ATTRIBUTES = ("baseProfile", "version", "xmlns:ev", "xmlns:xlink")


class GlobeRenderer:
    """Deterministic renderer for one globe SVG per request.

    Holds the loaded features read-only; each `render` call builds a fresh
    projection and document, so renders never influence each other.
    """

    def __init__(self, features: Sequence[Feature], style: StyleConfig | None = None) -> None:
        self.features = tuple(features)
        self.style = style or StyleConfig.default()
        self._graticule = graticule(self.style.graticule_step_deg)

    def render(self, req: RenderRequest) -> RenderedGlobe:
        matched = [feature for feature in self.features if feature.code in req.highlight_codes]
        found = {feature.code for feature in matched}
        missing = tuple(sorted(req.highlight_codes - found))
        for code in missing:
            _LOGGER.warning("Highlight code not present in dataset: %s", code)

        rotation = centering_rotation(matched)
        projection = GlobeProjection.fit(req.width, req.height, rotation)
        dwg = self._new_drawing(req)

        dwg.add(dwg.path(d=projection.sphere_path(), fill=self.style.ocean_color))
        for feature in self.features:
            dwg.add(self._feature_path(dwg, projection, feature, highlighted=feature.code in found))
        dwg.add(
            dwg.path(
                d=projection.path(self._graticule),
                fill="none",
                stroke=self.style.graticule_color,
                stroke_width=_svg_number(self.style.graticule_stroke_width),
            )
        )
        return RenderedGlobe(svg=_serialize(dwg), rotation=rotation, missing_codes=missing)

    def _new_drawing(self, req: RenderRequest) -> Any:
        return svgwrite.Drawing(size=(req.width, req.height), profile="full", debug=False)

    def _feature_path(
        self,
        dwg: Any,
        projection: GlobeProjection,
        feature: Feature,
        *,
        highlighted: bool,
    ) -> Any:
        color = self.style.highlight_color if highlighted else self.style.base_color
        return dwg.path(
            d=projection.path(feature.geometry),
            class_="country",
            fill=color,
            stroke=color,
            stroke_width=_svg_number(self.style.country_stroke_width),
            opacity=1,
        )


def centering_rotation(features: Sequence[Feature]) -> tuple[float, float]:
    """Rotation that brings the middle of the features' bounding box to the canvas center."""
    bounds = geographic_bounds(feature.geometry for feature in features)
    if bounds is None:
        return _IDENTITY_ROTATION
    lon, lat = bounds_center(bounds)
    return (0.0 - lon, 0.0 - lat)


def render_globe_svg(
    features: Sequence[Feature],
    req: RenderRequest,
    style: StyleConfig | None = None,
) -> str:
    return GlobeRenderer(features, style).render(req).svg


def _svg_number(value: float) -> float | int:
    return int(value) if float(value).is_integer() else value


def _serialize(dwg: Any) -> str:
    """Markup string with the drawn paths only: no profile attributes, no empty `<defs>`."""
    root = dwg.get_xml()
    for name in _PROFILE_ATTRIBUTES:
        root.attrib.pop(name, None)
    for child in list(root):
        if child.tag == "defs" and len(child) == 0:
            root.remove(child)
    return ET.tostring(root, encoding="unicode")
