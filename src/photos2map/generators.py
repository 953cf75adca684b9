import html
import logging
from pathlib import Path
from typing import Iterable, Optional

import folium
import gpxpy
import gpxpy.gpx

from .config import ConfigManager
from .constants import (
    DEFAULT_OUTPUT_DIR,
    GPX_CREATOR,
    GPX_FILENAME,
    GPX_VERSION,
    MAP_FILENAME,
    RIPPLE_SIZE,
    Messages,
)
from .exceptions import OutputWriteError, RenderError
from .models import GeoPoint, MapSettings

logger = logging.getLogger(__name__)


def _escape_label(text: str) -> str:
    """HTML-escapes a label that folium places inside a JS template literal."""
    escaped = html.escape(text)
    for char, entity in (("\\", "&#92;"), ("`", "&#96;"), ("$", "&#36;")):
        escaped = escaped.replace(char, entity)
    return escaped


def _write_text(path: Path, text: str) -> Path:
    """Writes a fully rendered document, replacing any existing file."""
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(text)
    except OSError as e:
        raise OutputWriteError(path, e) from e
    return path


class GpxReportGenerator:
    """Collects GeoPoints as GPX 1.1 waypoints.

    The document carries no timestamps, so the same points always render to
    the same bytes.
    """

    def __init__(self, creator: str = GPX_CREATOR):
        self.gpx = gpxpy.gpx.GPX()
        self.gpx.creator = creator

    def add_point(self, point: GeoPoint) -> None:
        self.gpx.waypoints.append(
            gpxpy.gpx.GPXWaypoint(latitude=point.latitude, longitude=point.longitude, name=point.name)
        )

    def render(self) -> str:
        try:
            return self.gpx.to_xml(version=GPX_VERSION)
        except Exception as e:
            raise RenderError("GPX", e) from e

    def save(self, path) -> Path:
        return _write_text(path, self.render())


class MapReportGenerator:
    """
    Builds a standalone Leaflet map (via folium) with one pulsing point per photo.
    The base-map region and theme come from MapSettings, never from the data.
    """

    def __init__(self, settings: Optional[MapSettings] = None):
        self.settings = settings or ConfigManager.load_map_settings({})
        s = self.settings

        self.map = folium.Map(location=list(s.center), zoom_start=s.zoom, tiles=s.tiles)
        root = self.map.get_root()
        root.header.add_child(folium.Element(self._ripple_css()))
        root.html.add_child(
            folium.Element(f'<h3 class="photos2map-title">{html.escape(s.title)}</h3>')
        )

    def _ripple_css(self) -> str:
        s = self.settings
        # "fill" paints the expanding ring solid, anything else draws its outline
        if s.ripple_brush == "fill":
            ring = f"background: {s.color};"
        else:
            ring = f"border: 1px solid {s.color};"
        return f"""
        <style>
            .photos2map-title {{
                position: absolute; top: 8px; left: 50px; z-index: 1000; margin: 0;
                font-family: sans-serif; background: rgba(255, 255, 255, 0.8); padding: 2px 8px;
            }}
            .photos2map-ripple {{
                position: relative; width: {RIPPLE_SIZE}px; height: {RIPPLE_SIZE}px;
                border-radius: 50%; background: {s.color};
            }}
            .photos2map-ripple::after {{
                content: ""; position: absolute; top: 0; left: 0; right: 0; bottom: 0;
                border-radius: 50%; box-sizing: border-box; {ring}
                animation: photos2map-ripple {s.ripple_period}s ease-out infinite;
            }}
            @keyframes photos2map-ripple {{
                from {{ transform: scale(1); opacity: 0.9; }}
                to {{ transform: scale({s.ripple_scale}); opacity: 0; }}
            }}
        </style>
        """

    def add_point(self, point: GeoPoint) -> None:
        name = _escape_label(point.name)
        folium.Marker(
            location=[point.latitude, point.longitude],
            tooltip=name,
            popup=folium.Popup(name),
            icon=folium.DivIcon(
                html='<div class="photos2map-ripple"></div>',
                icon_size=(RIPPLE_SIZE, RIPPLE_SIZE),
                icon_anchor=(RIPPLE_SIZE // 2, RIPPLE_SIZE // 2),
            ),
        ).add_to(self.map)

    def render(self) -> str:
        try:
            return self.map.get_root().render()
        except Exception as e:
            raise RenderError("HTML map", e) from e

    def save(self, path) -> Path:
        return _write_text(path, self.render())


def generate_gpx(points: Iterable[GeoPoint], output_path=Path(DEFAULT_OUTPUT_DIR) / GPX_FILENAME) -> Path:
    """Writes ``points`` as GPX waypoints to ``output_path`` (overwriting)."""
    gpx_gen = GpxReportGenerator()
    for point in points:
        gpx_gen.add_point(point)
    path = gpx_gen.save(output_path)
    logger.info(f"{Messages.GPX_DONE} ({path})")
    return path


def generate_map(
    points: Iterable[GeoPoint],
    output_path=Path(DEFAULT_OUTPUT_DIR) / MAP_FILENAME,
    settings: Optional[MapSettings] = None,
) -> Path:
    """Writes ``points`` as an interactive HTML map to ``output_path`` (overwriting)."""
    map_gen = MapReportGenerator(settings)
    for point in points:
        map_gen.add_point(point)
    path = map_gen.save(output_path)
    logger.info(f"{Messages.MAP_DONE} ({path})")
    return path
