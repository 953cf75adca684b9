import pytest
from unittest.mock import patch
import sys
import os
import xml.etree.ElementTree as ET

import gpxpy

# Add src to path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))

from photos2map.config import ConfigManager
from photos2map.exceptions import OutputWriteError, RenderError
from photos2map.generators import (
    GpxReportGenerator,
    MapReportGenerator,
    generate_gpx,
    generate_map,
)
from photos2map.models import GeoPoint

GPX_NS = {"gpx": "http://www.topografix.com/GPX/1/1"}


@pytest.fixture
def points():
    return [
        GeoPoint(name="Image1", longitude=-0.1276, latitude=51.5074),
        GeoPoint(name="Image2", longitude=2.3522, latitude=48.8566),
    ]


class TestGpxReportGenerator:
    def test_waypoints_match_points(self, points, tmp_path):
        path = generate_gpx(points, tmp_path / "output.gpx")

        root = ET.parse(path).getroot()
        wpts = root.findall("gpx:wpt", GPX_NS)
        assert [(w.get("lat"), w.get("lon")) for w in wpts] == [
            ("51.5074", "-0.1276"),
            ("48.8566", "2.3522"),
        ]
        assert [w.find("gpx:name", GPX_NS).text for w in wpts] == ["Image1", "Image2"]

    def test_document_header(self, points, tmp_path):
        path = generate_gpx(points, tmp_path / "output.gpx")

        parsed = gpxpy.parse(path.read_text(encoding="utf-8"))
        assert parsed.version == "1.1"
        assert parsed.creator == "photos2map"
        assert [w.name for w in parsed.waypoints] == ["Image1", "Image2"]

    def test_render_is_pure(self, points, tmp_path):
        first = generate_gpx(points, tmp_path / "first.gpx").read_bytes()
        second = generate_gpx(points, tmp_path / "second.gpx").read_bytes()

        assert first == second
        assert b"<time>" not in first

    def test_overwrites_existing_file(self, points, tmp_path):
        target = tmp_path / "output.gpx"
        target.write_text("old content")

        generate_gpx(points[:1], target)

        text = target.read_text(encoding="utf-8")
        assert "old content" not in text
        assert "Image1" in text and "Image2" not in text

    def test_empty_input_writes_valid_empty_document(self, tmp_path):
        path = generate_gpx([], tmp_path / "output.gpx")

        parsed = gpxpy.parse(path.read_text(encoding="utf-8"))
        assert parsed.waypoints == []

    def test_creates_output_directory(self, points, tmp_path):
        path = generate_gpx(points, tmp_path / "out" / "nested" / "output.gpx")
        assert path.exists()

    def test_unwritable_destination_raises(self, points, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory")

        with pytest.raises(OutputWriteError):
            generate_gpx(points, blocker / "output.gpx")

    def test_serialization_failure_leaves_no_file(self, points, tmp_path):
        generator = GpxReportGenerator()
        generator.add_point(points[0])
        target = tmp_path / "output.gpx"

        with patch("photos2map.generators.gpxpy.gpx.GPX.to_xml", side_effect=ValueError("boom")):
            with pytest.raises(RenderError):
                generator.save(target)

        assert not target.exists()


class TestMapReportGenerator:
    def test_map_contains_points_and_theme(self, points, tmp_path):
        path = generate_map(points, tmp_path / "map.html")

        html = path.read_text(encoding="utf-8")
        assert "leaflet" in html.lower()
        assert "Image1" in html and "Image2" in html
        assert "photos2map: GPS Image Map" in html
        assert "#006666" in html
        assert "photos2map-ripple 4.0s" in html
        assert "scale(6.0)" in html
        assert "border: 1px solid #006666;" in html

    def test_custom_settings(self, points):
        settings = ConfigManager.load_map_settings(
            {"map_title": "Trip <2024>", "map_color": "#ff0000", "ripple_brush": "fill", "ripple_period": 2}
        )
        generator = MapReportGenerator(settings)
        generator.add_point(points[0])

        html = generator.render()

        assert "Trip &lt;2024&gt;" in html
        assert "background: #ff0000;" in html
        assert "photos2map-ripple 2.0s" in html

    def test_names_are_escaped(self):
        generator = MapReportGenerator()
        generator.add_point(GeoPoint(name="<script>x</script>", latitude=1.0, longitude=2.0))

        html = generator.render()

        assert "<script>x</script>" not in html

    def test_template_literal_characters_are_escaped(self):
        generator = MapReportGenerator()
        generator.add_point(GeoPoint(name="a`b${x}\\y", latitude=1.0, longitude=2.0))

        html = generator.render()

        assert "a`b" not in html
        assert "${x}" not in html
        assert "a&#96;b&#36;{x}&#92;y" in html

    def test_default_tiles_need_no_api_key(self, points):
        generator = MapReportGenerator()
        generator.add_point(points[0])

        html = generator.render()

        assert generator.settings.tiles == "OpenStreetMap"
        assert "tile.openstreetmap.org" in html
        assert "cartocdn" not in html

    def test_empty_input_writes_map_without_markers(self, tmp_path):
        path = generate_map([], tmp_path / "map.html")

        html = path.read_text(encoding="utf-8")
        assert "<html" in html.lower()
        assert "L.marker" not in html

    def test_overwrites_existing_file(self, points, tmp_path):
        target = tmp_path / "map.html"
        target.write_text("stale")

        generate_map(points, target)

        assert "stale" not in target.read_text(encoding="utf-8")

    def test_unwritable_destination_raises(self, points, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("x")

        with pytest.raises(OutputWriteError):
            generate_map(points, blocker / "map.html")

    def test_render_failure_raises(self, points, tmp_path):
        generator = MapReportGenerator()
        target = tmp_path / "map.html"

        with patch.object(generator.map, "get_root", side_effect=RuntimeError("boom")):
            with pytest.raises(RenderError):
                generator.save(target)

        assert not target.exists()
