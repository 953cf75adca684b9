"""Shared fixtures: small real images with (or without) GPS EXIF blocks."""

import os
import sys
from pathlib import Path

import piexif
import pytest
from PIL import Image

# Add src to path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "../src")))


def _to_dms_rational(value: float):
    """Decimal degrees -> EXIF ((d,1), (m,1), (s,10000)) rationals."""
    value = abs(value)
    degrees = int(value)
    minutes_float = (value - degrees) * 60
    minutes = int(minutes_float)
    seconds = round((minutes_float - minutes) * 60 * 10000)
    return ((degrees, 1), (minutes, 1), (seconds, 10000))


def write_image(path: Path, lat=None, lon=None) -> Path:
    """Create an 8x8 image at ``path``; GPS tags are written when lat/lon are given.

    The format follows the extension (JPEG or PNG).
    """
    exif_dict = {"0th": {piexif.ImageIFD.Make: "TestCam"}, "Exif": {}, "GPS": {}, "1st": {}, "thumbnail": None}
    if lat is not None and lon is not None:
        exif_dict["GPS"] = {
            piexif.GPSIFD.GPSLatitudeRef: "N" if lat >= 0 else "S",
            piexif.GPSIFD.GPSLatitude: _to_dms_rational(lat),
            piexif.GPSIFD.GPSLongitudeRef: "E" if lon >= 0 else "W",
            piexif.GPSIFD.GPSLongitude: _to_dms_rational(lon),
        }

    path.parent.mkdir(parents=True, exist_ok=True)
    fmt = "PNG" if path.suffix.lower() == ".png" else "JPEG"
    img = Image.new("RGB", (8, 8), (0, 102, 102))
    img.save(path, format=fmt, exif=piexif.dump(exif_dict))
    return path


@pytest.fixture
def make_image():
    return write_image


@pytest.fixture
def photo_dir(tmp_path):
    """A folder with one geotagged photo, one photo without GPS, one corrupt file and one text file."""
    root = tmp_path / "photos"
    write_image(root / "sanfrancisco.jpg", 37.7749, -122.4194)
    write_image(root / "nogps.jpg")
    (root / "corrupt.jpg").write_bytes(b"this is not a jpeg")
    (root / "notes.txt").write_text("not an image")
    return root
