import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Tuple

import exifread
import pillow_heif
from PIL import Image

from .constants import (
    DEFAULT_FORMATS,
    FORMAT_EXTENSIONS,
    GPS_IFD_TAG,
    GPS_LATITUDE,
    GPS_LATITUDE_REF,
    GPS_LONGITUDE,
    GPS_LONGITUDE_REF,
)
from .exceptions import ConfigError, ExifReadError
from .models import GeoPoint

# Register HEIF opener
pillow_heif.register_heif_opener()

logger = logging.getLogger(__name__)


def _rational_to_float(value: Any) -> float:
    """Converts a single EXIF rational (Pillow, exifread or (num, den) tuple) to float."""
    if isinstance(value, (tuple, list)) and len(value) == 2:
        return float(value[0]) / float(value[1])
    if hasattr(value, "num") and hasattr(value, "den"):
        return float(value.num) / float(value.den)
    return float(value)


def _to_decimal(value: Any, ref: Any) -> float:
    """Converts a DMS triple or a single decimal rational to signed decimal degrees."""
    if isinstance(value, (tuple, list)) and len(value) == 3:
        d, m, s = (_rational_to_float(v) for v in value)
        decimal = d + (m / 60.0) + (s / 3600.0)
    elif isinstance(value, (tuple, list)) and len(value) == 1:
        decimal = _rational_to_float(value[0])
    elif isinstance(value, (tuple, list)) and len(value) != 2:
        raise ValueError(f"unexpected coordinate arity {len(value)}")
    else:
        decimal = _rational_to_float(value)

    if isinstance(ref, bytes):
        ref = ref.decode("ascii", errors="ignore")
    if str(ref).strip("\x00 ").upper() in ("S", "W"):
        decimal = -decimal
    return decimal


class CoordinateExtractor:
    """Base class for the per-format GPS readers."""

    extensions: Tuple[str, ...] = ()

    def read_coordinates(self, file_path: Path) -> Tuple[float, float]:
        raise NotImplementedError


class PillowExifExtractor(CoordinateExtractor):
    """Reads the GPS IFD of JPEG and PNG files through Pillow."""

    extensions = FORMAT_EXTENSIONS["standard"]

    def read_coordinates(self, file_path: Path) -> Tuple[float, float]:
        try:
            with Image.open(file_path) as image:
                gps_info = dict(image.getexif().get_ifd(GPS_IFD_TAG))
        except Exception as e:
            raise ExifReadError(file_path, str(e)) from e

        return self._get_lat_lon(file_path, gps_info)

    def _get_lat_lon(self, file_path: Path, gps_info: Dict[int, Any]) -> Tuple[float, float]:
        # IDs are standard: 1=LatRef, 2=Lat, 3=LonRef, 4=Lon
        lat_dms = gps_info.get(GPS_LATITUDE)
        lat_ref = gps_info.get(GPS_LATITUDE_REF)
        lon_dms = gps_info.get(GPS_LONGITUDE)
        lon_ref = gps_info.get(GPS_LONGITUDE_REF)

        if lat_dms is None or lon_dms is None or not lat_ref or not lon_ref:
            raise ExifReadError(file_path, "no GPS tags")

        try:
            return _to_decimal(lat_dms, lat_ref), _to_decimal(lon_dms, lon_ref)
        except Exception as e:
            raise ExifReadError(file_path, f"malformed GPS tags ({e})") from e


class HeifExifExtractor(PillowExifExtractor):
    """HEIC/HEIF through the pillow-heif opener; the EXIF layout is the same."""

    extensions = FORMAT_EXTENSIONS["heif"]


class RawExifExtractor(CoordinateExtractor):
    """Reads TIFF-based raw files (DNG and friends) with exifread."""

    extensions = FORMAT_EXTENSIONS["raw"]

    def read_coordinates(self, file_path: Path) -> Tuple[float, float]:
        try:
            with open(file_path, "rb") as f:
                tags = exifread.process_file(f, details=False)
        except Exception as e:
            raise ExifReadError(file_path, str(e)) from e

        if not tags:
            raise ExifReadError(file_path, "no EXIF data")

        lat = tags.get("GPS GPSLatitude")
        lat_ref = tags.get("GPS GPSLatitudeRef")
        lon = tags.get("GPS GPSLongitude")
        lon_ref = tags.get("GPS GPSLongitudeRef")
        if not (lat and lat_ref and lon and lon_ref):
            raise ExifReadError(file_path, "no GPS tags")

        try:
            return (
                _to_decimal(list(lat.values), str(lat_ref)),
                _to_decimal(list(lon.values), str(lon_ref)),
            )
        except Exception as e:
            raise ExifReadError(file_path, f"malformed GPS tags ({e})") from e


EXTRACTORS = {
    "standard": PillowExifExtractor,
    "heif": HeifExifExtractor,
    "raw": RawExifExtractor,
}


class GPSPhotoExtractor:
    """Picks the reader for a file by its extension.

    Only the formats listed in ``enabled_formats`` are considered; any other
    extension is reported as unsupported and never opened.
    """

    def __init__(self, enabled_formats: Iterable[str] = DEFAULT_FORMATS) -> None:
        try:
            enabled = list(enabled_formats)
        except TypeError as e:
            raise ConfigError("enabled_formats", enabled_formats, str(e)) from e
        unknown = [fmt for fmt in enabled if fmt not in EXTRACTORS]
        if unknown:
            raise ConfigError("enabled_formats", enabled, f"Unknown image formats: {', '.join(unknown)}")

        self._by_extension: Dict[str, CoordinateExtractor] = {}
        for fmt in enabled:
            reader = EXTRACTORS[fmt]()
            for ext in reader.extensions:
                self._by_extension[ext] = reader
        logger.debug(f"Enabled formats: {enabled}")

    @property
    def supported_extensions(self) -> frozenset:
        return frozenset(self._by_extension)

    def supports(self, file_path: Path) -> bool:
        return file_path.suffix.lower() in self._by_extension

    def read_coordinates(self, file_path: Path) -> Tuple[float, float]:
        """Returns ``(latitude, longitude)`` or raises ExifReadError."""
        reader = self._by_extension.get(file_path.suffix.lower())
        if reader is None:
            raise ExifReadError(file_path, "unsupported file type")
        return reader.read_coordinates(file_path)

    def extract_point(self, file_path: Path) -> GeoPoint:
        lat, lon = self.read_coordinates(file_path)
        return GeoPoint(name=file_path.stem, latitude=lat, longitude=lon)


def read_coordinates(path) -> Tuple[float, float]:
    """Reads ``(latitude, longitude)`` from any supported image."""
    return GPSPhotoExtractor().read_coordinates(Path(path))
