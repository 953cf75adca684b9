from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class GeoPoint:
    """A named coordinate taken from one photo."""
    name: str
    latitude: float
    longitude: float

    def __post_init__(self):
        # Coordinates are checked once, here; renderers trust them afterwards.
        object.__setattr__(self, "name", str(self.name))
        object.__setattr__(self, "latitude", float(self.latitude))
        object.__setattr__(self, "longitude", float(self.longitude))

    @property
    def coordinates(self) -> Tuple[float, float]:
        return self.latitude, self.longitude

    def __str__(self):
        return f"{self.name} ({self.latitude}, {self.longitude})"


class ScanStatus(Enum):
    SUCCESS = "success"
    SKIPPED = "skipped"


@dataclass
class FileResult:
    """Outcome of reading one image file."""
    path: Path
    status: ScanStatus
    point: Optional[GeoPoint] = None
    reason: str = ""

    @property
    def ok(self) -> bool:
        return self.status is ScanStatus.SUCCESS


@dataclass
class MapSettings:
    """Presentation defaults for the HTML map."""
    title: str
    center: Tuple[float, float]
    zoom: int
    tiles: str
    color: str
    ripple_period: float
    ripple_scale: float
    ripple_brush: str


@dataclass
class ScanReport:
    """Everything a directory scan produced, in traversal order."""
    points: List[GeoPoint] = field(default_factory=list)
    skipped: List[FileResult] = field(default_factory=list)
    total_files: int = 0

    @property
    def has_gps(self) -> bool:
        return len(self.points) > 0
