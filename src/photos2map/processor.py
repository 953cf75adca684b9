"""
Photo processor module for photos2map.

This module contains the PhotoProcessor class which handles:
- Walking the input directory tree for supported image files
- GPS extraction per file, optionally in a ThreadPoolExecutor
- Collecting the results, in traversal order, into a ScanReport
"""

import logging
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Callable, Iterable, Iterator, List, Optional, Tuple

from .constants import DEFAULT_FORMATS
from .exceptions import ConfigError, DirectoryWalkError, ExifReadError, InputFolderMissingError
from .extractor import GPSPhotoExtractor
from .models import FileResult, GeoPoint, ScanReport, ScanStatus

logger = logging.getLogger(__name__)


class PhotoProcessor:
    """Scans a directory tree and extracts a GeoPoint from every geotagged photo.

    Files whose extraction fails are skipped and recorded in the report; a
    directory that cannot be listed aborts the whole scan.

    Attributes:
        input_dir: Root of the tree to scan.
        max_workers: Number of extraction threads. 1 means sequential.
        progress_callback: Optional callback for progress updates.
    """

    def __init__(
        self,
        input_dir: Path,
        enabled_formats: Iterable[str] = DEFAULT_FORMATS,
        max_workers: int = 1,
        progress_callback: Optional[Callable[[int, int, str], None]] = None,
    ) -> None:
        """Initialize the PhotoProcessor.

        Args:
            input_dir: Path to the directory containing photos to process.
            enabled_formats: Format variants to read (see constants.FORMAT_EXTENSIONS).
            max_workers: Thread count for extraction; values below 2 run sequentially.
            progress_callback: Optional callback function receiving
                              (current, total, message) for progress updates.
        """
        self.input_dir = Path(input_dir)
        try:
            self.max_workers = max(1, int(max_workers))
        except (TypeError, ValueError) as e:
            raise ConfigError("max_workers", max_workers, str(e)) from e
        self.progress_callback = progress_callback
        self._extractor = GPSPhotoExtractor(enabled_formats)

    def scan_files(self) -> List[Path]:
        """List the supported image files under the input directory.

        Returns:
            Paths in traversal order: entries of each directory sorted by name,
            subdirectories descended into where they sort.

        Raises:
            InputFolderMissingError: If the input directory does not exist.
            DirectoryWalkError: If any directory in the tree cannot be listed.
        """
        if not self.input_dir.is_dir():
            raise InputFolderMissingError(self.input_dir)

        image_files = [p for p in self._walk(self.input_dir) if self._extractor.supports(p)]
        logger.info(f"Found {len(image_files)} images to process in {self.input_dir}")
        return image_files

    def _walk(self, directory: Path) -> Iterator[Path]:
        try:
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as e:
            raise DirectoryWalkError(directory, e) from e

        for entry in entries:
            path = Path(entry.path)
            if entry.is_dir(follow_symlinks=False):
                yield from self._walk(path)
            elif entry.is_file():
                yield path

    def process(self) -> ScanReport:
        """Scan the tree and extract coordinates from every supported file.

        Returns:
            ScanReport whose ``points`` follow traversal order regardless of
            the number of workers.

        Raises:
            InputFolderMissingError: If the input directory does not exist.
            DirectoryWalkError: If any directory in the tree cannot be listed.
        """
        image_files = self.scan_files()
        total_files = len(image_files)

        if self.max_workers > 1 and total_files > 1:
            results = self._process_parallel(image_files)
        else:
            results = []
            for i, img_path in enumerate(image_files):
                results.append(self._read_file(img_path))
                self._report_progress(i + 1, total_files, img_path)

        report = ScanReport(total_files=total_files)
        for result in results:
            if result.ok:
                report.points.append(result.point)
            else:
                report.skipped.append(result)

        logger.info(
            f"Extracted {len(report.points)} locations, skipped {len(report.skipped)} of {total_files} files"
        )
        return report

    def _process_parallel(self, image_files: List[Path]) -> List[FileResult]:
        total_files = len(image_files)
        indexed: List[Tuple[int, FileResult]] = []

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            future_to_index = {
                executor.submit(self._read_file, img_path): i
                for i, img_path in enumerate(image_files)
            }
            for done, future in enumerate(as_completed(future_to_index)):
                index = future_to_index[future]
                indexed.append((index, future.result()))
                self._report_progress(done + 1, total_files, image_files[index])

        # Sort by original index to maintain traversal order
        indexed.sort(key=lambda x: x[0])
        return [result for _, result in indexed]

    def _read_file(self, img_path: Path) -> FileResult:
        try:
            point = self._extractor.extract_point(img_path)
        except ExifReadError as e:
            logger.info(f"Skipping {img_path.name}: {e.reason}")
            return FileResult(img_path, ScanStatus.SKIPPED, reason=e.reason)

        logger.debug(f"{img_path.name}: {point.latitude}, {point.longitude}")
        return FileResult(img_path, ScanStatus.SUCCESS, point=point)

    def _report_progress(self, current: int, total: int, img_path: Path) -> None:
        if self.progress_callback:
            self.progress_callback(current, total, f"Analyzing: {img_path.name}")


def extract_gps_data(directory, **kwargs) -> List[GeoPoint]:
    """Returns the GeoPoints of every geotagged image under ``directory``."""
    return PhotoProcessor(Path(directory), **kwargs).process().points
