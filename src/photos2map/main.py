# src/photos2map/main.py
"""Backend and command-line entry point for photos2map."""

import argparse
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from .config import ConfigManager
from .constants import DEFAULT_FORMATS, GPX_FILENAME, MAP_FILENAME, OUTPUT_GPX, OUTPUT_HTML, Messages
from .exceptions import Photos2MapError
from .generators import generate_gpx, generate_map
from .models import MapSettings
from .processor import PhotoProcessor

LOG_DIR = Path.home() / ".photos2map_logs"

logger = logging.getLogger(__name__)


def configure_logging(debug: bool = False, log_dir: Optional[Path] = None) -> None:
    """Log to a rotating file in the user's home and to the console."""
    log_dir = Path(log_dir) if log_dir is not None else LOG_DIR
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    file_error = None
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers.insert(
            0, RotatingFileHandler(log_dir / "app.log", maxBytes=1_000_000, backupCount=5, encoding="utf-8")
        )
    except OSError as e:
        file_error = e

    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )
    if file_error is not None:
        logger.warning(f"Logging to console only, cannot use {log_dir}: {file_error}")


def _log_progress(current: int, total: int, message: str) -> None:
    logger.debug(f"[{current}/{total}] {message}")


def process_photos_backend(
    input_path_str: str,
    output_path_str: str = "out",
    output_format: str = OUTPUT_HTML,
    enabled_formats: Iterable[str] = DEFAULT_FORMATS,
    max_workers: int = 1,
    map_settings: Optional[MapSettings] = None,
    progress_callback: Optional[Callable[[int, int, str], None]] = None,
) -> str:
    """
    Scans a photo folder and writes either a GPX file or an HTML map.

    Args:
        input_path_str: Directory to scan (recursively) for photos.
        output_path_str: Directory receiving output.gpx or map.html.
        output_format: "gpx" for GPX; any other value produces the HTML map.
        enabled_formats: Image format variants to read.
        max_workers: Extraction threads (1 = sequential).
        map_settings: Presentation of the HTML map; defaults when None.
        progress_callback: Optional callback for progress updates.

    Returns:
        Message describing the outcome. When no photo carries GPS data no
        file is written and the message says so.

    Raises:
        InputFolderMissingError: If the input folder doesn't exist.
        DirectoryWalkError: If part of the tree cannot be read.
        OutputWriteError: If the output file cannot be written.
        RenderError: If the document cannot be serialized.
        ConfigError: If a setting (formats, workers) is invalid.
    """
    logger.info("Starting backend process")

    INPUT_DIR = Path(input_path_str)
    OUTPUT_DIR = Path(output_path_str)

    processor = PhotoProcessor(
        input_dir=INPUT_DIR,
        enabled_formats=enabled_formats,
        max_workers=max_workers,
        progress_callback=progress_callback,
    )
    report = processor.process()

    if not report.has_gps:
        logger.info(f"{Messages.NO_GPS} ({report.total_files} files scanned in {INPUT_DIR})")
        return Messages.NO_GPS

    if output_format == OUTPUT_GPX:
        out_path = generate_gpx(report.points, OUTPUT_DIR / GPX_FILENAME)
    else:
        out_path = generate_map(report.points, OUTPUT_DIR / MAP_FILENAME, map_settings)

    logger.info(f"Process completed. {len(report.points)} locations written.")
    return f"Processed: {len(report.points)} of {report.total_files} photos.\nGenerated: {out_path}"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="photos2map",
        description="Generates a map on a HTML page or GPX file from GPS coordinates in images",
    )
    parser.add_argument("-i", "--dir", help="Directory to scan for images")
    parser.add_argument("-o", "--output", help="Output format: html or gpx")
    parser.add_argument("--out-dir", help="Directory for the generated file")
    parser.add_argument("-d", "--debug", action="store_true", help="Enable debug-level logging")
    parser.add_argument("--save", action="store_true", help="Store the given options as the new defaults")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Command-line entry point. Returns the process exit status."""
    args = _build_parser().parse_args(argv)
    config = ConfigManager.load_config()

    # CLI values take priority over the settings file
    input_dir = args.dir or config["input_dir"]
    output_dir = args.out_dir or config["output_dir"]
    output_format = args.output or config["output_format"]

    configure_logging(debug=args.debug or bool(config.get("debug")))

    if args.save:
        ConfigManager.save_config(
            input_dir=args.dir or "", output_dir=args.out_dir or "", output_format=args.output or ""
        )
        logger.info("Settings saved")

    try:
        message = process_photos_backend(
            input_path_str=input_dir,
            output_path_str=output_dir,
            output_format=output_format,
            enabled_formats=config["enabled_formats"],
            max_workers=config["max_workers"],
            map_settings=ConfigManager.load_map_settings(config),
            progress_callback=_log_progress,
        )
    except Photos2MapError as e:
        logger.error(str(e))
        return 1

    print(message)
    return 0


if __name__ == "__main__":
    sys.exit(main())
