# --- Supported formats ---
# Each format variant maps to the (lowercase) extensions it reads.
FORMAT_EXTENSIONS = {
    "standard": (".jpg", ".jpeg", ".png"),
    "heif": (".heic", ".heif"),
    "raw": (".dng", ".raw"),
}

DEFAULT_FORMATS = ("standard", "heif", "raw")

# EXIF tag IDs
GPS_IFD_TAG = 0x8825
GPS_LATITUDE_REF = 1
GPS_LATITUDE = 2
GPS_LONGITUDE_REF = 3
GPS_LONGITUDE = 4

# --- Output ---
DEFAULT_INPUT_DIR = "."
DEFAULT_OUTPUT_DIR = "out"
GPX_FILENAME = "output.gpx"
MAP_FILENAME = "map.html"
OUTPUT_GPX = "gpx"
OUTPUT_HTML = "html"

# --- GPX Generation ---
GPX_VERSION = "1.1"
GPX_CREATOR = "photos2map"

# --- Map Generation ---
MAP_TITLE = "photos2map: GPS Image Map"
MAP_CENTER = (39.8283, -98.5795)  # contiguous USA
MAP_ZOOM = 4
MAP_TILES = "OpenStreetMap"
MAP_COLOR = "#006666"
RIPPLE_PERIOD = 4
RIPPLE_SCALE = 6
RIPPLE_BRUSH = "stroke"
RIPPLE_SIZE = 10  # px, diameter of the resting point


class Messages:
    NO_GPS = "No GPS data found in the images."
    GPX_DONE = "GPX file generated successfully."
    MAP_DONE = "HTML map generated successfully."
