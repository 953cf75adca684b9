# src/photos2map/exceptions.py


class Photos2MapError(Exception):
    """Base class for every error raised by photos2map."""

    pass


class InputFolderMissingError(Photos2MapError):
    """Raised when the input folder does not exist or is not a directory."""

    def __init__(self, path):
        self.path = path
        super().__init__(f"Input folder does not exist: {path}")


class DirectoryWalkError(Photos2MapError):
    """Raised when a directory below the input folder cannot be read."""

    def __init__(self, path, cause=None):
        self.path = path
        self.cause = cause
        super().__init__(f"Error walking the directory {path}: {cause}")


class ExifReadError(Photos2MapError):
    """Raised when no GPS coordinates can be read from an image.

    Covers unreadable files, undecodable EXIF blocks and missing GPS tags alike.
    """

    def __init__(self, path, reason=""):
        self.path = path
        self.reason = reason
        super().__init__(f"Could not read GPS data from {path}: {reason}")


class OutputWriteError(Photos2MapError):
    """Raised when an output file cannot be created or written."""

    def __init__(self, path, cause=None):
        self.path = path
        self.cause = cause
        super().__init__(f"Error creating output file {path}: {cause}")


class RenderError(Photos2MapError):
    """Raised when a document cannot be serialized."""

    def __init__(self, kind, cause=None):
        self.kind = kind
        self.cause = cause
        super().__init__(f"Error rendering {kind} document: {cause}")


class ConfigError(Photos2MapError, ValueError):
    """Raised when a setting has a value photos2map cannot use."""

    def __init__(self, key, value, reason=""):
        self.key = key
        self.value = value
        super().__init__(f"Invalid setting {key}={value!r}: {reason}")
