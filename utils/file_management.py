# raw-style-advisor/utils/file_management.py

import os
import re
import tempfile
import time
from pathlib import Path
from typing import Dict, List, Optional

# Extensions offered by the two file pickers.
RAW_EXTENSIONS = ['cr2', 'nef', 'arw', 'dng', 'raf', 'orf', 'pef', 'rw2']
REFERENCE_EXTENSIONS = ['jpg', 'jpeg', 'png', 'webp', 'tiff']

REFERENCE_MIME_TYPES: Dict[str, str] = {
    '.png': 'image/png',
    '.jpg': 'image/jpeg',
    '.jpeg': 'image/jpeg',
}
DEFAULT_REFERENCE_MIME = 'image/webp'

CONVERTED_SUFFIX = '.png'
_UNSAFE_CHARS = re.compile(r'[^a-zA-Z0-9.-]')


def build_dialog_filter(label: str, extensions: List[str]) -> str:
    """
    Builds a QFileDialog filter string, e.g. "RAW Images (*.cr2 *.CR2 ...);;All Files (*)".

    Both lower and upper case patterns are listed since Qt matches filters
    case-sensitively on some platforms.
    """
    patterns = []
    for ext in extensions:
        patterns.extend([f"*.{ext.lower()}", f"*.{ext.upper()}"])
    return f"{label} ({' '.join(patterns)});;All Files (*)"


RAW_DIALOG_FILTER = build_dialog_filter("RAW Images", RAW_EXTENSIONS)
REFERENCE_DIALOG_FILTER = build_dialog_filter("Images", REFERENCE_EXTENSIONS)


def reference_mime_type(path: str) -> str:
    """Infers the MIME type sent for a reference image from its extension."""
    return REFERENCE_MIME_TYPES.get(Path(path).suffix.lower(), DEFAULT_REFERENCE_MIME)


def sanitize_file_name(name: str) -> str:
    """Replaces every character outside [a-zA-Z0-9.-] with an underscore."""
    return _UNSAFE_CHARS.sub('_', name)


def converted_output_path(target_path: str, temp_dir: Optional[str] = None, timestamp_ms: Optional[int] = None) -> Path:
    """
    Derives the temporary output path for a converted RAW file.

    The name is "converted-<millis>-<sanitized basename>.png" inside temp_dir
    (the system temp directory by default).
    """
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    safe_base_name = sanitize_file_name(os.path.basename(target_path))
    return Path(temp_dir or tempfile.gettempdir()) / f"converted-{timestamp_ms}-{safe_base_name}{CONVERTED_SUFFIX}"


def is_raw_file(path: str) -> bool:
    return Path(path).suffix.lower().lstrip('.') in RAW_EXTENSIONS


def ensure_directory_exists(path: str) -> None:
    """Creates a directory if it doesn't already exist."""
    Path(path).mkdir(parents=True, exist_ok=True)
