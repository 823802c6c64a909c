# raw-style-advisor/utils/raw_converter.py

import shutil
import subprocess
from pathlib import Path
from typing import Callable, Optional

from .errors import ConversionError
from .logger import SimpleLogger

DEFAULT_CONVERTER = "magick"
TOOL_MISSING_MESSAGE = (
    "Failed to convert RAW image. Please ensure ImageMagick is installed "
    "and accessible in your system's PATH (or set the converter path in Settings)."
)


def find_converter(name: str = DEFAULT_CONVERTER) -> Optional[str]:
    return shutil.which(name)


class ImageMagickConverter:
    """Runs the external raster converter as `<tool> <input-path> <output-path>`."""

    def __init__(self, tool_path: Optional[str], logger: SimpleLogger,
                 runner: Callable[..., subprocess.CompletedProcess] = subprocess.run):
        self.tool_path = tool_path or DEFAULT_CONVERTER
        self.logger = logger
        self._run = runner

    def convert(self, input_path: str, output_path: Path) -> Path:
        command = [self.tool_path, str(input_path), str(output_path)]
        self.logger.info(f"Converting RAW with: {' '.join(command)}")
        try:
            # No timeout: the converter's own behaviour decides how long a RAW takes.
            result = self._run(command, capture_output=True, text=True, check=False)
        except FileNotFoundError as e:
            self.logger.error("Converter executable not found.", exception=e)
            raise ConversionError(TOOL_MISSING_MESSAGE, diagnostic=str(e), tool_missing=True) from e
        except OSError as e:
            self.logger.error("Converter could not be started.", exception=e)
            raise ConversionError(f"Failed to convert RAW image. Error: {e}", diagnostic=str(e)) from e

        if result.returncode != 0:
            diagnostic = (result.stderr or result.stdout or "").strip() or f"exit code {result.returncode}"
            self.logger.error(f"Converter failed for {Path(input_path).name}. Stderr: {diagnostic}")
            raise ConversionError(f"Failed to convert RAW image. Error: {diagnostic}", diagnostic=diagnostic)

        if not Path(output_path).is_file():
            diagnostic = f"converter reported success but {output_path} was not created"
            self.logger.error(diagnostic)
            raise ConversionError(f"Failed to convert RAW image. Error: {diagnostic}", diagnostic=diagnostic)

        if result.stdout and result.stdout.strip():
            self.logger.debug(f"Converter stdout: {result.stdout.strip()}")
        self.logger.info(f"Conversion successful. Output at: {output_path}")
        return Path(output_path)
