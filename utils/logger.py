# raw-style-advisor/utils/logger.py

import datetime
from pathlib import Path
from typing import Optional, Union

class SimpleLogger:
    """Prints formatted, timestamped messages to the console and optionally mirrors them to a file."""

    def __init__(self, log_file: Optional[Union[str, Path]] = None, show_debug: bool = False):
        self.log_file = Path(log_file) if log_file else None
        self.show_debug = show_debug

    def set_log_file(self, log_file: Optional[Union[str, Path]]):
        self.log_file = Path(log_file) if log_file else None

    def _log(self, level: str, message: str):
        timestamp = datetime.datetime.now().strftime("%H:%M:%S")
        line = f"[{timestamp}] [{level.upper():<5}] {message}"
        print(line)
        if self.log_file:
            try:
                with open(self.log_file, 'a', encoding='utf-8') as f:
                    f.write(line + "\n")
            except OSError as e:
                print(f"[{timestamp}] [WARN ] Could not write to log file {self.log_file}: {e}")
                self.log_file = None

    def debug(self, message: str):
        """Verbose diagnostics, hidden unless show_debug is set."""
        if self.show_debug:
            self._log("debug", message)

    def info(self, message: str):
        self._log("info", message)

    def warn(self, message: str):
        """For non-critical issues or potential problems."""
        self._log("warn", message)

    def error(self, message: str, exception: Exception = None):
        """For errors that occur, optionally including the exception details."""
        full_message = f"{message}"
        if exception:
            full_message += f" | Exception: {type(exception).__name__} - {exception}"
        self._log("error", full_message)
