import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

from utils.errors import ConversionError, RemoteAPIError
from utils.logger import SimpleLogger


class FakeConverter:
    """Stands in for ImageMagickConverter; writes a small file where the real tool would."""

    def __init__(self, payload: bytes = b"\x89PNG fake image", error: Optional[Exception] = None):
        self.payload = payload
        self.error = error
        self.calls: List[tuple] = []

    def convert(self, input_path: str, output_path: Path) -> Path:
        self.calls.append((input_path, Path(output_path)))
        if self.error is not None:
            raise self.error
        Path(output_path).write_bytes(self.payload)
        return Path(output_path)


class FakeHandler:
    """Stands in for OpenAIHandler and records the messages it was given."""

    def __init__(self, text: str = "Exposure: +0.30\nContrast: +15", error: Optional[Exception] = None):
        self.text = text
        self.error = error
        self.calls: List[List[Dict[str, Any]]] = []

    def send_request(self, messages):
        self.calls.append(messages)
        if self.error is not None:
            raise self.error
        return self.text


@pytest.fixture
def logger() -> SimpleLogger:
    return SimpleLogger()


@pytest.fixture
def converter() -> FakeConverter:
    return FakeConverter()


@pytest.fixture
def handler() -> FakeHandler:
    return FakeHandler()


@pytest.fixture
def raw_file(tmp_path) -> Path:
    path = tmp_path / "photo.CR2"
    path.write_bytes(b"raw sensor data")
    return path


@pytest.fixture
def reference_file(tmp_path) -> Path:
    path = tmp_path / "look.jpg"
    path.write_bytes(b"\xff\xd8\xff reference")
    return path


@pytest.fixture
def api_failure() -> RemoteAPIError:
    return RemoteAPIError("Error calling OpenAI: OpenAI API Error: 429 RateLimitError - slow down", status_code=429)


@pytest.fixture
def tool_missing() -> ConversionError:
    return ConversionError("Failed to convert RAW image. Please ensure ImageMagick is installed "
                           "and accessible in your system's PATH.", tool_missing=True)


@pytest.fixture(scope="session")
def qt_app():
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    QtWidgets = pytest.importorskip("PyQt5.QtWidgets")
    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication([])
    yield app
