import pytest

pytest.importorskip("PyQt5.QtCore")

import workers
from utils.analysis_pipeline import AnalysisRequest, STATUS_CONVERSION_OK
from tests.conftest import FakeConverter, FakeHandler


@pytest.fixture(autouse=True)
def _qt(qt_app):
    yield qt_app


def _run_worker(monkeypatch, logger, request, converter, handler, api_key="sk-test"):
    monkeypatch.setattr(workers, "ImageMagickConverter", lambda *args, **kwargs: converter)
    monkeypatch.setattr(workers, "OpenAIHandler", lambda *args, **kwargs: handler)
    worker = workers.AnalysisWorker(request, {"image_detail": "low", "max_image_bytes": None}, api_key, logger)
    events = []
    worker.status.connect(lambda msg: events.append(("status", msg)))
    worker.result.connect(lambda text: events.append(("result", text)))
    worker.error.connect(lambda msg: events.append(("error", msg)))
    worker.finished.connect(lambda: events.append(("finished", None)))
    worker.run()
    return events


def test_success_emits_status_then_one_result(monkeypatch, logger, raw_file) -> None:
    request = AnalysisRequest("portrait", "predefined", "Moody Film", target_path=str(raw_file))
    handler = FakeHandler(text="Exposure: +0.3")
    events = _run_worker(monkeypatch, logger, request, FakeConverter(), handler)
    assert events == [("status", STATUS_CONVERSION_OK), ("result", "Exposure: +0.3"), ("finished", None)]


def test_remote_failure_emits_one_error_only(monkeypatch, logger, raw_file, api_failure) -> None:
    request = AnalysisRequest("portrait", "predefined", "Moody Film", target_path=str(raw_file))
    events = _run_worker(monkeypatch, logger, request, FakeConverter(), FakeHandler(error=api_failure))
    kinds = [kind for kind, _ in events]
    assert kinds == ["status", "error", "finished"]
    assert events[1][1].startswith("Error: ") and "429" in events[1][1]


def test_validation_error_becomes_error_string(monkeypatch, logger) -> None:
    converter = FakeConverter()
    events = _run_worker(monkeypatch, logger, AnalysisRequest("portrait", "predefined", "Moody Film"),
                         converter, FakeHandler())
    assert events == [("error", "Error: Please select a valid target RAW image first."), ("finished", None)]
    assert converter.calls == []


def test_missing_api_key_reported(monkeypatch, logger, raw_file) -> None:
    request = AnalysisRequest("portrait", "predefined", "Moody Film", target_path=str(raw_file))
    events = _run_worker(monkeypatch, logger, request, FakeConverter(), FakeHandler(), api_key="")
    assert events[0][0] == "error" and "API key" in events[0][1]


def test_unexpected_exception_is_contained(monkeypatch, logger, raw_file) -> None:
    request = AnalysisRequest("portrait", "predefined", "Moody Film", target_path=str(raw_file))
    events = _run_worker(monkeypatch, logger, request, FakeConverter(error=RuntimeError("boom")), FakeHandler())
    assert [kind for kind, _ in events] == ["error", "finished"]
    assert "boom" in events[0][1]


def _run_preview(path, logger, max_height=50):
    worker = workers.PreviewLoadWorker("reference", str(path), logger, max_height=max_height)
    events = []
    worker.image_loaded.connect(lambda *args: events.append(("loaded",) + args))
    worker.failed.connect(lambda *args: events.append(("failed",) + args))
    worker.finished.connect(lambda: events.append(("finished",)))
    worker.run()
    return events


def test_preview_worker_emits_rgb_bytes(logger, tmp_path) -> None:
    from PIL import Image
    path = tmp_path / "look.png"
    Image.new("RGB", (200, 100), (200, 10, 10)).save(path)

    events = _run_preview(path, logger)

    [loaded, finished] = events
    assert finished == ("finished",)
    _, slot, emitted_path, data, width, height = loaded
    assert (slot, emitted_path, width, height) == ("reference", str(path), 100, 50)
    assert len(data) == width * height * 3


def test_preview_worker_reports_unreadable_file(logger, tmp_path) -> None:
    path = tmp_path / "missing.jpg"
    assert _run_preview(path, logger) == [("failed", "reference", str(path)), ("finished",)]
