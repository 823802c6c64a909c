import pytest

QtWidgets = pytest.importorskip("PyQt5.QtWidgets")

import app_state as app_state_module
from app_state import AppState
from controllers.analyze_tab_handler import AnalyzeTabHandler
from ui.analyze_tab import AnalyzeTab
from workers import AnalysisWorker


@pytest.fixture
def tab_handler(qt_app, logger, tmp_path, monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.setattr(app_state_module, "find_converter", lambda: "/usr/bin/magick")
    state = AppState(logger, config_dir=tmp_path)
    state.selection.set_target(str(tmp_path / "photo.CR2"))
    tab_handler = AnalyzeTabHandler(AnalyzeTab(), state, logger, None)
    tab_handler.connect_signals()
    tab_handler.populate_initial_ui()

    started = []

    def start_without_thread():
        started.append(tab_handler.current_worker)
        tab_handler.set_ui_processing_state(True)

    monkeypatch.setattr(tab_handler, "_start_worker_thread", start_without_thread)
    tab_handler.started_workers = started
    return tab_handler


def test_second_request_is_rejected_while_running(tab_handler, capsys) -> None:
    tab_handler.start_analysis()
    tab_handler.start_analysis()
    tab_handler.ui.analyze_button.click()

    [worker] = tab_handler.started_workers
    assert isinstance(worker, AnalysisWorker)
    assert worker.request.target_path.endswith("photo.CR2")
    assert tab_handler.is_running
    assert not tab_handler.ui.analyze_button.isEnabled()
    assert "An analysis is already running" in capsys.readouterr().out


def test_finishing_a_run_allows_the_next_one(tab_handler) -> None:
    tab_handler.ui.analyze_button.click()
    tab_handler.on_worker_finished()

    assert not tab_handler.is_running
    assert tab_handler.ui.analyze_button.isEnabled()

    tab_handler.ui.analyze_button.click()
    assert len(tab_handler.started_workers) == 2
    assert tab_handler.started_workers[0] is not tab_handler.started_workers[1]


def test_request_carries_current_selection(tab_handler, tmp_path) -> None:
    tab_handler.ui.reference_radio.setChecked(True)
    tab_handler.app_state.selection.set_reference(str(tmp_path / "look.jpg"))

    request = tab_handler.build_request()

    assert request.style_approach == "reference"
    assert request.style_value is None
    assert request.reference_path == str(tmp_path / "look.jpg")
    assert not tab_handler.ui.predefined_group.isVisibleTo(tab_handler.ui)
    assert tab_handler.ui.reference_group.isVisibleTo(tab_handler.ui)


def test_stale_preview_is_ignored(tab_handler, tmp_path) -> None:
    label = tab_handler.ui.target_preview_label
    tab_handler.on_preview_loaded("target", str(tmp_path / "older.CR2"), bytes(12), 2, 2)
    assert label.text() == "No target selected"

    tab_handler.on_preview_loaded("target", str(tmp_path / "photo.CR2"), bytes(12), 2, 2)
    assert label.text() == ""
