# raw-style-advisor/controllers/analyze_tab_handler.py

import os
from typing import Optional

from PyQt5.QtWidgets import QFileDialog, QMainWindow, QTableWidgetItem
from PyQt5.QtCore import QUrl, QThread, QObject
from PyQt5.QtGui import QPixmap, QImage, QDesktopServices

from app_state import AppState
from ui.analyze_tab import AnalyzeTab, NO_FILE_TEXT
from workers import AnalysisWorker, PreviewLoadWorker
from utils.analysis_pipeline import (
    AnalysisRequest, STYLE_PREDEFINED, STYLE_REFERENCE, parse_suggested_settings
)
from utils.file_management import RAW_DIALOG_FILTER, REFERENCE_DIALOG_FILTER
from utils.logger import SimpleLogger


class AnalyzeTabHandler(QObject):
    """Controller for the Analyze tab. Allows a single analysis in flight at a time."""

    def __init__(self, ui: AnalyzeTab, app_state: AppState, logger: SimpleLogger, main_window: QMainWindow):
        super().__init__()
        self.ui = ui
        self.app_state = app_state
        self.logger = logger
        self.main_window = main_window
        self.worker_thread = None
        self.current_worker = None
        self._preview_labels = {"target": ui.target_preview_label, "reference": ui.reference_preview_label}
        self._preview_jobs = []

    @property
    def is_running(self) -> bool:
        return self.current_worker is not None

    def connect_signals(self):
        self.ui.select_target_button.clicked.connect(self.select_target_image)
        self.ui.select_reference_button.clicked.connect(self.select_reference_image)
        self.ui.predefined_radio.toggled.connect(self.update_style_input_visibility)
        self.ui.analyze_button.clicked.connect(self.start_analysis)
        for label in [self.ui.target_preview_label, self.ui.reference_preview_label]:
            label.clicked.connect(self.on_preview_label_clicked)

    def populate_initial_ui(self):
        s = self.app_state.settings
        self.ui.subject_type_dropdown.addItems(s['subject_types'])
        self.ui.style_dropdown.addItems(s['style_presets'])
        if s.get('last_subject_type') in s['subject_types']:
            self.ui.subject_type_dropdown.setCurrentText(s['last_subject_type'])
        if s.get('last_style_preset'):
            self.ui.style_dropdown.setCurrentText(s['last_style_preset'])
        self.ui.reference_radio.setChecked(s.get('last_style_approach') == STYLE_REFERENCE)
        self.update_style_input_visibility()

    def _sync_settings_from_ui(self):
        s = self.app_state.settings
        s['last_subject_type'] = self.ui.subject_type_dropdown.currentText()
        s['last_style_preset'] = self.ui.style_dropdown.currentText()
        s['last_style_approach'] = self.current_style_approach()

    def current_style_approach(self) -> str:
        return STYLE_REFERENCE if self.ui.reference_radio.isChecked() else STYLE_PREDEFINED

    def update_style_input_visibility(self):
        is_reference = self.current_style_approach() == STYLE_REFERENCE
        self.ui.predefined_group.setVisible(not is_reference)
        self.ui.reference_group.setVisible(is_reference)

    # --- File selection ---

    def _open_file_dialog(self, title: str, file_filter: str) -> Optional[str]:
        start_dir = self.app_state.last_directory or os.path.expanduser("~")
        path, _ = QFileDialog.getOpenFileName(self.main_window, title, start_dir, file_filter)
        if not path:
            self.logger.info("File selection cancelled.")
            return None
        self.logger.info(f"File selected: {path}")
        self.app_state.remember_directory(path)
        return path

    def select_target_image(self) -> Optional[str]:
        path = self._open_file_dialog("Select Target RAW Image", RAW_DIALOG_FILTER)
        self.app_state.selection.set_target(path)
        self.ui.target_file_label.setText(os.path.basename(path) if path else NO_FILE_TEXT)
        self._show_preview("target", path)
        return path

    def select_reference_image(self) -> Optional[str]:
        path = self._open_file_dialog("Select Reference Image", REFERENCE_DIALOG_FILTER)
        self.app_state.selection.set_reference(path)
        self.ui.reference_file_label.setText(os.path.basename(path) if path else NO_FILE_TEXT)
        self._show_preview("reference", path)
        return path

    def _selected_path(self, slot: str) -> Optional[str]:
        selection = self.app_state.selection
        return selection.target_path if slot == "target" else selection.reference_path

    def _show_preview(self, slot: str, path: Optional[str]):
        label = self._preview_labels[slot]
        if not path:
            label.reset()
            return
        label.reset("Loading preview...")
        worker = PreviewLoadWorker(slot, path, self.logger)
        thread = QThread()
        worker.moveToThread(thread)
        worker.image_loaded.connect(self.on_preview_loaded)
        worker.failed.connect(self.on_preview_failed)
        worker.finished.connect(thread.quit)
        thread.finished.connect(self._prune_preview_jobs)
        thread.started.connect(worker.run)
        self._preview_jobs.append((thread, worker))
        thread.start()

    def on_preview_loaded(self, slot: str, path: str, data: bytes, width: int, height: int):
        # A newer selection may have replaced this one while it was decoding.
        if path != self._selected_path(slot):
            return
        qimage = QImage(data, width, height, 3 * width, QImage.Format_RGB888)
        self._preview_labels[slot].show_image(QPixmap.fromImage(qimage.copy()), path)

    def on_preview_failed(self, slot: str, path: str):
        if path == self._selected_path(slot):
            self._preview_labels[slot].reset("Preview unavailable")

    def _prune_preview_jobs(self):
        self._preview_jobs = [(t, w) for t, w in self._preview_jobs if not t.isFinished()]

    def on_preview_label_clicked(self, path: str):
        if path and os.path.exists(path):
            self.logger.info(f"Opening image in default viewer: {path}")
            QDesktopServices.openUrl(QUrl.fromLocalFile(path))

    # --- Analysis ---

    def build_request(self) -> AnalysisRequest:
        approach = self.current_style_approach()
        selection = self.app_state.selection
        return AnalysisRequest(
            subject_type=self.ui.subject_type_dropdown.currentText(),
            style_approach=approach,
            style_value=self.ui.style_dropdown.currentText() if approach == STYLE_PREDEFINED else None,
            target_path=selection.target_path,
            reference_path=selection.reference_path if approach == STYLE_REFERENCE else None,
        )

    def start_analysis(self):
        if self.is_running:
            self.logger.warn("An analysis is already running. Ignoring the new request.")
            return
        self._sync_settings_from_ui()
        request = self.build_request()

        config = dict(self.app_state.settings)
        config['max_image_bytes'] = self.app_state.max_image_bytes
        self.current_worker = AnalysisWorker(request, config, self.app_state.api_key, self.logger)
        self._start_worker_thread()

    def _start_worker_thread(self):
        self.worker_thread = QThread()
        self.current_worker.moveToThread(self.worker_thread)
        self.current_worker.status.connect(self.on_analysis_status)
        self.current_worker.result.connect(self.on_analysis_result)
        self.current_worker.error.connect(self.on_analysis_error)
        self.current_worker.finished.connect(self.on_worker_finished)
        self.worker_thread.started.connect(self.current_worker.run)
        self.ui.settings_output.setPlainText("Sending request to backend...")
        self.ui.settings_table.setRowCount(0)
        self.set_ui_processing_state(True)
        self.worker_thread.start()

    def set_ui_processing_state(self, is_processing: bool):
        self.ui.analyze_button.setEnabled(not is_processing)
        self.ui.select_target_button.setEnabled(not is_processing)
        self.ui.select_reference_button.setEnabled(not is_processing)
        self.ui.busy_bar.setRange(0, 0 if is_processing else 1)
        if is_processing:
            self.ui.status_label.setText("Converting RAW image...")

    def on_analysis_status(self, message: str):
        self.ui.status_label.setText(message)
        self.ui.settings_output.setPlainText(message)

    def on_analysis_result(self, text: str):
        self.ui.settings_output.setPlainText(text)
        self._fill_settings_table(text)
        self.ui.output_tabs.setCurrentIndex(0)
        self.ui.status_label.setText("Analysis complete.")

    def on_analysis_error(self, message: str):
        self.ui.settings_output.setPlainText(f"Error during analysis:\n{message}")
        self.ui.status_label.setText("Analysis failed.")

    def _fill_settings_table(self, text: str):
        pairs = parse_suggested_settings(text)
        self.ui.settings_table.setRowCount(len(pairs))
        for row, (key, value) in enumerate(pairs):
            self.ui.settings_table.setItem(row, 0, QTableWidgetItem(key))
            self.ui.settings_table.setItem(row, 1, QTableWidgetItem(value))
        self.logger.info(f"Parsed {len(pairs)} setting(s) from the response.")

    def on_worker_finished(self):
        self.set_ui_processing_state(False)
        if self.worker_thread: self.worker_thread.quit(); self.worker_thread.wait()
        self.worker_thread, self.current_worker = None, None

    def stop_worker(self):
        # No cancellation: wait for the outstanding run so its temp file gets removed.
        if self.worker_thread:
            self.logger.info("Waiting for the running analysis to finish...")
            self.worker_thread.quit(); self.worker_thread.wait()
        for thread, _ in self._preview_jobs:
            thread.quit(); thread.wait()
        self._preview_jobs = []
