# raw-style-advisor/controllers/settings_tab_handler.py

from PyQt5.QtWidgets import QFileDialog, QMessageBox, QMainWindow
from PyQt5.QtCore import QObject

from app_state import AppState, API_KEY_ENV_VAR
from ui.settings_tab import SettingsTab, IMAGE_DETAIL_OPTIONS
from utils.logger import SimpleLogger


class SettingsTabHandler(QObject):
    """Controller for the Settings tab."""

    def __init__(self, ui: SettingsTab, app_state: AppState, logger: SimpleLogger, main_window: QMainWindow):
        super().__init__()
        self.ui = ui
        self.app_state = app_state
        self.logger = logger
        self.main_window = main_window

    def connect_signals(self):
        self.ui.converter_browse_button.clicked.connect(self.select_converter_path)
        self.ui.save_settings_button.clicked.connect(self.save_settings)

    def populate_initial_ui(self):
        s = self.app_state.settings
        self.ui.api_key_input.setText(self.app_state.api_key)
        self._update_api_key_source_label()
        self.ui.model_input.setText(s['model_name'])
        if s['image_detail'] in IMAGE_DETAIL_OPTIONS:
            self.ui.image_detail_dropdown.setCurrentText(s['image_detail'])
        self.ui.max_tokens_input.setValue(int(s['max_tokens']))
        self.ui.timeout_input.setValue(int(s['request_timeout']))
        self.ui.converter_path_input.setText(s.get('converter_path') or '')
        self.ui.max_image_mb_input.setValue(int(s.get('max_image_mb') or 0))
        self.ui.log_to_file_checkbox.setChecked(bool(s.get('log_to_file')))

    def _update_api_key_source_label(self):
        if self.app_state.api_key_from_env:
            self.ui.api_key_source_label.setText(f"Using the {API_KEY_ENV_VAR} environment variable.")
        elif self.app_state.api_key:
            self.ui.api_key_source_label.setText("Using the saved key.")
        else:
            self.ui.api_key_source_label.setText("No API key configured.")

    def select_converter_path(self):
        path, _ = QFileDialog.getOpenFileName(self.main_window, "Select ImageMagick 'magick' executable")
        if path:
            self.ui.converter_path_input.setText(path)

    def _sync_settings_from_ui(self):
        s, ui = self.app_state.settings, self.ui
        s['model_name'] = ui.model_input.text().strip() or 'gpt-4o'
        s['image_detail'] = ui.image_detail_dropdown.currentText()
        s['max_tokens'] = ui.max_tokens_input.value()
        s['request_timeout'] = ui.timeout_input.value()
        s['converter_path'] = ui.converter_path_input.text().strip() or None
        s['max_image_mb'] = ui.max_image_mb_input.value()
        s['log_to_file'] = ui.log_to_file_checkbox.isChecked()

    def save_settings(self):
        self._sync_settings_from_ui()
        self.app_state.save_settings()
        api_key = self.ui.api_key_input.text().strip()
        if api_key != self.app_state.api_key:
            self.app_state.save_api_key(api_key)
        self._update_api_key_source_label()
        QMessageBox.information(self.main_window, "Success", "Settings have been saved.")
