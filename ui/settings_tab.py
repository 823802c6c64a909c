# raw-style-advisor/ui/settings_tab.py

from PyQt5.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QPushButton, QLabel, QLineEdit, QComboBox,
    QSpinBox, QCheckBox, QGroupBox, QFormLayout
)

IMAGE_DETAIL_OPTIONS = ["low", "high", "auto"]

class SettingsTab(QWidget):
    """The UI for the 'Settings' tab: API key, model options and the RAW converter."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.main_layout = QVBoxLayout(self)
        self._setup_ui()

    def _setup_ui(self):
        api_group = QGroupBox("OpenAI API")
        api_layout = QFormLayout(api_group)
        api_info_label = QLabel(
            'Get your OpenAI API key from: <a href="https://platform.openai.com/api-keys">https://platform.openai.com/api-keys</a>'
        )
        api_info_label.setOpenExternalLinks(True)
        self.api_key_input = QLineEdit()
        self.api_key_input.setEchoMode(QLineEdit.Password)
        self.api_key_input.setPlaceholderText("sk-...")
        self.api_key_source_label = QLabel()
        self.model_input = QLineEdit()
        self.image_detail_dropdown = QComboBox()
        self.image_detail_dropdown.addItems(IMAGE_DETAIL_OPTIONS)
        self.max_tokens_input = QSpinBox()
        self.max_tokens_input.setRange(50, 4096)
        self.timeout_input = QSpinBox()
        self.timeout_input.setRange(5, 600)
        self.timeout_input.setSuffix(" s")
        api_layout.addRow(api_info_label)
        api_layout.addRow("API key:", self.api_key_input)
        api_layout.addRow(self.api_key_source_label)
        api_layout.addRow("Model:", self.model_input)
        api_layout.addRow("Image detail:", self.image_detail_dropdown)
        api_layout.addRow("Max output tokens:", self.max_tokens_input)
        api_layout.addRow("Request timeout:", self.timeout_input)
        self.main_layout.addWidget(api_group)

        converter_group = QGroupBox("RAW Conversion (ImageMagick)")
        converter_layout = QFormLayout(converter_group)
        path_layout = QHBoxLayout()
        self.converter_path_input = QLineEdit()
        self.converter_path_input.setPlaceholderText("magick")
        self.converter_browse_button = QPushButton("...")
        path_layout.addWidget(self.converter_path_input, 1)
        path_layout.addWidget(self.converter_browse_button)
        self.max_image_mb_input = QSpinBox()
        self.max_image_mb_input.setRange(0, 500)
        self.max_image_mb_input.setSuffix(" MB")
        self.max_image_mb_input.setSpecialValueText("No limit")
        converter_layout.addRow("Converter:", path_layout)
        converter_layout.addRow("Max image size:", self.max_image_mb_input)
        self.main_layout.addWidget(converter_group)

        self.log_to_file_checkbox = QCheckBox("Write log to user_config/app.log")
        self.main_layout.addWidget(self.log_to_file_checkbox)

        self.save_settings_button = QPushButton("Save Settings")
        self.main_layout.addWidget(self.save_settings_button)
        self.main_layout.addStretch()
