# raw-style-advisor/ui/analyze_tab.py

from PyQt5.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QPushButton, QLabel, QComboBox, QRadioButton,
    QButtonGroup, QTextEdit, QProgressBar, QGroupBox, QFormLayout, QSplitter,
    QTableWidget, QHeaderView, QAbstractItemView, QTabWidget
)
from PyQt5.QtCore import Qt

from .widgets import PreviewLabel

NO_FILE_TEXT = "(No file selected)"

class AnalyzeTab(QWidget):
    """The 'Analyze' tab: image selection and style choice on the left, previews and results on the right."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._setup_ui()

    def _setup_ui(self):
        main_layout = QVBoxLayout(self)

        # --- Left Panel: Inputs ---
        inputs_panel = QWidget()
        inputs_vbox = QVBoxLayout(inputs_panel)
        inputs_vbox.setContentsMargins(0, 0, 5, 0)

        target_group = QGroupBox("Target RAW Image")
        target_layout = QHBoxLayout(target_group)
        self.target_file_label = QLabel(NO_FILE_TEXT)
        self.target_file_label.setWordWrap(True)
        self.select_target_button = QPushButton("Select Target...")
        target_layout.addWidget(self.target_file_label, 1)
        target_layout.addWidget(self.select_target_button)
        inputs_vbox.addWidget(target_group)

        subject_group = QGroupBox("Subject")
        subject_layout = QFormLayout(subject_group)
        self.subject_type_dropdown = QComboBox()
        subject_layout.addRow("Subject type:", self.subject_type_dropdown)
        inputs_vbox.addWidget(subject_group)

        approach_group = QGroupBox("Style Approach")
        approach_layout = QVBoxLayout(approach_group)
        self.predefined_radio = QRadioButton("Predefined style")
        self.reference_radio = QRadioButton("Match a reference image")
        self.predefined_radio.setChecked(True)
        self.style_approach_group = QButtonGroup(self)
        self.style_approach_group.addButton(self.predefined_radio)
        self.style_approach_group.addButton(self.reference_radio)
        approach_layout.addWidget(self.predefined_radio)
        approach_layout.addWidget(self.reference_radio)
        inputs_vbox.addWidget(approach_group)

        self.predefined_group = QGroupBox("Predefined Style")
        predefined_layout = QFormLayout(self.predefined_group)
        self.style_dropdown = QComboBox()
        self.style_dropdown.setEditable(True)
        predefined_layout.addRow("Style:", self.style_dropdown)
        inputs_vbox.addWidget(self.predefined_group)

        self.reference_group = QGroupBox("Reference Image")
        reference_layout = QHBoxLayout(self.reference_group)
        self.reference_file_label = QLabel(NO_FILE_TEXT)
        self.reference_file_label.setWordWrap(True)
        self.select_reference_button = QPushButton("Select Reference...")
        reference_layout.addWidget(self.reference_file_label, 1)
        reference_layout.addWidget(self.select_reference_button)
        self.reference_group.setVisible(False)
        inputs_vbox.addWidget(self.reference_group)
        inputs_vbox.addStretch()

        # --- Right Panel: Previews and Output ---
        right_panel = QSplitter(Qt.Vertical)
        right_panel.setContentsMargins(5, 0, 0, 0)

        previews_container = QWidget()
        previews_layout = QHBoxLayout(previews_container)
        self.target_preview_label = PreviewLabel("No target selected")
        self.reference_preview_label = PreviewLabel("No reference selected")
        for title, label in [("Target", self.target_preview_label), ("Reference", self.reference_preview_label)]:
            group_box = QGroupBox(title)
            group_layout = QHBoxLayout(group_box)
            group_layout.addWidget(label)
            previews_layout.addWidget(group_box)

        self.output_tabs = QTabWidget()
        self.settings_output = QTextEdit()
        self.settings_output.setReadOnly(True)
        self.settings_output.setAcceptRichText(False)
        self.settings_output.setPlaceholderText("Suggested settings will appear here.")
        self.settings_table = QTableWidget(0, 2)
        self.settings_table.setHorizontalHeaderLabels(["Setting", "Value"])
        self.settings_table.horizontalHeader().setSectionResizeMode(QHeaderView.Stretch)
        self.settings_table.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.output_tabs.addTab(self.settings_output, "Suggested Settings")
        self.output_tabs.addTab(self.settings_table, "Parsed Settings")

        right_panel.addWidget(previews_container)
        right_panel.addWidget(self.output_tabs)

        main_splitter = QSplitter(Qt.Horizontal)
        main_splitter.addWidget(inputs_panel)
        main_splitter.addWidget(right_panel)
        main_splitter.setSizes([350, 650])
        right_panel.setSizes([300, 400])
        main_layout.addWidget(main_splitter)

        # --- Bottom Bar ---
        bottom_bar_layout = QHBoxLayout()
        self.status_label = QLabel("Ready.")
        self.busy_bar = QProgressBar()
        self.busy_bar.setTextVisible(False)
        self.busy_bar.setRange(0, 1)
        self.busy_bar.setMaximumWidth(200)
        self.analyze_button = QPushButton("Analyze")
        bottom_bar_layout.addWidget(self.status_label, 1)
        bottom_bar_layout.addWidget(self.busy_bar)
        bottom_bar_layout.addWidget(self.analyze_button)
        main_layout.addLayout(bottom_bar_layout)
