# raw-style-advisor/main_window.py

from PyQt5.QtWidgets import QMainWindow, QTabWidget

from app_state import AppState
from ui.analyze_tab import AnalyzeTab
from ui.settings_tab import SettingsTab
from controllers.analyze_tab_handler import AnalyzeTabHandler
from controllers.settings_tab_handler import SettingsTabHandler
from utils.logger import SimpleLogger

class MainWindow(QMainWindow):
    """
    The main application window.
    Owns the core components (UI, State, Handlers) and wires them together.
    """
    def __init__(self, logger: SimpleLogger = None):
        super().__init__()
        self.setWindowTitle("RAW Style Advisor")
        self.setGeometry(100, 100, 1000, 700)

        self.logger = logger or SimpleLogger()
        self.app_state = AppState(self.logger)

        self.tab_widget = QTabWidget()
        self.setCentralWidget(self.tab_widget)
        self.analyze_tab = AnalyzeTab()
        self.settings_tab = SettingsTab()
        self.tab_widget.addTab(self.analyze_tab, "Analyze")
        self.tab_widget.addTab(self.settings_tab, "Settings")

        self.analyze_handler = AnalyzeTabHandler(self.analyze_tab, self.app_state, self.logger, self)
        self.analyze_handler.connect_signals()
        self.settings_handler = SettingsTabHandler(self.settings_tab, self.app_state, self.logger, self)
        self.settings_handler.connect_signals()

        self.analyze_handler.populate_initial_ui()
        self.settings_handler.populate_initial_ui()

        self.logger.info("Application UI is ready.")

    def closeEvent(self, event):
        """Saves settings and waits for any running analysis before closing."""
        self.logger.info("--- Application closing ---")
        self.analyze_handler._sync_settings_from_ui()
        self.app_state.save_settings()
        self.analyze_handler.stop_worker()
        event.accept()
