# raw-style-advisor/main.py

import sys
import traceback
from PyQt5.QtWidgets import QApplication, QMessageBox
from main_window import MainWindow
from utils.logger import SimpleLogger

logger = SimpleLogger()

def global_exception_hook(exctype, value, tb):
    """Logs uncaught exceptions and shows them in a message box instead of crashing silently."""
    traceback_details = "".join(traceback.format_exception(exctype, value, tb))
    logger.error(f"Unhandled exception:\n{traceback_details}")
    QMessageBox.critical(None, "Unhandled Application Error", f"A critical error occurred:\n\n{traceback_details}")
    sys.exit(1)


def main():
    # Must be set before the QApplication is created.
    sys.excepthook = global_exception_hook

    app = QApplication(sys.argv)
    window = MainWindow(logger)
    window.show()
    return app.exec_()


if __name__ == "__main__":
    sys.exit(main())
