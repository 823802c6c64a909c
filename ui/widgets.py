# raw-style-advisor/ui/widgets.py

from PyQt5.QtWidgets import QLabel, QSizePolicy
from PyQt5.QtCore import pyqtSignal, Qt
from PyQt5.QtGui import QPixmap, QPainter

class PreviewLabel(QLabel):
    """
    Shows an image preview scaled to fit, keeping its aspect ratio.
    Falls back to placeholder text when there is no image, and emits
    `clicked` with the source file path so the handler can open it.
    """
    clicked = pyqtSignal(str)

    def __init__(self, placeholder: str = "", *args, **kwargs):
        super().__init__(placeholder, *args, **kwargs)
        self._placeholder = placeholder
        self._file_path = ""
        self._pixmap = QPixmap()
        self.setMinimumSize(120, 120)
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
        self.setAlignment(Qt.AlignCenter)
        self.setStyleSheet("background-color: #333; color: #aaa;")

    def show_image(self, pixmap: QPixmap, file_path: str = ""):
        self._pixmap = pixmap if pixmap and not pixmap.isNull() else QPixmap()
        self._file_path = file_path
        self.setCursor(Qt.PointingHandCursor if file_path else Qt.ArrowCursor)
        super().setText("" if not self._pixmap.isNull() else self._placeholder)
        self.update()

    def reset(self, message: str = ""):
        self._pixmap = QPixmap()
        self._file_path = ""
        self.setCursor(Qt.ArrowCursor)
        super().setText(message or self._placeholder)
        self.update()

    def mouseReleaseEvent(self, event):
        if self._file_path:
            self.clicked.emit(self._file_path)

    def paintEvent(self, event):
        super().paintEvent(event)
        if self._pixmap.isNull():
            return

        scaled = self._pixmap.scaled(self.size(), Qt.KeepAspectRatio, Qt.SmoothTransformation)
        x = (self.width() - scaled.width()) // 2
        y = (self.height() - scaled.height()) // 2
        QPainter(self).drawPixmap(int(x), int(y), scaled)
