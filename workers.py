# raw-style-advisor/workers.py

from typing import Dict, Any

from PyQt5.QtCore import QObject, pyqtSignal

from utils.analysis_pipeline import AnalysisPipeline, AnalysisRequest
from utils.errors import AnalysisError
from utils.image_processing import PREVIEW_HEIGHT, load_preview_image
from utils.logger import SimpleLogger
from utils.openai_handler import OpenAIHandler
from utils.raw_converter import ImageMagickConverter

class AnalysisWorker(QObject):
    """
    Runs a single AnalysisRequest off the GUI thread.

    Emits at most one `status`, then exactly one of `result` or `error`, then `finished`.
    One worker is created per request, so its signals belong to that request only.
    """
    status, result, error = pyqtSignal(str), pyqtSignal(str), pyqtSignal(str)
    finished = pyqtSignal()

    def __init__(self, request: AnalysisRequest, config: Dict[str, Any], api_key: str, logger: SimpleLogger):
        super().__init__()
        self.request, self.config, self.api_key, self.logger = request, config, api_key, logger

    def _build_pipeline(self) -> AnalysisPipeline:
        handler = None
        if self.api_key:
            handler = OpenAIHandler(
                self.api_key, self.logger,
                model_name=self.config.get('model_name'),
                max_tokens=int(self.config.get('max_tokens', 500)),
                timeout=float(self.config.get('request_timeout', 120)),
            )
        converter = ImageMagickConverter(self.config.get('converter_path'), self.logger)
        return AnalysisPipeline(
            converter, handler, self.logger,
            image_detail=self.config.get('image_detail', 'low'),
            max_image_bytes=self.config.get('max_image_bytes'),
        )

    def run(self):
        try:
            text = self._build_pipeline().run(self.request, on_status=self.status.emit)
            self.result.emit(text)
        except AnalysisError as e:
            self.logger.error("Analysis failed.", exception=e)
            self.error.emit(f"Error: {e.user_message()}")
        except Exception as e:
            self.logger.error("An unexpected error occurred in AnalysisWorker.", exception=e)
            self.error.emit(f"Error: An unexpected error occurred: {e}")
        finally:
            self.finished.emit()

class PreviewLoadWorker(QObject):
    """Decodes one image preview off the GUI thread. Emits raw RGB bytes with their size."""
    image_loaded = pyqtSignal(str, str, bytes, int, int)
    failed = pyqtSignal(str, str)
    finished = pyqtSignal()

    def __init__(self, slot: str, image_path: str, logger: SimpleLogger, max_height: int = PREVIEW_HEIGHT):
        super().__init__()
        self.slot, self.image_path, self.logger, self.max_height = slot, image_path, logger, max_height

    def run(self):
        try:
            pil_img = load_preview_image(self.image_path, self.logger, self.max_height)
            if pil_img is None:
                self.failed.emit(self.slot, self.image_path)
            else:
                width, height = pil_img.size
                self.image_loaded.emit(self.slot, self.image_path, pil_img.tobytes("raw", "RGB"), width, height)
        except Exception as e:
            self.logger.error(f"Error loading preview {self.image_path}", exception=e)
            self.failed.emit(self.slot, self.image_path)
        finally:
            self.finished.emit()
