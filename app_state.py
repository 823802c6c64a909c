# raw-style-advisor/app_state.py

import os
import json
from typing import Dict, Any, Optional
from pathlib import Path

from utils.file_management import ensure_directory_exists
from utils.logger import SimpleLogger
from utils.openai_handler import DEFAULT_MODEL, DEFAULT_MAX_TOKENS, DEFAULT_TIMEOUT_SECONDS
from utils.raw_converter import find_converter

CONFIG_DIR_NAME = "user_config"
SETTINGS_FILE = "settings.json"
API_KEY_FILE = "api_key.txt"
LAST_DIR_FILE = "last_dir.txt"
LOG_FILE = "app.log"
API_KEY_ENV_VAR = "OPENAI_API_KEY"

DEFAULT_SUBJECT_TYPES = [
    "Portrait", "Landscape", "Street", "Architecture", "Wildlife", "Night", "Food", "Product",
]
DEFAULT_STYLE_PRESETS = [
    "Moody Film", "Bright & Airy", "Cinematic Teal & Orange", "Vintage Film",
    "High Contrast B&W", "Matte Pastel", "Natural & Clean",
]


class SelectionState:
    """The images currently chosen in the UI. Copied into every AnalysisRequest."""

    def __init__(self):
        self.target_path: Optional[str] = None
        self.reference_path: Optional[str] = None

    def set_target(self, path: Optional[str]):
        self.target_path = path or None

    def set_reference(self, path: Optional[str]):
        self.reference_path = path or None


class AppState:
    """Manages the application's settings, selection and configuration persistence."""

    def __init__(self, logger: SimpleLogger, config_dir: Optional[Path] = None):
        self.logger = logger
        self.logger.info("Initializing application state...")

        self.selection = SelectionState()
        self.api_key: str = ""
        self.api_key_from_env: bool = False
        self.last_directory: str = ""

        self.settings: Dict[str, Any] = {
            'model_name': DEFAULT_MODEL,
            'max_tokens': DEFAULT_MAX_TOKENS,
            'request_timeout': DEFAULT_TIMEOUT_SECONDS,
            'image_detail': 'low',
            'converter_path': self._find_converter(),
            'max_image_mb': 20,
            'subject_types': list(DEFAULT_SUBJECT_TYPES),
            'style_presets': list(DEFAULT_STYLE_PRESETS),
            'last_subject_type': DEFAULT_SUBJECT_TYPES[0],
            'last_style_preset': DEFAULT_STYLE_PRESETS[0],
            'last_style_approach': 'predefined',
            'log_to_file': False,
        }

        self._config_path = Path(config_dir) if config_dir else Path(__file__).resolve().parent / CONFIG_DIR_NAME
        ensure_directory_exists(self._config_path)

        self._load_configuration_from_disk()
        if self.settings.get('log_to_file'):
            self.logger.set_log_file(self._config_path / LOG_FILE)
        self.logger.info("Application state loaded.")

    @property
    def max_image_bytes(self) -> Optional[int]:
        try:
            limit_mb = float(self.settings.get('max_image_mb') or 0)
        except (TypeError, ValueError):
            return None
        return int(limit_mb * 1024 * 1024) if limit_mb > 0 else None

    def _load_configuration_from_disk(self):
        settings_path = self._config_path / SETTINGS_FILE
        try:
            saved_settings = json.loads(settings_path.read_text('utf-8'))
            self.settings.update({k: v for k, v in saved_settings.items() if k in self.settings})
            self.logger.info(f"Loaded settings from {SETTINGS_FILE}")
        except FileNotFoundError:
            self.logger.info(f"{SETTINGS_FILE} not found. Using default settings.")
        except (json.JSONDecodeError, TypeError, AttributeError) as e:
            self.logger.warn(f"Could not parse {SETTINGS_FILE}. Using default settings. Error: {e}")

        if not self.settings.get('converter_path'):
            self.settings['converter_path'] = self._find_converter()

        env_key = os.environ.get(API_KEY_ENV_VAR, "").strip()
        keys_path = self._config_path / API_KEY_FILE
        if env_key:
            self.api_key, self.api_key_from_env = env_key, True
            self.logger.info(f"Using API key from the {API_KEY_ENV_VAR} environment variable.")
        elif keys_path.exists():
            self.api_key = keys_path.read_text('utf-8').strip()
            if self.api_key:
                self.logger.info(f"Loaded API key from {API_KEY_FILE}.")
        if not self.api_key:
            self.logger.warn(f"No OpenAI API key configured. Set {API_KEY_ENV_VAR} or enter one in Settings.")

        last_dir_path = self._config_path / LAST_DIR_FILE
        if last_dir_path.exists():
            last_dir = last_dir_path.read_text('utf-8').strip()
            if os.path.isdir(last_dir):
                self.last_directory = last_dir

    def save_settings(self):
        settings_path = self._config_path / SETTINGS_FILE
        try:
            with open(settings_path, 'w', encoding='utf-8') as f:
                json.dump(self.settings, f, indent=4)
            self.logger.info(f"Settings saved to {settings_path.name}")
        except (OSError, TypeError) as e:
            self.logger.error(f"Failed to save settings to {settings_path.name}", exception=e)
        self.logger.set_log_file(self._config_path / LOG_FILE if self.settings.get('log_to_file') else None)

    def save_api_key(self, api_key: str):
        self.api_key = api_key.strip()
        self.api_key_from_env = False
        path = self._config_path / API_KEY_FILE
        with open(path, 'w', encoding='utf-8') as f: f.write(self.api_key)
        self.logger.info(f"API key saved to {path.name}")

    def remember_directory(self, file_path: str):
        directory = os.path.dirname(file_path)
        if not directory or not os.path.isdir(directory):
            return
        self.last_directory = directory
        path = self._config_path / LAST_DIR_FILE
        with open(path, 'w', encoding='utf-8') as f: f.write(directory)

    def _find_converter(self) -> Optional[str]:
        path = find_converter()
        if not path:
            self.logger.warn("'magick' not found in system PATH. RAW conversion will fail until ImageMagick is installed.")
        return path
