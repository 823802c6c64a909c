# raw-style-advisor/utils/analysis_pipeline.py

import base64
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

from .errors import ConversionError, ValidationError
from .file_management import converted_output_path, reference_mime_type
from .logger import SimpleLogger
from .openai_handler import OpenAIHandler
from .raw_converter import ImageMagickConverter

STYLE_PREDEFINED = "predefined"
STYLE_REFERENCE = "reference"
STYLE_APPROACHES = (STYLE_PREDEFINED, STYLE_REFERENCE)

CONVERTED_MIME = "image/png"
STATUS_CONVERSION_OK = "Conversion OK. Calling OpenAI..."

SYSTEM_PROMPT = (
    "You are an expert photo editor AI. Analyze the provided image(s) and suggest specific "
    "Adobe Lightroom Develop module settings (like Exposure, Contrast, Highlights, Shadows, "
    "Whites, Blacks, Temperature, Tint, Vibrance, Saturation, HSL sliders, Color Grading wheels, "
    "etc.) to achieve the desired style. Provide the settings as a clear list or key-value pairs."
)


@dataclass(frozen=True)
class AnalysisRequest:
    """One user click. Paths travel with the request instead of living in shared state."""
    subject_type: str
    style_approach: str
    style_value: Optional[str] = None
    target_path: Optional[str] = None
    reference_path: Optional[str] = None


def build_user_prompt(request: AnalysisRequest) -> str:
    prompt = f"Analyze the target image (Subject: {request.subject_type}). "
    if request.style_approach == STYLE_REFERENCE:
        prompt += ("Suggest Lightroom settings to make the target image match the style "
                   "and mood of the provided reference image.")
    else:
        prompt += f'Suggest Lightroom settings to achieve a "{request.style_value}" style.'
    return prompt


def image_part(b64_data: str, mime_type: str, detail: str) -> Dict[str, Any]:
    return {
        "type": "image_url",
        "image_url": {"url": f"data:{mime_type};base64,{b64_data}", "detail": detail},
    }


def build_messages(request: AnalysisRequest, target_b64: str, reference_b64: Optional[str] = None,
                   detail: str = "low") -> List[Dict[str, Any]]:
    """
    Builds the system + user message pair for the chat completion call.

    The target is always attached as PNG. The reference is attached only for the
    'reference' style approach, with a MIME type inferred from its extension.
    """
    content: List[Dict[str, Any]] = [
        {"type": "text", "text": build_user_prompt(request)},
        image_part(target_b64, CONVERTED_MIME, detail),
    ]
    if request.style_approach == STYLE_REFERENCE:
        if reference_b64 is None:
            raise ValidationError("Please select a valid reference image first.")
        content.append(image_part(reference_b64, reference_mime_type(request.reference_path or ""), detail))
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": content},
    ]


def encode_image_file(path: Path, max_bytes: Optional[int] = None) -> str:
    """Reads a file and returns its base64 text, refusing files above max_bytes."""
    path = Path(path)
    size = path.stat().st_size
    if max_bytes and size > max_bytes:
        raise ValidationError(
            f"Image '{path.name}' is {size / 1_048_576:.1f} MB, above the "
            f"{max_bytes / 1_048_576:.0f} MB limit. Use a smaller file or raise the limit in Settings."
        )
    return base64.b64encode(path.read_bytes()).decode('ascii')


_SETTING_LINE = re.compile(
    r'^\s*(?:[-*•]|\d+[.)])?\s*(?:\*\*)?(?P<key>[A-Za-z][\w /&()%+-]{0,40}?)(?:\*\*)?\s*[:=]\s*(?:\*\*)?\s*(?P<value>\S.*?)\s*$'
)


def parse_suggested_settings(text: str) -> List[Tuple[str, str]]:
    """
    Extracts "Key: value" style pairs from the model's free-text answer.

    Lines without a value (section headings such as "Basic:") are skipped.
    The verbatim text stays the primary output; this is only a convenience view.
    """
    pairs = []
    for line in (text or "").splitlines():
        if not (match := _SETTING_LINE.match(line)):
            continue
        key = match.group('key').strip()
        value = match.group('value').strip().strip('*').strip()
        if key and value:
            pairs.append((key, value))
    return pairs


class AnalysisPipeline:
    """Runs one analysis: validate -> convert -> encode -> call API -> clean up."""

    def __init__(self, converter: ImageMagickConverter, handler: Optional[OpenAIHandler], logger: SimpleLogger,
                 image_detail: str = "low", max_image_bytes: Optional[int] = None, temp_dir: Optional[str] = None):
        self.converter = converter
        self.handler = handler
        self.logger = logger
        self.image_detail = image_detail
        self.max_image_bytes = max_image_bytes
        self.temp_dir = temp_dir

    def validate(self, request: AnalysisRequest):
        if self.handler is None:
            raise ValidationError("OpenAI API key not configured. Set the OPENAI_API_KEY environment "
                                  "variable or enter a key in the Settings tab.")
        if not isinstance(request.target_path, str) or not request.target_path:
            self.logger.error(f"Target image path is not set or invalid: {request.target_path!r}")
            raise ValidationError("Please select a valid target RAW image first.")
        if request.style_approach not in STYLE_APPROACHES:
            raise ValidationError(f"Unknown style approach: {request.style_approach!r}")
        if request.style_approach == STYLE_REFERENCE and (
                not isinstance(request.reference_path, str) or not request.reference_path):
            self.logger.error(f"Reference image path is not set or invalid: {request.reference_path!r}")
            raise ValidationError("Please select a valid reference image first.")
        if request.style_approach == STYLE_PREDEFINED and (
                not isinstance(request.style_value, str) or not request.style_value.strip()):
            raise ValidationError("Please choose or type a style first.")

    def run(self, request: AnalysisRequest, on_status: Optional[Callable[[str], None]] = None) -> str:
        """Returns the suggested settings text verbatim. Raises an AnalysisError subclass on failure."""
        self.logger.info(f"Analysis requested: subject={request.subject_type!r}, "
                         f"approach={request.style_approach!r}, style={request.style_value!r}")
        self.validate(request)

        output_path = converted_output_path(request.target_path, self.temp_dir)
        try:
            converted = self.converter.convert(request.target_path, output_path)
            if on_status:
                on_status(STATUS_CONVERSION_OK)
            target_b64 = self._encode(converted, ConversionError, "Could not read the converted image")
            reference_b64 = None
            if request.style_approach == STYLE_REFERENCE:
                reference_b64 = self._encode(Path(request.reference_path), ValidationError,
                                             "Could not read the reference image")
            messages = build_messages(request, target_b64, reference_b64, self.image_detail)
            text = self.handler.send_request(messages)
        finally:
            self._remove_temp_file(output_path)

        self.logger.info("Analysis finished successfully.")
        return text

    def _encode(self, path: Path, error_type, message: str) -> str:
        try:
            return encode_image_file(path, self.max_image_bytes)
        except OSError as e:
            self.logger.error(f"{message}: {path}", exception=e)
            raise error_type(f"{message} ({Path(path).name}): {e}") from e

    def _remove_temp_file(self, path: Path):
        try:
            Path(path).unlink()
            self.logger.info(f"Deleted temp file: {path}")
        except FileNotFoundError:
            pass
        except OSError as e:
            self.logger.error(f"Error deleting temp file {path}", exception=e)
