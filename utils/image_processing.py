# raw-style-advisor/utils/image_processing.py

import io
from pathlib import Path
from typing import Optional

import rawpy
from PIL import Image
from PIL.Image import Resampling

from .file_management import is_raw_file
from .logger import SimpleLogger

PREVIEW_HEIGHT = 360

def fix_orientation(img: Image.Image) -> Image.Image:
    """Rotates a PIL Image to respect its EXIF orientation tag for viewing."""
    try:
        orientation = img.getexif().get(0x0112, 1)
    except (AttributeError, KeyError):
        return img

    orientation_map = {
        2: Image.Transpose.FLIP_LEFT_RIGHT, 3: Image.Transpose.ROTATE_180, 4: Image.Transpose.FLIP_TOP_BOTTOM,
        5: Image.Transpose.TRANSPOSE, 6: Image.Transpose.ROTATE_270, 7: Image.Transpose.TRANSVERSE,
        8: Image.Transpose.ROTATE_90,
    }
    return img.transpose(orientation_map[orientation]) if orientation in orientation_map else img

def decode_raw_preview(image_path: Path, logger: SimpleLogger) -> Optional[Image.Image]:
    """
    Returns a viewable image for a RAW file. Uses the embedded JPEG thumbnail
    when the camera wrote one, otherwise a half-size demosaic.
    """
    try:
        with rawpy.imread(str(image_path)) as raw:
            try:
                thumb = raw.extract_thumb()
            except (rawpy.LibRawNoThumbnailError, rawpy.LibRawUnsupportedThumbnailError):
                thumb = None
            if thumb is not None and thumb.format == rawpy.ThumbFormat.JPEG:
                return fix_orientation(Image.open(io.BytesIO(thumb.data)))
            if thumb is not None and thumb.format == rawpy.ThumbFormat.BITMAP:
                return Image.fromarray(thumb.data)
            rgb_array = raw.postprocess(use_camera_wb=True, half_size=True)
            return Image.fromarray(rgb_array)
    except (rawpy.LibRawError, OSError) as e:
        logger.error(f"Failed to decode RAW preview for {Path(image_path).name}", exception=e)
        return None

def load_preview_image(image_path: str, logger: SimpleLogger, max_height: int = PREVIEW_HEIGHT) -> Optional[Image.Image]:
    """Loads a RAW or regular image, downscaled to max_height, ready for display."""
    path = Path(image_path)
    if not path.is_file():
        return None
    if is_raw_file(str(path)):
        pil_img = decode_raw_preview(path, logger)
    else:
        try:
            pil_img = fix_orientation(Image.open(path))
        except OSError as e:
            logger.error(f"Could not open image {path.name} for preview", exception=e)
            return None
    if pil_img is None:
        return None

    if max_height > 0 and pil_img.height > max_height:
        new_width = max(1, int(max_height * pil_img.width / pil_img.height))
        pil_img = pil_img.resize((new_width, max_height), Resampling.LANCZOS)
    return pil_img.convert('RGB')
