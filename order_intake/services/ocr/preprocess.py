"""Image preprocessing ahead of OCR.

Payment screenshots come in every shape: dark-mode banking apps, coloured
e-wallet receipts, phone photos of paper slips. Each mode trades detail for
contrast differently, so the amount pipeline tries them in order.
"""
import io
import logging
import math
import time
from enum import Enum
from pathlib import Path

from pdf2image import convert_from_bytes
from PIL import Image, ImageFilter, ImageOps

logger = logging.getLogger("order_intake.ocr.preprocess")

MAX_WIDTH = 1500
DOWNSCALE_WIDTH = 1200
MIN_WIDTH = 800
UPSCALE_TARGET = 1000
THRESHOLD = 128

LARGE_TEXT_WIDTH_RATIO = 0.9
LARGE_TEXT_HEIGHT_RATIO = 0.25
LARGE_TEXT_TOP_RATIO = 0.3
LARGE_TEXT_MAX_WIDTH = 600


class PreprocessMode(str, Enum):
    COLOR = "color"
    LIGHT = "light"
    BALANCED = "balanced"
    AGGRESSIVE = "aggressive"


PREPROCESS_ORDER = [
    PreprocessMode.COLOR,
    PreprocessMode.LIGHT,
    PreprocessMode.BALANCED,
    PreprocessMode.AGGRESSIVE,
]


def _to_png(image: Image.Image) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def load_image_bytes(data: bytes, dpi: int = 300) -> bytes:
    """Return image bytes ready for Pillow. PDFs are rendered from their first page."""
    if not data.startswith(b"%PDF"):
        return data
    pages = convert_from_bytes(data, dpi=dpi, first_page=1, last_page=1)
    if not pages:
        raise ValueError("PDF document has no pages")
    return _to_png(pages[0])


def _resize(image: Image.Image) -> Image.Image:
    width, height = image.size
    if width > MAX_WIDTH:
        new_height = round(height * DOWNSCALE_WIDTH / width)
        return image.resize((DOWNSCALE_WIDTH, new_height), Image.Resampling.LANCZOS)
    if width < MIN_WIDTH:
        factor = math.ceil(UPSCALE_TARGET / width)
        return image.resize((width * factor, height * factor), Image.Resampling.LANCZOS)
    return image


def _threshold(pixel: int) -> int:
    return 255 if pixel >= THRESHOLD else 0


def preprocess_image(
    image_bytes: bytes,
    mode: PreprocessMode = PreprocessMode.BALANCED,
    debug_dir: str | Path | None = None,
) -> bytes:
    """Apply one preprocessing mode and return PNG bytes.

    Steps: grayscale (not in color), resize, autocontrast, median 3 (balanced
    and aggressive), sharpen (not in color), binary threshold (aggressive).
    A failure is logged and the input is returned unchanged.
    """
    mode = PreprocessMode(mode)
    try:
        with Image.open(io.BytesIO(image_bytes)) as original:
            if mode is PreprocessMode.COLOR:
                image = original.convert("RGB")
            else:
                image = ImageOps.grayscale(original)

        image = ImageOps.autocontrast(_resize(image))
        if mode in (PreprocessMode.BALANCED, PreprocessMode.AGGRESSIVE):
            image = image.filter(ImageFilter.MedianFilter(3))
        if mode is not PreprocessMode.COLOR:
            image = image.filter(ImageFilter.SHARPEN)
        if mode is PreprocessMode.AGGRESSIVE:
            image = image.point(_threshold)
        output = _to_png(image)
    except (OSError, ValueError) as e:
        logger.warning(f"Preprocessing ({mode.value}) failed, using original image: {e}")
        return image_bytes

    if debug_dir:
        _save_debug(output, mode, Path(debug_dir))
    return output


def _save_debug(png_bytes: bytes, mode: PreprocessMode, debug_dir: Path) -> None:
    try:
        debug_dir.mkdir(parents=True, exist_ok=True)
        path = debug_dir / f"preprocessed_{mode.value}_{int(time.time() * 1000)}.png"
        path.write_bytes(png_bytes)
        logger.debug(f"Saved preprocessed image to {path}")
    except OSError as e:
        logger.warning(f"Could not save debug image: {e}")


def crop_large_text_region(image_bytes: bytes) -> bytes:
    """Crop the band where banking apps print the transfer amount in large type.

    90% of the width, centered; 25% of the height, starting 30% from the top.
    """
    with Image.open(io.BytesIO(image_bytes)) as original:
        width, height = original.size
        crop_width = max(1, int(width * LARGE_TEXT_WIDTH_RATIO))
        crop_height = max(1, int(height * LARGE_TEXT_HEIGHT_RATIO))
        left = (width - crop_width) // 2
        top = int(height * LARGE_TEXT_TOP_RATIO)
        region = original.crop((left, top, left + crop_width, top + crop_height))

    if region.width > LARGE_TEXT_MAX_WIDTH:
        new_height = max(1, round(region.height * LARGE_TEXT_MAX_WIDTH / region.width))
        region = region.resize((LARGE_TEXT_MAX_WIDTH, new_height), Image.Resampling.LANCZOS)

    region = ImageOps.autocontrast(ImageOps.grayscale(region))
    return _to_png(region.filter(ImageFilter.SHARPEN))
