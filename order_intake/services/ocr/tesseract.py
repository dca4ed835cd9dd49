import io

import opik
import pytesseract
from PIL import Image

from order_intake.core.amount import Recognition
from order_intake.services.ocr.base import OCRService


class TesseractOCR(OCRService):
    """Tesseract OCR over a single image.

    Image bytes → PIL image → `image_to_data` → text rebuilt line by line,
    confidence averaged over recognized words.
    """

    def __init__(self, lang: str = "eng"):
        self._lang = lang

    @opik.track(name="ocr_recognize")
    def recognize(
        self,
        image_bytes: bytes,
        psm: int,
        lang: str | None = None,
        whitelist: str | None = None,
    ) -> Recognition:
        config = f"--psm {psm}"
        if whitelist:
            config += f" -c tessedit_char_whitelist={whitelist}"

        with Image.open(io.BytesIO(image_bytes)) as image:
            data = pytesseract.image_to_data(
                image,
                lang=lang or self._lang,
                config=config,
                output_type=pytesseract.Output.DICT,
            )
        text, confidence = _collect_words(data)
        return Recognition(text=text, confidence=confidence, psm=psm)


def _collect_words(data: dict) -> tuple[str, float]:
    lines: dict[tuple, list[str]] = {}
    confidences = []
    for i, word in enumerate(data.get("text", [])):
        conf = float(data["conf"][i])
        if conf < 0 or not str(word).strip():
            continue
        key = (data["block_num"][i], data["par_num"][i], data["line_num"][i])
        lines.setdefault(key, []).append(str(word).strip())
        confidences.append(conf)

    text = "\n".join(" ".join(words) for words in lines.values())
    confidence = sum(confidences) / len(confidences) if confidences else 0.0
    return text, confidence
