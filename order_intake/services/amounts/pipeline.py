import logging
from pathlib import Path

import opik
from pydantic import BaseModel

from order_intake.core.amount import (
    ExtractionMetadata,
    ExtractionReason,
    ExtractionResult,
)
from order_intake.services.amounts.extractor import DEFAULT_MAX_AMOUNT, DEFAULT_MIN_AMOUNT
from order_intake.services.ocr.base import OCRService
from order_intake.services.ocr.preprocess import (
    PREPROCESS_ORDER,
    load_image_bytes,
    preprocess_image,
)
from order_intake.services.ocr.runner import BestResult, ModeOutcome, RecognitionRunner, should_stop_early
from order_intake.services.ocr.tesseract import TesseractOCR

logger = logging.getLogger("order_intake.amounts.pipeline")

CONFIDENCE_THRESHOLD = 80.0
OCR_TEXT_LIMIT = 500


class ExtractionOptions(BaseModel):
    preprocess: bool = True
    debug_save: bool = False
    debug_dir: str = "/tmp/ocr-debug"
    lang: str = "eng"
    min_amount: int = DEFAULT_MIN_AMOUNT
    max_amount: int = DEFAULT_MAX_AMOUNT
    require_confirmation: bool = False
    confidence_threshold: float = CONFIDENCE_THRESHOLD


class AmountExtractionPipeline:
    """Recover a payment amount from a screenshot or PDF receipt.

    Each preprocessing mode is run through the recognition strategies; the
    best (mode, strategy) pair by combined score wins. Ambiguous results
    are returned with `needs_confirmation` set rather than rejected.
    """

    def __init__(self, ocr: OCRService, options: ExtractionOptions | None = None):
        self._ocr = ocr
        self.options = options or ExtractionOptions()
        self._runner = RecognitionRunner(
            min_amount=self.options.min_amount,
            max_amount=self.options.max_amount,
        )

    @opik.track(name="extract_amount_from_image")
    def extract(self, image: bytes) -> ExtractionResult:
        try:
            return self._extract(image)
        except Exception as e:
            logger.exception(f"Amount extraction failed: {e}")
            return ExtractionResult(
                ok=False,
                reason=ExtractionReason.EXCEPTION,
                error=str(e),
            )

    def _extract(self, image: bytes) -> ExtractionResult:
        image_bytes = load_image_bytes(image)
        modes = PREPROCESS_ORDER if self.options.preprocess else [None]
        debug_dir = Path(self.options.debug_dir) if self.options.debug_save else None
        tracker = BestResult()

        with self._ocr.session(lang=self.options.lang) as session:
            for mode in modes:
                processed = preprocess_image(image_bytes, mode, debug_dir) if mode else image_bytes
                mode_name = mode.value if mode else None

                outcome = self._runner.run_mode(session, processed, mode_name, tracker)
                if outcome is None:
                    logger.info(f"No amount found with preprocessing={mode_name}")
                    continue

                logger.info(
                    f"Found amount with preprocessing={mode_name}: {outcome.selection.selected.amount} "
                    f"(score: {outcome.score:.1f})"
                )
                tracker.offer(outcome)
                if should_stop_early(outcome.score):
                    break

        if not tracker.found:
            return self._not_found(tracker)
        return self._build_result(tracker.outcome)

    def _not_found(self, tracker: BestResult) -> ExtractionResult:
        last = tracker.last_recognition
        if last is not None and last.ok:
            text = last.text[:OCR_TEXT_LIMIT]
        else:
            text = "All preprocessing modes failed"
        return ExtractionResult(
            ok=False,
            confidence=last.confidence if last else 0.0,
            reason=ExtractionReason.NO_AMOUNTS_FOUND,
            ocr_text=text,
        )

    def _build_result(self, outcome: ModeOutcome) -> ExtractionResult:
        selection = outcome.selection
        selected = selection.selected
        confidence = outcome.recognition.confidence
        needs_confirmation = (
            self.options.require_confirmation
            or selection.count > 1
            or confidence < self.options.confidence_threshold
        )
        return ExtractionResult(
            ok=True,
            value=selected.amount,
            candidates=selection.candidates,
            confidence=confidence,
            needs_confirmation=needs_confirmation,
            reason=ExtractionReason.LOW_CONFIDENCE if needs_confirmation else ExtractionReason.OK,
            metadata=ExtractionMetadata(
                source=selected.source,
                weight=selected.weight,
                original=selected.original,
                psm=outcome.recognition.psm,
                preprocess_mode=outcome.mode,
                strategy=outcome.recognition.strategy,
            ),
        )


def extract_amount_from_image(
    image: bytes,
    options: ExtractionOptions | dict | None = None,
    ocr: OCRService | None = None,
) -> ExtractionResult:
    """Convenience wrapper around `AmountExtractionPipeline` with Tesseract as the default engine."""
    if isinstance(options, dict):
        options = ExtractionOptions(**options)
    if ocr is None:
        ocr = TesseractOCR(lang=(options or ExtractionOptions()).lang)
    return AmountExtractionPipeline(ocr, options).extract(image)
