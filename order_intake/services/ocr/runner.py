"""Multi-pass recognition over one preprocessed image.

Scores used to pick between passes:
    full text:  confidence + 20 if "Rp" appears + 10 if a grouped numeral appears
    large text: confidence + 20 if "Rp" appears + 10 if a 3+ digit run appears
    per mode:   recognition confidence + 5 * weight of the selected amount
"""
import logging
import re

from order_intake.core.amount import AmountSelection, Recognition
from order_intake.services.amounts.extractor import (
    DEFAULT_MAX_AMOUNT,
    DEFAULT_MIN_AMOUNT,
    extract_amounts,
)
from order_intake.services.ocr.base import RecognitionSession
from order_intake.services.ocr.preprocess import crop_large_text_region

logger = logging.getLogger("order_intake.ocr.runner")

FULL_TEXT_PSMS = (11, 6, 12, 13)
LARGE_TEXT_PSMS = (8, 7, 6)
DIGITS_WHITELIST = "0123456789.,Rp "

FULL_TEXT_EARLY_STOP = 90
MODE_EARLY_STOP = 100
LARGE_TEXT_CONFIDENCE = 95.0
WEIGHT_MULTIPLIER = 5

_CURRENCY = re.compile(r"Rp", re.IGNORECASE)
_GROUPED_NUMERAL = re.compile(r"\d{1,3}(?:[.,]\d{3})+")
_DIGIT_RUN = re.compile(r"\d{3,}")


def score_full_text(recognition: Recognition) -> float:
    score = recognition.confidence
    if _CURRENCY.search(recognition.text):
        score += 20
    if _GROUPED_NUMERAL.search(recognition.text):
        score += 10
    return score


def score_large_text(recognition: Recognition) -> float:
    score = recognition.confidence
    if _CURRENCY.search(recognition.text):
        score += 20
    if _DIGIT_RUN.search(recognition.text):
        score += 10
    return score


def combined_score(confidence: float, selection: AmountSelection) -> float:
    return confidence + selection.selected.weight * WEIGHT_MULTIPLIER


def should_stop_early(score: float) -> bool:
    """A mode result above this score is not worth trying to beat."""
    return score > MODE_EARLY_STOP


class ModeOutcome:
    """What one preprocessing mode produced: the pass used and the amounts found in it."""

    def __init__(self, mode: str | None, recognition: Recognition, selection: AmountSelection):
        self.mode = mode
        self.recognition = recognition
        self.selection = selection

    @property
    def score(self) -> float:
        return combined_score(self.recognition.confidence, self.selection)


class BestResult:
    """Running maximum over mode outcomes. Keeps the first of equal scores."""

    def __init__(self):
        self.outcome: ModeOutcome | None = None
        self.score = 0.0
        self.last_recognition: Recognition | None = None

    def offer(self, outcome: ModeOutcome) -> bool:
        """Record `outcome` if it beats the current best. Returns True when it does."""
        score = outcome.score
        if self.outcome is None or score > self.score:
            self.outcome = outcome
            self.score = score
            return True
        return False

    def saw(self, recognition: Recognition | None) -> None:
        if recognition is not None:
            self.last_recognition = recognition

    @property
    def found(self) -> bool:
        return self.outcome is not None


class RecognitionRunner:
    """Runs the large-text, full-text and digits-only strategies for one image."""

    def __init__(self, min_amount: int = DEFAULT_MIN_AMOUNT, max_amount: int = DEFAULT_MAX_AMOUNT):
        self.min_amount = min_amount
        self.max_amount = max_amount

    def _recognize(
        self,
        session: RecognitionSession,
        image_bytes: bytes,
        psm: int,
        whitelist: str | None = None,
    ) -> Recognition | None:
        try:
            return session.recognize(image_bytes, psm=psm, whitelist=whitelist)
        except Exception as e:
            logger.warning(f"OCR pass failed (psm={psm}): {e}")
            return None

    def large_text(self, session: RecognitionSession, image_bytes: bytes) -> Recognition | None:
        """Read the prominent amount band. Returns the best-scoring non-empty pass."""
        try:
            region = crop_large_text_region(image_bytes)
        except (OSError, ValueError) as e:
            logger.warning(f"Large-text crop failed: {e}")
            return None

        best, best_score = None, float("-inf")
        for psm in LARGE_TEXT_PSMS:
            recognition = self._recognize(session, region, psm)
            if recognition is None or not recognition.ok:
                continue
            score = score_large_text(recognition)
            if score > best_score:
                best, best_score = recognition, score
        if best is not None:
            best = best.model_copy(update={"strategy": "large_text"})
        return best

    def full_text(self, session: RecognitionSession, image_bytes: bytes, digits_only: bool = False) -> Recognition:
        """Try each page-segmentation mode, stopping once a pass scores above 90."""
        whitelist = DIGITS_WHITELIST if digits_only else None
        strategy = "digits_only" if digits_only else "full_text"

        best, best_score = None, float("-inf")
        for psm in FULL_TEXT_PSMS:
            recognition = self._recognize(session, image_bytes, psm, whitelist)
            if recognition is None:
                continue
            score = score_full_text(recognition)
            logger.debug(f"PSM {psm}: confidence={recognition.confidence:.1f}, score={score:.1f}")
            if score > best_score:
                best, best_score = recognition, score
            if score > FULL_TEXT_EARLY_STOP:
                break

        if best is None or not best.ok:
            return Recognition(confidence=best.confidence if best else 0.0, strategy=strategy)
        return best.model_copy(update={"strategy": strategy})

    def run_mode(
        self,
        session: RecognitionSession,
        image_bytes: bytes,
        mode: str | None,
        tracker: BestResult,
    ) -> ModeOutcome | None:
        """Large text first, then full text, then digits only. Returns the first pass with an amount."""
        large = self.large_text(session, image_bytes)
        if large is not None:
            selection = self._amounts(large.text)
            if selection.ok:
                trusted = large.model_copy(update={"confidence": LARGE_TEXT_CONFIDENCE})
                tracker.saw(trusted)
                return ModeOutcome(mode, trusted, selection)

        for digits_only in (False, True):
            recognition = self.full_text(session, image_bytes, digits_only=digits_only)
            tracker.saw(recognition)
            if not recognition.ok:
                continue
            selection = self._amounts(recognition.text)
            if selection.ok:
                return ModeOutcome(mode, recognition, selection)
        return None

    def _amounts(self, text: str) -> AmountSelection:
        return extract_amounts(text, min_amount=self.min_amount, max_amount=self.max_amount)
