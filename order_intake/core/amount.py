from enum import Enum

from pydantic import BaseModel, Field


class ExtractionReason(str, Enum):
    OK = "ok"
    LOW_CONFIDENCE = "low_confidence"
    NO_AMOUNTS_FOUND = "no_amounts_found"
    EXCEPTION = "exception"


class AmountCandidate(BaseModel):
    """A numeric value recovered from OCR text with its provenance."""
    amount: int
    original: str
    weight: int
    source: str
    position: int = 0


class AmountSelection(BaseModel):
    """Ranked, deduplicated candidates for one piece of OCR text."""
    candidates: list[AmountCandidate] = Field(default_factory=list)

    @property
    def selected(self) -> AmountCandidate | None:
        return self.candidates[0] if self.candidates else None

    @property
    def ok(self) -> bool:
        return len(self.candidates) > 0

    @property
    def count(self) -> int:
        return len(self.candidates)


class Recognition(BaseModel):
    """Outcome of a single OCR pass."""
    text: str = ""
    confidence: float = 0.0
    psm: int | None = None
    strategy: str = "full_text"

    @property
    def ok(self) -> bool:
        return bool(self.text.strip())


class ExtractionMetadata(BaseModel):
    source: str
    weight: int
    original: str
    psm: int | None = None
    preprocess_mode: str | None = None
    strategy: str | None = None


class ExtractionResult(BaseModel):
    """Result of extracting a payment amount from an image.

    Created fresh per call. The caller decides whether to trust `value` or
    ask the submitter to confirm it.
    """
    ok: bool
    value: int | None = None
    candidates: list[AmountCandidate] = Field(default_factory=list)
    confidence: float = 0.0
    needs_confirmation: bool = True
    reason: ExtractionReason
    metadata: ExtractionMetadata | None = None
    ocr_text: str = ""
    error: str | None = None
