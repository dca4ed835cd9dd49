"""Find and rank payment amounts in OCR text.

Pattern families are tried from most to least trustworthy. The standalone
families only run when nothing anchored to a currency marker or keyword was
found, and they skip numbers that look like dates or account references.
"""
import logging
import re
from dataclasses import dataclass

from order_intake.core.amount import AmountCandidate, AmountSelection

logger = logging.getLogger("order_intake.amounts")

DEFAULT_MIN_AMOUNT = 10_000
DEFAULT_MAX_AMOUNT = 50_000_000

_GROUPED = r"\d{1,3}(?:[.,]\d{3})+"
_CONTEXT_RADIUS = 20
_DATE_LIKE = re.compile(r"^(20\d{2}|19\d{2}|\d{6})$")
_ACCOUNT_CONTEXT = re.compile(r"(account|rekening|no\.|nomor|ref)", re.IGNORECASE)
_DATE_CONTEXT = re.compile(
    r"(jan|feb|mar|apr|may|mei|jun|jul|aug|agu|sep|oct|okt|nov|dec|des|wib|wit|202[0-9])",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class PatternFamily:
    source: str
    pattern: re.Pattern
    weight: int
    standalone: bool = False


PATTERN_FAMILIES = [
    PatternFamily("rp_separated", re.compile(rf"Rp\s*({_GROUPED})", re.IGNORECASE), 10),
    PatternFamily("rp_digits", re.compile(r"Rp\s*(\d{4,9})", re.IGNORECASE), 9),
    PatternFamily("rp_dot", re.compile(r"Rp\.?\s*(\d{1,3}(?:[.,]\d{3})*)", re.IGNORECASE), 8),
    PatternFamily(
        "keyword",
        re.compile(rf"(?:transfer|pembayaran|nominal|jumlah|total|bayar)[:\s]*({_GROUPED})", re.IGNORECASE),
        7,
    ),
    PatternFamily("rupiah_suffix", re.compile(rf"({_GROUPED})\s*rupiah", re.IGNORECASE), 6),
    PatternFamily(
        "standalone_grouped", re.compile(r"\b(\d{1,3}(?:[.,]\d{3}){1,2})\b"), 4, standalone=True
    ),
    PatternFamily("standalone_digits", re.compile(r"\b(\d{4,7})\b"), 3, standalone=True),
]


def _to_amount(raw: str) -> int:
    return int(re.sub(r"[.,]", "", raw))


def _looks_like_reference(text: str, match: re.Match) -> bool:
    digits = re.sub(r"[.,]", "", match.group(1))
    if _DATE_LIKE.match(digits):
        return True
    start = max(0, match.start() - _CONTEXT_RADIUS)
    context = text[start:match.end() + _CONTEXT_RADIUS]
    return bool(_ACCOUNT_CONTEXT.search(context) or _DATE_CONTEXT.search(context))


def rank_candidates(candidates: list[AmountCandidate]) -> list[AmountCandidate]:
    """Drop repeated amounts (first occurrence wins), then sort by weight desc, amount asc."""
    unique = []
    seen = set()
    for candidate in candidates:
        if candidate.amount in seen:
            continue
        seen.add(candidate.amount)
        unique.append(candidate)
    return sorted(unique, key=lambda c: (-c.weight, c.amount))


def extract_amounts(
    text: str | None,
    min_amount: int = DEFAULT_MIN_AMOUNT,
    max_amount: int = DEFAULT_MAX_AMOUNT,
) -> AmountSelection:
    """Collect every in-range amount in `text` and rank them."""
    if not text:
        return AmountSelection()

    candidates = []
    for family in PATTERN_FAMILIES:
        if family.standalone and candidates:
            break
        for match in family.pattern.finditer(text):
            if not match.group(1):
                continue
            if family.standalone and _looks_like_reference(text, match):
                continue
            amount = _to_amount(match.group(1))
            if not min_amount <= amount <= max_amount:
                continue
            candidates.append(AmountCandidate(
                amount=amount,
                original=match.group(0),
                weight=family.weight,
                source=family.source,
                position=match.start(),
            ))

    selection = AmountSelection(candidates=rank_candidates(candidates))
    logger.debug(f"Found {selection.count} candidate amount(s): {[c.amount for c in selection.candidates]}")
    return selection
