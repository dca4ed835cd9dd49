"""Delivery-time normalization and natural-language extraction.

Customers write times as "08.00", "8:30 WIB", "jam 8" or bury them in a
sentence ("*Kirim dari outlet: 10.45 WIB*"). Storage always uses HH:MM.
"""
import logging
import re

from order_intake.core.errors import TimeNormalizationError

logger = logging.getLogger("order_intake.delivery_time")

_MARKDOWN = re.compile(r"[*_~`]+")
_TIMEZONE_SUFFIX = re.compile(r"\s*(WIB|WITA|WIT|AM|PM)\s*$", re.IGNORECASE)
_COLON_TIME = re.compile(r"(\d{1,2}):(\d{1,2})")
_DOT_TIME = re.compile(r"(\d{1,2})\.(\d{1,2})")
_BARE_HOUR = re.compile(r"\b(\d{1,2})\b(?![.:])")

_LABELED = re.compile(r"^(jam|waktu)\s+kirim\s*:?\s*", re.IGNORECASE)
_LABELED_VALUE = re.compile(r"(?:jam|waktu)\s+kirim\s*:?\s*(.+)", re.IGNORECASE)
_OUTLET = re.compile(r"kirim\s+dari\s+outlet\s*:?\s*(.+)?", re.IGNORECASE)
_HAS_TIME = re.compile(r"(\d{1,2}[.:]\d{1,2}|\d{1,2}(?:\s*(?:wib|wita|wit|jam|pukul))?)", re.IGNORECASE)
_KIRIM_VALUE = re.compile(r"kirim(?:\s+(?:dari|pukul|jam))?\s*:?\s*(.+)", re.IGNORECASE)
_ANY_TIME = re.compile(r"(\d{1,2}[.:]\d{1,2}|\d{1,2})")
# Whole-message fallback only trusts H.MM / H:MM so phone numbers and prices are skipped.
_GLOBAL_TIME = re.compile(r"(?<!\d)(\d{1,2}[.:]\d{2})(?!\d)")
_AFTERNOON = re.compile(r"\b(pm|sore|malam)\b", re.IGNORECASE)
_MIDDAY = re.compile(r"\bsiang\b", re.IGNORECASE)

_TOKEN_TZ = re.compile(r"\s*(wib|wita|wit)\s*$", re.IGNORECASE)
_TOKEN_PREFIX = re.compile(r"^(jam|pukul)\s+", re.IGNORECASE)
_TOKEN_SUFFIX = re.compile(r"\s*(jam|pukul)\s*$", re.IGNORECASE)


def strip_timezone(value: str) -> str:
    return _TIMEZONE_SUFFIX.sub("", value).strip()


def normalize_delivery_time(value: str | None) -> str:
    """Normalize a time expression to 24-hour, zero-padded HH:MM.

    Accepts ':' or '.' as separator, or a bare hour. The time may appear
    anywhere in the string.

    Raises:
        TimeNormalizationError: If no valid time can be found.
    """
    if not value or not isinstance(value, str) or not value.strip():
        raise TimeNormalizationError(f"Invalid delivery_time input: {value!r}")

    original = value.strip()
    cleaned = strip_timezone(_MARKDOWN.sub("", original).strip())

    match = _COLON_TIME.search(cleaned) or _DOT_TIME.search(cleaned)
    if match:
        hours, minutes = int(match.group(1)), int(match.group(2))
    else:
        match = _BARE_HOUR.search(cleaned)
        if not match:
            raise TimeNormalizationError(f"Cannot parse time format: {original}")
        hours, minutes = int(match.group(1)), 0

    if _AFTERNOON.search(original) and hours < 12:
        hours += 12
    elif _MIDDAY.search(original) and 1 <= hours <= 5:
        hours += 12

    if not 0 <= hours <= 23:
        raise TimeNormalizationError(f"Invalid hours: {hours} (must be 0-23) from input: {original}")
    if not 0 <= minutes <= 59:
        raise TimeNormalizationError(f"Invalid minutes: {minutes} (must be 0-59) from input: {original}")

    return f"{hours:02d}:{minutes:02d}"


def _find_time_token(lines: list[str]) -> str | None:
    """Pick the time token by label priority: explicit label, outlet line, any 'kirim' line."""
    outlet_token = None
    kirim_token = None
    for line in lines:
        if _LABELED.match(line):
            match = _LABELED_VALUE.search(line)
            if match and match.group(1).strip():
                return match.group(1).strip()
            continue

        outlet = _OUTLET.search(line)
        if outlet:
            if outlet_token is None and outlet.group(1):
                outlet_token = outlet.group(1).strip()
            continue

        if kirim_token is None and "kirim" in line.lower() and _HAS_TIME.search(line):
            match = _KIRIM_VALUE.search(line) or _ANY_TIME.search(line)
            if match:
                kirim_token = match.group(1).strip()
    return outlet_token or kirim_token


def extract_delivery_time_from_message(message_text: str | None) -> str | None:
    """Find a delivery time in free text. Returns HH:MM or None, never raises."""
    if not message_text or not isinstance(message_text, str):
        return None

    cleaned = _MARKDOWN.sub("", message_text)
    lines = [re.sub(r"[ \t]+", " ", line).strip() for line in cleaned.split("\n")]
    lines = [line for line in lines if line]
    if not lines:
        return None

    token = _find_time_token(lines)
    if not token:
        anywhere = _GLOBAL_TIME.search(" ".join(lines))
        if not anywhere:
            return None
        token = anywhere.group(1)

    token = _TOKEN_TZ.sub("", token)
    token = _TOKEN_PREFIX.sub("", token)
    token = _TOKEN_SUFFIX.sub("", token).strip()
    if not token:
        return None

    try:
        return normalize_delivery_time(token)
    except TimeNormalizationError as e:
        logger.warning(f"Failed to normalize delivery_time {token!r}: {e}")
        return None
