"""Text cleanup shared by the format detector and the dialect parsers.

Chat clients paste templates with NBSPs, zero-width joiners and CRLF line
endings. Every regex downstream assumes plain spaces and LF.
"""
import re

_SPACE_VARIANTS = re.compile(r"[\u00A0\u2000-\u200A\u202F\u205F\u3000]")
_INVISIBLE = re.compile(r"[\u200B-\u200D\u2060-\u2064\uFEFF\u00AD]")
_HORIZONTAL_RUNS = re.compile(r"[ \t]+")


def normalize_text(raw: str | None) -> str:
    """Remove invisible characters and normalize whitespace. Idempotent."""
    if not raw or not isinstance(raw, str):
        return ""

    text = raw.replace("\r\n", "\n").replace("\r", "\n")
    text = _SPACE_VARIANTS.sub(" ", text)
    text = _INVISIBLE.sub("", text)
    text = _HORIZONTAL_RUNS.sub(" ", text)
    return text.strip()


def normalize_delivery_method(method: str | None) -> str:
    """Standardize the known shipping methods; keep unknown ones as typed."""
    if not method or not isinstance(method, str) or not method.strip():
        return "-"

    lowered = method.strip().lower()
    if lowered == "pickup":
        return "Pickup"
    if lowered in ("grabexpress", "grab express"):
        return "GrabExpress"
    if lowered == "custom":
        return "Custom"
    return method.strip()
