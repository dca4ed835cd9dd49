import re

V2_MIN_INDICATORS = 3

# Indonesian structured template. Labels are short, so several must co-occur.
V2_INDICATORS = [
    re.compile(r"^📝Untuk\s+memproses\s+pesanan", re.IGNORECASE),
    re.compile(r"Nama\s+Pemesan\s*:", re.IGNORECASE),
    re.compile(r"Nama\s+Penerima\s*:", re.IGNORECASE),
    re.compile(r"No\s+HP\s+Penerima\s*:", re.IGNORECASE),
    re.compile(r"Alamat\s+Penerima\s*:", re.IGNORECASE),
    re.compile(r"Nama\s+Event\s*\(jika\s+ada\)\s*:", re.IGNORECASE),
    re.compile(r"Durasi\s+Event\s*\(dalam\s+jam\)\s*:", re.IGNORECASE),
    re.compile(r"Tanggal\s+Event\s*:", re.IGNORECASE),
    re.compile(r"Waktu\s+Kirim\s*\(jam\)\s*:", re.IGNORECASE),
    re.compile(r"Detail\s+Pesanan\s*:", re.IGNORECASE),
    re.compile(r"Packaging\s+Styrofoam\s*\([^)]+\)\s*:", re.IGNORECASE),
    re.compile(r"Metode\s+pengiriman\s*:", re.IGNORECASE),
    re.compile(r"Biaya\s+Pengiriman\s*\(Rp\)\s*:", re.IGNORECASE),
    re.compile(r"Mendapatkan\s+info\s+Dawet\s+Kemayu\s+Menteng\s+dari\s*:", re.IGNORECASE),
]

# Legacy template. Anchored at the start of the message.
V1_INDICATORS = [
    re.compile(r"^Nama\s*:", re.IGNORECASE),
    re.compile(r"^No\s+hp\s*:", re.IGNORECASE),
    re.compile(r"^Alamat\s*:", re.IGNORECASE),
    re.compile(r"^Tanggal\s*:", re.IGNORECASE),
    re.compile(r"^Waktu\s+Kirim\s*\(jam\)\s*:", re.IGNORECASE),
    re.compile(r"^Jam\s+kirim\s*:", re.IGNORECASE),
    re.compile(r"^Detail\s+pesanan\s*:", re.IGNORECASE),
]


def count_indicators(text: str, indicators: list[re.Pattern]) -> int:
    return sum(1 for pattern in indicators if pattern.search(text))


def detect_format(message_text: str | None) -> str | None:
    """Return 'v2', 'v1' or None for the order template dialect of a message."""
    if not message_text or not isinstance(message_text, str):
        return None

    text = message_text.strip()

    if count_indicators(text, V2_INDICATORS) >= V2_MIN_INDICATORS:
        return "v2"
    if count_indicators(text, V1_INDICATORS) > 0:
        return "v1"
    return None
