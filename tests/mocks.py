import io
from contextlib import contextmanager

from PIL import Image

from order_intake.core.amount import Recognition
from order_intake.services.ocr.base import OCRService


def make_png(width: int = 1000, height: int = 600, color=(255, 255, 255), mode: str = "RGB") -> bytes:
    image = Image.new(mode, (width, height), color)
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


class ScriptedOCR(OCRService):
    """Answers each OCR pass from `respond(image_bytes, psm, whitelist)`. Records every call."""

    def __init__(self, respond=None, text: str = "", confidence: float = 0.0, should_raise: Exception | None = None):
        self._respond = respond
        self._text = text
        self._confidence = confidence
        self._should_raise = should_raise
        self.calls: list[dict] = []
        self.sessions = []

    def recognize(self, image_bytes, psm, lang="eng", whitelist=None):
        self.calls.append({"image": image_bytes, "psm": psm, "lang": lang, "whitelist": whitelist})
        if self._should_raise:
            raise self._should_raise
        if self._respond:
            return self._respond(image_bytes, psm, whitelist)
        return Recognition(text=self._text, confidence=self._confidence, psm=psm)

    @contextmanager
    def session(self, lang="eng"):
        with super().session(lang) as session:
            self.sessions.append(session)
            yield session


V2_ORDER = """📝Untuk memproses pesanan, mohon isi data berikut:
Nama Pemesan: Hera
Nama Penerima: Hera
No HP Penerima: 081244682739
Alamat Penerima: Jl. Kemang Raya 5, Jakarta
Nama Event (jika ada): -
Durasi Event (dalam jam): -
Tanggal Event: 06/01/2026
Waktu Kirim (jam): 08.00
Detail Pesanan:
• 80 x Dawet Kemayu Small
• 2 x Dawet Kemayu Large
Packaging Styrofoam (1 box 40K untuk 50 cup): YA
Metode pengiriman: Pickup
Biaya Pengiriman (Rp): 100000
Notes:
Mendapatkan info Dawet Kemayu Menteng dari: Instagram"""

V1_ORDER = """Nama: Budi Santoso
No hp: 081234567890
Alamat:
Jl. Menteng Raya 10
Jakarta Pusat
(Titik: Gedung B lobby)
Tanggal: 18/01/2026
Jam kirim: 10.30 WIB
Detail pesanan:
• 3 x Dawet Kemayu Medium
- 1x Dawet Kemayu Large
Notes:
Tolong datang tepat waktu"""

PRICE_LIST = {
    "Dawet Kemayu Small": 13000,
    "Dawet Kemayu Medium": 15000,
    "Dawet Kemayu Large": 20000,
    "Dawet Botol 1L": 50000,
}
