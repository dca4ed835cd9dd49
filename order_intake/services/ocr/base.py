from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Iterator

from order_intake.core.amount import Recognition


class RecognitionSession:
    """A bounded run of OCR passes over one payment image.

    Obtained from `OCRService.session()` and only usable inside its `with`
    block. Passes are forwarded to the engine in call order.
    """

    def __init__(self, engine: "OCRService", lang: str):
        self._engine = engine
        self.lang = lang
        self.passes = 0
        self.closed = False

    def recognize(self, image_bytes: bytes, psm: int, whitelist: str | None = None) -> Recognition:
        if self.closed:
            raise RuntimeError("Recognition session already released")
        self.passes += 1
        return self._engine.recognize(image_bytes, psm=psm, lang=self.lang, whitelist=whitelist)

    def close(self) -> None:
        self.closed = True


class OCRService(ABC):
    @abstractmethod
    def recognize(
        self,
        image_bytes: bytes,
        psm: int,
        lang: str = "eng",
        whitelist: str | None = None,
    ) -> Recognition:
        """Run one OCR pass. Returns recognized text plus a 0-100 confidence."""
        ...

    @contextmanager
    def session(self, lang: str = "eng") -> Iterator[RecognitionSession]:
        session = RecognitionSession(self, lang)
        try:
            yield session
        finally:
            session.close()
