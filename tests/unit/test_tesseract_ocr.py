"""Unit tests for TesseractOCR (mocked pytesseract)."""
from unittest.mock import patch

from order_intake.services.ocr.tesseract import TesseractOCR

MOCK_TESSERACT = "order_intake.services.ocr.tesseract.pytesseract"


def tesseract_data(words, confs, lines=None):
    lines = lines or [1] * len(words)
    return {
        "text": words,
        "conf": confs,
        "block_num": [1] * len(words),
        "par_num": [1] * len(words),
        "line_num": lines,
    }


class TestTesseractOCR:
    def test_defaults_lang_eng(self):
        assert TesseractOCR()._lang == "eng"

    @patch(MOCK_TESSERACT)
    def test_builds_psm_config(self, mock_tess, png_bytes):
        mock_tess.image_to_data.return_value = tesseract_data(["Rp"], [90])
        TesseractOCR().recognize(png_bytes, psm=11)
        _, kwargs = mock_tess.image_to_data.call_args
        assert kwargs["config"] == "--psm 11"
        assert kwargs["lang"] == "eng"

    @patch(MOCK_TESSERACT)
    def test_whitelist_added_to_config(self, mock_tess, png_bytes):
        mock_tess.image_to_data.return_value = tesseract_data([], [])
        TesseractOCR(lang="ind").recognize(png_bytes, psm=6, lang="eng", whitelist="0123456789")
        _, kwargs = mock_tess.image_to_data.call_args
        assert kwargs["config"] == "--psm 6 -c tessedit_char_whitelist=0123456789"
        assert kwargs["lang"] == "eng"

    @patch(MOCK_TESSERACT)
    def test_rebuilds_lines_and_averages_confidence(self, mock_tess, png_bytes):
        mock_tess.image_to_data.return_value = tesseract_data(
            ["Transfer", "Berhasil", "", "Rp", "235.000"],
            [90, 80, -1, 70, 60],
            lines=[1, 1, 1, 2, 2],
        )
        result = TesseractOCR().recognize(png_bytes, psm=11)
        assert result.text == "Transfer Berhasil\nRp 235.000"
        assert result.confidence == 75.0
        assert result.psm == 11

    @patch(MOCK_TESSERACT)
    def test_no_words_means_zero_confidence(self, mock_tess, png_bytes):
        mock_tess.image_to_data.return_value = tesseract_data(["", " "], [-1, -1])
        result = TesseractOCR().recognize(png_bytes, psm=6)
        assert result.text == ""
        assert result.confidence == 0.0
        assert result.ok is False
