"""Unit tests for delivery-time normalization and extraction."""
import pytest

from order_intake.core.errors import TimeNormalizationError
from order_intake.parsing.delivery_time import (
    extract_delivery_time_from_message,
    normalize_delivery_time,
    strip_timezone,
)


class TestNormalizeDeliveryTime:
    @pytest.mark.parametrize("raw, expected", [
        ("08.00", "08:00"),
        ("8:30", "08:30"),
        ("8:30 WIB", "08:30"),
        ("10.45 WITA", "10:45"),
        ("jam 8", "08:00"),
        ("*10.45*", "10:45"),
        ("Kirim pukul 9.15 ya", "09:15"),
        ("14", "14:00"),
    ])
    def test_normalizes_to_hh_mm(self, raw, expected):
        assert normalize_delivery_time(raw) == expected

    @pytest.mark.parametrize("raw, expected", [
        ("3 PM", "15:00"),
        ("7 malam", "19:00"),
        ("4 sore", "16:00"),
        ("2 siang", "14:00"),
        ("12 siang", "12:00"),
        ("8 pagi", "08:00"),
    ])
    def test_period_words_adjust_the_hour(self, raw, expected):
        assert normalize_delivery_time(raw) == expected

    @pytest.mark.parametrize("raw", ["25:00", "10:75", "", "   ", "secepatnya", None])
    def test_invalid_input_raises(self, raw):
        with pytest.raises(TimeNormalizationError):
            normalize_delivery_time(raw)

    def test_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            normalize_delivery_time("nanti")


class TestStripTimezone:
    def test_removes_trailing_zone(self):
        assert strip_timezone("10.00 WIB") == "10.00"
        assert strip_timezone("10.00") == "10.00"


class TestExtractDeliveryTime:
    def test_labeled_line_wins(self):
        text = "Tolong kirim 09.00\nKirim dari outlet: 11.30\nJam kirim: 10.00"
        assert extract_delivery_time_from_message(text) == "10:00"

    def test_outlet_line_beats_generic_kirim_line(self):
        text = "Tolong kirim 09.00 ya\nKirim dari outlet: 11.30 WIB"
        assert extract_delivery_time_from_message(text) == "11:30"

    def test_outlet_line_with_markdown(self):
        assert extract_delivery_time_from_message("*Kirim dari outlet: 10.45 WIB*") == "10:45"

    def test_generic_kirim_line(self):
        assert extract_delivery_time_from_message("Mohon dikirim jam 9.30 ya kak") == "09:30"

    def test_falls_back_to_any_clock_time(self):
        assert extract_delivery_time_from_message("Acara mulai 19.30") == "19:30"

    def test_ignores_phone_numbers_and_prices(self):
        text = "No hp: 081234567890\nTotal Rp 235.000"
        assert extract_delivery_time_from_message(text) is None

    def test_unreadable_label_returns_none(self):
        assert extract_delivery_time_from_message("Jam kirim: secepatnya") is None

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_empty_returns_none(self, value):
        assert extract_delivery_time_from_message(value) is None
