"""Unit tests for dialect dispatch and order summary rendering."""
import pytest

from order_intake.core.draft_order import DraftOrder, OrderItem
from order_intake.core.errors import OrderParseError
from order_intake.parsing.order_parser import detect_format, format_order_summary, format_rupiah, parse_order
from tests.mocks import V1_ORDER, V2_ORDER


class TestParseOrder:
    def test_v2_message_uses_v2_parser(self):
        order = parse_order(V2_ORDER)
        assert order.customer_name == "Hera"
        assert order.notes == ["Packaging Styrofoam: YA", "Referral: Instagram"]

    def test_v1_message_uses_v1_parser(self):
        order = parse_order(V1_ORDER)
        assert order.customer_name == "Budi Santoso"

    def test_unknown_text_falls_back_to_v1(self):
        order = parse_order("halo kak, mau tanya")
        assert order.items == []
        assert order.customer_name is None

    def test_bad_fee_propagates(self):
        text = V2_ORDER.replace("Biaya Pengiriman (Rp): 100000", "Biaya Pengiriman (Rp): seratus ribu")
        with pytest.raises(OrderParseError):
            parse_order(text)


class TestFormatRupiah:
    @pytest.mark.parametrize("amount, expected", [
        (235000, "Rp 235.000"),
        (1500000, "Rp 1.500.000"),
        (900, "Rp 900"),
        (0, "Rp 0"),
        (None, "Rp 0"),
    ])
    def test_formats_with_dot_grouping(self, amount, expected):
        assert format_rupiah(amount) == expected


class TestFormatOrderSummary:
    def test_summary_is_v1_text(self):
        summary = format_order_summary(parse_order(V2_ORDER))
        assert summary.startswith("Nama: Hera\n")
        assert "• 80 x Dawet Kemayu Small" in summary
        assert detect_format(summary) == "v1"

    def test_summary_reparses_to_same_order(self):
        original = parse_order(V2_ORDER)
        reparsed = parse_order(format_order_summary(original))
        assert reparsed.items == original.items
        assert reparsed.notes == original.notes
        assert reparsed.address == original.address
        assert reparsed.delivery_time == original.delivery_time
        assert reparsed.delivery_method == original.delivery_method

    def test_missing_fields_render_as_dash(self):
        summary = format_order_summary(DraftOrder(items=[OrderItem(quantity=1, name="Dawet")]))
        assert "Nama: -" in summary
        assert "Notes:" not in summary
        assert "Metode pengiriman" not in summary
