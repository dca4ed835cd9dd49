"""Entry point for order text: detect the template dialect and parse it."""
import logging

from order_intake.core.draft_order import DraftOrder
from order_intake.parsing.format_detector import detect_format
from order_intake.parsing.parser_v1 import parse_order_v1
from order_intake.parsing.parser_v2 import parse_order_v2

logger = logging.getLogger("order_intake.parser")

__all__ = ["detect_format", "format_order_summary", "format_rupiah", "parse_order"]


def parse_order(message_text: str | None) -> DraftOrder:
    """Parse an order message in whichever dialect it is written.

    Messages that match neither dialect go through the V1 parser, which
    tolerates loose input.

    Raises:
        OrderParseError: If a field is present but malformed (e.g. delivery fee).
    """
    dialect = detect_format(message_text)
    logger.debug(f"Detected order format: {dialect}")
    if dialect == "v2":
        return parse_order_v2(message_text)
    return parse_order_v1(message_text)


def format_rupiah(amount: int | None) -> str:
    """Format an amount the Indonesian way: 235000 -> 'Rp 235.000'."""
    return "Rp " + f"{amount or 0:,}".replace(",", ".")


def format_order_summary(draft: DraftOrder) -> str:
    """Render a draft back into the legacy template.

    The output re-parses to the same items, so it doubles as the text shown
    to the customer for confirmation.
    """
    lines = [
        f"Nama: {draft.customer_name or '-'}",
        f"No hp: {draft.phone_number or '-'}",
        f"Alamat: {draft.address or '-'}",
    ]
    if draft.event_name:
        lines.append(f"Nama event: {draft.event_name}")
    if draft.event_date:
        lines.append(f"Tanggal: {draft.event_date}")
    if draft.delivery_time:
        lines.append(f"Jam kirim: {draft.delivery_time}")
    if draft.delivery_method and draft.delivery_method != "-":
        lines.append(f"Metode pengiriman: {draft.delivery_method}")

    lines.append("Detail pesanan:")
    lines.extend(f"• {item.quantity} x {item.name}" for item in draft.items)

    if draft.notes:
        lines.append("Notes:")
        lines.extend(f"- {note}" for note in draft.notes)
    return "\n".join(lines)
