"""Parser for the legacy (V1) order template.

Example:
    Nama: Budi
    No hp: 081234567890
    Alamat:
    Jl. Menteng Raya 10
    (Titik: Gedung B)
    Tanggal: 18/01/2026
    Jam kirim: 10.00 WIB
    Detail pesanan:
    • 80 x Dawet Kemayu Small
    Notes:
    Tolong datang tepat waktu
"""
import re

from order_intake.core.draft_order import DraftOrder
from order_intake.parsing.base import ITEM_LINE, BaseOrderParser, LineStateMachine, Mode, is_blank, label, starts

_TITIK = re.compile(r"^\(Titik:\s*(.+)\)$", re.IGNORECASE)

_FIELD_LABELS = [
    starts(r"Nama\s*(?:Pemesan|Penerima)?\s*:"),
    starts(r"No\s+hp"),
    starts(r"Alamat\s*(?:Penerima)?\s*:"),
    starts(r"Nama\s+event"),
    starts(r"Durasi\s+event"),
    starts(r"Tanggal"),
    starts(r"Waktu\s+Kirim"),
    starts(r"\*?Jam\s+kirim"),
    starts(r"Jam\s*:"),
    starts(r"Metode"),
    starts(r"Detail\s+pesanan"),
    starts(r"Pesanan\s*:"),
]
_NOTES_OPENER = starts(r"Notes?\s*:?\s*$")


class V1OrderParser(BaseOrderParser):
    name = "v1"

    labels = [
        (label(r"Nama\s+Pemesan"), "on_customer_name"),
        (label(r"Nama(?!\s*(?:event|penerima|pemesan)\b)(?=\s|:)"), "on_customer_name"),
        (label(r"Nama\s+Penerima"), "on_receiver_name"),
        (label(r"No\s+hp(?:\s+Penerima)?"), "on_phone"),
        (label(r"Alamat(?:\s+Penerima)?(?=\s|:|$)"), "on_address"),
        (label(r"Nama\s+event(?:\s*\([^)]*\))?"), "on_event_name"),
        (label(r"Durasi\s+event(?:\s*\([^)]*\))?"), "on_event_duration"),
        (label(r"Tanggal(?:\s+(?:event|kirim|pengiriman))?(?=\s|:|$)"), "on_event_date"),
        (label(r"Waktu\s+Kirim(?:\s*\(jam\))?"), "on_delivery_time"),
        (label(r"\*?Jam\s+kirim"), "on_delivery_time"),
        (label(r"Jam(?=\s|:)"), "on_delivery_time"),
        (label(r"Metode\s+pengiriman"), "on_delivery_method"),
        (label(r"(?:Detail\s+pesanan|Pesanan(?=\s*:))"), "on_items_start"),
        (label(r"Packaging"), "on_packaging"),
        (label(r"Notes?(?=\s*:|$)"), "on_notes_start"),
    ]

    terminators = {
        Mode.COLLECTING_ADDRESS: _FIELD_LABELS + [_NOTES_OPENER],
        Mode.COLLECTING_ITEMS: _FIELD_LABELS + [
            _NOTES_OPENER,
            starts(r"Packaging"),
            starts(r"Biaya"),
            starts(r"Mendapatkan"),
        ],
        Mode.COLLECTING_NOTES: _FIELD_LABELS,
    }

    item_pattern = ITEM_LINE

    def on_customer_name(self, order: DraftOrder, machine: LineStateMachine, value: str) -> None:
        if not is_blank(value) and not value.lower().startswith("event"):
            order.customer_name = value

    def on_receiver_name(self, order: DraftOrder, machine: LineStateMachine, value: str) -> None:
        if not is_blank(value):
            order.receiver_name = value

    def on_phone(self, order: DraftOrder, machine: LineStateMachine, value: str) -> None:
        if not is_blank(value):
            order.phone_number = value

    def on_event_name(self, order: DraftOrder, machine: LineStateMachine, value: str) -> None:
        if not is_blank(value):
            order.event_name = value

    def on_event_duration(self, order: DraftOrder, machine: LineStateMachine, value: str) -> None:
        if not is_blank(value):
            order.event_duration = value

    def on_event_date(self, order: DraftOrder, machine: LineStateMachine, value: str) -> None:
        if not is_blank(value):
            order.event_date = value

    def on_packaging(self, order: DraftOrder, machine: LineStateMachine, value: str) -> None:
        # V1 carries packaging as a free-text note.
        line = machine.current.strip()
        if not is_blank(value):
            order.notes.append(line)

    def collect_address(self, order: DraftOrder, machine: LineStateMachine, line: str) -> None:
        titik = _TITIK.match(line)
        if titik:
            machine.buffer.append(f"Titik: {titik.group(1).strip()}")
            self.close_section(order, machine)
            return
        super().collect_address(order, machine, line)


parse_order_v1 = V1OrderParser()
