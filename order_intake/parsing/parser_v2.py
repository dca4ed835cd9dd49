"""Parser for the Indonesian structured (V2) order template.

Example:
    📝Untuk memproses pesanan, mohon isi data berikut:
    Nama Pemesan: Hera
    Nama Penerima: Hera
    No HP Penerima: 081244682739
    Alamat Penerima: Jl. Kemang Raya 5
    Nama Event (jika ada): -
    Durasi Event (dalam jam): -
    Tanggal Event: 06/01/2026
    Waktu Kirim (jam): 08.00
    Detail Pesanan:
    • 80 x Dawet Kemayu Small
    Packaging Styrofoam (1 box 40K untuk 50 cup): YA
    Metode pengiriman: Pickup
    Biaya Pengiriman (Rp): 100000
    Notes:
    Mendapatkan info Dawet Kemayu Menteng dari: Instagram
"""
import re

from order_intake.core.draft_order import DraftOrder
from order_intake.parsing.base import (
    ITEM_LINE,
    BaseOrderParser,
    LineStateMachine,
    Mode,
    is_blank,
    label,
    parse_delivery_fee,
    starts,
)

# Emoji, bullets and "1." / "2)" numbering in front of a label. Item
# quantities ("80 x ...") are left alone.
_LINE_PREFIX = re.compile(r"^(?:📝|[•\-*]|\d{1,2}[.)](?=\s*[A-Za-z]))+\s*")
_REFERRAL_MENU = ("teman", "instagram")
_STYROFOAM_YES = ("YA", "YES")

_ITEM_END = [
    starts(r"Packaging"),
    starts(r"Metode"),
    starts(r"Biaya"),
    starts(r"Ongkir"),
    starts(r"Delivery\s+Fee"),
    starts(r"Notes?\s*:?\s*$"),
    starts(r"Mendapatkan"),
    starts(r"Nama\s+Event"),
    starts(r"Durasi\s+Event"),
    starts(r"Tanggal"),
    starts(r"Waktu\s+Kirim"),
]


class V2OrderParser(BaseOrderParser):
    name = "v2"

    labels = [
        (label(r"Nama\s+Pemesan"), "on_customer_name"),
        (label(r"Nama\s+Penerima"), "on_receiver_name"),
        (label(r"No\s+HP\s+Penerima"), "on_phone"),
        (label(r"Alamat\s+Penerima"), "on_address"),
        (label(r"Nama\s+Event\s*\(jika\s+ada\)"), "on_event_name"),
        (label(r"Durasi\s+Event\s*\(dalam\s+jam\)"), "on_event_duration"),
        (label(r"Tanggal\s+Event"), "on_event_date"),
        (label(r"Waktu\s+Kirim(?:\s*\(jam\))?"), "on_delivery_time"),
        (label(r"Detail\s+Pesanan"), "on_items_start"),
        (label(r"Packaging\s+Styrofoam\s*\([^)]+\)"), "on_styrofoam"),
        (label(r"Metode\s+pengiriman"), "on_delivery_method"),
        (label(r"(?:Biaya\s+Pengiriman\s*\(Rp\)|Biaya\s+Pengiriman|Ongkir|Delivery\s+Fee)"), "on_delivery_fee"),
        (label(r"Notes?(?=\s*:|$)"), "on_notes_start"),
        (label(r"Mendapatkan\s+info\s+Dawet\s+Kemayu\s+Menteng\s+dari"), "on_referral"),
    ]

    terminators = {
        Mode.COLLECTING_ADDRESS: [
            starts(r"Nama\s+Event"),
            starts(r"Durasi\s+Event"),
            starts(r"Tanggal\s+Event"),
            starts(r"Waktu\s+Kirim"),
            starts(r"Detail\s+Pesanan"),
            starts(r"Packaging"),
            starts(r"Metode"),
            starts(r"Biaya"),
            starts(r"Ongkir"),
            starts(r"Delivery\s+Fee"),
            starts(r"Notes"),
            starts(r"Mendapatkan"),
        ],
        Mode.COLLECTING_ITEMS: _ITEM_END,
        Mode.COLLECTING_NOTES: [starts(r"Mendapatkan")],
    }

    item_pattern = ITEM_LINE

    def prepare_line(self, line: str) -> str:
        return _LINE_PREFIX.sub("", line).strip()

    def on_customer_name(self, order: DraftOrder, machine: LineStateMachine, value: str) -> None:
        if not is_blank(value):
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

    def on_styrofoam(self, order: DraftOrder, machine: LineStateMachine, value: str) -> None:
        if value.upper() in _STYROFOAM_YES:
            order.notes.append("Packaging Styrofoam: YA")

    def on_delivery_fee(self, order: DraftOrder, machine: LineStateMachine, value: str) -> None:
        order.delivery_fee, order.delivery_fee_source = parse_delivery_fee(value)

    def on_referral(self, order: DraftOrder, machine: LineStateMachine, value: str) -> None:
        if is_blank(value):
            return
        lowered = value.lower()
        if "/" in value and all(option in lowered for option in _REFERRAL_MENU):
            return
        order.notes.append(f"Referral: {value}")


parse_order_v2 = V2OrderParser()
