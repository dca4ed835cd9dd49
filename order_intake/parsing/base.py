"""Shared line state machine for the order template dialects.

Both dialects scan the normalized lines of a message with an explicit
finite-state machine. While a section (address, items, notes) is open, each
line is first checked against that section's terminator labels. A terminator
closes the section and the same line is then dispatched as a top-level label;
anything else is consumed into the section.
"""
import logging
import re
from abc import ABC
from enum import Enum

from order_intake.core.draft_order import DeliveryFeeSource, DraftOrder, OrderItem
from order_intake.core.errors import OrderParseError, TimeNormalizationError
from order_intake.parsing.delivery_time import (
    extract_delivery_time_from_message,
    normalize_delivery_time,
    strip_timezone,
)
from order_intake.parsing.text_normalizer import normalize_delivery_method, normalize_text

logger = logging.getLogger("order_intake.parser")

DELIVERY_FEE_ERROR = "Biaya Pengiriman harus berupa angka. Contoh: 100000"
PLACEHOLDER_METHODS = ("pickup", "grabexpress", "custom")

# "• 80 x Dawet Kemayu Small", "2. 3x Dawet", "80 Dawet", "2 * (Dawet Small)".
# The separator x only counts when a letter does not follow it ("80 xtra").
# Names may start with a digit, quote or emoji, but not with punctuation that
# continues a number ("10.000", "15:00").
ITEM_LINE = re.compile(
    r"^\s*(?:[•\-*]\s*|\d{1,2}[.)]\s+)?(\d+)(?!\d)\s*(?:(?:[x×](?![a-z])|\*)\s*)?([^\s.,:;)\]].*)$",
    re.IGNORECASE,
)

_STARTS_WITH_DIGIT = re.compile(r"^\d")
_NOTE_BULLET = re.compile(r"^[-•*]\s*")
_CURRENCY = re.compile(r"rp", re.IGNORECASE)
_FEE_SEPARATORS = re.compile(r"[\s.,]")
# "Rp 15.000,-" and "Rp 15.000,00"
_FEE_SUFFIX = re.compile(r"(?:[.,]-|,00)\s*$")


class Mode(str, Enum):
    NONE = "none"
    COLLECTING_ADDRESS = "collecting_address"
    COLLECTING_ITEMS = "collecting_items"
    COLLECTING_NOTES = "collecting_notes"


class LineStateMachine:
    """Index-based cursor over order lines with one open section at a time."""

    def __init__(self, lines: list[str], terminators: dict[Mode, list[re.Pattern]]):
        self.lines = lines
        self.index = 0
        self.mode = Mode.NONE
        self.buffer: list[str] = []
        self._terminators = terminators

    @property
    def done(self) -> bool:
        return self.index >= len(self.lines)

    @property
    def current(self) -> str:
        return self.lines[self.index]

    def advance(self) -> None:
        self.index += 1

    def enter(self, mode: Mode) -> None:
        self.mode = mode
        self.buffer = []

    def close(self) -> tuple[Mode, list[str]]:
        """Close the open section and hand back what it collected."""
        closed = (self.mode, self.buffer)
        self.mode = Mode.NONE
        self.buffer = []
        return closed

    def peek_terminator(self, line: str) -> bool:
        """True if `line` starts the next section. Does not consume it."""
        return any(p.search(line) for p in self._terminators.get(self.mode, []))


def label(pattern: str) -> re.Pattern:
    """Compile a `Label: value` pattern. Group 1 is the (possibly empty) value."""
    return re.compile(rf"^{pattern}\s*:?\s*(.*)$", re.IGNORECASE)


def starts(pattern: str) -> re.Pattern:
    return re.compile(rf"^{pattern}", re.IGNORECASE)


def is_blank(value: str | None) -> bool:
    return not value or value.strip() in ("", "-")


def parse_item_line(line: str, pattern: re.Pattern) -> OrderItem | None:
    match = pattern.match(line)
    if not match:
        return None
    quantity = int(match.group(1))
    name = match.group(2).strip()
    if quantity <= 0 or not name or name.lower() in ("x", "*"):
        return None
    return OrderItem(quantity=quantity, name=name)


def parse_delivery_method(value: str) -> str:
    method = re.sub(r"\s+", " ", value).strip()
    if is_blank(method):
        return "-"
    lowered = method.lower()
    if "/" in method and all(word in lowered for word in PLACEHOLDER_METHODS):
        # The template's option menu was left untouched.
        return "-"
    return normalize_delivery_method(method)


def parse_delivery_fee(value: str) -> tuple[int, DeliveryFeeSource]:
    """Parse the delivery-fee field.

    Raises:
        OrderParseError: If the value is not a non-negative number.
    """
    if is_blank(value):
        return 0, DeliveryFeeSource.USER_EMPTY

    amount = _FEE_SUFFIX.sub("", value)
    digits = _FEE_SEPARATORS.sub("", _CURRENCY.sub("", amount))
    if not digits.isdigit():
        raise OrderParseError(DELIVERY_FEE_ERROR, field="delivery_fee", original_value=value)
    return int(digits), DeliveryFeeSource.USER_INPUT


def parse_time_value(value: str) -> str:
    """Normalize a labeled delivery time, keeping the raw text when it can't be read."""
    cleaned = strip_timezone(value)
    try:
        return normalize_delivery_time(cleaned)
    except TimeNormalizationError:
        return cleaned


class BaseOrderParser(ABC):
    """Template for a dialect parser.

    Subclasses set `name`, `labels` (ordered `(pattern, handler_name)` pairs),
    `terminators` and `item_pattern`, and may override `prepare_line` and the
    section collectors.
    """

    name: str
    labels: list[tuple[re.Pattern, str]]
    terminators: dict[Mode, list[re.Pattern]]
    item_pattern: re.Pattern

    def __call__(self, message_text: str | None) -> DraftOrder:
        return self.parse(message_text)

    def parse(self, message_text: str | None) -> DraftOrder:
        normalized = normalize_text(message_text)
        order = DraftOrder()

        lines = [line.strip() for line in normalized.split("\n")]
        machine = LineStateMachine([line for line in lines if line], self.terminators)

        while not machine.done:
            line = self.prepare_line(machine.current)

            if machine.mode is not Mode.NONE:
                if not machine.peek_terminator(line):
                    self.collect(order, machine, line)
                    machine.advance()
                    continue
                self.close_section(order, machine)

            self.dispatch(order, machine, line)
            machine.advance()

        if machine.mode is not Mode.NONE:
            self.close_section(order, machine)

        self.finalize(order, normalized)
        logger.info(
            f"[{self.name}] parsed order: customer={order.customer_name!r}, "
            f"items={len(order.items)}, notes={len(order.notes)}, delivery_time={order.delivery_time!r}"
        )
        return order

    def prepare_line(self, line: str) -> str:
        return line

    # --- Label dispatch ---

    def dispatch(self, order: DraftOrder, machine: LineStateMachine, line: str) -> None:
        for pattern, handler_name in self.labels:
            match = pattern.match(line)
            if match:
                getattr(self, handler_name)(order, machine, match.group(1).strip())
                return
        logger.debug(f"[{self.name}] dropped unrecognized line: {line!r}")

    def on_address(self, order: DraftOrder, machine: LineStateMachine, value: str) -> None:
        if is_blank(value):
            machine.enter(Mode.COLLECTING_ADDRESS)
        else:
            order.address = value

    def on_delivery_time(self, order: DraftOrder, machine: LineStateMachine, value: str) -> None:
        if not is_blank(value):
            order.delivery_time = parse_time_value(value)

    def on_delivery_method(self, order: DraftOrder, machine: LineStateMachine, value: str) -> None:
        order.delivery_method = parse_delivery_method(value)

    def on_items_start(self, order: DraftOrder, machine: LineStateMachine, value: str) -> None:
        machine.enter(Mode.COLLECTING_ITEMS)
        if not is_blank(value):
            self.collect(order, machine, value)

    def on_notes_start(self, order: DraftOrder, machine: LineStateMachine, value: str) -> None:
        machine.enter(Mode.COLLECTING_NOTES)
        if not is_blank(value):
            self.collect(order, machine, value)

    # --- Section collection ---

    def collect(self, order: DraftOrder, machine: LineStateMachine, line: str) -> None:
        if machine.mode is Mode.COLLECTING_ADDRESS:
            self.collect_address(order, machine, line)
        elif machine.mode is Mode.COLLECTING_ITEMS:
            self.collect_item(order, line)
        elif machine.mode is Mode.COLLECTING_NOTES:
            self.collect_note(order, line)

    def collect_address(self, order: DraftOrder, machine: LineStateMachine, line: str) -> None:
        if not is_blank(line):
            machine.buffer.append(line)

    def collect_item(self, order: DraftOrder, line: str) -> None:
        if is_blank(line):
            return
        item = parse_item_line(line, self.item_pattern)
        if item:
            order.items.append(item)
        elif _STARTS_WITH_DIGIT.match(line):
            logger.warning(f"[{self.name}] dropped malformed item line: {line!r}")
        else:
            note = _NOTE_BULLET.sub("", line).strip()
            if note:
                order.notes.append(note)

    def collect_note(self, order: DraftOrder, line: str) -> None:
        note = _NOTE_BULLET.sub("", line).strip()
        if not is_blank(note):
            order.notes.append(note)

    def close_section(self, order: DraftOrder, machine: LineStateMachine) -> None:
        mode, buffer = machine.close()
        if mode is Mode.COLLECTING_ADDRESS and buffer:
            order.address = ", ".join(buffer).strip()

    # --- Finalization ---

    def finalize(self, order: DraftOrder, normalized_text: str) -> None:
        if order.delivery_fee_source is None:
            order.delivery_fee = 0
            order.delivery_fee_source = DeliveryFeeSource.NOT_PROVIDED

        if not order.customer_name and order.receiver_name:
            order.customer_name = order.receiver_name

        order.delivery_time = self._finalize_delivery_time(order.delivery_time, normalized_text)

    def _finalize_delivery_time(self, current: str | None, normalized_text: str) -> str | None:
        if not current or not current.strip():
            return extract_delivery_time_from_message(normalized_text)
        try:
            return normalize_delivery_time(current)
        except TimeNormalizationError as e:
            logger.warning(f"[{self.name}] could not normalize delivery_time {current!r}: {e}")
            return extract_delivery_time_from_message(normalized_text) or current
