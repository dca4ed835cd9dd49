from datetime import date

from order_intake.services.tools.base import ToolManager


class MockToolManager(ToolManager):
    """Inspectable in-memory stand-in for chat and storage. Captures all calls for assertion."""

    def __init__(
        self,
        price_list: dict[str, int] | None = None,
        orders: dict[str, dict] | None = None,
    ):
        self._calls: list[dict] = []
        self._price_list = dict(price_list or {})
        self._seeded = dict(orders or {})
        self._orders = dict(self._seeded)
        self._saved = 0

    def send_message(self, chat_id: int, text: str) -> dict:
        self._calls.append({"action": "send_message", "chat_id": chat_id, "text": text})
        return {"status": "ok", "mock": True}

    def get_order_by_id(self, order_id: str) -> dict | None:
        self._calls.append({"action": "get_order_by_id", "order_id": order_id})
        order = self._orders.get(order_id)
        return dict(order) if order else None

    def save_order(self, draft: dict) -> dict:
        order_id = self._next_order_id()
        self._orders[order_id] = dict(draft)
        self._calls.append({"action": "save_order", "order_id": order_id, "draft": draft})
        return {"status": "ok", "order_id": order_id, "mock": True}

    def get_price_list(self) -> dict[str, int]:
        self._calls.append({"action": "get_price_list"})
        return dict(self._price_list)

    # --- Inspection API for graders ---

    @property
    def messages_sent(self) -> list[dict]:
        return [c for c in self._calls if c["action"] == "send_message"]

    @property
    def orders_saved(self) -> list[dict]:
        return [c for c in self._calls if c["action"] == "save_order"]

    @property
    def all_calls(self) -> list[dict]:
        return list(self._calls)

    def _next_order_id(self) -> str:
        while True:
            self._saved += 1
            order_id = f"DKM/{date.today():%Y%m%d}/{self._saved:06d}"
            if order_id not in self._orders:
                return order_id

    def reset(self):
        """Forget calls and saved orders. Seeded orders stay."""
        self._calls.clear()
        self._orders = dict(self._seeded)
        self._saved = 0
