from abc import ABC, abstractmethod


class ToolManager(ABC):
    """Chat delivery and order persistence, as seen by the intake workflow."""

    @abstractmethod
    def send_message(self, chat_id: int, text: str) -> dict:
        """Send a chat message. Returns result dict with at least {"status": "ok"|"error"}."""
        ...

    @abstractmethod
    def get_order_by_id(self, order_id: str) -> dict | None:
        """Fetch a stored order by its ID (e.g. DKM/20260118/000001). None if unknown."""
        ...

    @abstractmethod
    def save_order(self, draft: dict) -> dict:
        """Persist a confirmed draft order. Returns result dict including "order_id"."""
        ...

    @abstractmethod
    def get_price_list(self) -> dict[str, int]:
        """Product name → unit price in rupiah."""
        ...
