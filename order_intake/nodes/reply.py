import opik

from order_intake.core.draft_order import DraftOrder
from order_intake.core.workflow_state import IntakeState
from order_intake.nodes.base import BaseNode
from order_intake.parsing.order_parser import format_order_summary, format_rupiah
from order_intake.services.message_store.base import MessageStore
from order_intake.services.tools.base import ToolManager


class ReplyNode(BaseNode):
    """Answers the submitter: a confirmation prompt, or what to fix."""
    name = "reply"

    def __init__(self, tools: ToolManager, message_store: MessageStore):
        self.tools = tools
        self.message_store = message_store

    @opik.track(name="reply_node")
    def __call__(self, state: IntakeState) -> dict:
        if state.get("final_status") == "error":
            return {"trajectory": self.visited(state)}

        try:
            if state.get("message_kind") == "payment":
                text = self._payment_reply(state)
            else:
                text = self._order_reply(state)

            self.tools.send_message(chat_id=state.get("chat_id", 0), text=text)
            return {
                "reply_sent": True,
                "reply_text": text,
                "trajectory": self.visited(state),
            }
        except Exception as e:
            return {
                "final_status": "error",
                "error_message": f"ReplyNode failed: {e}",
                "trajectory": self.visited(state),
            }

    def _order_reply(self, state: IntakeState) -> str:
        parse_error = state.get("parse_error")
        if parse_error:
            return self.message_store.get_and_render("order", "parse_error", {
                "message": parse_error["message"],
            })

        errors = state.get("validation_errors") or []
        if errors:
            return self.message_store.get_and_render("order", "incomplete", {
                "errors": "\n".join(f"• {e}" for e in errors),
            })

        draft = DraftOrder.model_validate(state.get("draft_order") or {})
        return self.message_store.get_and_render("order", "confirmation", {
            "summary": format_order_summary(draft),
            "total": format_rupiah(state.get("order_total", 0)),
        })

    def _payment_reply(self, state: IntakeState) -> str:
        result = state.get("amount_result") or {}
        if not result.get("ok"):
            return self.message_store.get_and_render("payment", "failed")

        name = "amount_confirmation" if result.get("needs_confirmation", True) else "amount_received"
        return self.message_store.get_and_render("payment", name, {
            "amount": format_rupiah(result.get("value")),
        })
