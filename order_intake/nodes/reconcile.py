import opik

from order_intake.core.draft_order import DraftOrder
from order_intake.core.workflow_state import IntakeState
from order_intake.nodes.base import BaseNode
from order_intake.parsing.price_list import calculate_order_total, separate_items_from_notes
from order_intake.services.tools.base import ToolManager


class ReconcileNode(BaseNode):
    """Moves product names left in the notes into the items and prices the order."""
    name = "reconcile"

    def __init__(self, tools: ToolManager):
        self.tools = tools

    @opik.track(name="reconcile_node")
    def __call__(self, state: IntakeState) -> dict:
        if state.get("final_status") == "error":
            return {"trajectory": self.visited(state)}

        try:
            draft = DraftOrder.model_validate(state.get("draft_order") or {})
            price_list = self.tools.get_price_list()

            items, notes = separate_items_from_notes(draft.items, draft.notes, price_list)
            draft = draft.model_copy(update={"items": items, "notes": notes})
            total = calculate_order_total(items, notes, price_list, draft.delivery_fee)

            return {
                "draft_order": draft.model_dump(mode="json"),
                "order_total": total,
                "trajectory": self.visited(state),
            }
        except Exception as e:
            return {
                "final_status": "error",
                "error_message": f"ReconcileNode failed: {e}",
                "trajectory": self.visited(state),
            }
