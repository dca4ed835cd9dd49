import opik

from order_intake.core.draft_order import DraftOrder
from order_intake.core.workflow_state import IntakeState
from order_intake.nodes.base import BaseNode
from order_intake.parsing.validator import validate_order


class ValidateNode(BaseNode):
    name = "validate"

    @opik.track(name="validate_node")
    def __call__(self, state: IntakeState) -> dict:
        if state.get("final_status") == "error":
            return {"trajectory": self.visited(state)}

        try:
            draft = DraftOrder.model_validate(state.get("draft_order") or {})
            report = validate_order(draft)
            return {
                "validation_errors": report.errors,
                "trajectory": self.visited(state),
            }
        except Exception as e:
            return {
                "final_status": "error",
                "error_message": f"ValidateNode failed: {e}",
                "trajectory": self.visited(state),
            }
