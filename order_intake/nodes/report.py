import opik

from order_intake.core.workflow_state import IntakeState
from order_intake.nodes.base import BaseNode


class ReportNode(BaseNode):
    name = "report"

    @opik.track(name="report_node")
    def __call__(self, state: IntakeState) -> dict:
        kind = state.get("message_kind")
        if state.get("error_message"):
            final_status = "error"
        elif kind not in ("order", "payment"):
            final_status = "skipped"
        elif state.get("parse_error"):
            final_status = "rejected"
        elif state.get("validation_errors"):
            final_status = "incomplete"
        elif kind == "payment" and not (state.get("amount_result") or {}).get("ok"):
            final_status = "incomplete"
        else:
            final_status = "awaiting_confirmation"

        return {
            "final_status": final_status,
            "trajectory": self.visited(state),
        }
