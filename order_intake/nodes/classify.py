import opik

from order_intake.core.workflow_state import IntakeState
from order_intake.nodes.base import BaseNode
from order_intake.parsing.format_detector import detect_format


class ClassifyNode(BaseNode):
    """Images are payment evidence; text is an order if it follows a known template."""
    name = "classify"

    @opik.track(name="classify_node")
    def __call__(self, state: IntakeState) -> dict:
        if state.get("final_status") == "error":
            return {"trajectory": self.visited(state)}

        try:
            if state.get("image_bytes"):
                return {
                    "message_kind": "payment",
                    "detected_format": None,
                    "trajectory": self.visited(state),
                }

            dialect = detect_format(state.get("message_text", ""))
            return {
                "message_kind": "order" if dialect else "other",
                "detected_format": dialect,
                "trajectory": self.visited(state),
            }
        except Exception as e:
            return {
                "final_status": "error",
                "error_message": f"ClassifyNode failed: {e}",
                "trajectory": self.visited(state),
            }
