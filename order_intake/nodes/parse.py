import logging

import opik

from order_intake.core.errors import OrderParseError
from order_intake.core.workflow_state import IntakeState
from order_intake.nodes.base import BaseNode
from order_intake.parsing.order_parser import parse_order

logger = logging.getLogger("order_intake.nodes.parse")


class ParseNode(BaseNode):
    name = "parse"

    @opik.track(name="parse_node")
    def __call__(self, state: IntakeState) -> dict:
        if state.get("final_status") == "error":
            return {"trajectory": self.visited(state)}

        try:
            draft = parse_order(state.get("message_text", ""))
            return {
                "draft_order": draft.model_dump(mode="json"),
                "trajectory": self.visited(state),
            }
        except OrderParseError as e:
            logger.info(f"Order rejected on field {e.field}: {e.message}")
            return {
                "parse_error": {"field": e.field, "message": e.message},
                "trajectory": self.visited(state),
            }
        except Exception as e:
            return {
                "final_status": "error",
                "error_message": f"ParseNode failed: {e}",
                "trajectory": self.visited(state),
            }
