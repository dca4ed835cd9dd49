import opik

from order_intake.core.workflow_state import IntakeState
from order_intake.nodes.base import BaseNode
from order_intake.services.amounts.pipeline import AmountExtractionPipeline


class ExtractAmountNode(BaseNode):
    name = "extract_amount"

    def __init__(self, pipeline: AmountExtractionPipeline):
        self.pipeline = pipeline

    @opik.track(name="extract_amount_node")
    def __call__(self, state: IntakeState) -> dict:
        if state.get("final_status") == "error":
            return {"trajectory": self.visited(state)}

        try:
            result = self.pipeline.extract(state.get("image_bytes") or b"")
            return {
                "amount_result": result.model_dump(mode="json"),
                "trajectory": self.visited(state),
            }
        except Exception as e:
            return {
                "final_status": "error",
                "error_message": f"ExtractAmountNode failed: {e}",
                "trajectory": self.visited(state),
            }
