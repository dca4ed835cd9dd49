from opik.evaluation.metrics import BaseMetric
from opik.evaluation.metrics.score_result import ScoreResult


class AmountAccuracy(BaseMetric):
    """Checks the selected payment amount, and that ambiguity was flagged when expected."""
    name = "amount_accuracy"

    def score(
        self,
        amount_result: dict | None,
        expected_amount: int | None,
        expected_needs_confirmation: bool | None = None,
        **kwargs,
    ) -> ScoreResult:
        if expected_amount is None:
            return ScoreResult(value=1.0 if not amount_result else 0.0, name=self.name)

        if not amount_result or not amount_result.get("ok"):
            return ScoreResult(value=0.0, name=self.name, reason="No amount extracted")

        value = amount_result.get("value")
        if value != expected_amount:
            return ScoreResult(value=0.0, name=self.name, reason=f"Expected {expected_amount}, got {value}")

        if expected_needs_confirmation is not None:
            flagged = amount_result.get("needs_confirmation")
            if flagged != expected_needs_confirmation:
                return ScoreResult(
                    value=0.5,
                    name=self.name,
                    reason=f"Amount correct but needs_confirmation={flagged}, expected {expected_needs_confirmation}",
                )
        return ScoreResult(value=1.0, name=self.name, reason=f"Amount {value} correct")
