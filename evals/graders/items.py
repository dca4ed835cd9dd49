from opik.evaluation.metrics import BaseMetric
from opik.evaluation.metrics.score_result import ScoreResult


class ItemsAccuracy(BaseMetric):
    """Item-level accuracy: share of expected (quantity, name) pairs found in the draft order."""
    name = "items_accuracy"

    def score(self, draft_order: dict | None, expected_items: list[dict] | None, **kwargs) -> ScoreResult:
        if expected_items is None:
            # Not an order scenario
            return ScoreResult(value=1.0 if draft_order is None else 0.0, name=self.name)

        if draft_order is None:
            return ScoreResult(value=0.0, name=self.name, reason="No draft order parsed")

        actual = [self._key(item) for item in draft_order.get("items", [])]
        expected = [self._key(item) for item in expected_items]
        if not expected:
            return ScoreResult(value=1.0 if not actual else 0.0, name=self.name)

        found = [item for item in expected if item in actual]
        missing = [item for item in expected if item not in actual]
        extra = [item for item in actual if item not in expected]
        # Extra items count against the score like missing ones.
        score = len(found) / (len(expected) + len(extra))
        return ScoreResult(
            value=score,
            name=self.name,
            reason=f"{len(found)}/{len(expected)} items matched. Missing: {missing}, extra: {extra}",
        )

    @staticmethod
    def _key(item: dict) -> tuple[int, str]:
        return int(item.get("quantity", 0)), str(item.get("name", "")).strip().lower()
