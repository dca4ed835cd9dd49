from opik.evaluation.metrics import BaseMetric
from opik.evaluation.metrics.score_result import ScoreResult


class FormatDetectionAccuracy(BaseMetric):
    """Evaluates whether the order template dialect was detected correctly."""
    name = "format_detection_accuracy"

    def score(self, detected_format: str | None, expected_format: str | None, **kwargs) -> ScoreResult:
        correct = detected_format == expected_format
        return ScoreResult(
            value=1.0 if correct else 0.0,
            name=self.name,
            reason=f"Expected {expected_format}, got {detected_format}",
        )
