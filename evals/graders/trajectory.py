from opik.evaluation.metrics import BaseMetric
from opik.evaluation.metrics.score_result import ScoreResult


class TrajectoryCorrectness(BaseMetric):
    """Checks that the workflow visited the expected nodes and ended in the expected status."""
    name = "trajectory_correctness"

    def score(
        self,
        trajectory: list[str],
        expected_trajectory: list[str],
        final_status: str | None = None,
        expected_status: str | None = None,
        **kwargs,
    ) -> ScoreResult:
        path_ok = trajectory == expected_trajectory
        status_ok = expected_status is None or final_status == expected_status
        return ScoreResult(
            value=1.0 if path_ok and status_ok else 0.0,
            name=self.name,
            reason=f"Expected {expected_trajectory} ({expected_status}), got {trajectory} ({final_status})",
        )
