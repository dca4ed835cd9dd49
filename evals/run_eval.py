"""Run the intake scenarios through opik.evaluate() and score them.

Usage:
    python -m evals.run_eval
    python -m evals.run_eval --category happy_path --experiment-name fee-parsing
"""
import argparse

import opik
from opik import Opik
from opik.evaluation import evaluate

from evals.conftest import eval_app_config, load_price_list, load_scenarios, scenario_state
from evals.graders.amount import AmountAccuracy
from evals.graders.format_detection import FormatDetectionAccuracy
from evals.graders.items import ItemsAccuracy
from evals.graders.trajectory import TrajectoryCorrectness
from order_intake.builder import IntakeWorkflowBuilder
from order_intake.services.tools.mock import MockToolManager

_RESULT_KEYS = ("detected_format", "draft_order", "amount_result", "reply_text")
_EXPECTED_KEYS = {
    "expected_format": "detected_format",
    "expected_items": "items",
    "expected_amount": "amount",
    "expected_needs_confirmation": "needs_confirmation",
    "expected_status": "final_status",
}


def make_task(workflow, tools: MockToolManager):
    @opik.track(name="intake_workflow")
    def task(scenario: dict) -> dict:
        tools.reset()
        result = workflow.invoke(scenario_state(scenario))

        output = {key: result.get(key) for key in _RESULT_KEYS}
        output["trajectory"] = result.get("trajectory", [])
        output["final_status"] = result.get("final_status", "error")

        # Graders read the expectations from the task output.
        expected = scenario["expected"]
        output.update({key: expected.get(source) for key, source in _EXPECTED_KEYS.items()})
        output["expected_trajectory"] = expected["expected_trajectory"]
        return output

    return task


def to_dataset_items(scenarios: list[dict]) -> list[dict]:
    """Opik reserves 'id' for its own UUIDs, so scenario ids travel as 'scenario_id'."""
    items = []
    for scenario in scenarios:
        item = dict(scenario)
        item["scenario_id"] = item.pop("id", None)
        items.append(item)
    return items


def main():
    parser = argparse.ArgumentParser(description="Evaluate the intake workflow against scenarios")
    parser.add_argument("--category", default=None, help="Only run scenarios of this category")
    parser.add_argument("--experiment-name", default="intake-workflow-eval")
    args = parser.parse_args()

    config = eval_app_config()
    tools = MockToolManager(load_price_list())
    workflow = IntakeWorkflowBuilder(config, tool_manager=tools).build()

    suffix = args.category or "all"
    dataset = Opik().get_or_create_dataset(f"intake-scenarios-{suffix}")
    dataset.insert(to_dataset_items(load_scenarios(args.category)))

    evaluate(
        dataset=dataset,
        task=make_task(workflow, tools),
        scoring_metrics=[
            FormatDetectionAccuracy(),
            ItemsAccuracy(),
            AmountAccuracy(),
            TrajectoryCorrectness(),
        ],
        experiment_name=args.experiment_name,
        experiment_config={
            "ocr_engine": config.ocr_engine,
            "ocr_lang": config.ocr_lang,
            "category": suffix,
        },
        # The mock tools are shared between tasks.
        task_threads=1,
    )


if __name__ == "__main__":
    main()
