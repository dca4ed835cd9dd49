"""Scenario loading and fixtures shared by the eval runner and ad-hoc pytest runs."""
import json
from pathlib import Path

import pytest

from order_intake.builder import IntakeWorkflowBuilder
from order_intake.config import AppConfig
from order_intake.core.chat_message import ChatMessage
from order_intake.services.tools.mock import MockToolManager
from order_intake.workflow import initial_state

EVALS_DIR = Path(__file__).parent
SCENARIOS_DIR = EVALS_DIR / "scenarios"
FIXTURES_DIR = EVALS_DIR / "fixtures"
TEMPLATES_DIR = EVALS_DIR.parent / "templates"


def _scenario_files() -> list[dict]:
    files = []
    for path in sorted(SCENARIOS_DIR.glob("*.json")):
        with open(path, encoding="utf-8") as f:
            files.append(json.load(f))
    return files


def load_scenarios(category: str | None = None) -> list[dict]:
    """All scenarios across the JSON files, optionally only one category."""
    return [
        s
        for data in _scenario_files()
        for s in data["scenarios"]
        if category is None or s["category"] == category
    ]


def load_price_list() -> dict[str, int]:
    """Merged price lists declared by the scenario files."""
    prices: dict[str, int] = {}
    for data in _scenario_files():
        prices.update(data.get("price_list", {}))
    return prices


def scenario_state(scenario: dict) -> dict:
    """Workflow input for a scenario. Image fixtures that are not on disk are treated as absent."""
    raw = scenario["input"]
    image_bytes = None
    if raw.get("image_fixture"):
        path = FIXTURES_DIR / raw["image_fixture"]
        image_bytes = path.read_bytes() if path.exists() else None

    message = ChatMessage(
        chat_id=raw.get("chat_id", 0),
        text=raw.get("message_text", ""),
        has_image=image_bytes is not None,
    )
    return initial_state(message, image_bytes=image_bytes)


def eval_app_config() -> AppConfig:
    return AppConfig.for_eval().model_copy(update={"templates_dir": str(TEMPLATES_DIR)})


@pytest.fixture
def eval_config() -> AppConfig:
    return eval_app_config()


@pytest.fixture
def mock_tools() -> MockToolManager:
    mock = MockToolManager(load_price_list())
    yield mock
    mock.reset()


@pytest.fixture
def eval_workflow(eval_config, mock_tools):
    """Compiled workflow wired to the shared mock tools."""
    builder = IntakeWorkflowBuilder(eval_config, tool_manager=mock_tools)
    return builder.build(), mock_tools
