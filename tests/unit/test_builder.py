"""Unit tests for IntakeWorkflowBuilder and end-to-end graph runs."""
from pathlib import Path

import pytest

from order_intake.builder import IntakeWorkflowBuilder
from order_intake.config import AppConfig
from order_intake.core.chat_message import ChatMessage
from order_intake.services.message_store.local import LocalMessageStore
from order_intake.services.ocr.tesseract import TesseractOCR
from order_intake.services.tools.mock import MockToolManager
from order_intake.workflow import initial_state
from tests.mocks import PRICE_LIST, V1_ORDER, V2_ORDER, ScriptedOCR

TEMPLATES_DIR = str(Path(__file__).parents[2] / "templates")


def eval_config(**overrides) -> AppConfig:
    config = AppConfig.for_eval()
    return config.model_copy(update={"templates_dir": TEMPLATES_DIR, **overrides})


def build(ocr=None, **overrides):
    builder = IntakeWorkflowBuilder(
        eval_config(**overrides),
        ocr=ocr or ScriptedOCR(text="Rp 235.000", confidence=92),
        tool_manager=MockToolManager(PRICE_LIST),
    )
    return builder.build(), builder


class TestIntakeWorkflowBuilder:
    def test_eval_config_creates_mock_tool_manager(self):
        builder = IntakeWorkflowBuilder(eval_config())
        assert isinstance(builder.tool_manager, MockToolManager)

    def test_creates_local_message_store(self):
        builder = IntakeWorkflowBuilder(eval_config(message_language="en"))
        assert isinstance(builder.message_store, LocalMessageStore)
        assert builder.message_store.language == "en"

    def test_tesseract_engine_by_default(self):
        builder = IntakeWorkflowBuilder(eval_config(ocr_lang="ind"))
        assert isinstance(builder._ocr, TesseractOCR)
        assert builder._ocr._lang == "ind"

    def test_extraction_options_follow_config(self):
        builder = IntakeWorkflowBuilder(eval_config(min_amount=5000, require_confirmation=True, ocr_preprocess=False))
        options = builder.extraction_options()
        assert options.min_amount == 5000
        assert options.require_confirmation is True
        assert options.preprocess is False

    def test_graph_has_expected_nodes(self):
        graph, _ = build()
        node_names = [n.name for n in graph.get_graph().nodes.values()]
        for expected in ["classify", "parse", "validate", "reconcile", "extract_amount", "reply", "report"]:
            assert expected in node_names, f"Node '{expected}' not found in graph"

    @pytest.mark.parametrize("overrides", [
        {"ocr_engine": "easyocr"},
        {"tool_manager": "sheets"},
        {"message_store": "remote"},
    ])
    def test_unknown_component_raises(self, overrides):
        with pytest.raises(ValueError):
            IntakeWorkflowBuilder(eval_config(**overrides))

    def test_missing_templates_dir_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            IntakeWorkflowBuilder(eval_config(templates_dir=str(tmp_path / "missing")))


class TestWorkflowRuns:
    def test_v2_order_awaits_confirmation(self):
        graph, builder = build()
        result = graph.invoke(initial_state(ChatMessage(chat_id=1, text=V2_ORDER)))
        assert result["trajectory"] == ["classify", "parse", "validate", "reconcile", "reply", "report"]
        assert result["final_status"] == "awaiting_confirmation"
        assert result["order_total"] == 1_260_000
        assert len(builder.tool_manager.messages_sent) == 1

    def test_v1_order(self):
        graph, _ = build()
        result = graph.invoke(initial_state(ChatMessage(chat_id=1, text=V1_ORDER)))
        assert result["detected_format"] == "v1"
        assert result["order_total"] == 3 * 15000 + 20000

    def test_incomplete_order_skips_reconcile(self):
        graph, _ = build()
        text = V1_ORDER.replace("No hp: 081234567890\n", "")
        result = graph.invoke(initial_state(ChatMessage(chat_id=1, text=text)))
        assert result["trajectory"] == ["classify", "parse", "validate", "reply", "report"]
        assert result["final_status"] == "incomplete"
        assert "Phone number is required" in result["reply_text"]

    def test_bad_fee_rejected(self):
        graph, _ = build()
        text = V2_ORDER.replace("100000", "seratus ribu")
        result = graph.invoke(initial_state(ChatMessage(chat_id=1, text=text)))
        assert result["trajectory"] == ["classify", "parse", "reply", "report"]
        assert result["final_status"] == "rejected"

    def test_chit_chat_skipped_without_reply(self):
        graph, builder = build()
        result = graph.invoke(initial_state(ChatMessage(chat_id=1, text="Halo kak")))
        assert result["trajectory"] == ["classify", "report"]
        assert result["final_status"] == "skipped"
        assert builder.tool_manager.messages_sent == []

    def test_payment_image(self):
        graph, _ = build(ocr_preprocess=False)
        message = ChatMessage(chat_id=1, has_image=True, image_file_id="photo-1")
        result = graph.invoke(initial_state(message, image_bytes=b"IMG"))
        assert result["trajectory"] == ["classify", "extract_amount", "reply", "report"]
        assert result["amount_result"]["value"] == 235000
        assert "Rp 235.000" in result["reply_text"]
        assert result["final_status"] == "awaiting_confirmation"

    def test_unreadable_payment_image(self):
        graph, _ = build(ocr=ScriptedOCR(text="", confidence=0), ocr_preprocess=False)
        message = ChatMessage(chat_id=1, has_image=True)
        result = graph.invoke(initial_state(message, image_bytes=b"IMG"))
        assert result["amount_result"]["ok"] is False
        assert result["final_status"] == "incomplete"
