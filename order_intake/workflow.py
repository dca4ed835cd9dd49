"""LangGraph workflow for inbound chat messages.

    classify ─(order)──→ parse ─→ validate ─→ reconcile ─→ reply ─→ report
             │                │           └(incomplete)──↗
             │                └(parse error)─────────────↗
             ├(payment)─→ extract_amount ────────────────↗
             └(other)────────────────────────────────────────────→ report
"""
from langgraph.graph import END, StateGraph

from order_intake.core.chat_message import ChatMessage
from order_intake.core.workflow_state import IntakeState


def route_after_classify(state: IntakeState) -> str:
    if state.get("final_status") == "error":
        return "report"
    kind = state.get("message_kind")
    if kind == "order":
        return "parse"
    if kind == "payment":
        return "extract_amount"
    return "report"


def route_after_parse(state: IntakeState) -> str:
    if state.get("final_status") == "error":
        return "report"
    if state.get("parse_error"):
        return "reply"
    return "validate"


def route_after_validate(state: IntakeState) -> str:
    if state.get("final_status") == "error":
        return "report"
    if state.get("validation_errors"):
        return "reply"
    return "reconcile"


def build_graph(nodes: dict):
    """Build and compile the intake graph from a mapping of node name → node.

    Expects the keys classify, parse, validate, reconcile, extract_amount,
    reply and report.
    """
    graph = StateGraph(IntakeState)
    for name, node in nodes.items():
        graph.add_node(name, node)

    graph.set_entry_point("classify")

    graph.add_conditional_edges(
        "classify",
        route_after_classify,
        {"parse": "parse", "extract_amount": "extract_amount", "report": "report"},
    )
    graph.add_conditional_edges(
        "parse",
        route_after_parse,
        {"validate": "validate", "reply": "reply", "report": "report"},
    )
    graph.add_conditional_edges(
        "validate",
        route_after_validate,
        {"reconcile": "reconcile", "reply": "reply", "report": "report"},
    )

    graph.add_edge("reconcile", "reply")
    graph.add_edge("extract_amount", "reply")
    graph.add_edge("reply", "report")
    graph.add_edge("report", END)

    return graph.compile()


def initial_state(message: ChatMessage, image_bytes: bytes | None = None) -> IntakeState:
    """Workflow input for an inbound chat message. Captions stand in for text on images."""
    return {
        "chat_id": message.chat_id,
        "message_text": message.text or message.caption,
        "image_bytes": image_bytes if message.has_image else None,
        "trajectory": [],
    }
