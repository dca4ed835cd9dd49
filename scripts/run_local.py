"""Local end-to-end run: simulate an inbound chat message → full workflow → printed reply.

Usage:
    python scripts/run_local.py order.txt
    python scripts/run_local.py receipt.jpg --image
    python scripts/run_local.py order.txt --prices prices.yaml

This script:
1. Builds the workflow from config.yaml (Tesseract OCR + mock tools)
2. Loads the message text, or an image/PDF payment proof with --image
3. Invokes the workflow as if the message arrived from chat
4. Prints the trajectory, final status and the reply that would be sent
"""
# ruff: noqa: E402
import argparse
import sys
from pathlib import Path

project_root = str(Path(__file__).parent.parent)
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from dotenv import load_dotenv
load_dotenv(Path(project_root) / ".env")

import yaml

from order_intake.builder import IntakeWorkflowBuilder
from order_intake.config import AppConfig
from order_intake.core.chat_message import ChatMessage
from order_intake.services.tools.mock import MockToolManager
from order_intake.workflow import initial_state


def main():
    parser = argparse.ArgumentParser(description="Run one chat message through the intake workflow")
    parser.add_argument("source", type=Path, help="Text file with the message, or an image with --image")
    parser.add_argument("--image", action="store_true", help="Treat the source as a payment proof")
    parser.add_argument("--prices", type=Path, default=None, help="YAML mapping of product name to unit price")
    parser.add_argument("--chat-id", type=int, default=1)
    args = parser.parse_args()

    config = AppConfig.from_yaml(Path(project_root) / "config.yaml")
    config = config.model_copy(update={"templates_dir": str(Path(project_root) / config.templates_dir)})

    price_list = {}
    if args.prices:
        with open(args.prices, encoding="utf-8") as f:
            price_list = yaml.safe_load(f) or {}

    builder = IntakeWorkflowBuilder(config, tool_manager=MockToolManager(price_list))
    workflow = builder.build()
    print(f"Config: ocr={config.ocr_engine}/{config.ocr_lang}, language={config.message_language}")

    if args.image:
        message = ChatMessage(chat_id=args.chat_id, has_image=True, image_file_id=args.source.name)
        state = initial_state(message, image_bytes=args.source.read_bytes())
    else:
        message = ChatMessage(chat_id=args.chat_id, text=args.source.read_text(encoding="utf-8"))
        state = initial_state(message)

    result = workflow.invoke(state)

    print("=" * 60)
    print("WORKFLOW RESULT")
    print("=" * 60)
    print(f"  Final status:    {result.get('final_status')}")
    print(f"  Trajectory:      {result.get('trajectory')}")
    print(f"  Format:          {result.get('detected_format')}")
    print(f"  Validation:      {result.get('validation_errors')}")
    print(f"  Order total:     {result.get('order_total')}")
    print(f"  Error:           {result.get('error_message')}")

    amount = result.get("amount_result")
    if amount:
        print(f"  Amount:          {amount.get('value')} ({amount.get('reason')})")

    if result.get("reply_text"):
        print("\n  Reply:\n")
        print(result["reply_text"])
    print("\n" + "=" * 60)


if __name__ == "__main__":
    main()
