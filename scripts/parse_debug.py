"""Parse an order message and show the detected dialect, draft and validation.

Usage:
    python scripts/parse_debug.py message.txt
    pbpaste | python scripts/parse_debug.py -
"""
# ruff: noqa: E402
import argparse
import json
import logging
import sys
from pathlib import Path

project_root = str(Path(__file__).parent.parent)
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from order_intake.core.errors import OrderParseError
from order_intake.parsing.order_parser import detect_format, format_order_summary, parse_order
from order_intake.parsing.validator import validate_order


def main():
    parser = argparse.ArgumentParser(description="Debug order template parsing")
    parser.add_argument("source", help="Path to a text file, or '-' for stdin")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show parser debug logs")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    text = sys.stdin.read() if args.source == "-" else Path(args.source).read_text(encoding="utf-8")
    print(f"Detected format: {detect_format(text)}")

    try:
        draft = parse_order(text)
    except OrderParseError as e:
        print(f"Parse error on field '{e.field}': {e.message} (value: {e.original_value!r})")
        sys.exit(1)

    print(json.dumps(draft.model_dump(mode="json"), indent=2, ensure_ascii=False))

    report = validate_order(draft)
    print(f"\nValid: {report.valid}")
    for error in report.errors:
        print(f"  • {error}")

    print("\nSummary:\n" + format_order_summary(draft))


if __name__ == "__main__":
    main()
