"""Run the payment-amount pipeline on one image and print every decision.

Usage:
    python scripts/ocr_debug.py path/to/receipt.jpg [--no-preprocess] [--save-debug]

Preprocessed images are written to the debug directory with --save-debug so
each mode can be inspected by eye.
"""
# ruff: noqa: E402
import argparse
import logging
import sys
from pathlib import Path

project_root = str(Path(__file__).parent.parent)
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from dotenv import load_dotenv
load_dotenv(Path(project_root) / ".env")

from order_intake.config import AppConfig
from order_intake.services.amounts.pipeline import AmountExtractionPipeline, ExtractionOptions
from order_intake.services.ocr.tesseract import TesseractOCR


def main():
    parser = argparse.ArgumentParser(description="Debug payment amount extraction")
    parser.add_argument("image", type=Path, help="Image or PDF payment proof")
    parser.add_argument("--no-preprocess", action="store_true", help="Skip the preprocessing modes")
    parser.add_argument("--save-debug", action="store_true", help="Write preprocessed images")
    parser.add_argument("--min-amount", type=int, default=None)
    parser.add_argument("--max-amount", type=int, default=None)
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    config = AppConfig.from_yaml(Path(project_root) / "config.yaml")
    options = ExtractionOptions(
        preprocess=not args.no_preprocess,
        debug_save=args.save_debug,
        debug_dir=config.ocr_debug_dir,
        lang=config.ocr_lang,
        min_amount=args.min_amount or config.min_amount,
        max_amount=args.max_amount or config.max_amount,
        confidence_threshold=config.confidence_threshold,
    )

    result = AmountExtractionPipeline(TesseractOCR(lang=config.ocr_lang), options).extract(
        args.image.read_bytes()
    )

    print("=" * 60)
    print(f"  ok:                 {result.ok}")
    print(f"  value:              {result.value}")
    print(f"  confidence:         {result.confidence:.1f}")
    print(f"  needs_confirmation: {result.needs_confirmation}")
    print(f"  reason:             {result.reason.value}")
    if result.metadata:
        meta = result.metadata
        print(f"  source:             {meta.source} (weight {meta.weight}, {meta.original!r})")
        print(f"  mode/strategy/psm:  {meta.preprocess_mode} / {meta.strategy} / {meta.psm}")
    for i, candidate in enumerate(result.candidates, 1):
        print(f"  {i}. {candidate.amount:>12,} weight={candidate.weight} source={candidate.source}")
    if not result.ok:
        print(f"  error:              {result.error}")
        print(f"  ocr text:\n{result.ocr_text}")
    print("=" * 60)


if __name__ == "__main__":
    main()
