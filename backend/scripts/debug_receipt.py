"""
Debug script to see what the parser extracts from OCR text.

Usage:
    python scripts/debug_receipt.py receipt.txt
    cat receipt.txt | python scripts/debug_receipt.py
"""

import argparse
import logging
import os
import sys
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from scan_receipt.services.parser import ReceiptParser
from scan_receipt.utils.money import format_money


def main(argv=None) -> int:
    arg_parser = argparse.ArgumentParser(description="Run the receipt parser over OCR text")
    arg_parser.add_argument("path", nargs="?", help="Text file with OCR output (default: stdin)")
    arg_parser.add_argument("-v", "--verbose", action="store_true", help="Show parser debug logging")
    args = arg_parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    if args.path:
        with open(args.path, encoding="utf-8") as f:
            text = f.read()
    else:
        text = sys.stdin.read()

    print("="*60)
    print("EXTRACTED TEXT:")
    print("-"*60)
    print(text)
    print("-"*60)
    print(f"\nText length: {len(text)} characters")

    parser = ReceiptParser()
    result = parser.parse(text)

    print("\n" + "="*60)
    print("PARSING RESULT:")
    print("="*60)
    print(f"\nMerchant: {result.merchant}")
    print(f"Amount: {format_money(result.amount)}")
    print(f"Date: {result.date}")
    print(f"Confidence: {result.confidence}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
