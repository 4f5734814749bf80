#!/usr/bin/env python3
"""
Normalizes typed or pasted circuit IDs (no image, no OCR).

Usage:
    python scripts/normalize_circuit_ids.py "G 1 10" "BR 21 365 372"
    cat ids.txt | python scripts/normalize_circuit_ids.py
    python scripts/normalize_circuit_ids.py --clean < raw_ocr.txt
"""

import argparse
import sys
from pathlib import Path

from loguru import logger

# Add the project root to sys.path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from config.settings import LOG_LEVEL
from fibermap_ocr.parsing import CircuitId, canonicalize, normalize_circuit_ids


def main() -> int:
    parser = argparse.ArgumentParser(description="Normalize circuit IDs to prefix,start-end")
    parser.add_argument("values", nargs="*", help="Circuit IDs (default: read stdin, one per line)")
    parser.add_argument("--clean", action="store_true", help="Treat input as raw OCR text (strip noise first)")
    args = parser.parse_args()

    text = "\n".join(args.values) if args.values else sys.stdin.read()

    if args.clean:
        results = canonicalize(text)
    else:
        results = normalize_circuit_ids(text.splitlines())

    unresolved = 0
    for value in results:
        if CircuitId.try_parse(value) is None:
            unresolved += 1
            print(f"{value}\t[not canonical]")
        else:
            print(value)

    return 1 if unresolved else 0


if __name__ == "__main__":
    logger.remove()
    logger.add(sys.stderr, level=LOG_LEVEL)

    sys.exit(main())
