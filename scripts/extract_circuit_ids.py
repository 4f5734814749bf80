#!/usr/bin/env python3
"""
Entry point: cable-label photos -> canonical circuit IDs.

Usage:
    # Every image in data/input/
    python scripts/extract_circuit_ids.py

    # Specific images, JSON output
    python scripts/extract_circuit_ids.py label1.jpg label2.png --json

    # Tesseract only, keep the binarized image for inspection
    python scripts/extract_circuit_ids.py label.jpg --primary tesseract --secondary "" \
        --save-preprocessed data/output/preprocessed
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import List

from loguru import logger

# Add the project root to sys.path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from config.settings import (
    INPUT_DIR,
    LOG_LEVEL,
    SUPPORTED_IMAGE_FORMATS,
    validate_config,
)
from contracts.ingestion_dto import IngestionResult
from fibermap_ocr.domain.contracts import ContractValidationError, PreprocessConfig
from fibermap_ocr.extraction import IngestionComponentFactory
from fibermap_ocr.extraction.domain.exceptions import ExtractionError


def collect_images(paths: List[str]) -> List[Path]:
    """Expands CLI arguments (files or directories) into image paths."""
    if not paths:
        paths = [str(INPUT_DIR)]

    images: List[Path] = []
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            images.extend(
                sorted(p for p in path.iterdir() if p.suffix.lower() in SUPPORTED_IMAGE_FORMATS)
            )
        else:
            images.append(path)
    return images


def build_config(args: argparse.Namespace) -> PreprocessConfig:
    base = PreprocessConfig.from_yaml(args.config) if args.config else PreprocessConfig()
    overrides = {}
    if args.no_sharpen:
        overrides["sharpen_enabled"] = False
    if args.no_threshold:
        overrides["threshold_enabled"] = False
    if args.min_width is not None:
        overrides["min_width"] = args.min_width
    if not overrides:
        return base
    return PreprocessConfig.from_mapping({**base.model_dump(), **overrides})


def save_preprocessed(image_path: Path, config: PreprocessConfig, output_dir: Path) -> Path:
    preprocessor = IngestionComponentFactory.create_preprocessor(config)
    processed, _ = preprocessor.process(image_path)
    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = output_dir / f"{image_path.stem}_preprocessed.png"
    output_path.write_bytes(processed)
    return output_path


async def run(args: argparse.Namespace) -> int:
    config = build_config(args)
    images = collect_images(args.paths)
    if not images:
        print("[ERROR] No images found")
        return 1

    selector = IngestionComponentFactory.create_engine_selector(args.primary, args.secondary)
    pipeline = IngestionComponentFactory.create_ingestion_pipeline(
        preprocessor=IngestionComponentFactory.create_preprocessor(config),
        engine_selector=selector,
        canonicalizer=IngestionComponentFactory.create_canonicalizer(strict=args.strict),
    )

    failed = 0
    report = {}
    for image_path in images:
        if args.save_preprocessed:
            try:
                saved = save_preprocessed(image_path, config, Path(args.save_preprocessed))
                logger.info(f"Preprocessed image saved: {saved}")
            except ExtractionError as e:
                logger.warning(f"Could not save preprocessed image for {image_path.name}: {e}")

        try:
            result: IngestionResult = await pipeline.ingest(image_path)
        except (ExtractionError, ValueError) as e:
            failed += 1
            report[image_path.name] = {"error": str(e)}
            if not args.json:
                print(f"  [ERROR] {image_path.name}: {e}")
            continue

        report[image_path.name] = result.to_dict()
        if not args.json:
            print(f"\n  {image_path.name} (engine: {result.engine})")
            for circuit_id in result.circuit_ids:
                print(f"    {circuit_id}")
            for line_number, text in result.rejected_lines:
                print(f"    [REVIEW] line {line_number}: {text}")

    if args.json:
        print(json.dumps(report, ensure_ascii=False, indent=2))

    return 1 if failed == len(images) else 0


def main() -> int:
    parser = argparse.ArgumentParser(description="FiberMap OCR: label photo -> circuit IDs")
    parser.add_argument("paths", nargs="*", help="Images or directories (default: data/input)")
    parser.add_argument("--config", help="YAML file with preprocessing settings")
    parser.add_argument("--primary", default=None, help="Primary OCR engine")
    parser.add_argument("--secondary", default=None, help="Secondary OCR engine ('' disables fallback)")
    parser.add_argument("--min-width", type=int, default=None, help="Upscale images narrower than this")
    parser.add_argument("--no-sharpen", action="store_true", help="Skip sharpening")
    parser.add_argument("--no-threshold", action="store_true", help="Skip adaptive threshold")
    parser.add_argument("--strict", action="store_true", help="Fail on lines without a circuit ID")
    parser.add_argument("--save-preprocessed", metavar="DIR", help="Write binarized images here")
    parser.add_argument("--json", action="store_true", help="Print a JSON report")
    args = parser.parse_args()

    try:
        validate_config()
    except ValueError as e:
        print(f"\n[ERROR] {e}")
        return 1

    try:
        return asyncio.run(run(args))
    except ContractValidationError as e:
        print(f"\n[ERROR] {e}")
        return 1


if __name__ == "__main__":
    logger.remove()
    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>",
        level=LOG_LEVEL
    )

    sys.exit(main())
