"""Extraction Application: factory and ingestion pipeline."""

from .ingestion_pipeline import LabelIngestionPipeline
from .factory import IngestionComponentFactory, ENGINE_REGISTRY

__all__ = ["LabelIngestionPipeline", "IngestionComponentFactory", "ENGINE_REGISTRY"]
