"""
DTO contracts between FiberMap OCR and its consumers.

Contracts:
- Ingestion -> circuit-creation form: IngestionResult (ingestion_dto.py)
"""

from .ingestion_dto import IngestionResult

__all__ = ["IngestionResult"]
