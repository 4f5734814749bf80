"""FiberMap OCR - cable-label photo to canonical circuit IDs."""

__version__ = "0.3.0"
