"""FiberMap OCR configuration."""
