"""
OCR engine selection: primary with fallback to secondary.

Engines are expensive to initialize (model downloads, binary probing), so each
one is initialized lazily the first time it is needed and the outcome is
memoized for the rest of the process. The secondary is only initialized once
the primary has failed (at initialization or on an image). Concurrent first
calls share a single initialization.

Per-engine states:
  NOT_INITIALIZED -> INITIALIZING -> READY
                                  -> FAILED
"""

import asyncio
from enum import Enum
from typing import Dict, List, Optional

from loguru import logger

from fibermap_ocr.domain.contracts import RecognitionResult
from ..domain.exceptions import (
    OCRProcessingError,
    OCRProviderError,
    RecognitionUnavailableError,
)
from ..domain.interfaces import IOCRProvider


class EngineState(str, Enum):
    NOT_INITIALIZED = "not_initialized"
    INITIALIZING = "initializing"
    READY = "ready"
    FAILED = "failed"


class OCREngineSelector:
    """
    Selects which recognition engine answers.

    The primary is preferred. If it fails to initialize, or fails on a given
    image, the secondary answers instead. An engine that failed to initialize
    is not retried within the selector's lifetime; call reset() to retry.
    """

    def __init__(self, primary: IOCRProvider, secondary: Optional[IOCRProvider] = None) -> None:
        self.primary = primary
        self.secondary = secondary
        self._engines: List[IOCRProvider] = [e for e in (primary, secondary) if e is not None]
        self._states: Dict[int, EngineState] = {}
        self._init_errors: Dict[int, OCRProviderError] = {}
        self._init_lock = asyncio.Lock()
        self.reset()

    @property
    def state(self) -> EngineState:
        """Overall state: READY once any engine is usable, FAILED when none can be."""
        states = list(self._states.values())
        if EngineState.READY in states:
            return EngineState.READY
        if all(s == EngineState.FAILED for s in states):
            return EngineState.FAILED
        if all(s == EngineState.NOT_INITIALIZED for s in states):
            return EngineState.NOT_INITIALIZED
        return EngineState.INITIALIZING

    def engine_state(self, engine: IOCRProvider) -> EngineState:
        return self._states[self._engines.index(engine)]

    @property
    def available_engines(self) -> List[str]:
        return [
            engine.name for slot, engine in enumerate(self._engines)
            if self._states[slot] == EngineState.READY
        ]

    async def _ensure_engine(self, slot: int) -> bool:
        """Initializes the engine in ``slot`` once; True if it is usable."""
        # Callers arriving during initialization wait on the lock for its outcome
        if self._states[slot] in (EngineState.NOT_INITIALIZED, EngineState.INITIALIZING):
            async with self._init_lock:
                if self._states[slot] == EngineState.NOT_INITIALIZED:
                    await self._initialize_engine(slot)
        return self._states[slot] == EngineState.READY

    async def _initialize_engine(self, slot: int) -> None:
        engine = self._engines[slot]
        self._states[slot] = EngineState.INITIALIZING
        logger.debug(f"[EngineSelector] Initializing engine '{engine.name}'")
        try:
            await asyncio.to_thread(engine.initialize)
        except Exception as e:
            # Any IOCRProvider may be plugged in, not only BaseOCREngine subclasses
            error = e if isinstance(e, OCRProviderError) else OCRProviderError(
                message=f"Failed to initialize OCR engine '{engine.name}'",
                component="OCREngineSelector",
                original_error=e
            )
            self._states[slot] = EngineState.FAILED
            self._init_errors[slot] = error
            logger.warning(f"[EngineSelector] Engine '{engine.name}' unavailable: {error}")
            return
        self._states[slot] = EngineState.READY
        logger.info(f"[EngineSelector] Engine '{engine.name}' ready")

    async def warm_up(self) -> str:
        """
        Initializes engines in preference order until one is usable.

        Returns:
            Name of the engine that will answer first

        Raises:
            RecognitionUnavailableError: if no engine can be initialized
        """
        for slot, engine in enumerate(self._engines):
            if await self._ensure_engine(slot):
                return engine.name

        raise RecognitionUnavailableError(
            message="No OCR engine could be initialized: "
                    + "; ".join(str(e) for e in self._init_errors.values()),
            component="OCREngineSelector"
        )

    async def recognize(self, image_content: bytes) -> RecognitionResult:
        """
        Recognizes text with the first engine that answers.

        Raises:
            RecognitionUnavailableError: if every engine failed
        """
        errors: List[OCRProcessingError] = []

        for slot, engine in enumerate(self._engines):
            if not await self._ensure_engine(slot):
                init_error = self._init_errors.get(slot)
                if init_error is not None:
                    errors.append(init_error)
                continue

            try:
                result = await asyncio.to_thread(engine.recognize, image_content)
            except OCRProcessingError as e:
                errors.append(e)
                logger.warning(f"[EngineSelector] Engine '{engine.name}' failed, trying next: {e}")
                continue

            if slot > 0:
                logger.info(f"[EngineSelector] Fallback engine '{engine.name}' answered")
            return result

        logger.error("[EngineSelector] No OCR engine produced a result")
        raise RecognitionUnavailableError(
            message="All OCR engines failed: " + "; ".join(str(e) for e in errors),
            component="OCREngineSelector"
        )

    def reset(self) -> None:
        """Forgets initialization outcomes (engines are initialized again on next use)."""
        self._states = {slot: EngineState.NOT_INITIALIZED for slot in range(len(self._engines))}
        self._init_errors = {}


# Process-wide selector, created on first use
_default_selector: Optional[OCREngineSelector] = None


def get_default_selector() -> OCREngineSelector:
    """Returns the process-wide selector built from settings."""
    global _default_selector
    if _default_selector is None:
        from ..application.factory import IngestionComponentFactory
        _default_selector = IngestionComponentFactory.create_engine_selector()
    return _default_selector


def reset_default_selector() -> None:
    """Drops the process-wide selector (end of lifecycle, tests)."""
    global _default_selector
    _default_selector = None
