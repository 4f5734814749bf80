"""
OCR: PaddleOCR (PP-OCR) engine adapter.

Default primary engine. Models are downloaded and loaded on first use, which
can take several seconds, so initialization is deferred to the selector.
"""

from typing import Any, Iterable, List, Optional, Tuple

from loguru import logger

from config.settings import OCR_LANGUAGE
from ...pre_ocr.image_decoder import decode_bytes
from .base import BaseOCREngine


class PaddleOCREngine(BaseOCREngine):
    """
    Wrapper around ``paddleocr.PaddleOCR``.

    Detection + angle classification + recognition; each detected text box
    becomes one line with its recognition score as confidence.

    PaddleOCR 3.x renamed the angle classifier to "textline orientation" and
    replaced ``ocr(img, cls=...)`` with ``predict(img)``; both call paths are
    supported, chosen by the installed major version.
    """

    name = "paddle"

    def __init__(self, lang: str = OCR_LANGUAGE, use_angle_cls: bool = True) -> None:
        super().__init__()
        self.lang = lang
        self.use_angle_cls = use_angle_cls
        self._ocr: Optional[Any] = None
        self._major_version = 0

    def _load(self) -> None:
        import paddleocr

        self._major_version = _major_version(getattr(paddleocr, "__version__", ""))
        logger.debug(
            f"[PaddleOCREngine] Loading models (lang={self.lang}, paddleocr {self._major_version}.x)"
        )
        if self._major_version >= 3:
            self._ocr = paddleocr.PaddleOCR(
                use_textline_orientation=self.use_angle_cls, lang=self.lang
            )
        else:
            self._ocr = paddleocr.PaddleOCR(use_angle_cls=self.use_angle_cls, lang=self.lang)

    def _recognize_lines(self, image_content: bytes) -> Iterable[Tuple[str, float]]:
        image = decode_bytes(image_content, source_name="paddle input")
        if self._major_version >= 3:
            result = self._ocr.predict(image)
        else:
            result = self._ocr.ocr(image, cls=self.use_angle_cls)
        return self._parse_result(result)

    @staticmethod
    def _parse_result(result: Any) -> List[Tuple[str, float]]:
        """
        Flattens PaddleOCR output into (text, score) pairs.

        Handles both the 2.x layout ``[[box, (text, score)], ...]`` per page
        and the 3.x per-page mapping with ``rec_texts`` / ``rec_scores``.
        """
        lines: List[Tuple[str, float]] = []
        if not result:
            return lines

        for page in result:
            if not page:
                continue

            if hasattr(page, "get") and page.get("rec_texts") is not None:
                lines.extend(zip(page["rec_texts"], page["rec_scores"]))
                continue

            for item in page:
                text, score = item[1]
                lines.append((text, score))

        return lines


def _major_version(version: str) -> int:
    """"3.0.2" -> 3; unknown versions are treated as 2.x."""
    head = str(version).split(".", 1)[0]
    return int(head) if head.isdigit() else 2
