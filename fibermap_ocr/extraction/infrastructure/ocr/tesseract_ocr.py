"""
OCR: Tesseract engine adapter (via pytesseract).

Default secondary engine: slower to misread stylised label fonts than PP-OCR,
but needs only the tesseract binary, so it is usually available when the
primary is not.
"""

from collections import OrderedDict
from typing import Any, Dict, Iterable, List, Tuple

from loguru import logger

from config.settings import OCR_LANGUAGE, TESSERACT_CONFIG
from ...pre_ocr.image_decoder import decode_bytes
from .base import BaseOCREngine


# ISO 639-1 -> Tesseract traineddata names
_TESSERACT_LANGUAGES = {
    "en": "eng",
    "de": "deu",
    "fr": "fra",
    "es": "spa",
}


class TesseractOCREngine(BaseOCREngine):
    """
    Wrapper around ``pytesseract.image_to_data``.

    Words are grouped into lines by Tesseract's (block, paragraph, line)
    numbering; line confidence is the mean word confidence scaled to [0, 1].
    """

    name = "tesseract"

    def __init__(self, lang: str = OCR_LANGUAGE, config: str = TESSERACT_CONFIG) -> None:
        super().__init__()
        self.lang = _TESSERACT_LANGUAGES.get(lang, lang)
        self.config = config
        self._pytesseract: Any = None

    def _load(self) -> None:
        import pytesseract

        # Raises TesseractNotFoundError when the binary is missing
        version = pytesseract.get_tesseract_version()
        self._pytesseract = pytesseract
        logger.debug(f"[TesseractOCREngine] Tesseract {version} (lang={self.lang})")

    def _recognize_lines(self, image_content: bytes) -> Iterable[Tuple[str, float]]:
        image = decode_bytes(image_content, source_name="tesseract input")
        data = self._pytesseract.image_to_data(
            image,
            lang=self.lang,
            config=self.config,
            output_type=self._pytesseract.Output.DICT,
        )
        return self._group_lines(data)

    @staticmethod
    def _group_lines(data: Dict[str, List[Any]]) -> List[Tuple[str, float]]:
        """Joins words into lines, keeping Tesseract's reading order."""
        grouped: "OrderedDict[Tuple[int, int, int], Tuple[List[str], List[float]]]" = OrderedDict()

        for i, raw_text in enumerate(data.get("text", [])):
            text = (raw_text or "").strip()
            try:
                conf = float(data["conf"][i])
            except (TypeError, ValueError):
                conf = -1.0

            # conf == -1 marks layout rows (blocks, paragraphs), not words
            if not text or conf < 0:
                continue

            key = (data["block_num"][i], data["par_num"][i], data["line_num"][i])
            words, confs = grouped.setdefault(key, ([], []))
            words.append(text)
            confs.append(conf)

        return [
            (" ".join(words), sum(confs) / len(confs) / 100.0)
            for words, confs in grouped.values()
        ]
