from __future__ import annotations

import logging
from typing import List, Optional, Protocol

from .config import ExtractionConfig
from .errors import OcrEngineError
from .parser import parse_hocr_fragments
from .structures import TextFragment, from_pixel_box

log = logging.getLogger(__name__)

DEFAULT_OCR_LANG = "eng"
OCR_CONFIDENCE_THRESHOLD = 60
DEFAULT_TESSERACT_CONFIG = "--oem 3 --psm 6"


class OcrEngine(Protocol):
    """Capacidad externa: imagen → fragmentos con cajas normalizadas."""

    name: str

    def recognize_text(self, image) -> List[TextFragment]:
        ...


def _import_pytesseract():
    try:
        import pytesseract
    except ImportError as exc:  # pragma: no cover - import guarded por entorno
        raise RuntimeError(
            "pytesseract no está instalado. Instale las dependencias y Tesseract."
        ) from exc
    return pytesseract


def _tesseract_call(func, *args, **kwargs):
    pytesseract = _import_pytesseract()
    try:
        return func(pytesseract, *args, **kwargs)
    except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError) as exc:
        raise OcrEngineError(f"Tesseract falló: {exc}") from exc


class TesseractLineEngine:
    """Una línea de texto por fragmento, vía hOCR."""

    name = "Tesseract (lines)"

    def __init__(self, *, lang: str = DEFAULT_OCR_LANG, tesseract_config: str = DEFAULT_TESSERACT_CONFIG) -> None:
        self.lang = lang
        self.config = f"{tesseract_config} -c tessedit_create_hocr=1"

    def recognize_text(self, image) -> List[TextFragment]:
        hocr = _tesseract_call(
            lambda pt: pt.image_to_pdf_or_hocr(image, extension="hocr", lang=self.lang, config=self.config)
        )
        if isinstance(hocr, bytes):
            hocr = hocr.decode("utf-8")
        return parse_hocr_fragments(hocr, level="line", page_size=image.size)


class TesseractWordEngine:
    """Una palabra por fragmento, vía image_to_data, filtrando por confianza."""

    name = "Tesseract (words)"

    def __init__(
        self,
        *,
        lang: str = DEFAULT_OCR_LANG,
        tesseract_config: str = DEFAULT_TESSERACT_CONFIG,
        confidence_threshold: int = OCR_CONFIDENCE_THRESHOLD,
    ) -> None:
        self.lang = lang
        self.config = tesseract_config
        self.confidence_threshold = confidence_threshold

    def recognize_text(self, image) -> List[TextFragment]:
        ocr_data = _tesseract_call(
            lambda pt: pt.image_to_data(image, output_type=pt.Output.DICT, lang=self.lang, config=self.config)
        )
        width, height = image.size
        fragments: List[TextFragment] = []
        for i in range(len(ocr_data["level"])):
            try:
                conf = int(float(ocr_data["conf"][i]))
            except (TypeError, ValueError):
                conf = -1
            if conf <= self.confidence_threshold:
                continue

            text = (ocr_data["text"][i] or "").strip()
            if not text:
                continue

            x, y, w, h = (
                ocr_data["left"][i],
                ocr_data["top"][i],
                ocr_data["width"][i],
                ocr_data["height"][i],
            )
            fragments.append(TextFragment(text=text, box=from_pixel_box(x, y, x + w, y + h, width, height)))
        return fragments


class FallbackEngine:
    """Usa `secondary` cuando `primary` no reconoce nada (p. ej. letras sueltas)."""

    def __init__(self, primary: OcrEngine, secondary: OcrEngine) -> None:
        self.primary = primary
        self.secondary = secondary
        self.name = f"{primary.name} → {secondary.name}"

    def recognize_text(self, image) -> List[TextFragment]:
        fragments = self.primary.recognize_text(image)
        if fragments:
            return fragments
        log.debug("%s no reconoció texto; probando %s", self.primary.name, self.secondary.name)
        return self.secondary.recognize_text(image)


def build_engine(name: str, config: Optional[ExtractionConfig] = None) -> OcrEngine:
    config = config or ExtractionConfig()
    name = (name or "lines").lower()
    if name == "lines":
        return TesseractLineEngine(lang=config.ocr_lang, tesseract_config=config.tesseract_config())
    if name == "words":
        return TesseractWordEngine(
            lang=config.ocr_lang,
            tesseract_config=config.tesseract_config(),
            confidence_threshold=config.confidence_threshold,
        )
    raise ValueError(f"Motor OCR desconocido: {name!r}")


def engine_from_config(config: ExtractionConfig) -> OcrEngine:
    engine = build_engine(config.engine, config)
    if config.fallback_engine and config.fallback_engine.lower() != config.engine.lower():
        engine = FallbackEngine(engine, build_engine(config.fallback_engine, config))
    return engine
