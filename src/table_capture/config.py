"""Configuración de la extracción de tablas."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .exporters import TableFormat


@dataclass
class ExtractionConfig:
    """Parámetros de una extracción.

    Attributes:
        output_format: Formato de salida (csv o markdown).
        preserve_multiline_formatting: Si es True, los fragmentos de una celda
            se unen con salto de línea (y en Markdown se emite ``<br/>``); si
            es False, con un espacio.
        max_workers: Hilos para el OCR por celda. 1 = secuencial.
        engine: Motor de OCR por celda ("lines" o "words").
        fallback_engine: Motor alternativo si el principal no reconoce nada.
        ocr_lang: Idioma de Tesseract.
        ocr_psm: Page segmentation mode de Tesseract.
        ocr_oem: OCR engine mode de Tesseract.
        confidence_threshold: Confianza mínima de palabra para el motor "words".
        preprocess: Aplica escalado/grises/contraste/binarizado antes del OCR.
        min_cell_height: Altura mínima (px) a la que se escala una celda al
            preprocesar.
    """

    output_format: TableFormat = TableFormat.CSV
    preserve_multiline_formatting: bool = False
    max_workers: int = 1
    engine: str = "lines"
    fallback_engine: Optional[str] = "words"
    ocr_lang: str = "eng"
    ocr_psm: int = 6
    ocr_oem: int = 3
    confidence_threshold: int = 60
    preprocess: bool = False
    min_cell_height: int = 40

    def __post_init__(self) -> None:
        self.output_format = TableFormat(self.output_format)
        if self.max_workers < 1:
            raise ValueError("max_workers debe ser >= 1")

    def tesseract_config(self) -> str:
        return f"--oem {self.ocr_oem} --psm {self.ocr_psm}"


__all__ = ["ExtractionConfig"]
